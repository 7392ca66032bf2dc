"""GATE 4: Category Quota

- Пятый (последний) gate в цепочке (только для PICK)
- Блокирует PICK, если quota_used[category] >= quota_limit(participant, category)
- Отказ несёт limit (для отображения)

Лимиты берутся из внедрённого lookup; gate не знает, общие они или персональные.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from src.core.domain.item import Category, Item
from src.core.domain.participant import ParticipantState
from src.gatekeeper.rejections import Rejection, RejectionReason


QuotaLimitLookup = Callable[[ParticipantState, Category], int]


@dataclass(frozen=True)
class Gate04Result:
    """Результат GATE 4."""
    
    action_allowed: bool
    block_reason: str
    rejection: Optional[Rejection]
    
    # Диагностика
    category: Category
    quota_used: int
    quota_limit: int
    
    # Детали
    details: str


class Gate04CategoryQuota:
    """GATE 4: квота категории."""
    
    def __init__(self, quota_limit: QuotaLimitLookup):
        """
        Args:
            quota_limit: lookup (participant, category) → максимум items категории
        """
        self.quota_limit = quota_limit
    
    def evaluate(self, participant: ParticipantState, item: Item) -> Gate04Result:
        category = item.category
        used = participant.category_count(category)
        limit = self.quota_limit(participant, category)
        
        if used >= limit:
            rejection = Rejection(
                reason=RejectionReason.QUOTA_EXCEEDED,
                details=(
                    f"{participant.display_name} already holds {used} {category.value} "
                    f"(limit {limit})"
                ),
                limit=limit,
            )
            return Gate04Result(
                action_allowed=False,
                block_reason=rejection.reason.value,
                rejection=rejection,
                category=category,
                quota_used=used,
                quota_limit=limit,
                details=rejection.details,
            )
        
        return Gate04Result(
            action_allowed=True,
            block_reason="",
            rejection=None,
            category=category,
            quota_used=used,
            quota_limit=limit,
            details=f"PASS: {category.value} {used}/{limit}",
        )
