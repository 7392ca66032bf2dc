"""GATE 3: Budget

- Четвёртый gate в цепочке (только для PICK)
- Блокирует PICK, если item.price > budget_remaining
- Отказ несёт shortfall = price - budget_remaining (для отображения)
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from src.core.domain.item import Item
from src.core.domain.money import ZERO_MONEY, to_money
from src.core.domain.participant import ParticipantState
from src.gatekeeper.rejections import Rejection, RejectionReason


@dataclass(frozen=True)
class Gate03Result:
    """Результат GATE 3."""
    
    action_allowed: bool
    block_reason: str
    rejection: Optional[Rejection]
    
    # Диагностика
    price: Decimal
    budget_remaining: Decimal
    shortfall: Decimal
    
    # Детали
    details: str


class Gate03Budget:
    """GATE 3: достаточность бюджета."""
    
    def evaluate(self, participant: ParticipantState, item: Item) -> Gate03Result:
        budget = participant.budget_remaining
        
        if item.price > budget:
            shortfall = to_money(item.price - budget)
            rejection = Rejection(
                reason=RejectionReason.INSUFFICIENT_BUDGET,
                details=(
                    f"{participant.display_name} doesn't have enough budget for {item.name}: "
                    f"price={item.price}, remaining={budget}, shortfall={shortfall}"
                ),
                shortfall=shortfall,
            )
            return Gate03Result(
                action_allowed=False,
                block_reason=rejection.reason.value,
                rejection=rejection,
                price=item.price,
                budget_remaining=budget,
                shortfall=shortfall,
                details=rejection.details,
            )
        
        return Gate03Result(
            action_allowed=True,
            block_reason="",
            rejection=None,
            price=item.price,
            budget_remaining=budget,
            shortfall=ZERO_MONEY,
            details=f"PASS: price={item.price} <= remaining={budget}",
        )
