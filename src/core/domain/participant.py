"""
Participant — состояние участника драфта

ParticipantState — мутабельный агрегат, которым владеет только DraftSession.
Наружу отдаётся исключительно ParticipantSnapshot (immutable Pydantic проекция).

ИНВАРИАНТЫ:
1. budget_remaining + spend == initial_budget
2. len(roster) == sum(quota_used.values())
3. budget_remaining монотонно не возрастает, spend монотонно не убывает
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Optional

from pydantic import BaseModel, Field

from .item import Category, Item
from .money import ZERO_MONEY, to_money, validate_non_negative_money


# =============================================================================
# EXCEPTIONS
# =============================================================================


class InvariantViolation(Exception):
    """
    Нарушение инварианта состояния участника.

    Это дефект программы, а не ожидаемый отказ: корректный pipeline
    (validator → ledger → participant) никогда не приводит к этой ошибке.
    """
    pass


# =============================================================================
# SNAPSHOT
# =============================================================================


class ParticipantSnapshot(BaseModel):
    """Read-only проекция участника для presentation слоя."""

    id: str = Field(..., min_length=1, description="Идентификатор участника")
    display_name: str = Field(..., description="Отображаемое имя")
    base_rank: int = Field(..., ge=1, description="Ранг в базовом порядке (1..N)")
    initial_budget: Decimal = Field(..., ge=0, description="Стартовый бюджет")
    budget_remaining: Decimal = Field(..., ge=0, description="Остаток бюджета")
    spend: Decimal = Field(..., ge=0, description="Потрачено")
    roster_item_ids: list[str] = Field(default_factory=list, description="Roster в порядке приобретения")
    quota_used: dict[Category, int] = Field(default_factory=dict, description="Использованная квота по категориям")

    model_config = {"frozen": True}


# =============================================================================
# MUTABLE STATE
# =============================================================================


@dataclass
class ParticipantState:
    """Мутабельное состояние участника (только внутри DraftSession)."""

    id: str
    display_name: str
    initial_budget: Decimal
    budget_remaining: Decimal = field(default=ZERO_MONEY)
    spend: Decimal = field(default=ZERO_MONEY)
    roster: list[Item] = field(default_factory=list)
    quota_used: dict[Category, int] = field(default_factory=dict)

    @classmethod
    def fresh(cls, participant_id: str, display_name: str, initial_budget: Decimal) -> "ParticipantState":
        """Участник в начальном состоянии (пустой roster, полный бюджет)."""
        budget = validate_non_negative_money(initial_budget, "initial_budget")
        return cls(
            id=participant_id,
            display_name=display_name,
            initial_budget=budget,
            budget_remaining=budget,
            spend=ZERO_MONEY,
            roster=[],
            quota_used={category: 0 for category in Category},
        )

    def category_count(self, category: Category) -> int:
        return self.quota_used.get(category, 0)

    def acquire(self, item: Item) -> None:
        """
        Добавление item в roster со списанием цены.

        Легальность (бюджет, квота, доступность) проверяет ConstraintValidator
        ДО вызова. Здесь проверяется только то, что нарушило бы инварианты.

        Raises:
            InvariantViolation: Если item дороже остатка бюджета
        """
        if item.price > self.budget_remaining:
            raise InvariantViolation(
                f"Participant {self.id!r} cannot afford {item.id!r}: "
                f"price={item.price} > budget_remaining={self.budget_remaining}"
            )
        self.budget_remaining = to_money(self.budget_remaining - item.price)
        self.spend = to_money(self.spend + item.price)
        self.roster.append(item)
        self.quota_used[item.category] = self.category_count(item.category) + 1

    def check_invariants(self, quota_limit: Optional[Callable[[Category], int]] = None) -> None:
        """
        Проверка инвариантов участника.

        Args:
            quota_limit: lookup category → лимит; если задан, проверяется
                quota_used[c] <= quota_limit(c) для каждой категории

        Raises:
            InvariantViolation: При любом нарушении
        """
        if self.budget_remaining + self.spend != self.initial_budget:
            raise InvariantViolation(
                f"Participant {self.id!r}: budget_remaining={self.budget_remaining} + "
                f"spend={self.spend} != initial_budget={self.initial_budget}"
            )
        if len(self.roster) != sum(self.quota_used.values()):
            raise InvariantViolation(
                f"Participant {self.id!r}: roster size {len(self.roster)} != "
                f"quota_used total {sum(self.quota_used.values())}"
            )
        roster_spend = sum((item.price for item in self.roster), ZERO_MONEY)
        if roster_spend != self.spend:
            raise InvariantViolation(
                f"Participant {self.id!r}: roster prices sum {roster_spend} != spend {self.spend}"
            )
        if quota_limit is not None:
            for category, used in self.quota_used.items():
                limit = quota_limit(category)
                if used > limit:
                    raise InvariantViolation(
                        f"Participant {self.id!r}: quota_used[{category.value}]={used} > limit {limit}"
                    )

    def to_snapshot(self, base_rank: int) -> ParticipantSnapshot:
        return ParticipantSnapshot(
            id=self.id,
            display_name=self.display_name,
            base_rank=base_rank,
            initial_budget=self.initial_budget,
            budget_remaining=self.budget_remaining,
            spend=self.spend,
            roster_item_ids=[item.id for item in self.roster],
            quota_used=dict(self.quota_used),
        )
