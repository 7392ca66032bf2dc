"""Rejections — типизированные причины отказа intent.

Все отказы нефатальны и оставляют состояние без изменений.
Вызывающая сторона показывает причину пользователю как есть; ядро никогда
не превращает нелегальный intent в легальный.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class RejectionReason(str, Enum):
    """Причина отказа."""

    NOT_STARTED = "NOT_STARTED"
    DRAFT_ALREADY_STARTED = "DRAFT_ALREADY_STARTED"
    INVALID_ORDER = "INVALID_ORDER"
    ROSTER_FULL = "ROSTER_FULL"
    ITEM_UNAVAILABLE = "ITEM_UNAVAILABLE"
    INSUFFICIENT_BUDGET = "INSUFFICIENT_BUDGET"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"


@dataclass(frozen=True)
class Rejection:
    """Отказ с деталями для отображения.

    shortfall заполняется только для INSUFFICIENT_BUDGET,
    limit — для QUOTA_EXCEEDED и ROSTER_FULL.
    """

    reason: RejectionReason
    details: str
    shortfall: Optional[Decimal] = None
    limit: Optional[int] = None
