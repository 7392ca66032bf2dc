"""
Domain models and value objects.

Contains fundamental domain entities like Item, Catalog, DraftAction, ParticipantState.
"""

from src.core.domain.action import ActionKind, DraftAction
from src.core.domain.item import Catalog, Category, Grade, Item
from src.core.domain.money import (
    MONEY_QUANTUM,
    ZERO_MONEY,
    sum_money,
    to_money,
    validate_non_negative_money,
)
from src.core.domain.participant import (
    InvariantViolation,
    ParticipantSnapshot,
    ParticipantState,
)
from src.core.domain.session import DraftMode, SchedulerState, SessionSnapshot

__all__ = [
    # Money module
    "MONEY_QUANTUM",
    "ZERO_MONEY",
    "to_money",
    "sum_money",
    "validate_non_negative_money",
    # Item / Catalog
    "Item",
    "Catalog",
    "Category",
    "Grade",
    # Ledger entry
    "DraftAction",
    "ActionKind",
    # Participant
    "ParticipantState",
    "ParticipantSnapshot",
    "InvariantViolation",
    # Session
    "DraftMode",
    "SchedulerState",
    "SessionSnapshot",
]
