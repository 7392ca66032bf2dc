"""Gatekeeper — система гейтов для допуска действий драфта.

- 5 gates с фиксированным порядком, первый отказ выигрывает
- SKIP проверяется только GATE 0
- Отказы типизированы (RejectionReason) и не меняют состояние
"""

from .constraint_validator import ConstraintValidator, ValidationOutcome
from .intent import DraftIntent
from .rejections import Rejection, RejectionReason

__all__ = [
    "ConstraintValidator",
    "ValidationOutcome",
    "DraftIntent",
    "Rejection",
    "RejectionReason",
]
