"""GATE 0: Draft Started

- Первый gate в цепочке (обязательный, для PICK и SKIP)
- Блокирует любое действие до start()

Интеграция:
- Читает только флаг started сессии
- Результат GATE 0 PASS — единственное условие легальности SKIP
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from src.gatekeeper.rejections import Rejection, RejectionReason

if TYPE_CHECKING:
    from src.draft.session import DraftSession


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""
    
    action_allowed: bool
    block_reason: str
    rejection: Optional[Rejection]
    
    # Входные параметры для диагностики
    started: bool
    
    # Детали
    details: str


class Gate00DraftStarted:
    """GATE 0: проверка, что драфт запущен."""
    
    def evaluate(self, session: "DraftSession") -> Gate00Result:
        """Оценка GATE 0.
        
        Args:
            session: текущая сессия
        
        Returns:
            Gate00Result с решением о допуске
        """
        if not session.started:
            rejection = Rejection(
                reason=RejectionReason.NOT_STARTED,
                details="Draft has not started yet",
            )
            return Gate00Result(
                action_allowed=False,
                block_reason=rejection.reason.value,
                rejection=rejection,
                started=False,
                details=rejection.details,
            )
        
        return Gate00Result(
            action_allowed=True,
            block_reason="",
            rejection=None,
            started=True,
            details=f"PASS: draft running, round={session.current_round}",
        )
