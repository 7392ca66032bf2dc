"""GATE 1: Roster Cap

- Второй gate в цепочке (только для PICK)
- Блокирует PICK, если roster участника уже достиг roster_cap

SKIP этот gate не проходит: полный roster может пропускать ход,
это не ошибка (драфт для такого участника фактически завершён).
"""

from dataclasses import dataclass
from typing import Callable, Optional

from src.core.domain.participant import ParticipantState
from src.gatekeeper.rejections import Rejection, RejectionReason


RosterCapLookup = Callable[[ParticipantState], int]


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""
    
    action_allowed: bool
    block_reason: str
    rejection: Optional[Rejection]
    
    # Диагностика
    roster_size: int
    roster_cap: int
    
    # Детали
    details: str


class Gate01RosterCap:
    """GATE 1: лимит размера roster."""
    
    def __init__(self, roster_cap: RosterCapLookup):
        """
        Args:
            roster_cap: lookup participant → максимальный размер roster
        """
        self.roster_cap = roster_cap
    
    def evaluate(self, participant: ParticipantState) -> Gate01Result:
        cap = self.roster_cap(participant)
        size = len(participant.roster)
        
        if size >= cap:
            rejection = Rejection(
                reason=RejectionReason.ROSTER_FULL,
                details=f"{participant.display_name} already has the maximum of {cap} items",
                limit=cap,
            )
            return Gate01Result(
                action_allowed=False,
                block_reason=rejection.reason.value,
                rejection=rejection,
                roster_size=size,
                roster_cap=cap,
                details=rejection.details,
            )
        
        return Gate01Result(
            action_allowed=True,
            block_reason="",
            rejection=None,
            roster_size=size,
            roster_cap=cap,
            details=f"PASS: roster {size}/{cap}",
        )
