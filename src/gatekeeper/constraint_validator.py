"""ConstraintValidator — цепочка gates для допуска PICK/SKIP.

Порядок проверок фиксирован, первый отказ выигрывает (short-circuit):
- GATE 0: драфт запущен                    → NOT_STARTED
- GATE 1: roster < roster_cap              → ROSTER_FULL          (PICK)
- GATE 2: item в каталоге и свободен       → ITEM_UNAVAILABLE     (PICK)
- GATE 3: price <= budget_remaining        → INSUFFICIENT_BUDGET  (PICK)
- GATE 4: quota_used[c] < quota_limit(p,c) → QUOTA_EXCEEDED       (PICK)

SKIP проходит только GATE 0: после старта пропуск хода легален всегда.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from src.core.domain.action import ActionKind
from src.gatekeeper.gates import (
    Gate00DraftStarted,
    Gate01RosterCap,
    Gate02ItemAvailability,
    Gate03Budget,
    Gate04CategoryQuota,
)
from src.gatekeeper.gates.gate_01_roster_cap import RosterCapLookup
from src.gatekeeper.gates.gate_04_category_quota import QuotaLimitLookup
from src.gatekeeper.intent import DraftIntent
from src.gatekeeper.rejections import Rejection

if TYPE_CHECKING:
    from src.draft.config import QuotaTable
    from src.draft.session import DraftSession


@dataclass(frozen=True)
class ValidationOutcome:
    """Итог прохождения цепочки gates."""
    
    allowed: bool
    rejection: Optional[Rejection]
    
    # Результаты пройденных gates (в порядке выполнения, включая отказавший)
    gate_results: tuple[Any, ...]
    
    details: str


class ConstraintValidator:
    """Цепочка GATE 0-4."""
    
    def __init__(self, quota_limit: QuotaLimitLookup, roster_cap: RosterCapLookup):
        """
        Args:
            quota_limit: lookup (participant, category) → лимит категории
            roster_cap: lookup participant → максимальный размер roster
        """
        self.gate00 = Gate00DraftStarted()
        self.gate01 = Gate01RosterCap(roster_cap)
        self.gate02 = Gate02ItemAvailability()
        self.gate03 = Gate03Budget()
        self.gate04 = Gate04CategoryQuota(quota_limit)
    
    @classmethod
    def from_quota_table(cls, table: "QuotaTable") -> "ConstraintValidator":
        """Validator поверх QuotaTable (лимиты по participant_id)."""
        return cls(
            quota_limit=lambda participant, category: table.quota_limit(participant.id, category),
            roster_cap=lambda participant: table.roster_cap(participant.id),
        )
    
    def can_act(
        self,
        session: "DraftSession",
        participant_index: int,
        intent: DraftIntent,
    ) -> ValidationOutcome:
        """Проверка легальности intent для участника.
        
        Args:
            session: текущая сессия (не изменяется)
            participant_index: slot участника
            intent: PICK или SKIP
        
        Returns:
            ValidationOutcome; при отказе rejection указывает первую причину
        """
        results: list[Any] = []
        
        # 1. Драфт запущен
        gate00 = self.gate00.evaluate(session)
        results.append(gate00)
        if not gate00.action_allowed:
            return self._blocked(results, gate00.rejection)
        
        # SKIP: дальнейшие проверки не применяются
        if intent.kind == ActionKind.SKIP:
            return self._passed(results, "PASS: skip is always legal once started")
        
        participant = session.participants[participant_index]
        
        # 2. Roster cap
        gate01 = self.gate01.evaluate(participant)
        results.append(gate01)
        if not gate01.action_allowed:
            return self._blocked(results, gate01.rejection)
        
        # 3. Item доступен
        gate02 = self.gate02.evaluate(session, intent.item_id)
        results.append(gate02)
        if not gate02.action_allowed:
            return self._blocked(results, gate02.rejection)
        item = gate02.item
        
        # 4. Бюджет
        gate03 = self.gate03.evaluate(participant, item)
        results.append(gate03)
        if not gate03.action_allowed:
            return self._blocked(results, gate03.rejection)
        
        # 5. Квота категории
        gate04 = self.gate04.evaluate(participant, item)
        results.append(gate04)
        if not gate04.action_allowed:
            return self._blocked(results, gate04.rejection)
        
        return self._passed(results, f"PASS: {participant.id} may pick {item.id}")
    
    def _blocked(self, results: list[Any], rejection: Rejection) -> ValidationOutcome:
        return ValidationOutcome(
            allowed=False,
            rejection=rejection,
            gate_results=tuple(results),
            details=f"BLOCKED at GATE {len(results) - 1}: {rejection.reason.value}",
        )
    
    def _passed(self, results: list[Any], details: str) -> ValidationOutcome:
        return ValidationOutcome(
            allowed=True,
            rejection=None,
            gate_results=tuple(results),
            details=details,
        )
