"""Draft — движок пошагового драфта (in-memory state machine).

- OrderAssignment: очерёдность LINEAR / SNAKE поверх базового порядка
- TurnScheduler: текущий участник, раунд, дедлайн хода, пауза
- DraftLedger: append-only журнал PICK/SKIP, replay
- DraftEngine: фасад, атомарно применяющий intents
"""

from .config import DraftConfig, ParticipantLimits, QuotaTable, load_draft_config
from .order import InvalidOrderError, OrderAssignment
from .ledger import DraftLedger, LedgerIntegrityError
from .session import DraftSession
from .scheduler import SchedulerTransition, TurnScheduler
from .engine import DraftEngine, EngineResult, ParticipantSpec, TurnDelta

__all__ = [
    "DraftConfig",
    "ParticipantLimits",
    "QuotaTable",
    "load_draft_config",
    "InvalidOrderError",
    "OrderAssignment",
    "DraftLedger",
    "LedgerIntegrityError",
    "DraftSession",
    "SchedulerTransition",
    "TurnScheduler",
    "DraftEngine",
    "EngineResult",
    "ParticipantSpec",
    "TurnDelta",
]
