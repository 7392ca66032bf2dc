"""
Contract Validation Module

Модуль для валидации JSON контрактов драфта (ledger, снапшот, конфигурация).
"""

from .validators import (
    ContractValidator,
    DraftActionValidator,
    DraftConfigValidator,
    SchemaLoader,
    SessionSnapshotValidator,
    validate_draft_action,
    validate_draft_config,
    validate_session_snapshot,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "DraftActionValidator",
    "SessionSnapshotValidator",
    "DraftConfigValidator",
    # Functions
    "validate_draft_action",
    "validate_session_snapshot",
    "validate_draft_config",
]
