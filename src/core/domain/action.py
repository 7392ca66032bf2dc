"""
DraftAction — Модель записи ledger драфта

Immutable Pydantic модель одного принятого действия (PICK или SKIP).
Создаётся ровно один раз при принятии intent, никогда не редактируется
и не удаляется. Последовательность DraftAction — audit trail и единственный
источник для восстановления состояния участников (replay).
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class ActionKind(str, Enum):
    """Тип действия"""

    PICK = "PICK"  # Участник забрал item
    SKIP = "SKIP"  # Участник пропустил ход (вручную или по таймауту)


# =============================================================================
# DRAFT ACTION MODEL
# =============================================================================


class DraftAction(BaseModel):
    """
    Запись ledger.

    item_id присутствует тогда и только тогда, когда kind == PICK.
    timed_out=True только для SKIP, синтезированного по истечении дедлайна;
    actor такого SKIP — участник, чей ход был пропущен.
    """

    sequence_number: int = Field(..., ge=1, description="Порядковый номер (1-based, без пропусков)")
    round_number: int = Field(..., ge=1, description="Номер раунда (1-based, производный)")
    participant_id: str = Field(..., min_length=1, description="Участник, совершивший действие")
    kind: ActionKind = Field(..., description="PICK или SKIP")
    item_id: str | None = Field(
        None, min_length=1, validate_default=True, description="Item (только для PICK)"
    )
    timed_out: bool = Field(default=False, description="SKIP по истечении дедлайна")

    model_config = {"frozen": True}  # Immutable

    @field_validator("item_id")
    @classmethod
    def validate_item_presence(cls, v: str | None, info) -> str | None:
        """PICK требует item_id, SKIP запрещает его."""
        kind = info.data.get("kind")
        if kind == ActionKind.PICK and v is None:
            raise ValueError("PICK action requires item_id")
        if kind == ActionKind.SKIP and v is not None:
            raise ValueError(f"SKIP action must not carry item_id, got {v!r}")
        return v

    @field_validator("timed_out")
    @classmethod
    def validate_timeout_only_for_skip(cls, v: bool, info) -> bool:
        """Таймаут может породить только SKIP."""
        if v and info.data.get("kind") == ActionKind.PICK:
            raise ValueError("timed_out is only valid for SKIP actions")
        return v
