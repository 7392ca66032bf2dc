"""
SessionSnapshot — Модель снапшота сессии драфта

Immutable Pydantic модель: всё, что presentation слой может наблюдать
(текущий участник, раунд, дедлайн, пауза, участники, полный ledger).
Полная совместимость с JSON Schema (contracts/schema/session_snapshot.json).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .action import DraftAction
from .participant import ParticipantSnapshot


# =============================================================================
# ENUMS
# =============================================================================


class DraftMode(str, Enum):
    """
    Политика очерёдности.

    LINEAR: 1..N каждый раунд.
    SNAKE: нечётные раунды 1..N, чётные N..1.
    """

    LINEAR = "LINEAR"
    SNAKE = "SNAKE"


class SchedulerState(str, Enum):
    """
    Состояние TurnScheduler.

    COMPLETE здесь отсутствует намеренно: завершение драфта определяется
    снаружи (все roster заполнены или каталог исчерпан).
    """

    NOT_STARTED = "NOT_STARTED"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"


# =============================================================================
# SESSION SNAPSHOT MODEL
# =============================================================================


class SessionSnapshot(BaseModel):
    """
    Снапшот сессии драфта.

    Immutable модель (frozen=True). Содержит:
    - Состояние планировщика (mode, state, current participant, round, deadline)
    - Базовый порядок (participant_id → rank)
    - Проекции участников
    - Полный ledger
    """

    mode: DraftMode = Field(..., description="Политика очерёдности")
    state: SchedulerState = Field(..., description="Состояние планировщика")
    started: bool = Field(..., description="Драфт запущен")
    paused: bool = Field(..., description="Таймер на паузе")
    current_participant_id: str | None = Field(
        None, description="Участник, чей сейчас ход (None до старта)"
    )
    current_round: int = Field(..., ge=0, description="Текущий раунд (0 до старта)")
    deadline_seconds_remaining: int = Field(..., ge=0, description="Остаток времени хода")
    turn_duration: int = Field(..., ge=1, description="Полная длительность хода")
    base_order: dict[str, int] = Field(..., description="participant_id → rank (1..N)")
    participants: list[ParticipantSnapshot] = Field(..., description="Участники в порядке слотов")
    ledger: list[DraftAction] = Field(default_factory=list, description="Принятые действия")

    model_config = {"frozen": True}

    @property
    def action_count(self) -> int:
        return len(self.ledger)

    def to_contract(self) -> dict[str, Any]:
        """JSON-совместимый dict для валидации по session_snapshot.json."""
        return self.model_dump(mode="json")
