"""TurnScheduler — управление ходом, раундом, дедлайном и паузой.

States:
- NOT_STARTED → RUNNING (start)
- RUNNING ⇄ PAUSED (pause/resume)
- COMPLETE не детектируется здесь: завершение выводится снаружи
  (все roster заполнены или каталог исчерпан), см. is_complete()

Переходы:
- start(): только из NOT_STARTED; round=1, первый участник через OrderAssignment,
  дедлайн = turn_duration, paused=False
- tick(): no-op если пауза или драфт не запущен; иначе дедлайн -1;
  при достижении 0 → deadline_expired=True (SKIP синтезирует DraftEngine)
- pause()/resume(): пауза не сбрасывает оставшийся дедлайн
- advance(): после каждого принятого PICK/SKIP — сброс дедлайна и пересчёт
  участника и раунда по обновлённому числу действий
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from src.core.domain.participant import ParticipantState
from src.core.domain.session import DraftMode, SchedulerState
from src.draft.order import OrderAssignment
from src.draft.session import DraftSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulerTransition:
    """Результат операции планировщика."""

    new_state: SchedulerState
    previous_state: SchedulerState
    transition_occurred: bool
    transition_reason: str

    # Текущий ход после операции
    current_participant_index: Optional[int]
    current_round: int
    deadline_seconds_remaining: int

    # True только когда tick() довёл дедлайн до 0
    deadline_expired: bool

    details: str


class TurnScheduler:
    """Планировщик ходов поверх DraftSession (мутирует только поля планировщика)."""

    def __init__(self, session: DraftSession):
        self.session = session

    @property
    def state(self) -> SchedulerState:
        return self.session.scheduler_state

    def start(self) -> SchedulerTransition:
        """Старт драфта.

        Raises:
            RuntimeError: если драфт уже запущен (DraftEngine проверяет это раньше)
        """
        session = self.session
        previous = self.state
        if session.started:
            raise RuntimeError("TurnScheduler.start() called on a started draft")

        session.started = True
        session.paused = False
        self._resolve_turn()

        if session.mode == DraftMode.SNAKE:
            # Priming: первый ход SNAKE: rank 1, раунд 1, без записи в ledger
            logger.debug(
                "Snake priming transition resolved to slot %s (round %s)",
                session.current_participant_index,
                session.current_round,
            )

        return self._transition(
            previous,
            occurred=True,
            reason="draft_started",
            details=f"Draft started in {session.mode.value} mode",
        )

    def tick(self) -> SchedulerTransition:
        """Один тик внешних часов."""
        session = self.session
        previous = self.state

        if not session.started:
            return self._transition(
                previous, occurred=False, reason="tick_ignored_not_started",
                details="Tick ignored: draft not started",
            )
        if session.paused:
            return self._transition(
                previous, occurred=False, reason="tick_ignored_paused",
                details=f"Tick ignored: paused at {session.deadline_seconds_remaining}",
            )

        session.deadline_seconds_remaining = max(session.deadline_seconds_remaining - 1, 0)
        expired = session.deadline_seconds_remaining == 0

        return self._transition(
            previous,
            occurred=expired,
            reason="deadline_expired" if expired else "tick",
            details=f"Deadline remaining: {session.deadline_seconds_remaining}",
            deadline_expired=expired,
        )

    def pause(self) -> SchedulerTransition:
        session = self.session
        previous = self.state
        if session.paused:
            return self._transition(
                previous, occurred=False, reason="already_paused", details="Already paused",
            )
        session.paused = True
        return self._transition(
            previous, occurred=True, reason="paused",
            details=f"Paused with {session.deadline_seconds_remaining} remaining",
        )

    def resume(self) -> SchedulerTransition:
        session = self.session
        previous = self.state
        if not session.paused:
            return self._transition(
                previous, occurred=False, reason="not_paused", details="Not paused",
            )
        session.paused = False
        return self._transition(
            previous, occurred=True, reason="resumed",
            details=f"Resumed with {session.deadline_seconds_remaining} remaining",
        )

    def advance(self) -> SchedulerTransition:
        """Переход хода после принятого действия (ledger уже обновлён)."""
        previous = self.state
        self._resolve_turn()
        return self._transition(
            previous,
            occurred=True,
            reason="turn_advanced",
            details=(
                f"Action #{self.session.action_count} accepted, next slot "
                f"{self.session.current_participant_index}, round {self.session.current_round}"
            ),
        )

    def upcoming(self, count: int) -> list[int]:
        """Slot indices следующих `count` ходов, начиная с текущего."""
        session = self.session
        return OrderAssignment.preview(
            session.base_ranks, session.mode, session.action_count, count
        )

    def is_complete(self, roster_cap: Callable[[ParticipantState], int]) -> bool:
        """Внешний признак завершения: все roster заполнены или каталог исчерпан."""
        session = self.session
        if not session.started:
            return False
        if all(len(p.roster) >= roster_cap(p) for p in session.participants):
            return True
        return all(session.is_acquired(item.id) for item in session.catalog)

    def _resolve_turn(self) -> None:
        session = self.session
        count = session.action_count
        session.current_participant_index = OrderAssignment.next_participant(
            session.base_ranks, count, session.mode
        )
        session.current_round = OrderAssignment.round_for_action(count, session.participant_count)
        session.deadline_seconds_remaining = session.turn_duration

    def _transition(
        self,
        previous_state: SchedulerState,
        occurred: bool,
        reason: str,
        details: str,
        deadline_expired: bool = False,
    ) -> SchedulerTransition:
        session = self.session
        return SchedulerTransition(
            new_state=self.state,
            previous_state=previous_state,
            transition_occurred=occurred,
            transition_reason=reason,
            current_participant_index=session.current_participant_index,
            current_round=session.current_round,
            deadline_seconds_remaining=session.deadline_seconds_remaining,
            deadline_expired=deadline_expired,
            details=details,
        )
