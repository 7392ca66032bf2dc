"""DraftEngine — фасад движка драфта.

Композиция ConstraintValidator + OrderAssignment + TurnScheduler + DraftLedger.

Intents: start, pick, skip, tick, pause, resume, set_order, set_mode.
Каждый мутирующий вызов атомарен: либо весь pipeline
(validate → ledger append → participant update → scheduler advance)
завершается, либо ни одна его часть не видна. Отказ возвращается
как типизированная Rejection, состояние не меняется.

pick/skip дополнительно требуют, чтобы participant_id совпадал с текущим
участником планировщика (иначе NOT_YOUR_TURN, независимо от прочей легальности).

SKIP по таймауту: синтезируется tick() при достижении дедлайном 0,
actor — пропускающий участник, timed_out=True.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from src.core.domain.action import ActionKind, DraftAction
from src.core.domain.item import Catalog
from src.core.domain.participant import ParticipantSnapshot, ParticipantState
from src.core.domain.session import DraftMode, SessionSnapshot
from src.draft.config import DraftConfig, load_draft_config
from src.draft.ledger import DraftLedger
from src.draft.locks import IntentLock
from src.draft.order import InvalidOrderError, OrderAssignment
from src.draft.scheduler import TurnScheduler
from src.draft.session import DraftSession
from src.gatekeeper import ConstraintValidator, DraftIntent, Rejection, RejectionReason

logger = logging.getLogger(__name__)


# =============================================================================
# INPUT / RESULT TYPES
# =============================================================================


@dataclass(frozen=True)
class ParticipantSpec:
    """Участник при создании сессии."""

    id: str
    display_name: str


@dataclass(frozen=True)
class TurnDelta:
    """Минимальная дельта состояния после intent."""

    current_participant_id: Optional[str]
    current_round: int
    deadline_seconds_remaining: int
    paused: bool


@dataclass(frozen=True)
class EngineResult:
    """Результат intent."""

    accepted: bool
    rejection: Optional[Rejection]

    # Действие, добавленное в ledger (PICK/SKIP), если было
    action: Optional[DraftAction]

    delta: TurnDelta
    transition_reason: str
    details: str


ParticipantInput = Union[ParticipantSpec, tuple[str, str]]


# =============================================================================
# ENGINE
# =============================================================================


class DraftEngine:
    """Фасад движка драфта. Единолично владеет DraftSession."""

    def __init__(
        self,
        catalog: Catalog,
        participants: Sequence[ParticipantInput],
        config: Optional[DraftConfig] = None,
    ):
        """
        Args:
            catalog: провалидированный каталог (только чтение)
            participants: участники в порядке слотов; базовый порядок
                по умолчанию совпадает с этим порядком
            config: конфигурация (default: DraftConfig())
        """
        self.config = config or DraftConfig()
        specs = [self._to_spec(p) for p in participants]
        if not specs:
            raise ValueError("DraftEngine requires at least one participant")

        self._session = DraftSession(
            catalog=catalog,
            participants=[
                ParticipantState.fresh(spec.id, spec.display_name, self.config.initial_budget)
                for spec in specs
            ],
            base_ranks=OrderAssignment.default_order(len(specs)),
            ledger=DraftLedger(len(specs)),
            turn_duration=self.config.turn_duration,
            mode=self.config.mode,
        )
        self._scheduler = TurnScheduler(self._session)
        self._validator = ConstraintValidator.from_quota_table(self.config.quotas)
        self._lock = IntentLock()

    @classmethod
    def from_document(
        cls,
        catalog: Catalog,
        participants: Sequence[ParticipantInput],
        document: Mapping[str, Any],
    ) -> "DraftEngine":
        """Создание движка из документа конфигурации (см. draft_config.json)."""
        return cls(catalog, participants, load_draft_config(document))

    # -------------------------------------------------------------------------
    # Setup intents (только до старта)
    # -------------------------------------------------------------------------

    def set_mode(self, mode: Union[DraftMode, str]) -> EngineResult:
        """Выбор политики очерёдности (LINEAR/SNAKE).

        Raises:
            ValueError: mode не является DraftMode (ошибка вызывающего кода,
                а не отказ intent; набор режимов закрыт)
        """
        with self._lock.hold(reason="set_mode"):
            if self._session.started:
                return self._reject(
                    RejectionReason.DRAFT_ALREADY_STARTED,
                    "Sequencing mode cannot change after the draft has started",
                )
            self._session.mode = DraftMode(mode)
            logger.debug("Draft mode set to %s", self._session.mode.value)
            return self._accept(None, "mode_set", f"Mode set to {self._session.mode.value}")

    def set_order(self, ranks: Mapping[str, int]) -> EngineResult:
        """Полная замена базового порядка (participant_id → rank 1..N)."""
        with self._lock.hold(reason="set_order"):
            if self._session.started:
                return self._reject(
                    RejectionReason.DRAFT_ALREADY_STARTED,
                    "Base order cannot change after the draft has started",
                )
            try:
                base_ranks = OrderAssignment.normalize_order(self._session.participant_ids, ranks)
            except InvalidOrderError as e:
                return self._reject(RejectionReason.INVALID_ORDER, str(e))

            self._session.base_ranks = base_ranks
            logger.debug("Base order set to %s", dict(zip(self._session.participant_ids, base_ranks)))
            return self._accept(None, "order_set", f"Base order set: {dict(ranks)}")

    def start(self) -> EngineResult:
        with self._lock.hold(reason="start"):
            if self._session.started:
                return self._reject(
                    RejectionReason.DRAFT_ALREADY_STARTED, "Draft has already started"
                )
            transition = self._scheduler.start()
            logger.info(
                "Draft started: mode=%s participants=%d catalog=%d first=%s",
                self._session.mode.value,
                self._session.participant_count,
                len(self._session.catalog),
                self._current_id(),
            )
            return self._accept(None, transition.transition_reason, transition.details)

    # -------------------------------------------------------------------------
    # Turn intents
    # -------------------------------------------------------------------------

    def pick(self, participant_id: str, item_id: str) -> EngineResult:
        with self._lock.hold(reason="pick"):
            return self._act(participant_id, DraftIntent.pick(item_id))

    def skip(self, participant_id: str) -> EngineResult:
        with self._lock.hold(reason="skip"):
            return self._act(participant_id, DraftIntent.skip())

    def tick(self) -> EngineResult:
        """Один тик внешних часов. При истечении дедлайна — автоматический SKIP."""
        with self._lock.hold(reason="tick"):
            transition = self._scheduler.tick()
            if not transition.deadline_expired:
                return self._accept(None, transition.transition_reason, transition.details)

            index = self._session.current_participant_index
            participant = self._session.participants[index]
            logger.warning(
                "Turn deadline expired for %s (round %d): forcing skip",
                participant.id,
                self._session.current_round,
            )
            action = self._apply(index, DraftIntent.skip(), timed_out=True)
            return self._accept(
                action, "deadline_expired_skip", f"{participant.id} timed out; turn skipped"
            )

    def pause(self) -> EngineResult:
        with self._lock.hold(reason="pause"):
            if not self._session.started:
                return self._reject(RejectionReason.NOT_STARTED, "Cannot pause before start")
            transition = self._scheduler.pause()
            return self._accept(None, transition.transition_reason, transition.details)

    def resume(self) -> EngineResult:
        with self._lock.hold(reason="resume"):
            if not self._session.started:
                return self._reject(RejectionReason.NOT_STARTED, "Cannot resume before start")
            transition = self._scheduler.resume()
            return self._accept(None, transition.transition_reason, transition.details)

    # -------------------------------------------------------------------------
    # Read-only projections
    # -------------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        with self._lock.hold(reason="snapshot"):
            return self._session.snapshot()

    def participant(self, participant_id: str) -> ParticipantSnapshot:
        """Проекция одного участника.

        Raises:
            KeyError: неизвестный participant_id
        """
        with self._lock.hold(reason="participant"):
            index = self._session.index_of(participant_id)
            if index is None:
                raise KeyError(participant_id)
            return self._session.participants[index].to_snapshot(self._session.base_ranks[index])

    def ledger_entries(self) -> tuple[DraftAction, ...]:
        return self._session.ledger.entries

    def can_pick(self, participant_id: str, item_id: str) -> Optional[Rejection]:
        """Проверка легальности PICK без изменения состояния (None — легален)."""
        with self._lock.hold(reason="can_pick"):
            _, rejection = self._evaluate(participant_id, DraftIntent.pick(item_id))
            return rejection

    def upcoming_turns(self, count: int) -> list[str]:
        """participant_id следующих `count` ходов, начиная с текущего."""
        with self._lock.hold(reason="upcoming_turns"):
            if not self._session.started:
                return []
            ids = self._session.participant_ids
            return [ids[index] for index in self._scheduler.upcoming(count)]

    def is_complete(self) -> bool:
        with self._lock.hold(reason="is_complete"):
            return self._scheduler.is_complete(self._validator.gate01.roster_cap)

    def replay_participants(self, upto: Optional[int] = None) -> list[ParticipantSnapshot]:
        """Проекции участников, восстановленные свёрткой ledger с нуля."""
        with self._lock.hold(reason="replay"):
            session = self._session
            states = session.ledger.replay(
                session.catalog,
                [(p.id, p.display_name) for p in session.participants],
                self.config.initial_budget,
                upto=upto,
            )
            return [
                states[p.id].to_snapshot(rank)
                for p, rank in zip(session.participants, session.base_ranks)
            ]

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _evaluate(
        self, participant_id: str, intent: DraftIntent
    ) -> tuple[Optional[int], Optional[Rejection]]:
        session = self._session
        index = session.current_participant_index

        if session.started and participant_id != self._current_id():
            return index, Rejection(
                reason=RejectionReason.NOT_YOUR_TURN,
                details=f"It is {self._current_id()}'s turn, not {participant_id}'s",
            )

        outcome = self._validator.can_act(session, index, intent)
        if not outcome.allowed:
            return index, outcome.rejection
        return index, None

    def _act(self, participant_id: str, intent: DraftIntent) -> EngineResult:
        index, rejection = self._evaluate(participant_id, intent)
        if rejection is not None:
            logger.debug(
                "Rejected %s by %s: %s (%s)",
                intent.kind.value,
                participant_id,
                rejection.reason.value,
                rejection.details,
            )
            return self._result(False, rejection, None, rejection.reason.value, rejection.details)

        action = self._apply(index, intent, timed_out=False)
        reason = "pick_accepted" if intent.kind == ActionKind.PICK else "skip_accepted"
        return self._accept(action, reason, f"Action #{action.sequence_number} accepted")

    def _apply(self, index: int, intent: DraftIntent, timed_out: bool) -> DraftAction:
        """Применение уже провалидированного intent (атомарно под локом)."""
        session = self._session
        participant = session.participants[index]
        ledger = session.ledger

        item = session.catalog.get(intent.item_id) if intent.kind == ActionKind.PICK else None
        sequence_number = ledger.next_sequence_number
        action = DraftAction(
            sequence_number=sequence_number,
            round_number=ledger.round_of(sequence_number),
            participant_id=participant.id,
            kind=intent.kind,
            item_id=item.id if item is not None else None,
            timed_out=timed_out,
        )

        ledger.append(action)
        if item is not None:
            participant.acquire(item)
            session.owner_by_item[item.id] = participant.id
        participant.check_invariants(
            lambda category: self.config.quotas.quota_limit(participant.id, category)
        )
        self._scheduler.advance()

        if item is not None:
            logger.info(
                "#%d round %d: %s picked %s (%s) for %s, remaining %s",
                action.sequence_number,
                action.round_number,
                participant.id,
                item.id,
                item.category.value,
                item.price,
                participant.budget_remaining,
            )
        else:
            logger.info(
                "#%d round %d: %s skipped%s",
                action.sequence_number,
                action.round_number,
                participant.id,
                " (timeout)" if timed_out else "",
            )
        return action

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _current_id(self) -> Optional[str]:
        current = self._session.current_participant
        return current.id if current is not None else None

    def _delta(self) -> TurnDelta:
        session = self._session
        return TurnDelta(
            current_participant_id=self._current_id(),
            current_round=session.current_round,
            deadline_seconds_remaining=session.deadline_seconds_remaining,
            paused=session.paused,
        )

    def _accept(self, action: Optional[DraftAction], reason: str, details: str) -> EngineResult:
        return self._result(True, None, action, reason, details)

    def _reject(self, reason: RejectionReason, details: str) -> EngineResult:
        logger.debug("Rejected intent: %s (%s)", reason.value, details)
        rejection = Rejection(reason=reason, details=details)
        return self._result(False, rejection, None, reason.value, details)

    def _result(
        self,
        accepted: bool,
        rejection: Optional[Rejection],
        action: Optional[DraftAction],
        reason: str,
        details: str,
    ) -> EngineResult:
        return EngineResult(
            accepted=accepted,
            rejection=rejection,
            action=action,
            delta=self._delta(),
            transition_reason=reason,
            details=details,
        )

    @staticmethod
    def _to_spec(participant: ParticipantInput) -> ParticipantSpec:
        if isinstance(participant, ParticipantSpec):
            return participant
        participant_id, display_name = participant
        return ParticipantSpec(id=participant_id, display_name=display_name)
