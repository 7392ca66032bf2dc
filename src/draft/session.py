"""DraftSession — aggregate root сессии драфта (in-memory).

Единолично владеет состоянием участников и ledger. Item объекты разделяются
по ссылке между Catalog и roster участников.

Наружу отдаётся только SessionSnapshot (immutable проекция); ссылки на живое
мутабельное состояние за пределы DraftEngine не выходят.
"""

from dataclasses import dataclass, field
from typing import Optional

from src.core.domain.item import Catalog
from src.core.domain.participant import ParticipantState
from src.core.domain.session import DraftMode, SchedulerState, SessionSnapshot
from src.draft.ledger import DraftLedger


@dataclass
class DraftSession:
    catalog: Catalog
    participants: list[ParticipantState]
    base_ranks: tuple[int, ...]
    ledger: DraftLedger
    turn_duration: int
    mode: DraftMode = DraftMode.LINEAR
    started: bool = False
    paused: bool = False
    current_participant_index: Optional[int] = None
    current_round: int = 0
    deadline_seconds_remaining: int = 0
    # item_id → participant_id
    owner_by_item: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.participants:
            raise ValueError("DraftSession requires at least one participant")
        ids = [p.id for p in self.participants]
        for participant_id in ids:
            if not isinstance(participant_id, str) or not participant_id:
                raise ValueError(f"Participant id must be a non-empty string, got {participant_id!r}")
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate participant ids: {ids}")
        if len(self.base_ranks) != len(self.participants):
            raise ValueError("base_ranks must have one rank per participant")

    @property
    def participant_ids(self) -> list[str]:
        return [p.id for p in self.participants]

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def action_count(self) -> int:
        return len(self.ledger)

    @property
    def scheduler_state(self) -> SchedulerState:
        if not self.started:
            return SchedulerState.NOT_STARTED
        if self.paused:
            return SchedulerState.PAUSED
        return SchedulerState.RUNNING

    @property
    def current_participant(self) -> Optional[ParticipantState]:
        if self.current_participant_index is None:
            return None
        return self.participants[self.current_participant_index]

    def index_of(self, participant_id: str) -> Optional[int]:
        for index, participant in enumerate(self.participants):
            if participant.id == participant_id:
                return index
        return None

    def is_acquired(self, item_id: str) -> bool:
        return item_id in self.owner_by_item

    def snapshot(self) -> SessionSnapshot:
        current = self.current_participant
        return SessionSnapshot(
            mode=self.mode,
            state=self.scheduler_state,
            started=self.started,
            paused=self.paused,
            current_participant_id=current.id if current is not None else None,
            current_round=self.current_round,
            deadline_seconds_remaining=self.deadline_seconds_remaining,
            turn_duration=self.turn_duration,
            base_order={p.id: rank for p, rank in zip(self.participants, self.base_ranks)},
            participants=[
                p.to_snapshot(rank) for p, rank in zip(self.participants, self.base_ranks)
            ],
            ledger=list(self.ledger.entries),
        )
