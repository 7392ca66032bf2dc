"""DraftLedger — append-only журнал принятых действий.

Ledger — единственный источник истины о том, что произошло:
- append(action) → sequence_number (1-based, строго возрастающий, без пропусков)
- round_of(sequence_number) = (sequence_number - 1) // N + 1
- roster/spend участника вычисляются свёрткой ledger
- replay() восстанавливает состояние участников с нуля (основа для внешних
  persistence и undo; undo — административная операция вне ядра)

API удаления или изменения записей НЕТ.
"""

from decimal import Decimal
from typing import Any, Iterator, Optional, Sequence

from src.core.contracts import DraftActionValidator
from src.core.domain.action import ActionKind, DraftAction
from src.core.domain.item import Catalog, Item
from src.core.domain.money import ZERO_MONEY, to_money
from src.core.domain.participant import ParticipantState

_ACTION_VALIDATOR = DraftActionValidator()


# =============================================================================
# EXCEPTIONS
# =============================================================================


class LedgerIntegrityError(Exception):
    """Нарушение целостности ledger (пропуск номера, повторный PICK item и т.п.).

    Дефект программы, а не ожидаемый отказ.
    """
    pass


# =============================================================================
# LEDGER
# =============================================================================


class DraftLedger:
    """Append-only журнал DraftAction."""

    def __init__(self, participant_count: int):
        if participant_count < 1:
            raise ValueError(f"participant_count must be >= 1, got {participant_count}")
        self._participant_count = participant_count
        self._entries: list[DraftAction] = []
        self._picked_item_ids: set[str] = set()

    @property
    def participant_count(self) -> int:
        return self._participant_count

    @property
    def entries(self) -> tuple[DraftAction, ...]:
        return tuple(self._entries)

    @property
    def next_sequence_number(self) -> int:
        return len(self._entries) + 1

    def round_of(self, sequence_number: int) -> int:
        """Раунд действия с данным sequence_number (1-based)."""
        if sequence_number < 1:
            raise ValueError(f"sequence_number must be >= 1, got {sequence_number}")
        return (sequence_number - 1) // self._participant_count + 1

    def append(self, action: DraftAction) -> int:
        """Добавление принятого действия.

        Returns:
            sequence_number добавленной записи

        Raises:
            LedgerIntegrityError: пропуск/повтор номера, неверный раунд,
                повторный PICK уже выбранного item
        """
        expected = self.next_sequence_number
        if action.sequence_number != expected:
            raise LedgerIntegrityError(
                f"Non-contiguous sequence_number: expected {expected}, got {action.sequence_number}"
            )

        expected_round = self.round_of(action.sequence_number)
        if action.round_number != expected_round:
            raise LedgerIntegrityError(
                f"round_number mismatch for #{action.sequence_number}: "
                f"expected {expected_round}, got {action.round_number}"
            )

        if action.kind == ActionKind.PICK:
            if action.item_id in self._picked_item_ids:
                raise LedgerIntegrityError(
                    f"Item {action.item_id!r} already picked earlier in the ledger"
                )
            self._picked_item_ids.add(action.item_id)

        self._entries.append(action)
        return action.sequence_number

    # -------------------------------------------------------------------------
    # Derived views (fold)
    # -------------------------------------------------------------------------

    def actions_of(self, participant_id: str) -> list[DraftAction]:
        return [a for a in self._entries if a.participant_id == participant_id]

    def is_picked(self, item_id: str) -> bool:
        return item_id in self._picked_item_ids

    def roster_of(self, participant_id: str, catalog: Catalog) -> list[Item]:
        """Roster участника в порядке приобретения (свёртка ledger)."""
        roster = []
        for action in self.actions_of(participant_id):
            if action.kind == ActionKind.PICK:
                roster.append(self._resolve_item(action, catalog))
        return roster

    def total_spend_of(self, participant_id: str, catalog: Catalog) -> Decimal:
        total = ZERO_MONEY
        for item in self.roster_of(participant_id, catalog):
            total += item.price
        return to_money(total)

    def replay(
        self,
        catalog: Catalog,
        participants: Sequence[tuple[str, str]],
        initial_budget: Decimal,
        upto: Optional[int] = None,
    ) -> dict[str, ParticipantState]:
        """Восстановление состояния участников свёрткой ledger с пустого состояния.

        Args:
            catalog: каталог сессии
            participants: (participant_id, display_name) в порядке слотов
            initial_budget: стартовый бюджет
            upto: последний sequence_number включительно (None — весь ledger)

        Returns:
            participant_id → ParticipantState

        Raises:
            LedgerIntegrityError: если запись ссылается на неизвестного
                участника или item
        """
        if upto is not None and not 0 <= upto <= len(self._entries):
            raise ValueError(f"upto must be within 0..{len(self._entries)}, got {upto}")

        states = {
            pid: ParticipantState.fresh(pid, name, initial_budget) for pid, name in participants
        }
        entries = self._entries if upto is None else self._entries[:upto]

        for action in entries:
            state = states.get(action.participant_id)
            if state is None:
                raise LedgerIntegrityError(
                    f"Ledger entry #{action.sequence_number} references unknown participant "
                    f"{action.participant_id!r}"
                )
            if action.kind == ActionKind.PICK:
                state.acquire(self._resolve_item(action, catalog))

        return states

    def to_contract(self) -> list[dict[str, Any]]:
        """JSON-совместимые записи, провалидированные по draft_action.json."""
        records = []
        for action in self._entries:
            record = action.model_dump(mode="json")
            _ACTION_VALIDATOR.validate(record)
            records.append(record)
        return records

    def _resolve_item(self, action: DraftAction, catalog: Catalog) -> Item:
        item = catalog.get(action.item_id)
        if item is None:
            raise LedgerIntegrityError(
                f"Ledger entry #{action.sequence_number} references unknown item {action.item_id!r}"
            )
        return item

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DraftAction]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: int) -> DraftAction:
        return self._entries[index]
