"""OrderAssignment — вычисление очерёдности участников (pure).

Базовый порядок — биекция slot → rank (1..N), задаётся вызывающей стороной
целиком (replace, не incremental) и только до старта драфта.

Политики:
- LINEAR: rank = (action_count mod N) + 1 — следующий ранг с переходом N → 1,
  независимо от номера раунда.
- SNAKE: r = action_count // N (0-based раунд), k = action_count mod N.
  Чётный r → ранги 1..N (rank = k + 1), нечётный r → N..1 (rank = N - k).
  Каждый участник ходит ровно один раз за раунд, первый/последний чередуются.

Первый ход SNAKE (action_count = 0) всегда rank 1, раунд 1: это priming-переход
при старте, без записи в ledger.
"""

from typing import Mapping, Sequence

from src.core.domain.session import DraftMode


# =============================================================================
# EXCEPTIONS
# =============================================================================


class InvalidOrderError(ValueError):
    """Ранги не образуют перестановку 1..N по всем участникам."""
    pass


# =============================================================================
# ORDER ASSIGNMENT
# =============================================================================


class OrderAssignment:
    """Pure функции очерёдности. Состояния не хранит."""

    @staticmethod
    def default_order(participant_count: int) -> tuple[int, ...]:
        """Порядок по умолчанию: slot i → rank i + 1."""
        return tuple(range(1, participant_count + 1))

    @staticmethod
    def normalize_order(
        participant_ids: Sequence[str],
        ranks: Mapping[str, int],
    ) -> tuple[int, ...]:
        """Проверка и нормализация базового порядка.

        Args:
            participant_ids: участники в порядке слотов
            ranks: participant_id → rank (1..N), полная замена

        Returns:
            tuple рангов по слотам

        Raises:
            InvalidOrderError: если ranks не покрывает всех участников ровно
                один раз или ранги не являются перестановкой 1..N
        """
        n = len(participant_ids)
        known = set(participant_ids)

        unknown = [pid for pid in ranks if pid not in known]
        if unknown:
            raise InvalidOrderError(f"Unknown participant ids in order: {sorted(unknown)}")

        missing = [pid for pid in participant_ids if pid not in ranks]
        if missing:
            raise InvalidOrderError(f"Order is missing participants: {missing}")

        slot_ranks = []
        for pid in participant_ids:
            rank = ranks[pid]
            if isinstance(rank, bool) or not isinstance(rank, int):
                raise InvalidOrderError(f"Rank for {pid!r} must be an integer, got {rank!r}")
            slot_ranks.append(rank)

        if sorted(slot_ranks) != list(range(1, n + 1)):
            raise InvalidOrderError(
                f"Ranks must be a permutation of 1..{n}, got {sorted(slot_ranks)}"
            )

        return tuple(slot_ranks)

    @staticmethod
    def round_for_action(action_count: int, participant_count: int) -> int:
        """Номер раунда (1-based) для действия с индексом action_count (0-based)."""
        return action_count // participant_count + 1

    @staticmethod
    def rank_for_action(action_count: int, participant_count: int, mode: DraftMode) -> int:
        """Ранг участника, который совершает действие номер action_count (0-based)."""
        if participant_count < 1:
            raise ValueError("participant_count must be >= 1")
        if action_count < 0:
            raise ValueError(f"action_count must be >= 0, got {action_count}")

        k = action_count % participant_count

        if mode == DraftMode.LINEAR:
            return k + 1

        # SNAKE
        r = action_count // participant_count
        if r % 2 == 0:
            return k + 1
        return participant_count - k

    @classmethod
    def next_participant(
        cls,
        base_ranks: Sequence[int],
        action_count: int,
        mode: DraftMode,
    ) -> int:
        """Slot index участника, чей ход после action_count принятых действий."""
        rank = cls.rank_for_action(action_count, len(base_ranks), mode)
        return base_ranks.index(rank)

    @classmethod
    def preview(
        cls,
        base_ranks: Sequence[int],
        mode: DraftMode,
        start_count: int,
        length: int,
    ) -> list[int]:
        """Slot indices следующих `length` ходов начиная с start_count."""
        return [
            cls.next_participant(base_ranks, count, mode)
            for count in range(start_count, start_count + max(length, 0))
        ]
