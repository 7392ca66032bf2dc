"""
Тесты для DraftEngine (фасад)

Сценарии end-to-end:
1. Успешный PICK, повторный PICK того же item → ITEM_UNAVAILABLE
2. Квоты, бюджет, лимит roster
3. LINEAR/SNAKE очередность с пользовательским порядком
4. Дедлайн: ровно один SKIP по таймауту, пауза, сброс после PICK
5. Setup intents до/после старта
6. Replay ledger == живое состояние
"""

import logging
from decimal import Decimal

import pytest

from src.core.contracts import validate_session_snapshot
from src.core.domain import ActionKind, Catalog, Category, Item, SchedulerState
from src.draft import DraftConfig, DraftEngine, ParticipantLimits, ParticipantSpec, QuotaTable
from src.gatekeeper import RejectionReason


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def catalog():
    return Catalog(
        [
            Item(id="gk1", name="Goalkeeper 1", category="GK", grade="A", price="12.0"),
            Item(id="gk2", name="Goalkeeper 2", category="GK", grade="C", price="5.0"),
            Item(id="def1", name="Defender 1", category="DEF", grade="B", price="7.5"),
            Item(id="def2", name="Defender 2", category="DEF", grade="D", price="3.0"),
            Item(id="mid1", name="Midfielder 1", category="MID", grade="A+", price="15.0"),
            Item(id="mid2", name="Midfielder 2", category="MID", grade="E", price="2.5"),
            Item(id="fwd1", name="Forward 1", category="FWD", grade="B", price="9.0"),
            Item(id="fwd2", name="Forward 2", category="FWD", grade="F", price="1.0"),
        ]
    )


PAIR = [("p1", "Manager 1"), ("p2", "Manager 2")]
FOUR = [("p1", "Manager 1"), ("p2", "Manager 2"), ("p3", "Manager 3"), ("p4", "Manager 4")]


@pytest.fixture
def engine(catalog):
    """Два участника, LINEAR, бюджет 100.0, дедлайн 60."""
    return DraftEngine(catalog, PAIR)


@pytest.fixture
def started(engine):
    engine.start()
    return engine


def _turns(engine, count):
    """Порядок ходов через SKIP текущего участника."""
    order = []
    for _ in range(count):
        current = engine.snapshot().current_participant_id
        order.append(current)
        assert engine.skip(current).accepted
    return order


# =============================================================================
# PICK
# =============================================================================


class TestPick:
    """Принятие и отказ PICK"""

    def test_pick_then_same_item_four_participants(self, catalog):
        """Четыре участника, бюджет 100.0: PICK gk1 → 88.0, повтор → ITEM_UNAVAILABLE."""
        engine = DraftEngine(catalog, FOUR)
        engine.start()

        assert engine.pick("p1", "gk1").accepted
        assert engine.participant("p1").budget_remaining == Decimal("88.0")

        result = engine.pick("p2", "gk1")
        assert result.rejection.reason == RejectionReason.ITEM_UNAVAILABLE
        assert all(engine.participant(pid).roster_item_ids == [] for pid in ("p2", "p3", "p4"))

    def test_pick_updates_participant_and_ledger(self, started):
        result = started.pick("p1", "gk1")

        assert result.accepted
        assert result.rejection is None
        assert result.transition_reason == "pick_accepted"
        assert result.action.sequence_number == 1
        assert result.action.round_number == 1
        assert result.action.kind == ActionKind.PICK
        assert result.delta.current_participant_id == "p2"

        p1 = started.participant("p1")
        assert p1.budget_remaining == Decimal("88.0")
        assert p1.spend == Decimal("12.0")
        assert p1.roster_item_ids == ["gk1"]
        assert p1.quota_used[Category.GK] == 1

    def test_picked_item_is_unavailable_to_others(self, started):
        started.pick("p1", "gk1")

        result = started.pick("p2", "gk1")

        assert not result.accepted
        assert result.rejection.reason == RejectionReason.ITEM_UNAVAILABLE
        assert started.participant("p2").roster_item_ids == []
        assert started.snapshot().current_participant_id == "p2"

    def test_unknown_item(self, started):
        result = started.pick("p1", "nope")
        assert result.rejection.reason == RejectionReason.ITEM_UNAVAILABLE

    def test_quota_exceeded_leaves_state_unchanged(self, catalog):
        config = DraftConfig(quotas=QuotaTable(default_quota={Category.GK: 1}))
        engine = DraftEngine(catalog, [("p1", "Manager 1")], config)
        engine.start()
        engine.pick("p1", "gk1")
        before = engine.snapshot()

        result = engine.pick("p1", "gk2")

        assert result.rejection.reason == RejectionReason.QUOTA_EXCEEDED
        assert result.rejection.limit == 1
        assert engine.snapshot() == before

    def test_insufficient_budget_shortfall(self, catalog):
        engine = DraftEngine(catalog, PAIR, DraftConfig(initial_budget=Decimal("10.0")))
        engine.start()

        result = engine.pick("p1", "gk1")

        assert result.rejection.reason == RejectionReason.INSUFFICIENT_BUDGET
        assert result.rejection.shortfall == Decimal("2.0")
        assert engine.participant("p1").budget_remaining == Decimal("10.0")

    def test_roster_full_but_skip_allowed(self, catalog):
        config = DraftConfig(quotas=QuotaTable(default_roster_cap=1))
        engine = DraftEngine(catalog, [("p1", "Manager 1")], config)
        engine.start()
        engine.pick("p1", "fwd2")

        result = engine.pick("p1", "fwd1")
        assert result.rejection.reason == RejectionReason.ROSTER_FULL
        assert result.rejection.limit == 1

        assert engine.skip("p1").accepted

    def test_budget_can_reach_zero(self, catalog):
        engine = DraftEngine(catalog, [("p1", "Manager 1")], DraftConfig(initial_budget=Decimal("12.0")))
        engine.start()

        assert engine.pick("p1", "gk1").accepted
        assert engine.participant("p1").budget_remaining == Decimal("0.0")

    def test_not_your_turn(self, started):
        result = started.pick("p2", "gk1")

        assert result.rejection.reason == RejectionReason.NOT_YOUR_TURN
        assert started.skip("p2").rejection.reason == RejectionReason.NOT_YOUR_TURN
        assert len(started.ledger_entries()) == 0

    def test_not_started(self, engine):
        assert engine.pick("p1", "gk1").rejection.reason == RejectionReason.NOT_STARTED
        assert engine.skip("p1").rejection.reason == RejectionReason.NOT_STARTED
        assert engine.pause().rejection.reason == RejectionReason.NOT_STARTED
        assert engine.resume().rejection.reason == RejectionReason.NOT_STARTED

    def test_can_pick_does_not_mutate(self, started):
        assert started.can_pick("p1", "gk1") is None
        assert started.can_pick("p2", "gk1").reason == RejectionReason.NOT_YOUR_TURN
        assert started.ledger_entries() == ()


# =============================================================================
# ORDERING
# =============================================================================


class TestOrdering:
    """LINEAR/SNAKE и базовый порядок"""

    def test_linear_rotation(self, catalog):
        engine = DraftEngine(catalog, FOUR)
        engine.start()

        assert _turns(engine, 8) == ["p1", "p2", "p3", "p4"] * 2

    def test_snake_custom_order(self, catalog):
        engine = DraftEngine(catalog, FOUR)
        assert engine.set_mode("SNAKE").accepted
        assert engine.set_order({"p1": 2, "p2": 4, "p3": 1, "p4": 3}).accepted
        engine.start()

        order = _turns(engine, 12)

        assert order[0:4] == ["p3", "p1", "p4", "p2"]
        assert order[4:8] == ["p2", "p4", "p1", "p3"]
        assert order[8:12] == ["p3", "p1", "p4", "p2"]

    def test_rounds_in_ledger(self, catalog):
        engine = DraftEngine(catalog, FOUR)
        engine.start()
        _turns(engine, 9)

        assert [a.round_number for a in engine.ledger_entries()] == [1] * 4 + [2] * 4 + [3]
        assert engine.snapshot().current_round == 3

    def test_upcoming_turns(self, catalog):
        engine = DraftEngine(catalog, FOUR, DraftConfig(mode="SNAKE"))
        assert engine.upcoming_turns(3) == []
        engine.start()

        assert engine.upcoming_turns(6) == ["p1", "p2", "p3", "p4", "p4", "p3"]

    def test_invalid_order(self, engine):
        result = engine.set_order({"p1": 1, "p2": 1})

        assert result.rejection.reason == RejectionReason.INVALID_ORDER
        assert engine.snapshot().base_order == {"p1": 1, "p2": 2}

    def test_setup_after_start_rejected(self, started):
        assert started.set_order({"p1": 2, "p2": 1}).rejection.reason == (
            RejectionReason.DRAFT_ALREADY_STARTED
        )
        assert started.set_mode("SNAKE").rejection.reason == RejectionReason.DRAFT_ALREADY_STARTED
        assert started.start().rejection.reason == RejectionReason.DRAFT_ALREADY_STARTED


# =============================================================================
# DEADLINE
# =============================================================================


class TestDeadline:
    """Тики, таймаут, пауза"""

    def test_sixty_ticks_skip_once(self, started):
        results = [started.tick() for _ in range(60)]

        skips = [r for r in results if r.action is not None]
        assert len(skips) == 1
        assert results[-1].transition_reason == "deadline_expired_skip"

        entry = started.ledger_entries()[0]
        assert entry.kind == ActionKind.SKIP
        assert entry.participant_id == "p1"
        assert entry.timed_out is True

        snapshot = started.snapshot()
        assert snapshot.current_participant_id == "p2"
        assert snapshot.deadline_seconds_remaining == 60

    def test_timeout_logs_warning(self, started, caplog):
        with caplog.at_level(logging.WARNING, logger="src.draft.engine"):
            for _ in range(60):
                started.tick()

        assert any("deadline expired" in r.getMessage() for r in caplog.records)

    def test_pause_freezes_deadline(self, started):
        for _ in range(10):
            started.tick()
        assert started.pause().delta.paused is True

        for _ in range(100):
            started.tick()
        assert started.snapshot().deadline_seconds_remaining == 50
        assert started.snapshot().state == SchedulerState.PAUSED
        assert started.ledger_entries() == ()

        started.resume()
        for _ in range(50):
            started.tick()
        assert len(started.ledger_entries()) == 1

    def test_pick_resets_deadline(self, started):
        for _ in range(59):
            started.tick()

        started.pick("p1", "gk1")
        result = started.tick()

        assert result.action is None
        assert result.delta.deadline_seconds_remaining == 59
        assert result.delta.current_participant_id == "p2"

    def test_picks_allowed_while_paused(self, started):
        started.pause()
        assert started.pick("p1", "gk1").accepted


# =============================================================================
# LEDGER / SNAPSHOT
# =============================================================================


class TestLedgerProjection:
    """Replay и проекции"""

    def test_replay_matches_live_state(self, catalog):
        engine = DraftEngine(catalog, FOUR)
        engine.start()
        engine.pick("p1", "gk1")
        engine.pick("p2", "def1")
        engine.skip("p3")
        engine.pick("p4", "mid1")
        for _ in range(60):
            engine.tick()
        engine.pick("p2", "fwd2")

        snapshot = engine.snapshot()
        assert engine.replay_participants() == snapshot.participants

        partial = engine.replay_participants(upto=1)
        assert partial[0].roster_item_ids == ["gk1"]
        assert all(p.roster_item_ids == [] for p in partial[1:])

    def test_items_unique_across_rosters(self, catalog):
        engine = DraftEngine(catalog, PAIR)
        engine.start()
        for _ in range(len(catalog)):
            current = engine.snapshot().current_participant_id
            for item in catalog:
                if engine.pick(current, item.id).accepted:
                    break

        owned = [i for p in engine.snapshot().participants for i in p.roster_item_ids]
        assert sorted(owned) == sorted(item.id for item in catalog)
        assert engine.is_complete()

    def test_snapshot_matches_contract(self, started):
        started.pick("p1", "gk1")
        validate_session_snapshot(started.snapshot().to_contract())

    def test_snapshot_is_detached(self, started):
        snapshot = started.snapshot()
        started.pick("p1", "gk1")
        assert snapshot.participants[0].roster_item_ids == []
        assert snapshot.action_count == 0

    def test_unknown_participant_lookup(self, started):
        with pytest.raises(KeyError):
            started.participant("p9")

    def test_scripted_draft_keeps_quota_and_spend_invariants(self, catalog):
        """После каждого принятого действия: quota_used[c] <= limit, spend == sum(roster)."""
        table = QuotaTable(
            default_quota={Category.GK: 1, Category.DEF: 1, Category.MID: 1, Category.FWD: 1},
            overrides={
                "p2": ParticipantLimits(quota={Category.GK: 2}),
                "p3": ParticipantLimits(quota={Category.MID: 0}),
            },
        )
        engine = DraftEngine(catalog, FOUR, DraftConfig(initial_budget=Decimal("30.0"), quotas=table))
        engine.start()

        # (participant, item или None для SKIP, ожидаемый отказ)
        script = [
            ("p1", "gk1", None),
            ("p2", "gk2", None),
            ("p3", "mid2", RejectionReason.QUOTA_EXCEEDED),
            ("p3", "def1", None),
            ("p4", "gk1", RejectionReason.ITEM_UNAVAILABLE),
            ("p4", "def2", None),
            ("p1", "gk2", RejectionReason.ITEM_UNAVAILABLE),
            ("p1", "def2", RejectionReason.ITEM_UNAVAILABLE),
            ("p1", "mid1", None),
            ("p2", "fwd1", None),
            ("p3", "mid1", RejectionReason.ITEM_UNAVAILABLE),
            ("p3", "fwd2", None),
            ("p4", "mid2", None),
            ("p1", None, None),
        ]

        for participant_id, item_id, expected in script:
            before = engine.snapshot()
            if item_id is None:
                result = engine.skip(participant_id)
            else:
                result = engine.pick(participant_id, item_id)

            if expected is not None:
                assert result.rejection.reason == expected
                assert engine.snapshot() == before
                continue

            assert result.accepted
            for participant in engine.snapshot().participants:
                for category, used in participant.quota_used.items():
                    assert used <= table.quota_limit(participant.id, category)
                roster_prices = sum(
                    (catalog.get(item_id).price for item_id in participant.roster_item_ids),
                    Decimal("0.0"),
                )
                assert participant.spend == roster_prices
                assert participant.budget_remaining + participant.spend == Decimal("30.0")

        assert len(engine.ledger_entries()) == 9
        assert engine.participant("p3").quota_used[Category.MID] == 0
        assert engine.is_complete()


# =============================================================================
# CONSTRUCTION
# =============================================================================


class TestConstruction:
    """Создание движка"""

    def test_participant_specs(self, catalog):
        engine = DraftEngine(catalog, [ParticipantSpec("a", "Alpha"), ("b", "Beta")])
        assert [p.display_name for p in engine.snapshot().participants] == ["Alpha", "Beta"]

    def test_requires_participants(self, catalog):
        with pytest.raises(ValueError):
            DraftEngine(catalog, [])

    def test_duplicate_participants(self, catalog):
        with pytest.raises(ValueError, match="Duplicate"):
            DraftEngine(catalog, [("p1", "A"), ("p1", "B")])

    @pytest.mark.parametrize("bad_id", ["", None, 7])
    def test_participant_id_must_be_non_empty_string(self, catalog, bad_id):
        with pytest.raises(ValueError, match="non-empty string"):
            DraftEngine(catalog, [(bad_id, "Nobody"), ("p2", "Manager 2")])

    def test_budget_with_two_decimals_rejected(self, catalog):
        with pytest.raises(ValueError, match="one decimal place"):
            DraftEngine(catalog, PAIR, DraftConfig(initial_budget=Decimal("100.05")))

    def test_unknown_mode_raises_and_keeps_mode(self, engine):
        with pytest.raises(ValueError):
            engine.set_mode("RANDOM")
        assert engine.snapshot().mode.value == "LINEAR"

    def test_from_document(self, catalog):
        engine = DraftEngine.from_document(
            catalog, PAIR, {"initial_budget": "50.0", "turn_duration": 5, "mode": "SNAKE"}
        )
        engine.start()

        snapshot = engine.snapshot()
        assert snapshot.turn_duration == 5
        assert snapshot.deadline_seconds_remaining == 5
        assert snapshot.participants[0].budget_remaining == Decimal("50.0")
