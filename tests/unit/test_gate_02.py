"""Unit тесты для GATE 2: Item Availability.

Coverage:
- PASS для свободного item из каталога
- BLOCK для item вне каталога
- BLOCK для уже выбранного item (owner_id в диагностике)
"""

from decimal import Decimal

import pytest

from src.core.domain import Catalog, Item, ParticipantState
from src.draft.ledger import DraftLedger
from src.draft.session import DraftSession
from src.gatekeeper import RejectionReason
from src.gatekeeper.gates import Gate02ItemAvailability


@pytest.fixture
def gate02():
    return Gate02ItemAvailability()


@pytest.fixture
def session():
    catalog = Catalog(
        [
            Item(id="gk1", name="Goalkeeper 1", category="GK", grade="A", price="12.0"),
            Item(id="mid1", name="Midfielder 1", category="MID", grade="B", price="8.0"),
        ]
    )
    return DraftSession(
        catalog=catalog,
        participants=[
            ParticipantState.fresh("p1", "Manager 1", Decimal("100.0")),
            ParticipantState.fresh("p2", "Manager 2", Decimal("100.0")),
        ],
        base_ranks=(1, 2),
        ledger=DraftLedger(2),
        turn_duration=60,
        started=True,
    )


def test_gate02_pass_available_item(gate02, session):
    result = gate02.evaluate(session, "gk1")

    assert result.action_allowed is True
    assert result.item is session.catalog.get("gk1")
    assert result.owner_id is None


def test_gate02_block_unknown_item(gate02, session):
    """BLOCK: item отсутствует в каталоге."""
    result = gate02.evaluate(session, "fwd99")

    assert result.action_allowed is False
    assert result.rejection.reason == RejectionReason.ITEM_UNAVAILABLE
    assert result.item is None
    assert "not in the catalog" in result.details


def test_gate02_block_already_picked(gate02, session):
    """BLOCK: item уже у другого участника."""
    session.owner_by_item["gk1"] = "p1"

    result = gate02.evaluate(session, "gk1")

    assert result.action_allowed is False
    assert result.block_reason == "ITEM_UNAVAILABLE"
    assert result.owner_id == "p1"
    assert "already been picked by p1" in result.rejection.details


def test_gate02_other_items_unaffected(gate02, session):
    session.owner_by_item["gk1"] = "p1"

    assert gate02.evaluate(session, "mid1").action_allowed is True
