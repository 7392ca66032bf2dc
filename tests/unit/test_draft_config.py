"""
Тесты для DraftConfig / QuotaTable / load_draft_config
"""

from decimal import Decimal

import pytest
from jsonschema import ValidationError

from src.core.domain import Category, DraftMode
from src.draft.config import (
    DEFAULT_INITIAL_BUDGET,
    DEFAULT_ROSTER_CAP,
    DEFAULT_TURN_DURATION,
    DraftConfig,
    ParticipantLimits,
    QuotaTable,
    load_draft_config,
)


class TestDraftConfig:
    """Значения по умолчанию и валидация"""

    def test_defaults(self):
        config = DraftConfig()
        assert config.initial_budget == Decimal("100.0")
        assert config.turn_duration == 60
        assert config.mode == DraftMode.LINEAR
        assert config.quotas.roster_cap("anyone") == 15

    def test_budget_is_normalized(self):
        assert str(DraftConfig(initial_budget=Decimal("50")).initial_budget) == "50.0"

    def test_negative_budget_rejected(self):
        with pytest.raises(ValueError):
            DraftConfig(initial_budget=Decimal("-1.0"))

    def test_turn_duration_must_be_positive(self):
        with pytest.raises(ValueError, match="turn_duration"):
            DraftConfig(turn_duration=0)


class TestQuotaTable:
    """Lookup-методы лимитов"""

    def test_negative_values_rejected(self):
        with pytest.raises(ValueError):
            QuotaTable(default_roster_cap=-1)
        with pytest.raises(ValueError):
            QuotaTable(default_quota={Category.GK: -1})
        with pytest.raises(ValueError):
            QuotaTable(overrides={"p1": ParticipantLimits(roster_cap=-2)})
        with pytest.raises(ValueError):
            QuotaTable(overrides={"p1": ParticipantLimits(quota={Category.MID: -1})})

    def test_roster_cap_override(self):
        table = QuotaTable(default_roster_cap=10, overrides={"p1": ParticipantLimits(roster_cap=12)})
        assert table.roster_cap("p1") == 12
        assert table.roster_cap("p2") == 10

    def test_unset_quota_falls_back_to_own_roster_cap(self):
        table = QuotaTable(default_roster_cap=10, overrides={"p1": ParticipantLimits(roster_cap=3)})
        assert table.quota_limit("p1", Category.DEF) == 3
        assert table.quota_limit("p2", Category.DEF) == 10


class TestLoadDraftConfig:
    """Загрузка из документа (draft_config.json)"""

    def test_empty_document_gives_defaults(self):
        config = load_draft_config({})
        assert config.initial_budget == DEFAULT_INITIAL_BUDGET
        assert config.turn_duration == DEFAULT_TURN_DURATION
        assert config.quotas.default_roster_cap == DEFAULT_ROSTER_CAP

    def test_full_document(self):
        config = load_draft_config(
            {
                "initial_budget": 80,
                "turn_duration": 30,
                "mode": "SNAKE",
                "default_roster_cap": 11,
                "default_quota": {"GK": 1, "FWD": 3},
                "overrides": {"p2": {"roster_cap": 12, "quota": {"GK": 2}}},
            }
        )

        assert config.initial_budget == Decimal("80.0")
        assert config.turn_duration == 30
        assert config.mode == DraftMode.SNAKE
        assert config.quotas.quota_limit("p1", Category.GK) == 1
        assert config.quotas.quota_limit("p2", Category.GK) == 2
        assert config.quotas.quota_limit("p2", Category.FWD) == 3
        assert config.quotas.roster_cap("p2") == 12

    def test_string_budget(self):
        assert load_draft_config({"initial_budget": "99.5"}).initial_budget == Decimal("99.5")

    def test_budget_with_extra_precision_rejected(self):
        with pytest.raises(ValidationError):
            load_draft_config({"initial_budget": "100.05"})
        with pytest.raises(ValidationError):
            load_draft_config({"initial_budget": 99.5})
        with pytest.raises(ValueError, match="one decimal place"):
            DraftConfig(initial_budget=Decimal("100.05"))

    def test_invalid_document(self):
        with pytest.raises(ValidationError):
            load_draft_config({"mode": "ROUND_ROBIN"})
        with pytest.raises(ValidationError):
            load_draft_config({"default_quota": {"COACH": 1}})
