"""Draft configuration — бюджет, дедлайн хода, политика очерёдности, квоты.

Конфигурация внедряется при создании сессии. Ядро не содержит ни имён
участников, ни их лимитов: всё берётся из QuotaTable по participant_id.

Значения по умолчанию:
- initial_budget: 100.0
- turn_duration: 60 единиц времени
- default_roster_cap: 15
- квота категории, не заданная нигде → равна roster cap (без доп. ограничения)
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Final, Mapping, Optional

from src.core.contracts import validate_draft_config
from src.core.domain.item import Category
from src.core.domain.money import validate_non_negative_money
from src.core.domain.session import DraftMode


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_INITIAL_BUDGET: Final[Decimal] = Decimal("100.0")
DEFAULT_TURN_DURATION: Final[int] = 60
DEFAULT_ROSTER_CAP: Final[int] = 15


# =============================================================================
# QUOTA TABLE
# =============================================================================


@dataclass(frozen=True)
class ParticipantLimits:
    """Персональные лимиты участника (перекрывают общие значения).

    None в roster_cap означает "использовать default_roster_cap".
    Категории, отсутствующие в quota, берутся из default_quota.
    """
    roster_cap: Optional[int] = None
    quota: Mapping[Category, int] = field(default_factory=dict)


@dataclass(frozen=True)
class QuotaTable:
    """Таблица квот и лимита roster.

    ConstraintValidator потребляет только два lookup-метода:
    quota_limit(participant_id, category) и roster_cap(participant_id).
    Ему безразлично, одинаковы лимиты для всех или персональны.
    """
    default_roster_cap: int = DEFAULT_ROSTER_CAP
    default_quota: Mapping[Category, int] = field(default_factory=dict)
    overrides: Mapping[str, ParticipantLimits] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.default_roster_cap < 0:
            raise ValueError(f"default_roster_cap must be >= 0, got {self.default_roster_cap}")
        for category, limit in self.default_quota.items():
            if limit < 0:
                raise ValueError(f"Quota for {category} must be >= 0, got {limit}")
        for participant_id, limits in self.overrides.items():
            if limits.roster_cap is not None and limits.roster_cap < 0:
                raise ValueError(
                    f"roster_cap override for {participant_id!r} must be >= 0, got {limits.roster_cap}"
                )
            for category, limit in limits.quota.items():
                if limit < 0:
                    raise ValueError(
                        f"Quota override {participant_id!r}/{category} must be >= 0, got {limit}"
                    )

    def roster_cap(self, participant_id: str) -> int:
        limits = self.overrides.get(participant_id)
        if limits is not None and limits.roster_cap is not None:
            return limits.roster_cap
        return self.default_roster_cap

    def quota_limit(self, participant_id: str, category: Category) -> int:
        limits = self.overrides.get(participant_id)
        if limits is not None and category in limits.quota:
            return limits.quota[category]
        if category in self.default_quota:
            return self.default_quota[category]
        return self.roster_cap(participant_id)


# =============================================================================
# DRAFT CONFIG
# =============================================================================


@dataclass(frozen=True)
class DraftConfig:
    """Конфигурация сессии драфта."""
    initial_budget: Decimal = DEFAULT_INITIAL_BUDGET
    turn_duration: int = DEFAULT_TURN_DURATION
    mode: DraftMode = DraftMode.LINEAR
    quotas: QuotaTable = field(default_factory=QuotaTable)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "initial_budget", validate_non_negative_money(self.initial_budget, "initial_budget")
        )
        object.__setattr__(self, "mode", DraftMode(self.mode))
        if self.turn_duration < 1:
            raise ValueError(f"turn_duration must be >= 1, got {self.turn_duration}")


def _parse_quota(raw: Mapping[str, Any]) -> dict[Category, int]:
    return {Category(name): int(limit) for name, limit in raw.items()}


def load_draft_config(data: Mapping[str, Any]) -> DraftConfig:
    """Построение DraftConfig из plain документа (dict из JSON/YAML хоста).

    Документ сначала проверяется по contracts/schema/draft_config.json.

    Args:
        data: документ конфигурации; все ключи опциональны

    Returns:
        DraftConfig

    Raises:
        jsonschema.ValidationError: если документ не соответствует схеме
    """
    document = dict(data)
    validate_draft_config(document)

    overrides = {
        participant_id: ParticipantLimits(
            roster_cap=raw.get("roster_cap"),
            quota=_parse_quota(raw.get("quota", {})),
        )
        for participant_id, raw in document.get("overrides", {}).items()
    }
    quotas = QuotaTable(
        default_roster_cap=int(document.get("default_roster_cap", DEFAULT_ROSTER_CAP)),
        default_quota=_parse_quota(document.get("default_quota", {})),
        overrides=overrides,
    )

    return DraftConfig(
        initial_budget=document.get("initial_budget", DEFAULT_INITIAL_BUDGET),
        turn_duration=int(document.get("turn_duration", DEFAULT_TURN_DURATION)),
        mode=DraftMode(document.get("mode", DraftMode.LINEAR.value)),
        quotas=quotas,
    )
