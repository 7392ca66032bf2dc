"""DraftIntent — намерение участника, проверяемое ConstraintValidator."""

from dataclasses import dataclass
from typing import Optional

from src.core.domain.action import ActionKind


@dataclass(frozen=True)
class DraftIntent:
    """PICK (с item_id) или SKIP (без item_id)."""

    kind: ActionKind
    item_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind == ActionKind.PICK and self.item_id is None:
            raise ValueError("PICK intent requires item_id")
        if self.kind == ActionKind.SKIP and self.item_id is not None:
            raise ValueError("SKIP intent must not carry item_id")

    @classmethod
    def pick(cls, item_id: str) -> "DraftIntent":
        return cls(kind=ActionKind.PICK, item_id=item_id)

    @classmethod
    def skip(cls) -> "DraftIntent":
        return cls(kind=ActionKind.SKIP)
