"""
Item / Catalog — Модель позиции каталога драфта

Immutable Pydantic модель, представляющая один item каталога
(игрока, которого можно выбрать в драфте).

Catalog создаётся один раз при старте сессии из уже провалидированных
записей и далее только читается. Item не копируется в roster участника:
roster хранит ссылки на те же объекты.
"""

from decimal import Decimal
from enum import Enum
from typing import Iterable, Iterator

from pydantic import BaseModel, Field, field_validator

from .money import to_money


# =============================================================================
# ENUMS
# =============================================================================


class Category(str, Enum):
    """Роль (категория) item — закрытый набор."""

    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"


class Grade(str, Enum):
    """
    Грейд item — закрытая ординальная шкала.

    A+ — лучший, F — худший.
    """

    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"

    @property
    def rank(self) -> int:
        """Ординальная позиция грейда (0 = A+)."""
        return list(Grade).index(self)


# =============================================================================
# ITEM MODEL
# =============================================================================


class Item(BaseModel):
    """
    Модель item каталога.

    Immutable модель (frozen=True). Создаётся один раз при загрузке каталога
    и никогда не изменяется.
    """

    id: str = Field(..., min_length=1, description="Уникальный идентификатор item в сессии")
    name: str = Field(..., min_length=1, description="Отображаемое имя")
    category: Category = Field(..., description="Категория (GK/DEF/MID/FWD)")
    grade: Grade = Field(..., description="Грейд (A+..F)")
    price: Decimal = Field(..., ge=0, decimal_places=1, description="Цена (1 знак после запятой)")

    model_config = {"frozen": True}  # Immutable

    @field_validator("price")
    @classmethod
    def quantize_price(cls, v: Decimal) -> Decimal:
        """Нормализация цены к кванту 0.1 ("12" → "12.0")."""
        return to_money(v)


# =============================================================================
# CATALOG
# =============================================================================


class Catalog:
    """
    Immutable упорядоченная коллекция Item.

    Порядок сохраняется в порядке загрузки. Дубликаты id запрещены.
    """

    def __init__(self, items: Iterable[Item]):
        self._items: tuple[Item, ...] = tuple(items)
        self._by_id: dict[str, Item] = {}
        for item in self._items:
            if item.id in self._by_id:
                raise ValueError(f"Duplicate item id in catalog: {item.id!r}")
            self._by_id[item.id] = item

    def get(self, item_id: str) -> Item | None:
        return self._by_id.get(item_id)

    def by_category(self, category: Category) -> tuple[Item, ...]:
        """Все items заданной категории в порядке каталога."""
        return tuple(item for item in self._items if item.category == category)

    @property
    def items(self) -> tuple[Item, ...]:
        return self._items

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
