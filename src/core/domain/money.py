"""
Money — Централизованный модуль денежных величин драфта

Единственный допустимый способ получить денежное значение для:
- цены item (price)
- бюджета участника (budget_remaining)
- расходов участника (spend)

Все суммы хранятся как Decimal с точностью до одного знака после запятой.
Float для денег ЗАПРЕЩЁН: инвариант budget_remaining + spend == initial_budget
должен выполняться точно, без погрешности округления.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Final, Iterable, Union


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Квант денежной величины (один знак после запятой)
MONEY_QUANTUM: Final[Decimal] = Decimal("0.1")

# Нулевая сумма
ZERO_MONEY: Final[Decimal] = Decimal("0.0")

MoneyLike = Union[Decimal, int, float, str]


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def _to_decimal(value: MoneyLike) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"Money value must be numeric, got bool {value!r}")

    try:
        if isinstance(value, float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Money value is not a valid decimal: {value!r}") from exc

    if not amount.is_finite():
        raise ValueError(f"Money value must be finite, got {value!r}")
    return amount


def to_money(value: MoneyLike) -> Decimal:
    """
    Конверсия значения в денежную сумму (Decimal, 1 знак).

    Float конвертируется через str(), чтобы 12.3 не превратилось
    в 12.300000000000000710542735760100185871124267578125.

    Args:
        value: Decimal, int, float или строка ("12.5")

    Returns:
        Decimal, квантованный до MONEY_QUANTUM (ROUND_HALF_UP)

    Raises:
        ValueError: Если значение не парсится или NaN/Inf
    """
    return _to_decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def validate_non_negative_money(value: MoneyLike, name: str = "amount") -> Decimal:
    """
    Строгая конверсия входной суммы: без округления, с проверкой неотрицательности.

    Raises:
        ValueError: Если сумма < 0 или точнее MONEY_QUANTUM (например 100.05)
    """
    raw = _to_decimal(value)
    amount = raw.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)
    if amount != raw:
        raise ValueError(f"{name} must have at most one decimal place, got {value!r}")
    if amount < ZERO_MONEY:
        raise ValueError(f"{name} must be non-negative, got {amount}")
    return amount


def sum_money(values: Iterable[MoneyLike]) -> Decimal:
    """Точная сумма денежных величин."""
    total = ZERO_MONEY
    for value in values:
        total += to_money(value)
    return to_money(total)
