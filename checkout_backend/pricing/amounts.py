"""
Helpers monétaires (Decimal) du moteur de prix.
- to_amount: coercition tolérante (None, "", NaN, texte invalide -> 0)
- round2: arrondi à 2 décimales (ROUND_HALF_UP), appliqué au moment du calcul
- percentage_of: round2(base * pct / 100)
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_amount(value: Any, default: Decimal = ZERO) -> Decimal:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    if not amount.is_finite():
        return default
    return amount


def to_int(value: Any, default: int = 0) -> int:
    try:
        return int(to_amount(value, Decimal(default)))
    except (ValueError, OverflowError):
        return default


def round2(value: Decimal) -> Decimal:
    return to_amount(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percentage_of(base: Decimal, pct: Decimal) -> Decimal:
    return round2(to_amount(base) * to_amount(pct) / HUNDRED)


def as_float(value: Decimal) -> float:
    # JSON: les montants sortent en nombres, pas en chaînes
    return float(to_amount(value))
