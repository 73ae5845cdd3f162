"""
Normalisation du prix: prix catalogue vs prix libre ("other price") saisi par l'acheteur.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from .amounts import to_amount
from .enums import PricingMode
from .models import CheckoutItem, PricedItem, UserForm, _flag


def effective_price(item: CheckoutItem, user: Optional[UserForm]) -> Decimal:
    """
    Prix unitaire effectif.
    - item.is_other_price + user.other_price valide et non nul -> prix saisi
    - sinon prix catalogue (prix plancher), sans erreur
    """
    other = user.other_price if user else None
    if item.is_other_price and other is not None and other != 0:
        return other
    return item.price


def normalize(item: CheckoutItem, user: Optional[UserForm], mode: PricingMode = PricingMode.ONE_TIME) -> PricedItem:
    price = effective_price(item, user)
    return PricedItem(
        item=item,
        mode=mode,
        base_price=price,
        registration_fee=item.registration_fees,
        item_price=price,
        running_total=price,
    )


def _field(entry: Any, key: str, attr: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(key)
    return getattr(entry, attr, None)


def get_filter_by_price(items: Optional[Sequence[Any]]) -> List[Any]:
    """
    Ordonne les options de prix pour l'affichage:
    prix fixes triés par prix croissant, puis les options "prix libre".
    Accepte des dicts catalogue ({price, isOtherPrice}) ou des CheckoutItem.
    """
    if not items:
        return []
    fixed = [i for i in items if not _flag(_field(i, "isOtherPrice", "is_other_price"))]
    other = [i for i in items if _flag(_field(i, "isOtherPrice", "is_other_price"))]
    fixed.sort(key=lambda i: to_amount(_field(i, "price", "price")))
    return fixed + other


def filter_by_price_dicts(memberships: Optional[Sequence[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Variante catalogue: coerce price/isOtherPrice avant le tri (réponse API)."""
    normalized = [
        {**m, "price": float(to_amount(m.get("price"))), "isOtherPrice": _flag(m.get("isOtherPrice"))}
        for m in (memberships or [])
    ]
    return get_filter_by_price(normalized)
