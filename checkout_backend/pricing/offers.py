"""
Offres promotionnelles: calcul de la remise (montant fixe ou pourcentage) et validation.

La validation (discount_is_valid) doit être faite AVANT d'engager l'offre:
le compositeur de frais suppose une remise valide.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .amounts import ZERO, percentage_of
from .enums import DiscountType, PricingMode
from .models import CheckoutItem, Offer, RecurringMembershipConfig
from .recurring import resolve_mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfferResult:
    discount: Decimal = ZERO
    price_to_discount: Decimal = ZERO
    offer_id: str = ""
    is_offer_processed: bool = False


def process_offer(
    offer: Offer,
    item: CheckoutItem,
    config: Optional[RecurringMembershipConfig] = None,
    price: Optional[Decimal] = None,
) -> OfferResult:
    """
    Calcule la remise d'une offre pour un item.
    - Base remisée: frais d'inscription en mode récurrent, sinon prix de l'item
      (`price` permet de passer le prix effectif, par défaut le prix catalogue)
    - Pourcentage: round2(base * pct / 100), arrondi immédiat
    - Montant: valeur de l'offre telle quelle
    """
    if resolve_mode(item, config) is PricingMode.RECURRING:
        price_to_discount = item.registration_fees
    else:
        price_to_discount = item.price if price is None else price

    if offer.discount_type is DiscountType.PERCENTAGE:
        discount = percentage_of(price_to_discount, offer.discount)
    else:
        discount = offer.discount

    return OfferResult(
        discount=discount,
        price_to_discount=price_to_discount,
        offer_id=offer.gu_id,
        is_offer_processed=True,
    )


def discount_is_valid(item: CheckoutItem, discount: Decimal, price: Optional[Decimal] = None) -> bool:
    """
    - Item non récurrent: la remise ne dépasse pas le prix
    - Item récurrent avec frais d'inscription > 0: la remise ne dépasse pas ces frais
    """
    if not item.is_recurring:
        limit = item.price if price is None else price
        return discount <= limit
    if item.registration_fees > 0 and discount > item.registration_fees:
        return False
    return True


def apply_offer(
    offer: Optional[Offer],
    item: CheckoutItem,
    config: Optional[RecurringMembershipConfig] = None,
    price: Optional[Decimal] = None,
) -> Optional[OfferResult]:
    """Calcule puis valide; None si l'offre est absente ou la remise invalide (l'appelant réinitialise l'offre)."""
    if offer is None:
        return None
    result = process_offer(offer, item, config, price=price)
    if not discount_is_valid(item, result.discount, price=price):
        logger.warning(
            "pricing.offer rejected offer_id=%s discount=%s item=%s",
            result.offer_id, result.discount, item.gu_id,
        )
        return None
    return result
