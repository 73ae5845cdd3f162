"""
Pipeline complet du panier:
Normalisation -> Décomposition récurrente -> Remise -> Frais carte / Taxe -> Quantité -> CartSummary.

Recalculer (ex: changement d'option de prix) = relancer le pipeline entier,
aucun état n'est conservé entre deux appels.
"""
from dataclasses import dataclass
from typing import Optional

from .amounts import round2
from .fees import compose
from .models import (
    CartSummary,
    CheckoutItem,
    PricedItem,
    RecurringDonation,
    RecurringMembershipConfig,
    TenantFees,
    UserForm,
)
from .normalizer import normalize
from .offers import OfferResult
from .quantity import scale_quantity
from .recurring import decompose, resolve_mode


@dataclass(frozen=True)
class CartCalculation:
    priced: PricedItem
    summary: CartSummary


def to_summary(priced: PricedItem, fees: TenantFees) -> CartSummary:
    return CartSummary(
        total_price=round2(priced.running_total),
        total_tax=priced.total_tax,
        card_fees=priced.card_fees,
        item_discount=priced.discount,
        tax_percent=fees.tax_percent,
        card_percent=fees.card_fees_percent,
        bank_percent=fees.bank_fees_percent,
        show_taxable=priced.show_taxable,
        show_card_fees=priced.show_card_fees,
        recurring_info=priced.recurring_info,
        total_tax_sub=priced.tax_on_price,
        total_tax_reg=priced.tax_on_registration,
        card_fees_on_price_amt=priced.card_fees_on_price,
        card_fees_on_amt=priced.card_fees_on_registration,
    )


def calculate_cart_summary(
    item: CheckoutItem,
    user: Optional[UserForm] = None,
    fees: Optional[TenantFees] = None,
    offer: Optional[OfferResult] = None,
    recurring_membership: Optional[RecurringMembershipConfig] = None,
    apply_card_fees: bool = True,
    recurring_donation: Optional[RecurringDonation] = None,
) -> CartCalculation:
    """
    Calcule le résumé du panier pour un item.
    - offer: résultat déjà validé (offers.apply_offer), ou None
    - recurring_membership: None => item traité comme paiement unique
    - fees: None => taxe / frais à 0
    """
    fees = fees or TenantFees()
    mode = resolve_mode(item, recurring_membership, recurring_donation)

    priced = normalize(item, user, mode)
    priced = decompose(priced, recurring_membership)
    priced = compose(
        priced,
        fees,
        discount=offer.discount if offer else None,
        offer_id=offer.offer_id if offer else "",
        apply_card=apply_card_fees,
    )
    priced = scale_quantity(priced)
    return CartCalculation(priced=priced, summary=to_summary(priced, fees))
