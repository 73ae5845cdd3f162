"""
Compositeur remise / frais de carte / taxe.

Ordre imposé (chaque étape alimente la suivante, l'inverser change le résultat):
  1. remise sur le sous-total concerné et sur le total courant
  2. frais de carte: sur le prix, sur les frais d'inscription, puis sur le total courant
  3. taxe: sur (prix + frais carte prix), sur (inscription + frais carte inscription),
     puis sur le total courant
Les sous-totaux "prix" et "inscription" restent séparés: la ligne de paiement
les déclare indépendamment (abonnement vs paiement unique).
Aucune I/O, aucune exception: entrées numériques supposées déjà coercées.
"""
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from .amounts import percentage_of, round2
from .enums import PricingMode
from .models import PricedItem, TenantFees


def apply_discount(priced: PricedItem, discount: Optional[Decimal], offer_id: str = "") -> PricedItem:
    if discount is None:
        return priced
    if priced.mode is PricingMode.RECURRING:
        changes = {"registration_fee": priced.registration_fee - discount}
    else:
        changes = {"item_price": priced.item_price - discount}
    return replace(
        priced,
        discount=discount,
        offer_id=offer_id,
        running_total=priced.running_total - discount,
        **changes,
    )


def apply_card_fees(priced: PricedItem, fees: TenantFees, enabled: bool = True) -> PricedItem:
    if not (enabled and priced.item.is_charge_credit_card_fees):
        return priced
    pct = fees.card_fees_percent
    card_fees = percentage_of(priced.running_total, pct)
    return replace(
        priced,
        card_fees_on_price=percentage_of(priced.item_price, pct),
        card_fees_on_registration=percentage_of(priced.registration_fee, pct),
        card_fees=card_fees,
        running_total=round2(priced.running_total + card_fees),
        show_card_fees=True,
    )


def apply_tax(priced: PricedItem, fees: TenantFees) -> PricedItem:
    if not priced.item.is_taxable:
        return priced
    pct = fees.tax_percent
    total_tax = percentage_of(priced.running_total, pct)
    return replace(
        priced,
        tax_on_price=percentage_of(priced.item_price + priced.card_fees_on_price, pct),
        tax_on_registration=percentage_of(priced.registration_fee + priced.card_fees_on_registration, pct),
        total_tax=total_tax,
        running_total=round2(priced.running_total + total_tax),
        show_taxable=True,
    )


def compose(
    priced: PricedItem,
    fees: TenantFees,
    discount: Optional[Decimal] = None,
    offer_id: str = "",
    apply_card: bool = True,
) -> PricedItem:
    priced = apply_discount(priced, discount, offer_id)
    priced = apply_card_fees(priced, fees, apply_card)
    return apply_tax(priced, fees)


