"""
Décomposition des adhésions récurrentes: frais d'inscription (une fois) + abonnement.
Le mode de tarification est choisi une seule fois par item (resolve_mode).
"""
from dataclasses import replace
from typing import Optional

from .enums import PricingMode
from .models import (
    CheckoutItem,
    PricedItem,
    RecurringDonation,
    RecurringInfo,
    RecurringMembershipConfig,
)


def resolve_mode(
    item: CheckoutItem,
    config: Optional[RecurringMembershipConfig],
    donation: Optional[RecurringDonation] = None,
) -> PricingMode:
    if item.is_recurring and config is not None:
        return PricingMode.RECURRING
    if donation is not None and donation.is_donation_recurring:
        return PricingMode.RECURRING_DONATION
    return PricingMode.ONE_TIME


def build_recurring_info(config: RecurringMembershipConfig, registration_fees=None) -> RecurringInfo:
    day = config.billing_day_of_month
    cycles = config.number_of_billing_cycles
    return RecurringInfo(
        processing_fees=config.registration_fees if registration_fees is None else registration_fees,
        next_billing_period=f"On {day} day of Month" if day else "Today",
        billing_ends_after=f"{cycles} billing cycles" if cycles > 0 else "Manual Request",
        billing_freq_text=config.billing_freq_text,
    )


def decompose(priced: PricedItem, config: Optional[RecurringMembershipConfig]) -> PricedItem:
    """
    Mode récurrent uniquement: subscription_price = prix, total courant =
    frais d'inscription + abonnement, recurring_info renseigné.
    Les autres modes ressortent inchangés.
    """
    if priced.mode is not PricingMode.RECURRING or config is None:
        return priced
    registration = priced.item.registration_fees
    return replace(
        priced,
        subscription_price=priced.base_price,
        running_total=registration + priced.base_price,
        recurring_info=build_recurring_info(config, registration),
    )
