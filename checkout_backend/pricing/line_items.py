"""
Construction des lignes (membershipList) attendues par l'API de paiement.

Une ligne porte soit un total à plat (paiement unique), soit le découpage
abonnement + inscription (récurrent), jamais les deux.
Les montants sont émis en nombres JSON (float).
"""
import time
from typing import Any, Dict, List, Optional

from checkout_backend.config import ITEM_VALIDITY_DAYS
from .amounts import as_float
from .enums import MembershipType, PaymentType, PricingMode, ProductType
from .models import CartSummary, PricedItem, RecurringDonation

_PRODUCT_TYPES = {
    PaymentType.PAID: ProductType.PAID_EVENT,
    PaymentType.FREE: ProductType.FREE_EVENT,
    PaymentType.DONATION: ProductType.DONATION_EVENT,
}


def get_product_type(payment_type: Any) -> ProductType:
    """paid -> paidevent, free -> freeevent, donation -> donationevent, sinon paidevent."""
    return _PRODUCT_TYPES[PaymentType.parse(payment_type, PaymentType.PAID)]


def resolve_product(priced: PricedItem) -> Dict[str, Any]:
    """
    Produit de rattachement, par ordre de priorité:
    1) événement associé  2) item de plan d'abonnement  3) catégorie (don ou standard)
    """
    item = priced.item
    if item.event_gu_id:
        product_type = get_product_type(item.payment_type).value
        return {
            "productId": item.event_gu_id,
            "productName": item.event_name,
            "productType": product_type,
            "courseGuId": item.event_gu_id,
            "courseType": product_type,
        }
    if item.item_type == ProductType.PLAN.value:
        return {
            "productId": item.subscription_plan_id or item.plan_id or item.gu_id,
            "productName": item.name,
            "productType": ProductType.PLAN.value,
        }
    category = item.donation_category or item.category or {}
    return {
        "productId": category.get("guId"),
        "productName": category.get("name"),
        "productType": (ProductType.DONATION_EVENT if item.donation_category else ProductType.PAID_EVENT).value,
    }


def _recurring_split(priced: PricedItem) -> Dict[str, Any]:
    item = priced.item
    return {
        "subscription": {
            "trialPeriod": item.trial_period,
            "billingDay": 0,
            "frequency": item.frequency,
            # cycles facturés APRÈS le premier paiement
            "noOfBillingCycles": item.number_of_billing_cycles - 1,
            "subscriptionAmount": as_float(priced.base_price),
            "subscriptionTotalAmount": as_float(priced.final_subscription_amount),
            "subscriptionCardFees": as_float(priced.card_fees_on_price),
            "subscriptionTax": as_float(priced.tax_on_price),
        },
        "itemPrice": as_float(priced.one_time_payment),
        "itemTotal": as_float(priced.final_one_time_payment),
        "cardFees": as_float(priced.card_fees_on_registration),
        "tax": as_float(priced.tax_on_registration),
    }


def _recurring_donation(priced: PricedItem, donation: RecurringDonation) -> Dict[str, Any]:
    return {
        "subscription": {
            "frequency": donation.frequency,
            "noOfBillingCycles": donation.limit,
            "subscriptionAmount": as_float(priced.base_price),
            "subscriptionTotalAmount": as_float(priced.final_subscription_amount),
        },
        "itemPrice": 0.0,
        "itemTotal": 0.0,
        "cardFees": as_float(priced.card_fees_on_registration),
        "tax": as_float(priced.tax_on_registration),
        "membershipType": MembershipType.RECURRING.value,
    }


def _one_time(priced: PricedItem, summary: CartSummary) -> Dict[str, Any]:
    return {
        "itemPrice": as_float(priced.base_price),
        "itemTotal": as_float(summary.total_price),
        "cardFees": as_float(priced.card_fees_on_price),
        "tax": as_float(priced.tax_on_price),
    }


def get_item_list(
    priced: PricedItem,
    summary: CartSummary,
    recurring_donation: Optional[RecurringDonation] = None,
    now: Optional[float] = None,
) -> List[Dict[str, Any]]:
    """
    Convertit l'état calculé en ligne(s) pour l'API de paiement.
    - now: horodatage (secondes) utilisé pour endDate (= now + ITEM_VALIDITY_DAYS)
    """
    item = priced.item
    now = time.time() if now is None else now
    line: Dict[str, Any] = {
        "orgId": item.org_id,
        "tenantId": item.tenant_id,
        "itemId": item.gu_id,
        "itemName": item.name,
        "membershipType": item.membership_type.value if item.membership_type else "",
        "credits": item.credits,
        "total": as_float(summary.total_price),
        "discount": as_float(priced.discount),
        "qty": item.qty,
        "currency": item.currency,
        "endDate": int(now) + ITEM_VALIDITY_DAYS * 24 * 60 * 60,
    }
    line.update(resolve_product(priced))

    if priced.mode is PricingMode.RECURRING:
        line.update(_recurring_split(priced))
    elif priced.mode is PricingMode.RECURRING_DONATION and recurring_donation is not None:
        line.update(_recurring_donation(priced, recurring_donation))
    else:
        line.update(_one_time(priced, summary))
    return [line]
