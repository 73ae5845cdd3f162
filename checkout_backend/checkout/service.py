"""
Cas d'usage 'checkout': orchestre catalogue (repository), moteur de prix et payload.
Les corps de requête sont des dicts JSON (camelCase), comme renvoyés par le front.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from checkout_backend.catalog import repository
from checkout_backend.pricing import (
    CartCalculation,
    CheckoutItem,
    Offer,
    OfferResult,
    RecurringDonation,
    RecurringMembershipConfig,
    TenantFees,
    UserForm,
    apply_offer,
    calculate_cart_summary,
    effective_price,
    filter_by_price_dicts,
    get_item_list,
)
from .payload import build_checkout_payload

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class CheckoutContext:
    item: CheckoutItem
    user: UserForm
    fees: TenantFees
    tenant_id: str = ""
    offer: Optional[Offer] = None
    recurring_membership: Optional[RecurringMembershipConfig] = None
    recurring_donation: Optional[RecurringDonation] = None
    apply_card_fees: bool = True
    event: Optional[Dict[str, Any]] = None

# module checkout_backend.checkout.service
def resolve_item(body: Dict[str, Any]) -> CheckoutItem:
    """
    Item du checkout: 'item' en ligne, sinon chargé via itemId (+ orgId).
    - 400 si aucun des deux n'est fourni, 404 si l'item est introuvable.
    """
    raw = body.get("item")
    if not raw:
        item_id = str(body.get("itemId") or "").strip()
        if not item_id:
            raise HTTPException(status_code=400, detail="item ou itemId requis")
        raw = repository.get_membership_details(str(body.get("orgId") or ""), item_id)
        if not raw:
            raise HTTPException(status_code=404, detail="Item introuvable")
    if not isinstance(raw, dict):
        raise HTTPException(status_code=400, detail="Item invalide")
    return CheckoutItem.from_dict(raw)

def resolve_fees(body: Dict[str, Any]) -> TenantFees:
    """
    Configuration taxe/frais: 'tenant' en ligne, sinon chargée via tenantId.
    Sans l'un ni l'autre: pourcentages à 0.
    """
    raw = body.get("tenant")
    if raw:
        return TenantFees.from_dict(raw)
    tenant_id = str(body.get("tenantId") or "").strip()
    if not tenant_id:
        return TenantFees()
    raw = repository.get_item_tenant(tenant_id)
    if not raw:
        raise HTTPException(status_code=404, detail="Configuration tenant introuvable")
    return TenantFees.from_dict(raw)

def resolve_offer(body: Dict[str, Any]) -> Optional[Offer]:
    """
    Offre: 'offer' en ligne, sinon code promo résolu via le catalogue.
    - 400 si un code est fourni mais inconnu.
    """
    raw = body.get("offer")
    if raw:
        return Offer.from_dict(raw)
    code = str(body.get("offerCode") or "").strip()
    if not code:
        return None
    raw = repository.get_offer_by_code(code, str(body.get("tenantId") or ""))
    if not raw:
        raise HTTPException(status_code=400, detail="Code promo invalide")
    return Offer.from_dict(raw)

def resolve_event(body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    event = body.get("event")
    if event:
        return event
    event_id = str(body.get("eventId") or "").strip()
    if not event_id:
        return None
    event = repository.get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Evenement introuvable")
    return event

def load_context(body: Dict[str, Any], with_event: bool = False) -> CheckoutContext:
    body = body or {}
    item = resolve_item(body)
    event = resolve_event(body) if with_event else None
    if event:
        item = item.for_event(event, org_id=str(body.get("orgId") or ""), tenant_id=str(body.get("tenantId") or ""))
    donation = body.get("recurringDonation")
    return CheckoutContext(
        item=item,
        user=UserForm.from_dict(body.get("user") or {}),
        fees=resolve_fees(body),
        tenant_id=str(body.get("tenantId") or item.tenant_id or ""),
        offer=resolve_offer(body),
        recurring_membership=RecurringMembershipConfig.from_item(item),
        recurring_donation=RecurringDonation.from_dict(donation) if donation else None,
        apply_card_fees=body.get("applyCardFees", True) is not False,
        event=event,
    )

def validate_offer(ctx: CheckoutContext) -> Optional[OfferResult]:
    """Remise calculée et validée pour l'item, None si absente ou invalide."""
    price = effective_price(ctx.item, ctx.user)
    return apply_offer(ctx.offer, ctx.item, ctx.recurring_membership, price=price)

def calculate(ctx: CheckoutContext, offer: Optional[OfferResult] = None) -> CartCalculation:
    return calculate_cart_summary(
        ctx.item,
        user=ctx.user,
        fees=ctx.fees,
        offer=offer,
        recurring_membership=ctx.recurring_membership,
        apply_card_fees=ctx.apply_card_fees,
        recurring_donation=ctx.recurring_donation,
    )

def quote(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Résumé du panier + lignes de paiement.
    Une offre invalide pour l'item est ignorée (offerApplied=False), pas d'erreur.
    """
    ctx = load_context(body)
    offer = validate_offer(ctx)
    calc = calculate(ctx, offer)
    membership_list = get_item_list(calc.priced, calc.summary, ctx.recurring_donation)
    offer_applied = offer is not None
    logger.info(
        "checkout.summary item=%s mode=%s total=%s offer_applied=%s",
        ctx.item.gu_id, calc.priced.mode.value, calc.summary.total_price, offer_applied,
    )
    return {
        "cartSummary": calc.summary.to_dict(),
        "membershipList": membership_list,
        "offerApplied": offer_applied,
    }

def check_offer(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Applique un code promo à un item (avant engagement côté UI).
    - 400 si aucune offre n'est fournie ou si la remise dépasse la base autorisée.
    """
    ctx = load_context(body)
    if ctx.offer is None:
        raise HTTPException(status_code=400, detail="offer ou offerCode requis")
    result = validate_offer(ctx)
    if result is None:
        raise HTTPException(status_code=400, detail="Remise invalide pour cet item")
    return {
        "valid": True,
        "discount": float(result.discount),
        "priceToDiscount": float(result.price_to_discount),
        "offerId": result.offer_id,
    }

def build_payload(body: Dict[str, Any]) -> Dict[str, Any]:
    """Payload final de soumission (checkout item ou événement)."""
    body = body or {}
    ctx = load_context(body, with_event=True)
    offer = validate_offer(ctx)
    calc = calculate(ctx, offer)
    membership_list = get_item_list(calc.priced, calc.summary, ctx.recurring_donation)
    payload = build_checkout_payload(
        tenant_id=ctx.tenant_id,
        user=ctx.user,
        summary=calc.summary,
        membership_list=membership_list,
        fees=ctx.fees,
        offer=ctx.offer if offer is not None else None,
        contact_id=str(body.get("contactId") or ""),
        payment_info=body.get("payment") or {},
        event=ctx.event,
    )
    logger.info("checkout.payload item=%s total=%s tenant_id=%s", ctx.item.gu_id, payload["total"], ctx.tenant_id)
    return payload

def price_options(event_id: str) -> List[Dict[str, Any]]:
    """Options de prix d'un événement: prix fixes croissants puis prix libres."""
    if not repository.get_event(event_id):
        raise HTTPException(status_code=404, detail="Evenement introuvable")
    return filter_by_price_dicts(repository.list_event_memberships(event_id))
