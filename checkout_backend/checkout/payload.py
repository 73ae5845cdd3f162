"""
Assemblage du payload final de checkout (productCheckout) à partir du résumé
calculé, des lignes de paiement et du formulaire acheteur.
"""
from typing import Any, Dict, List, Optional, Tuple

from checkout_backend.config import DEFAULT_CURRENCY
from checkout_backend.pricing import CartSummary, Offer, TenantFees, UserForm

# module checkout_backend.checkout.payload
def get_last_name(name_parts: List[str]) -> str:
    """Tout ce qui suit le premier mot; "" pour un nom en un seul mot."""
    if not name_parts or len(name_parts) <= 1:
        return ""
    return " ".join(name_parts[1:])

def split_full_name(full_name: str) -> Tuple[str, str]:
    parts = (full_name or "").split()
    if not parts:
        return "", ""
    return parts[0], get_last_name(parts)

def format_total(summary: CartSummary) -> str:
    return f"{summary.total_price:.2f}"

def build_payment(total: str, currency: str, info: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Bloc 'payment' à partir des infos de transaction renvoyées par le front
    (nonce, methodId, methodType, paymentType, paymentIntent).
    """
    info = info or {}
    method_type = info.get("methodType") or ""
    return {
        "amount": total,
        "currency": currency,
        "nonce": info.get("nonce"),
        "methodId": info.get("methodId") or "",
        "methodType": method_type,
        "paymentType": info.get("paymentType") or "none",
        "paymentIntent": info.get("paymentIntent") or "",
        "isSaveCard": False,
        "isPayLater": method_type == "paylater",
    }

def build_checkout_payload(
    *,
    tenant_id: str,
    user: UserForm,
    summary: CartSummary,
    membership_list: List[Dict[str, Any]],
    fees: Optional[TenantFees] = None,
    offer: Optional[Offer] = None,
    contact_id: str = "",
    payment_info: Optional[Dict[str, Any]] = None,
    event: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Construit le payload de soumission.
    - total/amount: chaîne à 2 décimales
    - currency: devise du tenant, sinon DEFAULT_CURRENCY
    - offerCode: guId de l'offre appliquée ("" sinon)
    - event: ajoute le bloc {scheduleId, classStartTime, guId} (checkout événement)
    """
    total = format_total(summary)
    currency = (fees.currency if fees else "") or DEFAULT_CURRENCY
    first_name, last_name = user.first_name, user.last_name
    if not first_name and user.full_name:
        first_name, last_name = split_full_name(user.full_name)

    payload: Dict[str, Any] = {
        "tenantId": tenant_id,
        "contactId": contact_id,
        "firstName": first_name,
        "lastName": last_name,
        "email": user.email,
        "phone": user.phone,
        "customFields": user.custom_fields,
        "guardians": user.guardians,
        "offerCode": offer.gu_id if offer else "",
        "discountTotal": float(summary.item_discount),
        "total": total,
        "notes": user.note,
        "currency": currency,
        "membershipList": membership_list,
        "payment": build_payment(total, currency, payment_info),
    }
    if event:
        payload["event"] = {
            "scheduleId": event.get("scheduleId"),
            "classStartTime": event.get("startTime"),
            "guId": event.get("guId"),
        }
    return payload
