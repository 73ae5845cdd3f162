import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from checkout_backend.utils.rate_limit import optional_rate_limit
from checkout_backend.checkout import service as checkout_service
from .schemas import CheckoutRequest, OfferRequest, PayloadRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])

# module checkout_backend.checkout.views
@router.post("/summary")
def cart_summary(req: CheckoutRequest):
    """
    Calcule le résumé du panier pour un item.
    - Entrée JSON: { "item" | "itemId"+"orgId", "tenant" | "tenantId", "user",
      "offer" | "offerCode", "applyCardFees", "recurringDonation" }
    - Sortie: { cartSummary, membershipList, offerApplied }
    - Erreurs: 400 payload invalide, 404 item/tenant introuvable
    """
    try:
        return JSONResponse(checkout_service.quote(req.to_body()))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Erreur cart_summary")
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/offer", dependencies=[Depends(optional_rate_limit(times=20, seconds=60))])
def apply_offer_code(req: OfferRequest):
    """
    Vérifie un code promo pour un item.
    - Sécurité: rate limit (20 req / 60s) contre l'énumération de codes
    - Sortie: { valid, discount, priceToDiscount, offerId }
    - Erreurs: 400 si code inconnu ou remise invalide pour l'item
    """
    try:
        return JSONResponse(checkout_service.check_offer(req.to_body()))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Erreur apply_offer_code")
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/payload")
def checkout_payload(req: PayloadRequest):
    """
    Construit le payload final de soumission (item ou événement).
    Mêmes entrées que /summary, plus "event" | "eventId", "contactId", "payment".
    """
    try:
        return JSONResponse(checkout_service.build_payload(req.to_body()))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Erreur checkout_payload")
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/events/{event_id}/options")
def event_price_options(event_id: str) -> Dict[str, Any]:
    """Options de prix d'un événement, triées (prix fixes croissants puis prix libres)."""
    return {"options": checkout_service.price_options(event_id)}
