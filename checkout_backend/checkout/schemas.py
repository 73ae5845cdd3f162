"""
Corps de requête de l'API checkout (camelCase, tels qu'envoyés par le front).
Les champs inconnus sont conservés: le service lit les dicts bruts.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_validator

class CheckoutRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    item: Optional[Dict[str, Any]] = None
    itemId: Optional[str] = None
    orgId: Optional[str] = None
    tenant: Optional[Dict[str, Any]] = None
    tenantId: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    offer: Optional[Dict[str, Any]] = None
    offerCode: Optional[str] = None
    applyCardFees: bool = True
    recurringDonation: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def item_or_item_id(self):
        if not self.item and not (self.itemId or "").strip():
            raise ValueError("item ou itemId requis")
        return self

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

class OfferRequest(CheckoutRequest):
    @model_validator(mode="after")
    def offer_or_code(self):
        if not self.offer and not (self.offerCode or "").strip():
            raise ValueError("offer ou offerCode requis")
        return self

class PayloadRequest(CheckoutRequest):
    event: Optional[Dict[str, Any]] = None
    eventId: Optional[str] = None
    contactId: Optional[str] = None
    payment: Optional[Dict[str, Any]] = None
