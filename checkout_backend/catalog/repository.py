# Module: checkout_backend/catalog/repository.py
"""
Lecture du catalogue (Supabase, lecture seule): items/adhésions, configuration
tenant (taxe, frais), offres promotionnelles et événements.
Toutes les fonctions sont tolérantes: None / [] en cas d'erreur (loggée).
"""
from typing import Any, Dict, List, Optional
import logging

from checkout_backend.config import (
    CATALOG_ITEMS_TABLE,
    CATALOG_TENANTS_TABLE,
    CATALOG_OFFERS_TABLE,
    CATALOG_EVENTS_TABLE,
)
from checkout_backend.infra.supabase_client import get_supabase

logger = logging.getLogger(__name__)

def get_membership_details(org_id: str, item_id: str) -> Optional[dict]:
    """
    Détail d'un item (adhésion cours/événement, plan, don) pour le checkout.
    - Un item de don expose sa catégorie de don aussi sous 'category'.
    """
    if not item_id:
        return None
    try:
        query = get_supabase().table(CATALOG_ITEMS_TABLE).select("*").eq("guId", item_id)
        if org_id:
            query = query.eq("orgId", org_id)
        res = query.single().execute()
        item = res.data or None
    except Exception:
        logger.exception("catalog.repository.get_membership_details failed org_id=%s item_id=%s", org_id, item_id)
        return None
    if item and item.get("donationCategory"):
        item = {**item, "category": item["donationCategory"], "donation_type": "donation"}
    return item

def get_item_tenant(tenant_id: str) -> Optional[dict]:
    """Configuration tenant: {tax|taxPercent, cardFees, bankFees, currency, ...}."""
    if not tenant_id:
        return None
    try:
        res = get_supabase().table(CATALOG_TENANTS_TABLE).select("*").eq("tenantId", tenant_id).single().execute()
        return res.data or None
    except Exception:
        logger.exception("catalog.repository.get_item_tenant failed tenant_id=%s", tenant_id)
        return None

def get_offer_by_code(offer_code: str, tenant_id: str) -> Optional[dict]:
    """Résout un code promo (insensible à la casse) pour un tenant."""
    code = (offer_code or "").strip().lower()
    if not code:
        return None
    try:
        res = (
            get_supabase()
            .table(CATALOG_OFFERS_TABLE)
            .select("*")
            .eq("offerCode", code)
            .eq("tenantId", tenant_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("catalog.repository.get_offer_by_code failed code=%s tenant_id=%s", code, tenant_id)
        return None

def get_event(event_id: str) -> Optional[dict]:
    if not event_id:
        return None
    try:
        res = get_supabase().table(CATALOG_EVENTS_TABLE).select("*").eq("guId", event_id).single().execute()
        return res.data or None
    except Exception:
        logger.exception("catalog.repository.get_event failed event_id=%s", event_id)
        return None

def list_event_memberships(event_id: str) -> List[Dict[str, Any]]:
    """
    Options de prix d'un événement: champ 'memberships' de l'événement,
    sinon les items rattachés (eventGuId).
    """
    event = get_event(event_id)
    if not event:
        return []
    memberships = event.get("memberships")
    if isinstance(memberships, list):
        return memberships
    try:
        res = get_supabase().table(CATALOG_ITEMS_TABLE).select("*").eq("eventGuId", event_id).execute()
        return res.data or []
    except Exception:
        logger.exception("catalog.repository.list_event_memberships failed event_id=%s", event_id)
        return []
