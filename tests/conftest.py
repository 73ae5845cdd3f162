import os

# Pas de Redis pendant les tests: à positionner avant l'import de l'app
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import copy
import pytest
from typing import Generator, Dict, Any
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from checkout_backend.app import app as fastapi_app

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

# Catalogue factice partagé (items, tenants, offres, événements)
FAKE_ITEMS: Dict[str, Dict[str, Any]] = {
    "item-onetime": {
        "guId": "item-onetime",
        "name": "Drop-in class",
        "price": 100,
        "isTaxable": True,
        "isChargeCreditCardFees": True,
        "currency": "USD",
        "orgId": "org-1",
        "tenantId": "tenant-1",
        "category": {"guId": "cat-1", "name": "Yoga"},
    },
    "item-recurring": {
        "guId": "item-recurring",
        "name": "Monthly membership",
        "price": 50,
        "currency": "USD",
        "orgId": "org-1",
        "tenantId": "tenant-1",
        "frequency": "monthly",
        "category": {"guId": "cat-1", "name": "Yoga"},
        "membershipDetails": {
            "membershipType": "recurring",
            "registrationFees": 25,
            "billingFreqText": "Monthly",
            "billingDayOfMonth": 1,
            "numberOfBillingCycles": 12,
        },
    },
}
FAKE_TENANTS: Dict[str, Dict[str, Any]] = {
    "tenant-1": {"tenantId": "tenant-1", "tax": 8, "cardFees": 3, "bankFees": 1, "currency": "USD"},
}
FAKE_OFFERS: Dict[str, Dict[str, Any]] = {
    "save10": {"guId": "offer-10", "offerCode": "save10", "discount": 10, "discountType": "percentage"},
    "minus500": {"guId": "offer-500", "offerCode": "minus500", "discount": 500, "discountType": "amount"},
}
FAKE_EVENTS: Dict[str, Dict[str, Any]] = {
    "evt-1": {
        "guId": "evt-1",
        "name": "Summer gala",
        "paymentType": "paid",
        "scheduleId": "sch-1",
        "startTime": "2026-07-01T18:00:00Z",
        "memberships": [
            {"guId": "m-free", "price": 0, "isOtherPrice": True},
            {"guId": "m-vip", "price": "80"},
            {"guId": "m-std", "price": 20},
        ],
    },
}

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Mock du catalogue pour tous les tests (aucun accès Supabase)
@pytest.fixture(scope="function", autouse=True)
def mock_catalog(monkeypatch):
    monkeypatch.setattr("checkout_backend.catalog.repository.get_supabase", lambda: MagicMock())
    monkeypatch.setattr(
        "checkout_backend.catalog.repository.get_membership_details",
        lambda org_id, item_id: copy.deepcopy(FAKE_ITEMS.get(item_id)),
    )
    monkeypatch.setattr(
        "checkout_backend.catalog.repository.get_item_tenant",
        lambda tenant_id: copy.deepcopy(FAKE_TENANTS.get(tenant_id)),
    )
    monkeypatch.setattr(
        "checkout_backend.catalog.repository.get_offer_by_code",
        lambda code, tenant_id: copy.deepcopy(FAKE_OFFERS.get((code or "").strip().lower())),
    )
    monkeypatch.setattr(
        "checkout_backend.catalog.repository.get_event",
        lambda event_id: copy.deepcopy(FAKE_EVENTS.get(event_id)),
    )
    monkeypatch.setattr(
        "checkout_backend.catalog.repository.list_event_memberships",
        lambda event_id: copy.deepcopy((FAKE_EVENTS.get(event_id) or {}).get("memberships") or []),
    )
    monkeypatch.setattr("checkout_backend.health.service.health_supabase_info", lambda: {"connect_ok": True})
