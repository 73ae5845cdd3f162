from urllib.parse import urlparse
import socket
import logging

from checkout_backend.config import (
    SUPABASE_URL,
    CATALOG_ITEMS_TABLE,
    CATALOG_TENANTS_TABLE,
    CATALOG_OFFERS_TABLE,
    CATALOG_EVENTS_TABLE,
)
from checkout_backend.infra.supabase_client import get_supabase

logger = logging.getLogger(__name__)

def _check_table(client, name: str):
    try:
        res = client.table(name).select("*").limit(1).execute()
        cnt = len(res.data or [])
        return {"ok": True, "rows": cnt}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_supabase_info():
    """
    Diagnostic de l'accès catalogue: résolution DNS de l'hôte Supabase puis
    lecture d'une ligne dans chaque table du catalogue.
    """
    effective_url = SUPABASE_URL
    parsed = urlparse(effective_url) if effective_url else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except OSError as e:
            dns_ok = False
            dns_error = str(e)

    info = {
        "supabase_url": effective_url,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    try:
        client = get_supabase()
        for t in [CATALOG_ITEMS_TABLE, CATALOG_TENANTS_TABLE, CATALOG_OFFERS_TABLE, CATALOG_EVENTS_TABLE]:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        logger.warning("health.supabase failed: %s", e)
        info["error"] = str(getattr(e, "detail", None) or e)
    return info
