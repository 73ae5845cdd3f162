# checkout_backend.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du service de checkout.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs Supabase (lecture du catalogue)
- Expose CORS/hosts, la devise par défaut et les noms de tables du catalogue
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name) or "") or default)
    except ValueError:
        return default

# Supabase: URL et clé anon (lecture du catalogue)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or "")
SUPABASE_KEY = _clean_env(os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or SUPABASE_KEY)

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Tables du catalogue (lecture seule)
CATALOG_ITEMS_TABLE = _clean_env(os.getenv("CATALOG_ITEMS_TABLE") or "items")
CATALOG_TENANTS_TABLE = _clean_env(os.getenv("CATALOG_TENANTS_TABLE") or "item_tenants")
CATALOG_OFFERS_TABLE = _clean_env(os.getenv("CATALOG_OFFERS_TABLE") or "offers")
CATALOG_EVENTS_TABLE = _clean_env(os.getenv("CATALOG_EVENTS_TABLE") or "events")

# Checkout: devise utilisée quand le tenant n'en déclare pas, durée de validité d'une ligne
DEFAULT_CURRENCY = _clean_env(os.getenv("DEFAULT_CURRENCY") or "USD")
ITEM_VALIDITY_DAYS = _int_env("ITEM_VALIDITY_DAYS", 365)

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]

