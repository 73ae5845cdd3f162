from typing import Dict, Any
from fastapi import Request, Response, HTTPException
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis.exceptions import RedisError
import os
import time
from urllib.parse import urlparse

def _client_key(req: Request) -> str:
    # Pas de session côté checkout: clé = IP + chemin
    ip = req.client.host if req.client else "local"
    forwarded = (req.headers.get("x-forwarded-for") or "").split(",")[0].strip()
    return f"ip:{forwarded or ip}:{req.url.path}"

def _prune(store: Dict[str, list], now: float, seconds: int) -> Dict[str, list]:
    """Retire les hits hors fenêtre et les clés devenues vides (toutes clés confondues)."""
    for key in list(store):
        hits = [t for t in store[key] if now - t < seconds]
        if hits:
            store[key] = hits
        else:
            del store[key]
    return store

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance de rate limit tolérante:
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (app.state)
    - app.state.rate_limit_enabled=False: aucune limite
    - sinon fastapi-limiter (Redis); un échec du limiteur ne bloque pas la requête
    """
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            # un store par durée de fenêtre: le nettoyage global reste valide
            stores = getattr(request.app.state, "_rl_store", {})
            store = _prune(stores.setdefault(seconds, {}), now, seconds)
            hits = store.get(key, [])
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = stores
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        async def _identifier(req: Request) -> str:
            return _client_key(req)

        limiter = RateLimiter(times=times, seconds=seconds, identifier=_identifier)
        try:
            return await limiter(request, response)
        except (RedisError, OSError):
            # Redis indisponible: pas de 429
            return
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)

    limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    backend = "redis" if limiter_ready else None
    if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
        backend = "memory"

    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": backend,
    }

    redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
    if limiter_ready and redis_url:
        p = urlparse(redis_url)
        info["redis"] = {
            "scheme": p.scheme,
            "host": p.hostname,
            "port": p.port,
        }
    return info
