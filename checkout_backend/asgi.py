"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: gunicorn -k uvicorn.workers.UvicornWorker)
  importe `checkout_backend.asgi:app`.
- Toute la configuration FastAPI est centralisée dans checkout_backend.app.
"""

from checkout_backend.app import app

__all__ = ["app"]
