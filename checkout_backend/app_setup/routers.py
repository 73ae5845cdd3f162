"""
Registre central des routers (API v1 checkout, health).
"""
from fastapi import FastAPI
from checkout_backend.checkout import views as checkout_views
from checkout_backend.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API v1
    app.include_router(checkout_views.router)
    # Health & monitoring
    app.include_router(health_router)
