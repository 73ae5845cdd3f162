"""
Gestionnaires d'exceptions.
- HTTPException: body JSON {"detail": ...} (API uniquement, pas de pages HTML).
- RequestValidationError: 400 (corps de requête invalide) au lieu du 422 FastAPI.
- Erreur non gérée: 500 JSON générique, détail seulement dans les logs.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_json(request: Request, exc: HTTPException):
        if exc.status_code >= 500:
            logger.error("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_json(request: Request, exc: RequestValidationError):
        logger.info("Requête invalide sur %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(Exception)
    async def unhandled_exception_json(request: Request, exc: Exception):
        logger.exception("Erreur non gérée sur %s", request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Erreur interne"})
