"""
Maps domain exceptions to JSON error responses.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.core.exceptions import PlavelError

logger = logging.getLogger(__name__)


async def plavel_error_handler(request: Request, exc: PlavelError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.debug(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(PlavelError, plavel_error_handler)
