"""Exception handlers turning domain errors into JSON responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from lostfound.exceptions import LostFoundError

logger = logging.getLogger(__name__)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LostFoundError)
    async def lost_found_error_handler(request: Request, exc: LostFoundError):
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
