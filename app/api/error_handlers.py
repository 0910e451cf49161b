import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.utils.game_validation import GameError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map domain errors to HTTP responses with a {"detail": ...} body."""

    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError):
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": str(exc)},
        )
