"""
Domain errors and their HTTP translation.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class RankApiError(Exception):
    """Base class for errors that map onto a client-facing status code."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RankNotFoundError(RankApiError):
    status_code = 404

    def __init__(self, rank_id: str):
        super().__init__(f"Rank {rank_id!r} was not found.")
        self.rank_id = rank_id


class RankAlreadyExistsError(RankApiError):
    status_code = 409

    def __init__(self, rank_id: str):
        super().__init__(f"Rank {rank_id!r} already exists.")
        self.rank_id = rank_id


class ScoreOutOfRangeError(RankApiError):
    status_code = 422

    def __init__(self, score: float, min_score: float, max_score: float):
        super().__init__(
            f"Score {score} is outside the allowed range [{min_score}, {max_score}]."
        )
        self.score = score
        self.min_score = min_score
        self.max_score = max_score


class ConfigurationError(Exception):
    """Raised when required settings are missing at startup."""


async def rank_api_error_handler(request: Request, exc: RankApiError) -> JSONResponse:
    logger.info(
        "%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log any exception the routes did not translate and answer with a 500.

    The response carries the exception type so clients can reference it when
    reporting issues; the traceback only goes to the log.
    """
    logger.error(
        "Unhandled exception in %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "errorType": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RankApiError, rank_api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
