"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from rank_api.config import Settings, get_settings
from rank_api.db import (
    FirestoreRankRepo,
    InMemoryRankRepo,
    RankRepo,
    create_firestore_client,
)

logger = logging.getLogger(__name__)

_rank_repo: RankRepo | None = None


def init_rank_repo(settings: Settings) -> RankRepo:
    """
    Build the process-wide repository from explicit settings and cache it.
    """
    global _rank_repo
    if settings.use_in_memory_backends:
        logger.info("Using in-memory rank repository")
        _rank_repo = InMemoryRankRepo()
    else:
        _rank_repo = FirestoreRankRepo(
            create_firestore_client(settings),
            collection=settings.firestore_collection,
        )
    return _rank_repo


def get_rank_repo() -> RankRepo:
    """
    Return a singleton repository so in-memory state persists across requests.
    """
    if _rank_repo is not None:
        return _rank_repo
    return init_rank_repo(get_settings())


def reset_rank_repo() -> None:
    """Forget the cached repository; the next call rebuilds it from settings."""
    global _rank_repo
    _rank_repo = None
