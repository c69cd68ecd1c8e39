"""
HTTP routes for the rank API.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends

from rank_api import metrics
from rank_api.db import RankRepo
from rank_api.dependencies import get_rank_repo
from rank_api.errors import RankNotFoundError
from rank_api.ranks import Rank, compute_rank_id
from rank_api.schemas import (
    CreateItemPayload,
    HealthResponse,
    RankItemPayload,
    RankResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(rank: Rank) -> RankResponse:
    return RankResponse.model_validate(asdict(rank))


@router.get("/health", response_model=HealthResponse)
def health_check():
    return HealthResponse(status="ok")


@router.post(
    "/projects/{project_id}/items", response_model=RankResponse, status_code=201
)
def create_item(
    project_id: str,
    payload: CreateItemPayload,
    repo: RankRepo = Depends(get_rank_repo),
):
    """
    Register an item for ranking. It starts with no scores.
    """
    rank = Rank(
        project_id=project_id,
        item_id=payload.item_id,
        min=payload.min,
        max=payload.max,
    )
    rank.compute_id()
    repo.save(rank)
    metrics.ITEMS_CREATED.inc()
    logger.info("Created rank %s", rank.id)
    return _to_response(rank)


@router.get("/projects/{project_id}/items/{item_id}", response_model=RankResponse)
def get_item(
    project_id: str,
    item_id: str,
    repo: RankRepo = Depends(get_rank_repo),
):
    rank_id = compute_rank_id(project_id, item_id)
    rank = repo.get(rank_id)
    if rank is None:
        metrics.ITEM_LOOKUPS.labels("missing").inc()
        raise RankNotFoundError(rank_id)
    metrics.ITEM_LOOKUPS.labels("found").inc()
    return _to_response(rank)


@router.post(
    "/projects/{project_id}/items/{item_id}/rank", response_model=RankResponse
)
def rank_item(
    project_id: str,
    item_id: str,
    payload: RankItemPayload,
    repo: RankRepo = Depends(get_rank_repo),
):
    """
    Fold a score into the item's running average and return the new state.
    """
    rank = repo.rank(compute_rank_id(project_id, item_id), payload.score)
    metrics.SCORES_RECORDED.inc()
    return _to_response(rank)
