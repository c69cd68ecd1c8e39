"""
Pydantic schemas for the rank API. Payloads use camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False
    )


class CreateItemPayload(CamelModel):
    # Used verbatim as a URL path segment and a Firestore document id.
    item_id: str = Field(..., min_length=1, max_length=256, pattern=r"^[^/]+$")
    min: float
    max: float

    @model_validator(mode="after")
    def check_bounds(self) -> "CreateItemPayload":
        if self.min >= self.max:
            raise ValueError("min must be lower than max")
        return self


class RankItemPayload(CamelModel):
    score: float


class RankResponse(CamelModel):
    id: str
    project_id: str
    item_id: str
    total: int
    average: float
    min: float
    max: float
    created_at: datetime
    deleted_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: Literal["ok"]
