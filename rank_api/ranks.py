"""
The Rank record: the aggregated scores of one item within a project.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional

from dacite import Config, from_dict

from rank_api.errors import ScoreOutOfRangeError
from rank_api.json_utils import convert_keys

RANK_FIRESTORE_COLLECTION = "ranks"


def compute_rank_id(project_id: str, item_id: str) -> str:
    """Primary key of a rank: project id followed by item id."""
    return f"{project_id}{item_id}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Rank:
    project_id: str
    item_id: str
    # Bounds of the scale, e.g. 1 and 5 for a 1-5 rating or 0 and 100.
    min: float
    max: float
    total: int = 0
    # Meaningless while total is 0.
    average: float = 0.0
    id: str = ""
    created_at: datetime = field(default_factory=_utcnow)
    deleted_at: Optional[datetime] = None

    def get_computed_id(self) -> str:
        return compute_rank_id(self.project_id, self.item_id)

    def compute_id(self) -> None:
        self.id = self.get_computed_id()

    def validate_score(self, score: float) -> None:
        if not math.isfinite(score) or score < self.min or score > self.max:
            raise ScoreOutOfRangeError(score, self.min, self.max)

    def update_score(self, score: float) -> None:
        """Fold one score into the running average."""
        self.validate_score(score)
        self.average = (self.average * self.total + score) / (self.total + 1)
        self.total += 1

    def to_document(self) -> dict:
        return convert_keys(asdict(self), "snake_to_camel")

    @classmethod
    def from_document(cls, data: dict) -> "Rank":
        return from_dict(
            data_class=cls,
            data=convert_keys(data, "camel_to_snake"),
            config=Config(check_types=False),
        )
