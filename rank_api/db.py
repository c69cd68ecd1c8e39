"""
Rank persistence: Firestore for real deployments and an in-memory
implementation for tests and local runs.
"""

from __future__ import annotations

import copy
import logging
import os
import threading
from typing import Dict, Optional, Protocol

from google.api_core import exceptions
from google.cloud import firestore

from rank_api.config import Settings
from rank_api.errors import (
    ConfigurationError,
    RankAlreadyExistsError,
    RankNotFoundError,
)
from rank_api.ranks import RANK_FIRESTORE_COLLECTION, Rank

logger = logging.getLogger(__name__)


class RankRepo(Protocol):
    """Interface for rank storage."""

    def get(self, rank_id: str) -> Optional[Rank]:
        ...

    def save(self, rank: Rank) -> None:
        ...

    def rank(self, rank_id: str, score: float) -> Rank:
        ...


class InMemoryRankRepo:
    """Dict-backed repository. Stored records are copies, never shared."""

    def __init__(self):
        self.ranks: Dict[str, Rank] = {}
        self._lock = threading.Lock()

    def get(self, rank_id: str) -> Optional[Rank]:
        with self._lock:
            stored = self.ranks.get(rank_id)
            return copy.deepcopy(stored) if stored else None

    def save(self, rank: Rank) -> None:
        rank_id = rank.get_computed_id()
        with self._lock:
            if rank_id in self.ranks:
                raise RankAlreadyExistsError(rank_id)
            self.ranks[rank_id] = copy.deepcopy(rank)

    def rank(self, rank_id: str, score: float) -> Rank:
        with self._lock:
            stored = self.ranks.get(rank_id)
            if stored is None:
                raise RankNotFoundError(rank_id)
            stored.update_score(score)
            return copy.deepcopy(stored)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.ranks.clear()


class FirestoreRankRepo:
    """
    Firestore-backed implementation. Each rank is one document in the
    collection, keyed by its computed id.
    """

    def __init__(
        self,
        client: firestore.Client,
        collection: str = RANK_FIRESTORE_COLLECTION,
    ):
        self.client = client
        self.collection = collection

    def _doc_ref(self, rank_id: str):
        return self.client.collection(self.collection).document(rank_id)

    def get(self, rank_id: str) -> Optional[Rank]:
        snapshot = self._doc_ref(rank_id).get()
        if not snapshot.exists:
            return None
        return Rank.from_document(snapshot.to_dict())

    def save(self, rank: Rank) -> None:
        rank_id = rank.get_computed_id()
        try:
            self._doc_ref(rank_id).create(rank.to_document())
        except exceptions.AlreadyExists as e:
            raise RankAlreadyExistsError(rank_id) from e

    def rank(self, rank_id: str, score: float) -> Rank:
        """
        Record a score atomically.

        The read and the write of average/total run in one Firestore
        transaction, which Firestore retries when another writer touched the
        document in between.
        """
        transaction = self.client.transaction()
        doc_ref = self._doc_ref(rank_id)

        @firestore.transactional
        def _record_score_transaction(transaction, doc_ref) -> Rank:
            snapshot = doc_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise RankNotFoundError(rank_id)

            rank = Rank.from_document(snapshot.to_dict())
            rank.update_score(score)
            transaction.update(
                doc_ref, {"average": rank.average, "total": rank.total}
            )
            return rank

        return _record_score_transaction(transaction, doc_ref)


def create_firestore_client(settings: Settings) -> firestore.Client:
    if not settings.project_id:
        raise ConfigurationError(
            "PROJECT_ID must be set to use the Firestore backend."
        )
    if settings.firestore_emulator_host:
        # The client library only reads the emulator address from the environment.
        os.environ.setdefault(
            "FIRESTORE_EMULATOR_HOST", settings.firestore_emulator_host
        )
        logger.info(
            "Using Firestore emulator at %s", os.environ["FIRESTORE_EMULATOR_HOST"]
        )
    return firestore.Client(project=settings.project_id)
