"""
Approval Store - manager overrides for review publication.

Maps normalized review ids (hostaway-<sourceId>) to a boolean approval.
Lives for the lifetime of the process; nothing is written to disk.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from flexreviews.utils.dates import to_iso

logger = logging.getLogger(__name__)

SOURCE_INITIAL = "initial"
SOURCE_MANAGER = "manager"


class ApprovalRequestError(ValueError):
    """Raised when an approval mutation request body is malformed."""


@dataclass
class ApprovalRecord:
    """One stored approval decision."""
    value: bool
    updated_at: str
    source: str  # "initial" or "manager"

    def to_dict(self, review_id: str) -> dict:
        return {
            "id": review_id,
            "value": self.value,
            "updatedAt": self.updated_at,
            "source": self.source
        }


@dataclass(frozen=True)
class ApprovalUpdate:
    """Validated body of an approval mutation: {reviewId, approved}."""
    review_id: str
    approved: bool

    @classmethod
    def from_payload(cls, payload) -> "ApprovalUpdate":
        """
        Validate a request body.

        Raises:
            ApprovalRequestError: If reviewId is not a non-empty string or
                approved is not a boolean
        """
        if not isinstance(payload, dict):
            raise ApprovalRequestError("Request body must be a JSON object")

        review_id = payload.get("reviewId")
        if not isinstance(review_id, str) or not review_id.strip():
            raise ApprovalRequestError("Missing or invalid reviewId")

        approved = payload.get("approved")
        if not isinstance(approved, bool):
            raise ApprovalRequestError("Missing or invalid approved flag")

        return cls(review_id=review_id.strip(), approved=approved)


def _now() -> str:
    return to_iso(datetime.now(timezone.utc))


class ApprovalStore:
    """
    Key-value store of approval overrides.

    Reads and writes go through one lock, so a snapshot never observes a
    half-applied write and writes to a key are serialized.
    """

    def __init__(self):
        self._approvals: Dict[str, ApprovalRecord] = {}
        self._lock = threading.Lock()

    def get(self, review_id: str) -> Optional[bool]:
        """Stored approval for review_id, or None if there is none."""
        with self._lock:
            record = self._approvals.get(review_id)
        return record.value if record else None

    def seed_if_absent(self, review_id: str, fallback: Optional[bool]) -> None:
        """
        Record an initial value from the source data.
        No-op if a value already exists or fallback is None.
        """
        if fallback is None:
            return
        with self._lock:
            if review_id in self._approvals:
                return
            self._approvals[review_id] = ApprovalRecord(
                value=bool(fallback),
                updated_at=_now(),
                source=SOURCE_INITIAL
            )
        logger.debug(f"Seeded approval for {review_id}: {fallback}")

    def set(self, review_id: str, value: bool) -> None:
        """Manager override; always replaces any existing value."""
        with self._lock:
            self._approvals[review_id] = ApprovalRecord(
                value=bool(value),
                updated_at=_now(),
                source=SOURCE_MANAGER
            )
        logger.info(f"Approval for {review_id} set to {value}")

    def snapshot(self) -> List[dict]:
        """All records as {id, value, updatedAt, source} dicts."""
        with self._lock:
            items = list(self._approvals.items())
        return [record.to_dict(review_id) for review_id, record in items]

    def __len__(self) -> int:
        with self._lock:
            return len(self._approvals)


# Design Rationale and Trade-offs:
#
# 1. Why an in-memory dict instead of a JSON file?
#    - Approvals only need to last for the process lifetime
#    - No backup or restore path to maintain
#    - Trade-off: Overrides are lost on restart
#
# 2. Why a single lock around every access?
#    - Mutations can arrive from concurrent request handlers
#    - snapshot() copies under the lock, so it never sees a partial write
#    - Trade-off: Readers serialize with writers, negligible for dict ops
#
# 3. Why seed_if_absent separately from set?
#    - Re-seeding from source data must not undo a manager decision
#    - The record source ("initial" or "manager") shows where a value came from
#    - Trade-off: Two write paths with different semantics
#
# 4. Why validate request bodies here?
#    - The store owns the shape of an approval update
#    - ApprovalRequestError subclasses ValueError for callers that catch broadly
