"""Resolution results exchanged between the resolver, the session cache and the page.

A resolution either succeeds with a rating record or fails with one of the
``FailureKind`` categories. Both variants render to the plain response dict
used across the messaging boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class FailureKind(Enum):
    """Why a resolution produced no rating."""

    BAD_IDENTITY = "bad_identity"
    NO_CANDIDATES = "no_candidates"
    NO_RELEVANT_MATCH = "no_relevant_match"
    UPSTREAM_FAILURE = "upstream_failure"
    ENVIRONMENT_INVALIDATED = "environment_invalidated"


DEFAULT_MESSAGES = {
    FailureKind.BAD_IDENTITY: "Bad professor name",
    FailureKind.NO_CANDIDATES: "No teacher candidates",
    FailureKind.NO_RELEVANT_MATCH: "No teacher match",
    FailureKind.UPSTREAM_FAILURE: "Rating service unavailable",
    FailureKind.ENVIRONMENT_INVALIDATED: "Extension context invalidated",
}


@dataclass(frozen=True)
class ResolutionSuccess:
    """Best matching rating record for an instructor."""

    first_name: str
    last_name: str
    rating: float
    difficulty: Optional[float] = None
    would_take_again: Optional[float] = None
    num_ratings: int = 0
    department: Optional[str] = None
    profile_url: Optional[str] = None
    external_id: Optional[str] = None
    score: Optional[float] = None

    ok = True

    def to_response(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "rating": self.rating,
            "difficulty": self.difficulty,
            "wouldTakeAgain": self.would_take_again,
            "numRatings": self.num_ratings,
            "department": self.department,
            "profileUrl": self.profile_url,
            "firstName": self.first_name,
            "lastName": self.last_name,
        }


@dataclass(frozen=True)
class ResolutionFailure:
    """Structured failure; never raised, always returned."""

    kind: FailureKind
    error: str = ""

    ok = False

    def __post_init__(self):
        if not self.error:
            object.__setattr__(self, "error", DEFAULT_MESSAGES[self.kind])

    def to_response(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.error, "reason": self.kind.value}


ResolutionResult = Union[ResolutionSuccess, ResolutionFailure]


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def result_from_response(response: Optional[Dict[str, Any]]) -> ResolutionResult:
    """Decode a messaging response dict back into a result.

    A missing or malformed response counts as an upstream failure.
    """
    if not isinstance(response, dict):
        return ResolutionFailure(FailureKind.UPSTREAM_FAILURE, "Empty response from resolver")

    if not response.get("ok"):
        try:
            kind = FailureKind(response.get("reason"))
        except ValueError:
            kind = FailureKind.UPSTREAM_FAILURE
        return ResolutionFailure(kind, str(response.get("error") or ""))

    return ResolutionSuccess(
        first_name=str(response.get("firstName") or ""),
        last_name=str(response.get("lastName") or ""),
        rating=_optional_float(response.get("rating")) or 0.0,
        difficulty=_optional_float(response.get("difficulty")),
        would_take_again=_optional_float(response.get("wouldTakeAgain")),
        num_ratings=int(response.get("numRatings") or 0),
        department=response.get("department"),
        profile_url=response.get("profileUrl"),
    )
