"""Async HTTP client for the rating service GraphQL API using httpx.

Provides the teacher search used by the resolver. Uses connection pooling so
a burst of lookups from one page shares a handful of connections.
"""
from __future__ import annotations
import base64
from typing import Optional, Dict, Any, List

import httpx
from pydantic import ValidationError

from profrate.config import Config, get_config
from profrate.rmp.models import CandidateRecord, TeacherSearchResponse
from profrate.utils.logger import log_api_response, log_debug, log_error

TEACHER_SEARCH_QUERY = """
query TeacherSearch($q: TeacherSearchQuery!, $first: Int) {
  newSearch {
    teachers(query: $q, first: $first) {
      edges {
        node {
          id
          legacyId
          firstName
          lastName
          department
          avgRating
          avgDifficulty
          numRatings
          wouldTakeAgainPercent
          school { id name }
        }
      }
    }
  }
}
"""


class RMPRequestError(Exception):
    """Raised when the search endpoint cannot be reached or answers with an error."""


class RMPResponseError(RMPRequestError):
    """Raised when the search endpoint answers with an unexpected payload."""


def encode_school_id(legacy_id: int) -> str:
    """Build the opaque relay identifier the search expects for a school."""
    return base64.b64encode(f"School-{legacy_id}".encode()).decode()


class AsyncRMPClient:
    """Async rating service client with connection pooling."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize async client with configuration."""
        self.config = config or get_config()
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Context manager entry - creates HTTP client."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(float(self.config.rmp_timeout)),
            limits=httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20
            )
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - closes HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> Dict[str, str]:
        """Generate request headers.

        Returns:
            Headers dictionary, with Basic auth when a token is configured
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.config.rmp_auth_token:
            headers["Authorization"] = f"Basic {self.config.rmp_auth_token}"
        return headers

    async def get_school_id(self, school_name: Optional[str] = None) -> str:
        """Return the institution identifier for ``school_name``.

        Only the configured institution is supported, so this never queries
        the service.
        """
        return encode_school_id(self.config.school_legacy_id)

    async def search_teachers(
        self,
        text: str,
        school_id: str,
        *,
        first: Optional[int] = None,
    ) -> List[CandidateRecord]:
        """Search instructors at one school by free text.

        Args:
            text: Free-text query, usually the surname
            school_id: Opaque school identifier from ``get_school_id``
            first: Page size (defaults to config)

        Returns:
            Candidate records in the order the service ranked them

        Raises:
            RMPRequestError: transport failure, non-success status or GraphQL errors
            RMPResponseError: payload does not match the expected shape
        """
        if not self._client:
            raise RuntimeError("AsyncRMPClient not initialized - use 'async with' context")

        if first is None:
            first = self.config.search_page_size

        body: Dict[str, Any] = {
            "query": TEACHER_SEARCH_QUERY,
            "variables": {
                "q": {"text": text, "schoolID": school_id, "fallback": False},
                "first": first,
            },
        }

        try:
            resp = await self._client.post(
                self.config.rmp_graphql_url,
                headers=self._headers(),
                json=body
            )
        except httpx.HTTPError as e:
            log_error("RMP search request failed", error=str(e), query=text)
            raise RMPRequestError(f"RMP GraphQL request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            preview = (resp.text or "")[:200]
            log_error("RMP search returned error status", status_code=resp.status_code, query=text)
            raise RMPRequestError(f"RMP GraphQL HTTP {resp.status_code}: {preview}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise RMPResponseError(f"RMP GraphQL returned invalid JSON: {e}") from e

        try:
            parsed = TeacherSearchResponse.model_validate(payload)
        except ValidationError as e:
            log_error("RMP search payload failed validation", error=str(e), query=text)
            raise RMPResponseError(f"RMP GraphQL returned unexpected payload: {e.error_count()} error(s)") from e

        if parsed.errors and parsed.data is None:
            messages = "; ".join(err.message for err in parsed.errors)
            raise RMPRequestError(f"RMP GraphQL errors: {messages[:200]}")

        candidates = parsed.candidates()
        log_api_response("RMP teacher search", resp.status_code, candidates=len(candidates))
        log_debug("RMP search candidates", query=text,
                  names=[f"{c.first_name} {c.last_name}" for c in candidates])
        return candidates
