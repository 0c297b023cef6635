"""Resolve a parsed instructor identity to a rating record.

One search request per call, scored locally. Every outcome, transport
failures included, comes back as a result value; nothing is raised past
``InstructorResolver.resolve``.
"""

from __future__ import annotations

from typing import Optional

import httpx

from profrate.config import Config, get_config
from profrate.matching.scoring import ScoringWeights, pick_best_match
from profrate.names.parser import ParsedIdentity
from profrate.results import (
    FailureKind,
    ResolutionFailure,
    ResolutionResult,
    ResolutionSuccess,
)
from profrate.rmp.async_client import AsyncRMPClient, RMPRequestError
from profrate.rmp.models import CandidateRecord
from profrate.utils.logger import log_error, log_resolution


class InstructorResolver:
    """Match instructor identities against the rating service.

    Usage:
        async with AsyncRMPClient() as client:
            resolver = InstructorResolver(client)
            result = await resolver.resolve(parse_instructor_name("J. Smith"))
    """

    def __init__(
        self,
        client: AsyncRMPClient,
        config: Optional[Config] = None,
        weights: Optional[ScoringWeights] = None,
    ):
        self.client = client
        self.config = config or get_config()
        self.weights = weights or ScoringWeights.from_config(self.config)

    def _to_success(self, best: CandidateRecord, score: float) -> ResolutionSuccess:
        external_id = str(best.external_id) if best.external_id not in (None, "") else None
        profile_url = f"{self.config.rmp_profile_base_url}/{external_id}" if external_id else None

        would_take_again = best.would_take_again_percent
        # The service reports -1 when too few students answered.
        if would_take_again is not None and would_take_again < 0:
            would_take_again = None

        return ResolutionSuccess(
            first_name=best.first_name,
            last_name=best.last_name,
            rating=float(best.average_rating or 0.0),
            difficulty=best.average_difficulty,
            would_take_again=would_take_again,
            num_ratings=best.num_ratings,
            department=best.department,
            profile_url=profile_url,
            external_id=external_id,
            score=round(score, 2),
        )

    async def resolve(self, identity: Optional[ParsedIdentity]) -> ResolutionResult:
        """Search for ``identity`` and return the best match or a failure."""
        if identity is None or identity.skip or not identity.last:
            return ResolutionFailure(FailureKind.BAD_IDENTITY)

        query = identity.last or identity.display

        try:
            school_id = await self.client.get_school_id(self.config.school_name)
            candidates = await self.client.search_teachers(
                query, school_id, first=self.config.search_page_size
            )
        except (RMPRequestError, httpx.HTTPError, RuntimeError) as e:
            log_error("Instructor lookup failed", instructor=identity.display, error=str(e))
            return ResolutionFailure(FailureKind.UPSTREAM_FAILURE, str(e))

        if not candidates:
            log_resolution(identity.display, False, reason=FailureKind.NO_CANDIDATES.value)
            return ResolutionFailure(FailureKind.NO_CANDIDATES)

        match = pick_best_match(identity, candidates, self.weights)
        if match is None:
            log_resolution(identity.display, False,
                           reason=FailureKind.NO_RELEVANT_MATCH.value,
                           candidates=len(candidates))
            return ResolutionFailure(FailureKind.NO_RELEVANT_MATCH)

        best, score = match
        log_resolution(identity.display, True,
                       matched=f"{best.first_name} {best.last_name}",
                       score=round(score, 2),
                       candidates=len(candidates))
        return self._to_success(best, score)
