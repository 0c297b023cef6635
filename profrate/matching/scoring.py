"""Score rating-service candidates against a parsed instructor identity.

A candidate must share a surname relation (equality or containment) with
the query before it earns any points. First name and initial bonuses only
separate instructors who share a surname, and a capped logarithmic
popularity term breaks the remaining ties in favour of established
profiles.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from profrate.names.parser import ParsedIdentity
from profrate.rmp.models import CandidateRecord

if TYPE_CHECKING:
    from profrate.config import Config

_RE_NON_ALPHA = re.compile(r"[^a-z]")
_RE_WS = re.compile(r"\s+")


@dataclass(frozen=True)
class ScoringWeights:
    """Tunable scoring constants."""

    exact_last_name: float = 50.0
    partial_last_name: float = 35.0
    first_name: float = 20.0
    first_initial: float = 10.0
    popularity_cap: float = 10.0
    popularity_scale: float = 5.0

    @classmethod
    def from_config(cls, config: Config) -> ScoringWeights:
        return cls(
            exact_last_name=config.score_exact_last_name,
            partial_last_name=config.score_partial_last_name,
            first_name=config.score_first_name,
            first_initial=config.score_first_initial,
            popularity_cap=config.score_popularity_cap,
            popularity_scale=config.score_popularity_scale,
        )


DEFAULT_WEIGHTS = ScoringWeights()


def normalize_name(text: Optional[str]) -> str:
    """Lower-case and drop every character outside a-z."""
    if not text:
        return ""
    return _RE_NON_ALPHA.sub("", text.lower())


def build_last_name_candidates(last: Optional[str]) -> List[str]:
    """Surname variants to try: the full surname plus its first and final words.

    >>> build_last_name_candidates("Sadoghi Hamedani")
    ['Sadoghi Hamedani', 'Hamedani', 'Sadoghi']
    """
    cleaned = _RE_WS.sub(" ", (last or "").strip())
    cleaned = cleaned.replace(".", "").replace(",", "").strip()
    if not cleaned:
        return []

    out = [cleaned]
    parts = cleaned.split(" ")
    if len(parts) >= 2:
        for part in (parts[-1], parts[0]):
            if part not in out:
                out.append(part)
    return out


def popularity_bonus(num_ratings: int, weights: ScoringWeights = DEFAULT_WEIGHTS) -> float:
    n = max(0, num_ratings or 0)
    return min(weights.popularity_cap, math.log10(n + 1) * weights.popularity_scale)


def _last_name_score(
    candidate_last: str, query_lasts: Iterable[str], weights: ScoringWeights
) -> Optional[float]:
    """Best surname tier across the query variants, ``None`` if none relate."""
    best: Optional[float] = None
    for ql in query_lasts:
        if not ql:
            continue
        if candidate_last == ql:
            tier = weights.exact_last_name
        elif candidate_last in ql or ql in candidate_last:
            tier = weights.partial_last_name
        else:
            continue
        best = tier if best is None else max(best, tier)
    return best


def score_candidate(
    identity: ParsedIdentity,
    candidate: CandidateRecord,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> Optional[float]:
    """Score one candidate, or return ``None`` when the surname gate rejects it."""
    candidate_last = normalize_name(candidate.last_name.strip())
    query_lasts = [normalize_name(s) for s in build_last_name_candidates(identity.last)]
    score = _last_name_score(candidate_last, query_lasts, weights)
    if score is None:
        return None

    candidate_first = candidate.first_name.strip()
    query_first = normalize_name(identity.first)
    if query_first and normalize_name(candidate_first) == query_first:
        score += weights.first_name

    query_initial = identity.first_initial.upper()
    if query_initial and candidate_first and candidate_first[0].upper() == query_initial:
        score += weights.first_initial

    score += popularity_bonus(candidate.num_ratings, weights)
    return score


def pick_best_match(
    identity: ParsedIdentity,
    candidates: Iterable[CandidateRecord],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> Optional[Tuple[CandidateRecord, float]]:
    """Return the highest scoring candidate and its score.

    Ties keep the first candidate seen. ``None`` means no candidate passed
    the surname gate.
    """
    best: Optional[Tuple[CandidateRecord, float]] = None
    for candidate in candidates:
        score = score_candidate(identity, candidate, weights)
        if score is None:
            continue
        if best is None or score > best[1]:
            best = (candidate, score)
    return best
