"""Candidate scoring for instructor identity resolution."""

from .scoring import (
    ScoringWeights,
    build_last_name_candidates,
    normalize_name,
    pick_best_match,
    score_candidate,
)

__all__ = [
    "ScoringWeights",
    "build_last_name_candidates",
    "normalize_name",
    "pick_best_match",
    "score_candidate",
]
