"""Render resolution results as badge annotations.

A matched instructor gets the rating as badge text, a small table of
rating, difficulty and would-take-again, and a profile link. Anything else
degrades to an "N/A" badge linking to a web search for the instructor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urlencode

from profrate.config import Config, get_config
from profrate.names.parser import ParsedIdentity
from profrate.results import ResolutionResult
from profrate.session import identity_key

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class Annotation:
    """Everything needed to draw one badge and its tooltip."""

    key: str
    display: str
    badge_text: str
    title: str
    rows: List[Tuple[str, str]] = field(default_factory=list)
    link: Optional[str] = None
    found: bool = False

    def to_dict(self) -> dict:
        return {
            "display": self.display,
            "badge": self.badge_text,
            "title": self.title,
            "rows": [list(row) for row in self.rows],
            "link": self.link,
            "found": self.found,
        }


def _fmt(value: Optional[float], pattern: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "n/a"
    return pattern.format(value)


def fallback_search_url(display: str, config: Optional[Config] = None) -> str:
    config = config or get_config()
    text = f"{display} Rate My Professor {config.school_name}"
    return f"{config.fallback_search_url}?{urlencode({'q': text})}"


def build_annotation(
    identity: ParsedIdentity,
    result: ResolutionResult,
    config: Optional[Config] = None,
) -> Annotation:
    config = config or get_config()
    key = identity_key(identity)

    if not result.ok:
        return Annotation(
            key=key,
            display=identity.display,
            badge_text=NOT_AVAILABLE,
            title=identity.display,
            rows=[("Not found", "Click to search on Google")],
            link=fallback_search_url(identity.display, config),
        )

    if result.first_name and result.last_name:
        title = f"{result.first_name} {result.last_name}"
    else:
        title = identity.display

    rating = _fmt(result.rating, "{:.1f}")
    return Annotation(
        key=key,
        display=identity.display,
        badge_text=rating,
        title=title,
        rows=[
            ("Rating", rating),
            ("Difficulty", _fmt(result.difficulty, "{:.1f}")),
            ("Would Take Again", _fmt(result.would_take_again, "{:.0f}%")),
        ],
        link=result.profile_url,
        found=True,
    )
