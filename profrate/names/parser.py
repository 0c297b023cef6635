"""Turn loosely formatted instructor names into structured identities.

Schedule pages list instructors in several shapes:
- "Smith, John" (directory format)
- "J. Smith" or "J Smith" (initial plus surname)
- "John Smith" or "Mohammad Sadoghi Hamedani" (given name plus surname)
- "Smith" (surname only)
- "Staff" / "TBA" (placeholders, never looked up)

The heuristics are tried most-specific first, so compound surnames and
comma-separated directory names both come out right without a grammar.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SKIP_NAMES = frozenset({"the staff", "staff", "tba", "tbd", "instructor"})


@dataclass(frozen=True)
class ParsedIdentity:
    """Structured identity derived from one raw display string.

    Attributes:
        display: Whitespace-collapsed original text.
        first: Given name token, possibly empty.
        first_initial: Single upper-cased letter, possibly empty.
        last: Surname, possibly several words.
        skip: True for placeholder names that must not be looked up.
    """

    display: str
    first: str = ""
    first_initial: str = ""
    last: str = ""
    skip: bool = False

    def to_dict(self) -> dict:
        return {
            "display": self.display,
            "first": self.first,
            "firstInitial": self.first_initial,
            "last": self.last,
            "skip": self.skip,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ParsedIdentity:
        return cls(
            display=str(data.get("display") or ""),
            first=str(data.get("first") or ""),
            first_initial=str(data.get("firstInitial") or ""),
            last=str(data.get("last") or ""),
            skip=bool(data.get("skip", False)),
        )


def clean_display_name(raw: Optional[str]) -> str:
    """Collapse all whitespace runs (non-breaking spaces included) and trim."""
    return " ".join((raw or "").split())


def _bare_initial(token: str) -> str:
    """Return the letter if ``token`` is "X" or "X." with X in A-Z, else an empty string."""
    stripped = token.replace(".", "", 1)
    if len(stripped) == 1 and stripped.isascii() and stripped.isalpha():
        return stripped
    return ""


def parse_instructor_name(raw: Optional[str]) -> Optional[ParsedIdentity]:
    """Parse a scraped instructor name.

    Args:
        raw: Text content of the instructor element.

    Returns:
        A ``ParsedIdentity`` or ``None`` when nothing is left after cleaning.

    Examples:
        >>> parse_instructor_name("Smith, J.").first
        'J.'
        >>> parse_instructor_name("J Smith").first_initial
        'J'
        >>> parse_instructor_name("Staff").skip
        True
    """
    name = clean_display_name(raw)
    if not name:
        return None

    if name.lower() in SKIP_NAMES:
        return ParsedIdentity(display=name, skip=True)

    # "Last, First Middle"
    if "," in name:
        parts = [p.strip() for p in name.split(",")]
        first_tokens = parts[1].split() if len(parts) > 1 else []
        first = first_tokens[0] if first_tokens else ""
        return ParsedIdentity(
            display=name,
            first=first,
            first_initial=first[:1].upper(),
            last=parts[0],
        )

    tokens = name.split(" ")

    if len(tokens) >= 2:
        # "J. Smith" keeps only the initial
        initial = _bare_initial(tokens[0])
        if initial:
            return ParsedIdentity(
                display=name,
                first_initial=initial.upper(),
                last=" ".join(tokens[1:]),
            )

        return ParsedIdentity(
            display=name,
            first=tokens[0],
            first_initial=tokens[0][:1].upper(),
            last=" ".join(tokens[1:]),
        )

    return ParsedIdentity(display=name, last=name)
