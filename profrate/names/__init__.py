"""Instructor name parsing."""

from .parser import ParsedIdentity, SKIP_NAMES, clean_display_name, parse_instructor_name

__all__ = [
    "ParsedIdentity",
    "SKIP_NAMES",
    "clean_display_name",
    "parse_instructor_name",
]
