"""Schedule page scanning and annotation rendering."""

from .presenter import Annotation, build_annotation, fallback_search_url
from .scanner import InstructorMention, find_instructor_mentions

__all__ = [
    "Annotation",
    "InstructorMention",
    "build_annotation",
    "fallback_search_url",
    "find_instructor_mentions",
]
