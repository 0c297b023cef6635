"""Find instructor names on a schedule results page."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from bs4 import BeautifulSoup

INSTRUCTOR_CONTAINER_SELECTOR = ".course-details .results-instructor"


@dataclass(frozen=True)
class InstructorMention:
    """One instructor link and the result block it belongs to."""

    container_index: int
    raw_name: str


def find_instructor_mentions(
    html: str, selector: str = INSTRUCTOR_CONTAINER_SELECTOR
) -> List[InstructorMention]:
    """Return every instructor anchor inside the matched containers, in document order."""
    soup = BeautifulSoup(html or "", "html.parser")
    mentions: List[InstructorMention] = []
    for index, container in enumerate(soup.select(selector)):
        for anchor in container.find_all("a"):
            mentions.append(InstructorMention(index, anchor.get_text()))
    return mentions
