"""Scanner → parser → session → presenter pipeline for one page."""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Set, Tuple

from profrate.config import Config, get_config
from profrate.names.parser import ParsedIdentity, parse_instructor_name
from profrate.page.presenter import Annotation, build_annotation
from profrate.page.scanner import InstructorMention, find_instructor_mentions
from profrate.session import RatingSession, identity_key
from profrate.utils.logger import log_debug, log_info


class PageAnnotator:
    """Annotate instructor names using a shared ``RatingSession``.

    Safe to call repeatedly for the same page (for example after every
    re-render): repeated identities are served by the session cache.
    """

    def __init__(self, session: RatingSession, config: Optional[Config] = None):
        self.session = session
        self.config = config or get_config()

    def _identities(self, mentions: Iterable[InstructorMention]) -> List[ParsedIdentity]:
        seen: Set[Tuple[int, str]] = set()
        identities: List[ParsedIdentity] = []
        for mention in mentions:
            identity = parse_instructor_name(mention.raw_name)
            if identity is None or identity.skip:
                log_debug("Skipping instructor name", raw=mention.raw_name)
                continue
            # One badge per instructor per result block
            marker = (mention.container_index, identity_key(identity))
            if marker in seen:
                continue
            seen.add(marker)
            identities.append(identity)
        return identities

    async def _annotate(self, identities: List[ParsedIdentity]) -> List[Annotation]:
        results = await asyncio.gather(
            *(self.session.resolve_cached(identity) for identity in identities)
        )
        return [
            build_annotation(identity, result, self.config)
            for identity, result in zip(identities, results)
        ]

    async def annotate_html(self, html: str) -> List[Annotation]:
        mentions = find_instructor_mentions(html)
        identities = self._identities(mentions)
        log_info("Page scanned", mentions=len(mentions), instructors=len(identities))
        return await self._annotate(identities)

    async def annotate_names(self, names: Iterable[str]) -> List[Annotation]:
        mentions = [InstructorMention(index, name) for index, name in enumerate(names)]
        return await self._annotate(self._identities(mentions))
