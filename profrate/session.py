"""Per-session rating cache with in-flight request coalescing.

A page re-render can fire dozens of lookups for the same few instructors
within milliseconds. ``RatingSession`` guarantees at most one outstanding
request per identity key and memoizes every outcome, failures included,
for the rest of the session.

The session runs on a single event loop. ``resolve_cached`` is a plain
(non-async) method, so the check-then-register sequence below has no
suspension point and needs no lock.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from profrate.messaging import ChannelClosedError, RatingChannel
from profrate.names.parser import ParsedIdentity
from profrate.results import FailureKind, ResolutionFailure, ResolutionResult
from profrate.utils.logger import log_cache_event, log_error, log_info

# Whitespace is collapsed out of every key part, and str.split() treats
# \x1f as whitespace, so the delimiter can never occur inside a part.
KEY_DELIMITER = "\x1f"


def _collapse(text: Optional[str]) -> str:
    return " ".join((text or "").split())


def identity_key(identity: ParsedIdentity) -> str:
    """Stable cache key for one instructor identity.

    Accents are kept as-is; only case and whitespace are normalized.
    """
    parts = (identity.first_initial, identity.last, identity.display)
    return KEY_DELIMITER.join(_collapse(p) for p in parts).lower()


class RatingSession:
    """Memoizing, deduplicating front of a ``RatingChannel``.

    Owns the two session caches (completed results and pending lookups);
    nothing else writes to them.

    Usage:
        async with RatingSession(channel) as session:
            result = await session.resolve_cached(identity)
    """

    def __init__(self, channel: RatingChannel):
        self._channel = channel
        self._completed: Dict[str, ResolutionResult] = {}
        self._pending: Dict[str, asyncio.Task] = {}
        self._closed = False
        self.lookups = 0
        self.hits = 0
        self.coalesced = 0
        self.external_calls = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def resolve_cached(self, identity: ParsedIdentity) -> "asyncio.Future[ResolutionResult]":
        """Return an awaitable yielding the resolution for ``identity``.

        Must be called from a running event loop. Awaiting callers that get
        cancelled do not cancel the underlying lookup.
        """
        if self._closed:
            raise RuntimeError("RatingSession is closed")

        loop = asyncio.get_running_loop()
        key = identity_key(identity)
        self.lookups += 1

        if key in self._completed:
            self.hits += 1
            log_cache_event("hit", key)
            return self._done(loop, self._completed[key])

        pending = self._pending.get(key)
        if pending is not None:
            self.coalesced += 1
            log_cache_event("coalesced", key)
            return asyncio.shield(pending)

        if not self._channel.is_available():
            result = ResolutionFailure(FailureKind.ENVIRONMENT_INVALIDATED)
            self._completed[key] = result
            log_cache_event("stored", key, reason=result.kind.value)
            return self._done(loop, result)

        log_cache_event("miss", key)
        task = loop.create_task(self._lookup(key, identity))
        self._pending[key] = task
        return asyncio.shield(task)

    async def _lookup(self, key: str, identity: ParsedIdentity) -> ResolutionResult:
        self.external_calls += 1
        try:
            result = await self._channel.send(identity)
        except ChannelClosedError:
            result = ResolutionFailure(FailureKind.ENVIRONMENT_INVALIDATED)
        except Exception as e:
            log_error("Rating lookup failed", instructor=identity.display, error=str(e))
            result = ResolutionFailure(FailureKind.UPSTREAM_FAILURE, str(e) or type(e).__name__)

        self._completed[key] = result
        self._pending.pop(key, None)
        log_cache_event("stored", key, ok=result.ok)
        return result

    @staticmethod
    def _done(loop: asyncio.AbstractEventLoop, result: ResolutionResult) -> asyncio.Future:
        future = loop.create_future()
        future.set_result(result)
        return future

    def cached_result(self, identity: ParsedIdentity) -> Optional[ResolutionResult]:
        """Completed result for ``identity`` if one exists, without triggering a lookup."""
        return self._completed.get(identity_key(identity))

    def is_pending(self, identity: ParsedIdentity) -> bool:
        return identity_key(identity) in self._pending

    def get_stats(self) -> Dict[str, Any]:
        """Get session cache statistics."""
        served = self.hits + self.coalesced
        return {
            "lookups": self.lookups,
            "hits": self.hits,
            "coalesced": self.coalesced,
            "external_calls": self.external_calls,
            "size": len(self._completed),
            "pending": len(self._pending),
            "hit_rate_percent": (served / self.lookups * 100) if self.lookups else 0.0,
        }

    async def aclose(self) -> None:
        """End the session: let in-flight lookups finish, then drop both caches."""
        if self._closed:
            return
        self._closed = True
        if self._pending:
            await asyncio.gather(*self._pending.values(), return_exceptions=True)
        log_info("Rating session closed", **self.get_stats())
        self._completed.clear()
        self._pending.clear()
