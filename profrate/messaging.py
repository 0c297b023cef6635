"""Messaging boundary between the page layer and the resolver.

The page side sends ``{"type": "GET_RMP", "prof": {...}}`` and receives
``{"ok": True, ...}`` or ``{"ok": False, "error": ...}``. ``RatingChannel``
is what the session cache talks to; ``InProcessChannel`` carries messages to
a resolver living in the same process.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, Optional

from profrate.names.parser import ParsedIdentity
from profrate.resolver import InstructorResolver
from profrate.results import (
    FailureKind,
    ResolutionFailure,
    ResolutionResult,
    result_from_response,
)
from profrate.utils.logger import log_debug, log_error

GET_RATING = "GET_RMP"


class ChannelClosedError(RuntimeError):
    """Raised when sending over a channel that has been torn down."""


def build_rating_request(identity: ParsedIdentity, school_name: Optional[str] = None) -> Dict[str, Any]:
    message: Dict[str, Any] = {"type": GET_RATING, "prof": identity.to_dict()}
    if school_name:
        message["schoolName"] = school_name
    return message


async def handle_rating_request(
    message: Any, resolver: InstructorResolver
) -> Optional[Dict[str, Any]]:
    """Answer one rating request.

    Returns ``None`` for messages of another type so other handlers can
    claim them.
    """
    if not isinstance(message, dict) or message.get("type") != GET_RATING:
        return None

    prof = message.get("prof")
    if not isinstance(prof, dict):
        return ResolutionFailure(FailureKind.BAD_IDENTITY).to_response()

    identity = ParsedIdentity.from_dict(prof)
    try:
        result = await resolver.resolve(identity)
    except Exception as e:
        log_error("Rating request handler failed", instructor=identity.display, error=str(e))
        return ResolutionFailure(FailureKind.UPSTREAM_FAILURE, str(e)).to_response()

    return result.to_response()


class RatingChannel(abc.ABC):
    """Transport from the page layer to a resolver."""

    @abc.abstractmethod
    def is_available(self) -> bool:
        """False once the hosting environment has torn the channel down."""

    @abc.abstractmethod
    async def send(self, identity: ParsedIdentity) -> ResolutionResult:
        """Deliver one rating request and decode its response."""


class InProcessChannel(RatingChannel):
    """Channel to a resolver running in the same event loop."""

    def __init__(self, resolver: InstructorResolver, school_name: Optional[str] = None):
        self._resolver = resolver
        self._school_name = school_name
        self._open = True

    def is_available(self) -> bool:
        return self._open

    def close(self) -> None:
        self._open = False

    async def send(self, identity: ParsedIdentity) -> ResolutionResult:
        if not self._open:
            raise ChannelClosedError("Extension context invalidated")

        message = build_rating_request(identity, self._school_name)
        log_debug("Sending rating request", instructor=identity.display)
        response = await handle_rating_request(message, self._resolver)
        return result_from_response(response)
