"""Exceptions raised while reading and parsing the network feed."""

from __future__ import annotations


class FeedError(Exception):
    """Base class for feed failures."""


class FeedTransportError(FeedError):
    """The feed could not be fetched (unreachable, timeout, non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FeedParseError(FeedError):
    """The payload is structurally invalid, e.g. no usable UPDATE timestamp."""


__all__ = ["FeedError", "FeedParseError", "FeedTransportError"]
