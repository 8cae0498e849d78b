"""Feed read status codes reported to consumers."""

from __future__ import annotations

from enum import Enum


class FeedStatus(str, Enum):
    """Outcome of the last poll cycle."""

    INIT = "INIT"
    OK = "OK"
    NO_NEW_DATA = "NO_NEW_DATA"
    READ_FAILED = "READ_FAILED"
    PARSING_FAILED = "PARSING_FAILED"


_STATUS_INFO = {
    FeedStatus.INIT: "Init",
    FeedStatus.OK: "Data loaded",
    FeedStatus.NO_NEW_DATA: "No new data",
    FeedStatus.READ_FAILED: "Read failed",
    FeedStatus.PARSING_FAILED: "Parsing failed",
}


def status_to_info(status: FeedStatus | None) -> str:
    """Human readable text for a status code."""

    if status is None:
        return "Unknown, check log"
    return _STATUS_INFO.get(status, "Unknown, check log")


DEFAULT_STATUS: FeedStatus = FeedStatus.INIT

__all__ = ["DEFAULT_STATUS", "FeedStatus", "status_to_info"]
