"""Stable object identities and callsign normalization."""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass
from typing import Any, Iterator

_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]")


def normalize_callsign(callsign: str | None) -> str | None:
    """Uppercase a callsign and strip everything that is not A-Z or 0-9.

    All callsign lookups and entity comparisons go through this rule, so
    ``"dlh-123"`` and ``"DLH123"`` refer to the same entity.
    """

    if not callsign:
        return None
    normalized = _NON_ALNUM_RE.sub("", callsign.strip().upper())
    return normalized or None


@dataclass
class NetworkIdentity:
    """Identity of a client on the network."""

    object_id: int | None = None
    id: str | None = None
    callsign: str | None = None
    raw_callsign: str | None = None

    @classmethod
    def from_callsign(cls, callsign: str | None, id: str | None = None) -> "NetworkIdentity":
        raw = callsign.strip().upper() if callsign else None
        return cls(id=id, callsign=normalize_callsign(callsign), raw_callsign=raw or None)

    def same_as(self, other: "NetworkIdentity") -> bool:
        if self.object_id is not None and self.object_id == other.object_id:
            return True
        return self.callsign is not None and self.callsign == other.callsign


class IdentityRegistry:
    """Allocates process-unique object ids and keeps an id -> object table.

    Ids come from a monotonically increasing counter and are never reused,
    even after the object has been released. ``start`` makes allocation
    deterministic in tests.
    """

    def __init__(self, start: int = 0) -> None:
        self._counter: Iterator[int] = itertools.count(start)
        self._objects: dict[int, Any] = {}

    def next_id(self) -> int:
        """Allocate an id without registering an object."""

        return next(self._counter)

    def register(self, obj: Any) -> int:
        if obj is None:
            raise ValueError("Cannot register None")
        object_id = self.next_id()
        self._objects[object_id] = obj
        return object_id

    def get(self, object_id: int | None) -> Any:
        if object_id is None:
            return None
        return self._objects.get(object_id)

    def release(self, object_id: int | None) -> bool:
        if object_id is None:
            return False
        return self._objects.pop(object_id, None) is not None

    def __contains__(self, object_id: object) -> bool:
        return object_id in self._objects

    def __len__(self) -> int:
        return len(self._objects)


__all__ = ["IdentityRegistry", "NetworkIdentity", "normalize_callsign"]
