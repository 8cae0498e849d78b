"""Merge freshly parsed entities into the tracked collections.

Matched entities are updated in place so that any reference held by a UI,
filter or "followed" selection stays valid and sees the new values after a
poll.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence, TypeVar

from vatfeed.domain.entities import TrackedEntity
from vatfeed.domain.identity import IdentityRegistry

logger = logging.getLogger("vatfeed.services.reconciler")

E = TypeVar("E", bound=TrackedEntity)

DisposeHook = Callable[[Sequence[TrackedEntity]], None]


def find_by_callsign_first(entities: Sequence[E], callsign: str | None) -> int | None:
    """Index of the first entity with the given normalized callsign."""

    if not callsign:
        return None
    for index, entity in enumerate(entities):
        if entity.callsign == callsign:
            return index
    return None


class EntityReconciler:
    """Stable-identity merge of an incoming batch into an existing collection."""

    def __init__(self, registry: IdentityRegistry | None = None) -> None:
        self.registry = registry if registry is not None else IdentityRegistry()
        self._dispose_hooks: list[DisposeHook] = []

    def add_dispose_hook(self, hook: DisposeHook) -> None:
        """Called with the entities dropped by a reconciliation pass."""

        self._dispose_hooks.append(hook)

    def track(self, entity: E) -> E:
        """Give a new entity its object id."""

        if entity.identity.object_id is None:
            entity.identity.object_id = self.registry.register(entity)
        return entity

    def dispose(self, entities: Sequence[TrackedEntity]) -> None:
        if not entities:
            return
        for hook in self._dispose_hooks:
            hook(entities)
        for entity in entities:
            if entity.dispose():
                self.registry.release(entity.object_id)

    def reconcile(self, existing: Sequence[E], incoming: Sequence[E]) -> list[E]:
        """Return the tracked collection for this cycle.

        The result has one entry per incoming record, in incoming order.
        Existing entities matching an incoming callsign (first match wins) are
        updated and kept; unmatched incoming ones are newly tracked; existing
        entities without a match are disposed.
        """

        if not incoming:
            return list(existing)
        if not existing:
            return [self.track(entity) for entity in incoming]

        remaining = list(existing)
        result: list[E] = []
        for new_entity in incoming:
            index = find_by_callsign_first(remaining, new_entity.callsign)
            if index is None:
                result.append(self.track(new_entity))
                continue
            tracked = remaining.pop(index)
            tracked.update(new_entity)
            result.append(tracked)

        if remaining:
            logger.debug("Disposing %s vanished entities", len(remaining))
        self.dispose(remaining)
        return result


__all__ = ["EntityReconciler", "find_by_callsign_first"]
