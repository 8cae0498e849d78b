"""User selections (filter, followed entities) holding entity references."""

from __future__ import annotations

from typing import Iterable, Iterator

from vatfeed.domain.entities import TrackedEntity


class EntitySelection:
    """Ordered set of entities, compared by reference.

    Selections survive polls because the reconciler keeps entity references
    stable; disposed entities are removed via :meth:`remove_entities`.
    """

    def __init__(self, name: str, entities: Iterable[TrackedEntity] | None = None) -> None:
        self.name = name
        self._entities: list[TrackedEntity] = []
        for entity in entities or ():
            self.add(entity)

    def add(self, entity: TrackedEntity) -> bool:
        if self.contains(entity):
            return False
        self._entities.append(entity)
        return True

    def remove(self, entity: TrackedEntity) -> bool:
        before = len(self._entities)
        self._entities = [e for e in self._entities if e is not entity]
        return len(self._entities) != before

    def remove_entities(self, entities: Iterable[TrackedEntity]) -> None:
        for entity in entities:
            self.remove(entity)

    def contains(self, entity: TrackedEntity) -> bool:
        return any(e is entity for e in self._entities)

    def find_by_object_id(self, object_id: int) -> TrackedEntity | None:
        for entity in self._entities:
            if entity.object_id == object_id:
                return entity
        return None

    def __contains__(self, entity: object) -> bool:
        return any(e is entity for e in self._entities)

    def __iter__(self) -> Iterator[TrackedEntity]:
        return iter(list(self._entities))

    def __len__(self) -> int:
        return len(self._entities)


__all__ = ["EntitySelection"]
