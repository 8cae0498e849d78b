"""Heuristic deciding whether a flight is on the ground.

The feed carries no on-ground flag, so the decision is pieced together from
groundspeed, height above terrain and airport proximity. Groundspeed 0 is
reported by some clients while airborne, which is why it is not trusted on
its own.
"""

from __future__ import annotations

import math
from typing import Any

from vatfeed.config import settings


def _is_number(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


class OperatingStateClassifier:
    """Classify entities as grounded or airborne."""

    def __init__(
        self,
        *,
        speed_threshold: float | None = None,
        height_threshold: float | None = None,
    ) -> None:
        self.speed_threshold = (
            speed_threshold
            if speed_threshold is not None
            else settings.grounded_speed_threshold
        )
        self.height_threshold = (
            height_threshold
            if height_threshold is not None
            else settings.grounded_height_threshold
        )

    def classify(self, entity: Any) -> bool:
        groundspeed = entity.groundspeed
        if _is_number(groundspeed):
            if 1 <= groundspeed <= self.speed_threshold:
                return True
            if groundspeed > self.speed_threshold:
                return False

        height = entity.height()
        if _is_number(height):
            return height <= self.height_threshold

        # TODO: the vicinity result is not used below; decide whether being
        # close to an endpoint airport should count as grounded.
        if entity.has_flight_plan():
            entity.is_in_airport_vicinity()

        # unreliable, some clients report 0 while airborne
        speed = groundspeed if _is_number(groundspeed) else 0
        return speed <= self.speed_threshold

    def is_grounded(self, entity: Any) -> bool:
        """Cached classification, reset whenever the entity is updated."""

        cached = getattr(entity, "_is_grounded", None)
        if cached is not None:
            return cached
        grounded = self.classify(entity)
        entity._is_grounded = grounded
        return grounded


__all__ = ["OperatingStateClassifier"]
