"""Bounded, deduplicated position history for moving entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Iterator

from vatfeed.config import settings
from vatfeed.domain.position import same_location

if TYPE_CHECKING:  # pragma: no cover
    from vatfeed.domain.entities import Flight


@dataclass(frozen=True)
class Waypoint:
    """Snapshot of an entity's position at a point in time."""

    latitude: float
    longitude: float
    altitude: float | None = None
    groundspeed: float | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))
    owner: Any = field(default=None, repr=False, compare=False)
    disposed: bool = field(default=False, compare=False)

    def dispose(self) -> None:
        object.__setattr__(self, "disposed", True)
        object.__setattr__(self, "owner", None)


class Trail:
    """Waypoints ordered newest first."""

    def __init__(self) -> None:
        self._waypoints: list[Waypoint] = []

    def __len__(self) -> int:
        return len(self._waypoints)

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(self._waypoints)

    def __getitem__(self, index: int) -> Waypoint:
        return self._waypoints[index]

    @property
    def newest(self) -> Waypoint | None:
        return self._waypoints[0] if self._waypoints else None

    @property
    def oldest(self) -> Waypoint | None:
        return self._waypoints[-1] if self._waypoints else None

    def push(self, waypoint: Waypoint) -> None:
        self._waypoints.insert(0, waypoint)

    def pop_oldest(self) -> Waypoint:
        return self._waypoints.pop()

    def clear(self) -> None:
        for waypoint in self._waypoints:
            waypoint.dispose()
        self._waypoints = []


class TrailManager:
    """Append waypoints to flight trails, honoring dedup and the size limit."""

    def __init__(
        self,
        *,
        max_length: int | None = None,
        record_when_grounded: bool | None = None,
        precision_digits: int | None = None,
    ) -> None:
        self.max_length = max_length if max_length is not None else settings.trail_max_length
        self.record_when_grounded = (
            record_when_grounded
            if record_when_grounded is not None
            else settings.trail_when_grounded
        )
        self.precision_digits = (
            precision_digits
            if precision_digits is not None
            else settings.trail_precision_digits
        )

    def sample(self, flight: "Flight", timestamp: datetime | None = None) -> Waypoint | None:
        """Build a waypoint from the flight's current kinematics."""

        if flight.latitude is None or flight.longitude is None:
            return None
        return Waypoint(
            latitude=flight.latitude,
            longitude=flight.longitude,
            altitude=flight.altitude,
            groundspeed=flight.groundspeed,
            timestamp=timestamp or datetime.now(tz=timezone.utc),
            owner=flight,
        )

    def append_waypoint(self, flight: "Flight", sample: Waypoint | None = None) -> bool:
        """Insert a waypoint at the front of the flight's trail.

        Returns False when nothing was inserted: the flight is grounded and
        grounded recording is off, there is no position, or the location did
        not change since the newest waypoint.
        """

        if not self.record_when_grounded and flight.is_grounded():
            return False

        waypoint = sample or self.sample(flight)
        if waypoint is None:
            return False

        trail = flight.trail
        newest = trail.newest
        if newest is not None and same_location(
            newest.latitude,
            newest.longitude,
            waypoint.latitude,
            waypoint.longitude,
            self.precision_digits,
        ):
            return False

        trail.push(waypoint)
        if self.max_length is not None and self.max_length > 0:
            while len(trail) > self.max_length:
                trail.pop_oldest().dispose()
        return True


__all__ = ["Trail", "TrailManager", "Waypoint"]
