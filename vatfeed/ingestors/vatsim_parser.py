"""Parser for the VATSIM text data feed.

The feed is line oriented::

    ; comment
    !GENERAL:
    UPDATE = 20240503194000
    CONNECTED CLIENTS = 2
    !CLIENTS:
    DLH123:1000:Pilot One:PILOT:...

``CLIENTS`` lines are colon separated with a fixed positional layout (see
``Field``). Malformed client lines are dropped; only a missing or unparsable
``UPDATE`` timestamp fails the whole payload.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
import logging
from typing import Iterator

from vatfeed.config import settings
from vatfeed.domain.identity import normalize_callsign
from vatfeed.errors import FeedParseError
from vatfeed.ingestors.coercion import (
    format_atis,
    format_flight_rules,
    format_transponder,
    is_blank,
    is_number,
    to_datetime,
    to_float,
    to_int,
    to_str,
)

logger = logging.getLogger("vatfeed.ingestors.vatsim_parser")

SECTION_GENERAL = "GENERAL"
SECTION_CLIENTS = "CLIENTS"
CLIENT_PILOT = "PILOT"
CLIENT_ATC = "ATC"


class Field(IntEnum):
    """Positions of the colon separated ``CLIENTS`` fields."""

    CALLSIGN = 0
    CID = 1
    REALNAME = 2
    CLIENTTYPE = 3
    FREQUENCY = 4
    LATITUDE = 5
    LONGITUDE = 6
    ALTITUDE = 7
    GROUNDSPEED = 8
    PLANNED_AIRCRAFT = 9
    PLANNED_DEPAIRPORT = 11
    PLANNED_DESTAIRPORT = 13
    TRANSPONDER = 17
    VISUALRANGE = 19
    PLANNED_FLIGHTTYPE = 21
    PLANNED_ALTAIRPORT = 28
    PLANNED_REMARKS = 29
    PLANNED_ROUTE = 30
    ATIS_MESSAGE = 35
    HEADING = 38
    QNH_MB = 40


@dataclass
class ParsedFlightPlan:
    origin: str
    destination: str
    alternate: str | None = None
    flight_rules: str | None = None
    remarks: str | None = None
    route: str | None = None


@dataclass
class ParsedClient:
    """Fields shared by pilot and controller records."""

    callsign: str
    id: str
    name: str | None
    latitude: float
    longitude: float
    frequency: float | None = None
    altitude: float | None = None
    visibility: float | None = None
    qnh: float | None = None


@dataclass
class ParsedFlight(ParsedClient):
    groundspeed: float | None = None
    heading: float | None = None
    aircraft: str | None = None
    transponder: str | None = None
    flight_plan: ParsedFlightPlan | None = None


@dataclass
class ParsedAtc(ParsedClient):
    atis: str | None = None


@dataclass
class ParsedFeed:
    """Result of a structurally valid parse."""

    update: datetime
    clients_connected: int | None = None
    general_info: dict[str, str] = field(default_factory=dict)
    flights: list[ParsedFlight] = field(default_factory=list)
    atc_units: list[ParsedAtc] = field(default_factory=list)
    dropped_lines: int = 0

    @property
    def info(self) -> str:
        stamp = self.update.strftime("%d.%m.%Y %H:%M:%S")
        if self.clients_connected is None:
            return stamp
        return f"{stamp} {self.clients_connected}"


class UpdateHistory:
    """Feed ``UPDATE`` timestamps already processed, most recent first."""

    def __init__(self, maxlen: int | None = None) -> None:
        size = maxlen if maxlen is not None else settings.update_history_size
        self._entries: deque[datetime] = deque(maxlen=size if size > 0 else None)

    def contains(self, update: datetime) -> bool:
        return update in self._entries

    def add(self, update: datetime) -> None:
        self._entries.appendleft(update)

    @property
    def latest(self) -> datetime | None:
        return self._entries[0] if self._entries else None

    def __contains__(self, update: object) -> bool:
        return update in self._entries

    def __iter__(self) -> Iterator[datetime]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def _field(parts: list[str], index: Field) -> str | None:
    if index >= len(parts):
        return None
    return parts[index]


def split_general_line(line: str) -> tuple[str, str] | None:
    """Split ``KEY = VALUE``; lines without ``=`` are ignored."""

    if is_blank(line) or "=" not in line:
        return None
    key, _, value = line.partition("=")
    return key.strip().upper(), value.strip()


def parse_flight_plan(parts: list[str]) -> ParsedFlightPlan | None:
    origin = to_str(_field(parts, Field.PLANNED_DEPAIRPORT), upper=True)
    destination = to_str(_field(parts, Field.PLANNED_DESTAIRPORT), upper=True)
    if origin is None or destination is None:
        return None
    return ParsedFlightPlan(
        origin=origin,
        destination=destination,
        alternate=to_str(_field(parts, Field.PLANNED_ALTAIRPORT), upper=True),
        flight_rules=format_flight_rules(_field(parts, Field.PLANNED_FLIGHTTYPE)),
        remarks=to_str(_field(parts, Field.PLANNED_REMARKS)),
        route=to_str(_field(parts, Field.PLANNED_ROUTE)),
    )


def parse_client_line(line: str) -> ParsedFlight | ParsedAtc | None:
    """Parse one ``CLIENTS`` line, ``None`` for inconsistent records."""

    parts = line.split(":")
    callsign = to_str(_field(parts, Field.CALLSIGN))
    cid = to_str(_field(parts, Field.CID))
    client_type = to_str(_field(parts, Field.CLIENTTYPE), upper=True)
    lat = _field(parts, Field.LATITUDE)
    lon = _field(parts, Field.LONGITUDE)
    if not callsign or not cid or not client_type or not is_number(lat) or not is_number(lon):
        return None
    # entities are matched by normalized callsign
    if normalize_callsign(callsign) is None:
        return None

    common = dict(
        callsign=callsign,
        id=cid,
        name=to_str(_field(parts, Field.REALNAME)),
        latitude=to_float(lat),
        longitude=to_float(lon),
        frequency=to_float(_field(parts, Field.FREQUENCY)),
        altitude=to_float(_field(parts, Field.ALTITUDE)),
        visibility=to_float(_field(parts, Field.VISUALRANGE)),
        qnh=to_float(_field(parts, Field.QNH_MB)),
    )

    if client_type == CLIENT_PILOT:
        return ParsedFlight(
            **common,
            groundspeed=to_float(_field(parts, Field.GROUNDSPEED)),
            heading=to_float(_field(parts, Field.HEADING)),
            aircraft=to_str(_field(parts, Field.PLANNED_AIRCRAFT)),
            transponder=format_transponder(_field(parts, Field.TRANSPONDER)),
            flight_plan=parse_flight_plan(parts),
        )
    if client_type == CLIENT_ATC:
        return ParsedAtc(**common, atis=format_atis(_field(parts, Field.ATIS_MESSAGE)))
    return None


class RecordParser:
    """Turn a raw feed payload into typed records."""

    def __init__(self, history: UpdateHistory | None = None) -> None:
        self.history = history if history is not None else UpdateHistory()

    def commit(self, update: datetime) -> None:
        """Mark a snapshot as processed so the same payload reads as stale."""

        if not self.history.contains(update):
            self.history.add(update)

    def parse(self, raw_text: str) -> ParsedFeed | None:
        """Parse a payload.

        Returns ``None`` when the ``UPDATE`` timestamp was committed before
        (no new data) and raises :class:`FeedParseError` when it is missing or
        unparsable. Parsing does not record the timestamp; call :meth:`commit`
        once the result has been applied.
        """

        section = ""
        update: datetime | None = None
        raw_update: str | None = None
        clients_connected: int | None = None
        general_info: dict[str, str] = {}
        flights: list[ParsedFlight] = []
        atc_units: list[ParsedAtc] = []
        dropped = 0

        for raw_line in (raw_text or "").splitlines():
            line = raw_line.strip()
            if not line or line.startswith(";"):
                continue
            if len(line) > 2 and line.startswith("!") and line.endswith(":"):
                section = line[1:-1].strip().upper()
                continue

            if section == SECTION_CLIENTS:
                try:
                    record = parse_client_line(line)
                except (ValueError, TypeError, IndexError) as exc:
                    logger.debug("Dropping malformed client line %r: %s", line, exc)
                    record = None
                if record is None:
                    dropped += 1
                elif isinstance(record, ParsedFlight):
                    flights.append(record)
                else:
                    atc_units.append(record)
            elif section == SECTION_GENERAL:
                kv = split_general_line(line)
                if kv is None:
                    continue
                key, value = kv
                general_info[key] = value
                if key == "UPDATE":
                    raw_update = value
                    update = to_datetime(value)
                    if update is not None and self.history.contains(update):
                        logger.info("Feed update %s already processed", value)
                        return None
                elif key == "CONNECTED CLIENTS":
                    clients_connected = to_int(value)

        if update is None:
            if raw_update is None:
                raise FeedParseError("Feed payload has no UPDATE timestamp")
            raise FeedParseError(f"Feed payload has an invalid UPDATE timestamp: {raw_update!r}")

        if dropped:
            logger.debug("Dropped %s inconsistent client lines", dropped)
        return ParsedFeed(
            update=update,
            clients_connected=clients_connected,
            general_info=general_info,
            flights=flights,
            atc_units=atc_units,
            dropped_lines=dropped,
        )


__all__ = [
    "Field",
    "ParsedAtc",
    "ParsedClient",
    "ParsedFeed",
    "ParsedFlight",
    "ParsedFlightPlan",
    "RecordParser",
    "UpdateHistory",
    "parse_client_line",
    "split_general_line",
]
