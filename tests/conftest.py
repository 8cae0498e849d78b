import pytest

FIELD_COUNT = 42


@pytest.fixture
def anyio_backend():
    return "asyncio"


def _client_line(
    callsign: str,
    cid: str,
    client_type: str,
    *,
    lat="50.0",
    lon="8.0",
    name="",
    frequency="",
    altitude="",
    groundspeed="",
    aircraft="",
    origin="",
    destination="",
    transponder="",
    visibility="",
    flight_type="",
    alternate="",
    remarks="",
    route="",
    atis="",
    heading="",
    qnh="",
) -> str:
    parts = [""] * FIELD_COUNT
    parts[0] = callsign
    parts[1] = cid
    parts[2] = name
    parts[3] = client_type
    parts[4] = frequency
    parts[5] = str(lat)
    parts[6] = str(lon)
    parts[7] = str(altitude)
    parts[8] = str(groundspeed)
    parts[9] = aircraft
    parts[11] = origin
    parts[13] = destination
    parts[17] = transponder
    parts[19] = str(visibility)
    parts[21] = flight_type
    parts[28] = alternate
    parts[29] = remarks
    parts[30] = route
    parts[35] = atis
    parts[38] = str(heading)
    parts[40] = str(qnh)
    return ":".join(parts)


def _pilot_line(callsign: str, cid: str = "1000", **kwargs) -> str:
    kwargs.setdefault("altitude", "35000")
    kwargs.setdefault("groundspeed", "450")
    return _client_line(callsign, cid, "PILOT", **kwargs)


def _atc_line(callsign: str, cid: str = "2000", **kwargs) -> str:
    kwargs.setdefault("frequency", "118.500")
    return _client_line(callsign, cid, "ATC", **kwargs)


def _feed(lines=(), update="20240503194000", connected=None) -> str:
    general = ["!GENERAL:", "VERSION = 8", f"UPDATE = {update}"]
    if connected is not None:
        general.append(f"CONNECTED CLIENTS = {connected}")
    body = [
        "; VATSIM data feed",
        *general,
        ";",
        "!CLIENTS:",
        *lines,
        ";",
        "!SERVERS:",
        "EUROPE-C2:88.198.19.202:Europe:Germany:1:",
    ]
    return "\n".join(body) + "\n"


@pytest.fixture
def pilot_line():
    return _pilot_line


@pytest.fixture
def atc_line():
    return _atc_line


@pytest.fixture
def feed_text():
    return _feed
