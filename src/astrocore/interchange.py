"""
astrocore.interchange — OSV and OEM Text Formats
==================================================

Boundary conversions between the kilometer-based text formats used by
data sources and the SI state vectors used by the core.

OSV line
--------
::

    2021-12-05T18:10:00.000Z 5326.946850 4182.210271 -611.867277 -3.371626 3.426754 -5.962082

ISO 8601 timestamp, position [km], velocity [km/s].

OEM (CCSDS Orbit Ephemeris Message)
-----------------------------------
Whitespace-delimited data rows ``epoch x y z vx vy vz [ax ay az]`` in
kilometers, surrounded by header, metadata and comment lines.  Epochs
may be calendar (``2023-03-03T12:00:00.000``) or day-of-year
(``2023-062T12:00:00.000``) and are UTC.  The ISS public OEM is given in
the J2000 frame.
"""

from datetime import datetime, timedelta, timezone
import re
from typing import Iterable, Optional

from .logging_config import get_logger
from .state import J2000, OrbitStateVector
from .timescales import as_utc

logger = get_logger(__name__)

_DOY_EPOCH = re.compile(r"^(\d{4})-(\d{3})T(\d{2}):(\d{2}):(\d{2}(?:\.\d+)?)Z?$")
_EVENTS_MARKER = "COMMENT End sequence of events"
_SKIP_PREFIXES = ("COMMENT", "CCSDS_OEM_VERS", "CREATION_DATE", "ORIGINATOR")


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO 8601 calendar or day-of-year timestamp as UTC."""
    text = text.strip()
    m = _DOY_EPOCH.match(text)
    if m:
        year, doy, hour, minute = (int(g) for g in m.groups()[:4])
        seconds = float(m.group(5))
        return (datetime(year, 1, 1, tzinfo=timezone.utc)
                + timedelta(days=doy - 1, hours=hour, minutes=minute, seconds=seconds))
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError as ex:
        raise ValueError(f"Invalid timestamp {text!r}") from ex


def format_timestamp(ts: datetime) -> str:
    ts = as_utc(ts)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def parse_osv_line(line: str, frame: str = J2000) -> OrbitStateVector:
    """Parse ``"<timestamp> x y z vx vy vz"`` (km, km/s) into an SI OSV.

    Raises
    ------
    ValueError — wrong field count, bad number or bad timestamp
    """
    terms = line.split()
    if len(terms) != 7:
        raise ValueError(f"OSV line must have 7 fields, got {len(terms)}: {line!r}")
    ts = parse_timestamp(terms[0])
    try:
        values = [float(t) * 1000.0 for t in terms[1:]]
    except ValueError as ex:
        raise ValueError(f"Invalid numeric field in OSV line {line!r}") from ex
    return OrbitStateVector(r=values[:3], v=values[3:], timestamp=ts, frame=frame)


def format_osv_line(osv: OrbitStateVector) -> str:
    """Format an OSV as a kilometer text line (inverse of parse_osv_line)."""
    r_km = [f"{c / 1000.0:.6f}" for c in osv.r]
    v_km = [f"{c / 1000.0:.6f}" for c in osv.v]
    return " ".join([format_timestamp(osv.timestamp)] + r_km + v_km)


def _data_lines(lines: list[str]) -> Iterable[str]:
    if any(line.startswith(_EVENTS_MARKER) for line in lines):
        idx = next(i for i, line in enumerate(lines) if line.startswith(_EVENTS_MARKER))
        lines = lines[idx + 1:]

    skip_block = None
    for line in lines:
        line = line.strip()
        if not line:
            continue
        if skip_block:
            if line.startswith(skip_block):
                skip_block = None
            continue
        if line.startswith("META_START"):
            skip_block = "META_STOP"
            continue
        if line.startswith("COVARIANCE_START"):
            skip_block = "COVARIANCE_STOP"
            continue
        if line.startswith(_SKIP_PREFIXES) or "=" in line:
            continue
        yield line


def parse_oem(text: str, frame: str = J2000) -> list[OrbitStateVector]:
    """Parse the data rows of an OEM file into SI state vectors.

    Rows that cannot be parsed are skipped with a warning.

    Parameters
    ----------
    text : str — OEM file contents
    frame : str — frame of the ephemeris (ISS OEM: J2000)

    Returns
    -------
    list of OrbitStateVector — in file order
    """
    osvs = []
    for line in _data_lines(text.splitlines()):
        terms = line.split()
        if len(terms) not in (7, 10):
            logger.warning("Skipping OEM row with %d fields: %r", len(terms), line)
            continue
        try:
            osvs.append(parse_osv_line(" ".join(terms[:7]), frame))
        except ValueError as ex:
            logger.warning("Skipping OEM row: %s", ex)
    logger.debug("%d OSVs loaded from OEM.", len(osvs))
    return osvs


def closest_osv(osvs: Iterable[OrbitStateVector],
                timestamp: datetime) -> Optional[OrbitStateVector]:
    """Return the OSV whose timestamp is nearest to ``timestamp``.

    Ties go to the earlier entry.  Returns None for an empty sequence.
    """
    timestamp = as_utc(timestamp)
    closest, min_delay = None, None
    for osv in osvs:
        delay = abs((osv.timestamp - timestamp).total_seconds())
        if min_delay is None or delay < min_delay:
            closest, min_delay = osv, delay
    return closest
