"""
astrocore.timescales — Julian Time & Sidereal Time
====================================================

Calendar → Julian Day / Julian Time conversion and Greenwich Apparent
Sidereal Time (GAST).

Conventions
-----------
- ``jd`` is the Julian Day at 0h UTC of the calendar date (always x.5).
- ``jt`` is the Julian Time of the instant, i.e. ``jd`` plus the fraction
  of the day elapsed.
- UTC is used in place of UT1 and TT; the difference is below the
  accuracy of the series that consume these values.

Reference
---------
ESA (2013). *GNSS Data Processing*, Vol. I, §A.2.5.2 (CEP → ITRF).
"""

from dataclasses import dataclass
from datetime import datetime, timezone
import math
from typing import Optional

from .nutation import NutationParameters, nutation_terms
from .utils import J2000_JD, DAYS_PER_CENTURY, SIDEREAL_RATE, atand, cosd, sind


@dataclass(frozen=True)
class JulianTime:
    """Julian Day at 0h and Julian Time of one instant."""
    jd: float
    jt: float


def as_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime.  Naive input is taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def julian_centuries(jt: float) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (jt - J2000_JD) / DAYS_PER_CENTURY


def compute_julian_day(year: int, month: int, day: int) -> float:
    """Julian Day at 0h of a Gregorian calendar date.

    January and February are counted as months 13 and 14 of the
    preceding year, as the standard algorithm requires.  No range
    validation is performed.

    Parameters
    ----------
    year : int
    month : int — 1-12
    day : int — 1-31

    Returns
    -------
    jd : float — Julian Day (ends in .5)
    """
    if month < 3:
        year -= 1
        month += 12

    A = math.floor(year / 100)
    B = math.floor(A / 4.0)
    C = math.floor(2.0 - A + B)
    E = math.floor(365.25 * (year + 4716.0))
    F = math.floor(30.6001 * (month + 1))
    return C + day + E + F - 1524.5


def compute_julian_time(dt: datetime) -> JulianTime:
    """Julian Day and Julian Time of a timestamp.

    Parameters
    ----------
    dt : datetime — instant (naive values are interpreted as UTC)

    Returns
    -------
    JulianTime
    """
    dt = as_utc(dt)
    jd = compute_julian_day(dt.year, dt.month, dt.day)
    jt = (jd
          + dt.hour / 24.0
          + dt.minute / (24.0 * 60.0)
          + dt.second / (24.0 * 60.0 * 60.0)
          + dt.microsecond / (24.0 * 60.0 * 60.0 * 1e6))
    return JulianTime(jd=jd, jt=jt)


def compute_sidereal_time(longitude: float, jd: float, jt: float,
                          nutation: Optional[NutationParameters] = None) -> float:
    """Greenwich Apparent Sidereal Time plus observer longitude.

    GMST at 0h UT1 is a cubic in Julian centuries (A.35); the UT1 part of
    the day is scaled by the sidereal rate (A.34) and the equation of the
    equinoxes Δψ·cos ε is added to obtain GAST.

    The result is **not** reduced modulo 360°.

    Parameters
    ----------
    longitude : float — observer longitude [deg], east positive
    jd : float — Julian Day at 0h
    jt : float — Julian Time
    nutation : NutationParameters or None — precomputed nutation terms

    Returns
    -------
    theta : float — local apparent sidereal time [deg]
    """
    # Most recent 0h UT1 at or before jt.
    jd0 = math.floor(jt - 0.5) + 0.5
    ut1 = (jt - jd0) * 24.0 * 15.0

    T0 = julian_centuries(jd0)
    theta_g0 = (100.460618375
                + 36000.77005360834 * T0
                + 3.879333333333333e-04 * T0 * T0
                - 2.583333333333333e-08 * T0 * T0 * T0)
    gmst = SIDEREAL_RATE * ut1 + theta_g0

    T = julian_centuries(jd)
    if nutation is None:
        nutation = nutation_terms(T)
    equation_of_equinoxes = atand(cosd(nutation.eps) * sind(nutation.dpsi)
                                  / cosd(nutation.dpsi))

    return float(gmst + equation_of_equinoxes + longitude)


def sidereal_rate_deg_per_second() -> float:
    """Rate of change of GAST [deg/s]."""
    return SIDEREAL_RATE * 360.0 / 86400.0
