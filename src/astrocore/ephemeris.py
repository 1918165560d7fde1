"""
astrocore.ephemeris — Celestial Body Ephemeris Interface
==========================================================

Common shape of the solar and lunar ephemerides: apparent equatorial
coordinates (true equator and equinox of date) for a Julian Time, plus
the observer-relative quantities derived from them.  Callers can treat
Sun and Moon interchangeably through :class:`EphemerisProvider`.
"""

import math
from typing import NamedTuple, Optional

import numpy as np

from .coordinates import equatorial_to_horizontal, limit_angle
from .frames import transform_position
from .nutation import NutationParameters
from .state import CEP, FramedPosition
from .timescales import compute_sidereal_time


class EquatorialCoordinates(NamedTuple):
    """Apparent right ascension and declination [rad]."""
    ra: float
    decl: float


class GeoPoint(NamedTuple):
    """Geographic longitude / latitude [deg]."""
    lon: float
    lat: float


class EphemerisProvider:
    """Base class for bodies with an apparent-place ephemeris."""

    name = "body"

    def compute_equatorial(self, jt: float,
                           nutation: Optional[NutationParameters] = None
                           ) -> EquatorialCoordinates:
        raise NotImplementedError

    def compute_distance(self, jt: float) -> float:
        """Geocentric distance [m]."""
        raise NotImplementedError

    def compute_altitude(self, ra: float, decl: float, jd: float, jt: float,
                         longitude: float, latitude: float) -> float:
        """Altitude [deg] of the body above an observer's horizon.

        Parameters
        ----------
        ra, decl : float — apparent right ascension / declination [rad]
        jd, jt : float — Julian Day at 0h and Julian Time
        longitude, latitude : float — observer position [deg]
        """
        lst = compute_sidereal_time(longitude, jd, jt)
        h = math.radians(lst) - ra
        horizontal = equatorial_to_horizontal(h, decl, math.radians(latitude))
        return math.degrees(horizontal.a)

    def compute_lon_lat(self, ra: float, decl: float, jd: float, jt: float) -> GeoPoint:
        """Geographic point where the body is at the zenith.

        Longitude is returned in [−180, 180).
        """
        gast = compute_sidereal_time(0.0, jd, jt)
        lon = math.degrees(limit_angle(math.pi + ra - math.radians(gast))) - 180.0
        return GeoPoint(lon=lon, lat=math.degrees(decl))

    def compute_position(self, jt: float, frame: str = CEP,
                         jd: Optional[float] = None,
                         nutation: Optional[NutationParameters] = None) -> FramedPosition:
        """Geocentric position [m] of the body in ``frame``."""
        eq = self.compute_equatorial(jt, nutation)
        distance = self.compute_distance(jt)
        r_cep = distance * np.array([
            math.cos(eq.decl) * math.cos(eq.ra),
            math.cos(eq.decl) * math.sin(eq.ra),
            math.sin(eq.decl),
        ])
        return transform_position(FramedPosition(r_cep, CEP), frame, jt, jd, nutation)
