"""
astrocore.sun — Apparent Solar Position
=========================================

Geocentric apparent right ascension and declination of the Sun, the
sub-solar point, solar altitude for an observer, and sunrise / sunset
search.

The Sun's geocentric ecliptic position is the difference between two
:class:`~astrocore.orbits.Orbit` evaluations: the Earth on its
low-precision heliocentric orbit and a degenerate orbit that keeps the
Sun at the origin.  The ecliptic vector is rotated by the J2000
obliquity into the J2000 equatorial frame and then precessed and nutated
into the true equator of date.

Aberration and light-time are neglected (≈ 20").
"""

from datetime import datetime, timedelta
import math
from typing import NamedTuple, Optional

import numpy as np

from .coordinates import cart_to_spherical
from .ephemeris import EphemerisProvider, EquatorialCoordinates
from .frames import pos_j2000_to_cep
from .logging_config import get_logger
from .nutation import NutationParameters
from .orbits import EARTH_ELEMENTS, SUN_ELEMENTS, Orbit
from .state import J2000, FramedPosition
from .timescales import compute_julian_time
from .utils import AU, OBLIQUITY_J2000, rot_x

logger = get_logger(__name__)

SUN_ANGULAR_RADIUS = 0.265      # apparent solar semi-diameter [deg]


class SunriseSunset(NamedTuple):
    rise: Optional[datetime]
    set: Optional[datetime]


class SunEphemeris(EphemerisProvider):
    """Low-precision solar ephemeris."""

    name = "Sun"

    def __init__(self):
        self.orbit_earth = Orbit("Earth", EARTH_ELEMENTS, 1e-12, 10)
        self.orbit_sun = Orbit("Sun", SUN_ELEMENTS, 1e-12, 10)

    def ecliptic_vector(self, jt: float) -> np.ndarray:
        """Geocentric Sun vector in J2000 ecliptic coordinates [AU]."""
        earth = self.orbit_earth.position_at(jt)
        sun = self.orbit_sun.position_at(jt)
        return sun.cartesian - earth.cartesian

    def compute_distance(self, jt: float) -> float:
        return float(np.linalg.norm(self.ecliptic_vector(jt))) * AU

    def compute_equatorial(self, jt: float,
                           nutation: Optional[NutationParameters] = None
                           ) -> EquatorialCoordinates:
        """Apparent right ascension / declination of the Sun [rad].

        Parameters
        ----------
        jt : float — Julian Time
        nutation : NutationParameters or None

        Returns
        -------
        EquatorialCoordinates — ra in (−π, π], decl
        """
        r_equatorial = rot_x(self.ecliptic_vector(jt), OBLIQUITY_J2000)
        r_cep = pos_j2000_to_cep(jt, FramedPosition(r_equatorial, J2000), nutation)
        sph = cart_to_spherical(r_cep.r)
        return EquatorialCoordinates(ra=sph.theta, decl=sph.phi)

    def compute_sun_lon_lat(self, ra: float, decl: float, jd: float, jt: float):
        """Sub-solar point, see :meth:`EphemerisProvider.compute_lon_lat`."""
        return self.compute_lon_lat(ra, decl, jd, jt)

    def _altitude_at(self, jd: float, jt: float, lon: float, lat: float) -> float:
        eq = self.compute_equatorial(jt)
        return self.compute_altitude(eq.ra, eq.decl, jd, jt, lon, lat)

    def compute_sunrise_set(self, today: datetime, jt_step: float,
                            lon: float, lat: float) -> SunriseSunset:
        """Find the sunrise and sunset adjacent to ``today``.

        If the Sun is below the horizon, the next sunrise and the previous
        sunset are searched; otherwise the next sunset and the previous
        sunrise.  The search steps by ``jt_step`` days over one day in each
        direction and reports the first step at which the upper limb
        crosses the horizon.  Polar day / night yields ``None``.

        Parameters
        ----------
        today : datetime — reference instant
        jt_step : float — search step [days]
        lon, lat : float — observer position [deg]

        Returns
        -------
        SunriseSunset — datetimes truncated to the millisecond, or None
        """
        if jt_step <= 0:
            raise ValueError(f"jt_step must be positive, got {jt_step}")

        julian = compute_julian_time(today)
        jd, jt = julian.jd, julian.jt
        steps = np.arange(0.0, 1.0, jt_step)

        def search(direction: int, above: bool) -> Optional[datetime]:
            for delta in steps:
                alt = self._altitude_at(jd, jt + direction * delta, lon, lat)
                crossed = (alt >= -SUN_ANGULAR_RADIUS if above
                           else alt <= -SUN_ANGULAR_RADIUS)
                if crossed:
                    millis = math.floor(direction * 86400.0 * 1000.0 * delta)
                    return today + timedelta(milliseconds=millis)
            return None

        if self._altitude_at(jd, jt, lon, lat) < 0:
            rise = search(+1, above=True)
            sunset = search(-1, above=True)
        else:
            sunset = search(+1, above=False)
            rise = search(-1, above=False)

        logger.debug("Sunrise/sunset at lon=%.3f lat=%.3f: %s / %s",
                     lon, lat, rise, sunset)
        return SunriseSunset(rise=rise, set=sunset)


_SUN = SunEphemeris()


def sun_equatorial(jt: float,
                   nutation: Optional[NutationParameters] = None) -> EquatorialCoordinates:
    """Apparent right ascension / declination of the Sun [rad]."""
    return _SUN.compute_equatorial(jt, nutation)
