"""
astrocore — Astrodynamics Core for Earth / Sun / Moon / Satellite Views
=========================================================================

A pure-NumPy library that turns orbital data (telemetry, OEM ephemerides,
TLE-propagated or manual state vectors) into physically consistent
positions of a satellite, the Sun and the Moon for any instant.

Frames form a single chain, each link a rotation::

    J2000  ←→  MOD  ←→  CEP  ←→  ECEF
        precession  nutation  Earth rotation (GAST)

Components
----------
- **utils** — constants, 3-vector algebra, degree trigonometry, axis rotations
- **timescales** — Julian Day / Julian Time, Greenwich apparent sidereal time
- **nutation** — truncated IAU 1980 nutation, IAU 1976 mean obliquity
- **coordinates** — spherical, WGS-84 geodetic, horizontal coordinates
- **state** — frame-tagged OrbitStateVector / FramedPosition
- **frames** — J2000 / MOD / CEP / ECEF transforms
- **kepler** — osculating elements, Kepler solver, two-body propagation
- **orbits** — low-precision heliocentric planetary orbits
- **sun**, **moon** — apparent solar and lunar places
- **interchange** — OSV text lines and CCSDS OEM files

Units: meters, seconds; element angles and sidereal time in degrees,
right ascension / declination in radians.  Every function is pure and
reentrant.
"""

from .utils import (
    MU_EARTH, WGS84_A, WGS84_B, WGS84_E, AU,
    J2000_JD, SIDEREAL_RATE, OBLIQUITY_J2000,
    cross, norm, vecmul, vecsum, vecsub, normalize,
    sind, cosd, tand, asind, acosd, atan2d, atand,
    rot_x, rot_y, rot_z,
)

from .timescales import (
    JulianTime,
    compute_julian_day, compute_julian_time, compute_sidereal_time,
    julian_centuries,
)

from .nutation import NutationParameters, nutation_terms, mean_obliquity

from .coordinates import (
    cart_to_spherical, wgs84_to_cart, cart_to_wgs84,
    equatorial_to_horizontal, horizontal_to_equatorial,
    deg2time, limit_angle,
)

from .state import (
    J2000, MOD, CEP, ECEF, FRAMES,
    OrbitStateVector, FramedPosition, FrameMismatchError,
)

from .frames import (
    get_mod_params,
    precession_matrix, nutation_matrix,
    earth_rotation_matrix, earth_rotation_rate_matrix,
    osv_j2000_to_mod, osv_mod_to_j2000,
    osv_mod_to_cep, osv_cep_to_mod,
    osv_j2000_to_cep, osv_cep_to_j2000,
    osv_cep_to_ecef, osv_ecef_to_cep,
    osv_j2000_to_ecef, osv_ecef_to_j2000,
    pos_j2000_to_cep, pos_cep_to_j2000,
    pos_cep_to_ecef, pos_ecef_to_cep,
    rotate_positions, transform_position, transform_osv,
)

from .kepler import (
    KeplerianElements, EccentricAnomalySolution,
    osv_to_kepler, elements_from_osv, elements_to_osv,
    solve_eccentric_anomaly, compute_natural_anomaly,
    compute_period, compute_mean_motion,
    propagate, propagate_trail,
)

from .orbits import Orbit, OrbitElements, EARTH_ELEMENTS, SUN_ELEMENTS
from .ephemeris import EphemerisProvider, EquatorialCoordinates, GeoPoint
from .sun import SunEphemeris, SunriseSunset, sun_equatorial
from .moon import MoonEphemeris, MoonEcliptic, moon_equatorial

from .interchange import (
    parse_osv_line, format_osv_line, parse_oem, closest_osv,
)

from .logging_config import configure_logging, get_logger

__version__ = "1.0.0"
__all__ = [
    # ── Constants ──
    "MU_EARTH", "WGS84_A", "WGS84_B", "WGS84_E", "AU",
    "J2000_JD", "SIDEREAL_RATE", "OBLIQUITY_J2000",
    # ── Vector / trig ──
    "cross", "norm", "vecmul", "vecsum", "vecsub", "normalize",
    "sind", "cosd", "tand", "asind", "acosd", "atan2d", "atand",
    "rot_x", "rot_y", "rot_z",
    # ── Time ──
    "JulianTime", "compute_julian_day", "compute_julian_time",
    "compute_sidereal_time", "julian_centuries",
    # ── Nutation ──
    "NutationParameters", "nutation_terms", "mean_obliquity",
    # ── Coordinates ──
    "cart_to_spherical", "wgs84_to_cart", "cart_to_wgs84",
    "equatorial_to_horizontal", "horizontal_to_equatorial",
    "deg2time", "limit_angle",
    # ── State types ──
    "J2000", "MOD", "CEP", "ECEF", "FRAMES",
    "OrbitStateVector", "FramedPosition", "FrameMismatchError",
    # ── Frames ──
    "get_mod_params", "precession_matrix", "nutation_matrix",
    "earth_rotation_matrix", "earth_rotation_rate_matrix",
    "osv_j2000_to_mod", "osv_mod_to_j2000",
    "osv_mod_to_cep", "osv_cep_to_mod",
    "osv_j2000_to_cep", "osv_cep_to_j2000",
    "osv_cep_to_ecef", "osv_ecef_to_cep",
    "osv_j2000_to_ecef", "osv_ecef_to_j2000",
    "pos_j2000_to_cep", "pos_cep_to_j2000",
    "pos_cep_to_ecef", "pos_ecef_to_cep",
    "rotate_positions", "transform_position", "transform_osv",
    # ── Kepler ──
    "KeplerianElements", "EccentricAnomalySolution",
    "osv_to_kepler", "elements_from_osv", "elements_to_osv",
    "solve_eccentric_anomaly", "compute_natural_anomaly",
    "compute_period", "compute_mean_motion",
    "propagate", "propagate_trail",
    # ── Ephemerides ──
    "Orbit", "OrbitElements", "EARTH_ELEMENTS", "SUN_ELEMENTS",
    "EphemerisProvider", "EquatorialCoordinates", "GeoPoint",
    "SunEphemeris", "SunriseSunset", "sun_equatorial",
    "MoonEphemeris", "MoonEcliptic", "moon_equatorial",
    # ── Interchange ──
    "parse_osv_line", "format_osv_line", "parse_oem", "closest_osv",
    # ── Logging ──
    "configure_logging", "get_logger",
]
