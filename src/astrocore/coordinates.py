"""
astrocore.coordinates — Coordinate Conversions
================================================

Cartesian ↔ spherical, WGS-84 geodetic ↔ Cartesian (ECEF) and
equatorial ↔ horizontal conversions, plus presentation helpers.

Units
-----
- Geodetic latitude / longitude in degrees, height in meters.
- Hour angle, declination, altitude and azimuth in radians.
"""

import math
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from .utils import WGS84_A, WGS84_B, WGS84_E, clamp_unit


class Spherical(NamedTuple):
    theta: float   # longitude-like angle atan2(y, x) [rad]
    phi: float     # latitude-like angle [rad]
    r: float


class Geodetic(NamedTuple):
    lat: float     # [deg]
    lon: float     # [deg]
    h: float       # [m]


class Horizontal(NamedTuple):
    a: float       # altitude [rad]
    A: float       # azimuth, north through east [rad]


class Equatorial(NamedTuple):
    delta: float   # declination [rad]
    h: float       # hour angle [rad]


class SexagesimalTime(NamedTuple):
    h: int
    m: int
    s: int


def limit_angle(rad: float) -> float:
    """Map an angle to the interval [0, 2π)."""
    interval = 2.0 * math.pi
    if rad < 0:
        rad += (1 + math.floor(-rad / interval)) * interval
    return rad % interval


def cart_to_spherical(p: NDArray) -> Spherical:
    """Cartesian vector → (theta, phi, r)."""
    x, y, z = (float(c) for c in p)
    return Spherical(theta=math.atan2(y, x),
                     phi=math.atan2(z, math.hypot(x, y)),
                     r=math.sqrt(x * x + y * y + z * z))


# ════════════════════════════════════════════════════════════════════════════
#  WGS-84
# ════════════════════════════════════════════════════════════════════════════

def wgs84_to_cart(lat: float, lon: float, h: float = 0.0) -> NDArray:
    """Geodetic → ECEF Cartesian [m].

    Parameters
    ----------
    lat, lon : float — geodetic latitude / longitude [deg]
    h : float — height above the WGS-84 ellipsoid [m]
    """
    lat_r, lon_r = math.radians(lat), math.radians(lon)
    sin_lat = math.sin(lat_r)
    N = WGS84_A / math.sqrt(1.0 - WGS84_E**2 * sin_lat**2)

    x = (N + h) * math.cos(lat_r) * math.cos(lon_r)
    y = (N + h) * math.cos(lat_r) * math.sin(lon_r)
    z = ((1.0 - WGS84_E**2) * N + h) * sin_lat
    return np.array([x, y, z])


def cart_to_wgs84(r: NDArray) -> Geodetic:
    """ECEF Cartesian [m] → geodetic latitude, longitude [deg], height [m].

    Fixed five-iteration refinement of latitude and height; no convergence
    check.  Accuracy is at the millimeter level, which is far more than a
    visualization needs.  Points on the polar axis map to ±90° latitude
    with h = |z| − b.
    """
    x, y, z = (float(c) for c in r)
    lon = math.degrees(math.atan2(y, x))
    p = math.hypot(x, y)
    if p == 0.0:
        return Geodetic(lat=math.copysign(90.0, z), lon=lon, h=abs(z) - WGS84_B)
    e2 = WGS84_E**2

    lat = math.atan2(z, (1.0 - e2) * p)
    h = 0.0
    for _ in range(5):
        sin_lat, cos_lat = math.sin(lat), math.cos(lat)
        N = WGS84_A / math.sqrt(1.0 - e2 * sin_lat**2)
        h = p / cos_lat - N
        d = (1.0 - e2 * N / (N + h)) * p
        lat = math.atan2(z, d)

    return Geodetic(lat=math.degrees(lat), lon=lon, h=h)


# ════════════════════════════════════════════════════════════════════════════
#  Equatorial ↔ Horizontal
# ════════════════════════════════════════════════════════════════════════════

def equatorial_to_horizontal(h: float, delta: float, phi: float) -> Horizontal:
    """Hour angle / declination → altitude / azimuth.

    Parameters
    ----------
    h : float — hour angle [rad], not normalized internally
    delta : float — declination [rad]
    phi : float — observer latitude [rad]
    """
    a = math.asin(clamp_unit(math.cos(h) * math.cos(delta) * math.cos(phi)
                             + math.sin(delta) * math.sin(phi)))
    A = math.pi + math.atan2(
        math.sin(h) * math.cos(delta),
        math.cos(h) * math.cos(delta) * math.sin(phi) - math.sin(delta) * math.cos(phi),
    )
    return Horizontal(a=a, A=A)


def horizontal_to_equatorial(a: float, A: float, phi: float) -> Equatorial:
    """Altitude / azimuth → declination / hour angle (all [rad]).

    Inverse of :func:`equatorial_to_horizontal`; the azimuth is measured
    from north through east.
    """
    As = A - math.pi   # azimuth from south
    delta = math.asin(clamp_unit(math.sin(a) * math.sin(phi)
                                 - math.cos(a) * math.cos(phi) * math.cos(As)))
    h = math.atan2(
        math.sin(As) * math.cos(a),
        math.cos(As) * math.cos(a) * math.sin(phi) + math.sin(a) * math.cos(phi),
    )
    return Equatorial(delta=delta, h=h)


def deg2time(deg: float) -> SexagesimalTime:
    """Express an angle [deg] as truncated hours, minutes and seconds.

    Negative input is shifted by 360°.  Each field is floored, so the
    conversion is lossy.
    """
    if deg < 0:
        deg += 360.0
    h = math.floor(24.0 * deg / 360.0)
    deg -= h * 360.0 / 24.0
    m = math.floor(24.0 * 60.0 * deg / 360.0)
    deg -= m * 360.0 / (24.0 * 60.0)
    s = math.floor(24.0 * 60.0 * 60.0 * deg / 360.0)
    return SexagesimalTime(h=int(h), m=int(m), s=int(s))
