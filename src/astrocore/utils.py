"""
astrocore.utils — Foundational Utilities
==========================================

Physical constants, 3-vector algebra and degree-based trigonometry.
Every other module builds on these helpers.  All functions are pure NumPy
and accept either a single (3,) vector or an (N,3) batch where it makes
sense.

Rotation convention
-------------------
``rot_x``, ``rot_y`` and ``rot_z`` are *active*, right-handed rotations by
a signed angle in degrees::

    rot_z([1, 0, 0], 90)  →  [0, 1, 0]
"""

import numpy as np
from numpy.typing import NDArray

# ── Physical Constants ──────────────────────────────────────────────────────
MU_EARTH = 3.986004418e14       # Earth gravitational parameter   [m³/s²]
WGS84_A = 6_378_137.0           # WGS-84 semi-major axis           [m]
WGS84_B = 6_356_752.314245      # WGS-84 semi-minor axis           [m]
WGS84_E = np.sqrt((WGS84_A**2 - WGS84_B**2) / WGS84_A**2)  # First eccentricity
AU = 149_597_870_700.0          # Astronomical Unit                [m]

# ── Time Constants ──────────────────────────────────────────────────────────
J2000_JD = 2_451_545.0          # 2000-01-01 12:00:00
DAYS_PER_CENTURY = 36_525.0
DAILY_SECONDS = 86_400.0
SIDEREAL_RATE = 1.00273790935   # sidereal / solar day ratio
OBLIQUITY_J2000 = 23.4392911111  # mean obliquity of the ecliptic at J2000 [deg]

# ── Solver Defaults ─────────────────────────────────────────────────────────
KEPLER_TOLERANCE = 1e-12        # |E − e sin E − M|  [rad]
KEPLER_MAX_ITERATIONS = 50
INCLINATION_MIN_DEG = 1e-7      # below this Ω is undefined


# ── Vector Helpers ──────────────────────────────────────────────────────────

def cross(u: NDArray, v: NDArray) -> NDArray:
    """Cross product u × v."""
    return np.cross(np.asarray(u, dtype=np.float64),
                    np.asarray(v, dtype=np.float64))


def norm(u: NDArray) -> float:
    """Euclidean norm of a (3,) vector."""
    return float(np.linalg.norm(np.asarray(u, dtype=np.float64)))


def vecmul(u: NDArray, s: float) -> NDArray:
    """Scale vector(s) by a scalar."""
    return np.asarray(u, dtype=np.float64) * s


def vecsum(u: NDArray, v: NDArray) -> NDArray:
    return np.asarray(u, dtype=np.float64) + np.asarray(v, dtype=np.float64)


def vecsub(u: NDArray, v: NDArray) -> NDArray:
    return np.asarray(u, dtype=np.float64) - np.asarray(v, dtype=np.float64)


def normalize(v: NDArray) -> NDArray:
    """Return unit vector.  Works on single vectors or (N,3) arrays."""
    v = np.asarray(v, dtype=np.float64)
    if v.ndim == 1:
        mag = np.linalg.norm(v)
        if mag < 1e-15:
            raise ValueError("Cannot normalize a near-zero vector.")
        return v / mag
    elif v.ndim == 2:
        mag = np.linalg.norm(v, axis=1, keepdims=True)
        if np.any(mag < 1e-15):
            raise ValueError("Cannot normalize a near-zero vector.")
        return v / mag
    else:
        raise ValueError(f"Expected 1-D or 2-D array, got {v.ndim}-D.")


# ── Degree Trigonometry ─────────────────────────────────────────────────────

def sind(deg):
    return np.sin(np.deg2rad(deg))


def cosd(deg):
    return np.cos(np.deg2rad(deg))


def tand(deg):
    return np.tan(np.deg2rad(deg))


def asind(val):
    """Arcsine in degrees.  Arguments outside [−1, 1] give NaN."""
    return np.rad2deg(np.arcsin(val))


def acosd(val):
    """Arccosine in degrees.  Arguments outside [−1, 1] give NaN."""
    return np.rad2deg(np.arccos(val))


def atan2d(y, x):
    return np.rad2deg(np.arctan2(y, x))


def atand(val):
    return np.rad2deg(np.arctan(val))


def clamp_unit(val):
    """Clip a cosine/sine argument into [−1, 1]."""
    return np.clip(val, -1.0, 1.0)


# ── Axis Rotations ──────────────────────────────────────────────────────────

def rot_x_matrix(deg: float) -> NDArray:
    """Active rotation matrix about X by ``deg`` degrees."""
    c, s = cosd(deg), sind(deg)
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0,   c,  -s],
        [0.0,   s,   c],
    ])


def rot_y_matrix(deg: float) -> NDArray:
    """Active rotation matrix about Y by ``deg`` degrees."""
    c, s = cosd(deg), sind(deg)
    return np.array([
        [  c, 0.0,   s],
        [0.0, 1.0, 0.0],
        [ -s, 0.0,   c],
    ])


def rot_z_matrix(deg: float) -> NDArray:
    """Active rotation matrix about Z by ``deg`` degrees."""
    c, s = cosd(deg), sind(deg)
    return np.array([
        [  c,  -s, 0.0],
        [  s,   c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def apply_dcm(R: NDArray, vec: NDArray) -> NDArray:
    """Apply 3×3 DCM to a single (3,) or batch (N,3) of vectors."""
    vec = np.asarray(vec, dtype=np.float64)
    if vec.ndim == 1:
        return R @ vec
    return (R @ vec.T).T


def rot_x(r: NDArray, deg: float) -> NDArray:
    """Rotate vector(s) about the X axis by ``deg`` degrees."""
    return apply_dcm(rot_x_matrix(deg), r)


def rot_y(r: NDArray, deg: float) -> NDArray:
    """Rotate vector(s) about the Y axis by ``deg`` degrees."""
    return apply_dcm(rot_y_matrix(deg), r)


def rot_z(r: NDArray, deg: float) -> NDArray:
    """Rotate vector(s) about the Z axis by ``deg`` degrees."""
    return apply_dcm(rot_z_matrix(deg), r)
