"""
astrocore.nutation — IAU 1980 Nutation (truncated)
=====================================================

Nutation in longitude (Δψ) and in obliquity (Δε) from the dominant terms
of the IAU 1980 series, plus the IAU 1976 mean obliquity of the ecliptic.

The series keeps the thirteen largest terms of Meeus (1998) Table 22.A,
which reproduces the full series to better than 0.05" for dates within a
few centuries of J2000; that is ample for visualization and well inside
the truncation error of the lunar and solar series that consume it.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Ch. 22.
"""

from dataclasses import dataclass

import numpy as np

from .utils import OBLIQUITY_J2000

_ARCSEC = 1.0 / 3600.0

# Multiples of (D, M, M', F, Ω) and coefficients in units of 0.0001".
#              D   M  M'  F  Ω     Δψ      Δψ·T     Δε     Δε·T
_TERMS = np.array([
    [ 0,  0,  0, 0, 1, -171996, -174.2, 92025,  8.9],
    [-2,  0,  0, 2, 2,  -13187,   -1.6,  5736, -3.1],
    [ 0,  0,  0, 2, 2,   -2274,   -0.2,   977, -0.5],
    [ 0,  0,  0, 0, 2,    2062,    0.2,  -895,  0.5],
    [ 0,  1,  0, 0, 0,    1426,   -3.4,    54, -0.1],
    [ 0,  0,  1, 0, 0,     712,    0.1,    -7,  0.0],
    [-2,  1,  0, 2, 2,    -517,    1.2,   224, -0.6],
    [ 0,  0,  0, 2, 1,    -386,   -0.4,   200,  0.0],
    [ 0,  0,  1, 2, 2,    -301,    0.0,   129, -0.1],
    [-2, -1,  0, 2, 2,     217,   -0.5,   -95,  0.3],
    [-2,  0,  1, 0, 0,    -158,    0.0,     0,  0.0],
    [-2,  0,  0, 2, 1,     129,    0.1,   -70,  0.0],
    [ 0,  0, -1, 2, 2,     123,    0.0,   -53,  0.0],
])


@dataclass(frozen=True)
class NutationParameters:
    """Nutation quantities for one instant, all in degrees.

    Attributes
    ----------
    eps : mean obliquity of the ecliptic of date
    dpsi : nutation in longitude
    deps : nutation in obliquity
    """
    eps: float
    dpsi: float
    deps: float

    @property
    def true_obliquity(self) -> float:
        """Obliquity of the true equator of date, ε + Δε [deg]."""
        return self.eps + self.deps


def fundamental_arguments(T: float) -> np.ndarray:
    """Delaunay arguments (D, M, M', F, Ω) [deg] at T Julian centuries."""
    T2, T3 = T * T, T * T * T
    D = 297.85036 + 445267.111480 * T - 0.0019142 * T2 + T3 / 189474.0
    M = 357.52772 + 35999.050340 * T - 0.0001603 * T2 - T3 / 300000.0
    Mp = 134.96298 + 477198.867398 * T + 0.0086972 * T2 + T3 / 56250.0
    F = 93.27191 + 483202.017538 * T - 0.0036825 * T2 + T3 / 327270.0
    Omega = 125.04452 - 1934.136261 * T + 0.0020708 * T2 + T3 / 450000.0
    return np.array([D, M, Mp, F, Omega])


def mean_obliquity(T: float) -> float:
    """IAU 1976 mean obliquity of the ecliptic [deg]."""
    return (OBLIQUITY_J2000
            + (-46.8150 * T - 0.00059 * T**2 + 0.001813 * T**3) * _ARCSEC)


def nutation_terms(T: float) -> NutationParameters:
    """Compute nutation parameters.

    Parameters
    ----------
    T : float — Julian centuries since J2000.0

    Returns
    -------
    NutationParameters — ε, Δψ, Δε in degrees
    """
    args = np.deg2rad(_TERMS[:, :5] @ fundamental_arguments(T))

    dpsi = np.sum((_TERMS[:, 5] + _TERMS[:, 6] * T) * np.sin(args))
    deps = np.sum((_TERMS[:, 7] + _TERMS[:, 8] * T) * np.cos(args))

    return NutationParameters(
        eps=float(mean_obliquity(T)),
        dpsi=float(dpsi * 1e-4 * _ARCSEC),
        deps=float(deps * 1e-4 * _ARCSEC),
    )
