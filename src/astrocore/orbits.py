"""
astrocore.orbits — Low-Precision Planetary Orbits
===================================================

Heliocentric ecliptic positions of planets from mean orbital elements
that vary linearly with time.  Each element is given as
``(value at J2000, rate)``; rates are per Julian century except for the
mean longitude, whose rate is per day.

Accuracy for the Earth is a few arcminutes over 1800-2050, enough to
place the Sun and the terminator for visualization.

Reference
---------
Standish, E.M. — *Keplerian Elements for Approximate Positions of the
Major Planets*, JPL Solar System Dynamics (Table 1).
"""

from dataclasses import dataclass
import math
from typing import Tuple

import numpy as np

from .coordinates import cart_to_spherical, limit_angle
from .kepler import solve_eccentric_anomaly
from .timescales import julian_centuries
from .utils import DAYS_PER_CENTURY, rot_x, rot_z

Rate = Tuple[float, float]


@dataclass(frozen=True)
class OrbitElements:
    """Affine orbital element model.

    Attributes
    ----------
    a : semi-major axis [AU], rate per century
    e : eccentricity, rate per century
    i : inclination [deg], rate per century
    Omega : longitude of the ascending node [deg], rate per century
    lP : longitude of perihelion [deg], rate per century
    mL : mean longitude [deg], rate per **day**
    """
    a: Rate
    e: Rate
    i: Rate
    Omega: Rate
    lP: Rate
    mL: Rate


@dataclass(frozen=True)
class OrbitParameters:
    """Elements evaluated at one instant (angles in radians)."""
    a: float
    e: float
    i: float
    Omega: float
    lP: float
    mL: float


@dataclass(frozen=True)
class OrbitPosition:
    """Anomalies and heliocentric ecliptic position (angles in radians)."""
    M: float
    E: float
    f: float
    omega: float
    x: float
    y: float
    z: float
    lon: float
    lat: float
    r: float

    @property
    def cartesian(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])


EARTH_ELEMENTS = OrbitElements(
    a=(1.00000011, -0.00000005),
    e=(0.01671022, -0.00003804),
    i=(0.00005, -46.94 / 3600.0),
    Omega=(-11.26064, -18228.25 / 3600.0),
    lP=(102.94719, 1198.28 / 3600.0),
    mL=(100.46436, 0.98560910),
)

# Degenerate orbit that keeps the Sun at the origin.
SUN_ELEMENTS = OrbitElements(
    a=(0.0, 0.0),
    e=(0.0, 0.0),
    i=(0.0, 0.0),
    Omega=(0.0, 0.0),
    lP=(0.0, 0.0),
    mL=(0.0, 0.0),
)


class Orbit:
    """Planet on an affine-element Keplerian orbit around the Sun.

    Parameters
    ----------
    name : str
    elements : OrbitElements
    nr_tolerance : float — Newton–Raphson tolerance [rad]
    nr_iterations : int — Newton–Raphson iteration budget
    """

    def __init__(self, name: str, elements: OrbitElements,
                 nr_tolerance: float = 1e-12, nr_iterations: int = 10):
        self.name = name
        self.elements = elements
        self.nr_tolerance = nr_tolerance
        self.nr_iterations = nr_iterations

    def __repr__(self):
        return f"Orbit({self.name!r})"

    def solve_eccentric_anomaly(self, M: float, e: float) -> float:
        """Eccentric anomaly [rad, 0-2π] for mean anomaly M [rad]."""
        sol = solve_eccentric_anomaly(math.degrees(M), e,
                                      self.nr_tolerance, self.nr_iterations)
        return limit_angle(math.radians(sol.value))

    @staticmethod
    def compute_natural_anomaly(E: float, e: float) -> float:
        """True anomaly [rad, 0-2π] for eccentric anomaly E [rad]."""
        xu = (math.cos(E) - e) / (1.0 - e * math.cos(E))
        yu = math.sqrt(1.0 - e * e) * math.sin(E) / (1.0 - e * math.cos(E))
        return limit_angle(math.atan2(yu, xu))

    def compute_parameters(self, jt: float) -> OrbitParameters:
        """Evaluate the affine element model at Julian Time ``jt``."""
        el = self.elements
        dT = julian_centuries(jt)
        return OrbitParameters(
            a=el.a[0] + dT * el.a[1],
            e=el.e[0] + dT * el.e[1],
            i=math.radians(el.i[0] + dT * el.i[1]),
            Omega=math.radians(el.Omega[0] + dT * el.Omega[1]),
            lP=math.radians(el.lP[0] + dT * el.lP[1]),
            mL=math.radians(el.mL[0] + DAYS_PER_CENTURY * dT * el.mL[1]),
        )

    def compute_position(self, params: OrbitParameters) -> OrbitPosition:
        """Heliocentric ecliptic position for evaluated parameters."""
        M = limit_angle(params.mL - params.lP)
        E = self.solve_eccentric_anomaly(M, params.e)
        f = self.compute_natural_anomaly(E, params.e)

        # Argument of perihelion.
        omega = params.lP - params.Omega

        distance = params.a * (1.0 - params.e * math.cos(E))

        coord_ec = rot_z(
            rot_x(rot_z(np.array([distance, 0.0, 0.0]), math.degrees(omega + f)),
                  math.degrees(params.i)),
            math.degrees(params.Omega))
        sph = cart_to_spherical(coord_ec)

        return OrbitPosition(M=M, E=E, f=f, omega=omega,
                             x=float(coord_ec[0]), y=float(coord_ec[1]),
                             z=float(coord_ec[2]),
                             lon=sph.theta, lat=sph.phi, r=sph.r)

    def position_at(self, jt: float) -> OrbitPosition:
        return self.compute_position(self.compute_parameters(jt))
