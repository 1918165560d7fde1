"""
astrocore.moon — Apparent Lunar Position
==========================================

Geocentric apparent position of the Moon from the periodic-term series
of Meeus (1998), Chapter 47: sixty terms each for longitude / distance
and for latitude, the additive Venus / Jupiter / flattening terms, and
the Earth-orbit eccentricity factor E applied to every term that
involves the Sun's mean anomaly.  Nutation in longitude is added to
obtain the apparent longitude, and the true obliquity is used for the
conversion to right ascension / declination.

Accuracy: ~10" in longitude, ~4" in latitude.  Example 47.a
(1992-04-12 0h TD) is reproduced to better than 0.001°.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Ch. 47.
"""

import math
from typing import NamedTuple, Optional

import numpy as np

from .ephemeris import EphemerisProvider, EquatorialCoordinates
from .nutation import NutationParameters, nutation_terms
from .timescales import julian_centuries
from .utils import asind, atan2d, clamp_unit, cosd, sind, tand

# Table 47.A: longitude (Σl, 1e-6 deg) and distance (Σr, 1e-3 km).
#         D  M  M'  F      Σl         Σr
LON_TERMS = np.array([
    [0,  0,  1,  0,  6288774, -20905355],
    [2,  0, -1,  0,  1274027,  -3699111],
    [2,  0,  0,  0,   658314,  -2955968],
    [0,  0,  2,  0,   213618,   -569925],
    [0,  1,  0,  0,  -185116,     48888],
    [0,  0,  0,  2,  -114332,     -3149],
    [2,  0, -2,  0,    58793,    246158],
    [2, -1, -1,  0,    57066,   -152138],
    [2,  0,  1,  0,    53322,   -170733],
    [2, -1,  0,  0,    45758,   -204586],
    [0,  1, -1,  0,   -40923,   -129620],
    [1,  0,  0,  0,   -34720,    108743],
    [0,  1,  1,  0,   -30383,    104755],
    [2,  0,  0, -2,    15327,     10321],
    [0,  0,  1,  2,   -12528,         0],
    [0,  0,  1, -2,    10980,     79661],
    [4,  0, -1,  0,    10675,    -34782],
    [0,  0,  3,  0,    10034,    -23210],
    [4,  0, -2,  0,     8548,    -21636],
    [2,  1, -1,  0,    -7888,     24208],
    [2,  1,  0,  0,    -6766,     30824],
    [1,  0, -1,  0,    -5163,     -8379],
    [1,  1,  0,  0,     4987,    -16675],
    [2, -1,  1,  0,     4036,    -12831],
    [2,  0,  2,  0,     3994,    -10445],
    [4,  0,  0,  0,     3861,    -11650],
    [2,  0, -3,  0,     3665,     14403],
    [0,  1, -2,  0,    -2689,     -7003],
    [2,  0, -1,  2,    -2602,         0],
    [2, -1, -2,  0,     2390,     10056],
    [1,  0,  1,  0,    -2348,      6322],
    [2, -2,  0,  0,     2236,     -9884],
    [0,  1,  2,  0,    -2120,      5751],
    [0,  2,  0,  0,    -2069,         0],
    [2, -2, -1,  0,     2048,     -4950],
    [2,  0,  1, -2,    -1773,      4130],
    [2,  0,  0,  2,    -1595,         0],
    [4, -1, -1,  0,     1215,     -3958],
    [0,  0,  2,  2,    -1110,         0],
    [3,  0, -1,  0,     -892,      3258],
    [2,  1,  1,  0,     -810,      2616],
    [4, -1, -2,  0,      759,     -1897],
    [0,  2, -1,  0,     -713,     -2117],
    [2,  2, -1,  0,     -700,      2354],
    [2,  1, -2,  0,      691,         0],
    [2, -1,  0, -2,      596,         0],
    [4,  0,  1,  0,      549,     -1423],
    [0,  0,  4,  0,      537,     -1117],
    [4, -1,  0,  0,      520,     -1571],
    [1,  0, -2,  0,     -487,     -1739],
    [2,  1,  0, -2,     -399,         0],
    [0,  0,  2, -2,     -381,     -4421],
    [1,  1,  1,  0,      351,         0],
    [3,  0, -2,  0,     -340,         0],
    [4,  0, -3,  0,      330,         0],
    [2, -1,  2,  0,      327,         0],
    [0,  2,  1,  0,     -323,      1165],
    [1,  1, -1,  0,      299,         0],
    [2,  0,  3,  0,      294,         0],
    [2,  0, -1, -2,        0,      8752],
])

# Table 47.B: latitude (Σb, 1e-6 deg).
#         D  M  M'  F      Σb
LAT_TERMS = np.array([
    [0,  0,  0,  1,  5128122],
    [0,  0,  1,  1,   280602],
    [0,  0,  1, -1,   277693],
    [2,  0,  0, -1,   173237],
    [2,  0, -1,  1,    55413],
    [2,  0, -1, -1,    46271],
    [2,  0,  0,  1,    32573],
    [0,  0,  2,  1,    17198],
    [2,  0,  1, -1,     9266],
    [0,  0,  2, -1,     8822],
    [2, -1,  0, -1,     8216],
    [2,  0, -2, -1,     4324],
    [2,  0,  1,  1,     4200],
    [2,  1,  0, -1,    -3359],
    [2, -1, -1,  1,     2463],
    [2, -1,  0,  1,     2211],
    [2, -1, -1, -1,     2065],
    [0,  1, -1, -1,    -1870],
    [4,  0, -1, -1,     1828],
    [0,  1,  0,  1,    -1794],
    [0,  0,  0,  3,    -1749],
    [0,  1, -1,  1,    -1565],
    [1,  0,  0,  1,    -1491],
    [0,  1,  1,  1,    -1475],
    [0,  1,  1, -1,    -1410],
    [0,  1,  0, -1,    -1344],
    [1,  0,  0, -1,    -1335],
    [0,  0,  3,  1,     1107],
    [4,  0,  0, -1,     1021],
    [4,  0, -1,  1,      833],
    [0,  0,  1, -3,      777],
    [4,  0, -2,  1,      671],
    [2,  0,  0, -3,      607],
    [2,  0,  2, -1,      596],
    [2, -1,  1, -1,      491],
    [2,  0, -2,  1,     -451],
    [0,  0,  3, -1,      439],
    [2,  0,  2,  1,      422],
    [2,  0, -3, -1,      421],
    [2,  1, -1,  1,     -366],
    [2,  1,  0,  1,     -351],
    [4,  0,  0,  1,      331],
    [2, -1,  1,  1,      315],
    [2, -2,  0, -1,      302],
    [0,  0,  1,  3,     -283],
    [2,  1,  1, -1,     -229],
    [1,  1,  0, -1,      223],
    [1,  1,  0,  1,      223],
    [0,  1, -2, -1,     -220],
    [2,  1, -1, -1,     -220],
    [1,  0,  1,  1,     -185],
    [2, -1, -2, -1,      181],
    [0,  1,  2,  1,     -177],
    [4,  0, -2, -1,      176],
    [4, -1, -1, -1,      166],
    [1,  0,  1, -1,     -164],
    [4,  0,  1, -1,      132],
    [1,  0, -1, -1,     -119],
    [4, -1,  0, -1,      115],
    [2, -2,  0,  1,      107],
])

MEAN_DISTANCE_KM = 385000.56


class LunarArguments(NamedTuple):
    """Fundamental arguments of the lunar theory [deg]."""
    Lm: float     # mean longitude of the Moon
    D: float      # mean elongation of the Moon from the Sun
    Ms: float     # mean anomaly of the Sun
    Mm: float     # mean anomaly of the Moon
    F: float      # argument of latitude of the Moon
    A1: float
    A2: float
    A3: float


class SigmaTerms(NamedTuple):
    sigma_l: float   # 1e-6 deg
    sigma_r: float   # 1e-3 km
    sigma_b: float   # 1e-6 deg


class MoonEcliptic(NamedTuple):
    """Apparent geocentric ecliptic position of the Moon."""
    lon: float         # apparent longitude λ [deg], in [0, 360)
    lat: float         # latitude β [deg]
    distance: float    # Δ [km]
    obliquity: float   # true obliquity ε [deg]


def lunar_arguments(T: float) -> LunarArguments:
    """Fundamental arguments at T Julian centuries from J2000."""
    T2, T3, T4 = T * T, T**3, T**4
    return LunarArguments(
        Lm=218.3164477 + 481267.88123421 * T - 0.0015786 * T2
           + T3 / 538841.0 - T4 / 65194000.0,
        D=297.8501921 + 445267.11140340 * T - 0.0018819 * T2
          + T3 / 545868.0 - T4 / 113065000.0,
        Ms=357.5291092 + 35999.050290900 * T - 0.0001536 * T2
           + T3 / 24490000.0,
        Mm=134.9633964 + 477198.86750550 * T + 0.0087414 * T2
           + T3 / 69699.0 - T4 / 14712000.0,
        F=93.2720950 + 483202.01752330 * T - 0.0036539 * T2
          - T3 / 3526000.0 + T4 / 863310000.0,
        A1=119.75 + 131.849 * T,
        A2=53.09 + 479264.290 * T,
        A3=313.45 + 481266.484 * T,
    )


def _eccentricity_factors(ms_multiples: np.ndarray, T: float) -> np.ndarray:
    E = 1.0 - 0.002516 * T - 0.0000074 * T * T
    return E ** np.abs(ms_multiples)


def compute_sigma_terms(args: LunarArguments, T: float) -> SigmaTerms:
    """Sums of the periodic terms of Tables 47.A and 47.B.

    Includes the additive terms due to Venus (A1), Jupiter (A2) and the
    flattening of the Earth (Lm − F, A3).
    """
    fund = np.array([args.D, args.Ms, args.Mm, args.F])

    lon_arg = LON_TERMS[:, :4] @ fund
    lon_e = _eccentricity_factors(LON_TERMS[:, 1], T)
    sigma_l = np.sum(lon_e * LON_TERMS[:, 4] * sind(lon_arg))
    sigma_r = np.sum(lon_e * LON_TERMS[:, 5] * cosd(lon_arg))

    lat_arg = LAT_TERMS[:, :4] @ fund
    lat_e = _eccentricity_factors(LAT_TERMS[:, 1], T)
    sigma_b = np.sum(lat_e * LAT_TERMS[:, 4] * sind(lat_arg))

    sigma_l += (3958 * sind(args.A1)
                + 1962 * sind(args.Lm - args.F)
                + 318 * sind(args.A2))
    sigma_b += (-2235 * sind(args.Lm)
                + 382 * sind(args.A3)
                + 175 * sind(args.A1 - args.F)
                + 175 * sind(args.A1 + args.F)
                + 127 * sind(args.Lm - args.Mm)
                - 115 * sind(args.Lm + args.Mm))

    return SigmaTerms(float(sigma_l), float(sigma_r), float(sigma_b))


class MoonEphemeris(EphemerisProvider):
    """Meeus Chapter 47 lunar ephemeris."""

    name = "Moon"

    def compute_ecliptic(self, jt: float,
                         nutation: Optional[NutationParameters] = None) -> MoonEcliptic:
        """Apparent ecliptic longitude, latitude and distance of the Moon.

        Parameters
        ----------
        jt : float — Julian Time (treated as dynamical time)
        nutation : NutationParameters or None

        Returns
        -------
        MoonEcliptic
        """
        T = julian_centuries(jt)
        args = lunar_arguments(T)
        sigma = compute_sigma_terms(args, T)

        if nutation is None:
            nutation = nutation_terms(T)

        lon = args.Lm + sigma.sigma_l / 1e6 + nutation.dpsi
        return MoonEcliptic(
            lon=lon % 360.0,
            lat=sigma.sigma_b / 1e6,
            distance=MEAN_DISTANCE_KM + sigma.sigma_r / 1000.0,
            obliquity=nutation.true_obliquity,
        )

    def compute_distance(self, jt: float) -> float:
        return self.compute_ecliptic(jt).distance * 1000.0

    def compute_equatorial(self, jt: float,
                           nutation: Optional[NutationParameters] = None
                           ) -> EquatorialCoordinates:
        """Apparent right ascension [rad, 0-2π) and declination [rad]."""
        ecl = self.compute_ecliptic(jt, nutation)
        lam, beta, eps = ecl.lon, ecl.lat, ecl.obliquity

        alpha = atan2d(sind(lam) * cosd(eps) - tand(beta) * sind(eps), cosd(lam))
        delta = asind(clamp_unit(sind(beta) * cosd(eps)
                                 + cosd(beta) * sind(eps) * sind(lam)))
        return EquatorialCoordinates(ra=math.radians(alpha % 360.0),
                                     decl=math.radians(delta))

    def compute_moon_lon_lat(self, ra: float, decl: float, jd: float, jt: float):
        """Sub-lunar point, see :meth:`EphemerisProvider.compute_lon_lat`."""
        return self.compute_lon_lat(ra, decl, jd, jt)


_MOON = MoonEphemeris()


def moon_equatorial(jt: float,
                    nutation: Optional[NutationParameters] = None) -> EquatorialCoordinates:
    """Apparent right ascension / declination of the Moon [rad]."""
    return _MOON.compute_equatorial(jt, nutation)
