"""Low-order solar ephemeris.

Truncated Fourier series for solar declination and the equation of time,
evaluated at the fractional-year angle of each day. The coefficients are the
NOAA approximations and are kept as literals.
"""

import math

from analemma_calc.models import EphemerisSample

# Minutes per radian of hour angle (1440 / 2pi), as used by the series
EOT_SCALE = 229.18


def orbital_angle(day: int, total_days: int) -> float:
    """Fractional-year angle in radians, centred on local noon of the day.

    Args:
        day: 1-based day of the year.
        total_days: Days in the year (365 or 366).

    Returns:
        Orbital angle gamma.
    """
    return (2 * math.pi / total_days) * (day - 1 + 0.5)


def declination(gamma: float) -> float:
    """Solar declination in radians."""
    return (
        0.006918
        - 0.399912 * math.cos(gamma)
        + 0.070257 * math.sin(gamma)
        - 0.006758 * math.cos(2 * gamma)
        + 0.000907 * math.sin(2 * gamma)
        - 0.002697 * math.cos(3 * gamma)
        + 0.00148 * math.sin(3 * gamma)
    )


def tilt_component(gamma: float) -> float:
    """Axial-tilt part of the equation of time, in minutes (sine terms)."""
    return EOT_SCALE * (
        -0.032077 * math.sin(gamma)
        - 0.040849 * math.sin(2 * gamma)
    )


def eccentricity_component(gamma: float) -> float:
    """Orbital-eccentricity part of the equation of time, in minutes (constant and cosine terms)."""
    return EOT_SCALE * (
        0.000075
        + 0.001868 * math.cos(gamma)
        - 0.014615 * math.cos(2 * gamma)
    )


def equation_of_time(gamma: float) -> float:
    """Equation of time in minutes (apparent minus mean solar time).

    Equal to ``229.18 * (0.000075 + 0.001868 cos g - 0.032077 sin g
    - 0.014615 cos 2g - 0.040849 sin 2g)``, computed as the sum of its two
    components so the decomposition is exact.
    """
    return tilt_component(gamma) + eccentricity_component(gamma)


def sample(day: int, total_days: int) -> EphemerisSample:
    """Evaluate the orbital model for one day.

    Args:
        day: 1-based day of the year.
        total_days: Days in the year.

    Returns:
        EphemerisSample with declination and equation-of-time terms.
    """
    gamma = orbital_angle(day, total_days)
    tilt = tilt_component(gamma)
    eccentricity = eccentricity_component(gamma)
    return EphemerisSample(
        orbital_angle=gamma,
        declination=declination(gamma),
        eot_minutes=tilt + eccentricity,
        tilt_component_minutes=tilt,
        eccentricity_component_minutes=eccentricity,
    )
