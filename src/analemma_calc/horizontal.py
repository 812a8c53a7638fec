"""Equatorial to horizontal coordinate transform in East-North-Up form."""

import math

from analemma_calc.models import HorizontalPosition


def normalize_deg(angle: float) -> float:
    """Wrap an angle into [0, 360)."""
    wrapped = angle % 360.0
    if wrapped >= 360.0:
        wrapped -= 360.0
    return wrapped


def to_horizontal(latitude: float, declination: float, hour_angle: float) -> HorizontalPosition:
    """Direction of the Sun as seen by an observer.

    The unit vector is built directly in the local East-North-Up frame, and
    both altitude and azimuth are read back from it. Near the zenith E and N
    both approach zero and the azimuth degrades gracefully instead of
    diverging through tan(declination).

    E is cos(delta) sin(H) with H positive westward, so a morning hour angle
    gives a negative East component and an azimuth past 180 degrees. Both
    exported E values and azimuths follow this convention.

    Args:
        latitude: Observer latitude phi, radians.
        declination: Solar declination delta, radians.
        hour_angle: Local hour angle H, radians.

    Returns:
        HorizontalPosition with azimuth measured from North, clockwise.
    """
    sin_phi = math.sin(latitude)
    cos_phi = math.cos(latitude)
    sin_dec = math.sin(declination)
    cos_dec = math.cos(declination)
    cos_h = math.cos(hour_angle)

    e = cos_dec * math.sin(hour_angle)
    n = cos_phi * sin_dec - sin_phi * cos_dec * cos_h
    u = sin_phi * sin_dec + cos_phi * cos_dec * cos_h

    altitude = math.degrees(math.asin(max(-1.0, min(1.0, u))))
    azimuth = normalize_deg(math.degrees(math.atan2(e, n)))

    return HorizontalPosition(e=e, n=n, u=u, altitude_deg=altitude, azimuth_deg=azimuth)
