"""Conversion from civil clock time to the true solar hour angle."""

import math

MINUTES_PER_DAY = 1440
MINUTES_PER_DEGREE = 4  # Earth turns one degree every four minutes


def clock_minutes(hour: int, minute: int) -> int:
    """Minutes since midnight for a clock time.

    Hour is clamped to 0..23 and minute to 0..59 rather than rejected.
    """
    hour = min(23, max(0, hour))
    minute = min(59, max(0, minute))
    return hour * 60 + minute


def local_standard_time_meridian(tz_offset_hours: float) -> float:
    """Reference longitude of a UTC offset, in degrees."""
    return 15 * tz_offset_hours


def time_offset_minutes(eot_minutes: float, longitude_deg: float, tz_offset_hours: float) -> float:
    """Correction from clock time to true solar time, in minutes."""
    lstm = local_standard_time_meridian(tz_offset_hours)
    return eot_minutes + MINUTES_PER_DEGREE * (longitude_deg - lstm)


def true_solar_time_minutes(local_clock_minutes: float, offset_minutes: float) -> float:
    """True solar time normalized into [0, 1440)."""
    tst = (local_clock_minutes + offset_minutes) % MINUTES_PER_DAY
    # Guard against float modulo returning exactly 1440 for tiny negatives
    if tst >= MINUTES_PER_DAY:
        tst -= MINUTES_PER_DAY
    return tst


def hour_angle_deg(
    local_clock_minutes: float,
    eot_minutes: float,
    longitude_deg: float,
    tz_offset_hours: float,
) -> float:
    """Solar hour angle in degrees, zero at local solar noon, positive westward.

    Args:
        local_clock_minutes: Civil clock time as minutes since midnight.
        eot_minutes: Equation of time for the day.
        longitude_deg: Observer longitude, east positive.
        tz_offset_hours: UTC offset of the clock, e.g. +7 for UTC+7.

    Returns:
        Hour angle in [-180, 180).
    """
    offset = time_offset_minutes(eot_minutes, longitude_deg, tz_offset_hours)
    tst = true_solar_time_minutes(local_clock_minutes, offset)
    return tst / MINUTES_PER_DEGREE - 180


def hour_angle_rad(
    local_clock_minutes: float,
    eot_minutes: float,
    longitude_deg: float,
    tz_offset_hours: float,
) -> float:
    return math.radians(
        hour_angle_deg(local_clock_minutes, eot_minutes, longitude_deg, tz_offset_hours)
    )


def estimate_tz_offset(longitude_deg: float) -> float:
    """Best-effort UTC offset from longitude alone.

    Rounds to the nearest whole hour unless a half-hour offset is within six
    minutes and closer (India, Iran, Myanmar). This ignores political time
    zone boundaries; callers should let the user override it.

    Args:
        longitude_deg: Longitude in degrees, east positive.

    Returns:
        Offset in hours, clamped to [-12, 14].
    """
    ideal = longitude_deg / 15
    whole_hour = math.floor(ideal + 0.5)
    half_hour = math.floor(ideal) + 0.5

    if abs(ideal - half_hour) < 0.1 and abs(ideal - half_hour) < abs(ideal - whole_hour):
        result = half_hour
    else:
        result = float(whole_hour)

    return max(-12.0, min(14.0, result))
