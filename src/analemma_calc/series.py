"""Yearly and daily Sun position series.

The full analemma and the component-filtered analemma run through the same
pipeline (:func:`_positions`); the filtered variant only switches the
declination and equation-of-time terms on or off.
"""

import math
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from analemma_calc import ephemeris
from analemma_calc.dates import date_from_day_of_year, day_of_year, days_in_year
from analemma_calc.diagnostics import DiagnosticsObserver
from analemma_calc.hour_angle import MINUTES_PER_DAY, clock_minutes, hour_angle_rad
from analemma_calc.horizontal import to_horizontal
from analemma_calc.logger import get_logger
from analemma_calc.models import (
    AnalemmaInputs,
    AnalemmaPoint,
    EotExtremum,
    EotPoint,
    EphemerisSample,
    FixedLocalClockTime,
    Location,
    SolarNoon,
    SunPathPoint,
    TimeMode,
)

logger = get_logger(__name__)

NOON_MINUTES = 720


def resolve_year(year: Optional[int]) -> int:
    """Return the given year, or the current calendar year if None."""
    return date.today().year if year is None else year


def _mode_key(time_mode: TimeMode) -> str:
    if isinstance(time_mode, SolarNoon):
        return "noon-ideal" if time_mode.ideal else "noon"
    return f"{time_mode.hour}:{time_mode.minute}"


def series_key(
    name: str,
    inputs: AnalemmaInputs,
    year: int,
    include_tilt: bool = True,
    include_eccentricity: bool = True,
) -> str:
    """Signature of a series request, used for diagnostics de-duplication."""
    loc = inputs.location
    key = (
        f"{name}:{loc.latitude_deg:.6f}:{loc.longitude_deg:.6f}:"
        f"{_mode_key(inputs.time_mode)}:{inputs.tz_offset_hours}:{year}"
    )
    if name != "main":
        key += f":{int(include_tilt)}:{int(include_eccentricity)}"
    return key


def _hour_angle(
    time_mode: TimeMode,
    eot_minutes: float,
    location: Location,
    tz_offset_hours: float,
) -> float:
    if isinstance(time_mode, SolarNoon):
        if time_mode.ideal:
            return 0.0
        minutes = NOON_MINUTES
    else:
        minutes = clock_minutes(time_mode.hour, time_mode.minute)
    return hour_angle_rad(minutes, eot_minutes, location.longitude_deg, tz_offset_hours)


def _filtered_terms(
    sample: EphemerisSample,
    include_tilt: bool,
    include_eccentricity: bool,
) -> Tuple[float, float]:
    """Declination and equation of time with the disabled effects removed."""
    if include_tilt and include_eccentricity:
        return sample.declination, sample.eot_minutes

    declination = sample.declination if include_tilt else 0.0
    eot = 0.0
    if include_tilt:
        eot += sample.tilt_component_minutes
    if include_eccentricity:
        eot += sample.eccentricity_component_minutes
    return declination, eot


def _positions(
    inputs: AnalemmaInputs,
    year: int,
    include_tilt: bool,
    include_eccentricity: bool,
) -> List[AnalemmaPoint]:
    total_days = days_in_year(year)
    phi = math.radians(inputs.location.latitude_deg)

    points: List[AnalemmaPoint] = []
    for day in range(1, total_days + 1):
        sample = ephemeris.sample(day, total_days)
        declination, eot = _filtered_terms(sample, include_tilt, include_eccentricity)
        h = _hour_angle(inputs.time_mode, eot, inputs.location, inputs.tz_offset_hours)
        position = to_horizontal(phi, declination, h)
        points.append(AnalemmaPoint.from_position(date_from_day_of_year(year, day), position))

    return points


def compute_analemma(
    inputs: AnalemmaInputs,
    observer: Optional[DiagnosticsObserver] = None,
) -> List[AnalemmaPoint]:
    """Sun position at the chosen clock time on every day of the year.

    Args:
        inputs: Location, time mode, UTC offset and optional year.
        observer: Optional diagnostics observer. Never affects the result.

    Returns:
        One AnalemmaPoint per day, ordered from January 1.
    """
    year = resolve_year(inputs.year)
    points = _positions(inputs, year, include_tilt=True, include_eccentricity=True)
    if observer is not None:
        observer.observe(series_key("main", inputs, year), points)
    return points


def compute_component_filtered(
    inputs: AnalemmaInputs,
    include_tilt: bool,
    include_eccentricity: bool,
    observer: Optional[DiagnosticsObserver] = None,
) -> List[AnalemmaPoint]:
    """Analemma with the axial-tilt or eccentricity effect switched off.

    Without tilt the Sun stays on the celestial equator and the tilt term of
    the equation of time is dropped. Without eccentricity only the
    eccentricity term is dropped. With both off every day lands on the same
    position, which is a valid (empty-looking) curve.

    Args:
        inputs: Location, time mode, UTC offset and optional year.
        include_tilt: Keep declination and the tilt term.
        include_eccentricity: Keep the eccentricity term.
        observer: Optional diagnostics observer.

    Returns:
        One AnalemmaPoint per day, ordered from January 1.
    """
    year = resolve_year(inputs.year)
    if not include_tilt and not include_eccentricity:
        logger.debug("Both components disabled, series collapses to a single position")
    points = _positions(inputs, year, include_tilt, include_eccentricity)
    if observer is not None:
        key = series_key("filtered", inputs, year, include_tilt, include_eccentricity)
        observer.observe(key, points)
    return points


def compute_equation_of_time(year: Optional[int] = None) -> List[EotPoint]:
    """Equation of time for every day of the year.

    Args:
        year: Calendar year. None means the current year.

    Returns:
        One EotPoint per day, ordered by day of year.
    """
    year = resolve_year(year)
    total_days = days_in_year(year)

    points: List[EotPoint] = []
    for day in range(1, total_days + 1):
        sample = ephemeris.sample(day, total_days)
        points.append(
            EotPoint(
                date_iso=date_from_day_of_year(year, day),
                day_of_year=day,
                eot_minutes=sample.eot_minutes,
                tilt_component_minutes=sample.tilt_component_minutes,
                eccentricity_component_minutes=sample.eccentricity_component_minutes,
            )
        )
    return points


def compute_sun_path(
    location: Location,
    tz_offset_hours: float,
    on_date: date,
    step_minutes: int = 5,
) -> List[SunPathPoint]:
    """Sun positions through one day, sampled every ``step_minutes`` of clock time.

    The ephemeris is evaluated once for the date, so the path is the daily arc
    the analemma cuts across at each clock time.

    Raises:
        ValueError: If step_minutes is not positive.
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")

    sample = ephemeris.sample(day_of_year(on_date), days_in_year(on_date.year))
    phi = math.radians(location.latitude_deg)

    path: List[SunPathPoint] = []
    for minutes in range(0, MINUTES_PER_DAY, step_minutes):
        h = hour_angle_rad(minutes, sample.eot_minutes, location.longitude_deg, tz_offset_hours)
        position = to_horizontal(phi, sample.declination, h)
        path.append(
            SunPathPoint(
                clock_minutes=minutes,
                e=position.e,
                n=position.n,
                u=position.u,
                altitude_deg=position.altitude_deg,
                azimuth_deg=position.azimuth_deg,
                visible=position.altitude_deg > 0,
            )
        )
    return path


def compute_hourly_analemmas(
    location: Location,
    tz_offset_hours: float,
    year: Optional[int] = None,
    first_hour: int = 6,
    last_hour: int = 18,
    observer: Optional[DiagnosticsObserver] = None,
) -> Dict[int, List[AnalemmaPoint]]:
    """One analemma per whole clock hour, keyed by hour."""
    return {
        hour: compute_analemma(
            AnalemmaInputs(
                location=location,
                time_mode=FixedLocalClockTime(hour=hour, minute=0),
                tz_offset_hours=tz_offset_hours,
                year=year,
            ),
            observer,
        )
        for hour in range(first_hour, last_hour + 1)
    }


def find_eot_extrema(points: Sequence[EotPoint], threshold: float = 5.0) -> List[EotExtremum]:
    """Local maxima and minima of the equation of time.

    Turning points whose magnitude is at most ``threshold`` minutes are
    ignored. The extremum holding the year's largest (or smallest) value is
    flagged as global.

    Args:
        points: EoT series in day order.
        threshold: Minimum |EoT| in minutes for a turning point to count.

    Returns:
        Extrema in day order.
    """
    if not points:
        return []

    highest = max(points, key=lambda p: p.eot_minutes)
    lowest = min(points, key=lambda p: p.eot_minutes)

    extrema: List[EotExtremum] = []
    for prev, curr, nxt in zip(points, points[1:], points[2:]):
        value = curr.eot_minutes
        if abs(value) <= threshold:
            continue
        if value > prev.eot_minutes and value > nxt.eot_minutes:
            extrema.append(EotExtremum(curr, "max", curr.date_iso == highest.date_iso))
        elif value < prev.eot_minutes and value < nxt.eot_minutes:
            extrema.append(EotExtremum(curr, "min", curr.date_iso == lowest.date_iso))
    return extrema
