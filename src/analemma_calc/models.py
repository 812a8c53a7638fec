"""Data types shared by the computation, export and CLI layers."""

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

Domain = Tuple[float, float]


@dataclass(frozen=True)
class Location:
    """Observer position in decimal degrees (north and east positive)."""

    latitude_deg: float
    longitude_deg: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90.0 <= self.latitude_deg <= 90.0:
            raise ValueError(f"latitude_deg must be between -90 and 90, got {self.latitude_deg}")
        if not -180.0 <= self.longitude_deg <= 180.0:
            raise ValueError(
                f"longitude_deg must be between -180 and 180, got {self.longitude_deg}"
            )


@dataclass(frozen=True)
class FixedLocalClockTime:
    """The same civil clock time on every day of the year.

    Hour and minute are stored as given. Values outside 0..23 and 0..59 are
    clamped when the series is computed, never rejected.
    """

    kind: ClassVar[str] = "fixedLocalClockTime"

    hour: int
    minute: int = 0

    def to_dict(self) -> dict:
        return {"kind": self.kind, "hour": self.hour, "minute": self.minute}


@dataclass(frozen=True)
class SolarNoon:
    """Local noon every day.

    By default noon is resolved as clock 12:00 through the full model, so the
    equation of time and the longitude offset still move the Sun off the
    meridian. ``ideal=True`` pins the hour angle to exactly zero.
    """

    kind: ClassVar[str] = "solarNoon"

    ideal: bool = False

    def to_dict(self) -> dict:
        return {"kind": self.kind, "ideal": self.ideal}


TimeMode = Union[FixedLocalClockTime, SolarNoon]


def time_mode_from_dict(data: dict) -> TimeMode:
    """Build a TimeMode from its tagged dictionary form.

    Args:
        data: ``{"kind": "fixedLocalClockTime", "hour": h, "minute": m}`` or
            ``{"kind": "solarNoon"}`` (optionally with ``"ideal"``).

    Returns:
        The matching TimeMode variant.

    Raises:
        ValueError: If the kind is unknown or a field does not belong to it.
    """
    fields = dict(data)
    kind = fields.pop("kind", None)

    if kind == FixedLocalClockTime.kind:
        unknown = set(fields) - {"hour", "minute"}
        if unknown or "hour" not in fields:
            raise ValueError(
                f"fixedLocalClockTime takes 'hour' and optional 'minute', got {sorted(data)}"
            )
        return FixedLocalClockTime(hour=int(fields["hour"]), minute=int(fields.get("minute", 0)))

    if kind == SolarNoon.kind:
        unknown = set(fields) - {"ideal"}
        if unknown:
            raise ValueError(f"solarNoon takes no fields besides 'ideal', got {sorted(unknown)}")
        return SolarNoon(ideal=bool(fields.get("ideal", False)))

    raise ValueError(f"Unknown time mode kind: {kind!r}")


@dataclass(frozen=True)
class AnalemmaInputs:
    """Everything a yearly position series depends on."""

    location: Location
    time_mode: TimeMode
    tz_offset_hours: float = 0.0  # Signed, e.g. +7 for UTC+7
    year: Optional[int] = None  # None = current calendar year


@dataclass(frozen=True)
class EphemerisSample:
    """Low-order orbital model evaluated for one day.

    ``eot_minutes`` is the sum of the two components, so the decomposition
    always adds up exactly.
    """

    orbital_angle: float  # radians
    declination: float  # radians
    eot_minutes: float
    tilt_component_minutes: float
    eccentricity_component_minutes: float


@dataclass(frozen=True)
class HorizontalPosition:
    """Sun direction in the observer's East-North-Up frame."""

    e: float
    n: float
    u: float
    altitude_deg: float  # -90..90
    azimuth_deg: float  # 0..360, 0 = North, clockwise through East


@dataclass(frozen=True)
class AnalemmaPoint:
    """Sun position for one day of the series."""

    date_iso: str
    e: float
    n: float
    u: float
    altitude_deg: float
    azimuth_deg: float
    visible: bool  # altitude_deg > 0

    @classmethod
    def from_position(cls, date_iso: str, position: HorizontalPosition) -> "AnalemmaPoint":
        return cls(
            date_iso=date_iso,
            e=position.e,
            n=position.n,
            u=position.u,
            altitude_deg=position.altitude_deg,
            azimuth_deg=position.azimuth_deg,
            visible=position.altitude_deg > 0,
        )

    def to_dict(self) -> dict:
        """Convert point to dictionary for JSON export."""
        return {
            "date": self.date_iso,
            "e": self.e,
            "n": self.n,
            "u": self.u,
            "altitude_deg": self.altitude_deg,
            "azimuth_deg": self.azimuth_deg,
            "visible": self.visible,
        }


@dataclass(frozen=True)
class EotPoint:
    """Equation of time for one day, with its two-term decomposition."""

    date_iso: str
    day_of_year: int
    eot_minutes: float
    tilt_component_minutes: float
    eccentricity_component_minutes: float

    def to_dict(self) -> dict:
        """Convert point to dictionary for JSON export."""
        return {
            "date": self.date_iso,
            "day_of_year": self.day_of_year,
            "eot_minutes": self.eot_minutes,
            "tilt_component_minutes": self.tilt_component_minutes,
            "eccentricity_component_minutes": self.eccentricity_component_minutes,
        }


@dataclass(frozen=True)
class SunPathPoint:
    """Sun position at one clock time of a single date."""

    clock_minutes: int
    e: float
    n: float
    u: float
    altitude_deg: float
    azimuth_deg: float
    visible: bool

    @property
    def clock_time(self) -> str:
        return f"{self.clock_minutes // 60:02d}:{self.clock_minutes % 60:02d}"

    def to_dict(self) -> dict:
        """Convert point to dictionary for JSON export."""
        return {
            "time": self.clock_time,
            "e": self.e,
            "n": self.n,
            "u": self.u,
            "altitude_deg": self.altitude_deg,
            "azimuth_deg": self.azimuth_deg,
            "visible": self.visible,
        }


@dataclass(frozen=True)
class EotExtremum:
    """A turning point of the equation of time."""

    point: EotPoint
    kind: str  # "max" or "min"
    is_global: bool

    @property
    def label(self) -> str:
        minutes = self.point.eot_minutes
        if self.kind == "max":
            if self.is_global:
                return f"Sundial ahead of clock by {minutes:.1f} min"
            return f"Local max: {minutes:.1f} min"
        if self.is_global:
            return f"Sundial behind clock by {abs(minutes):.1f} min"
        return f"Local min: {minutes:.1f} min"
