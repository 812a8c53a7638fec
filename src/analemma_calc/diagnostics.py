"""Series summaries and the de-duplicating diagnostics observer."""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Set, Tuple

import numpy as np

from analemma_calc.horizontal import normalize_deg
from analemma_calc.logger import get_logger
from analemma_calc.models import AnalemmaPoint

logger = get_logger(__name__)

NEAR_ZENITH_DEG = 89.0

Range = Optional[Tuple[float, float]]


@dataclass(frozen=True)
class SeriesSummary:
    """Ranges and counts over the visible part of a position series."""

    total_days: int
    visible_days: int
    near_zenith_days: int
    altitude_range: Range
    azimuth_range: Range
    e_range: Range
    u_range: Range
    max_enu_step: float  # Largest E/U distance between consecutive visible days

    def to_dict(self) -> dict:
        """Convert summary to dictionary for JSON export."""
        return {
            "counts": {
                "total_days": self.total_days,
                "visible_days": self.visible_days,
                "near_zenith_days": self.near_zenith_days,
            },
            "ranges": {
                "altitude_deg": _range_dict(self.altitude_range),
                "azimuth_deg": _range_dict(self.azimuth_range),
                "e": _range_dict(self.e_range),
                "u": _range_dict(self.u_range),
            },
            "max_enu_step": self.max_enu_step,
        }


def _range_dict(value: Range) -> Optional[dict]:
    if value is None:
        return None
    return {"min": value[0], "max": value[1]}


def _span(values: np.ndarray) -> Range:
    if values.size == 0:
        return None
    return float(values.min()), float(values.max())


def summarize(points: Sequence[AnalemmaPoint]) -> SeriesSummary:
    """Summarize the visible points of a series.

    Args:
        points: Series in day order.

    Returns:
        SeriesSummary. Ranges are None when no point is above the horizon.
    """
    visible = [p for p in points if p.visible]
    altitude = np.array([p.altitude_deg for p in visible], dtype=float)
    azimuth = np.array([p.azimuth_deg for p in visible], dtype=float)
    e = np.array([p.e for p in visible], dtype=float)
    u = np.array([p.u for p in visible], dtype=float)

    steps = np.hypot(np.diff(e), np.diff(u))
    max_step = float(steps.max()) if steps.size else 0.0

    return SeriesSummary(
        total_days=len(points),
        visible_days=len(visible),
        near_zenith_days=int(np.count_nonzero(altitude >= NEAR_ZENITH_DEG)),
        altitude_range=_span(altitude),
        azimuth_range=_span(azimuth),
        e_range=_span(e),
        u_range=_span(u),
        max_enu_step=max_step,
    )


CARDINAL_DIRECTIONS = (
    "North",
    "Northeast",
    "East",
    "Southeast",
    "South",
    "Southwest",
    "West",
    "Northwest",
)


@dataclass(frozen=True)
class CameraAngle:
    """Direction to aim a fixed camera so the whole visible analemma is centred."""

    azimuth_deg: float
    altitude_deg: float
    direction: str

    def to_dict(self) -> dict:
        """Convert camera angle to dictionary for JSON export."""
        return {
            "azimuth_deg": self.azimuth_deg,
            "altitude_deg": self.altitude_deg,
            "direction": self.direction,
        }


def azimuth_to_direction(azimuth_deg: float) -> str:
    """Name of the 45-degree compass sector holding an azimuth.

    Sectors are centred on the eight directions, so North covers
    [337.5, 360) and [0, 22.5).
    """
    sector = int(((normalize_deg(azimuth_deg) + 22.5) % 360.0) // 45.0)
    return CARDINAL_DIRECTIONS[sector]


def camera_angle(points: Sequence[AnalemmaPoint]) -> Optional[CameraAngle]:
    """Mean direction of the visible points.

    The E, N, U unit vectors are averaged and the mean vector is turned back
    into an azimuth and altitude, which stays correct when the figure straddles
    North or passes near the zenith.

    Args:
        points: Analemma series.

    Returns:
        CameraAngle, or None when no point is above the horizon.
    """
    visible = [p for p in points if p.visible]
    if not visible:
        return None

    enu = np.array([(p.e, p.n, p.u) for p in visible], dtype=float)
    e, n, u = enu.mean(axis=0)

    azimuth = normalize_deg(math.degrees(math.atan2(e, n)))
    altitude = math.degrees(math.atan2(u, math.hypot(e, n)))
    return CameraAngle(
        azimuth_deg=azimuth,
        altitude_deg=altitude,
        direction=azimuth_to_direction(azimuth),
    )


def _log_summary(key: str, summary: SeriesSummary) -> None:
    logger.debug(f"Series summary [{key}]: {summary.to_dict()}")


class DiagnosticsObserver:
    """Emits one summary per distinct series input.

    The observer keeps the keys it has already reported, so recomputing the
    same series (for example on every redraw) reports it once. Its lifetime,
    and that of its key set, is whatever the caller gives it. It only reads
    the points it is handed.
    """

    def __init__(
        self,
        enabled: bool = True,
        sink: Optional[Callable[[str, SeriesSummary], None]] = None,
    ):
        """Initialize the observer.

        Args:
            enabled: When False, observe() does nothing.
            sink: Receives (key, summary). Defaults to a DEBUG log line.
        """
        self.enabled = enabled
        self.sink = sink or _log_summary
        self._seen: Set[str] = set()

    def observe(self, key: str, points: Sequence[AnalemmaPoint]) -> bool:
        """Report a series the first time its key is seen.

        Args:
            key: Signature of the series inputs.
            points: Computed series.

        Returns:
            True if a summary was emitted.
        """
        if not self.enabled or key in self._seen:
            return False
        self._seen.add(key)
        self.sink(key, summarize(points))
        return True

    def seen(self, key: str) -> bool:
        return key in self._seen

    def reset(self) -> None:
        """Forget every reported key."""
        self._seen.clear()
