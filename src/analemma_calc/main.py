"""Main module for Analemma Calculator.

This module integrates configuration, computation and export into a session
that the command-line interface drives.
"""

from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from analemma_calc.config import Config
from analemma_calc.diagnostics import DiagnosticsObserver, summarize
from analemma_calc.export import (
    ExportMetadata,
    analemma_to_csv,
    analemma_to_json,
    eot_to_csv,
    eot_to_json,
    export_filename,
    write_export,
)
from analemma_calc.hour_angle import estimate_tz_offset
from analemma_calc.logger import get_logger
from analemma_calc.models import (
    AnalemmaInputs,
    AnalemmaPoint,
    Domain,
    EotPoint,
    FixedLocalClockTime,
    Location,
    SolarNoon,
    SunPathPoint,
    TimeMode,
)
from analemma_calc.scaling import compute_enu_domains
from analemma_calc.series import (
    compute_analemma,
    compute_component_filtered,
    compute_equation_of_time,
    compute_sun_path,
    resolve_year,
)

logger = get_logger(__name__)


class AnalemmaSession:
    """Computation context built from one configuration.

    The diagnostics observer lives as long as the session, so a series that
    is recomputed with the same inputs is only summarized once.
    """

    def __init__(self, config: Config, observer: Optional[DiagnosticsObserver] = None):
        """Initialize the session.

        Args:
            config: Calculator configuration.
            observer: Diagnostics observer. Defaults to one enabled by
                ``logging.diagnostics``.
        """
        self.config = config
        self.observer = observer or DiagnosticsObserver(enabled=config.logging.diagnostics)

        self.location = Location(config.observer.latitude, config.observer.longitude)
        self.year = resolve_year(config.clock.year)

        if config.observer.tz_offset_hours is None:
            self.tz_offset_hours = estimate_tz_offset(config.observer.longitude)
            logger.info(
                f"No time zone offset configured, estimated UTC{self.tz_offset_hours:+g} "
                f"from longitude {config.observer.longitude}"
            )
        else:
            self.tz_offset_hours = float(config.observer.tz_offset_hours)

        self.time_mode = self._time_mode()

    def _time_mode(self) -> TimeMode:
        if self.config.clock.mode == "solar_noon":
            return SolarNoon()
        return FixedLocalClockTime(hour=self.config.clock.hour, minute=self.config.clock.minute)

    @property
    def inputs(self) -> AnalemmaInputs:
        return AnalemmaInputs(
            location=self.location,
            time_mode=self.time_mode,
            tz_offset_hours=self.tz_offset_hours,
            year=self.year,
        )

    def analemma(self) -> List[AnalemmaPoint]:
        """Compute the configured analemma."""
        points = compute_analemma(self.inputs, self.observer)
        logger.info(
            f"Computed analemma for {self.year}: "
            f"{sum(p.visible for p in points)}/{len(points)} days above the horizon"
        )
        return points

    def filtered(self, include_tilt: bool, include_eccentricity: bool) -> List[AnalemmaPoint]:
        """Compute the analemma with one or both effects removed."""
        return compute_component_filtered(
            self.inputs, include_tilt, include_eccentricity, self.observer
        )

    def equation_of_time(self) -> List[EotPoint]:
        """Compute the equation of time for the configured year."""
        return compute_equation_of_time(self.year)

    def sun_path(self, on_date: date, step_minutes: int = 5) -> List[SunPathPoint]:
        """Compute the Sun's path across one date."""
        return compute_sun_path(self.location, self.tz_offset_hours, on_date, step_minutes)

    def domains(self, points: Optional[List[AnalemmaPoint]] = None) -> Tuple[Domain, Domain]:
        """Aspect-locked E and U plot domains for the visible analemma.

        Falls back to the full unit square when no point is visible.
        """
        if points is None:
            points = self.analemma()
        summary = summarize(points)
        e_min, e_max = summary.e_range or (-1.0, 1.0)
        u_min, u_max = summary.u_range or (0.0, 1.0)

        plot = self.config.plot
        return compute_enu_domains(
            e_min,
            e_max,
            u_min,
            u_max,
            plot_width_px=plot.width_px,
            plot_height_px=plot.height_px,
            pad_fraction=plot.pad_fraction,
            min_pad_e=plot.min_pad_e,
            min_pad_u=plot.min_pad_u,
            min_span=plot.min_span,
        )

    def export(
        self,
        kind: str = "analemma",
        fmt: Optional[str] = None,
        output: Optional[Path] = None,
        label: str = "",
    ) -> Path:
        """Export a series to the output directory.

        Args:
            kind: "analemma" or "eot".
            fmt: "csv" or "json". Defaults to the configured format.
            output: Explicit destination file.
            label: Location label used in metadata and the file name.

        Returns:
            Path of the written file.

        Raises:
            ValueError: If kind or fmt is unknown.
            ExportError: If writing fails.
        """
        fmt = fmt or self.config.output.format
        if fmt not in ("csv", "json"):
            raise ValueError(f"Unsupported export format: {fmt}")

        if kind == "analemma":
            points = self.analemma()
            metadata = ExportMetadata(
                latitude=self.location.latitude_deg,
                longitude=self.location.longitude_deg,
                time_mode=self.time_mode,
                tz_offset_hours=self.tz_offset_hours,
                year=self.year,
                label=label,
            )
            render = analemma_to_csv if fmt == "csv" else analemma_to_json
            content = render(points, metadata)
        elif kind == "eot":
            render_eot = eot_to_csv if fmt == "csv" else eot_to_json
            content = render_eot(self.equation_of_time(), self.year)
        else:
            raise ValueError(f"Unsupported export kind: {kind}")

        if output is None:
            output = self.config.output.directory / export_filename(kind, label, fmt)
        return write_export(content, output)

    def get_status(self) -> dict:
        """Get the resolved session settings.

        Returns:
            Dictionary with observer, clock and diagnostics settings.
        """
        return {
            "observer": {
                "latitude": self.location.latitude_deg,
                "longitude": self.location.longitude_deg,
                "tz_offset_hours": self.tz_offset_hours,
                "tz_estimated": self.config.observer.tz_offset_hours is None,
            },
            "clock": {
                "time_mode": self.time_mode.to_dict(),
                "year": self.year,
            },
            "diagnostics": {
                "enabled": self.observer.enabled,
            },
        }
