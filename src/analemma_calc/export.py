"""CSV and JSON export for Analemma Calculator."""

import csv
import io
import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from analemma_calc import __version__
from analemma_calc.diagnostics import CameraAngle, camera_angle, summarize
from analemma_calc.logger import get_logger
from analemma_calc.models import AnalemmaPoint, EotPoint, TimeMode

logger = get_logger(__name__)


class ExportError(Exception):
    """Exception raised for export-related errors."""

    pass


def format_utc_offset(tz_offset_hours: float) -> str:
    sign = "+" if tz_offset_hours >= 0 else "-"
    return f"UTC{sign}{abs(tz_offset_hours):g}"


@dataclass
class ExportMetadata:
    """Context written alongside exported points."""

    latitude: float
    longitude: float
    time_mode: TimeMode
    tz_offset_hours: float
    year: int
    label: str = ""
    generated: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec="seconds")
    )
    software_name: str = "analemma-calc"
    software_version: str = __version__

    @property
    def time_label(self) -> str:
        mode = self.time_mode.to_dict()
        if mode["kind"] == "solarNoon":
            return "solar noon (ideal)" if mode["ideal"] else "solar noon (12:00 clock)"
        return f"{mode['hour']:02d}:{mode['minute']:02d} (standard time, no DST)"

    def to_dict(self) -> dict:
        """Convert metadata to dictionary for JSON export."""
        return {
            "location": self.label or None,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "time_mode": self.time_mode.to_dict(),
            "time": self.time_label,
            "tz_offset_hours": self.tz_offset_hours,
            "tz_offset": format_utc_offset(self.tz_offset_hours),
            "year": self.year,
            "generated": self.generated,
            "software": {
                "name": self.software_name,
                "version": self.software_version,
            },
        }

    def header_lines(self) -> List[str]:
        lines = []
        if self.label:
            lines.append(f"Location: {self.label}")
        lines.extend(
            [
                f"Latitude: {self.latitude:.6f}",
                f"Longitude: {self.longitude:.6f}",
                f"Time: {self.time_label}",
                f"Time Zone Offset: {format_utc_offset(self.tz_offset_hours)}",
                f"Year: {self.year}",
            ]
        )
        return lines


def analemma_to_csv(points: Sequence[AnalemmaPoint], metadata: ExportMetadata) -> str:
    """Render an analemma series as CSV with a ``#`` comment header.

    Args:
        points: Analemma series.
        metadata: Export context.

    Returns:
        CSV text.
    """
    summary = summarize(points)
    buf = io.StringIO()
    buf.write("# Sun Analemma Data\n")
    for line in metadata.header_lines():
        buf.write(f"# {line}\n")
    angle = camera_angle(points)
    if angle is not None:
        buf.write(f"# {_camera_line(angle)}\n")
    buf.write(f"# Total Points: {summary.total_days}\n")
    buf.write(f"# Visible Points: {summary.visible_days}\n")
    buf.write(f"# Generated: {metadata.generated}\n")
    buf.write("\n")

    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["date", "azimuth_deg", "altitude_deg", "e", "n", "u", "visible"])
    for p in points:
        writer.writerow(
            [
                p.date_iso,
                f"{p.azimuth_deg:.4f}",
                f"{p.altitude_deg:.4f}",
                f"{p.e:.6f}",
                f"{p.n:.6f}",
                f"{p.u:.6f}",
                "true" if p.visible else "false",
            ]
        )
    return buf.getvalue()


def analemma_to_json(points: Sequence[AnalemmaPoint], metadata: ExportMetadata) -> str:
    """Render an analemma series as a JSON document with metadata and statistics."""
    summary = summarize(points)
    data = {
        "metadata": metadata.to_dict(),
        "statistics": {
            "total_points": summary.total_days,
            "visible_points": summary.visible_days,
            "azimuth_range": _range(summary.azimuth_range),
            "altitude_range": _range(summary.altitude_range),
        },
        "points": [p.to_dict() for p in points],
    }
    angle = camera_angle(points)
    data["metadata"]["camera_angle"] = angle.to_dict() if angle else None
    return json.dumps(data, indent=2, ensure_ascii=False)


def _camera_line(angle: CameraAngle) -> str:
    return (
        f"Camera Angle: {angle.direction} ({angle.azimuth_deg:.1f} deg), "
        f"{angle.altitude_deg:.1f} deg elevation"
    )


def eot_to_csv(points: Sequence[EotPoint], year: int) -> str:
    """Render an equation-of-time series as CSV."""
    buf = io.StringIO()
    buf.write("# Equation of Time\n")
    buf.write(f"# Year: {year}\n")
    buf.write("# Positive values: sundial ahead of clock\n")
    buf.write("\n")

    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(
        [
            "date",
            "day_of_year",
            "eot_minutes",
            "tilt_component_minutes",
            "eccentricity_component_minutes",
        ]
    )
    for p in points:
        writer.writerow(
            [
                p.date_iso,
                p.day_of_year,
                f"{p.eot_minutes:.4f}",
                f"{p.tilt_component_minutes:.4f}",
                f"{p.eccentricity_component_minutes:.4f}",
            ]
        )
    return buf.getvalue()


def eot_to_json(points: Sequence[EotPoint], year: int) -> str:
    """Render an equation-of-time series as JSON."""
    data = {
        "metadata": {"year": year, "days": len(points)},
        "points": [p.to_dict() for p in points],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def _range(value) -> Optional[dict]:
    if value is None:
        return None
    return {"min": value[0], "max": value[1]}


def export_filename(kind: str, label: str, fmt: str, when: Optional[datetime] = None) -> str:
    """File name like ``analemma_London_2024-06-01.csv``."""
    when = when or datetime.now()
    safe_label = re.sub(r"[^a-zA-Z0-9]", "_", label) if label else "location"
    return f"{kind}_{safe_label}_{when.strftime('%Y-%m-%d')}.{fmt}"


def write_export(content: str, path: Path) -> Path:
    """Write exported text to disk.

    Args:
        content: CSV or JSON text.
        path: Destination file.

    Returns:
        The written path.

    Raises:
        ExportError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except PermissionError:
        raise ExportError(f"Permission denied writing export: {path}")
    except OSError as e:
        raise ExportError(f"Failed to write export {path}: {e}")

    logger.info(f"Export saved: {path}")
    return path
