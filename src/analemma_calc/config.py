"""Configuration management module for Analemma Calculator."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class ObserverConfig:
    """Observer location and time zone settings."""

    latitude: float = 51.5  # Degrees, north positive
    longitude: float = -0.13  # Degrees, east positive
    tz_offset_hours: Optional[float] = 0.0  # None = estimate from longitude

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError("latitude must be between -90 and 90")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError("longitude must be between -180 and 180")
        if self.tz_offset_hours is not None and not -12.0 <= self.tz_offset_hours <= 14.0:
            raise ValueError("tz_offset_hours must be between -12 and 14")


@dataclass
class ClockConfig:
    """Daily clock-time rule settings."""

    mode: str = "fixed"  # fixed, solar_noon
    time: str = "12:00"  # HH:MM format, used by fixed mode
    year: Optional[int] = None  # None = current year

    def __post_init__(self) -> None:
        """Validate configuration values.

        Only the HH:MM shape is checked here. Out-of-range hour or minute
        values are clamped later by the computation.
        """
        if self.mode not in ("fixed", "solar_noon"):
            raise ValueError("mode must be 'fixed' or 'solar_noon'")
        try:
            parts = self.time.split(":")
            if len(parts) != 2:
                raise ValueError()
            int(parts[0]), int(parts[1])
        except (ValueError, AttributeError):
            raise ValueError(f"time must be in HH:MM format, got '{self.time}'")

    @property
    def hour(self) -> int:
        return int(self.time.split(":")[0])

    @property
    def minute(self) -> int:
        return int(self.time.split(":")[1])


@dataclass
class PlotConfig:
    """E-vs-U plot domain settings."""

    width_px: int = 600
    height_px: int = 400
    pad_fraction: float = 0.08
    min_pad_e: float = 0.01
    min_pad_u: float = 0.01
    min_span: float = 1e-6

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.pad_fraction < 0:
            raise ValueError("pad_fraction must be non-negative")
        if self.min_pad_e < 0 or self.min_pad_u < 0:
            raise ValueError("min_pad_e and min_pad_u must be non-negative")
        if self.min_span <= 0:
            raise ValueError("min_span must be positive")


@dataclass
class OutputConfig:
    """Export settings."""

    directory: Path = field(default_factory=lambda: Path("output"))
    format: str = "csv"  # csv, json

    def __post_init__(self) -> None:
        """Convert string path to Path object and validate format."""
        if isinstance(self.directory, str):
            self.directory = Path(self.directory)
        if self.format not in ("csv", "json"):
            raise ValueError("format must be 'csv' or 'json'")


@dataclass
class LoggingConfig:
    """Logging configuration settings."""

    level: str = "INFO"
    file: Optional[Path] = None
    max_size_mb: int = 10
    backup_count: int = 5
    diagnostics: bool = False  # Emit one summary per distinct series input

    def __post_init__(self) -> None:
        """Validate and convert configuration values."""
        if isinstance(self.file, str):
            self.file = Path(self.file)
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")
        self.level = self.level.upper()


@dataclass
class Config:
    """Main configuration container."""

    observer: ObserverConfig = field(default_factory=ObserverConfig)
    clock: ClockConfig = field(default_factory=ClockConfig)
    plot: PlotConfig = field(default_factory=PlotConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        return cls(
            observer=ObserverConfig(**data.get("observer", {})),
            clock=ClockConfig(**data.get("clock", {})),
            plot=PlotConfig(**data.get("plot", {})),
            output=OutputConfig(**data.get("output", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    def to_dict(self) -> dict:
        """Convert Config to dictionary."""
        return {
            "observer": {
                "latitude": self.observer.latitude,
                "longitude": self.observer.longitude,
                "tz_offset_hours": self.observer.tz_offset_hours,
            },
            "clock": {
                "mode": self.clock.mode,
                "time": self.clock.time,
                "year": self.clock.year,
            },
            "plot": {
                "width_px": self.plot.width_px,
                "height_px": self.plot.height_px,
                "pad_fraction": self.plot.pad_fraction,
                "min_pad_e": self.plot.min_pad_e,
                "min_pad_u": self.plot.min_pad_u,
                "min_span": self.plot.min_span,
            },
            "output": {
                "directory": str(self.output.directory),
                "format": self.output.format,
            },
            "logging": {
                "level": self.logging.level,
                "file": str(self.logging.file) if self.logging.file else None,
                "max_size_mb": self.logging.max_size_mb,
                "backup_count": self.logging.backup_count,
                "diagnostics": self.logging.diagnostics,
            },
        }


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        Config object with loaded or default values.
    """
    if config_path is None:
        default_paths = [
            Path("config/config.yaml"),
            Path("/etc/analemma-calc/config.yaml"),
            Path.home() / ".config" / "analemma-calc" / "config.yaml",
        ]
        for path in default_paths:
            if path.exists():
                config_path = path
                break

    if config_path is None or not config_path.exists():
        return Config()

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()

    return Config.from_dict(data)


def save_config(config: Config, config_path: Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Config object to save.
        config_path: Path to save configuration file.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, allow_unicode=True)
