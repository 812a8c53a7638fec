"""Command-line interface for Analemma Calculator."""

import json
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Optional

import click
import yaml

from analemma_calc import __version__
from analemma_calc.config import Config, load_config
from analemma_calc.diagnostics import camera_angle, summarize
from analemma_calc.export import ExportError
from analemma_calc.logger import setup_logger
from analemma_calc.main import AnalemmaSession
from analemma_calc.series import find_eot_extrema


def observer_options(func: Callable) -> Callable:
    """Options shared by every command that computes positions."""
    options = [
        click.option("--lat", "latitude", type=float, help="Latitude in degrees (north positive)"),
        click.option("--lon", "longitude", type=float, help="Longitude in degrees (east positive)"),
        click.option("--tz", "tz_offset", type=float, help="UTC offset in hours, e.g. 7 or -3.5"),
        click.option(
            "--estimate-tz",
            is_flag=True,
            help="Estimate the UTC offset from longitude",
        ),
        click.option("--time", "clock_time", type=str, help="Clock time in HH:MM format"),
        click.option("--solar-noon", is_flag=True, help="Use local solar noon every day"),
        click.option("--year", type=int, help="Calendar year (default: current year)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_session(ctx: click.Context, **overrides) -> AnalemmaSession:
    """Load the configuration, apply command-line overrides and open a session."""
    config = load_config(ctx.obj.get("config_path"))

    try:
        observer = config.observer
        if overrides.get("latitude") is not None or overrides.get("longitude") is not None:
            observer = replace(
                observer,
                latitude=observer.latitude if overrides.get("latitude") is None else overrides["latitude"],
                longitude=observer.longitude if overrides.get("longitude") is None else overrides["longitude"],
            )
        if overrides.get("estimate_tz"):
            observer = replace(observer, tz_offset_hours=None)
        elif overrides.get("tz_offset") is not None:
            observer = replace(observer, tz_offset_hours=overrides["tz_offset"])

        clock = config.clock
        if overrides.get("solar_noon"):
            clock = replace(clock, mode="solar_noon")
        elif overrides.get("clock_time"):
            clock = replace(clock, mode="fixed", time=overrides["clock_time"])
        if overrides.get("year") is not None:
            clock = replace(clock, year=overrides["year"])
    except ValueError as e:
        raise click.BadParameter(str(e))

    config = replace(config, observer=observer, clock=clock)
    setup_logger(config.logging)
    return AnalemmaSession(config)


def _echo_header(session: AnalemmaSession) -> None:
    status = session.get_status()
    obs = status["observer"]
    tz_note = " (estimated)" if obs["tz_estimated"] else ""
    click.echo(f"Location: {obs['latitude']:.4f}, {obs['longitude']:.4f}")
    click.echo(f"Time zone: UTC{obs['tz_offset_hours']:+g}{tz_note}")
    click.echo(f"Time mode: {status['clock']['time_mode']}")
    click.echo(f"Year: {status['clock']['year']}\n")


def _echo_points(points, every: int) -> None:
    click.echo(f"  {'Date':<12}{'Azimuth':>10}{'Altitude':>10}{'E':>10}{'U':>10}")
    for i, p in enumerate(points):
        if i % every:
            continue
        marker = "" if p.visible else "  (below horizon)"
        click.echo(
            f"  {p.date_iso:<12}{p.azimuth_deg:>10.2f}{p.altitude_deg:>10.2f}"
            f"{p.e:>10.4f}{p.u:>10.4f}{marker}"
        )


def _echo_summary(points) -> None:
    summary = summarize(points)
    click.echo(f"\nVisible days: {summary.visible_days} / {summary.total_days}")
    if summary.azimuth_range:
        click.echo(
            f"Azimuth range: {summary.azimuth_range[0]:.1f} to {summary.azimuth_range[1]:.1f} deg"
        )
        click.echo(
            f"Altitude range: {summary.altitude_range[0]:.1f} to {summary.altitude_range[1]:.1f} deg"
        )
    angle = camera_angle(points)
    if angle is not None:
        click.echo(
            f"Camera angle: {angle.direction} ({angle.azimuth_deg:.1f} deg), "
            f"{angle.altitude_deg:.1f} deg elevation"
        )


@click.group()
@click.version_option(version=__version__, prog_name="analemma-calc")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]) -> None:
    """Analemma Calculator.

    Sun positions at a fixed clock time across a year, and the equation of
    time behind the figure-eight.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@observer_options
@click.option("--every", type=click.IntRange(min=1), default=7, help="Print every Nth day")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def analemma(ctx: click.Context, every: int, as_json: bool, **overrides) -> None:
    """Compute the analemma for the configured location and clock time."""
    session = _build_session(ctx, **overrides)
    points = session.analemma()

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in points], indent=2))
        return

    _echo_header(session)
    _echo_points(points, every)
    _echo_summary(points)


@cli.command()
@observer_options
@click.option("--no-tilt", is_flag=True, help="Remove the axial-tilt effect")
@click.option("--no-eccentricity", is_flag=True, help="Remove the orbital-eccentricity effect")
@click.option("--every", type=click.IntRange(min=1), default=7, help="Print every Nth day")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def filtered(
    ctx: click.Context,
    no_tilt: bool,
    no_eccentricity: bool,
    every: int,
    as_json: bool,
    **overrides,
) -> None:
    """Compute the analemma with one or both effects switched off."""
    session = _build_session(ctx, **overrides)
    points = session.filtered(include_tilt=not no_tilt, include_eccentricity=not no_eccentricity)

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in points], indent=2))
        return

    _echo_header(session)
    if no_tilt and no_eccentricity:
        click.echo("Both effects removed: the Sun returns to the same spot every day.")
        p = points[0]
        click.echo(f"  Azimuth {p.azimuth_deg:.2f} deg, altitude {p.altitude_deg:.2f} deg")
        return
    _echo_points(points, every)
    _echo_summary(points)


@cli.command()
@click.option("--year", type=int, help="Calendar year (default: current year)")
@click.option("--every", type=click.IntRange(min=1), default=7, help="Print every Nth day")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def eot(ctx: click.Context, year: Optional[int], every: int, as_json: bool) -> None:
    """Show the equation of time and its two components."""
    session = _build_session(ctx, year=year)
    points = session.equation_of_time()

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in points], indent=2))
        return

    click.echo(f"Equation of time, {session.year} (minutes, sundial minus clock)\n")
    click.echo(f"  {'Date':<12}{'Day':>5}{'EoT':>9}{'Tilt':>9}{'Eccent.':>9}")
    for i, p in enumerate(points):
        if i % every:
            continue
        click.echo(
            f"  {p.date_iso:<12}{p.day_of_year:>5}{p.eot_minutes:>9.2f}"
            f"{p.tilt_component_minutes:>9.2f}{p.eccentricity_component_minutes:>9.2f}"
        )

    click.echo("\nTurning points:")
    for extremum in find_eot_extrema(points):
        click.echo(f"  {extremum.point.date_iso}: {extremum.label}")


@cli.command("sun-path")
@observer_options
@click.option(
    "--date",
    "on_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Date (YYYY-MM-DD, default: today)",
)
@click.option("--step", type=click.IntRange(min=1), default=30, help="Minutes between samples")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def sun_path(
    ctx: click.Context,
    on_date: Optional[datetime],
    step: int,
    as_json: bool,
    **overrides,
) -> None:
    """Trace the Sun across a single day."""
    session = _build_session(ctx, **overrides)
    day = on_date.date() if on_date else date.today()
    path = session.sun_path(day, step_minutes=step)

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in path], indent=2))
        return

    click.echo(f"Sun path for {day.isoformat()}\n")
    click.echo(f"  {'Time':<8}{'Azimuth':>10}{'Altitude':>10}")
    for p in path:
        if p.visible:
            click.echo(f"  {p.clock_time:<8}{p.azimuth_deg:>10.2f}{p.altitude_deg:>10.2f}")


@cli.command()
@observer_options
@click.option("--width", type=int, help="Plot width in pixels")
@click.option("--height", type=int, help="Plot height in pixels")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def domains(
    ctx: click.Context,
    width: Optional[int],
    height: Optional[int],
    as_json: bool,
    **overrides,
) -> None:
    """Aspect-locked E/U plot domains for the analemma."""
    session = _build_session(ctx, **overrides)
    if width is not None:
        session.config.plot.width_px = width
    if height is not None:
        session.config.plot.height_px = height

    e_domain, u_domain = session.domains()

    if as_json:
        click.echo(json.dumps({"e_domain": list(e_domain), "u_domain": list(u_domain)}))
        return

    click.echo(f"E domain: [{e_domain[0]:.6f}, {e_domain[1]:.6f}]")
    click.echo(f"U domain: [{u_domain[0]:.6f}, {u_domain[1]:.6f}]")


@cli.command()
@observer_options
@click.option(
    "--kind",
    type=click.Choice(["analemma", "eot"]),
    default="analemma",
    help="Series to export",
)
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), help="Export format")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file (default: generated name in the output directory)",
)
@click.option("--label", default="", help="Location label for metadata and file name")
@click.pass_context
def export(
    ctx: click.Context,
    kind: str,
    fmt: Optional[str],
    output: Optional[Path],
    label: str,
    **overrides,
) -> None:
    """Export a series as CSV or JSON."""
    session = _build_session(ctx, **overrides)
    try:
        path = session.export(kind=kind, fmt=fmt, output=output, label=label)
    except ExportError as e:
        click.echo(f"Export failed: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported to: {path}")


@cli.command("config")
@click.option("--show", is_flag=True, help="Show current configuration")
@click.option("--create", is_flag=True, help="Create default configuration file")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("config/config.yaml"),
    help="Output path for configuration file",
)
@click.pass_context
def config_cmd(
    ctx: click.Context, show: bool, create: bool, output: Path
) -> None:
    """Manage configuration."""
    config_path = ctx.obj.get("config_path")

    if create:
        if output.exists():
            if not click.confirm(f"{output} already exists. Overwrite?"):
                return

        config = Config()
        output.parent.mkdir(parents=True, exist_ok=True)

        with open(output, "w", encoding="utf-8") as f:
            yaml.dump(
                config.to_dict(), f, default_flow_style=False, allow_unicode=True
            )

        click.echo(f"Configuration file created: {output}")
        return

    config = load_config(config_path)
    click.echo(yaml.dump(config.to_dict(), default_flow_style=False, allow_unicode=True))


if __name__ == "__main__":
    cli()
