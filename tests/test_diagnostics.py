"""Tests for series summaries and the diagnostics observer."""

import logging
import math

import pytest

from analemma_calc.diagnostics import (
    DiagnosticsObserver,
    SeriesSummary,
    azimuth_to_direction,
    camera_angle,
    summarize,
)
from analemma_calc.models import AnalemmaInputs, AnalemmaPoint, FixedLocalClockTime, Location
from analemma_calc.series import compute_analemma


def _point(day, e, u, altitude, azimuth):
    return AnalemmaPoint(
        date_iso=f"2024-01-{day:02d}",
        e=e,
        n=0.0,
        u=u,
        altitude_deg=altitude,
        azimuth_deg=azimuth,
        visible=altitude > 0,
    )


def _pointing(azimuth, altitude):
    az, alt = math.radians(azimuth), math.radians(altitude)
    return AnalemmaPoint(
        date_iso="2024-01-01",
        e=math.cos(alt) * math.sin(az),
        n=math.cos(alt) * math.cos(az),
        u=math.sin(alt),
        altitude_deg=altitude,
        azimuth_deg=azimuth,
        visible=altitude > 0,
    )


@pytest.fixture
def sample_points():
    """Three visible days around one night-time point."""
    return [
        _point(1, 0.0, 0.5, 30.0, 150.0),
        _point(2, 0.3, 0.9, 89.5, 160.0),
        _point(3, 0.9, -0.2, -10.0, 200.0),
        _point(4, 0.6, 0.1, 5.0, 140.0),
    ]


class TestSummarize:
    """Tests for summarize."""

    def test_counts(self, sample_points):
        """Test totals, visible days and near-zenith days."""
        summary = summarize(sample_points)
        assert summary.total_days == 4
        assert summary.visible_days == 3
        assert summary.near_zenith_days == 1

    def test_ranges_use_visible_points(self, sample_points):
        """Test that below-horizon points are excluded from ranges."""
        summary = summarize(sample_points)
        assert summary.altitude_range == (5.0, 89.5)
        assert summary.azimuth_range == (140.0, 160.0)
        assert summary.e_range == (0.0, 0.6)
        assert summary.u_range == (0.1, 0.9)

    def test_max_step_between_visible_days(self, sample_points):
        """Test the largest E/U jump between consecutive visible days."""
        summary = summarize(sample_points)
        assert summary.max_enu_step == pytest.approx((0.3**2 + 0.8**2) ** 0.5)

    def test_nothing_visible(self):
        """Test that an all-night series has no ranges."""
        summary = summarize([_point(1, 0.1, -0.5, -30.0, 0.0)])
        assert summary.visible_days == 0
        assert summary.altitude_range is None
        assert summary.max_enu_step == 0.0

    def test_to_dict(self, sample_points):
        """Test dictionary conversion."""
        data = summarize(sample_points).to_dict()
        assert data["counts"]["visible_days"] == 3
        assert data["ranges"]["altitude_deg"] == {"min": 5.0, "max": 89.5}


class TestDiagnosticsObserver:
    """Tests for DiagnosticsObserver."""

    def test_emits_once_per_key(self, sample_points):
        """Test de-duplication of repeated keys."""
        received = []
        observer = DiagnosticsObserver(sink=lambda key, summary: received.append((key, summary)))

        assert observer.observe("a", sample_points) is True
        assert observer.observe("a", sample_points) is False
        assert observer.observe("b", sample_points) is True

        assert [key for key, _ in received] == ["a", "b"]
        assert isinstance(received[0][1], SeriesSummary)

    def test_disabled(self, sample_points):
        """Test that a disabled observer emits nothing and remembers nothing."""
        received = []
        observer = DiagnosticsObserver(enabled=False, sink=lambda k, s: received.append(k))
        assert observer.observe("a", sample_points) is False
        assert received == []
        assert not observer.seen("a")

    def test_reset(self, sample_points):
        """Test that reset allows keys to be reported again."""
        received = []
        observer = DiagnosticsObserver(sink=lambda k, s: received.append(k))
        observer.observe("a", sample_points)
        observer.reset()
        observer.observe("a", sample_points)
        assert received == ["a", "a"]

    def test_independent_observers(self, sample_points):
        """Test that each observer keeps its own key set."""
        first = DiagnosticsObserver(sink=lambda k, s: None)
        second = DiagnosticsObserver(sink=lambda k, s: None)
        first.observe("a", sample_points)
        assert first.seen("a")
        assert not second.seen("a")

    def test_default_sink_logs_debug(self, sample_points, caplog):
        """Test that the default sink writes a DEBUG record."""
        observer = DiagnosticsObserver()
        with caplog.at_level(logging.DEBUG, logger="analemma_calc.diagnostics"):
            observer.observe("london", sample_points)
        assert any("Series summary [london]" in r.message for r in caplog.records)


class TestCameraAngle:
    """Tests for camera_angle and azimuth_to_direction."""

    def test_mean_of_vectors(self):
        """Test averaging two points on the southern meridian."""
        angle = camera_angle([_pointing(180.0, 30.0), _pointing(180.0, 60.0)])
        assert angle.azimuth_deg == pytest.approx(180.0)
        assert angle.altitude_deg == pytest.approx(45.0)
        assert angle.direction == "South"

    def test_straddling_north(self):
        """Test that 350 and 10 degrees average to North, not South."""
        angle = camera_angle([_pointing(350.0, 30.0), _pointing(10.0, 30.0)])
        assert min(angle.azimuth_deg, 360.0 - angle.azimuth_deg) < 1e-6
        assert 30.0 < angle.altitude_deg < 31.0
        assert angle.direction == "North"

    def test_ignores_points_below_horizon(self):
        """Test that night-time points do not pull the mean."""
        angle = camera_angle([_pointing(90.0, 20.0), _pointing(270.0, -20.0)])
        assert angle.azimuth_deg == pytest.approx(90.0)
        assert angle.altitude_deg == pytest.approx(20.0)

    def test_nothing_visible(self):
        """Test that an all-night series has no camera angle."""
        assert camera_angle([_pointing(0.0, -10.0)]) is None
        assert camera_angle([]) is None

    def test_london_morning_series(self):
        """Test the 10:00 London analemma, whose centre lies south-west."""
        inputs = AnalemmaInputs(
            location=Location(51.5, -0.13),
            time_mode=FixedLocalClockTime(10, 0),
            tz_offset_hours=0.0,
            year=2024,
        )
        angle = camera_angle(compute_analemma(inputs))
        assert 200.0 < angle.azimuth_deg < 240.0
        assert 10.0 < angle.altitude_deg < 54.0
        assert angle.direction == "Southwest"
        assert angle.to_dict()["direction"] == "Southwest"

    @pytest.mark.parametrize(
        "azimuth, expected",
        [
            (0.0, "North"),
            (22.4, "North"),
            (22.5, "Northeast"),
            (67.5, "East"),
            (112.5, "Southeast"),
            (157.5, "South"),
            (202.5, "Southwest"),
            (247.5, "West"),
            (292.5, "Northwest"),
            (337.4, "Northwest"),
            (337.5, "North"),
            (359.9, "North"),
            (-90.0, "West"),
            (450.0, "East"),
        ],
    )
    def test_direction_sectors(self, azimuth, expected):
        """Test the eight 45-degree sectors and their edges."""
        assert azimuth_to_direction(azimuth) == expected
