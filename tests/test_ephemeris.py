"""Tests for the low-order solar ephemeris."""

import math

import pytest

from analemma_calc import ephemeris


def _reference_eot(gamma):
    return 229.18 * (
        0.000075
        + 0.001868 * math.cos(gamma)
        - 0.032077 * math.sin(gamma)
        - 0.014615 * math.cos(2 * gamma)
        - 0.040849 * math.sin(2 * gamma)
    )


class TestOrbitalAngle:
    """Tests for orbital_angle."""

    def test_first_day_is_half_a_day_in(self):
        """Test that day 1 is sampled at noon, not midnight."""
        assert ephemeris.orbital_angle(1, 365) == pytest.approx(math.pi / 365)

    def test_last_day_stays_below_full_turn(self):
        """Test that the last day stays inside one orbit."""
        gamma = ephemeris.orbital_angle(366, 366)
        assert gamma < 2 * math.pi
        assert gamma == pytest.approx(2 * math.pi * 365.5 / 366)


class TestDeclination:
    """Tests for declination."""

    def test_range_over_year(self):
        """Test that declination stays within the obliquity bounds."""
        for day in range(1, 366):
            dec = ephemeris.declination(ephemeris.orbital_angle(day, 365))
            assert -0.412 <= dec <= 0.412

    def test_june_solstice(self):
        """Test declination near +23.4 degrees in late June."""
        dec = ephemeris.declination(ephemeris.orbital_angle(172, 365))
        assert math.degrees(dec) == pytest.approx(23.4, abs=0.3)

    def test_december_solstice(self):
        """Test declination near -23.4 degrees in late December."""
        dec = ephemeris.declination(ephemeris.orbital_angle(355, 365))
        assert math.degrees(dec) == pytest.approx(-23.4, abs=0.3)

    def test_march_equinox(self):
        """Test declination crossing zero around March 20."""
        before = ephemeris.declination(ephemeris.orbital_angle(78, 365))
        after = ephemeris.declination(ephemeris.orbital_angle(81, 365))
        assert before < 0 < after


class TestEquationOfTime:
    """Tests for the equation of time and its decomposition."""

    def test_matches_single_series(self):
        """Test that the two components add up to the full Fourier series."""
        for day in range(1, 366):
            gamma = ephemeris.orbital_angle(day, 365)
            assert ephemeris.equation_of_time(gamma) == pytest.approx(
                _reference_eot(gamma), abs=1e-12
            )

    def test_sample_sum_is_exact(self):
        """Test that the sampled EoT equals the component sum bit for bit."""
        for day in range(1, 367):
            s = ephemeris.sample(day, 366)
            assert s.eot_minutes == s.tilt_component_minutes + s.eccentricity_component_minutes

    def test_november_maximum(self):
        """Test the early-November peak of about +16 minutes."""
        eot = ephemeris.equation_of_time(ephemeris.orbital_angle(307, 365))
        assert eot == pytest.approx(16.4, abs=0.6)

    def test_february_minimum(self):
        """Test the mid-February trough of about -14 minutes."""
        eot = ephemeris.equation_of_time(ephemeris.orbital_angle(42, 365))
        assert eot == pytest.approx(-14.2, abs=0.6)

    def test_tilt_component_is_odd(self):
        """Test that the tilt part only has sine terms."""
        gamma = 0.7
        assert ephemeris.tilt_component(-gamma) == pytest.approx(-ephemeris.tilt_component(gamma))

    def test_eccentricity_component_is_even(self):
        """Test that the eccentricity part only has constant and cosine terms."""
        gamma = 0.7
        assert ephemeris.eccentricity_component(-gamma) == pytest.approx(
            ephemeris.eccentricity_component(gamma)
        )


class TestSample:
    """Tests for sample."""

    def test_fields(self):
        """Test that the sample carries the orbital angle and declination."""
        s = ephemeris.sample(100, 365)
        gamma = ephemeris.orbital_angle(100, 365)
        assert s.orbital_angle == gamma
        assert s.declination == ephemeris.declination(gamma)
