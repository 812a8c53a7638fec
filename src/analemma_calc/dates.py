"""Proleptic Gregorian day-of-year helpers."""

from datetime import date, timedelta


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def date_from_day_of_year(year: int, day: int) -> str:
    """Return the ISO date (YYYY-MM-DD) of a 1-based day of the year.

    Args:
        year: Calendar year.
        day: Day index, 1 to days_in_year(year).

    Returns:
        ISO calendar date string.

    Raises:
        ValueError: If day is outside the year.
    """
    if not 1 <= day <= days_in_year(year):
        raise ValueError(f"day must be between 1 and {days_in_year(year)}, got {day}")
    return (date(year, 1, 1) + timedelta(days=day - 1)).isoformat()


def day_of_year(on_date: date) -> int:
    """Return the 1-based day of the year for a calendar date."""
    return on_date.timetuple().tm_yday
