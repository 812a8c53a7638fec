"""Analemma Calculator.

Computes the Sun's apparent position at a fixed clock time on every day of a
year, together with the equation of time that explains the analemma's shape.
"""

__version__ = "1.0.0"
__author__ = "Analemma Project"
