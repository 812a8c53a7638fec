"""Aspect-locked plot domains for East-vs-Up charts.

An analemma only keeps its true figure-eight proportions when one unit of E
and one unit of U cover the same number of pixels. The domains returned here
guarantee that for any plot size.
"""

from typing import Tuple

from analemma_calc.models import Domain


def compute_enu_domains(
    e_min: float,
    e_max: float,
    u_min: float,
    u_max: float,
    plot_width_px: float,
    plot_height_px: float,
    pad_fraction: float = 0.08,
    min_pad_e: float = 0.01,
    min_pad_u: float = 0.01,
    min_span: float = 1e-6,
) -> Tuple[Domain, Domain]:
    """Padded E and U domains with equal units per pixel.

    Args:
        e_min: Smallest observed East value.
        e_max: Largest observed East value.
        u_min: Smallest observed Up value.
        u_max: Largest observed Up value.
        plot_width_px: Plot width. Floored to 1.
        plot_height_px: Plot height. Floored to 1.
        pad_fraction: Padding as a fraction of each axis span.
        min_pad_e: Minimum absolute padding on the E axis.
        min_pad_u: Minimum absolute padding on the U axis.
        min_span: Smallest span considered, guards zero-width input ranges.

    Returns:
        ``(e_domain, u_domain)`` as (min, max) pairs.
    """
    width = max(1.0, plot_width_px)
    height = max(1.0, plot_height_px)

    e_range = max(min_span, e_max - e_min)
    u_range = max(min_span, u_max - u_min)

    e_pad = max(min_pad_e, e_range * pad_fraction)
    u_pad = max(min_pad_u, u_range * pad_fraction)

    e_lo, e_hi = e_min - e_pad, e_max + e_pad
    u_lo, u_hi = u_min - u_pad, u_max + u_pad

    e_mid = (e_lo + e_hi) / 2
    u_mid = (u_lo + u_hi) / 2

    e_span = max(min_span, e_hi - e_lo)
    u_span = max(min_span, u_hi - u_lo)

    u_span_for_e = e_span * (height / width)
    e_span_for_u = u_span * (width / height)

    # Only the under-spanned axis grows, around its own midpoint
    if u_span < u_span_for_e:
        u_span = u_span_for_e
        u_lo, u_hi = u_mid - u_span / 2, u_mid + u_span / 2
    elif e_span < e_span_for_u:
        e_span = e_span_for_u
        e_lo, e_hi = e_mid - e_span / 2, e_mid + e_span / 2

    return (e_lo, e_hi), (u_lo, u_hi)


def units_per_pixel(domain: Domain, size_px: float) -> float:
    return (domain[1] - domain[0]) / max(1.0, size_px)
