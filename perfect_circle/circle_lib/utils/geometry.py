"""Geometric utility functions.

This module provides the pure angle and distance helpers used by the
tracking and scoring code. None of them keep state or raise; any finite
coordinates are valid input.

The module provides the following functions:
    angle_of: Polar angle of a point about a center.
    normalize_angle_delta: Fold an angle difference into (-pi, pi].
    angle_delta: Normalized angular step between two samples.
    distance: Euclidean distance between a point and a center.
    is_finite_point: Check that a sample has finite coordinates.

Example usage::

    from circle_lib.domain import Point
    from circle_lib.utils.geometry import angle_delta

    center = Point(0, 0)
    step = angle_delta(Point(-1, 0.01), Point(-1, -0.01), center)
    # Small positive step across the +/-pi seam, not almost 2*pi
"""

from __future__ import annotations

import math

from ..domain.geometry import Point

TWO_PI = 2 * math.pi


def angle_of(p: Point, center: Point) -> float:
    """Polar angle of ``p`` about ``center`` in radians.

    Args:
        p: Sample point.
        center: Fixed center of the circle.

    Returns:
        ``atan2(p.y - center.y, p.x - center.x)``, in [-pi, pi].
    """
    return math.atan2(p.y - center.y, p.x - center.x)


def normalize_angle_delta(raw: float) -> float:
    """Map an angle difference into (-pi, pi].

    Consecutive samples never differ by more than one revolution, so a
    single correction of 2*pi suffices.

    Example:
        >>> normalize_angle_delta(3 * math.pi / 2)
        -1.5707963267948966
    """
    if raw > math.pi:
        return raw - TWO_PI
    if raw <= -math.pi:
        return raw + TWO_PI
    return raw


def angle_delta(prev: Point, curr: Point, center: Point) -> float:
    """Signed angular step from ``prev`` to ``curr`` about ``center``."""
    return normalize_angle_delta(angle_of(curr, center) - angle_of(prev, center))


def distance(p: Point, center: Point) -> float:
    """Euclidean distance from ``p`` to ``center``."""
    return math.hypot(p.x - center.x, p.y - center.y)


def is_finite_point(p: Point) -> bool:
    """True when both coordinates of ``p`` are finite."""
    return math.isfinite(p.x) and math.isfinite(p.y)
