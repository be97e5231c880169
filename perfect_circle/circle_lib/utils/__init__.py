"""Utility functions for circle tracking.

This module provides pure geometry helpers and the smoothing/rendering
utilities used to draw strokes.

Geometry utilities:
    angle_of: Polar angle of a point about a center.
    normalize_angle_delta: Fold an angle difference into (-pi, pi].
    angle_delta: Normalized angular step between two samples.
    distance: Euclidean distance to the center.
    is_finite_point: Check a sample for NaN/inf coordinates.

Rendering utilities:
    smooth_path: Midpoint-quadratic curve through the samples.
    render_stroke_image: Draw a stroke and the center dot with Pillow.
"""

from .geometry import (
    angle_delta,
    angle_of,
    distance,
    is_finite_point,
    normalize_angle_delta,
)
from .rendering import QuadSegment, SmoothPath, render_stroke_image, smooth_path

__all__ = [
    'angle_of', 'normalize_angle_delta', 'angle_delta', 'distance', 'is_finite_point',
    'QuadSegment', 'SmoothPath', 'smooth_path', 'render_stroke_image',
]
