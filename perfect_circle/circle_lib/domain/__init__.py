"""Domain objects for circle tracking.

This module provides the core value objects used throughout the package:
geometric primitives and the enumerations describing stroke state.

The module exports the following classes:

Geometry classes:
    Point: Immutable 2D point.
    Viewport: Rendering surface size; derives the fixed center.
    Stroke: Append-only sequence of pointer samples.

State classes:
    DirectionLock: Clockwise / counter-clockwise / unknown.
    ValidationState: Active, failed (three kinds) or completed.
    MessageKey: Keys for the notification sink.

Example usage::

    from circle_lib.domain import Point, Stroke, Viewport

    center = Viewport(800, 600).center
    stroke = Stroke([Point(500, 300), Point(499, 310)])
    print(f"Samples: {len(stroke)}")
"""

from .geometry import Point, Stroke, Viewport
from .states import DirectionLock, MessageKey, ValidationState

__all__ = [
    'Point', 'Stroke', 'Viewport',
    'DirectionLock', 'MessageKey', 'ValidationState',
]
