"""Stroke analysis: sweep tracking, validation and scoring.

This module provides the classes that look at a stroke while it is being
drawn and once it ends.

The module exports the following:
    AngleTracker: Accumulates sweep and locks the drawing direction.
    ValidationConfig: Thresholds for the validation state machine.
    ValidationPolicy: Applies the live and end-of-stroke rules.
    AccuracyScorer: Scores a stroke by relative radial deviation.
    color_for: Feedback colour for a score.

Example usage::

    from circle_lib.analysis import AccuracyScorer, AngleTracker

    tracker = AngleTracker()
    delta = tracker.update(prev, curr, center)
    score = AccuracyScorer().score(points, center)
"""

from .accuracy import AccuracyScorer, color_for, color_rgb, relative_deviation
from .angle_tracker import AngleTracker
from .validation import PRESETS, ValidationConfig, ValidationPolicy, get_preset

__all__ = [
    'AngleTracker',
    'ValidationConfig', 'ValidationPolicy', 'PRESETS', 'get_preset',
    'AccuracyScorer', 'color_for', 'color_rgb', 'relative_deviation',
]
