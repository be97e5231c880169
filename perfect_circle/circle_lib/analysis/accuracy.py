"""Circle accuracy scoring.

This module scores a stroke by how evenly its samples sit around the
center. The metric is the relative radial deviation: the population
standard deviation of the sample distances divided by their mean. It does
not depend on the size of the circle, and wobble is penalized in
proportion to the radius.

    score = max(0, 100 - (std(d) / mean(d)) * DEVIATION_WEIGHT)

Key functions:
    - AccuracyScorer.score: Score a stroke in [0, 100]
    - relative_deviation: Raw std/mean of the radial distances
    - color_for: Feedback colour for a score (red at 0, green at 100)
    - color_rgb: The same colour as an RGB tuple for Pillow

Typical usage:
    from circle_lib.analysis.accuracy import AccuracyScorer, color_for

    scorer = AccuracyScorer()
    score = scorer.score(stroke, center)
    css = color_for(score)            # 'hsl(119.4, 100%, 50%)'
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import ImageColor

from ..domain.geometry import Point

# Scoring constants
MIN_SCORE_POINTS = 10      # Fewer samples always score 0
DEVIATION_WEIGHT = 150.0   # Score lost per unit of relative deviation
SCORE_PRECISION = 2        # Decimal places kept in reported scores
MAX_HUE = 120.0            # Green; hue 0 is red


def _radial_distances(points: Sequence[Point], center: Point) -> np.ndarray:
    coords = np.array([(p.x, p.y) for p in points], dtype=np.float64)
    return np.hypot(coords[:, 0] - center.x, coords[:, 1] - center.y)


def relative_deviation(points: Sequence[Point], center: Point) -> Optional[float]:
    """Standard deviation of radial distances divided by their mean.

    Args:
        points: Stroke samples.
        center: Fixed center of the circle.

    Returns:
        The relative deviation, or None when there are no points or the
        mean distance is zero.
    """
    if len(points) == 0:
        return None
    distances = _radial_distances(points, center)
    avg = float(np.mean(distances))
    if avg == 0:
        return None
    dev = float(np.sqrt(np.mean((distances - avg) ** 2)))
    return dev / avg


class AccuracyScorer:
    """Scores strokes by relative radial deviation.

    Attributes:
        min_points: Strokes with fewer samples score 0.
        weight: Multiplier applied to the relative deviation.
        precision: Decimal places of the reported score; 0 reports whole
            numbers.

    Example:
        >>> scorer = AccuracyScorer()
        >>> ring = [Point(100 * math.cos(a), 100 * math.sin(a))
        ...         for a in np.linspace(0, 2 * math.pi, 36, endpoint=False)]
        >>> scorer.score(ring, Point(0, 0))
        100.0
    """

    def __init__(self, min_points: int = MIN_SCORE_POINTS,
                 weight: float = DEVIATION_WEIGHT,
                 precision: int = SCORE_PRECISION):
        self.min_points = min_points
        self.weight = weight
        self.precision = precision

    def score(self, points: Sequence[Point], center: Point) -> float:
        """Accuracy of a stroke in [0, 100].

        Returns 0 for strokes shorter than ``min_points`` and for the
        degenerate case where every sample sits on the center.
        """
        if len(points) < self.min_points:
            return 0.0
        rel = relative_deviation(points, center)
        if rel is None:
            return 0.0
        raw = max(0.0, 100.0 - rel * self.weight)
        return self._round(raw)

    def _round(self, value: float) -> float:
        rounded = round(value, self.precision)
        # clamp to [0, 100]
        return float(min(100.0, max(0.0, rounded)))


def color_for(score: float) -> str:
    """CSS colour for a score, interpolating hue from red to green.

    Monotonic in score; values outside [0, 100] are clamped.

    Example:
        >>> color_for(50)
        'hsl(60, 100%, 50%)'
    """
    clamped = min(100.0, max(0.0, float(score)))
    hue = round(clamped / 100.0 * MAX_HUE, 2)
    return f"hsl({hue:g}, 100%, 50%)"


def color_rgb(score: float) -> Tuple[int, int, int]:
    """RGB tuple of ``color_for(score)`` for drawing with Pillow."""
    return ImageColor.getrgb(color_for(score))
