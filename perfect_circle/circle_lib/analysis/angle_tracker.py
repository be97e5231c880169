"""Sweep and direction tracking.

This module provides the AngleTracker class, which accumulates the signed
angular travel of a stroke around the center and locks the stroke's
rotational sense once enough samples have been seen.

Example usage::

    from circle_lib.analysis.angle_tracker import AngleTracker

    tracker = AngleTracker()
    for prev, curr in zip(points, points[1:]):
        delta = tracker.update(prev, curr, center)
    print(tracker.cumulative_angle, tracker.direction)
"""

from __future__ import annotations

import logging

from ..domain.geometry import Point
from ..domain.states import DirectionLock
from ..utils.geometry import angle_delta

logger = logging.getLogger(__name__)

# Deltas to observe before the direction locks (sixth sample of a stroke)
DIRECTION_LOCK_SAMPLES = 5


class AngleTracker:
    """Accumulates total sweep and locks the drawing direction.

    ``cumulative_angle`` is always the sum of every normalized per-step
    delta passed through ``update``; it is the single measure of sweep used
    by the completion checks. ``direction`` changes at most once between
    resets.

    Attributes:
        cumulative_angle: Signed total sweep in radians.
        direction: Locked DirectionLock, UNKNOWN until established.
        sample_count: Number of deltas accumulated since the last reset.
        lock_after: Deltas required before the direction may lock.
    """

    def __init__(self, lock_after: int = DIRECTION_LOCK_SAMPLES):
        self.lock_after = lock_after
        self.reset()

    def reset(self) -> None:
        """Zero the sweep and forget the direction."""
        self.cumulative_angle = 0.0
        self.direction = DirectionLock.UNKNOWN
        self.sample_count = 0

    @property
    def sweep(self) -> float:
        """Unsigned total sweep in radians."""
        return abs(self.cumulative_angle)

    def update(self, prev: Point, curr: Point, center: Point) -> float:
        """Account for the step from ``prev`` to ``curr``.

        A zero delta at lock time leaves the direction UNKNOWN; the lock is
        retried on every later update.

        Args:
            prev: Previous sample.
            curr: Newest sample.
            center: Fixed center of the circle.

        Returns:
            The normalized signed delta in radians.
        """
        delta = angle_delta(prev, curr, center)
        self.cumulative_angle += delta
        self.sample_count += 1

        if self.direction is DirectionLock.UNKNOWN and self.sample_count >= self.lock_after:
            self.direction = DirectionLock.from_sign(delta)
            if self.direction is not DirectionLock.UNKNOWN:
                logger.debug("Direction locked: %s after %d samples",
                             self.direction.name, self.sample_count)
        return delta
