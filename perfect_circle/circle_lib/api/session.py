"""Per-stroke orchestration.

This module provides StrokeSession, which owns everything that lives for
the duration of one stroke (the sample buffer, the sweep tracker and the
validation state) and turns each incoming sample into live feedback.

Example usage::

    from circle_lib.api.session import StrokeSession
    from circle_lib.domain import Point, Viewport

    session = StrokeSession(Viewport(800, 600).center)
    session.begin()
    for x, y in samples:
        feedback = session.add_sample(Point(x, y))
        draw(feedback.path, feedback.color, feedback.score)
        if feedback.state.is_terminal:
            break
    outcome = session.end()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..analysis.accuracy import AccuracyScorer, color_for
from ..analysis.angle_tracker import AngleTracker
from ..analysis.validation import ValidationPolicy
from ..domain.geometry import Point, Stroke
from ..domain.states import DirectionLock, MessageKey, ValidationState
from ..utils.geometry import is_finite_point
from ..utils.rendering import SmoothPath, smooth_path

logger = logging.getLogger(__name__)


@dataclass
class SampleFeedback:
    """What the rendering sink needs after one sample.

    Attributes:
        state: Validation state after the sample, None while no stroke
            has been started.
        score: Live accuracy of the stroke so far.
        color: CSS colour for the score.
        path: Smoothed curve of the stroke, None when there is nothing to
            draw (fewer than two samples, or the stroke was discarded).
        message: Failure or warning key to show, if any.
    """
    state: Optional[ValidationState]
    score: float
    color: str
    path: Optional[SmoothPath] = None
    message: Optional[MessageKey] = None

    def to_dict(self) -> dict:
        return {
            'state': self.state.value if self.state else 'idle',
            'score': self.score,
            'color': self.color,
            'path': self.path.to_dict() if self.path else None,
            'message': self.message.value if self.message else None,
        }


@dataclass
class StrokeOutcome:
    """Result of a finished stroke. ``score`` is set only when COMPLETED."""
    state: ValidationState
    score: Optional[float] = None

    @property
    def completed(self) -> bool:
        return self.state is ValidationState.COMPLETED

    def to_dict(self) -> dict:
        key = self.state.message_key
        return {
            'state': self.state.value,
            'score': self.score,
            'message': key.value if key else None,
        }


class StrokeSession:
    """Tracks, validates and scores one stroke at a time.

    The session starts idle; ``begin`` opens a stroke. A stroke ends when
    a live rule fails it, when it reaches the sweep limit, or when ``end``
    is called. Terminal states persist until the next ``begin``; samples
    arriving in a terminal state are ignored.

    Attributes:
        center: Fixed center of the circle.
        policy: ValidationPolicy applied to every sample.
        scorer: AccuracyScorer for live and final scores.
        tracker: AngleTracker for the current stroke.
        stroke: Samples of the current stroke.
        state: Current ValidationState, or None before the first begin().
        last_score: Final score of the most recent completed stroke.
        last_stroke: Samples of the most recent completed stroke.
    """

    def __init__(self, center: Point, policy: Optional[ValidationPolicy] = None,
                 scorer: Optional[AccuracyScorer] = None):
        self.center = center
        self.policy = policy or ValidationPolicy()
        self.scorer = scorer or AccuracyScorer()
        self.tracker = AngleTracker()
        self.stroke = Stroke()
        self.state: Optional[ValidationState] = None
        self.last_score: Optional[float] = None
        self.last_stroke = Stroke()
        self._outcome: Optional[StrokeOutcome] = None

    @property
    def is_active(self) -> bool:
        return self.state is ValidationState.ACTIVE

    @property
    def direction(self) -> DirectionLock:
        return self.tracker.direction

    def set_center(self, center: Point) -> None:
        """Move the center, e.g. after the surface was resized.

        Raises:
            RuntimeError: If a stroke is in progress.
        """
        if self.is_active:
            raise RuntimeError("Cannot move the center while a stroke is active")
        self.center = center

    def begin(self) -> None:
        """Start a new stroke, discarding any previous one."""
        self.stroke = Stroke()
        self.tracker.reset()
        self.state = ValidationState.ACTIVE
        self._outcome = None

    def abandon(self) -> None:
        """Drop the current stroke without scoring it."""
        self.stroke = Stroke()
        self.tracker.reset()
        self.state = None
        self._outcome = None

    def add_sample(self, point: Point) -> SampleFeedback:
        """Append a sample and evaluate the stroke.

        Samples with non-finite coordinates are skipped so they never reach
        the cumulative sweep or the score.

        Args:
            point: New pointer sample in surface coordinates.

        Returns:
            SampleFeedback for immediate rendering.
        """
        if not self.is_active:
            return self._feedback()

        if not is_finite_point(point):
            logger.warning("Ignoring non-finite sample (%s, %s)", point.x, point.y)
            return self._feedback()

        self.stroke.append(point)
        warning = None
        if len(self.stroke) >= 2:
            prev, curr = self.stroke.last_pair()
            delta = self.tracker.update(prev, curr, self.center)
            state, warning = self.policy.check_sample(
                curr, self.center, delta, self.tracker, stroke_length=len(self.stroke))
            if state is not ValidationState.ACTIVE:
                return self._finish(state)
        return self._feedback(warning)

    def end(self) -> StrokeOutcome:
        """Close the stroke on end of input and return its outcome.

        A stroke that already reached a terminal state returns that
        outcome again. Ending without any begin() yields an incomplete
        sweep.
        """
        if self.is_active:
            self._finish(self.policy.check_end(self.tracker))
        if self._outcome is None:
            return StrokeOutcome(ValidationState.FAILED_INCOMPLETE_SWEEP)
        return self._outcome

    def _finish(self, state: ValidationState) -> SampleFeedback:
        score = None
        if state is ValidationState.COMPLETED:
            score = self.scorer.score(self.stroke, self.center)
            self.last_score = score
            self.last_stroke = self.stroke
        logger.debug("Stroke finished: %s after %d samples, sweep=%.3f, score=%s",
                     state.value, len(self.stroke), self.tracker.cumulative_angle, score)

        path = smooth_path(self.stroke.points) if score is not None else None
        self.state = state
        self._outcome = StrokeOutcome(state, score)
        self.stroke = Stroke()
        return SampleFeedback(state, score or 0.0, color_for(score or 0.0), path,
                              state.message_key)

    def _feedback(self, warning: Optional[MessageKey] = None) -> SampleFeedback:
        if self.state is None:
            return SampleFeedback(None, 0.0, color_for(0.0))
        if self.state.is_terminal:
            score = self._outcome.score if self._outcome else None
            return SampleFeedback(self.state, score or 0.0, color_for(score or 0.0),
                                  None, self.state.message_key)
        score = self.scorer.score(self.stroke, self.center)
        return SampleFeedback(self.state, score, color_for(score),
                              smooth_path(self.stroke.points), warning)
