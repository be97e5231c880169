"""Service layer for the circle game.

This module ties a StrokeSession to the collaborators that live outside
the scoring engine: the best-score store, the notification sink and the
optional share action. It is the object a front end (the Flask adapter,
a test, a desktop shell) drives.

The module contains:
    ScoreStore: Protocol of the best-score store (get/set).
    MemoryScoreStore: In-process ScoreStore.
    Notification: Message delivered to the notification sink.
    ShareSummary: Shareable text for a completed score.
    CircleGameService: Orchestrates strokes, best score and notifications.

Example usage::

    from circle_lib.api.services import CircleGameService, MemoryScoreStore
    from circle_lib.domain import Point, Viewport

    shown = []
    service = CircleGameService(Viewport(800, 600).center,
                                store=MemoryScoreStore(),
                                notify=shown.append)
    service.begin()
    for x, y in samples:
        service.add_sample(Point(x, y))
    result = service.end()
    print(result.outcome.score, result.new_high_score, service.best_score())
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from ..analysis.accuracy import AccuracyScorer
from ..analysis.validation import ValidationPolicy
from ..domain.geometry import Point
from ..domain.states import MessageKey
from .session import SampleFeedback, StrokeOutcome, StrokeSession

_logger = logging.getLogger(__name__)

SHARE_TITLE = "Perfect Circle Challenge"
SHARE_TEXT = "I scored {score:g}% drawing a perfect circle! Can you beat it?"


class ScoreStore(Protocol):
    """Key-value adapter holding the best score ever achieved."""

    def get(self) -> float:
        """Stored best score, 0 when nothing was stored yet."""
        ...

    def set(self, score: float) -> Optional[bool]:
        """Store a new best score.

        Stores shared between processes may return False when another
        writer already stored a score at least as high; None or True
        means the score was stored.
        """
        ...


class MemoryScoreStore:
    """ScoreStore kept in memory; lost when the process exits."""

    def __init__(self, initial: float = 0.0):
        self._score = float(initial)
        self.writes = 0

    def get(self) -> float:
        return self._score

    def set(self, score: float) -> None:
        self._score = float(score)
        self.writes += 1


@dataclass(frozen=True)
class Notification:
    """Message for the notification sink.

    Attributes:
        key: Which message to show.
        score: The new best score for NEW_HIGH_SCORE, else None.
    """
    key: MessageKey
    score: Optional[float] = None

    def to_dict(self) -> dict:
        return {'key': self.key.value, 'score': self.score}


@dataclass(frozen=True)
class ShareSummary:
    """Shareable summary of a completed stroke."""
    title: str
    text: str
    url: Optional[str] = None

    def to_dict(self) -> dict:
        return {'title': self.title, 'text': self.text, 'url': self.url}


def build_share_summary(score: float, url: Optional[str] = None) -> ShareSummary:
    """Build the share text for ``score``.

    Example:
        >>> build_share_summary(87.5).text
        'I scored 87.5% drawing a perfect circle! Can you beat it?'
    """
    return ShareSummary(SHARE_TITLE, SHARE_TEXT.format(score=score), url)


@dataclass
class EndResult:
    """Outcome of a stroke plus its effect on the best score."""
    outcome: StrokeOutcome
    new_high_score: bool
    best: float

    def to_dict(self) -> dict:
        data = self.outcome.to_dict()
        data.update(new_high_score=self.new_high_score, best=self.best)
        return data


class CircleGameService:
    """Drives strokes and reports their results to the collaborators.

    Failures are announced through ``notify`` as soon as they happen.
    Completed strokes are compared with the store exactly once: the store
    is read, and written only for a strictly greater score. The
    read-compare-write runs under a lock so concurrent requests cannot
    interleave it. A store shared between processes may still refuse the
    write when another process already holds a higher score.

    Attributes:
        session: StrokeSession for this player.
        store: ScoreStore with the best score.
        notify: Callable receiving Notification objects, or None.
        share_action: Callable receiving ShareSummary objects, or None on
            platforms that cannot share.
    """

    def __init__(
        self,
        center: Point,
        store: Optional[ScoreStore] = None,
        policy: Optional[ValidationPolicy] = None,
        scorer: Optional[AccuracyScorer] = None,
        notify: Optional[Callable[[Notification], None]] = None,
        share_action: Optional[Callable[[ShareSummary], None]] = None,
        lock: Optional[threading.Lock] = None,
    ):
        self.session = StrokeSession(center, policy=policy, scorer=scorer)
        self.store = store if store is not None else MemoryScoreStore()
        self.notify = notify
        self.share_action = share_action
        self._lock = lock or threading.Lock()
        self._pending_result: Optional[EndResult] = None
        self._last_warning: Optional[MessageKey] = None

    @property
    def can_share(self) -> bool:
        return self.share_action is not None

    def begin(self) -> None:
        """Start a new stroke."""
        self._pending_result = None
        self._last_warning = None
        self.session.begin()

    def add_sample(self, point: Point) -> SampleFeedback:
        """Feed one sample; failures and auto-completion are reported here."""
        was_active = self.session.is_active
        feedback = self.session.add_sample(point)
        if not was_active:
            return feedback
        if feedback.state.is_terminal:
            self._settle(self.session.end())
        elif feedback.message != self._last_warning:
            # warnings from lenient live checks, announced once per change
            self._last_warning = feedback.message
            if feedback.message is not None:
                self._emit(Notification(feedback.message))
        return feedback

    def end(self) -> EndResult:
        """Finish the stroke on end of input."""
        if self._pending_result is not None:
            return self._pending_result
        return self._settle(self.session.end())

    def best_score(self) -> float:
        """Current best score, 0 if the store cannot be read."""
        return self._read_best()

    def share_summary(self, url: Optional[str] = None) -> Optional[ShareSummary]:
        """Summary of the last completed score, None if there is none."""
        if self.session.last_score is None:
            return None
        return build_share_summary(self.session.last_score, url)

    def share(self, url: Optional[str] = None) -> Optional[ShareSummary]:
        """Hand the last completed score to the share action if there is one."""
        summary = self.share_summary(url)
        if summary is not None and self.share_action is not None:
            self.share_action(summary)
        return summary

    def _settle(self, outcome: StrokeOutcome) -> EndResult:
        if outcome.completed:
            new_high, best = self._record(outcome.score)
        else:
            new_high, best = False, self._read_best()
            if outcome.state.message_key is not None:
                self._emit(Notification(outcome.state.message_key))
        self._pending_result = EndResult(outcome, new_high, best)
        return self._pending_result

    def _record(self, score: float):
        with self._lock:
            best = self._read_best()
            if score <= best:
                return False, best
            try:
                written = self.store.set(score)
            except Exception as e:
                _logger.warning("Could not store best score %s: %s", score, e)
                return False, best
            if written is False:
                # another process stored a score at least as high
                return False, self._read_best()
        _logger.info("New high score: %s (previous %s)", score, best)
        self._emit(Notification(MessageKey.NEW_HIGH_SCORE, score))
        return True, score

    def _read_best(self) -> float:
        try:
            return float(self.store.get() or 0.0)
        except Exception as e:
            _logger.warning("Could not read best score: %s", e)
            return 0.0

    def _emit(self, notification: Notification) -> None:
        if self.notify is not None:
            self.notify(notification)


__all__ = [
    'ScoreStore', 'MemoryScoreStore', 'Notification', 'ShareSummary',
    'EndResult', 'CircleGameService', 'build_share_summary',
]
