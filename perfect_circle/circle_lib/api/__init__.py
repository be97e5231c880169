"""API layer for the circle game.

This module provides the objects a front end drives: the per-stroke
StrokeSession and the CircleGameService that connects it to the best-score
store, the notification sink and the share action.

Example usage::

    from circle_lib.api import CircleGameService

    service = CircleGameService(center)
    service.begin()
    feedback = service.add_sample(point)
    result = service.end()
"""

from .services import (
    CircleGameService,
    EndResult,
    MemoryScoreStore,
    Notification,
    ScoreStore,
    ShareSummary,
    build_share_summary,
)
from .session import SampleFeedback, StrokeOutcome, StrokeSession

__all__ = [
    'StrokeSession', 'SampleFeedback', 'StrokeOutcome',
    'CircleGameService', 'EndResult', 'ScoreStore', 'MemoryScoreStore',
    'Notification', 'ShareSummary', 'build_share_summary',
]
