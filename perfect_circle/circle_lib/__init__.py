"""Circle tracking and scoring package.

The engine behind the perfect-circle game: a player traces a loop around a
fixed center and the package scores how close the path is to a circle,
while checking that the trace is big enough, goes one way only and sweeps
a full turn.

Architecture Overview:
    The web adapter and persistence modules in the parent directory
    (circle_flask, circle_routes, score_db) sit on top of this package.
    The package itself performs no I/O.

The package is organized into the following modules:
    domain: Value objects (Point, Stroke, Viewport) and state enums.
    utils: Angle/distance helpers, path smoothing and Pillow rendering.
    analysis: AngleTracker, ValidationPolicy and AccuracyScorer.
    api: StrokeSession and CircleGameService.

Example usage::

    from circle_lib import CircleGameService, Point, Viewport

    service = CircleGameService(Viewport(800, 600).center)
    service.begin()
    for x, y in samples:
        feedback = service.add_sample(Point(x, y))
    print(service.end().to_dict())

Attributes:
    __version__ (str): Package version string.
    __all__ (list): List of public symbols exported by this package.
"""

from .analysis import AccuracyScorer, AngleTracker, ValidationConfig, ValidationPolicy
from .api import CircleGameService, MemoryScoreStore, StrokeSession
from .domain import DirectionLock, MessageKey, Point, Stroke, ValidationState, Viewport

__all__ = [
    # Domain objects
    'Point', 'Stroke', 'Viewport', 'DirectionLock', 'ValidationState', 'MessageKey',
    # Analysis
    'AngleTracker', 'ValidationConfig', 'ValidationPolicy', 'AccuracyScorer',
    # Services
    'StrokeSession', 'CircleGameService', 'MemoryScoreStore',
]

__version__ = '1.0.0'
