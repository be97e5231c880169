"""Flask application setup and shared utilities for the circle game.

This module is the central configuration hub of the web adapter. The
adapter is the game's input source and rendering sink: it turns JSON
requests into StrokeSession calls and returns the values a browser canvas
needs to draw. It provides:

    - The Flask application instance shared with the route module
    - Application-wide logging configuration
    - The in-memory registry of player sessions
    - Request parsing and response helpers

Architecture:
    - circle_flask.py: App instance, config, registry and helpers (this module)
    - circle_routes.py: JSON and image routes
    - play_server.py: Command-line entry point

Example:
    Import the app and the registry::

        from circle_flask import app, get_registry

        @app.route('/api/sessions/count')
        def session_count():
            return jsonify(count=len(get_registry()))

Attributes:
    app (Flask): The Flask application instance.
    app.config['SCORE_DB_PATH'] (str): SQLite file for the best score.
    app.config['POLICY'] (str): Name of the validation preset for new sessions.
"""

import io
import logging
import math
import threading
import time
import uuid

from flask import Flask, jsonify, send_file

from circle_lib.analysis.validation import ValidationPolicy, get_preset
from circle_lib.api.services import CircleGameService, Notification
from circle_lib.domain.geometry import Point, Viewport
from game_config import DB_PATH, DEFAULT_POLICY, MAX_SESSIONS, SESSION_TTL_SECONDS
from score_db import SqliteScoreStore

# Module logger
logger = logging.getLogger(__name__)


def configure_logging(level: str = 'INFO', log_file: str | None = None) -> None:
    """Configure application-wide logging.

    Sets up logging with a consistent format across all modules. Call this
    at application startup.

    Args:
        level: Log level string ('DEBUG', 'INFO', 'WARNING', 'ERROR').
        log_file: Optional path to log file. If None, logs to stderr only.

    Example:
        Configure at startup::

            from circle_flask import configure_logging
            configure_logging(level='DEBUG', log_file='circle.log')
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s %(levelname)-8s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)

    logger.info("Logging configured: level=%s, file=%s", level, log_file or 'stderr')


# Flask application
app = Flask(__name__)
app.config.setdefault('SCORE_DB_PATH', DB_PATH)
app.config.setdefault('POLICY', DEFAULT_POLICY)


class GameEntry:
    """A registered player: the game service, its viewport and its messages.

    Requests for one session may arrive on several server threads; every
    use of ``service`` happens under ``lock`` so samples are applied one at
    a time.

    Attributes:
        service: CircleGameService driving the player's strokes.
        viewport: Current surface size; its center is the circle center.
        notifications: Notifications not yet delivered to the client.
        lock: Serializes access to the service.
        last_seen: Clock reading of the last lookup, for idle eviction.
    """

    def __init__(self, viewport: Viewport, last_seen: float = 0.0):
        self.service: CircleGameService | None = None
        self.viewport = viewport
        self.notifications: list[Notification] = []
        self.lock = threading.Lock()
        self.last_seen = last_seen

    def notify(self, notification: Notification) -> None:
        """Notification sink handed to the service."""
        self.notifications.append(notification)

    def drain_notifications(self) -> list[dict]:
        """Return and clear pending notifications as dicts."""
        pending = [n.to_dict() for n in self.notifications]
        self.notifications.clear()
        return pending

    def begin(self) -> str:
        """Start a stroke, dropping undelivered notifications."""
        with self.lock:
            self.service.begin()
            self.notifications.clear()
            return self.service.session.state.value

    def add_samples(self, samples: list[Point]) -> dict:
        """Feed samples in order; feedback of the last one plus notifications."""
        with self.lock:
            feedback = None
            for point in samples:
                feedback = self.service.add_sample(point)
            payload = feedback.to_dict()
            payload['notifications'] = self.drain_notifications()
            return payload

    def end(self) -> dict:
        """Finish the stroke; end result plus notifications."""
        with self.lock:
            payload = self.service.end().to_dict()
            payload['notifications'] = self.drain_notifications()
            return payload

    def resize(self, viewport: Viewport) -> None:
        """Move the center to the new viewport's center.

        Raises:
            RuntimeError: If a stroke is in progress.
        """
        with self.lock:
            self.service.session.set_center(viewport.center)
            self.viewport = viewport


class SessionRegistry:
    """Thread-safe map of session id to GameEntry.

    All entries share one best-score store and one lock, so the best score
    is read and conditionally written as a single critical section across
    every player of the process.

    Entries not looked up for ``ttl`` seconds are dropped, and creating an
    entry when ``max_sessions`` are registered evicts the least recently
    seen one.

    Args:
        ttl: Idle time in seconds after which an entry expires.
        max_sessions: Upper bound on registered entries.
        clock: Monotonic time source.
    """

    def __init__(self, ttl: float = SESSION_TTL_SECONDS, max_sessions: int = MAX_SESSIONS,
                 clock=time.monotonic):
        self.ttl = ttl
        self.max_sessions = max_sessions
        self.clock = clock
        self._entries: dict[str, GameEntry] = {}
        self._lock = threading.Lock()
        self._score_lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def create(self, viewport: Viewport, store, policy_name: str) -> tuple[str, GameEntry]:
        """Register a new player and return its id and entry."""
        policy = ValidationPolicy(get_preset(policy_name))
        sid = uuid.uuid4().hex
        now = self.clock()
        entry = GameEntry(viewport, last_seen=now)
        entry.service = CircleGameService(
            viewport.center, store=store, policy=policy,
            notify=entry.notify, lock=self._score_lock,
        )
        with self._lock:
            self._evict(now)
            self._entries[sid] = entry
        logger.debug("Session %s created: %sx%s policy=%s",
                     sid, viewport.width, viewport.height, policy_name)
        return sid, entry

    def get(self, sid: str) -> GameEntry | None:
        """Entry for ``sid``, or None if unknown or expired."""
        now = self.clock()
        with self._lock:
            entry = self._entries.get(sid)
            if entry is None:
                return None
            if now - entry.last_seen > self.ttl:
                del self._entries[sid]
                logger.debug("Session %s expired", sid)
                return None
            entry.last_seen = now
            return entry

    def remove(self, sid: str) -> bool:
        with self._lock:
            return self._entries.pop(sid, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _evict(self, now: float) -> None:
        """Drop expired entries, then the oldest until there is room for one more."""
        expired = [sid for sid, e in self._entries.items() if now - e.last_seen > self.ttl]
        for sid in expired:
            del self._entries[sid]
        overflow = len(self._entries) - self.max_sessions + 1
        if overflow > 0:
            oldest = sorted(self._entries, key=lambda s: self._entries[s].last_seen)
            for sid in oldest[:overflow]:
                del self._entries[sid]
        if expired or overflow > 0:
            logger.info("Evicted %d idle and %d excess sessions",
                        len(expired), max(overflow, 0))


def get_registry() -> SessionRegistry:
    """Return the app's SessionRegistry, creating it on first use."""
    registry = app.extensions.get('circle_sessions')
    if registry is None:
        registry = app.extensions['circle_sessions'] = SessionRegistry()
    return registry


def get_score_store() -> SqliteScoreStore:
    """ScoreStore for the database configured on the app."""
    return SqliteScoreStore(app.config['SCORE_DB_PATH'])


def get_entry_or_error(sid: str):
    """Look up a session or build a 404 response.

    Returns:
        tuple: (entry, None) if found, or (None, error_response).

    Example:
        entry, err = get_entry_or_error(sid)
        if err:
            return err
    """
    entry = get_registry().get(sid)
    if entry is None:
        return None, (jsonify(error="Session not found"), 404)
    return entry, None


def _finite_number(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected a number, got {value!r}")
    return float(value)


def parse_viewport(data) -> Viewport:
    """Build a Viewport from ``{'width': w, 'height': h}``.

    Raises:
        ValueError: If the payload is missing, not numeric or not positive.
    """
    if not isinstance(data, dict):
        raise ValueError("Missing viewport data")
    width = _finite_number(data.get('width'))
    height = _finite_number(data.get('height'))
    if not (math.isfinite(width) and math.isfinite(height)):
        raise ValueError("Viewport size must be finite")
    return Viewport(width, height)


def parse_samples(data) -> list[Point]:
    """Extract samples from ``{'x': x, 'y': y}`` or ``{'points': [[x, y], ...]}``.

    Non-finite coordinates (JSON ``NaN``/``Infinity``) are passed through;
    the session skips them.

    Raises:
        ValueError: If the payload is not one of the two shapes.
    """
    if not isinstance(data, dict):
        raise ValueError("Missing sample data")
    if 'points' in data:
        raw = data['points']
        if not isinstance(raw, list) or not raw:
            raise ValueError("'points' must be a non-empty list")
        samples = []
        for item in raw:
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise ValueError(f"Invalid point {item!r}")
            samples.append(Point(_finite_number(item[0]), _finite_number(item[1])))
        return samples
    return [Point(_finite_number(data.get('x')), _finite_number(data.get('y')))]


def send_pil_image_as_png(img):
    """Convert PIL Image to PNG and send as Flask response."""
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    buf.seek(0)
    return send_file(buf, mimetype='image/png')
