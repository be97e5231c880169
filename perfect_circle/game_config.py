"""Shared configuration for the perfect-circle game.

This module centralizes values used by:
    - circle_flask.py / circle_routes.py (web adapter)
    - score_db.py (best-score persistence)
    - play_server.py (entry point)

Scoring and validation thresholds live next to the code that applies them
in circle_lib; the presets selectable here are defined in
circle_lib.analysis.validation.
"""

from circle_lib.domain.states import MessageKey

# Validation preset used when none is configured ('lenient' or 'strict')
DEFAULT_POLICY = 'lenient'

# Database path and key of the best-score record
DB_PATH = 'scores.db'
BEST_SCORE_KEY = 'perfectCircleBestScore'

# Preview images are capped to this size in each dimension
MAX_PREVIEW_SIZE = 4096

# Text shown by the notification sink for each message key
MESSAGES = {
    MessageKey.TOO_SMALL: "Try drawing a bigger circle",
    MessageKey.WRONG_WAY: "Wrong way",
    MessageKey.INCOMPLETE_SWEEP: "Draw a full circle",
    MessageKey.NEW_HIGH_SCORE: "New high score!",
}

# Web server defaults
DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 5000

# Idle sessions are dropped after this many seconds; the registry never
# holds more than MAX_SESSIONS (least recently used are evicted first)
SESSION_TTL_SECONDS = 30 * 60
MAX_SESSIONS = 1000
