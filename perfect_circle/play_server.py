#!/usr/bin/env python3
"""Run the perfect-circle game server.

Starts the Flask web adapter with the chosen validation preset and score
database. Browsers create a session, stream pointer samples to it and draw
the returned feedback.

Example:
    Serve the lenient game on the default port::

        $ python play_server.py

    Strict rules, custom database, debug logging::

        $ python play_server.py --policy strict --db /data/scores.db --log-level DEBUG
"""

import argparse
import logging

from circle_flask import app, configure_logging
import circle_routes  # noqa: F401 - registers routes
from circle_lib.analysis.validation import PRESETS
from game_config import DB_PATH, DEFAULT_HOST, DEFAULT_POLICY, DEFAULT_PORT
from score_db import init_db

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description='Run the perfect-circle game server')
    parser.add_argument('--db', default=DB_PATH, help='Best-score database path')
    parser.add_argument('--policy', default=DEFAULT_POLICY, choices=sorted(PRESETS),
                        help='Validation preset')
    parser.add_argument('--host', default=DEFAULT_HOST, help='Interface to bind')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT, help='Port to listen on')
    parser.add_argument('--log-level', default='INFO', help='Log level')
    parser.add_argument('--log-file', default=None, help='Optional log file')
    parser.add_argument('--debug', action='store_true', help='Enable Flask debug mode')
    args = parser.parse_args()

    configure_logging(level=args.log_level, log_file=args.log_file)
    init_db(args.db).close()

    app.config['SCORE_DB_PATH'] = args.db
    app.config['POLICY'] = args.policy
    logger.info("Serving on %s:%d (policy=%s, db=%s)", args.host, args.port, args.policy, args.db)
    app.run(debug=args.debug, host=args.host, port=args.port)


if __name__ == '__main__':
    main()
