"""Shared pytest fixtures for the perfect_circle test suite.

This module provides common fixtures used across unit and integration
tests.

Fixtures:
    center: Center of an 800x600 surface
    perfect_circle: 36 evenly spaced samples on a radius-100 circle
    score_db_path: Temporary SQLite file for the best-score store
    flask_client: Flask test client with routes registered and a fresh registry

Markers:
    slow: Mark test as slow-running (skip with -m "not slow")
    integration: Mark test as integration test
"""

import sys
from pathlib import Path

import pytest

# Add project directory (for circle_lib and the app modules) and this
# directory (for synthetic_strokes) to the path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from synthetic_strokes import arc_points  # noqa: E402


# -----------------------------------------------------------------------------
# Pytest Markers
# -----------------------------------------------------------------------------

def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow-running (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# -----------------------------------------------------------------------------
# Geometry Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def center():
    """Return the center of an 800x600 surface."""
    from circle_lib.domain.geometry import Viewport
    return Viewport(800, 600).center


@pytest.fixture
def perfect_circle(center):
    """Return 36 evenly spaced samples on a radius-100 circle.

    Returns:
        list[Point]: One full clockwise turn, last sample on the first.
    """
    return arc_points(center, 100, 37)


# -----------------------------------------------------------------------------
# Database Fixture
# -----------------------------------------------------------------------------

@pytest.fixture
def score_db_path(tmp_path):
    """Return the path of a fresh SQLite database with the scores table."""
    from score_db import init_db

    path = str(tmp_path / 'scores.db')
    init_db(path).close()
    return path


# -----------------------------------------------------------------------------
# Flask Client Fixture
# -----------------------------------------------------------------------------

@pytest.fixture
def flask_client(score_db_path):
    """Create a Flask test client for the game app.

    Points the app at a temporary database, uses the strict preset and
    starts with an empty session registry.

    Example:
        def test_best(flask_client):
            response = flask_client.get('/api/best')
            assert response.get_json() == {'best': 0.0}
    """
    from circle_flask import app, get_registry
    import circle_routes  # noqa: F401 - registers routes

    app.config['TESTING'] = True
    app.config['SCORE_DB_PATH'] = score_db_path
    app.config['POLICY'] = 'strict'
    get_registry().clear()

    with app.test_client() as client:
        yield client

    get_registry().clear()
