"""Integration tests for the game's Flask routes.

Drives whole games through the JSON API with the Flask test client. The
``flask_client`` fixture points the app at a temporary database and uses
the strict preset.
"""

import io
import math

import pytest
from PIL import Image

from circle_lib.domain.geometry import Point

from synthetic_strokes import arc_points

pytestmark = pytest.mark.integration

CENTER = Point(400, 300)


def create_session(client, width=800, height=600):
    response = client.post('/api/sessions', json={'width': width, 'height': height})
    assert response.status_code == 201
    return response.get_json()['id']


def post_points(client, sid, points):
    return client.post(f'/api/sessions/{sid}/samples',
                       json={'points': [p.to_list() for p in points]})


def full_circle():
    """Clockwise circle that the strict preset finishes on its own."""
    return arc_points(CENTER, 100, 40, sweep=math.radians(390))


class TestConfigRoutes:

    def test_config(self, flask_client):
        """The client config lists the presets and message keys."""
        data = flask_client.get('/api/config').get_json()
        assert data['policy'] == 'strict'
        assert data['validation']['min_sweep_angle'] == 5.9
        assert data['messages']['TooSmall'] == 'Try drawing a bigger circle'

    def test_best_starts_at_zero(self, flask_client):
        """A fresh database reports a best score of 0."""
        assert flask_client.get('/api/best').get_json() == {'best': 0.0}


class TestSessionLifecycle:

    def test_create(self, flask_client):
        """Creating a session returns its id and center."""
        response = flask_client.post('/api/sessions', json={'width': 800, 'height': 600})
        data = response.get_json()
        assert response.status_code == 201
        assert data['center'] == [400.0, 300.0]
        assert data['best'] == 0.0
        assert data['policy'] == 'strict'
        assert data['can_share'] is False

    @pytest.mark.parametrize('payload', [None, {'width': 0, 'height': 600},
                                         {'width': 'wide', 'height': 600}])
    def test_create_rejects_bad_viewport(self, flask_client, payload):
        """Bad viewports are rejected with 400."""
        response = flask_client.post('/api/sessions', json=payload)
        assert response.status_code == 400
        assert 'error' in response.get_json()

    def test_unknown_session(self, flask_client):
        """Unknown session ids give 404."""
        assert flask_client.post('/api/sessions/nope/begin').status_code == 404
        assert flask_client.post('/api/sessions/nope/end').status_code == 404
        assert flask_client.get('/api/sessions/nope/preview.png').status_code == 404

    def test_delete(self, flask_client):
        """Deleted sessions are gone."""
        sid = create_session(flask_client)
        assert flask_client.delete(f'/api/sessions/{sid}').status_code == 204
        assert flask_client.delete(f'/api/sessions/{sid}').status_code == 404

    def test_begin(self, flask_client):
        """begin makes the session active."""
        sid = create_session(flask_client)
        response = flask_client.post(f'/api/sessions/{sid}/begin')
        assert response.get_json() == {'state': 'active'}

    def test_resize_when_idle(self, flask_client):
        """Resizing between strokes moves the center."""
        sid = create_session(flask_client)
        response = flask_client.put(f'/api/sessions/{sid}/viewport',
                                    json={'width': 1000, 'height': 500})
        assert response.status_code == 200
        assert response.get_json() == {'center': [500.0, 250.0]}

    def test_resize_while_drawing_conflicts(self, flask_client):
        """Resizing mid-stroke gives 409."""
        sid = create_session(flask_client)
        flask_client.post(f'/api/sessions/{sid}/begin')
        response = flask_client.put(f'/api/sessions/{sid}/viewport',
                                    json={'width': 1000, 'height': 500})
        assert response.status_code == 409


class TestPlaying:

    def test_completed_circle(self, flask_client):
        """A full circle completes with a score and a new best."""
        sid = create_session(flask_client)
        flask_client.post(f'/api/sessions/{sid}/begin')

        data = post_points(flask_client, sid, full_circle()).get_json()
        assert data['state'] == 'completed'
        assert data['score'] == 100.0
        assert data['color'] == 'hsl(120, 100%, 50%)'
        assert data['path']['start'] == [500.0, 300.0]
        assert data['notifications'] == [{'key': 'NewHighScore', 'score': 100.0}]

        end = flask_client.post(f'/api/sessions/{sid}/end').get_json()
        assert end['state'] == 'completed'
        assert end['new_high_score'] is True
        assert end['best'] == 100.0
        assert end['message_text'] is None
        assert end['notifications'] == []

        assert flask_client.get('/api/best').get_json() == {'best': 100.0}

    def test_single_samples(self, flask_client):
        """Samples may be posted one at a time."""
        sid = create_session(flask_client)
        flask_client.post(f'/api/sessions/{sid}/begin')
        for p in arc_points(CENTER, 100, 4, sweep=0.3):
            data = flask_client.post(f'/api/sessions/{sid}/samples',
                                     json={'x': p.x, 'y': p.y}).get_json()
        assert data['state'] == 'active'
        assert len(data['path']['segments']) == 2

    def test_too_small(self, flask_client):
        """A tiny stroke is reported as too small."""
        sid = create_session(flask_client)
        flask_client.post(f'/api/sessions/{sid}/begin')

        data = post_points(flask_client, sid, arc_points(CENTER, 20, 3, sweep=0.5)).get_json()
        assert data['state'] == 'failed_too_small'
        assert data['message'] == 'TooSmall'
        assert data['message_text'] == 'Try drawing a bigger circle'
        assert data['notifications'] == [{'key': 'TooSmall', 'score': None}]

    def test_incomplete_sweep(self, flask_client):
        """Ending a short arc reports IncompleteSweep."""
        sid = create_session(flask_client)
        flask_client.post(f'/api/sessions/{sid}/begin')
        post_points(flask_client, sid, arc_points(CENTER, 100, 20, sweep=math.pi))

        end = flask_client.post(f'/api/sessions/{sid}/end').get_json()
        assert end['state'] == 'failed_incomplete_sweep'
        assert end['message_text'] == 'Draw a full circle'
        assert end['notifications'] == [{'key': 'IncompleteSweep', 'score': None}]
        assert end['new_high_score'] is False

    def test_nan_sample_ignored(self, flask_client):
        """NaN samples are skipped."""
        sid = create_session(flask_client)
        flask_client.post(f'/api/sessions/{sid}/begin')
        response = flask_client.post(f'/api/sessions/{sid}/samples',
                                     data='{"x": NaN, "y": 10}',
                                     content_type='application/json')
        assert response.status_code == 200
        data = response.get_json()
        assert data['state'] == 'active'
        assert data['path'] is None

    def test_bad_samples(self, flask_client):
        """Malformed sample payloads give 400."""
        sid = create_session(flask_client)
        flask_client.post(f'/api/sessions/{sid}/begin')
        response = flask_client.post(f'/api/sessions/{sid}/samples', json={'points': []})
        assert response.status_code == 400

    def test_samples_before_begin_are_idle(self, flask_client):
        """Samples before begin leave the session idle."""
        sid = create_session(flask_client)
        data = flask_client.post(f'/api/sessions/{sid}/samples',
                                 json={'x': 500, 'y': 300}).get_json()
        assert data['state'] == 'idle'

    def test_best_shared_between_sessions(self, flask_client):
        """All sessions share one best score."""
        first = create_session(flask_client)
        flask_client.post(f'/api/sessions/{first}/begin')
        post_points(flask_client, first, full_circle())

        second = flask_client.post('/api/sessions', json={'width': 800, 'height': 600})
        assert second.get_json()['best'] == 100.0


class TestPreviewAndShare:

    def test_preview_png(self, flask_client):
        """The preview is a PNG of the surface size."""
        sid = create_session(flask_client, 320, 240)
        response = flask_client.get(f'/api/sessions/{sid}/preview.png')
        assert response.status_code == 200
        assert response.mimetype == 'image/png'
        img = Image.open(io.BytesIO(response.data))
        assert img.size == (320, 240)
        assert img.getpixel((160, 120))[:3] == (255, 255, 255)

    def test_preview_of_completed_stroke(self, flask_client):
        """A completed stroke stays in the preview."""
        sid = create_session(flask_client)
        flask_client.post(f'/api/sessions/{sid}/begin')
        post_points(flask_client, sid, full_circle())

        img = Image.open(io.BytesIO(
            flask_client.get(f'/api/sessions/{sid}/preview.png').data))
        assert img.getpixel((500, 300))[:3] == (0, 255, 0)

    def test_share_requires_score(self, flask_client):
        """Sharing without a score gives 404."""
        sid = create_session(flask_client)
        assert flask_client.get(f'/api/sessions/{sid}/share').status_code == 404

    def test_share(self, flask_client):
        """Sharing returns the score text."""
        sid = create_session(flask_client)
        flask_client.post(f'/api/sessions/{sid}/begin')
        post_points(flask_client, sid, full_circle())

        data = flask_client.get(f'/api/sessions/{sid}/share?url=https://example.org/').get_json()
        assert data['title'] == 'Perfect Circle Challenge'
        assert data['text'].startswith('I scored 100%')
        assert data['url'] == 'https://example.org/'


def test_circle_completed_on_end(flask_client, center, perfect_circle):
    """One exact revolution stays active until the end signal."""
    sid = create_session(flask_client)
    flask_client.post(f'/api/sessions/{sid}/begin')

    data = post_points(flask_client, sid, perfect_circle).get_json()
    assert data['state'] == 'active'
    assert data['path']['start'] == [center.x + 100, center.y]

    end = flask_client.post(f'/api/sessions/{sid}/end').get_json()
    assert end['state'] == 'completed'
    assert end['score'] == 100.0
    assert end['notifications'] == [{'key': 'NewHighScore', 'score': 100.0}]
