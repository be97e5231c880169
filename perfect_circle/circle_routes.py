"""Flask routes for the circle game.

This module contains the JSON and image route handlers of the web adapter.
Each player gets a session id; the browser posts pointer samples to it and
draws whatever the feedback says.
"""

from flask import request, jsonify

from circle_flask import (
    app, get_entry_or_error, get_registry, get_score_store,
    parse_samples, parse_viewport, send_pil_image_as_png,
)
from circle_lib.analysis.accuracy import color_rgb
from circle_lib.analysis.validation import get_preset
from circle_lib.domain.states import MessageKey
from circle_lib.utils.rendering import render_stroke_image
from game_config import MAX_PREVIEW_SIZE, MESSAGES


def _with_text(payload: dict) -> dict:
    """Add the display text for the payload's message key, if any."""
    key = payload.get('message')
    payload['message_text'] = MESSAGES.get(MessageKey(key)) if key else None
    return payload


@app.route('/api/config')
def api_config():
    name = app.config['POLICY']
    return jsonify(policy=name, validation=get_preset(name).to_dict(),
                   messages={k.value: v for k, v in MESSAGES.items()})


@app.route('/api/best')
def api_best():
    return jsonify(best=get_score_store().get())


@app.route('/api/sessions', methods=['POST'])
def api_create_session():
    try:
        viewport = parse_viewport(request.get_json(silent=True))
    except ValueError as e:
        return jsonify(error=str(e)), 400
    store = get_score_store()
    sid, entry = get_registry().create(viewport, store, app.config['POLICY'])
    return jsonify(
        id=sid,
        center=entry.viewport.center.to_list(),
        best=entry.service.best_score(),
        policy=app.config['POLICY'],
        can_share=entry.service.can_share,
    ), 201


@app.route('/api/sessions/<sid>', methods=['DELETE'])
def api_delete_session(sid):
    if not get_registry().remove(sid):
        return jsonify(error="Session not found"), 404
    return '', 204


@app.route('/api/sessions/<sid>/viewport', methods=['PUT'])
def api_resize(sid):
    entry, err = get_entry_or_error(sid)
    if err:
        return err
    try:
        viewport = parse_viewport(request.get_json(silent=True))
    except ValueError as e:
        return jsonify(error=str(e)), 400
    try:
        entry.resize(viewport)
    except RuntimeError as e:
        return jsonify(error=str(e)), 409
    return jsonify(center=viewport.center.to_list())


@app.route('/api/sessions/<sid>/begin', methods=['POST'])
def api_begin(sid):
    entry, err = get_entry_or_error(sid)
    if err:
        return err
    return jsonify(state=entry.begin())


@app.route('/api/sessions/<sid>/samples', methods=['POST'])
def api_samples(sid):
    entry, err = get_entry_or_error(sid)
    if err:
        return err
    try:
        samples = parse_samples(request.get_json(silent=True))
    except ValueError as e:
        return jsonify(error=str(e)), 400
    return jsonify(_with_text(entry.add_samples(samples)))


@app.route('/api/sessions/<sid>/end', methods=['POST'])
def api_end(sid):
    entry, err = get_entry_or_error(sid)
    if err:
        return err
    return jsonify(_with_text(entry.end()))


@app.route('/api/sessions/<sid>/preview.png')
def api_preview(sid):
    """Render the live stroke, or the last completed one when idle."""
    entry, err = get_entry_or_error(sid)
    if err:
        return err
    with entry.lock:
        session = entry.service.session
        if session.is_active:
            points = list(session.stroke.points)
            score = session.scorer.score(session.stroke, session.center)
        else:
            points = list(session.last_stroke.points)
            score = session.last_score or 0.0
        center = session.center
        size = (max(1, min(int(entry.viewport.width), MAX_PREVIEW_SIZE)),
                max(1, min(int(entry.viewport.height), MAX_PREVIEW_SIZE)))

    img = render_stroke_image(points, center, color_rgb(score), size)
    return send_pil_image_as_png(img)


@app.route('/api/sessions/<sid>/share')
def api_share(sid):
    entry, err = get_entry_or_error(sid)
    if err:
        return err
    with entry.lock:
        summary = entry.service.share(url=request.args.get('url') or request.host_url)
    if summary is None:
        return jsonify(error="No completed score to share"), 404
    return jsonify(summary.to_dict())
