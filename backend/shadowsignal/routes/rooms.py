from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    # Public view only: no viewer, so no roles or words before results.
    snapshot = current_app.extensions["shadowsignal"].room_snapshot(code)
    if snapshot is None:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(snapshot)
