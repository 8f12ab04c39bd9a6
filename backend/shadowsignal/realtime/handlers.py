from __future__ import annotations

import logging
from typing import Any

from flask import current_app, request
from flask_socketio import SocketIO, emit

from ..game.errors import InvalidPayload
from ..game.service import SessionCoordinator
from ..utils.ip import get_client_ip


log = logging.getLogger(__name__)


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > 16:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def _pick(data: Any, *keys: str) -> str:
    """Read the first present key of a dict payload, or the payload itself if it is a string."""
    if isinstance(data, str):
        return data.strip()
    if isinstance(data, dict):
        for key in keys:
            value = data.get(key)
            if value is not None:
                return str(value).strip()
    return ""


def _reject_payload(event: str) -> dict:
    log.info("[bad-payload] event=%s sid=%s", event, request.sid)
    emit("error", InvalidPayload.message)
    return {"ok": False, "error": InvalidPayload.code}


def register_socketio_handlers(socketio: SocketIO, coordinator: SessionCoordinator) -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        trust = current_app.config.get("TRUST_PROXY_HEADERS", False)
        log.debug("[connect] sid=%s ip=%s", request.sid, get_client_ip(request, trust_proxy_headers=trust))

    @socketio.on("createRoom")
    def create_room(data=None):
        name = _pick(data, "name", "playerName")
        if not _validate_name(name):
            return _reject_payload("createRoom")
        return coordinator.create_room(request.sid, name)

    @socketio.on("joinRoom")
    def join_room(data=None):
        payload = data if isinstance(data, dict) else {}
        code = _pick(payload, "roomCode", "code")
        name = _pick(payload, "playerName", "name")
        if not code or not _validate_name(name):
            return _reject_payload("joinRoom")
        return coordinator.join_room(request.sid, code, name)

    @socketio.on("startGame")
    def start_game(data=None):
        return coordinator.start_game(request.sid)

    @socketio.on("playerReady")
    def player_ready(data=None):
        return coordinator.player_ready(request.sid)

    @socketio.on("submitVote")
    def submit_vote(data=None):
        target_id = _pick(data, "targetId", "playerId")
        if not target_id:
            return _reject_payload("submitVote")
        return coordinator.submit_vote(request.sid, target_id)

    @socketio.on("nextRound")
    def next_round(data=None):
        return coordinator.next_round(request.sid)

    @socketio.on("revealRole")
    def reveal_role(data=None):
        target_id = _pick(data, "targetId", "playerId")
        if not target_id:
            return _reject_payload("revealRole")
        return coordinator.reveal_role(request.sid, target_id)

    @socketio.on("leaveRoom")
    def leave_room(data=None):
        return coordinator.leave_room(request.sid)

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        coordinator.disconnect(request.sid)
        log.debug("[disconnect] sid=%s reason=%s", request.sid, reason)
