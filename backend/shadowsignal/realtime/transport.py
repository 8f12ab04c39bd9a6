from __future__ import annotations

from typing import Any, Protocol

from flask_socketio import SocketIO


class Transport(Protocol):
    def send_to(self, sid: str, event: str, payload: Any) -> None: ...

    def send_to_room(self, room_code: str, event: str, payload: Any) -> None: ...

    def join(self, sid: str, room_code: str) -> None: ...

    def leave(self, sid: str, room_code: str) -> None: ...


class SocketIOTransport:
    """Delivers coordinator events through a Flask-SocketIO server.

    Works outside of a request context, so it is safe to call from any
    handler or background task.
    """

    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self.socketio = socketio
        self.namespace = namespace

    def send_to(self, sid: str, event: str, payload: Any) -> None:
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def send_to_room(self, room_code: str, event: str, payload: Any) -> None:
        self.socketio.emit(event, payload, to=room_code, namespace=self.namespace)

    def join(self, sid: str, room_code: str) -> None:
        self.socketio.server.enter_room(sid, room_code, namespace=self.namespace)

    def leave(self, sid: str, room_code: str) -> None:
        self.socketio.server.leave_room(sid, room_code, namespace=self.namespace)
