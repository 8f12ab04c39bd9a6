from __future__ import annotations

from typing import Any

from .models import Player, Room


def _role_visible(room: Room, player: Player, viewer_id: str | None) -> bool:
    if room.state == "results":
        return True
    if player.id in room.revealed_players:
        return True
    return viewer_id is not None and viewer_id == player.id


def player_public_state(room: Room, player: Player, viewer_id: str | None = None) -> dict[str, Any]:
    visible = _role_visible(room, player, viewer_id)
    return {
        "id": player.id,
        "name": player.name,
        "isReady": player.is_ready,
        "score": player.score,
        "role": player.role if visible else None,
        "word": player.word if visible else None,
    }


def room_public_state(room: Room, viewer_socket_id: str | None = None) -> dict[str, Any]:
    """Build the externally visible view of ``room``.

    Roles and words only show for revealed players, everyone once the round
    is in results, and the viewer's own entry when ``viewer_socket_id`` is
    given. Votes are exposed as a count only.
    """
    payload: dict[str, Any] = {
        "code": room.code,
        "players": [player_public_state(room, p, viewer_socket_id) for p in room.players.values()],
        "gameState": room.state,
        "round": room.round,
        "maxPlayers": room.max_players,
        "hostId": room.host_id,
        "wordPair": None,
        "votes": len(room.votes),
        "revealedPlayers": list(room.revealed_players),
    }

    if room.state == "results":
        if room.word_pair:
            payload["wordPair"] = {"shadow": room.word_pair.shadow, "signal": room.word_pair.signal}
        if room.last_result:
            payload["results"] = {
                "eliminatedPlayerId": room.last_result.eliminated_id,
                "shadowCaught": room.last_result.shadow_caught,
                "voteCount": dict(room.last_result.vote_count),
            }

    return payload
