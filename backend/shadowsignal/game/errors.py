from __future__ import annotations


class GameError(Exception):
    """A rejected client operation.

    ``code`` is the machine readable identifier returned in acknowledgements,
    ``message`` is the human readable text sent with the ``error`` event.
    """

    code = "game_error"
    message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        if message:
            self.message = message
        super().__init__(self.message)


class RoomNotFound(GameError):
    code = "room_not_found"
    message = "Room not found"


class RoomFull(GameError):
    code = "room_full"
    message = "Room is full"


class GameAlreadyInProgress(GameError):
    code = "game_in_progress"
    message = "Game already in progress"


class NotHost(GameError):
    code = "only_host"
    message = "Only the host can do that"


class NotEnoughPlayers(GameError):
    code = "not_enough_players"
    message = "Not enough players to start"


class AlreadyInRoom(GameError):
    code = "already_in_room"
    message = "You are already in a room"


class UnknownTarget(GameError):
    code = "invalid_target"
    message = "That player is not in this room"


class WrongPhase(GameError):
    code = "wrong_phase"
    message = "That is not possible right now"


class InvalidPayload(GameError):
    code = "invalid_payload"
    message = "Invalid request"


class UnknownParticipant(GameError):
    # Usually a request racing its own disconnect; never reported to clients.
    code = "not_in_room"
    message = "You are not in a room"
