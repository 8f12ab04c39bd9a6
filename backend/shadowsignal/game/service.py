from __future__ import annotations

import functools
import logging
import random
from dataclasses import dataclass
from threading import RLock
from typing import TYPE_CHECKING, Any, Callable, Mapping

from .errors import (
    AlreadyInRoom,
    GameAlreadyInProgress,
    GameError,
    NotEnoughPlayers,
    NotHost,
    RoomFull,
    RoomNotFound,
    UnknownParticipant,
    UnknownTarget,
    WrongPhase,
)
from .models import Player, Room, WordPair
from .scoring import TIE_BREAK_POLICIES, TieBreak, tally_round
from .snapshot import player_public_state, room_public_state
from .store import PlayerIndex, RoomRegistry
from .words import WORD_PAIRS, generate_room_code, normalize_room_code, pick_word_pair

if TYPE_CHECKING:
    from ..realtime.transport import Transport


log = logging.getLogger(__name__)


@dataclass
class GameSettings:
    max_players: int = 6
    min_players: int = 3
    catch_reward: int = 100
    escape_reward: int = 200
    room_code_length: int = 6
    tie_break: TieBreak = "first_to_reach"
    reject_unknown_vote_targets: bool = True

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "GameSettings":
        tie_break = str(config.get("TIE_BREAK", "first_to_reach")).strip()
        if tie_break not in TIE_BREAK_POLICIES:
            raise ValueError(f"TIE_BREAK must be one of {TIE_BREAK_POLICIES}, got {tie_break!r}")

        settings = cls(
            max_players=int(config.get("MAX_PLAYERS", 6)),
            min_players=int(config.get("MIN_PLAYERS", 3)),
            catch_reward=int(config.get("CATCH_REWARD", 100)),
            escape_reward=int(config.get("ESCAPE_REWARD", 200)),
            room_code_length=int(config.get("ROOM_CODE_LENGTH", 6)),
            tie_break=tie_break,  # type: ignore[arg-type]
            reject_unknown_vote_targets=bool(config.get("REJECT_UNKNOWN_VOTE_TARGETS", True)),
        )
        if settings.min_players < 1 or settings.max_players < settings.min_players:
            raise ValueError("MAX_PLAYERS must be at least MIN_PLAYERS, and MIN_PLAYERS at least 1")
        return settings


def _operation(fn: Callable[..., None]) -> Callable[..., dict]:
    """Run a client operation under the coordinator lock.

    Rejections are reported to the caller only, as an ``error`` event, and
    turned into an acknowledgement dict. Unknown participants are dropped
    silently.
    """

    @functools.wraps(fn)
    def wrapper(self: "SessionCoordinator", sid: str, *args: Any, **kwargs: Any) -> dict:
        with self._lock:
            try:
                fn(self, sid, *args, **kwargs)
            except UnknownParticipant as exc:
                log.debug("[ignored] op=%s sid=%s reason=%s", fn.__name__, sid, exc.code)
                return {"ok": False, "error": exc.code}
            except GameError as exc:
                log.info("[rejected] op=%s sid=%s reason=%s", fn.__name__, sid, exc.code)
                self.transport.send_to(sid, "error", exc.message)
                return {"ok": False, "error": exc.code}
            return {"ok": True}

    return wrapper


class SessionCoordinator:
    """Single writer for the room registry and the player index.

    Every public operation takes the connection id of the caller first, runs
    to completion while holding ``_lock`` (emits included) and returns an
    acknowledgement dict.
    """

    def __init__(
        self,
        transport: "Transport",
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
        word_pairs: list[WordPair] | None = None,
    ) -> None:
        self.transport = transport
        self.settings = settings or GameSettings()
        self.rooms = RoomRegistry()
        self.players = PlayerIndex()
        self._rng = rng or random.SystemRandom()
        self._word_pairs = list(word_pairs or WORD_PAIRS)
        self._lock = RLock()

    # ---- reads ----

    def room_snapshot(self, code: str, viewer_id: str | None = None) -> dict | None:
        with self._lock:
            room = self.rooms.get(normalize_room_code(code))
            if room is None:
                return None
            return room_public_state(room, viewer_socket_id=viewer_id)

    def room_count(self) -> int:
        with self._lock:
            return len(self.rooms)

    # ---- client operations ----

    @_operation
    def create_room(self, sid: str, name: str) -> None:
        if sid in self.players:
            raise AlreadyInRoom()

        code = generate_room_code(self.settings.room_code_length)
        while code in self.rooms:
            code = generate_room_code(self.settings.room_code_length)

        room = Room(code=code, host_id=sid, max_players=self.settings.max_players)
        self.rooms.put(code, room)
        player = self._seat(room, sid, name)
        log.info("[room-created] code=%s host=%s", code, sid)

        self.transport.send_to(sid, "roomCreated", {"roomCode": code, "player": player_public_state(room, player, sid)})
        self._broadcast(room, "roomUpdated")

    @_operation
    def join_room(self, sid: str, code: str, name: str) -> None:
        code = normalize_room_code(code)

        existing = self.players.get(sid)
        if existing is not None:
            room = self.rooms.get(existing.room_code)
            if existing.room_code == code and room is not None:
                # Repeated join from the same connection: answer again, seat once.
                self.transport.send_to(
                    sid, "roomJoined", {"roomCode": code, "player": player_public_state(room, existing, sid)}
                )
                return
            raise AlreadyInRoom()

        room = self.rooms.get(code)
        if room is None:
            raise RoomNotFound()
        if room.is_full:
            raise RoomFull()
        if room.state != "lobby":
            raise GameAlreadyInProgress()

        player = self._seat(room, sid, name)
        log.info("[room-joined] code=%s sid=%s players=%d", code, sid, len(room.players))

        self.transport.send_to(sid, "roomJoined", {"roomCode": code, "player": player_public_state(room, player, sid)})
        self._broadcast(room, "roomUpdated")

    @_operation
    def start_game(self, sid: str) -> None:
        _, room = self._require_seat(sid)
        self._require_host(room, sid)
        if room.state != "lobby":
            raise GameAlreadyInProgress()
        if len(room.players) < self.settings.min_players:
            raise NotEnoughPlayers(f"Need at least {self.settings.min_players} players to start")

        pair = pick_word_pair(self._rng, self._word_pairs)
        shadow_id = self._rng.choice(list(room.players))

        room.word_pair = pair
        room.votes = {}
        room.revealed_players = {}
        room.last_result = None
        for pid, p in room.players.items():
            if pid == shadow_id:
                p.role, p.word = "shadow", pair.shadow
            else:
                p.role, p.word = "signal", pair.signal
            p.is_ready = False
        room.state = "assigning"
        log.info("[game-started] code=%s round=%d players=%d", room.code, room.round, len(room.players))

        roster = [{"id": p.id, "name": p.name, "isReady": p.is_ready} for p in room.players.values()]
        for p in room.players.values():
            self.transport.send_to(p.id, "roleAssigned", {"role": p.role, "word": p.word, "players": roster})
        self._broadcast(room, "gameStarted")

    @_operation
    def player_ready(self, sid: str) -> None:
        player, room = self._require_seat(sid)
        if room.state != "assigning":
            raise WrongPhase()

        player.is_ready = True
        if room.all_ready():
            self._begin_discussion(room)
            self._broadcast(room, "discussionStarted")
        else:
            self._broadcast(room, "roomUpdated")

    @_operation
    def submit_vote(self, sid: str, target_id: str) -> None:
        _, room = self._require_seat(sid)
        if room.state != "discussion":
            raise WrongPhase("Voting is not open")

        target_id = str(target_id or "")
        if self.settings.reject_unknown_vote_targets and target_id not in room.players:
            raise UnknownTarget()

        # Re-insert so that the dict keeps latest-vote arrival order.
        room.votes.pop(sid, None)
        room.votes[sid] = target_id

        if room.all_voted():
            self._close_voting(room)
            self._broadcast(room, "roundResults")
        else:
            self.transport.send_to_room(
                room.code,
                "voteReceived",
                {"voterId": sid, "remainingVotes": len(room.players) - len(room.votes)},
            )

    @_operation
    def next_round(self, sid: str) -> None:
        _, room = self._require_seat(sid)
        self._require_host(room, sid)

        self._reset_to_lobby(room, advance=True)
        log.info("[round-advanced] code=%s round=%d", room.code, room.round)
        self._broadcast(room, "roundAdvanced")

    @_operation
    def reveal_role(self, sid: str, target_id: str) -> None:
        _, room = self._require_seat(sid)
        self._require_host(room, sid)

        target_id = str(target_id or "")
        if target_id not in room.players:
            raise UnknownTarget()

        room.revealed_players[target_id] = None
        self.transport.send_to_room(
            room.code,
            "roleRevealed",
            {"playerId": target_id, "revealedPlayers": list(room.revealed_players)},
        )
        self._broadcast(room, "roomUpdated")

    @_operation
    def leave_room(self, sid: str) -> None:
        self._depart(sid)

    @_operation
    def disconnect(self, sid: str) -> None:
        self._depart(sid)

    # ---- internals (callers hold the lock) ----

    def _seat(self, room: Room, sid: str, name: str) -> Player:
        player = Player(id=sid, name=name, room_code=room.code)
        room.players[sid] = player
        self.players.put(sid, player)
        self.transport.join(sid, room.code)
        return player

    def _require_seat(self, sid: str) -> tuple[Player, Room]:
        player = self.players.get(sid)
        if player is None:
            raise UnknownParticipant()
        room = self.rooms.get(player.room_code)
        if room is None or sid not in room.players:
            raise UnknownParticipant()
        return player, room

    def _require_host(self, room: Room, sid: str) -> None:
        if room.host_id != sid:
            raise NotHost()

    def _broadcast(self, room: Room, event: str) -> None:
        self.transport.send_to_room(room.code, event, room_public_state(room))

    def _begin_discussion(self, room: Room) -> None:
        room.votes = {}
        for p in room.players.values():
            p.is_ready = False
        room.state = "discussion"
        log.info("[discussion-started] code=%s round=%d", room.code, room.round)

    def _close_voting(self, room: Room) -> None:
        result = tally_round(
            room,
            catch_reward=self.settings.catch_reward,
            escape_reward=self.settings.escape_reward,
            tie_break=self.settings.tie_break,
        )
        room.state = "results"
        log.info(
            "[round-results] code=%s round=%d eliminated=%s caught=%s",
            room.code,
            room.round,
            result.eliminated_id,
            result.shadow_caught,
        )

    def _reset_to_lobby(self, room: Room, advance: bool) -> None:
        if advance:
            room.round += 1
        room.reset_round_state()
        room.state = "lobby"

    def _depart(self, sid: str) -> None:
        player = self.players.remove(sid)
        if player is None:
            raise UnknownParticipant()

        self.transport.leave(sid, player.room_code)
        room = self.rooms.get(player.room_code)
        if room is None:
            return

        room.players.pop(sid, None)
        room.votes.pop(sid, None)
        room.revealed_players.pop(sid, None)

        if not room.players:
            self.rooms.remove(room.code)
            log.info("[room-closed] code=%s", room.code)
            return

        if room.host_id == sid:
            room.host_id = next(iter(room.players))
            log.info("[host-changed] code=%s host=%s", room.code, room.host_id)

        log.info("[room-left] code=%s sid=%s players=%d", room.code, sid, len(room.players))
        follow_up = self._settle_after_departure(room, player)
        self._broadcast(room, "roomUpdated")
        if follow_up:
            self._broadcast(room, follow_up)

    def _settle_after_departure(self, room: Room, leaver: Player) -> str | None:
        """Bring a room back in line with its invariants after a member left.

        Returns the name of the transition event to broadcast, if any.
        """
        if room.state == "lobby":
            return None

        too_few = room.state != "results" and len(room.players) < self.settings.min_players
        if leaver.role == "shadow" or too_few:
            played = room.state == "results"
            self._reset_to_lobby(room, advance=played)
            log.info("[round-abandoned] code=%s round=%d", room.code, room.round)
            # A finished round still moves the counter, same as a host advance.
            return "roundAdvanced" if played else None

        if room.state == "assigning" and room.all_ready():
            self._begin_discussion(room)
            return "discussionStarted"

        if room.state == "discussion":
            room.votes = {voter: target for voter, target in room.votes.items() if target != leaver.id}
            if room.all_voted():
                self._close_voting(room)
                return "roundResults"

        return None
