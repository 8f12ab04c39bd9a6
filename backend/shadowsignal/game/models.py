from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


RoomState = Literal["lobby", "assigning", "discussion", "results"]
Role = Literal["shadow", "signal"]


@dataclass(frozen=True)
class WordPair:
    shadow: str
    signal: str


@dataclass
class Player:
    id: str
    name: str
    room_code: str
    role: Role | None = None
    word: str | None = None
    is_ready: bool = False
    score: int = 0

    def reset_round(self) -> None:
        self.role = None
        self.word = None
        self.is_ready = False


@dataclass
class RoundResult:
    eliminated_id: str | None
    shadow_caught: bool
    # target id -> number of votes, in first-vote order
    vote_count: dict[str, int] = field(default_factory=dict)


@dataclass
class Room:
    code: str
    host_id: str
    max_players: int = 6
    state: RoomState = "lobby"
    round: int = 1
    word_pair: WordPair | None = None
    players: dict[str, Player] = field(default_factory=dict)
    # voter id -> target id, in arrival order
    votes: dict[str, str] = field(default_factory=dict)
    # dict used as an insertion-ordered set
    revealed_players: dict[str, None] = field(default_factory=dict)
    last_result: RoundResult | None = None

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    def shadow_id(self) -> str | None:
        for pid, p in self.players.items():
            if p.role == "shadow":
                return pid
        return None

    def all_ready(self) -> bool:
        return bool(self.players) and all(p.is_ready for p in self.players.values())

    def all_voted(self) -> bool:
        return bool(self.players) and len(self.votes) >= len(self.players)

    def reset_round_state(self) -> None:
        """Clear everything that belongs to a single round. Scores are kept."""
        self.word_pair = None
        self.votes = {}
        self.revealed_players = {}
        self.last_result = None
        for p in self.players.values():
            p.reset_round()
