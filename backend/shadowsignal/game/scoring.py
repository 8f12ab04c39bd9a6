"""Vote tallying and round scoring.

Kept free of any transport or locking concerns so the coordinator and the
tests can call it directly on a :class:`Room`.
"""

from __future__ import annotations

from typing import Literal

from .models import Room, RoundResult


TieBreak = Literal["first_to_reach", "first_seen"]
TIE_BREAK_POLICIES = ("first_to_reach", "first_seen")


def count_votes(votes: dict[str, str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for target in votes.values():
        counts[target] = counts.get(target, 0) + 1
    return counts


def pick_eliminated(votes: dict[str, str], tie_break: TieBreak = "first_to_reach") -> str | None:
    """Return the most voted target, or None when there are no votes.

    ``votes`` must iterate in arrival order. With ``first_to_reach`` a tie goes
    to the target whose running count hit the maximum first; ``first_seen``
    gives it to the tied target that received a vote earliest.
    """
    counts = count_votes(votes)
    if not counts:
        return None
    top = max(counts.values())

    if tie_break == "first_seen":
        for target, n in counts.items():
            if n == top:
                return target
        return None

    if tie_break != "first_to_reach":
        raise ValueError(f"unknown tie break policy: {tie_break}")

    running: dict[str, int] = {}
    for target in votes.values():
        running[target] = running.get(target, 0) + 1
        if running[target] == top:
            return target
    return None


def tally_round(
    room: Room,
    catch_reward: int = 100,
    escape_reward: int = 200,
    tie_break: TieBreak = "first_to_reach",
) -> RoundResult:
    """Tally ``room.votes``, apply scores and store the outcome on the room."""
    eliminated_id = pick_eliminated(room.votes, tie_break=tie_break)
    eliminated = room.players.get(eliminated_id) if eliminated_id else None
    shadow_caught = eliminated is not None and eliminated.role == "shadow"

    for p in room.players.values():
        if shadow_caught and p.role == "signal":
            p.score += catch_reward
        elif not shadow_caught and p.role == "shadow":
            p.score += escape_reward

    result = RoundResult(
        eliminated_id=eliminated_id,
        shadow_caught=shadow_caught,
        vote_count=count_votes(room.votes),
    )
    room.last_result = result
    return result
