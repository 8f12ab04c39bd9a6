from __future__ import annotations

import random
import secrets
import string

from .models import WordPair


WORD_PAIRS: list[WordPair] = [
    WordPair(shadow="Vampire", signal="Garlic"),
    WordPair(shadow="Alien", signal="Spaceship"),
    WordPair(shadow="Impostor", signal="Crewmate"),
    WordPair(shadow="Werewolf", signal="Silver"),
    WordPair(shadow="Robot", signal="Human"),
    WordPair(shadow="Ghost", signal="Séance"),
    WordPair(shadow="Spy", signal="Password"),
    WordPair(shadow="Doppelganger", signal="Mirror"),
]

# Uppercase letters and digits, minus the ones people misread when typing.
CODE_ALPHABET = "".join(c for c in string.ascii_uppercase + string.digits if c not in "O0I1L")


def pick_word_pair(rng: random.Random, pairs: list[WordPair] | None = None) -> WordPair:
    return rng.choice(pairs or WORD_PAIRS)


def generate_room_code(length: int = 6) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_room_code(raw: str) -> str:
    return (raw or "").strip().upper()
