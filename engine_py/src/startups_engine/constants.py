"""Game constants and utilities"""

from typing import Dict, List

from .models import Company

COMPANIES: List[Company] = [
    Company('Giraffe Beer', 'orange', 5),
    Company('Bowwow Gaming', 'blue', 6),
    Company('Flamingo Soft', 'pink', 7),
    Company('Octo Coffee', 'brown', 8),
    Company('Hippo Electronics', 'green', 9),
    Company('Elephant Moon Transfer', 'red', 10),
]

COMPANY_NAMES: List[str] = [c.name for c in COMPANIES]
COMPANY_BY_NAME: Dict[str, Company] = {c.name: c for c in COMPANIES}

PHASE_DRAW = 'draw'
PHASE_PLAY = 'play'

ACTION_TAKE_FROM_DECK = 'take_from_deck'
ACTION_TAKE_FROM_MARKET = 'take_from_market'
ACTION_PLAY_TO_PORTFOLIO = 'play_to_portfolio'
ACTION_PLAY_TO_MARKET = 'play_to_market'

END_DECK_EXHAUSTED = 'deck_exhausted'
END_NOT_ENOUGH_PLAYERS = 'not_enough_players'
END_PLAYER_LEFT = 'player_left'

ROOM_CODE_ALPHABET = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ'
ROOM_CODE_LENGTH = 4


def total_card_count() -> int:
    return sum(c.count for c in COMPANIES)


def normalize_room_code(code: str) -> str:
    return code.strip().upper()
