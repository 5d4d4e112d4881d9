# engine_py/src/startups_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
ROOM_FULL = "ROOM_FULL"
GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
NOT_OWNER = "NOT_OWNER"
GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
ALREADY_IN_ROOM = "ALREADY_IN_ROOM"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
WRONG_PHASE = "WRONG_PHASE"
INSUFFICIENT_CHIPS = "INSUFFICIENT_CHIPS"
DECK_EMPTY = "DECK_EMPTY"
INVALID_INDEX = "INVALID_INDEX"
ANTI_CHIP_HOLDER = "ANTI_CHIP_HOLDER"
SAME_COMPANY_RETURN = "SAME_COMPANY_RETURN"
LAST_CARD_MUST_PORTFOLIO = "LAST_CARD_MUST_PORTFOLIO"
UNKNOWN_ACTION = "UNKNOWN_ACTION"
INVALID_PAYLOAD = "INVALID_PAYLOAD"
INTERNAL_ERROR = "INTERNAL_ERROR"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
