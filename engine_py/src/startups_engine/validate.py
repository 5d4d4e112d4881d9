"""
Intent validation.

Every check here is read-only; the engine applies an intent only after the
matching validator returns a successful result.
"""

from typing import Any, Optional

from . import errors
from .antichips import holds_anti_chip, payable_slot_count
from .constants import PHASE_DRAW, PHASE_PLAY
from .models import Player, Room


class ValidationResult:
    """Result of intent validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def success(cls) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)


def is_valid_index(value: Any, length: int) -> bool:
    """Indices must be plain non-negative ints within range."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value < length


def validate_turn(room: Room, player_id: str) -> ValidationResult:
    """Check that the game is running and it is this player's turn."""
    if not room.is_active:
        return ValidationResult.error(errors.GAME_NOT_ACTIVE, "Game is not in progress")
    if room.get_player(player_id) is None:
        return ValidationResult.error(errors.PLAYER_NOT_FOUND, "Player not in room")
    current = room.current_player
    if current is None or current.id != player_id:
        return ValidationResult.error(errors.NOT_YOUR_TURN, "Not your turn")
    return ValidationResult.success()


def validate_take_from_deck(room: Room, player: Player) -> ValidationResult:
    if room.turn_phase != PHASE_DRAW:
        return ValidationResult.error(errors.WRONG_PHASE, "You must play a card first")
    if not room.deck:
        return ValidationResult.error(errors.DECK_EMPTY, "Deck is empty")
    cost = payable_slot_count(room, player.id)
    if player.chips1 < cost:
        return ValidationResult.error(
            errors.INSUFFICIENT_CHIPS,
            f"Need {cost} chips to draw, you have {player.chips1}"
        )
    return ValidationResult.success()


def validate_take_from_market(room: Room, player: Player, market_index: Any) -> ValidationResult:
    if room.turn_phase != PHASE_DRAW:
        return ValidationResult.error(errors.WRONG_PHASE, "You must play a card first")
    if not is_valid_index(market_index, len(room.market)):
        return ValidationResult.error(errors.INVALID_INDEX, "No such market card")
    company = room.market[market_index].company
    if holds_anti_chip(room, player.id, company):
        return ValidationResult.error(
            errors.ANTI_CHIP_HOLDER,
            f"You hold the anti-monopoly chip for {company}"
        )
    return ValidationResult.success()


def validate_play_to_portfolio(room: Room, player: Player, hand_index: Any) -> ValidationResult:
    if room.turn_phase != PHASE_PLAY:
        return ValidationResult.error(errors.WRONG_PHASE, "You must take a card first")
    if not is_valid_index(hand_index, len(player.hand)):
        return ValidationResult.error(errors.INVALID_INDEX, "No such card in hand")
    return ValidationResult.success()


def validate_play_to_market(room: Room, player: Player, hand_index: Any) -> ValidationResult:
    if room.turn_phase != PHASE_PLAY:
        return ValidationResult.error(errors.WRONG_PHASE, "You must take a card first")
    if not is_valid_index(hand_index, len(player.hand)):
        return ValidationResult.error(errors.INVALID_INDEX, "No such card in hand")
    if room.last_card_taken and room.last_card_taken_player == player.id:
        return ValidationResult.error(
            errors.LAST_CARD_MUST_PORTFOLIO,
            "You took the last card and must play to your portfolio"
        )
    company = player.hand[hand_index].company
    if player.last_taken_company == company:
        return ValidationResult.error(
            errors.SAME_COMPANY_RETURN,
            f"You cannot return {company} to the market this turn"
        )
    return ValidationResult.success()
