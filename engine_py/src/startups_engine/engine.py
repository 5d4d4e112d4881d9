"""Main game engine: room lifecycle, turn state machine and trading economy"""

import logging
import random
from typing import Any, Dict, Optional

from . import errors
from .antichips import holds_anti_chip, recalc_anti_chips
from .constants import (
    ACTION_PLAY_TO_MARKET, ACTION_PLAY_TO_PORTFOLIO, ACTION_TAKE_FROM_DECK,
    ACTION_TAKE_FROM_MARKET, COMPANY_NAMES, END_DECK_EXHAUSTED,
    END_NOT_ENOUGH_PLAYERS, END_PLAYER_LEFT, PHASE_DRAW, PHASE_PLAY,
    ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH, normalize_room_code,
)
from .models import Card, MarketSlot, Player, Room
from .ranking import finish_game
from .rules import RuleConfig, default_rules
from .shuffle import build_deck, deal_cards
from .validate import (
    ValidationResult, validate_play_to_market, validate_play_to_portfolio,
    validate_take_from_deck, validate_take_from_market, validate_turn,
)

logger = logging.getLogger(__name__)


class EngineResult:
    """Outcome of an engine call. Failed results never carry a mutated room."""

    def __init__(
        self,
        success: bool,
        state: Optional[Room] = None,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.success = success
        self.state = state
        self.error_code = error_code
        self.error_message = error_message
        self.data = data or {}

    def __bool__(self) -> bool:
        return self.success

    def __repr__(self) -> str:
        if self.success:
            return f"EngineResult(success=True, data={self.data})"
        return f"EngineResult(success=False, error_code={self.error_code!r})"

    @classmethod
    def ok(cls, state: Room, **data) -> 'EngineResult':
        return cls(success=True, state=state, data=data)

    @classmethod
    def fail(cls, state: Optional[Room], error_code: str, error_message: str) -> 'EngineResult':
        if state is not None:
            logger.debug(f"Rejected in room {state.code}: [{error_code}] {error_message}")
        return cls(success=False, state=state, error_code=error_code, error_message=error_message)

    @classmethod
    def from_validation(cls, state: Room, validation: ValidationResult) -> 'EngineResult':
        return cls.fail(state, validation.error_code, validation.error_message)


def generate_room_code(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return ''.join(rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


# ---------------------------------------------------------------- lobby

def create_room(owner_id: str, code: Optional[str] = None, rules: Optional[RuleConfig] = None) -> Room:
    """Create a fresh, not yet started room owned by `owner_id`."""
    room = Room(
        code=normalize_room_code(code) if code else generate_room_code(),
        owner=owner_id,
        rule_config=(rules or default_rules).model_copy(),
    )
    room.anti_chips = {company: None for company in COMPANY_NAMES}
    return room


def join_room(room: Room, player_id: str, name: str) -> EngineResult:
    """Seat a new player at the end of the turn order."""
    if room.game_started:
        return EngineResult.fail(room, errors.GAME_ALREADY_STARTED, "Game already started")
    if len(room.players) >= room.rule_config.max_players:
        return EngineResult.fail(room, errors.ROOM_FULL, "Room is full")
    if room.get_player(player_id) is not None:
        return EngineResult.fail(room, errors.ALREADY_IN_ROOM, "Player already in room")

    player = Player(
        id=player_id,
        name=name,
        chips1=room.rule_config.starting_chips1,
        chips3=room.rule_config.starting_chips3,
    )
    room.players.append(player)
    room.version += 1
    room.game_log.append(f"{name} joined the room")
    return EngineResult.ok(room, player=player)


add_player = join_room


def remove_player(room: Room, player_id: str) -> EngineResult:
    """
    Take a player out of the room.

    Ownership passes to the first remaining player. Losing a player while a
    game is running ends that game with the usual sweep and scoring.
    """
    index = room.player_index(player_id)
    if index == -1:
        return EngineResult.fail(room, errors.PLAYER_NOT_FOUND, "Player not in room")

    player = room.players.pop(index)
    room.version += 1
    room.game_log.append(f"{player.name} left the room")

    if room.owner == player_id and room.players:
        room.owner = room.players[0].id

    ended = False
    if room.is_active:
        if index < room.current_player_index:
            room.current_player_index -= 1
        if room.current_player_index >= len(room.players):
            room.current_player_index = 0
        reason = END_NOT_ENOUGH_PLAYERS if len(room.players) < room.rule_config.min_players else END_PLAYER_LEFT
        ended = finish_game(room, reason)

    return EngineResult.ok(room, player=player, game_ended=ended, empty=not room.players)


def start_game(room: Room, seed: Optional[int] = None, requested_by: Optional[str] = None) -> EngineResult:
    """
    Deal a new game.

    Builds and shuffles the deck, deals each player a starting hand, resets
    chips and portfolios, and picks a random starting player. Passing a seed
    makes the deck and the starting player reproducible.
    """
    if room.game_started:
        return EngineResult.fail(room, errors.GAME_ALREADY_STARTED, "Game already started")
    if requested_by is not None and requested_by != room.owner:
        return EngineResult.fail(room, errors.NOT_OWNER, "Only the room owner can start the game")
    rules = room.rule_config
    if not rules.validate_player_count(len(room.players)):
        return EngineResult.fail(
            room, errors.NOT_ENOUGH_PLAYERS, f"Need {rules.min_players}-{rules.max_players} players"
        )

    rng = random.Random(seed)
    room.deck = build_deck(rng, rules.removed_cards)
    deal_cards(room.deck, room.players, rules.hand_size)
    for player in room.players:
        player.portfolio = {}
        player.chips1 = rules.starting_chips1
        player.chips3 = rules.starting_chips3
        player.last_taken_company = None

    room.market = []
    room.anti_chips = {company: None for company in COMPANY_NAMES}
    room.current_player_index = rng.randrange(len(room.players))
    room.turn_phase = PHASE_DRAW
    room.game_started = True
    room.game_ended = False
    room.last_card_taken = False
    room.last_card_taken_player = None
    room.results = []
    room.end_reason = None
    room.version += 1

    starter = room.current_player
    room.game_log.append(f"Game started! {starter.name} goes first")
    logger.info(f"Room {room.code} started with {len(room.players)} players, deck={len(room.deck)}")
    return EngineResult.ok(room)


# ---------------------------------------------------------------- turn flow

def next_turn(room: Room):
    room.current_player_index = (room.current_player_index + 1) % len(room.players)
    room.turn_phase = PHASE_DRAW
    for player in room.players:
        player.last_taken_company = None


def _require_player(room: Room, player_id: str):
    player = room.get_player(player_id)
    if player is None:
        return None, EngineResult.fail(room, errors.PLAYER_NOT_FOUND, "Player not in room")
    return player, None


def take_from_deck(room: Room, player_id: str) -> EngineResult:
    """
    Draw the top deck card, paying one chip into every market card whose
    anti-chip the player does not hold.
    """
    player, failure = _require_player(room, player_id)
    if failure:
        return failure
    validation = validate_take_from_deck(room, player)
    if not validation:
        return EngineResult.from_validation(room, validation)

    paid = 0
    for slot in room.market:
        if not holds_anti_chip(room, player.id, slot.company):
            slot.chips += 1
            paid += 1
    player.chips1 -= paid

    card = room.deck.pop()
    player.hand.append(card)
    player.last_taken_company = None

    if not room.deck and not room.last_card_taken:
        room.last_card_taken = True
        room.last_card_taken_player = player.id
        room.game_log.append(f"{player.name} took the last card from the deck")

    room.turn_phase = PHASE_PLAY
    room.version += 1
    room.game_log.append(f"{player.name} drew from the deck, paying {paid}")
    return EngineResult.ok(room, card=card, paid=paid)


def take_from_market(room: Room, player_id: str, market_index: int) -> EngineResult:
    """Claim a market card together with the chips piled on it."""
    player, failure = _require_player(room, player_id)
    if failure:
        return failure
    validation = validate_take_from_market(room, player, market_index)
    if not validation:
        return EngineResult.from_validation(room, validation)

    slot = room.market.pop(market_index)
    player.hand.append(Card(slot.company))
    player.chips1 += slot.chips
    player.last_taken_company = slot.company

    room.turn_phase = PHASE_PLAY
    room.version += 1
    room.game_log.append(f"{player.name} took {slot.company} from the market with {slot.chips} chips")
    return EngineResult.ok(room, company=slot.company, chips=slot.chips)


def play_to_portfolio(room: Room, player_id: str, hand_index: int) -> EngineResult:
    """
    Invest a hand card. If this player drew the final deck card, this is the
    last action of the game.
    """
    player, failure = _require_player(room, player_id)
    if failure:
        return failure
    validation = validate_play_to_portfolio(room, player, hand_index)
    if not validation:
        return EngineResult.from_validation(room, validation)

    card = player.hand.pop(hand_index)
    player.portfolio[card.company] = player.portfolio.get(card.company, 0) + 1
    recalc_anti_chips(room)
    player.last_taken_company = None
    room.version += 1
    room.game_log.append(f"{player.name} invested in {card.company}")

    if room.last_card_taken and room.last_card_taken_player == player.id:
        finish_game(room, END_DECK_EXHAUSTED)
        return EngineResult.ok(room, company=card.company, game_ended=True)

    next_turn(room)
    return EngineResult.ok(room, company=card.company, game_ended=False)


def play_to_market(room: Room, player_id: str, hand_index: int) -> EngineResult:
    """Put a hand card face up on the market with no chips on it."""
    player, failure = _require_player(room, player_id)
    if failure:
        return failure
    validation = validate_play_to_market(room, player, hand_index)
    if not validation:
        return EngineResult.from_validation(room, validation)

    card = player.hand.pop(hand_index)
    room.market.append(MarketSlot(card.company, 0))
    player.last_taken_company = None
    room.version += 1
    room.game_log.append(f"{player.name} put {card.company} on the market")

    next_turn(room)
    return EngineResult.ok(room, company=card.company)


# ---------------------------------------------------------------- dispatch

def apply_intent(
    room: Room,
    player_id: str,
    action: str,
    payload: Optional[Dict[str, Any]] = None,
) -> EngineResult:
    """
    Validate turn ownership and dispatch one player action.

    Args:
        room: Room to act on
        player_id: Acting player
        action: One of take_from_deck, take_from_market, play_to_portfolio,
            play_to_market
        payload: `market_index` or `hand_index` for the actions that need one
    """
    payload = payload or {}
    validation = validate_turn(room, player_id)
    if not validation:
        return EngineResult.from_validation(room, validation)

    if action == ACTION_TAKE_FROM_DECK:
        return take_from_deck(room, player_id)

    if action == ACTION_TAKE_FROM_MARKET:
        if 'market_index' not in payload:
            return EngineResult.fail(room, errors.INVALID_PAYLOAD, "market_index is required")
        return take_from_market(room, player_id, payload['market_index'])

    if action in (ACTION_PLAY_TO_PORTFOLIO, ACTION_PLAY_TO_MARKET):
        if 'hand_index' not in payload:
            return EngineResult.fail(room, errors.INVALID_PAYLOAD, "hand_index is required")
        if action == ACTION_PLAY_TO_PORTFOLIO:
            return play_to_portfolio(room, player_id, payload['hand_index'])
        return play_to_market(room, player_id, payload['hand_index'])

    return EngineResult.fail(room, errors.UNKNOWN_ACTION, f"Unknown action: {action}")
