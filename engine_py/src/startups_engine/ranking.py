# engine_py/src/startups_engine/ranking.py

import logging
from typing import Dict, List

from .antichips import recalc_anti_chips, unique_leader
from .constants import COMPANY_NAMES, END_DECK_EXHAUSTED
from .models import Player, PlayerResult, Room

logger = logging.getLogger(__name__)


def sweep_hands(players: List[Player]):
    """Move every card left in hand into its owner's portfolio."""
    for player in players:
        for card in player.hand:
            player.portfolio[card.company] = player.portfolio.get(card.company, 0) + 1
        player.hand = []


def majority_transfers(players: List[Player]) -> Dict[str, int]:
    """
    Compute the net chips3 change for each player.

    For every company with a single strict leader, each other holder pays the
    leader one chips3 per card they hold. Tied or empty companies pay nothing.
    Balances are not clamped, so a payer can end up below zero.
    """
    net3 = {p.id: 0 for p in players}
    for company in COMPANY_NAMES:
        majority_id = unique_leader(players, company)
        if majority_id is None:
            continue
        for player in players:
            count = player.portfolio.get(company, 0)
            if player.id != majority_id and count > 0:
                net3[majority_id] += count
                net3[player.id] -= count
    return net3


def rank_results(room: Room) -> List[PlayerResult]:
    """
    Score and order the players.

    Highest score first, then most chips3, then the player who drew the
    last deck card. Remaining ties keep turn order.
    """
    results = [
        PlayerResult(
            player_id=p.id,
            name=p.name,
            score=room.rule_config.score(p.chips1, p.chips3),
            chips1=p.chips1,
            chips3=p.chips3,
        )
        for p in room.players
    ]
    last_taker = room.last_card_taken_player
    results.sort(key=lambda r: (-r.score, -r.chips3, 0 if r.player_id == last_taker else 1))
    for position, result in enumerate(results, start=1):
        result.position = position
    return results


def finish_game(room: Room, reason: str = END_DECK_EXHAUSTED) -> bool:
    """
    Run the endgame: sweep hands, pay out majorities, rank the players.

    Mutates the room. Does nothing if the game already ended.

    Returns:
        True if the sweep ran, False if it had already happened
    """
    if room.game_ended:
        return False

    sweep_hands(room.players)
    recalc_anti_chips(room)

    for player_id, delta in majority_transfers(room.players).items():
        room.get_player(player_id).chips3 += delta

    room.results = rank_results(room)
    room.game_ended = True
    room.end_reason = reason

    if room.results:
        winner = room.results[0]
        room.game_log.append(f"Game over ({reason}). {winner.name} wins with {winner.score} points")
    else:
        room.game_log.append(f"Game over ({reason})")
    logger.info(f"Room {room.code} finished ({reason}): {[(r.name, r.score) for r in room.results]}")
    return True
