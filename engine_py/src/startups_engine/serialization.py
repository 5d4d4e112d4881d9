"""
State serialization and sanitization utilities.
"""

from typing import Any, Dict, Optional

from .constants import COMPANIES
from .models import Player, PlayerResult, Room


def sanitize_state(state: Room, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Sanitize room state for transmission to clients.

    Args:
        state: Room to sanitize
        viewer_id: ID of the player viewing the state (to show their cards)

    Returns:
        Sanitized state dictionary safe for JSON transmission
    """
    current = state.current_player if state.game_started else None
    sanitized = {
        "code": state.code,
        "version": state.version,
        "owner": state.owner,
        "game_started": state.game_started,
        "game_ended": state.game_ended,
        "turn_phase": state.turn_phase,
        "current_player_index": state.current_player_index,
        "current_player": current.id if current else None,
        "deck_size": len(state.deck),
        "market": [
            {"company": slot.company, "chips": slot.chips}
            for slot in state.market
        ],
        "anti_chips": dict(state.anti_chips),
        "last_card_taken": state.last_card_taken,
        "last_card_taken_player": state.last_card_taken_player,
        "players": [],
        "companies": [
            {"name": c.name, "color": c.color, "count": c.count}
            for c in COMPANIES
        ],
        "results": [serialize_result(r) for r in state.results],
        "end_reason": state.end_reason,
        "log": state.game_log[-10:],
        "rules": state.rule_config.model_dump(),
    }

    for player in state.players:
        sanitized_player = {
            "id": player.id,
            "name": player.name,
            "hand_count": len(player.hand),
            "portfolio": dict(player.portfolio),
            "chips1": player.chips1,
            "chips3": player.chips3,
            "last_taken_company": player.last_taken_company,
        }

        # Show full hand only to the viewer
        if player.id == viewer_id:
            sanitized_player["hand"] = [card.company for card in player.hand]

        sanitized["players"].append(sanitized_player)

    return sanitized


def serialize_result(result: PlayerResult) -> Dict[str, Any]:
    return {
        "player_id": result.player_id,
        "name": result.name,
        "position": result.position,
        "score": result.score,
        "chips1": result.chips1,
        "chips3": result.chips3,
    }


def serialize_player_for_list(player: Player) -> Dict[str, Any]:
    """Serialize player for lobby player list."""
    return {
        "id": player.id,
        "name": player.name,
    }


def get_public_room_info(state: Room) -> Dict[str, Any]:
    """Get public information about a room for listings."""
    return {
        "code": state.code,
        "game_started": state.game_started,
        "game_ended": state.game_ended,
        "player_count": len(state.players),
        "max_players": state.rule_config.max_players,
        "players": [
            serialize_player_for_list(player)
            for player in state.players
        ]
    }
