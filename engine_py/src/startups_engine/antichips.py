"""
Anti-monopoly chip arbitration.

A company's anti-chip belongs to the player with the largest portfolio
holding of that company. Hands and market cards never count.
"""

from typing import Dict, List, Optional

from .constants import COMPANY_NAMES
from .models import Player, Room


def portfolio_leaders(players: List[Player], company: str) -> List[str]:
    """
    Find the players tied for the largest holding of a company.

    Returns:
        Player ids in turn order, or an empty list when nobody holds the company
    """
    counts = [(p.id, p.portfolio.get(company, 0)) for p in players]
    if not counts:
        return []
    max_count = max(count for _, count in counts)
    if max_count == 0:
        return []
    return [player_id for player_id, count in counts if count == max_count]


def unique_leader(players: List[Player], company: str) -> Optional[str]:
    """Return the strict majority holder of a company, or None on a tie."""
    leaders = portfolio_leaders(players, company)
    if len(leaders) == 1:
        return leaders[0]
    return None


def compute_anti_chips(
    players: List[Player],
    previous: Dict[str, Optional[str]],
) -> Dict[str, Optional[str]]:
    """
    Compute the anti-chip holder for every company.

    On a tie the previous holder keeps the chip if they are still among the
    leaders; otherwise it goes to the earliest tied player in turn order.
    """
    chips: Dict[str, Optional[str]] = {}
    for company in COMPANY_NAMES:
        leaders = portfolio_leaders(players, company)
        if not leaders:
            chips[company] = None
        elif len(leaders) == 1:
            chips[company] = leaders[0]
        else:
            prev_owner = previous.get(company)
            chips[company] = prev_owner if prev_owner in leaders else leaders[0]
    return chips


def recalc_anti_chips(room: Room) -> None:
    """Recompute `room.anti_chips` after a portfolio change."""
    room.anti_chips = compute_anti_chips(room.players, room.anti_chips)


def holds_anti_chip(room: Room, player_id: str, company: str) -> bool:
    return room.anti_chips.get(company) == player_id


def payable_slot_count(room: Room, player_id: str) -> int:
    """Number of market slots the player must pay into to draw from the deck."""
    return sum(1 for slot in room.market if not holds_anti_chip(room, player_id, slot.company))
