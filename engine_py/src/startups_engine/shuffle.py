"""
Deck building, shuffling and dealing utilities.
"""

import random
from typing import List, Optional, Sequence

from .constants import COMPANIES
from .models import Card, Company, Player


def create_deck(companies: Sequence[Company] = COMPANIES) -> List[Card]:
    """Create the full, unshuffled deck: `count` cards per company."""
    deck = []
    for company in companies:
        for _ in range(company.count):
            deck.append(Card(company.name))
    return deck


def remove_random_cards(deck: List[Card], count: int, rng: random.Random) -> List[Card]:
    """
    Remove `count` cards from the deck in place, one at a time.

    Each removal picks a fresh position against the shrinking deck.

    Returns:
        The removed cards, in removal order
    """
    removed = []
    for _ in range(min(count, len(deck))):
        index = rng.randrange(len(deck))
        removed.append(deck.pop(index))
    return removed


def shuffle_deck(deck: List[Card], rng: random.Random) -> List[Card]:
    """
    Fisher-Yates shuffle in place, walking the index down from the end.

    Args:
        deck: Cards to shuffle
        rng: Source of randomness

    Returns:
        The same list, shuffled
    """
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def build_deck(
    rng: Optional[random.Random] = None,
    removed_cards: int = 5,
    companies: Sequence[Company] = COMPANIES,
) -> List[Card]:
    """
    Build a fresh game deck.

    Args:
        rng: Random source; a new unseeded one is used if omitted
        removed_cards: How many cards to take out before shuffling
        companies: Company catalog to seed the deck from

    Returns:
        Shuffled deck; the top card is the last element
    """
    if rng is None:
        rng = random.Random()
    deck = create_deck(companies)
    remove_random_cards(deck, removed_cards, rng)
    return shuffle_deck(deck, rng)


def deal_cards(deck: List[Card], players: List[Player], hand_size: int) -> None:
    """
    Deal `hand_size` cards to each player from the top of the deck.

    Players are dealt in turn order, each receiving their full hand before
    the next player is served. Stops early if the deck runs out.
    """
    for player in players:
        player.hand = []
        for _ in range(hand_size):
            if not deck:
                break
            player.hand.append(deck.pop())
