"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Literal

from .rules import RuleConfig, default_rules

TurnPhase = Literal['draw', 'play']

@dataclass(frozen=True)
class Company:
    name: str
    color: str
    count: int  # cards seeded into the deck

@dataclass
class Card:
    company: str

@dataclass
class MarketSlot:
    company: str
    chips: int = 0  # paid in by players drawing from the deck

@dataclass
class Player:
    id: str
    name: str
    hand: List[Card] = field(default_factory=list)
    portfolio: Dict[str, int] = field(default_factory=dict)  # company -> count
    chips1: int = 0
    chips3: int = 0
    last_taken_company: Optional[str] = None  # set only after a market draw this turn

@dataclass
class PlayerResult:
    player_id: str
    name: str
    score: int
    chips1: int
    chips3: int
    position: int = 0

@dataclass
class Room:
    code: str
    owner: str
    version: int = 0
    players: List[Player] = field(default_factory=list)  # turn order
    deck: List[Card] = field(default_factory=list)
    market: List[MarketSlot] = field(default_factory=list)
    anti_chips: Dict[str, Optional[str]] = field(default_factory=dict)  # company -> player id
    current_player_index: int = 0
    turn_phase: TurnPhase = 'draw'
    game_started: bool = False
    game_ended: bool = False
    last_card_taken: bool = False
    last_card_taken_player: Optional[str] = None
    results: List[PlayerResult] = field(default_factory=list)
    end_reason: Optional[str] = None
    game_log: List[str] = field(default_factory=list)
    rule_config: RuleConfig = field(default_factory=lambda: default_rules.model_copy())

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def player_index(self, player_id: str) -> int:
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        return -1

    @property
    def current_player(self) -> Optional[Player]:
        if not self.players or not 0 <= self.current_player_index < len(self.players):
            return None
        return self.players[self.current_player_index]

    @property
    def is_active(self) -> bool:
        return self.game_started and not self.game_ended
