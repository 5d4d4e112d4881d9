"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    min_players: int = Field(
        default=2,
        ge=2,
        le=7,
        description="Minimum number of players required to start"
    )
    max_players: int = Field(
        default=7,
        ge=2,
        le=7,
        description="Maximum number of players allowed in a room"
    )
    hand_size: int = Field(
        default=3,
        ge=1,
        le=5,
        description="Cards dealt to each player at the start"
    )
    starting_chips1: int = Field(
        default=10,
        ge=0,
        description="Low-denomination chips each player starts with"
    )
    starting_chips3: int = Field(
        default=0,
        ge=0,
        description="Majority-bonus chips each player starts with"
    )
    removed_cards: int = Field(
        default=5,
        ge=0,
        description="Cards removed at random from the deck before shuffling"
    )
    chips3_value: int = Field(
        default=3,
        ge=1,
        description="Score value of a single chips3 token"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't drop below minimum."""
        min_players = info.data.get('min_players', 2)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players

    def score(self, chips1: int, chips3: int) -> int:
        """Final score for a chip holding."""
        return chips1 + chips3 * self.chips3_value


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
