"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    AI_PLAY_DELAY, CARDS_PER_DECK, DEAL_SIZE, MAX_NUM_PLAYERS,
    MIN_NUM_PLAYERS, NUM_DECKS, STARTING_CHIPS
)


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    min_players: int = Field(
        default=MIN_NUM_PLAYERS,
        ge=2,
        le=4,
        description="Minimum number of players required to start"
    )
    max_players: int = Field(
        default=MAX_NUM_PLAYERS,
        ge=2,
        le=4,
        description="Maximum number of players allowed"
    )
    num_decks: int = Field(
        default=NUM_DECKS,
        ge=1,
        le=3,
        description="Number of 54 card decks shuffled together"
    )
    deal_size: int = Field(
        default=DEAL_SIZE,
        ge=1,
        le=20,
        description="Cards dealt to each player at the start of a deal"
    )
    starting_chips: int = Field(
        default=STARTING_CHIPS,
        ge=0,
        description="Chips each player can spend on buying cards"
    )
    fill_with_ai: bool = Field(
        default=True,
        description="Fill empty seats with AI players when the owner starts the game"
    )
    ai_play_delay: float = Field(
        default=AI_PLAY_DELAY,
        ge=0,
        description="Seconds the AI driver waits before each AI turn"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't go below minimum."""
        min_players = info.data.get('min_players', MIN_NUM_PLAYERS)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    @model_validator(mode='after')
    def validate_deck_covers_deal(self):
        """Every seat gets a hand and the deal needs a discard and an extra card."""
        needed = self.max_players * self.deal_size + 2
        if needed > self.get_deck_size():
            raise ValueError(
                f"{self.num_decks} deck(s) hold {self.get_deck_size()} cards, "
                f"dealing {self.deal_size} to {self.max_players} players needs {needed}"
            )
        return self

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players

    def get_deck_size(self) -> int:
        """Get the total number of cards in play."""
        return CARDS_PER_DECK * self.num_decks


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
