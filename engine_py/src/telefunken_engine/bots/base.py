"""
Base bot interface and utilities.
"""

from abc import ABC, abstractmethod
from typing import List

from ..cards import Card
from ..game import Game
from ..models import PlayerID, PlayerMove


class BaseBot(ABC):
    """Abstract base class for bot players."""

    @abstractmethod
    def choose_move(self, game: Game, player_id: PlayerID) -> PlayerMove:
        """
        Choose a move based on the current game state.

        Args:
            game: Game the bot plays in
            player_id: ID of the player the bot plays for

        Returns:
            PlayerMove to execute on the bot's turn
        """
        pass

    def get_player_hand(self, game: Game, player_id: PlayerID) -> List[Card]:
        """Get this bot's current hand."""
        return list(game.player(player_id).hand)
