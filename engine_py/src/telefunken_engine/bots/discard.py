"""
Placeholder bot: never melds, discards the first card it holds.
"""

from .base import BaseBot
from ..game import Game
from ..models import PlayerID, PlayerMove


class DiscardBot(BaseBot):

    def choose_move(self, game: Game, player_id: PlayerID) -> PlayerMove:
        hand = self.get_player_hand(game, player_id)
        return PlayerMove(melds=[], discard=hand[0] if hand else None)
