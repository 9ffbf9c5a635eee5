"""
Game directory: players, games and the entry points the transport calls.
"""

import itertools
import logging
import random
import threading
from collections import defaultdict
from typing import Any, Dict, Optional, Sequence, Tuple

from .bots import BaseBot, DiscardBot
from .cards import Card
from .deals import DEAL_CONSTRAINTS, DealConstraint
from .errors import (
    ALREADY_JOINED, GAME_FULL, GAME_NOT_FOUND, GAME_NOT_WAITING,
    NOT_ENOUGH_PLAYERS, NOT_OWNER
)
from .game import Game
from .models import (
    AdvanceResult, BuyOutcome, ConnectionID, GameID, GameState, PlayerID,
    PlayerMove, PlayResult, ServerPlayer
)
from .rules import RuleConfig, default_rules
from .serialization import extract_client_game_data

logger = logging.getLogger(__name__)

SUCCESS = "SUCCESS"


class TelefunkenEngine:
    """
    Owns every player and game of a server process.

    Calls for the same game are serialized with one lock per game.
    """

    def __init__(
        self,
        rules: RuleConfig = default_rules,
        deal_constraints: Sequence[DealConstraint] = DEAL_CONSTRAINTS,
        bot: Optional[BaseBot] = None,
        rng: Optional[random.Random] = None
    ):
        self.rules = rules
        self.deal_constraints = tuple(deal_constraints)
        self.bot = bot or DiscardBot()
        self.rng = rng
        self.players: Dict[PlayerID, ServerPlayer] = {}
        self.games: Dict[GameID, Game] = {}
        self.game_locks = defaultdict(threading.Lock)
        self._player_ids = itertools.count()
        self._game_ids = itertools.count()

    def add_player(self, connection_id: Optional[ConnectionID] = None, name: str = "", is_ai: bool = False) -> PlayerID:
        player_id = next(self._player_ids)
        self.players[player_id] = ServerPlayer(
            id=player_id,
            name=name,
            connection_id=connection_id,
            is_ai=is_ai
        )
        return player_id

    def create_game(self, owner: PlayerID) -> GameID:
        game_id = next(self._game_ids)
        self.games[game_id] = Game(
            owner,
            rules=self.rules,
            deal_constraints=self.deal_constraints,
            rng=self.rng
        )
        logger.info(f"Game {game_id} created by player {owner}")
        return game_id

    def get_game(self, game_id: GameID) -> Optional[Game]:
        return self.games.get(game_id)

    def is_valid_game(self, game_id: GameID) -> bool:
        return game_id in self.games

    def join_game(self, game_id: GameID, player_id: PlayerID) -> Tuple[bool, str]:
        with self.game_locks[game_id]:
            game = self.get_game(game_id)
            if not game:
                return False, GAME_NOT_FOUND
            if game.is_player_in_game(player_id):
                return False, ALREADY_JOINED
            if game.is_full():
                return False, GAME_FULL
            if game.state != GameState.WAITING_FOR_PLAYERS:
                return False, GAME_NOT_WAITING
            game.add_player(player_id)
            logger.info(f"Player {player_id} joined game {game_id}")
            return True, SUCCESS

    def start_game(self, game_id: GameID, player_id: PlayerID) -> Tuple[bool, str]:
        """Start a game on behalf of its owner, filling empty seats with AI players if configured."""
        with self.game_locks[game_id]:
            game = self.get_game(game_id)
            if not game:
                return False, GAME_NOT_FOUND
            if game.owner != player_id:
                return False, NOT_OWNER
            if game.state != GameState.WAITING_FOR_PLAYERS:
                return False, GAME_NOT_WAITING

            if self.rules.fill_with_ai:
                while not game.is_full():
                    ai_id = self.add_player(name=f"AI {len(game.players)}", is_ai=True)
                    game.add_player(ai_id)

            if not game.start_game():
                return False, NOT_ENOUGH_PLAYERS
            return True, SUCCESS

    def play(self, game_id: GameID, player_id: PlayerID, move: PlayerMove) -> PlayResult:
        """Execute a move and, if accepted, end the player's turn."""
        with self.game_locks[game_id]:
            game = self.get_game(game_id)
            if not game:
                logger.error(f"Player {player_id} tried to play but provided an invalid game")
                return PlayResult(False)
            if not game.is_player_in_game(player_id):
                logger.error(f"Player {player_id} tried to play but it doesn't belong to game {game_id}")
                return PlayResult(False)

            if not game.execute_player_move(player_id, move):
                return PlayResult(False)
            return PlayResult(True, game.advance())

    def buy_card(self, game_id: GameID, player_id: PlayerID, card: Card) -> BuyOutcome:
        with self.game_locks[game_id]:
            game = self.get_game(game_id)
            if not game:
                return BuyOutcome(False)
            return game.buy_card(player_id, card)

    def is_ai_turn(self, game_id: GameID) -> bool:
        game = self.get_game(game_id)
        if not game or game.state != GameState.IN_PROGRESS:
            return False
        player = self.players.get(game.player_turn)
        return player is not None and player.is_ai

    def ai_play(self, game_id: GameID) -> Optional[AdvanceResult]:
        """
        Play one turn for the AI player whose turn it is.

        Returns:
            The advance outcome, or None if it is not an AI player's turn
        """
        with self.game_locks[game_id]:
            if not self.is_ai_turn(game_id):
                return None
            game = self.games[game_id]
            player_id = game.player_turn
            move = self.bot.choose_move(game, player_id)
            if not game.execute_player_move(player_id, move):
                logger.error(f"AI player {player_id} made an invalid move in game {game_id}")
                return AdvanceResult.INVALID
            return game.advance()

    def extract_client_game_data(self, game_id: GameID, player_id: PlayerID) -> Dict[str, Any]:
        game = self.get_game(game_id)
        if not game:
            raise KeyError(f"Game {game_id} does not exist")
        if not game.is_player_in_game(player_id):
            raise KeyError(f"Player {player_id} is not in game {game_id}")
        return extract_client_game_data(game_id, game, player_id, self.players)
