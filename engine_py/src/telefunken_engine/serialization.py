"""
State serialization and sanitization utilities.
"""

from dataclasses import asdict
from typing import Any, Dict, Mapping, Optional

from .game import Game
from .models import GameID, PlayerID, ServerPlayer


def serialize_deal_constraints(game: Game) -> list:
    return [
        {
            "size": constraint.size,
            "combination_constraint": asdict(constraint.combination_constraint)
        }
        for constraint in game.deal_constraints
    ]


def serialize_player(player_id: PlayerID, game: Game, players: Mapping[PlayerID, ServerPlayer]) -> Dict[str, Any]:
    """Public information about a player in a game."""
    state = game.player(player_id)
    server_player = players.get(player_id)
    return {
        "id": player_id,
        "name": server_player.name if server_player else "",
        "is_ai": server_player.is_ai if server_player else False,
        "chips": state.chips,
        "bought_this_round": state.bought_this_round,
    }


def extract_client_game_data(
    game_id: GameID,
    game: Game,
    viewer_id: PlayerID,
    players: Optional[Mapping[PlayerID, ServerPlayer]] = None
) -> Dict[str, Any]:
    """
    Project the game state for one player.

    Args:
        game_id: ID of the game
        game: The game
        viewer_id: Player the projection is for (sees their own hand only)
        players: Player directory, for names

    Returns:
        Dictionary safe to send to the viewer. Other players' hands are
        reduced to card counts and the deck to its size.
    """
    players = players or {}
    viewer = game.player(viewer_id)

    return {
        "game_id": game_id,
        "player_id": viewer_id,
        "state": int(game.state),
        "players": {pid: serialize_player(pid, game, players) for pid in game.players},
        "deal": game.deal,
        "dealer": game.dealer,
        "player_turn": game.player_turn,
        "melds": {pid: [list(m) for m in melds] for pid, melds in game.melds.items()},
        "player_cards": list(viewer.hand),
        "other_player_cards": {
            pid: len(game.player(pid).hand) for pid in game.players if pid != viewer_id
        },
        "discard_pile": list(game.discard_pile),
        "deck_size": len(game.deck),
        "deal_constraint_compliance": list(viewer.deal_compliance),
        "deal_constraints": serialize_deal_constraints(game),
        "player_order": list(game.players),
    }


def get_public_game_info(game_id: GameID, game: Game) -> Dict[str, Any]:
    """Get public information about a game for listings."""
    return {
        "id": game_id,
        "state": int(game.state),
        "owner": game.owner,
        "player_count": len(game.players),
        "max_players": game.rules.max_players,
    }
