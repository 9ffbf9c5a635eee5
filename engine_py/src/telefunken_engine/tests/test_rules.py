"""
Tests for rule configuration.
"""

import pydantic
import pytest

from telefunken_engine.game import Game
from telefunken_engine.rules import RuleConfig, create_rules, default_rules


def test_defaults():
    assert default_rules.min_players == 2
    assert default_rules.max_players == 4
    assert default_rules.get_deck_size() == 108
    assert default_rules.deal_size == 13
    assert default_rules.starting_chips == 3


def test_overrides():
    rules = create_rules(starting_chips=5, fill_with_ai=False)
    assert rules.starting_chips == 5
    assert not rules.fill_with_ai
    assert default_rules.starting_chips == 3


def test_max_players_below_min():
    with pytest.raises(pydantic.ValidationError):
        RuleConfig(min_players=3, max_players=2)


def test_deck_must_cover_the_deal():
    with pytest.raises(pydantic.ValidationError):
        create_rules(num_decks=1, deal_size=20)
    # 4 hands of 13, a discard and the extra card use a single deck exactly
    assert create_rules(num_decks=1).get_deck_size() == 54
    assert create_rules(num_decks=1, max_players=2, deal_size=20).max_players == 2


def test_single_deck_game_starts():
    game = Game(0, rules=create_rules(num_decks=1))
    for player_id in (1, 2, 3):
        assert game.add_player(player_id)
    assert game.start_game()
    assert game.deck == []
    assert game.total_card_count() == 54


def test_player_count():
    rules = create_rules(min_players=3)
    assert not rules.validate_player_count(2)
    assert rules.validate_player_count(3)
    assert not rules.validate_player_count(5)

    game = Game(0, rules=rules)
    game.add_player(1)
    assert not game.can_game_be_started()
    game.add_player(2)
    assert game.can_game_be_started()
