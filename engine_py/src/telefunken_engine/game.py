"""
Game session: one game's full state and its state machine.

A session is not thread safe. Callers serialize access to it (the engine
holds one lock per game).
"""

import logging
import random
from typing import Dict, List, Optional, Sequence

from .cards import Card, create_shuffled_deck, format_card, shuffle_deck
from .deals import DEAL_CONSTRAINTS, DealConstraint
from .errors import INTERNAL_ERROR, raise_error
from .models import (
    AdvanceResult, BuyOutcome, DealRecord, GameState, Meld, PlayerID,
    PlayerMove, PlayerState
)
from .rules import RuleConfig, default_rules
from .validate import validate_player_move

logger = logging.getLogger(__name__)


class Game:
    def __init__(
        self,
        owner: PlayerID,
        rules: RuleConfig = default_rules,
        deal_constraints: Sequence[DealConstraint] = DEAL_CONSTRAINTS,
        rng: Optional[random.Random] = None
    ):
        self.owner = owner
        self.rules = rules
        self.deal_constraints = tuple(deal_constraints)
        self.rng = rng or random.Random()
        self.state = GameState.WAITING_FOR_PLAYERS
        self.players: List[PlayerID] = []
        self.player_states: Dict[PlayerID, PlayerState] = {}
        self.deck: List[Card] = []
        self.discard_pile: List[Card] = []
        self.deal = -1
        self.dealer: Optional[PlayerID] = None
        self.player_turn: Optional[PlayerID] = None
        self.turn = 0
        self.turn_played = False
        self.extra_round_trigger: Optional[PlayerID] = None
        self.extra_turns_taken = 0
        self.deal_history: List[DealRecord] = []
        self._add_player_state(owner)

    # ----- players -----

    def _add_player_state(self, player_id: PlayerID):
        self.players.append(player_id)
        self.player_states[player_id] = PlayerState(
            id=player_id,
            deal_compliance=[False] * len(self.deal_constraints),
            chips=self.rules.starting_chips
        )

    def add_player(self, player_id: PlayerID) -> bool:
        if self.state != GameState.WAITING_FOR_PLAYERS:
            return False
        if self.is_full():
            return False
        if self.is_player_in_game(player_id):
            return False
        self._add_player_state(player_id)
        return True

    def is_full(self) -> bool:
        return len(self.players) >= self.rules.max_players

    def can_game_be_started(self) -> bool:
        return self.rules.validate_player_count(len(self.players))

    def is_player_in_game(self, player_id: PlayerID) -> bool:
        return player_id in self.player_states

    def get_player_index(self, player_id: PlayerID) -> int:
        return self.players.index(player_id)

    def get_next_turn_player(self) -> PlayerID:
        next_index = (self.get_player_index(self.player_turn) + 1) % len(self.players)
        return self.players[next_index]

    def player(self, player_id: PlayerID) -> PlayerState:
        """Get a player's state, for players the game itself registered."""
        state = self.player_states.get(player_id)
        if state is None:
            raise_error(INTERNAL_ERROR, f"Player {player_id} has no state in this game")
        return state

    @property
    def melds(self) -> Dict[PlayerID, List[Meld]]:
        return {pid: self.player_states[pid].melds for pid in self.players}

    @property
    def current_deal_constraint(self) -> DealConstraint:
        return self.deal_constraints[self.deal]

    # ----- cards -----

    def get_next_draw(self) -> Optional[Card]:
        return self.deck[-1] if self.deck else None

    def total_card_count(self) -> int:
        """Count every card in the game, wherever it is."""
        total = len(self.deck) + len(self.discard_pile)
        for state in self.player_states.values():
            total += len(state.hand) + sum(len(meld) for meld in state.melds)
        return total

    def _recycle_discard_pile(self):
        """Shuffle the discard pile back into the deck, keeping its top card."""
        if len(self.discard_pile) <= 1:
            return
        seed = self.discard_pile.pop()
        cards = self.discard_pile
        self.discard_pile = [seed]
        self.deck.extend(shuffle_deck(cards, self.rng))
        logger.debug(f"Reshuffled {len(cards)} discarded cards into the deck")

    def _draw_card(self) -> Optional[Card]:
        if not self.deck:
            self._recycle_discard_pile()
        if not self.deck:
            logger.warning("No cards left to draw")
            return None
        return self.deck.pop()

    # ----- deals -----

    def _start_deal(self, dealer_index: int):
        self.deck = create_shuffled_deck(self.rules.get_deck_size(), self.rng)
        self.discard_pile = []
        self.turn = 0
        self.turn_played = False
        self.extra_round_trigger = None
        self.extra_turns_taken = 0

        n = len(self.players)
        self.dealer = self.players[dealer_index]
        # The player next to the dealer starts
        self.player_turn = self.players[(dealer_index + 1) % n]

        deal_size = self.rules.deal_size
        for player_id in self.players:
            state = self.player_states[player_id]
            state.hand = self.deck[-deal_size:]
            del self.deck[-deal_size:]
            state.melds = []
            state.bought_this_round = False
            state.bought_cards = []
            state.turns_played = 0

        self.discard_pile.append(self.deck.pop())
        self.player_states[self.player_turn].hand.append(self.deck.pop())

    def _end_deal(self):
        current = self.player(self.player_turn)
        went_out = self.extra_round_trigger
        if went_out is None and not current.hand:
            went_out = current.id

        self.deal_history.append(DealRecord(
            deal=self.deal,
            remaining_cards={pid: list(s.hand) for pid, s in self.player_states.items()},
            melds={pid: [list(m) for m in s.melds] for pid, s in self.player_states.items()},
            bought_cards={pid: list(s.bought_cards) for pid, s in self.player_states.items()},
            went_out=went_out
        ))
        logger.info(f"Deal {self.deal} ended, player {went_out} went out")
        self.deal += 1

    def _is_deal_over(self, current: PlayerState) -> bool:
        if self.extra_round_trigger is None:
            return not current.hand
        if current.id != self.extra_round_trigger:
            self.extra_turns_taken += 1
        return self.extra_turns_taken >= len(self.players) - 1

    # ----- state machine -----

    def start_game(self) -> bool:
        if self.state != GameState.WAITING_FOR_PLAYERS:
            return False
        if not self.can_game_be_started():
            return False
        self.state = GameState.IN_PROGRESS
        self.deal = 0
        # Select a random player to be the dealer
        self._start_deal(self.rng.randrange(len(self.players)))
        logger.info(f"Game started with players {self.players}, dealer {self.dealer}")
        return True

    def execute_player_move(self, player_id: PlayerID, move: PlayerMove) -> bool:
        """
        Validate and apply a player move.

        Either the whole move is applied or nothing is.

        Returns:
            True if the move was accepted
        """
        result = validate_player_move(self, player_id, move)
        if not result.valid:
            logger.debug(f"Move from player {player_id} rejected: [{result.error_code}] {result.error_message}")
            return False

        plan = result.plan
        player = self.player(player_id)
        player.hand = plan.hand
        for pid, melds in plan.melds.items():
            self.player_states[pid].melds = melds
        player.melds.extend(plan.new_melds)
        if plan.discard is not None:
            self.discard_pile.append(plan.discard)
        if plan.complies:
            player.deal_compliance[self.deal] = True
        if plan.went_out and self.extra_round_trigger is None:
            # The others get one last turn each before the deal closes
            self.extra_round_trigger = player_id
            self.extra_turns_taken = 0
            logger.info(f"Player {player_id} went out, extra round started")
        self.turn_played = True
        return True

    def buy_card(self, player_id: PlayerID, card: Card) -> BuyOutcome:
        """
        Buy the top card of the discard pile.

        The buyer also draws a bonus card from the deck and pays one chip.
        """
        if self.state != GameState.IN_PROGRESS:
            return BuyOutcome(False)
        player = self.player_states.get(player_id)
        if player is None:
            return BuyOutcome(False)
        if player.bought_this_round or player.chips <= 0:
            return BuyOutcome(False)
        if not self.discard_pile or self.discard_pile[-1] != card:
            return BuyOutcome(False)

        player.hand.append(self.discard_pile.pop())
        drawn = self._draw_card()
        if drawn is not None:
            player.hand.append(drawn)
            player.bought_cards.append(drawn)
        if not self.deck:
            self._recycle_discard_pile()

        player.chips -= 1
        player.bought_this_round = True
        logger.debug(f"Player {player_id} bought {format_card(card)}")
        return BuyOutcome(True, card=card, card_drawn=drawn)

    def advance(self) -> AdvanceResult:
        """
        End the current turn.

        Returns:
            TURN_CHANGED, DEAL_CHANGED, GAME_ENDED, or INVALID if the game
            is not in progress
        """
        if self.state != GameState.IN_PROGRESS:
            return AdvanceResult.INVALID

        self.turn += 1
        self.turn_played = False
        current = self.player(self.player_turn)
        current.turns_played += 1

        if self._is_deal_over(current):
            self._end_deal()
            if self.deal >= len(self.deal_constraints):
                self.state = GameState.FINISHED
                logger.info("Game finished")
                return AdvanceResult.GAME_ENDED
            self._start_deal((self.get_player_index(self.dealer) + 1) % len(self.players))
            return AdvanceResult.DEAL_CHANGED

        # A new round of buying starts every full rotation
        if self.turn % len(self.players) == 0:
            for state in self.player_states.values():
                state.bought_this_round = False

        self.player_turn = self.get_next_turn_player()
        drawn = self._draw_card()
        if drawn is not None:
            self.player(self.player_turn).hand.append(drawn)
        return AdvanceResult.TURN_CHANGED
