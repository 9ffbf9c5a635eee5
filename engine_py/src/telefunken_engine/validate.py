"""
Move validation.

Moves are checked against copies of the hands and melds. Nothing here mutates
the game: a valid move comes back with a ``MovePlan`` the game commits as a
whole.
"""

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Tuple

from .cards import Card
from .combinations import do_melds_satisfy_deal_constraint, validate_combination
from .errors import (
    DEAL_CONSTRAINT_UNMET, DISCARD_REQUIRED, FIRST_TURN_MELD, GAME_NOT_IN_PROGRESS,
    INVALID_COMBINATION, INVALID_MOVE, MELD_NOT_FOUND, NOT_YOUR_TURN,
    OWNERSHIP_MISMATCH, PLAYER_NOT_IN_GAME, TURN_ALREADY_PLAYED
)
from .models import GameState, Meld, MeldModification, ModificationType, PlayerID, PlayerMove

if TYPE_CHECKING:
    from .game import Game


@dataclass
class MovePlan:
    """Everything a valid move changes, ready to be committed."""
    hand: List[Card]
    melds: Dict[PlayerID, List[Meld]]
    new_melds: List[Meld] = field(default_factory=list)
    discard: Optional[Card] = None
    complies: bool = False  # new melds satisfy the deal constraint
    went_out: bool = False  # hand emptied without a discard


class ValidationResult:
    """Result of move validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        plan: Optional[MovePlan] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.plan = plan

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def success(cls, plan: MovePlan) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, plan=plan)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)


def take_cards(hand: List[Card], cards: List[Card]) -> bool:
    """Remove cards from a hand, one copy each. Returns False if any is missing."""
    for card in cards:
        if card not in hand:
            return False
        hand.remove(card)
    return True


def _apply_modification(
    hand: List[Card],
    melds: Dict[PlayerID, List[Meld]],
    modification: MeldModification
) -> Optional[ValidationResult]:
    player_melds = melds.get(modification.player_id)
    if player_melds is None:
        return ValidationResult.error(
            MELD_NOT_FOUND,
            f"Player {modification.player_id} has no melds"
        )
    if not 0 <= modification.meld_index < len(player_melds):
        return ValidationResult.error(
            MELD_NOT_FOUND,
            f"Meld {modification.meld_index} of player {modification.player_id} does not exist"
        )
    meld = player_melds[modification.meld_index]

    if modification.type == ModificationType.EXTENSION:
        if not modification.cards:
            return ValidationResult.error(INVALID_MOVE, "Extension without cards")
        if not take_cards(hand, modification.cards):
            return ValidationResult.error(
                OWNERSHIP_MISMATCH,
                "Player does not own all the cards of the extension"
            )
        meld.extend(modification.cards)
        return None

    if modification.type == ModificationType.REPLACEMENT:
        if modification.hand_card is None or modification.meld_card is None:
            return ValidationResult.error(INVALID_MOVE, "Replacement needs a hand card and a meld card")
        if modification.hand_card not in hand:
            return ValidationResult.error(
                OWNERSHIP_MISMATCH,
                f"Player does not own card {modification.hand_card}"
            )
        if modification.meld_card not in meld:
            return ValidationResult.error(
                OWNERSHIP_MISMATCH,
                f"Card {modification.meld_card} is not in the meld"
            )
        hand.remove(modification.hand_card)
        meld.remove(modification.meld_card)
        meld.append(modification.hand_card)
        hand.append(modification.meld_card)
        return None

    return ValidationResult.error(INVALID_MOVE, f"Unknown modification: {modification.type}")


def validate_player_move(game: 'Game', player_id: PlayerID, move: PlayerMove) -> ValidationResult:
    """
    Validate a player move.

    Modifications to melds on the table are checked first, then the new
    melds, then the discard. Each step works on what the previous one left
    in the (copied) hand.

    Args:
        game: Game the move is played in
        player_id: ID of the player making the move
        move: The move

    Returns:
        ValidationResult, carrying the plan to commit when valid
    """
    if game.state != GameState.IN_PROGRESS:
        return ValidationResult.error(
            GAME_NOT_IN_PROGRESS,
            f"Game is not in progress (current: {game.state.name})"
        )

    player = game.player_states.get(player_id)
    if player is None:
        return ValidationResult.error(PLAYER_NOT_IN_GAME, f"Player {player_id} is not in this game")

    if game.player_turn != player_id:
        return ValidationResult.error(
            NOT_YOUR_TURN,
            f"It's not your turn (current turn: {game.player_turn})"
        )

    if game.turn_played:
        return ValidationResult.error(TURN_ALREADY_PLAYED, "Player already moved this turn")

    hand = list(player.hand)
    melds = {pid: copy.deepcopy(p.melds) for pid, p in game.player_states.items()}

    # Meld modifications
    touched: Set[Tuple[PlayerID, int]] = set()
    for modification in move.modifications:
        error = _apply_modification(hand, melds, modification)
        if error is not None:
            return error
        touched.add((modification.player_id, modification.meld_index))

    for pid, index in touched:
        canonical = validate_combination(melds[pid][index])
        if canonical is None:
            return ValidationResult.error(
                INVALID_COMBINATION,
                f"Meld {index} of player {pid} would not be a valid combination"
            )
        melds[pid][index] = canonical

    # New melds
    new_melds: List[Meld] = []
    complies = False
    if move.melds:
        # No melding on the first turn of a deal
        if player.turns_played == 0:
            return ValidationResult.error(FIRST_TURN_MELD, "Can't meld on your first turn of a deal")

        for meld in move.melds:
            if not take_cards(hand, list(meld)):
                return ValidationResult.error(
                    OWNERSHIP_MISMATCH,
                    "Player does not own all the cards of the melds"
                )

        if not player.deal_compliance[game.deal]:
            deal_constraint = game.current_deal_constraint
            if not do_melds_satisfy_deal_constraint(move.melds, deal_constraint):
                return ValidationResult.error(
                    DEAL_CONSTRAINT_UNMET,
                    f"Deal {game.deal} requires {deal_constraint.size} combination(s) "
                    f"of shape {deal_constraint.combination_constraint}"
                )
            constraint = deal_constraint.combination_constraint
            complies = True
        else:
            constraint = None

        for meld in move.melds:
            canonical = validate_combination(meld, constraint)
            if canonical is None:
                return ValidationResult.error(INVALID_COMBINATION, f"Invalid combination: {meld}")
            new_melds.append(canonical)

    # Discard
    if move.discard is None:
        if hand:
            return ValidationResult.error(DISCARD_REQUIRED, "A discard is required")
    elif not take_cards(hand, [move.discard]):
        return ValidationResult.error(
            OWNERSHIP_MISMATCH,
            f"Player does not own card {move.discard}"
        )

    return ValidationResult.success(MovePlan(
        hand=hand,
        melds=melds,
        new_melds=new_melds,
        discard=move.discard,
        complies=complies,
        went_out=move.discard is None
    ))
