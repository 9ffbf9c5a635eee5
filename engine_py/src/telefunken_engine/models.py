"""Game models and data structures"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .cards import Card, card_value

PlayerID = int
GameID = int
ConnectionID = int
Meld = List[Card]


class GameState(int, Enum):
    INVALID = 0
    WAITING_FOR_PLAYERS = 1
    IN_PROGRESS = 2
    FINISHED = 3


class AdvanceResult(int, Enum):
    INVALID = 0
    TURN_CHANGED = 1
    DEAL_CHANGED = 2
    GAME_ENDED = 3


class ModificationType(str, Enum):
    EXTENSION = "extension"
    REPLACEMENT = "replacement"


@dataclass
class MeldModification:
    """
    A change to a meld already on the table.

    An extension adds ``cards`` from the hand to the meld. A replacement puts
    ``hand_card`` into the meld and takes ``meld_card`` back into the hand.
    """
    type: ModificationType
    player_id: PlayerID  # owner of the meld
    meld_index: int
    cards: List[Card] = field(default_factory=list)
    hand_card: Optional[Card] = None
    meld_card: Optional[Card] = None

    @classmethod
    def extension(cls, player_id: PlayerID, meld_index: int, cards: List[Card]) -> 'MeldModification':
        return cls(ModificationType.EXTENSION, player_id, meld_index, cards=list(cards))

    @classmethod
    def replacement(cls, player_id: PlayerID, meld_index: int, hand_card: Card, meld_card: Card) -> 'MeldModification':
        return cls(ModificationType.REPLACEMENT, player_id, meld_index,
                   hand_card=hand_card, meld_card=meld_card)


@dataclass
class PlayerMove:
    melds: List[Meld] = field(default_factory=list)
    discard: Optional[Card] = None
    modifications: List[MeldModification] = field(default_factory=list)


@dataclass
class PlayerState:
    id: PlayerID
    hand: List[Card] = field(default_factory=list)
    melds: List[Meld] = field(default_factory=list)
    deal_compliance: List[bool] = field(default_factory=list)
    chips: int = 0
    bought_this_round: bool = False
    bought_cards: List[Card] = field(default_factory=list)  # drawn by buying this deal
    turns_played: int = 0  # this deal


@dataclass
class DealRecord:
    """End of deal snapshot, kept for scoring."""
    deal: int
    remaining_cards: Dict[PlayerID, List[Card]] = field(default_factory=dict)
    melds: Dict[PlayerID, List[Meld]] = field(default_factory=dict)
    bought_cards: Dict[PlayerID, List[Card]] = field(default_factory=dict)
    went_out: Optional[PlayerID] = None

    def remaining_points(self, player_id: PlayerID) -> int:
        return sum(card_value(c) for c in self.remaining_cards.get(player_id, []))


@dataclass
class ServerPlayer:
    id: PlayerID
    name: str = ""
    connection_id: Optional[ConnectionID] = None
    is_ai: bool = False


@dataclass
class BuyOutcome:
    success: bool
    card: Optional[Card] = None  # top of the discard pile that was bought
    card_drawn: Optional[Card] = None  # bonus card, only shown to the buyer

    def __bool__(self) -> bool:
        return self.success


@dataclass
class PlayResult:
    accepted: bool
    outcome: AdvanceResult = AdvanceResult.INVALID

    def __bool__(self) -> bool:
        return self.accepted
