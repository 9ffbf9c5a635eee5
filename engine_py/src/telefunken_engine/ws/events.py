"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..models import MeldModification, ModificationType, PlayerMove


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_GAME = "create_game"
    JOIN_GAME = "join_game"
    START_GAME = "start_game"
    PLAY = "play"
    BUY_CARD = "buy_card"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    GAME_CREATED = "game_created"
    GAME_JOINED = "game_joined"
    PLAYER_JOINED = "player_joined"
    GAME_STARTED = "game_started"
    TURN_CHANGED = "turn_changed"
    DEAL_CHANGED = "deal_changed"
    GAME_ENDED = "game_ended"
    CARD_BOUGHT = "card_bought"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Error codes for client events."""
    INVALID_EVENT = "INVALID_EVENT"
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    GAME_FULL = "GAME_FULL"
    GAME_NOT_WAITING = "GAME_NOT_WAITING"
    ALREADY_JOINED = "ALREADY_JOINED"
    NOT_OWNER = "NOT_OWNER"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    NOT_IN_GAME = "NOT_IN_GAME"
    MOVE_REJECTED = "MOVE_REJECTED"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class CreateGameEvent(BaseEvent):
    """Create game event, the sender becomes the owner."""
    type: EventType = EventType.CREATE_GAME
    name: str = Field(default="", max_length=30)


class JoinGameEvent(BaseEvent):
    """Join game event."""
    type: EventType = EventType.JOIN_GAME
    game_id: int = Field(..., ge=0)
    name: str = Field(default="", max_length=30)


class StartGameEvent(BaseEvent):
    """Start game event, only the owner may send it."""
    type: EventType = EventType.START_GAME
    game_id: int = Field(..., ge=0)
    player_id: int = Field(..., ge=0)


class ModificationModel(BaseModel):
    """A change to a meld on the table."""
    type: ModificationType
    player_id: int = Field(..., ge=0)
    meld_index: int
    cards: List[int] = Field(default_factory=list)
    hand_card: Optional[int] = None
    meld_card: Optional[int] = None


class PlayerMoveModel(BaseModel):
    """A whole move: new melds, meld modifications and the discard."""
    melds: List[List[int]] = Field(default_factory=list)
    discard: Optional[int] = None
    modifications: List[ModificationModel] = Field(default_factory=list)

    def to_move(self) -> PlayerMove:
        return PlayerMove(
            melds=[list(meld) for meld in self.melds],
            discard=self.discard,
            modifications=[
                MeldModification(
                    type=m.type,
                    player_id=m.player_id,
                    meld_index=m.meld_index,
                    cards=list(m.cards),
                    hand_card=m.hand_card,
                    meld_card=m.meld_card
                )
                for m in self.modifications
            ]
        )


class PlayEvent(BaseEvent):
    """Play event."""
    type: EventType = EventType.PLAY
    game_id: int = Field(..., ge=0)
    player_id: int = Field(..., ge=0)
    player_move: PlayerMoveModel


class BuyCardEvent(BaseEvent):
    """Buy the top card of the discard pile."""
    type: EventType = EventType.BUY_CARD
    game_id: int = Field(..., ge=0)
    player_id: int = Field(..., ge=0)
    card: int = Field(..., ge=0)


# Union type for all inbound events
InboundEvent = Union[
    CreateGameEvent,
    JoinGameEvent,
    StartGameEvent,
    PlayEvent,
    BuyCardEvent
]


# Outbound event models
class MessageStatus(BaseModel):
    """Outcome attached to replies."""
    success: bool = True
    code: Optional[str] = None


class GameDataEvent(BaseModel):
    """Event carrying a player's view of the game."""
    type: OutboundEventType
    game_data: Optional[Dict[str, Any]] = None
    status: MessageStatus = Field(default_factory=MessageStatus)
    timestamp: float


class PlayerJoinedEvent(BaseModel):
    """Sent to the players already in a game when someone joins."""
    type: OutboundEventType = OutboundEventType.PLAYER_JOINED
    player: Dict[str, Any]
    player_order: List[int]
    timestamp: float


class CardBoughtEvent(BaseModel):
    """Buy outcome. ``card_drawn`` is only filled in for the buyer."""
    type: OutboundEventType = OutboundEventType.CARD_BOUGHT
    player_id: int
    success: bool
    card: Optional[int] = None
    card_drawn: Optional[int] = None
    game_data: Optional[Dict[str, Any]] = None
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: ErrorCode
    message: str
    timestamp: float


# Union type for all outbound events
OutboundEvent = Union[
    GameDataEvent,
    PlayerJoinedEvent,
    CardBoughtEvent,
    ErrorEvent
]


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be an object")

    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_map = {
        EventType.CREATE_GAME: CreateGameEvent,
        EventType.JOIN_GAME: JoinGameEvent,
        EventType.START_GAME: StartGameEvent,
        EventType.PLAY: PlayEvent,
        EventType.BUY_CARD: BuyCardEvent,
    }

    event_class = event_map.get(event_type)
    if not event_class:
        raise ValueError(f"No handler for event type: {event_type}")

    try:
        return event_class(**data)
    except Exception as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def create_error_event(code: ErrorCode, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(
        code=code,
        message=message,
        timestamp=time.time()
    )


def create_game_data_event(
    event_type: OutboundEventType,
    game_data: Optional[Dict[str, Any]],
    status: Optional[MessageStatus] = None
) -> GameDataEvent:
    """Create an event carrying a player's view of the game."""
    return GameDataEvent(
        type=event_type,
        game_data=game_data,
        status=status or MessageStatus(),
        timestamp=time.time()
    )


def create_player_joined_event(player: Dict[str, Any], player_order: List[int]) -> PlayerJoinedEvent:
    """Create a player joined event."""
    return PlayerJoinedEvent(
        player=player,
        player_order=player_order,
        timestamp=time.time()
    )


def create_card_bought_event(
    player_id: int,
    success: bool,
    card: Optional[int],
    card_drawn: Optional[int],
    game_data: Optional[Dict[str, Any]]
) -> CardBoughtEvent:
    """Create a card bought event."""
    return CardBoughtEvent(
        player_id=player_id,
        success=success,
        card=card,
        card_drawn=card_drawn,
        game_data=game_data,
        timestamp=time.time()
    )
