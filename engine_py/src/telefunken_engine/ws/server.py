"""
WebSocket connection handling and event routing for the Telefunken game.
"""

import asyncio
import itertools
import logging
from typing import Dict, Optional

import orjson
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from ..engine import TelefunkenEngine
from ..errors import GameError
from ..models import AdvanceResult, ConnectionID, GameID, PlayerID
from ..serialization import serialize_player
from .events import (
    BuyCardEvent, CreateGameEvent, ErrorCode, JoinGameEvent, MessageStatus,
    OutboundEventType, PlayEvent, StartGameEvent, create_card_bought_event,
    create_error_event, create_game_data_event, create_player_joined_event,
    parse_inbound_event
)

logger = logging.getLogger(__name__)

OUTCOME_EVENTS = {
    AdvanceResult.TURN_CHANGED: OutboundEventType.TURN_CHANGED,
    AdvanceResult.DEAL_CHANGED: OutboundEventType.DEAL_CHANGED,
    AdvanceResult.GAME_ENDED: OutboundEventType.GAME_ENDED,
}


def encode_event(event: BaseModel) -> str:
    return orjson.dumps(event.model_dump(), option=orjson.OPT_NON_STR_KEYS).decode()


class ConnectionManager:
    """Manages WebSocket connections and their ids."""

    def __init__(self):
        self.active_connections: Dict[ConnectionID, WebSocket] = {}
        self._connection_ids = itertools.count()

    async def connect(self, websocket: WebSocket) -> ConnectionID:
        await websocket.accept()
        connection_id = next(self._connection_ids)
        self.active_connections[connection_id] = websocket
        logger.info(f"Connection {connection_id} opened")
        return connection_id

    def disconnect(self, connection_id: ConnectionID):
        if connection_id in self.active_connections:
            del self.active_connections[connection_id]
        logger.info(f"Connection {connection_id} closed")

    async def send(self, connection_id: Optional[ConnectionID], event: BaseModel):
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            logger.error(f"Trying to send message to connection {connection_id} that does not exist")
            return
        try:
            await websocket.send_text(encode_event(event))
        except Exception as e:
            logger.error(f"Error sending message to connection {connection_id}: {e}")


class GameWebSocketManager:
    """Routes client events to the engine and pushes game views back."""

    def __init__(self, engine: TelefunkenEngine, connection_manager: Optional[ConnectionManager] = None):
        self.engine = engine
        self.connection_manager = connection_manager or ConnectionManager()
        self.ai_tasks: Dict[GameID, asyncio.Task] = {}

    async def handle_websocket(self, websocket: WebSocket):
        connection_id = await self.connection_manager.connect(websocket)
        try:
            while True:
                data = await websocket.receive_text()
                try:
                    event = parse_inbound_event(orjson.loads(data))
                except (ValueError, orjson.JSONDecodeError) as e:
                    await self.connection_manager.send(
                        connection_id, create_error_event(ErrorCode.INVALID_EVENT, str(e))
                    )
                    continue
                try:
                    await self.handle_event(connection_id, event)
                except (GameError, KeyError) as e:
                    logger.error(f"Error handling event from connection {connection_id}: {e}")
                    await self._send_error(connection_id, ErrorCode.INTERNAL, "Internal server error")
        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected for connection {connection_id}")
        finally:
            self.connection_manager.disconnect(connection_id)

    async def handle_event(self, connection_id: ConnectionID, event):
        if isinstance(event, CreateGameEvent):
            await self.create_game(connection_id, event)
        elif isinstance(event, JoinGameEvent):
            await self.join_game(connection_id, event)
        elif isinstance(event, StartGameEvent):
            await self.start_game(connection_id, event)
        elif isinstance(event, PlayEvent):
            await self.play(connection_id, event)
        elif isinstance(event, BuyCardEvent):
            await self.buy_card(connection_id, event)
        else:
            raise ValueError(f"Unhandled event type: {type(event)}")

    def _owns_player(self, connection_id: ConnectionID, player_id: PlayerID) -> bool:
        player = self.engine.players.get(player_id)
        return player is not None and player.connection_id == connection_id

    async def _send_error(self, connection_id: ConnectionID, code: ErrorCode, message: str):
        await self.connection_manager.send(connection_id, create_error_event(code, message))

    async def create_game(self, connection_id: ConnectionID, event: CreateGameEvent):
        player_id = self.engine.add_player(connection_id, event.name)
        game_id = self.engine.create_game(player_id)
        await self.connection_manager.send(connection_id, create_game_data_event(
            OutboundEventType.GAME_CREATED,
            self.engine.extract_client_game_data(game_id, player_id)
        ))

    async def join_game(self, connection_id: ConnectionID, event: JoinGameEvent):
        game = self.engine.get_game(event.game_id)
        if not game:
            await self.connection_manager.send(connection_id, create_game_data_event(
                OutboundEventType.GAME_JOINED, None,
                MessageStatus(success=False, code=ErrorCode.GAME_NOT_FOUND.value)
            ))
            return

        player_id = self.engine.add_player(connection_id, event.name)
        success, code = self.engine.join_game(event.game_id, player_id)
        if not success:
            await self.connection_manager.send(connection_id, create_game_data_event(
                OutboundEventType.GAME_JOINED, None, MessageStatus(success=False, code=code)
            ))
            return

        await self.connection_manager.send(connection_id, create_game_data_event(
            OutboundEventType.GAME_JOINED,
            self.engine.extract_client_game_data(event.game_id, player_id)
        ))

        # Let the other players know
        joined = serialize_player(player_id, game, self.engine.players)
        for other_id in game.players:
            if other_id == player_id:
                continue
            other = self.engine.players[other_id]
            if other.is_ai:
                continue
            await self.connection_manager.send(
                other.connection_id, create_player_joined_event(joined, list(game.players))
            )

    async def start_game(self, connection_id: ConnectionID, event: StartGameEvent):
        if not self._owns_player(connection_id, event.player_id):
            await self._send_error(connection_id, ErrorCode.NOT_IN_GAME, "Unknown player")
            return

        success, code = self.engine.start_game(event.game_id, event.player_id)
        if not success:
            await self._send_error(connection_id, ErrorCode(code), "Unable to start game")
            return

        await self.broadcast_game_data(event.game_id, OutboundEventType.GAME_STARTED)
        self.schedule_ai(event.game_id)

    async def play(self, connection_id: ConnectionID, event: PlayEvent):
        if not self._owns_player(connection_id, event.player_id):
            await self._send_error(connection_id, ErrorCode.NOT_IN_GAME, "Unknown player")
            return

        result = self.engine.play(event.game_id, event.player_id, event.player_move.to_move())
        if not result.accepted:
            await self._send_error(connection_id, ErrorCode.MOVE_REJECTED, "Move rejected")
            return

        await self.broadcast_game_data(event.game_id, OUTCOME_EVENTS[result.outcome])
        self.schedule_ai(event.game_id)

    async def buy_card(self, connection_id: ConnectionID, event: BuyCardEvent):
        if not self._owns_player(connection_id, event.player_id):
            await self._send_error(connection_id, ErrorCode.NOT_IN_GAME, "Unknown player")
            return

        game = self.engine.get_game(event.game_id)
        if not game or not game.is_player_in_game(event.player_id):
            await self._send_error(connection_id, ErrorCode.NOT_IN_GAME, "Not in this game")
            return

        outcome = self.engine.buy_card(event.game_id, event.player_id, event.card)
        for player_id in game.players:
            player = self.engine.players[player_id]
            if player.is_ai:
                continue
            if player_id != event.player_id and not outcome.success:
                continue
            # The bonus card is only revealed to the buyer
            card_drawn = outcome.card_drawn if player_id == event.player_id else None
            await self.connection_manager.send(player.connection_id, create_card_bought_event(
                event.player_id,
                outcome.success,
                event.card,
                card_drawn,
                self.engine.extract_client_game_data(event.game_id, player_id)
            ))

    async def broadcast_game_data(self, game_id: GameID, event_type: OutboundEventType):
        """Send every human player of a game their own view of it."""
        game = self.engine.get_game(game_id)
        if not game:
            return
        for player_id in game.players:
            player = self.engine.players[player_id]
            if player.is_ai:
                continue  # Do not talk to robots
            await self.connection_manager.send(player.connection_id, create_game_data_event(
                event_type, self.engine.extract_client_game_data(game_id, player_id)
            ))

    def schedule_ai(self, game_id: GameID):
        """Start the AI driver of a game unless it is already running."""
        task = self.ai_tasks.get(game_id)
        if task and not task.done():
            return
        if not self.engine.is_ai_turn(game_id):
            return
        self.ai_tasks[game_id] = asyncio.create_task(self._run_ai(game_id))

    async def _run_ai(self, game_id: GameID):
        try:
            while self.engine.is_ai_turn(game_id):
                await asyncio.sleep(self.engine.rules.ai_play_delay)
                outcome = self.engine.ai_play(game_id)
                if outcome is None:
                    break
                if outcome == AdvanceResult.INVALID:
                    logger.error(f"AI driver stopped for game {game_id}")
                    break
                await self.broadcast_game_data(game_id, OUTCOME_EVENTS[outcome])
        except asyncio.CancelledError:
            logger.info(f"AI driver cancelled for game {game_id}")
            raise
        finally:
            self.ai_tasks.pop(game_id, None)
