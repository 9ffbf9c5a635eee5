"""FastAPI main application for the Telefunken game backend"""

import logging
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .engine import TelefunkenEngine
from .serialization import get_public_game_info
from .ws.server import GameWebSocketManager

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(engine: Optional[TelefunkenEngine] = None) -> FastAPI:
    """Build the application around an engine, a fresh one by default."""
    engine = engine or TelefunkenEngine()
    game_manager = GameWebSocketManager(engine)

    app = FastAPI(title="Telefunken Card Game API", version="1.0.0")
    app.state.engine = engine
    app.state.game_manager = game_manager

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {"message": "Telefunken Card Game API", "version": "1.0.0"}

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "games": len(engine.games),
            "connections": len(game_manager.connection_manager.active_connections)
        }

    @app.get("/games")
    async def list_games():
        return [get_public_game_info(game_id, game) for game_id, game in engine.games.items()]

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await game_manager.handle_websocket(websocket)

    return app


app = create_app()
