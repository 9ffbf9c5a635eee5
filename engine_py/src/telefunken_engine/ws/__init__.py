"""
WebSocket transport for the Telefunken game.
"""

from .server import ConnectionManager, GameWebSocketManager

__all__ = ["ConnectionManager", "GameWebSocketManager"]
