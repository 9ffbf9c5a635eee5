"""
AI players.
"""

from .base import BaseBot
from .discard import DiscardBot

__all__ = ["BaseBot", "DiscardBot"]
