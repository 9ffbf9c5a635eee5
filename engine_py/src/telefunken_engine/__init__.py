"""
Server-side engine for the Telefunken rummy card game.
"""

__version__ = "1.0.0"
