# engine_py/src/telefunken_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Structural errors
INVALID_MOVE = "INVALID_MOVE"
MELD_NOT_FOUND = "MELD_NOT_FOUND"

# Legality errors
NOT_YOUR_TURN = "NOT_YOUR_TURN"
TURN_ALREADY_PLAYED = "TURN_ALREADY_PLAYED"
OWNERSHIP_MISMATCH = "OWNERSHIP_MISMATCH"
INVALID_COMBINATION = "INVALID_COMBINATION"
DEAL_CONSTRAINT_UNMET = "DEAL_CONSTRAINT_UNMET"
FIRST_TURN_MELD = "FIRST_TURN_MELD"
DISCARD_REQUIRED = "DISCARD_REQUIRED"
ALREADY_BOUGHT = "ALREADY_BOUGHT"
NO_CHIPS = "NO_CHIPS"
DISCARD_PILE_EMPTY = "DISCARD_PILE_EMPTY"
NOT_TOP_OF_DISCARD = "NOT_TOP_OF_DISCARD"

# Session lifecycle errors
GAME_NOT_FOUND = "GAME_NOT_FOUND"
GAME_FULL = "GAME_FULL"
GAME_NOT_WAITING = "GAME_NOT_WAITING"
GAME_NOT_IN_PROGRESS = "GAME_NOT_IN_PROGRESS"
ALREADY_JOINED = "ALREADY_JOINED"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
PLAYER_NOT_IN_GAME = "PLAYER_NOT_IN_GAME"
NOT_OWNER = "NOT_OWNER"

INTERNAL_ERROR = "INTERNAL_ERROR"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
