"""Game constants"""

CARDS_PER_DECK = 54
RANKS_PER_SUIT = 13
# Positions above this one inside a deck are jokers
JOKER_THRESHOLD = 50

NUM_DECKS = 2
NUM_CARDS = CARDS_PER_DECK * NUM_DECKS
DEAL_SIZE = 13

MIN_NUM_PLAYERS = 2
MAX_NUM_PLAYERS = 4
STARTING_CHIPS = 3

MIN_COMBINATION_SIZE = 3
MAX_COMBINATION_SIZE = 13

AI_PLAY_DELAY = 1.0
