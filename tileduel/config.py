"""
Single place for default game configuration.
Change DEFAULT_GRID_SIZE to play on a different board when no size is provided.
"""
import os

DEFAULT_GRID_SIZE = 4
# One starting tile per player, placed in player order
START_TILES_PER_PLAYER = 1
WINNING_VALUE = 2048
# A spawn seed below this threshold produces a 2, otherwise a 4
TWO_PROBABILITY = 0.9
# Seconds a move may wait for the peer's seed half before it is resent
SEED_TIMEOUT_SECONDS = float(os.environ.get("TILEDUEL_SEED_TIMEOUT", "10"))
