"""
Tile Duel Game Engine
Core turn state machine without transport, rendering or storage.
"""

PLAYERS = 2

# 0: up, 1: right, 2: down, 3: left
DIRECTIONS = {
    0: (0, -1),
    1: (1, 0),
    2: (0, 1),
    3: (-1, 0),
}
