"""
Utility functions for the game engine.
"""

from tileduel.engine.events import GameEvent
from tileduel.engine.grid import Grid
from tileduel.engine.state import GameState


# Owner markers used in text rendering, by player index
OWNER_MARKS = "ab"


def format_grid(grid: Grid) -> str:
    """
    Render the grid as text, one row per line (y top to bottom).
    Each tile shows its value and an owner mark, e.g. "16a"; empty cells are dots.
    """
    width = max([len(f"{t.value}a") for t in grid.tiles()] + [4])
    lines = []
    for y in range(grid.size):
        row = []
        for x in range(grid.size):
            tile = grid.cells[x][y]
            if tile is None:
                row.append(".".rjust(width))
            else:
                mark = OWNER_MARKS[tile.owner] if tile.owner < len(OWNER_MARKS) else str(tile.owner)
                row.append(f"{tile.value}{mark}".rjust(width))
        lines.append(" ".join(row))
    return "\n".join(lines)


def print_game_state(state: GameState, player: int | None = None) -> None:
    """
    Pretty-print the current game state.

    Args:
        state: Current game state
        player: If given, mark which side is viewing
    """
    print(f"\n{'='*40}")
    viewer = f" | You: player {player}" if player is not None else ""
    print(f"Turn {state.turn_number} | Player {state.current_player} to move{viewer}")
    print(f"{'='*40}")
    print(format_grid(state.grid))
    scores = ", ".join(f"player {p} ({OWNER_MARKS[p]}): {s}" for p, s in enumerate(state.scores))
    print(f"\nScores: {scores}")
    if state.over:
        print(f"*** GAME OVER - winners: {state.winners} ***")
    elif state.won:
        print(f"*** {state.winners} reached the winning tile ***")


def print_events(events: list[GameEvent]) -> None:
    """One line per event: type and payload."""
    for event in events:
        print(f"  - {event.type}: {event.payload}")
