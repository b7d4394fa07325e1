"""
Query functions for UI integration.
These functions help the UI understand which moves are available
without mutating game state.
"""

from dataclasses import dataclass
from typing import Any

from tileduel.engine import DIRECTIONS
from tileduel.engine.moves import resolve_move
from tileduel.engine.state import GameState


DIRECTION_NAMES = {0: "up", 1: "right", 2: "down", 3: "left"}


@dataclass
class ValidationResult:
    """Result of move validation."""
    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


# ===== Move Validation =====

def validate_move(
    state: GameState,
    direction: int,
    player: int,
    awaiting_seed: bool = False,
) -> ValidationResult:
    """
    Validate a local move without applying it.
    Mirrors the coordinator's gating, which ignores rejected moves silently.
    """
    if direction not in DIRECTIONS:
        return ValidationResult(False, f"Invalid direction {direction!r}")
    if awaiting_seed:
        return ValidationResult(False, "Waiting for the peer's seed for the previous move")
    if state.is_terminated():
        return ValidationResult(False, "Game is over")
    if state.current_player != player:
        return ValidationResult(
            False,
            f"Not player {player}'s turn. Current player: {state.current_player}",
        )
    if direction not in get_available_directions(state):
        return ValidationResult(False, f"Moving {DIRECTION_NAMES[direction]} changes nothing")
    return ValidationResult(True)


def get_available_directions(state: GameState) -> list[int]:
    """Directions that would move at least one tile for the current player."""
    available = []
    for direction in DIRECTIONS:
        trial = state.copy()
        if resolve_move(trial.grid, direction, trial.current_player).moved:
            available.append(direction)
    return available


# ===== Summaries =====

def get_player_stats(state: GameState) -> dict[int, dict[str, int]]:
    """Per player: score, number of tiles owned, largest tile owned."""
    stats = {
        player: {"score": state.scores[player], "tiles": 0, "largest_tile": 0}
        for player in range(state.players)
    }
    for tile in state.grid.tiles():
        entry = stats.get(tile.owner)
        if entry is None:
            continue
        entry["tiles"] += 1
        entry["largest_tile"] = max(entry["largest_tile"], tile.value)
    return stats


def get_game_summary(state: GameState) -> dict[str, Any]:
    """
    Get a summary of the current game state for UI display.
    """
    largest = max((tile.value for tile in state.grid.tiles()), default=0)
    return {
        "size": state.grid.size,
        "turn_number": state.turn_number,
        "current_player": state.current_player,
        "scores": list(state.scores),
        "players": get_player_stats(state),
        "largest_tile": largest,
        "empty_cells": len(state.grid.available_cells()),
        "over": state.over,
        "won": state.won,
        "winners": state.winners,
        "terminated": state.is_terminated(),
    }
