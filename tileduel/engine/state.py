"""
Game state representation.
Mutated only by the TurnCoordinator.
Includes JSON serialization for handoff to the peer and save/load.
"""

import json
from dataclasses import dataclass, field
from copy import deepcopy
from typing import Any

from tileduel.config import DEFAULT_GRID_SIZE
from tileduel.engine import PLAYERS
from tileduel.engine.grid import Grid


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class GameState:
    """Complete game state for one peer."""
    grid: Grid
    players: int = PLAYERS
    # player index -> sum of the values of the tiles that player owns
    scores: list[int] = field(default_factory=lambda: [0] * PLAYERS)
    current_player: int = 0
    over: bool = False
    won: bool = False
    # Player indices that won (None while the game is undecided)
    winners: list[int] | None = None
    keep_playing: bool = False
    # Running total of merged values, only used for best-score tracking
    score: int = 0
    # Number of settled moves; carried on move/seed messages to spot duplicates
    turn_number: int = 0

    @classmethod
    def new(cls, size: int = DEFAULT_GRID_SIZE, players: int = PLAYERS) -> "GameState":
        return cls(grid=Grid(size), players=players, scores=[0] * players)

    def copy(self) -> "GameState":
        """Return a deep copy of this game state."""
        return deepcopy(self)

    def is_terminated(self) -> bool:
        return self.over or (self.won and not self.keep_playing)

    def next_player(self) -> int:
        return (self.current_player + 1) % self.players

    def tile_total(self) -> int:
        return sum(tile.value for tile in self.grid.tiles())

    # ===== Serialization Methods =====

    def to_dict(self) -> dict[str, Any]:
        """State handed to the peer: grid, current player, scores and turn number."""
        return {
            "grid": self.grid.serialize(),
            "currentPlayer": self.current_player,
            "scores": list(self.scores),
            "turnNumber": self.turn_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], players: int = PLAYERS) -> "GameState":
        """
        Create GameState from a to_dict() payload.
        Raises ValueError when the payload is malformed; callers restoring a
        session fall back to a fresh game in that case.
        """
        if not isinstance(data, dict):
            raise ValueError("Serialized state must be a dict")
        grid = Grid.deserialize(data.get("grid"))

        scores_raw = data.get("scores")
        if not isinstance(scores_raw, list) or len(scores_raw) != players:
            raise ValueError(f"Serialized state must have {players} scores")
        scores = list(scores_raw)
        if not all(_is_int(s) for s in scores):
            raise ValueError(f"Serialized scores must be integers, got {scores!r}")
        current_player = data.get("currentPlayer", 0)
        turn_number = data.get("turnNumber") or 0
        if not _is_int(current_player) or not _is_int(turn_number):
            raise ValueError("Serialized currentPlayer/turnNumber must be integers")
        if not 0 <= current_player < players:
            raise ValueError(f"currentPlayer {current_player} out of range")
        if turn_number < 0:
            raise ValueError(f"turnNumber must not be negative, got {turn_number}")
        for tile in grid.tiles():
            if tile.owner >= players:
                raise ValueError(f"Tile at {tile.position} has unknown owner {tile.owner}")
        # Every tile counts toward exactly one owner's score
        tile_total = sum(tile.value for tile in grid.tiles())
        if sum(scores) != tile_total:
            raise ValueError(f"Scores {scores} do not add up to the tile total {tile_total}")

        return cls(
            grid=grid,
            players=players,
            scores=scores,
            current_player=current_player,
            turn_number=turn_number,
        )

    def to_json(self, indent: int = 2) -> str:
        """Serialize GameState to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> "GameState":
        """Deserialize GameState from a JSON string."""
        return cls.from_dict(json.loads(json_str))

    def save(self, filepath: str) -> None:
        """Save GameState to a JSON file."""
        with open(filepath, "w") as f:
            f.write(self.to_json())

    @classmethod
    def load(cls, filepath: str) -> "GameState":
        """Load GameState from a JSON file."""
        with open(filepath, "r") as f:
            return cls.from_json(f.read())
