"""
Move resolution.
Slides and merges every tile on the grid for one direction, producing a MoveResult
that the coordinator applies to scores and turn order.
"""

from dataclasses import dataclass, field
from typing import Any

from tileduel.config import WINNING_VALUE
from tileduel.engine import DIRECTIONS, PLAYERS
from tileduel.engine.grid import Grid
from tileduel.engine.tile import Cell, Tile


@dataclass
class Merge:
    """One merge that happened during a pass."""
    tile_id: int  # id of the tile created by the merge
    position: Cell
    value: int  # value after merging
    owner: int
    moving_tile_id: int
    moving_owner: int
    stationary_tile_id: int
    stationary_owner: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "tile_id": self.tile_id,
            "position": list(self.position),
            "value": self.value,
            "owner": self.owner,
            "sources": [
                {"tile_id": self.moving_tile_id, "owner": self.moving_owner},
                {"tile_id": self.stationary_tile_id, "owner": self.stationary_owner},
            ],
        }


@dataclass
class MoveResult:
    """Outcome of one directional pass."""
    direction: int
    mover: int
    moved: bool = False
    merges: list[Merge] = field(default_factory=list)
    # Merge provenance for this pass only: merged tile_id -> (moving tile_id, stationary tile_id)
    merged_from: dict[int, tuple[int, int]] = field(default_factory=dict)
    # player index -> score change from ownership transfers
    score_deltas: list[int] = field(default_factory=lambda: [0] * PLAYERS)
    # Sum of merged tile values (global score, best-score tracking only)
    score_gained: int = 0
    won: bool = False


def get_vector(direction: int) -> Cell:
    """Unit vector for a direction (0: up, 1: right, 2: down, 3: left)."""
    try:
        return DIRECTIONS[direction]
    except (KeyError, TypeError):
        raise ValueError(f"Invalid direction {direction!r}; expected 0..3")


def build_traversals(size: int, vector: Cell) -> tuple[list[int], list[int]]:
    """
    Build the x and y visiting orders for a pass.
    Each axis is reversed when the vector points toward its far edge, so tiles
    nearest the destination edge settle first.
    """
    xs = list(range(size))
    ys = list(range(size))
    if vector[0] == 1:
        xs.reverse()
    if vector[1] == 1:
        ys.reverse()
    return xs, ys


def find_farthest_position(grid: Grid, cell: Cell, vector: Cell) -> tuple[Cell, Cell]:
    """
    Walk from cell along vector while the next cell is empty and in bounds.
    Returns (farthest, next): the last empty cell reached and the first blocking
    cell beyond it (occupied or out of bounds).
    """
    previous = cell
    current = (cell[0] + vector[0], cell[1] + vector[1])
    while grid.cell_available(current):
        previous = current
        current = (current[0] + vector[0], current[1] + vector[1])
    return previous, current


def prepare_tiles(grid: Grid) -> None:
    """Save every tile's position before a pass."""
    for tile in grid.tiles():
        tile.save_position()


def merge_owner(moving: Tile, stationary: Tile, current_player: int) -> int:
    """
    Owner of the tile produced by merging moving into stationary.
    The mover takes the tile if it owns either source; otherwise the moving
    tile keeps its owner.
    """
    if moving.owner == current_player or stationary.owner == current_player:
        return current_player
    return moving.owner


def resolve_move(grid: Grid, direction: int, current_player: int) -> MoveResult:
    """
    Slide and merge all tiles on grid toward direction, mutating grid in place.

    A tile produced by a merge during this pass cannot merge again in the same pass.
    Scores are not touched here; the returned score_deltas describe the
    ownership transfers caused by merges between different owners.
    """
    vector = get_vector(direction)
    result = MoveResult(direction=direction, mover=current_player)
    prepare_tiles(grid)

    xs, ys = build_traversals(grid.size, vector)
    for x in xs:
        for y in ys:
            cell = (x, y)
            tile = grid.cell_content(cell)
            if tile is None:
                continue

            farthest, next_cell = find_farthest_position(grid, cell, vector)
            target = grid.cell_content(next_cell)

            if (
                target is not None
                and target.value == tile.value
                and target.tile_id not in result.merged_from
            ):
                _merge(grid, tile, target, current_player, result)
            else:
                grid.move_tile(tile, farthest)

            if tile.has_moved():
                result.moved = True

    return result


def _merge(grid: Grid, tile: Tile, target: Tile, current_player: int, result: MoveResult) -> None:
    owner = merge_owner(tile, target, current_player)
    merged = grid.new_tile(target.position, tile.value * 2, owner)
    result.merged_from[merged.tile_id] = (tile.tile_id, target.tile_id)

    grid.remove_tile(target)
    grid.remove_tile(tile)
    grid.insert_tile(merged)

    # Converge the moving tile onto the merge cell so the pass registers movement
    tile.update_position(target.position)

    if tile.owner != target.owner:
        for source in (tile, target):
            result.score_deltas[source.owner] += tile.value if source.owner == owner else -tile.value
    result.score_gained += merged.value

    result.merges.append(Merge(
        tile_id=merged.tile_id,
        position=merged.position,
        value=merged.value,
        owner=owner,
        moving_tile_id=tile.tile_id,
        moving_owner=tile.owner,
        stationary_tile_id=target.tile_id,
        stationary_owner=target.owner,
    ))

    if merged.value == WINNING_VALUE:
        result.won = True


def tile_matches_available(grid: Grid) -> bool:
    """Check every occupied cell for an equal-valued neighbour in any direction."""
    for x, y, tile in grid.each_cell():
        if tile is None:
            continue
        for vector in DIRECTIONS.values():
            other = grid.cell_content((x + vector[0], y + vector[1]))
            if other is not None and other.value == tile.value:
                return True
    return False


def moves_available(grid: Grid) -> bool:
    return grid.cells_available() or tile_matches_available(grid)
