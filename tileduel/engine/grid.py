"""
Grid representation.
A fixed size x size array of cells, each holding at most one Tile.
Cells are addressed as cells[x][y]; traversal is x outer, y inner.
"""

import math
from typing import Any, Iterator

from tileduel.engine.tile import Cell, Tile


class GridInvariantError(RuntimeError):
    """Raised when a caller breaks a grid invariant (bad position, occupied cell, no free cell)."""


class Grid:
    """Square grid of optional tiles."""

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self.cells: list[list[Tile | None]] = [[None] * size for _ in range(size)]
        self._tile_id_counter = 0

    def generate_tile_id(self) -> int:
        """Generate a unique id for a new tile on this grid."""
        self._tile_id_counter += 1
        return self._tile_id_counter

    def new_tile(self, cell: Cell, value: int, owner: int) -> Tile:
        """Create a tile at cell (not yet inserted)."""
        return Tile(tile_id=self.generate_tile_id(), x=cell[0], y=cell[1], value=value, owner=owner)

    # ===== Queries =====

    def each_cell(self) -> Iterator[tuple[int, int, Tile | None]]:
        for x in range(self.size):
            for y in range(self.size):
                yield x, y, self.cells[x][y]

    def tiles(self) -> list[Tile]:
        return [tile for _, _, tile in self.each_cell() if tile is not None]

    def available_cells(self) -> list[Cell]:
        return [(x, y) for x, y, tile in self.each_cell() if tile is None]

    def cells_available(self) -> bool:
        return any(tile is None for _, _, tile in self.each_cell())

    def random_available_cell(self, seed: float) -> Cell:
        """
        Pick an empty cell deterministically from a seed in [0, 1).
        The seed is scaled by the number of empty cells and floored.
        Callers must check cells_available() first.
        """
        cells = self.available_cells()
        if not cells:
            raise GridInvariantError("No available cell to place a tile")
        index = math.floor(seed * len(cells))
        # A seed rounding up to 1.0 would index past the end
        return cells[min(index, len(cells) - 1)]

    def within_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.size and 0 <= y < self.size

    def cell_content(self, cell: Cell) -> Tile | None:
        if not self.within_bounds(cell):
            return None
        x, y = cell
        return self.cells[x][y]

    def cell_occupied(self, cell: Cell) -> bool:
        return self.cell_content(cell) is not None

    def cell_available(self, cell: Cell) -> bool:
        return self.within_bounds(cell) and not self.cell_occupied(cell)

    # ===== Mutation =====

    def insert_tile(self, tile: Tile) -> None:
        if not self.within_bounds(tile.position):
            raise GridInvariantError(f"Tile {tile.tile_id} position {tile.position} is out of bounds")
        if self.cells[tile.x][tile.y] is not None:
            raise GridInvariantError(f"Cell {tile.position} is already occupied")
        self.cells[tile.x][tile.y] = tile

    def remove_tile(self, tile: Tile) -> None:
        if self.cell_content(tile.position) is not tile:
            raise GridInvariantError(f"Tile {tile.tile_id} is not at {tile.position}")
        self.cells[tile.x][tile.y] = None

    def move_tile(self, tile: Tile, cell: Cell) -> None:
        """Relocate a tile to cell (no-op if it is already there)."""
        if cell == tile.position:
            return
        self.remove_tile(tile)
        tile.update_position(cell)
        self.insert_tile(tile)

    # ===== Serialization =====

    def serialize(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "cells": [
                [tile.to_dict() if tile is not None else None for tile in column]
                for column in self.cells
            ],
        }

    @classmethod
    def deserialize(cls, data: dict[str, Any]) -> "Grid":
        """Rebuild a grid from serialize() output. Raises ValueError if malformed."""
        if not isinstance(data, dict):
            raise ValueError("Serialized grid must be a dict")
        size = data.get("size")
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ValueError(f"Serialized grid size must be a positive integer, got {size!r}")
        cells = data.get("cells")
        if not isinstance(cells, list) or len(cells) != size:
            raise ValueError(f"Serialized grid must have {size} columns")
        grid = cls(size)
        for x, column in enumerate(cells):
            if not isinstance(column, list) or len(column) != size:
                raise ValueError(f"Column {x} must have {size} cells")
            for y, cell_data in enumerate(column):
                if cell_data is not None:
                    grid.insert_tile(Tile.from_dict(grid.generate_tile_id(), (x, y), cell_data))
        return grid

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.serialize() == other.serialize()
