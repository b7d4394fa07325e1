"""
Grid tests: placement, availability queries, seeded cell selection and serialization.
"""

import pytest

from tileduel.engine.grid import Grid, GridInvariantError


def place(grid: Grid, cell, value: int, owner: int):
    """Helper to insert a new tile at cell."""
    tile = grid.new_tile(cell, value, owner)
    grid.insert_tile(tile)
    return tile


def test_each_cell_visits_every_cell_x_outer():
    grid = Grid(3)
    visited = [(x, y) for x, y, _ in grid.each_cell()]
    assert visited == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2), (2, 0), (2, 1), (2, 2)]


def test_availability_queries():
    grid = Grid(2)
    assert grid.cells_available()
    place(grid, (0, 0), 2, 0)
    assert not grid.cell_available((0, 0))
    assert grid.cell_available((1, 1))
    assert not grid.cell_available((2, 0))  # out of bounds
    assert grid.cell_content((5, 5)) is None
    assert grid.within_bounds((1, 1))
    assert not grid.within_bounds((-1, 0))
    place(grid, (0, 1), 2, 0)
    place(grid, (1, 0), 4, 1)
    place(grid, (1, 1), 8, 1)
    assert not grid.cells_available()
    assert grid.available_cells() == []


def test_random_available_cell_floors_seed_over_empty_cells():
    grid = Grid(2)
    place(grid, (0, 1), 2, 0)
    # Empty cells in traversal order: (0,0), (1,0), (1,1)
    assert grid.random_available_cell(0.0) == (0, 0)
    assert grid.random_available_cell(0.34) == (1, 0)
    assert grid.random_available_cell(0.999) == (1, 1)


def test_random_available_cell_requires_a_free_cell():
    grid = Grid(1)
    place(grid, (0, 0), 2, 0)
    with pytest.raises(GridInvariantError):
        grid.random_available_cell(0.5)


def test_insert_into_occupied_or_out_of_bounds_cell_fails():
    grid = Grid(2)
    place(grid, (0, 0), 2, 0)
    with pytest.raises(GridInvariantError):
        place(grid, (0, 0), 4, 1)
    with pytest.raises(GridInvariantError):
        place(grid, (2, 2), 4, 1)


def test_remove_and_move_tile_keep_positions_consistent():
    grid = Grid(4)
    tile = place(grid, (1, 1), 2, 0)
    grid.move_tile(tile, (3, 1))
    assert tile.position == (3, 1)
    assert grid.cell_content((3, 1)) is tile
    assert grid.cell_content((1, 1)) is None
    grid.remove_tile(tile)
    assert grid.tiles() == []
    with pytest.raises(GridInvariantError):
        grid.remove_tile(tile)


def test_serialize_round_trip():
    grid = Grid(3)
    place(grid, (0, 2), 2, 0)
    place(grid, (2, 1), 64, 1)
    data = grid.serialize()
    assert data["size"] == 3
    assert data["cells"][0][2] == {"value": 2, "owner": 0}
    assert data["cells"][2][1] == {"value": 64, "owner": 1}
    assert data["cells"][1][1] is None

    restored = Grid.deserialize(data)
    assert restored.serialize() == data
    assert restored == grid
    for tile in restored.tiles():
        assert restored.cell_content(tile.position) is tile


def test_deserialize_rejects_malformed_data():
    with pytest.raises(ValueError):
        Grid.deserialize(None)
    with pytest.raises(ValueError):
        Grid.deserialize({"size": 2, "cells": [[None, None]]})
    with pytest.raises(ValueError):
        Grid.deserialize({"size": 1, "cells": [[{"value": 3, "owner": 0}]]})
    with pytest.raises(ValueError):
        Grid.deserialize({"size": 1, "cells": [[{"value": 2}]]})
    with pytest.raises(ValueError):
        Grid.deserialize({"size": "1", "cells": [[None]]})


def test_deserialize_does_not_coerce_tile_fields():
    for tile_data in ({"value": 4.5, "owner": True}, {"value": 4, "owner": True},
                      {"value": "4", "owner": 0}, {"value": 4.0, "owner": 0}):
        with pytest.raises(ValueError):
            Grid.deserialize({"size": 2, "cells": [[tile_data, None], [None, None]]})
