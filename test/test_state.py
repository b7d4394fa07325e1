"""
GameState tests: handoff serialization, validation of restored state, save/load.
"""

import pytest

from tileduel.engine.grid import Grid
from tileduel.engine.state import GameState


def create_state() -> GameState:
    state = GameState.new(size=4)
    for cell, value, owner in [((0, 0), 2, 0), ((3, 1), 8, 1), ((2, 2), 4, 0)]:
        state.grid.insert_tile(state.grid.new_tile(cell, value, owner))
    state.scores = [6, 8]
    state.current_player = 1
    state.turn_number = 7
    return state


def test_to_dict_carries_the_handoff_fields():
    data = create_state().to_dict()
    assert set(data) == {"grid", "currentPlayer", "scores", "turnNumber"}
    assert data["currentPlayer"] == 1
    assert data["scores"] == [6, 8]
    assert data["turnNumber"] == 7


def test_dict_round_trip_restores_grid_and_turn():
    state = create_state()
    restored = GameState.from_dict(state.to_dict())
    assert restored.grid == state.grid
    assert restored.scores == [6, 8]
    assert restored.current_player == 1
    assert restored.turn_number == 7
    assert not restored.over


def test_save_and_load(tmp_path):
    state = create_state()
    path = tmp_path / "game.json"
    state.save(str(path))
    loaded = GameState.load(str(path))
    assert loaded.to_dict() == state.to_dict()


def test_copy_is_independent():
    state = create_state()
    trial = state.copy()
    trial.grid.remove_tile(trial.grid.cell_content((0, 0)))
    trial.scores[0] = 0
    assert state.grid.cell_occupied((0, 0))
    assert state.scores == [6, 8]


def test_termination_and_rotation():
    state = GameState.new(size=2)
    assert not state.is_terminated()
    assert state.next_player() == 1
    state.current_player = 1
    assert state.next_player() == 0

    state.won = True
    assert state.is_terminated()
    state.keep_playing = True
    assert not state.is_terminated()
    state.over = True
    assert state.is_terminated()


def test_tile_total_sums_every_tile():
    assert create_state().tile_total() == 14


@pytest.mark.parametrize("mutate", [
    lambda d: d.update(scores=[1]),
    lambda d: d.update(scores="lots"),
    lambda d: d.update(currentPlayer=2),
    lambda d: d.update(currentPlayer="first"),
    lambda d: d.update(grid={"size": 1, "cells": [[{"value": 2, "owner": 5}]]}),
    lambda d: d.update(grid={"size": 1, "cells": [[{"value": 6, "owner": 0}]]}),
    lambda d: d.pop("grid"),
    lambda d: d.update(scores=[100, 0]),
    lambda d: d.update(scores=[6.0, 8]),
    lambda d: d.update(currentPlayer=True),
    lambda d: d.update(turnNumber=-1),
    lambda d: d.update(turnNumber="7"),
])
def test_from_dict_rejects_malformed_state(mutate):
    data = create_state().to_dict()
    mutate(data)
    with pytest.raises(ValueError):
        GameState.from_dict(data)


def test_from_dict_rejects_non_dict():
    with pytest.raises(ValueError):
        GameState.from_dict(["grid"])


def test_missing_turn_number_defaults_to_zero():
    data = {"grid": Grid(2).serialize(), "currentPlayer": 0, "scores": [0, 0]}
    assert GameState.from_dict(data).turn_number == 0
