"""
Peer message tests: factories produce the wire shapes parse_message accepts.
"""

import pytest

from tileduel.engine import messages
from tileduel.engine.messages import parse_message


def test_factories_build_wire_shapes():
    assert messages.connected() == {"connected": True}
    assert messages.state_handoff({"scores": [0, 0]}) == {"state": {"scores": [0, 0]}}
    assert messages.move(2, 0.5) == {"move": 2, "seed": 0.5}
    assert messages.move(2, 0.5, turn=3) == {"move": 2, "seed": 0.5, "turn": 3}
    assert messages.seed_echo(0.25) == {"seed": 0.25}
    assert messages.seed_echo(0.25, turn=0) == {"seed": 0.25, "turn": 0}


def test_parse_classifies_each_shape():
    assert parse_message({"connected": True}).type == messages.CONNECTED
    assert parse_message({"state": {}}).type == messages.STATE

    move = parse_message({"move": 1, "seed": 0.3, "turn": 4})
    assert move.type == messages.MOVE
    assert move.payload["move"] == 1
    assert move.payload["seed"] == 0.3
    assert move.turn == 4

    seed = parse_message({"seed": 0})
    assert seed.type == messages.SEED
    assert seed.payload["seed"] == 0.0
    assert seed.turn is None


@pytest.mark.parametrize("data", [
    None,
    "move",
    {},
    {"connected": False},
    {"move": 4, "seed": 0.5},
    {"move": True, "seed": 0.5},
    {"move": [1], "seed": 0.5},
    {"move": 0},
    {"move": 0, "seed": 1.0},
    {"seed": -0.5},
    {"seed": "0.5"},
    {"seed": 0.5, "turn": -1},
    {"seed": 0.5, "turn": 1.5},
    {"state": "grid"},
])
def test_parse_rejects_malformed_messages(data):
    with pytest.raises(ValueError):
        parse_message(data)
