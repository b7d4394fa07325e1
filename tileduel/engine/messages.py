"""
Peer message definitions.
Messages are the only thing exchanged between the two peers: plain dicts on the
wire, parsed into Message records on receipt.
"""

from dataclasses import dataclass
from typing import Any

from tileduel.engine import DIRECTIONS


CONNECTED = "connected"
STATE = "state"
MOVE = "move"
SEED = "seed"


@dataclass
class Message:
    """A parsed peer message. payload holds the wire fields."""
    type: str  # "connected", "state", "move" or "seed"
    payload: dict[str, Any]

    @property
    def turn(self) -> int | None:
        return self.payload.get("turn")


def connected() -> dict[str, Any]:
    """Sent after restoring from supplied state: this side is ready."""
    return {"connected": True}


def state_handoff(state: dict[str, Any]) -> dict[str, Any]:
    """
    Hand the freshly set-up game to the peer.
    state is GameState.to_dict(): {"grid", "currentPlayer", "scores", "turnNumber"}.
    """
    return {"state": state}


def move(direction: int, seed: float, turn: int | None = None) -> dict[str, Any]:
    """Sent by the mover right after applying a local move, with its seed half."""
    out: dict[str, Any] = {"move": direction, "seed": seed}
    if turn is not None:
        out["turn"] = turn
    return out


def seed_echo(seed: float, turn: int | None = None) -> dict[str, Any]:
    """Sent by the receiver of a move, carrying its own seed half."""
    out: dict[str, Any] = {"seed": seed}
    if turn is not None:
        out["turn"] = turn
    return out


def _seed(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Seed must be a number, got {value!r}")
    seed = float(value)
    if not 0.0 <= seed < 1.0:
        raise ValueError(f"Seed must be in [0, 1), got {seed}")
    return seed


def _turn(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"Turn must be a non-negative integer, got {value!r}")
    return value


def parse_message(data: Any) -> Message:
    """
    Classify and validate a wire message.
    Raises ValueError for anything that is not one of the four known shapes.
    """
    if not isinstance(data, dict):
        raise ValueError("Message must be a dict")

    if "move" in data:
        direction = data["move"]
        if isinstance(direction, bool) or not isinstance(direction, int) or direction not in DIRECTIONS:
            raise ValueError(f"Invalid move direction {direction!r}")
        return Message(MOVE, {
            "move": direction,
            "seed": _seed(data.get("seed")),
            "turn": _turn(data.get("turn")),
        })

    if "seed" in data:
        return Message(SEED, {"seed": _seed(data["seed"]), "turn": _turn(data.get("turn"))})

    if "state" in data:
        if not isinstance(data["state"], dict):
            raise ValueError("State message must carry a dict")
        return Message(STATE, {"state": data["state"]})

    if data.get("connected") is True:
        return Message(CONNECTED, {"connected": True})

    raise ValueError(f"Unknown message: {sorted(data.keys())}")
