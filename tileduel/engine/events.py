"""
Game events for UI hooks and logging.
Events describe what happened while the coordinator processed an input.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameEvent":
        return cls(type=data["type"], payload=data["payload"])


# ===== Event Type Constants =====

# Setup events
GAME_STARTED = "game_started"
GAME_RESTORED = "game_restored"

# Move events
TILES_MOVED = "tiles_moved"
TILES_MERGED = "tiles_merged"
SCORES_CHANGED = "scores_changed"
TURN_CHANGED = "turn_changed"

# Sync events
SEED_DRAFTED = "seed_drafted"
SEED_RECEIVED = "seed_received"
MOVE_RESENT = "move_resent"
TILE_SPAWNED = "tile_spawned"

# Outcome events
VICTORY = "victory"
GAME_OVER = "game_over"
KEEP_PLAYING = "keep_playing"
PEER_CONNECTED = "peer_connected"


# ===== Event Factory Functions =====

def game_started(size: int, players: int, tiles: list[dict]) -> GameEvent:
    return GameEvent(GAME_STARTED, {
        "size": size,
        "players": players,
        "tiles": tiles,  # [{"position": [x, y], "value": int, "owner": int}, ...]
    })


def game_restored(current_player: int, scores: list[int], turn_number: int) -> GameEvent:
    return GameEvent(GAME_RESTORED, {
        "current_player": current_player,
        "scores": scores,
        "turn_number": turn_number,
    })


def tiles_moved(direction: int, mover: int, remote: bool) -> GameEvent:
    return GameEvent(TILES_MOVED, {
        "direction": direction,
        "mover": mover,
        "remote": remote,
    })


def tiles_merged(merges: list[dict]) -> GameEvent:
    """merges are Merge.to_dict() records, in the order they happened."""
    return GameEvent(TILES_MERGED, {"merges": merges})


def scores_changed(old_scores: list[int], new_scores: list[int], reason: str) -> GameEvent:
    return GameEvent(SCORES_CHANGED, {
        "old_scores": old_scores,
        "new_scores": new_scores,
        "change": [new - old for old, new in zip(old_scores, new_scores)],
        "reason": reason,  # "merge" or "spawn"
    })


def turn_changed(old_player: int, new_player: int) -> GameEvent:
    return GameEvent(TURN_CHANGED, {
        "old_player": old_player,
        "new_player": new_player,
    })


def seed_drafted(seed: float, remote: bool) -> GameEvent:
    return GameEvent(SEED_DRAFTED, {"seed": seed, "remote": remote})


def seed_received(seed: float, buffered: float) -> GameEvent:
    """buffered is the remote half after averaging this seed in."""
    return GameEvent(SEED_RECEIVED, {"seed": seed, "buffered": buffered})


def move_resent(direction: int, turn: int, attempts: int) -> GameEvent:
    return GameEvent(MOVE_RESENT, {
        "direction": direction,
        "turn": turn,
        "attempts": attempts,
    })


def tile_spawned(position: tuple[int, int], value: int, owner: int, seed: float) -> GameEvent:
    return GameEvent(TILE_SPAWNED, {
        "position": list(position),
        "value": value,
        "owner": owner,
        "seed": seed,  # effective (reconciled) seed
    })


def victory(winners: list[int], scores: list[int], value: int) -> GameEvent:
    """Emitted when a merge reaches the winning tile value."""
    return GameEvent(VICTORY, {
        "winners": winners,
        "scores": scores,
        "value": value,
    })


def game_over(winners: list[int], scores: list[int]) -> GameEvent:
    """Emitted when no moves remain. winners are all players tied on the top score."""
    return GameEvent(GAME_OVER, {
        "winners": winners,
        "scores": scores,
    })


def keep_playing() -> GameEvent:
    return GameEvent(KEEP_PLAYING, {})


def peer_connected() -> GameEvent:
    return GameEvent(PEER_CONNECTED, {})
