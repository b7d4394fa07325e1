"""
Collaborators the coordinator is driven by or calls into: transport, actuator
and best-score storage. Simple in-process implementations are provided for
demos, the CLI and tests.
"""

import json
import os
from typing import Any, Callable, Protocol

from tileduel.engine.grid import Grid


class Transport(Protocol):
    def send(self, message: dict[str, Any]) -> None: ...


class Actuator(Protocol):
    def actuate(self, grid: Grid, metadata: dict[str, Any]) -> None: ...

    def continue_game(self) -> None: ...


class ScoreStore(Protocol):
    def get(self) -> int: ...

    def set(self, score: int) -> None: ...


class NullTransport:
    """Drops every message (single-peer play and setup before pairing)."""

    def send(self, message: dict[str, Any]) -> None:
        pass


class QueueTransport:
    """Collects outgoing messages so the caller decides when to deliver them."""

    def __init__(self):
        self.outbox: list[dict[str, Any]] = []

    def send(self, message: dict[str, Any]) -> None:
        # Round-trip through JSON so nothing shared leaks between peers
        self.outbox.append(json.loads(json.dumps(message)))

    def drain(self) -> list[dict[str, Any]]:
        messages, self.outbox = self.outbox, []
        return messages


class LoopbackTransport(QueueTransport):
    """
    Queue transport wired to a receiving callback, usually the other
    coordinator's receive_message. Messages are delivered by flush().
    """

    def __init__(self, deliver: Callable[[dict[str, Any]], Any] | None = None):
        super().__init__()
        self.deliver = deliver

    def connect(self, deliver: Callable[[dict[str, Any]], Any]) -> None:
        self.deliver = deliver

    def flush(self) -> int:
        """Deliver queued messages in order. Returns the number delivered."""
        if self.deliver is None:
            raise RuntimeError("LoopbackTransport is not connected")
        delivered = 0
        for message in self.drain():
            self.deliver(message)
            delivered += 1
        return delivered


def pump(*transports: LoopbackTransport, limit: int = 100) -> int:
    """Flush connected loopback transports until every queue is empty."""
    total = 0
    for _ in range(limit):
        delivered = sum(t.flush() for t in transports)
        if delivered == 0:
            return total
        total += delivered
    raise RuntimeError(f"Messages still bouncing after {limit} rounds")


class RecordingActuator:
    """Keeps the last actuation so callers can inspect what would be rendered."""

    def __init__(self):
        self.last_grid: dict[str, Any] | None = None
        self.last_metadata: dict[str, Any] | None = None
        self.actuations = 0
        self.continues = 0

    def actuate(self, grid: Grid, metadata: dict[str, Any]) -> None:
        self.last_grid = grid.serialize()
        self.last_metadata = dict(metadata)
        self.actuations += 1

    def continue_game(self) -> None:
        self.continues += 1


class MemoryScoreStore:
    def __init__(self, best: int = 0):
        self.best = best

    def get(self) -> int:
        return self.best

    def set(self, score: int) -> None:
        self.best = score


class JsonFileScoreStore:
    """Best score kept in a small JSON file: {"bestScore": int}."""

    def __init__(self, filepath: str):
        self.filepath = filepath

    def get(self) -> int:
        if not os.path.exists(self.filepath):
            return 0
        try:
            with open(self.filepath, "r") as f:
                data = json.load(f)
            return int(data.get("bestScore", 0))
        except (OSError, ValueError, TypeError, AttributeError):
            return 0

    def set(self, score: int) -> None:
        with open(self.filepath, "w") as f:
            json.dump({"bestScore": score}, f)
