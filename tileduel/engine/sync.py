"""
Seed reconciliation between the two peers.

Each move's spawned tile is chosen by a seed neither peer controls alone: the
side that applies a move drafts its own half, the other half arrives from the
peer, and the effective seed is their average. Both sides see the same empty
cells after the move, so they pick the same cell.
"""

import random
import time
from dataclasses import dataclass

from tileduel.config import SEED_TIMEOUT_SECONDS


class SyncError(RuntimeError):
    """Raised when the seed exchange is used out of order or with a bad seed."""


@dataclass
class PendingSpawn:
    """A move that has been applied but whose tile spawn waits for the peer's seed half."""
    direction: int
    local_seed: float
    remote: bool  # True if the move came from the peer
    turn: int  # turn_number at the time of the move
    drafted_at: float  # time.monotonic() when drafted
    resends: int = 0


def validate_seed(seed: float) -> float:
    if isinstance(seed, bool) or not isinstance(seed, (int, float)):
        raise SyncError(f"Seed must be a number, got {seed!r}")
    if not 0.0 <= seed < 1.0:
        raise SyncError(f"Seed must be in [0, 1), got {seed}")
    return float(seed)


def combine_seeds(first: float, second: float) -> float:
    return (first + second) / 2


class SyncProtocol:
    """Holds at most one pending spawn and the buffered remote seed half."""

    def __init__(self, rng: random.Random | None = None, timeout: float = SEED_TIMEOUT_SECONDS):
        self.rng = rng or random.Random()
        self.timeout = timeout
        self.pending: PendingSpawn | None = None
        self.remote_seed: float | None = None

    def reset(self) -> None:
        self.pending = None
        self.remote_seed = None

    def draw(self) -> float:
        return self.rng.random()

    def draft(self, direction: int, remote: bool, turn: int) -> PendingSpawn:
        """Draw the local seed half for a move that just changed the grid."""
        if self.pending is not None:
            raise SyncError(f"Turn {self.pending.turn} is still waiting for a seed")
        self.pending = PendingSpawn(
            direction=direction,
            local_seed=self.draw(),
            remote=remote,
            turn=turn,
            drafted_at=time.monotonic(),
        )
        return self.pending

    def receive_seed(self, seed: float) -> float:
        """
        Buffer the peer's seed half. A second seed arriving before settlement is
        averaged into the buffered one. Returns the buffered value.
        """
        seed = validate_seed(seed)
        if self.remote_seed is None:
            self.remote_seed = seed
        else:
            self.remote_seed = combine_seeds(self.remote_seed, seed)
        return self.remote_seed

    @property
    def ready(self) -> bool:
        return self.pending is not None and self.remote_seed is not None

    def reconcile(self) -> tuple[PendingSpawn, float]:
        """Combine both halves and clear the exchange. Returns (pending, effective seed)."""
        if not self.ready:
            raise SyncError("Cannot reconcile without a pending move and a remote seed")
        pending = self.pending
        effective = combine_seeds(pending.local_seed, self.remote_seed)
        self.reset()
        return pending, effective

    def is_stalled(self, now: float | None = None) -> bool:
        if self.pending is None:
            return False
        now = time.monotonic() if now is None else now
        return now - self.pending.drafted_at >= self.timeout

    def mark_resent(self, now: float | None = None) -> PendingSpawn:
        if self.pending is None:
            raise SyncError("No pending move to resend")
        self.pending.resends += 1
        self.pending.drafted_at = time.monotonic() if now is None else now
        return self.pending
