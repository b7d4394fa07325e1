"""
Turn coordinator.
Owns the GameState for one peer: gates moves on turn ownership, applies the
move resolver's results, runs the seed exchange for the spawned tile and
notifies the actuator and transport.

Every entry point returns the list of GameEvents describing what happened. An
ignored input (out of turn, mid-settlement, game over) returns an empty list.
"""

import random
from typing import Any

from tileduel.config import (
    DEFAULT_GRID_SIZE,
    SEED_TIMEOUT_SECONDS,
    START_TILES_PER_PLAYER,
    TWO_PROBABILITY,
    WINNING_VALUE,
)
from tileduel.engine import PLAYERS, messages
from tileduel.engine.events import (
    GameEvent,
    game_started,
    game_restored,
    tiles_moved,
    tiles_merged,
    scores_changed,
    turn_changed,
    seed_drafted,
    seed_received,
    move_resent,
    tile_spawned,
    victory,
    game_over,
    keep_playing as keep_playing_event,
    peer_connected,
)
from tileduel.engine.moves import resolve_move, moves_available
from tileduel.engine.peers import Actuator, MemoryScoreStore, NullTransport, ScoreStore, Transport
from tileduel.engine.state import GameState
from tileduel.engine.sync import SyncProtocol
from tileduel.engine.tile import Tile


class TurnCoordinator:
    """
    One peer's game.

    player is this side's index. state, when given, is a serialized GameState
    (GameState.to_dict()) supplied by the peer; the game resumes from it instead
    of placing start tiles.
    """

    def __init__(
        self,
        player: int,
        transport: Transport | None = None,
        actuator: Actuator | None = None,
        score_store: ScoreStore | None = None,
        size: int = DEFAULT_GRID_SIZE,
        room_id: str | None = None,
        state: dict[str, Any] | None = None,
        rng: random.Random | None = None,
        seed_timeout: float = SEED_TIMEOUT_SECONDS,
    ):
        if not 0 <= player < PLAYERS:
            raise ValueError(f"Player must be in 0..{PLAYERS - 1}, got {player}")
        self.player = player
        self.players = PLAYERS
        self.size = size
        self.room_id = room_id
        self.transport = transport or NullTransport()
        self.actuator = actuator
        self.score_store = score_store or MemoryScoreStore()
        self.rng = rng or random.Random()
        self.sync = SyncProtocol(self.rng, timeout=seed_timeout)
        self.resume_state = state
        self.peer_connected = False
        # Last seed echo sent, resent if the peer repeats the move it answers
        self.last_echo: dict[str, Any] | None = None
        self.state: GameState
        self.setup()

    # ===== Setup =====

    def setup(self) -> list[GameEvent]:
        """Build the game: restore supplied state, or start fresh if there is none or it is malformed."""
        self.sync.reset()
        self.last_echo = None

        restored = None
        if self.resume_state is not None:
            try:
                restored = GameState.from_dict(self.resume_state, players=self.players)
            except ValueError:
                # Treat unusable state as no prior state
                self.resume_state = None

        if restored is not None:
            self.state = restored
            events = [game_restored(restored.current_player, list(restored.scores), restored.turn_number)]
        else:
            self.state = GameState.new(self.size, self.players)
            events = [self._add_start_tiles()]

        self.actuate()
        return events

    def _add_start_tiles(self) -> GameEvent:
        """One tile per player, in player order, each owned by that player."""
        placed = []
        for player in range(self.players):
            self.state.current_player = player
            for _ in range(START_TILES_PER_PLAYER):
                tile = self._add_random_tile(self.sync.draw())
                if tile is not None:
                    placed.append({"position": list(tile.position), "value": tile.value, "owner": tile.owner})
        self.state.current_player = 0
        return game_started(self.size, self.players, placed)

    def _add_random_tile(self, seed: float) -> Tile | None:
        """Spawn a tile for the current player at the seed-selected empty cell."""
        grid = self.state.grid
        if not grid.cells_available():
            return None
        value = 2 if seed < TWO_PROBABILITY else 4
        tile = grid.new_tile(grid.random_available_cell(seed), value, self.state.current_player)
        grid.insert_tile(tile)
        # A player's score is the sum of the tiles they own
        self.state.scores[tile.owner] += tile.value
        return tile

    def restart(self, fresh: bool = False) -> list[GameEvent]:
        """
        Reset the game and tell the peer.
        Fresh games hand their initial state to the peer; restored games only
        announce that this side is connected. fresh=True discards any supplied
        state and starts a new game.
        """
        if fresh:
            self.resume_state = None
        if self.actuator is not None:
            self.actuator.continue_game()
        events = self.setup()
        if self.resume_state is not None:
            self.transport.send(messages.connected())
        else:
            self.transport.send(messages.state_handoff(self.state.to_dict()))
        return events

    def keep_playing(self) -> list[GameEvent]:
        """Continue after reaching the winning tile without resetting the grid."""
        self.state.keep_playing = True
        if self.actuator is not None:
            self.actuator.continue_game()
        return [keep_playing_event()]

    # ===== Queries =====

    def is_terminated(self) -> bool:
        return self.state.is_terminated()

    def moves_available(self) -> bool:
        return moves_available(self.state.grid)

    @property
    def awaiting_seed(self) -> bool:
        return self.sync.pending is not None

    def metadata(self) -> dict[str, Any]:
        return {
            "scores": list(self.state.scores),
            "over": self.state.over,
            "won": self.state.won,
            "winners": list(self.state.winners) if self.state.winners is not None else None,
            "bestScore": self.score_store.get(),
            "terminated": self.is_terminated(),
            "roomID": self.room_id,
            "currentPlayer": self.state.current_player,
            "player": self.player,
        }

    def actuate(self) -> None:
        """Update the best score and send the grid to the actuator."""
        if self.score_store.get() < self.state.score:
            self.score_store.set(self.state.score)
        if self.actuator is not None:
            self.actuator.actuate(self.state.grid, self.metadata())

    # ===== Moves =====

    def move(self, direction: int, remote: bool = False) -> list[GameEvent]:
        """
        Apply a move for the current player.

        remote is True for moves received from the peer (or forced); those skip
        the turn-ownership check and are not sent back out.
        """
        if self.sync.pending is not None:
            return []
        if self.state.current_player != self.player and not remote:
            return []
        if self.is_terminated():
            return []

        state = self.state
        mover = state.current_player
        result = resolve_move(state.grid, direction, mover)
        if not result.moved:
            return []

        events = [tiles_moved(direction, mover, remote)]
        if result.merges:
            events.append(tiles_merged([m.to_dict() for m in result.merges]))
        if any(result.score_deltas):
            old_scores = list(state.scores)
            for player, delta in enumerate(result.score_deltas):
                state.scores[player] += delta
            events.append(scores_changed(old_scores, list(state.scores), "merge"))
        state.score += result.score_gained

        if result.won:
            state.won = True
            state.winners = [mover]
            events.append(victory([mover], list(state.scores), WINNING_VALUE))

        state.current_player = state.next_player()
        events.append(turn_changed(mover, state.current_player))

        pending = self.sync.draft(direction, remote, state.turn_number)
        events.append(seed_drafted(pending.local_seed, remote))
        if not remote:
            self.transport.send(messages.move(direction, pending.local_seed, pending.turn))
        return events

    # ===== Seed exchange =====

    def receive_seed(self, seed: float) -> list[GameEvent]:
        """Average a peer seed into the buffered remote half without settling."""
        buffered = self.sync.receive_seed(seed)
        return [seed_received(seed, buffered)]

    def apply_remote_seed(self, seed: float) -> list[GameEvent]:
        """Supply the peer's seed half; settles the pending spawn if there is one."""
        events = self.receive_seed(seed)
        if self.sync.ready:
            events.extend(self._settle())
        return events

    def _settle(self) -> list[GameEvent]:
        pending, effective = self.sync.reconcile()
        events: list[GameEvent] = []

        # The receiver answers with its own half so the mover can settle too
        if pending.remote:
            self.last_echo = messages.seed_echo(pending.local_seed, pending.turn)
            self.transport.send(self.last_echo)

        old_scores = list(self.state.scores)
        tile = self._add_random_tile(effective)
        if tile is not None:
            events.append(tile_spawned(tile.position, tile.value, tile.owner, effective))
            events.append(scores_changed(old_scores, list(self.state.scores), "spawn"))
        self.state.turn_number += 1

        if not self.moves_available():
            self.state.over = True
            highest = max(self.state.scores)
            self.state.winners = [p for p, s in enumerate(self.state.scores) if s == highest]
            events.append(game_over(list(self.state.winners), list(self.state.scores)))

        self.actuate()
        return events

    def check_stalled(self, now: float | None = None) -> list[GameEvent]:
        """
        Resend our pending move if the peer's seed half has not arrived in time.
        Only the mover resends; the receiver settles as soon as the move arrives.
        """
        pending = self.sync.pending
        if pending is None or pending.remote or not self.sync.is_stalled(now):
            return []
        self.sync.mark_resent(now)
        self.transport.send(messages.move(pending.direction, pending.local_seed, pending.turn))
        return [move_resent(pending.direction, pending.turn, pending.resends)]

    # ===== Transport input =====

    def receive_message(self, data: dict[str, Any]) -> list[GameEvent]:
        """Dispatch one message from the peer. Raises ValueError for malformed messages."""
        message = messages.parse_message(data)

        if message.type == messages.MOVE:
            turn = message.turn
            if turn is not None and turn < self.state.turn_number:
                # Already applied; the mover missed our echo
                if self.last_echo is not None and self.last_echo.get("turn") == turn:
                    self.transport.send(self.last_echo)
                return []
            events = self.move(message.payload["move"], remote=True)
            pending = self.sync.pending
            if pending is not None and pending.remote:
                events.extend(self.apply_remote_seed(message.payload["seed"]))
            return events

        if message.type == messages.SEED:
            turn = message.turn
            if turn is not None and turn < self.state.turn_number:
                return []
            if self.sync.pending is None:
                return self.receive_seed(message.payload["seed"])
            return self.apply_remote_seed(message.payload["seed"])

        if message.type == messages.STATE:
            self.resume_state = message.payload["state"]
            return self.restart()

        # messages.CONNECTED
        self.peer_connected = True
        self.actuate()
        return [peer_connected()]
