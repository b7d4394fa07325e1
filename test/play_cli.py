#!/usr/bin/env python3
"""
Interactive hot-seat CLI for testing the Tile Duel engine.
Both peers run in this process; every message goes through a loopback transport.
Run: python test/play_cli.py
"""

import random
import sys

from tileduel.engine.coordinator import TurnCoordinator
from tileduel.engine.peers import LoopbackTransport, JsonFileScoreStore, pump
from tileduel.engine.queries import DIRECTION_NAMES, validate_move, get_game_summary
from tileduel.engine.utils import print_game_state, print_events


KEYS = {"w": 0, "d": 1, "s": 2, "a": 3}


def clear_screen():
    print("\n" * 2)


def print_help():
    print("\nCommands:")
    print("  w/a/s/d  move up/left/down/right for the player whose turn it is")
    print("  k        keep playing after the winning tile")
    print("  r        restart (new grid)")
    print("  i        summary")
    print("  v        toggle event output")
    print("  q        quit")


def main():
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else None
    rng = random.Random(seed)
    store = JsonFileScoreStore(".tileduel_best.json")

    host_out = LoopbackTransport()
    guest_out = LoopbackTransport()
    host = TurnCoordinator(0, transport=host_out, score_store=store, rng=random.Random(rng.random()))
    guest = TurnCoordinator(1, transport=guest_out, score_store=store, rng=random.Random(rng.random()))
    host_out.connect(guest.receive_message)
    guest_out.connect(host.receive_message)
    peers = [host, guest]

    host.restart()
    pump(host_out, guest_out)
    verbose = False

    print_help()
    while True:
        clear_screen()
        state = host.state
        print_game_state(state)
        print(f"Best: {store.get()}")
        if state.is_terminated():
            print("Game terminated. 'k' to keep playing (after a win), 'r' to restart, 'q' to quit.")

        try:
            cmd = input(f"\nPlayer {state.current_player} > ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if cmd == "q":
            break
        if cmd == "?":
            print_help()
            continue
        if cmd == "v":
            verbose = not verbose
            continue
        if cmd == "i":
            print(get_game_summary(state))
            continue
        if cmd == "r":
            host.restart(fresh=True)
            pump(host_out, guest_out)
            continue
        if cmd == "k":
            for peer in peers:
                peer.keep_playing()
            continue
        if cmd not in KEYS:
            print(f"Unknown command {cmd!r}. '?' for help.")
            continue

        direction = KEYS[cmd]
        mover = peers[state.current_player]
        validation = validate_move(mover.state, direction, mover.player, mover.awaiting_seed)
        if not validation.valid:
            print(f"✗ {validation.error}")
            continue
        events = mover.move(direction)
        pump(host_out, guest_out)
        if verbose:
            print(f"\nPlayer {mover.player} moved {DIRECTION_NAMES[direction]}:")
            print_events(events)
        if host.state.grid != guest.state.grid:
            print("✗ Peers disagree on the grid!")


if __name__ == "__main__":
    main()
