"""
Main entry point for the Tile Duel game engine.
Demonstrates core functionality with two peers wired together in-process.
"""

import random

from tileduel.engine.coordinator import TurnCoordinator
from tileduel.engine.grid import Grid
from tileduel.engine.peers import LoopbackTransport, RecordingActuator, pump
from tileduel.engine.queries import get_available_directions, get_game_summary
from tileduel.engine.utils import print_game_state, print_events


def create_peers(seed: int = 42):
    """Host (player 0) and guest (player 1) connected by loopback transports."""
    host_out = LoopbackTransport()
    guest_out = LoopbackTransport()
    host = TurnCoordinator(0, transport=host_out, actuator=RecordingActuator(),
                           room_id="demo", rng=random.Random(seed))
    guest = TurnCoordinator(1, transport=guest_out, actuator=RecordingActuator(),
                            room_id="demo", rng=random.Random(seed + 1))
    host_out.connect(guest.receive_message)
    guest_out.connect(host.receive_message)
    return host, guest, host_out, guest_out


def main():
    print("Tile Duel - two peers, one grid")
    print("=" * 60)

    host, guest, host_out, guest_out = create_peers()

    # ===== SCENARIO 1: Handshake =====
    print("\n[SCENARIO 1: Host hands its starting grid to the guest]")
    host.restart()
    pump(host_out, guest_out)
    if host.state.grid == guest.state.grid:
        print(f"✓ Guest restored the host's grid; host sees peer connected: {host.peer_connected}")
    else:
        print("✗ Guest grid differs from the host's after the handoff")
    print_game_state(host.state, player=host.player)

    # ===== SCENARIO 2: Alternating moves =====
    print("\n[SCENARIO 2: Ten alternating moves with seed reconciliation]")
    agreed = True
    for _ in range(10):
        mover = host if host.state.current_player == host.player else guest
        directions = get_available_directions(mover.state)
        if not directions or mover.is_terminated():
            print("No moves left")
            break
        direction = directions[0]
        events = mover.move(direction)
        print(f"\nPlayer {mover.player} moves {direction}:")
        print_events(events)
        try:
            pump(host_out, guest_out)
        except ValueError as e:
            print(f"✗ Peer rejected a message: {e}")
            agreed = False
            break
        if host.state.grid != guest.state.grid or host.state.scores != guest.state.scores:
            print(f"✗ Peers disagree after turn {host.state.turn_number}")
            agreed = False

    print_game_state(host.state, player=host.player)
    if agreed:
        print("✓ Both peers agree after every move")

    # ===== SCENARIO 3: Out-of-turn input is ignored =====
    print("\n[SCENARIO 3: Out-of-turn move]")
    idle = guest if host.state.current_player == host.player else host
    before = idle.state.grid.serialize()
    events = idle.move(0)
    print(f"✓ Ignored: events={events}, grid unchanged={idle.state.grid.serialize() == before}")

    # ===== SCENARIO 4: Merging tiles of different owners =====
    print("\n[SCENARIO 4: Merge between different owners]")
    solo = TurnCoordinator(0, rng=random.Random(7))
    solo.state.grid = Grid(4)
    solo.state.scores = [0, 0]
    for cell, owner in (((0, 0), 0), ((0, 1), 1)):
        solo.state.grid.insert_tile(solo.state.grid.new_tile(cell, 2, owner))
        solo.state.scores[owner] += 2
    events = solo.move(0)
    print_events(events)
    print(f"✓ Scores after merge: {solo.state.scores} (player 1's tile was taken over)")

    # ===== Summary =====
    print("\n" + "=" * 60)
    print(f"Summary: {get_game_summary(host.state)}")
    print("=" * 60)


if __name__ == "__main__":
    main()
