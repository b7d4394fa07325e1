"""
Seed exchange tests: drafting, buffering, reconciliation and stall detection.
"""

import random

import pytest

from tileduel.engine.sync import SyncError, SyncProtocol, combine_seeds


def test_draft_then_reconcile_averages_both_halves():
    sync = SyncProtocol(random.Random(8))
    pending = sync.draft(direction=2, remote=False, turn=4)
    assert 0.0 <= pending.local_seed < 1.0
    assert not sync.ready

    sync.receive_seed(0.6)
    assert sync.ready
    settled, effective = sync.reconcile()

    assert settled is pending
    assert effective == (pending.local_seed + 0.6) / 2
    assert sync.pending is None
    assert sync.remote_seed is None


def test_both_sides_compute_the_same_effective_seed():
    assert combine_seeds(0.125, 0.7) == combine_seeds(0.7, 0.125)


def test_second_draft_while_pending_is_an_error():
    sync = SyncProtocol(random.Random(1))
    sync.draft(0, remote=False, turn=0)
    with pytest.raises(SyncError):
        sync.draft(1, remote=False, turn=0)


def test_seeds_arriving_early_are_averaged_into_the_buffer():
    sync = SyncProtocol(random.Random(1))
    assert sync.receive_seed(0.5) == 0.5
    assert sync.receive_seed(0.25) == 0.375
    assert not sync.ready


def test_out_of_range_seed_is_rejected():
    sync = SyncProtocol(random.Random(1))
    with pytest.raises(SyncError):
        sync.receive_seed(1.0)
    with pytest.raises(SyncError):
        sync.receive_seed(-0.1)
    with pytest.raises(SyncError):
        sync.receive_seed("0.5")


def test_reconcile_requires_both_halves():
    sync = SyncProtocol(random.Random(1))
    with pytest.raises(SyncError):
        sync.reconcile()
    sync.draft(0, remote=True, turn=0)
    with pytest.raises(SyncError):
        sync.reconcile()


def test_stall_detection_and_resend_bookkeeping():
    sync = SyncProtocol(random.Random(1), timeout=5)
    assert not sync.is_stalled(now=1000.0)
    pending = sync.draft(3, remote=False, turn=0)
    assert not sync.is_stalled(now=pending.drafted_at + 4)
    assert sync.is_stalled(now=pending.drafted_at + 5)

    sync.mark_resent(now=pending.drafted_at + 5)
    assert pending.resends == 1
    assert not sync.is_stalled(now=pending.drafted_at + 1)
