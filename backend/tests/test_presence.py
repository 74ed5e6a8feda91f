from groupchat.core.scheduler import prune_presence_job
from groupchat.services.presence import PresenceTracker


def test_user_without_heartbeat_is_offline(presence):
    assert presence.last_seen(1) is None
    assert presence.is_active(1) is False


def test_heartbeat_expires_after_timeout(presence, clock):
    presence.touch(1)

    clock.advance(minutes=4)
    assert presence.is_active(1)

    clock.advance(minutes=2)
    assert not presence.is_active(1)


def test_heartbeat_exactly_at_timeout_is_offline(presence, clock):
    presence.touch(1)
    clock.advance(seconds=300)
    assert not presence.is_active(1)


def test_new_heartbeat_refreshes_presence(presence, clock):
    first = presence.touch(1)
    clock.advance(minutes=4)
    second = presence.touch(1)
    clock.advance(minutes=4)

    assert second > first
    assert presence.last_seen(1) == second
    assert presence.is_active(1)


def test_count_active_only_counts_recent_heartbeats(presence, clock):
    presence.touch(1)
    clock.advance(minutes=3)
    presence.touch(2)
    clock.advance(minutes=3)

    # user 1 is six minutes old, user 2 three, user 3 never seen
    assert presence.count_active([1, 2, 3]) == 1


def test_prune_drops_only_stale_entries(presence, clock):
    presence.touch(1)
    clock.advance(minutes=6)
    presence.touch(2)

    assert presence.prune() == 1
    assert len(presence) == 1
    assert presence.last_seen(1) is None
    assert presence.last_seen(2) is not None


def test_custom_timeout(clock):
    tracker = PresenceTracker(timeout_seconds=30, clock=clock)
    tracker.touch(7)
    clock.advance(seconds=29)
    assert tracker.is_active(7)
    clock.advance(seconds=1)
    assert not tracker.is_active(7)


def test_prune_job_removes_stale_heartbeats(presence, clock):
    presence.touch(1)
    presence.touch(2)
    clock.advance(minutes=10)

    prune_presence_job(presence)

    assert len(presence) == 0
