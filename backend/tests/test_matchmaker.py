import random

import pytest

from mathtug.services.games import (GameSettings, Matchmaker, QueueEntry, RealParticipant,
                                    SessionRegistry, SyntheticParticipant)


@pytest.fixture()
def registry(notifier, scheduler):
    return SessionRegistry(notifier, scheduler, GameSettings(), rng=random.Random(3))


@pytest.fixture()
def matchmaker(registry, scheduler):
    return Matchmaker(registry, scheduler, GameSettings(), rng=random.Random(4))


def test_consecutive_players_are_paired_together(matchmaker, registry, notifier):
    assert matchmaker.enqueue(RealParticipant('alice')) is True
    assert len(matchmaker) == 1
    assert matchmaker.enqueue(RealParticipant('bob')) is True
    assert len(matchmaker) == 0

    session = registry.lookup_by_participant('alice')
    assert session is registry.lookup_by_participant('bob')
    assert session.player_ids == ['alice', 'bob']
    assert notifier.payloads('game_start') == [{'players': ['alice', 'bob'], 'ropePosition': 0.0}]
    assert notifier.rooms[session.room] == {'alice', 'bob'}


def test_duplicate_enqueue_is_a_noop(matchmaker):
    assert matchmaker.enqueue(RealParticipant('alice')) is True
    assert matchmaker.enqueue(RealParticipant('alice')) is False
    assert len(matchmaker) == 1


def test_pairing_is_fifo(matchmaker, registry, scheduler):
    for name in ('a', 'b', 'c'):
        matchmaker.queue.append(QueueEntry(RealParticipant(name), scheduler.now()))
    matchmaker.process_queue()
    assert registry.lookup_by_participant('a').player_ids == ['a', 'b']
    assert matchmaker.is_queued('c')
    assert registry.lookup_by_participant('c') is None


def test_dequeue(matchmaker):
    matchmaker.enqueue(RealParticipant('alice'))
    assert matchmaker.dequeue('alice') is True
    assert matchmaker.dequeue('alice') is False
    assert len(matchmaker) == 0


def test_lone_player_gets_synthetic_opponent_after_fallback(matchmaker, registry, notifier, scheduler):
    matchmaker.start()
    matchmaker.enqueue(RealParticipant('alice'))

    scheduler.advance(5.0)
    # exactly five seconds is not yet past the threshold
    assert matchmaker.is_queued('alice')
    assert notifier.events('game_start') == []

    scheduler.advance(1.0)
    assert not matchmaker.is_queued('alice')
    session = registry.lookup_by_participant('alice')
    first, second = session.participants
    assert first == RealParticipant('alice')
    assert isinstance(second, SyntheticParticipant)
    assert second.id.startswith('AI_')
    assert second.opponent.skill_level == pytest.approx(0.7)

    start = notifier.events('game_start')
    assert len(start) == 1
    assert start[0][1] == session.room
    assert 'alice' in notifier.rooms[session.room]
    assert second.id not in notifier.rooms[session.room]


def test_real_opponent_preferred_within_threshold(matchmaker, registry, scheduler):
    matchmaker.start()
    matchmaker.enqueue(RealParticipant('alice'))
    scheduler.advance(3.0)
    matchmaker.enqueue(RealParticipant('bob'))
    scheduler.advance(10.0)
    assert registry.lookup_by_participant('alice').player_ids == ['alice', 'bob']


def test_process_queue_returns_created_sessions(matchmaker, registry, scheduler):
    matchmaker.enqueue(RealParticipant('alice'))
    scheduler.clock += 6.0
    created = matchmaker.process_queue()
    assert len(created) == 1
    assert registry.get(created[0]) is registry.lookup_by_participant('alice')


def test_stop_cancels_the_tick(matchmaker, scheduler):
    matchmaker.start()
    matchmaker.start()
    assert matchmaker.running
    assert len([h for h in scheduler.pending() if h.label == 'matchmaker-tick']) == 1
    matchmaker.enqueue(RealParticipant('alice'))
    matchmaker.stop()
    scheduler.advance(30.0)
    assert matchmaker.is_queued('alice')
    assert not matchmaker.running


class FlakyJoinNotifier:
    """Records messages like RecordingNotifier but fails the first room join."""

    def __init__(self, inner):
        self.inner = inner
        self.failures_left = 1

    def __getattr__(self, name):
        return getattr(self.inner, name)

    def join(self, participant_id, room):
        if self.failures_left:
            self.failures_left -= 1
            raise RuntimeError('room join failed')
        self.inner.join(participant_id, room)


def test_failed_session_creation_keeps_players_queued(notifier, scheduler):
    registry = SessionRegistry(FlakyJoinNotifier(notifier), scheduler, GameSettings())
    matchmaker = Matchmaker(registry, scheduler, GameSettings())
    matchmaker.enqueue(RealParticipant('alice'))

    with pytest.raises(RuntimeError):
        matchmaker.enqueue(RealParticipant('bob'))

    assert matchmaker.is_queued('alice') and matchmaker.is_queued('bob')
    assert len(registry) == 0
    assert registry.lookup_by_participant('alice') is None
    assert scheduler.pending() == []

    # next pass succeeds with the same players
    created = matchmaker.process_queue()
    assert len(created) == 1
    assert registry.get(created[0]).player_ids == ['alice', 'bob']
    assert len(matchmaker) == 0


def test_failed_fallback_session_keeps_player_queued(notifier, scheduler):
    registry = SessionRegistry(FlakyJoinNotifier(notifier), scheduler, GameSettings())
    matchmaker = Matchmaker(registry, scheduler, GameSettings())
    matchmaker.enqueue(RealParticipant('alice'))
    scheduler.clock += 6.0

    with pytest.raises(RuntimeError):
        matchmaker.process_queue()
    assert matchmaker.is_queued('alice')

    matchmaker.process_queue()
    assert not matchmaker.is_queued('alice')
    assert registry.lookup_by_participant('alice') is not None
