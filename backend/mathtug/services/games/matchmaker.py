import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from .participants import (Participant, SyntheticOpponent, SyntheticParticipant,
                           new_synthetic_id)
from .settings import GameSettings


@dataclass
class QueueEntry:
    participant: Participant
    enqueued_at: float


class Matchmaker:
    """FIFO waiting queue.

    Pairs the two longest-waiting participants with each other and hands
    anyone who waited longer than ``ai_fallback_sec`` a synthetic opponent.
    A pairing pass runs on every enqueue and on a periodic tick.
    """

    def __init__(self, registry, scheduler, settings: Optional[GameSettings] = None,
                 logger: Optional[logging.Logger] = None, rng: Optional[random.Random] = None):
        self.registry = registry
        self.scheduler = scheduler
        self.settings = settings or GameSettings()
        self.logger = logger or logging.getLogger(__name__)
        self._rng = rng or random.Random()
        self.queue: List[QueueEntry] = []
        self._tick_handle = None

    def __len__(self) -> int:
        return len(self.queue)

    def is_queued(self, participant_id: str) -> bool:
        return any(e.participant.id == participant_id for e in self.queue)

    def enqueue(self, participant: Participant) -> bool:
        if self.is_queued(participant.id):
            return False
        self.queue.append(QueueEntry(participant, self.scheduler.now()))
        self.logger.info(f"[queue-join] player={participant.id} queued={len(self.queue)}")
        self.process_queue()
        return True

    def dequeue(self, participant_id: str) -> bool:
        before = len(self.queue)
        self.queue = [e for e in self.queue if e.participant.id != participant_id]
        removed = len(self.queue) != before
        if removed:
            self.logger.info(f"[queue-leave] player={participant_id}")
        return removed

    def process_queue(self) -> List[str]:
        created = []
        # entries leave the queue only once their session exists
        while len(self.queue) >= 2:
            first, second = self.queue[0], self.queue[1]
            self.logger.info(f"[match] {first.participant.id} vs {second.participant.id}")
            created.append(self.registry.create_session(first.participant, second.participant))
            del self.queue[:2]

        now = self.scheduler.now()
        for entry in list(self.queue):
            if now - entry.enqueued_at > self.settings.ai_fallback_sec:
                opponent = self._new_synthetic()
                self.logger.info(f"[match-ai] {entry.participant.id} vs {opponent.id}")
                created.append(self.registry.create_session(entry.participant, opponent))
                self.queue.remove(entry)
        return created

    def _new_synthetic(self) -> SyntheticParticipant:
        s = self.settings
        opponent = SyntheticOpponent(
            skill_level=s.ai_skill_level,
            min_delay_ms=s.ai_min_delay_ms,
            max_delay_ms=s.ai_max_delay_ms,
            rng=random.Random(self._rng.random()),
        )
        return SyntheticParticipant(id=new_synthetic_id(self._rng), opponent=opponent)

    # ---- periodic tick ----

    @property
    def running(self) -> bool:
        return self._tick_handle is not None

    def start(self) -> None:
        if self._tick_handle is not None:
            return
        self._schedule_tick()

    def stop(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _schedule_tick(self) -> None:
        self._tick_handle = self.scheduler.call_later(
            self.settings.matchmaker_tick_sec, self._tick, label='matchmaker-tick'
        )

    def _tick(self) -> None:
        try:
            self.process_queue()
        finally:
            if self._tick_handle is not None:
                self._schedule_tick()
