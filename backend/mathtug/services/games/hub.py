import logging
import threading
from typing import Any, Dict, Optional

from .matchmaker import Matchmaker
from .participants import RealParticipant
from .registry import SessionRegistry
from .settings import GameSettings


class GameHub:
    """Entry point for inbound client events.

    Every method runs under ``lock``, the same lock the scheduler holds while
    running timer callbacks, so each event is handled to completion before
    the next one starts.
    """

    def __init__(self, notifier, scheduler, settings: Optional[GameSettings] = None,
                 logger: Optional[logging.Logger] = None, lock=None):
        self.settings = settings or GameSettings()
        self.logger = logger or logging.getLogger(__name__)
        self.lock = lock or getattr(scheduler, 'lock', None) or threading.RLock()
        self.notifier = notifier
        self.scheduler = scheduler
        self.registry = SessionRegistry(notifier, scheduler, self.settings, self.logger)
        self.matchmaker = Matchmaker(self.registry, scheduler, self.settings, self.logger)

    def join(self, sid: str) -> bool:
        with self.lock:
            session = self.registry.lookup_by_participant(sid)
            if session is not None and session.is_running:
                self.logger.info(f"[join-skip] player={sid} already in session={session.session_id}")
                return False
            return self.matchmaker.enqueue(RealParticipant(sid))

    def rematch(self, sid: str) -> bool:
        return self.join(sid)

    def submit_answer(self, sid: str, answer: Any) -> Optional[bool]:
        with self.lock:
            session = self.registry.lookup_by_participant(sid)
            if session is None:
                return None
            return session.submit_answer(sid, answer)

    def disconnect(self, sid: str) -> None:
        with self.lock:
            self.matchmaker.dequeue(sid)
            session = self.registry.lookup_by_participant(sid)
            if session is None:
                return
            self.logger.info(f"[disconnect] player={sid} session={session.session_id}")
            self.notifier.room(session.room, 'opponent_disconnected')
            self.registry.destroy_session(session.session_id)

    def stats(self) -> Dict[str, int]:
        with self.lock:
            return {'queued': len(self.matchmaker), 'sessions': len(self.registry)}

    def shutdown(self) -> None:
        with self.lock:
            self.matchmaker.stop()
            self.registry.destroy_all()
