import logging
import random
import string
from typing import Dict, Optional

from .participants import Participant, RealParticipant
from .session import MatchSession
from .settings import GameSettings


def generate_session_id(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return 'room_' + ''.join(rng.choices(string.ascii_lowercase + string.digits, k=9))


class SessionRegistry:
    """Maps session ids and participant ids to live MatchSessions."""

    def __init__(self, notifier, scheduler, settings: Optional[GameSettings] = None,
                 logger: Optional[logging.Logger] = None, rng: Optional[random.Random] = None):
        self.notifier = notifier
        self.scheduler = scheduler
        self.settings = settings or GameSettings()
        self.logger = logger or logging.getLogger(__name__)
        self._rng = rng or random.Random()
        self._sessions: Dict[str, MatchSession] = {}
        self._by_participant: Dict[str, MatchSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self, first: Participant, second: Participant) -> str:
        session_id = generate_session_id(self._rng)
        while session_id in self._sessions:
            session_id = generate_session_id(self._rng)
        session = MatchSession(
            session_id, first, second,
            notifier=self.notifier,
            scheduler=self.scheduler,
            settings=self.settings,
            on_end=self._on_session_end,
            logger=self.logger,
            rng=self._rng,
        )
        self._sessions[session_id] = session
        for participant in session.participants:
            self._by_participant[participant.id] = session
        try:
            for participant in session.participants:
                if isinstance(participant, RealParticipant):
                    self.notifier.join(participant.id, session.room)
            session.start()
        except Exception:
            self.logger.exception(f"[session-create-failed] session={session_id}")
            self._unregister(session)
            for participant in session.participants:
                if isinstance(participant, RealParticipant):
                    self.notifier.leave(participant.id, session.room)
            raise
        return session_id

    def get(self, session_id: str) -> Optional[MatchSession]:
        return self._sessions.get(session_id)

    def lookup_by_participant(self, participant_id: str) -> Optional[MatchSession]:
        return self._by_participant.get(participant_id)

    def destroy_session(self, session_id: str) -> bool:
        session = self._sessions.get(session_id)
        if session is None:
            return False
        self._unregister(session)
        for participant in session.participants:
            if isinstance(participant, RealParticipant):
                self.notifier.leave(participant.id, session.room)
        self.logger.info(f"[session-destroy] session={session_id}")
        return True

    def _unregister(self, session: MatchSession) -> None:
        session.teardown()
        self._sessions.pop(session.session_id, None)
        for participant in session.participants:
            if self._by_participant.get(participant.id) is session:
                del self._by_participant[participant.id]

    def destroy_all(self) -> None:
        for session_id in list(self._sessions):
            self.destroy_session(session_id)

    def _on_session_end(self, session: MatchSession) -> None:
        self.destroy_session(session.session_id)
