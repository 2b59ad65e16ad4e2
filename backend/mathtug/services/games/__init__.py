"""Game domain services: matchmaking, match sessions and timers.

Transport concerns stay in ``socketio_events``; everything here talks to the
outside world only through a notifier and a scheduler.
"""

from .hub import GameHub
from .matchmaker import Matchmaker, QueueEntry
from .notifier import SocketIONotifier
from .participants import (Decision, RealParticipant, SyntheticOpponent,
                           SyntheticParticipant)
from .questions import Question, generate_question, parse_answer
from .registry import SessionRegistry
from .scheduler import SocketIOScheduler, TimerHandle
from .session import MatchSession, SessionState
from .settings import GameSettings
