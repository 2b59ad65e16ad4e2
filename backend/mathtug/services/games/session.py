"""One tug-of-war match.

A session owns its rope position, the current question and at most two
pending timers: the round timeout and the synthetic opponent's answer. Both
are cancelled before anything is rescheduled and when the session ends.
"""

import logging
import random
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from .participants import Participant, RealParticipant, SyntheticParticipant
from .questions import Question, generate_question, parse_answer
from .settings import GameSettings


class SessionState(Enum):
    PENDING = 'pending'
    RUNNING = 'running'
    ENDED = 'ended'


class MatchSession:
    def __init__(
        self,
        session_id: str,
        first: Participant,
        second: Participant,
        notifier,
        scheduler,
        settings: Optional[GameSettings] = None,
        question_factory: Optional[Callable[[float], Question]] = None,
        on_end: Optional[Callable[['MatchSession'], None]] = None,
        logger: Optional[logging.Logger] = None,
        rng: Optional[random.Random] = None,
    ):
        self.session_id = session_id
        self.participants: Tuple[Participant, Participant] = (first, second)
        self.notifier = notifier
        self.scheduler = scheduler
        self.settings = settings or GameSettings()
        self.on_end = on_end
        self.logger = logger or logging.getLogger(__name__)
        rng = rng or random.Random()
        self._question_factory = question_factory or (lambda now: generate_question(now, rng))

        self.state = SessionState.PENDING
        self.rope_position = 0.0
        self.current_question: Optional[Question] = None
        self.winner_id: Optional[str] = None
        self.round_timer = None
        self.opponent_timer = None

    @property
    def room(self) -> str:
        return self.session_id

    @property
    def player_ids(self):
        return [p.id for p in self.participants]

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING

    # ---- lifecycle ----

    def start(self) -> None:
        if self.state is not SessionState.PENDING:
            return
        self.state = SessionState.RUNNING
        self.notifier.room(self.room, 'game_start', {
            'players': self.player_ids,
            'ropePosition': self.rope_position,
        })
        self.logger.info(f"[session-start] session={self.session_id} players={self.player_ids}")
        self.round_timer = self.scheduler.call_later(
            self.settings.lead_in_ms / 1000.0, self.advance_question,
            label=f"lead-in:{self.session_id}",
        )

    def advance_question(self) -> None:
        if not self.is_running:
            return
        question = self._question_factory(self.scheduler.now())
        self.current_question = question
        duration = self.settings.question_duration_ms
        self.notifier.room(self.room, 'new_question', {
            'question': question.text,
            'duration': duration,
        })
        self.logger.debug(f"[question] session={self.session_id} text={question.text!r}")

        self._cancel_timers()
        self.round_timer = self.scheduler.call_later(
            (duration + self.settings.round_pause_ms) / 1000.0, self.advance_question,
            label=f"round:{self.session_id}",
        )
        self._schedule_synthetic_answers(question)

    def _schedule_synthetic_answers(self, question: Question) -> None:
        for participant in self.participants:
            if not isinstance(participant, SyntheticParticipant):
                continue
            decision = participant.opponent.decide()
            if decision.delay_ms >= self.settings.question_duration_ms:
                # too slow for this round
                continue
            self.opponent_timer = self.scheduler.call_later(
                decision.delay_ms / 1000.0, self._synthetic_answer,
                participant.id, question, decision.is_correct,
                label=f"opponent:{self.session_id}",
            )

    def _synthetic_answer(self, participant_id: str, question: Question, is_correct: bool) -> None:
        if not self.is_running or self.current_question is not question:
            return
        answer = question.answer if is_correct else question.answer + 1
        self.submit_answer(participant_id, str(answer))

    # ---- answers ----

    def compute_force(self, elapsed_ms: float) -> float:
        duration = self.settings.question_duration_ms
        remaining_fraction = max(0.0, (duration - elapsed_ms) / duration)
        return min(1.0, remaining_fraction) * self.settings.max_force

    def submit_answer(self, participant_id: str, raw_answer: Any) -> Optional[bool]:
        """Adjudicate an answer. Returns None when the submission is ignored."""
        if not self.is_running or self.current_question is None:
            return None
        if participant_id not in self.player_ids:
            return None

        question = self.current_question
        is_correct = parse_answer(raw_answer) == question.answer
        self.notifier.room(self.room, 'player_answer', {
            'playerId': participant_id,
            'isCorrect': is_correct,
            'value': raw_answer,
        })

        if not is_correct:
            self._notify_participant(participant_id, 'answer_result', {'correct': False})
            return False

        elapsed_ms = (self.scheduler.now() - question.issued_at) * 1000.0
        force = self.compute_force(elapsed_ms)
        direction = 1 if participant_id == self.participants[0].id else -1
        limit = self.settings.max_rope
        self.rope_position = max(-limit, min(limit, self.rope_position + force * direction))

        self.notifier.room(self.room, 'rope_update', {
            'ropePosition': self.rope_position,
            'playerId': participant_id,
            'force': force,
        })
        self._notify_participant(participant_id, 'answer_result', {
            'correct': True,
            'force': round(force, 2),
        })
        self.logger.debug(
            f"[answer] session={self.session_id} player={participant_id} force={force:.2f} rope={self.rope_position:.2f}"
        )

        winner_id = self.check_win()
        if winner_id is not None:
            self.end(winner_id)
        else:
            self.advance_question()
        return True

    def check_win(self) -> Optional[str]:
        if self.rope_position >= self.settings.max_rope:
            return self.participants[0].id
        if self.rope_position <= -self.settings.max_rope:
            return self.participants[1].id
        return None

    def _notify_participant(self, participant_id: str, event: str, payload: Dict[str, Any]) -> None:
        for participant in self.participants:
            if participant.id == participant_id and isinstance(participant, RealParticipant):
                self.notifier.participant(participant.id, event, payload)

    # ---- termination ----

    def end(self, winner_id: str) -> None:
        if self.state is SessionState.ENDED:
            return
        self.state = SessionState.ENDED
        self.winner_id = winner_id
        self.current_question = None
        self._cancel_timers()
        self.notifier.room(self.room, 'game_over', {
            'winnerId': winner_id,
            'ropePosition': self.rope_position,
        })
        self.logger.info(f"[game-over] {self.snapshot()}")
        if self.on_end is not None:
            self.on_end(self)

    def teardown(self) -> None:
        """Force ENDED without a winner. Safe in any state."""
        self._cancel_timers()
        if self.state is SessionState.ENDED:
            return
        self.state = SessionState.ENDED
        self.current_question = None
        self.logger.info(f"[teardown] {self.snapshot()}")

    def _cancel_timers(self) -> None:
        for handle in (self.round_timer, self.opponent_timer):
            if handle is not None:
                handle.cancel()
        self.round_timer = None
        self.opponent_timer = None

    def snapshot(self) -> Dict[str, Any]:
        return {
            'session_id': self.session_id,
            'players': self.player_ids,
            'rope_position': self.rope_position,
            'state': self.state.value,
            'question': self.current_question.text if self.current_question else None,
            'winner_id': self.winner_id,
        }
