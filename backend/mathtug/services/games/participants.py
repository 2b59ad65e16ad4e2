import random
import string
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Union


class Decision(NamedTuple):
    delay_ms: float
    is_correct: bool


class SyntheticOpponent:
    """Random stand-in for a human player.

    Reaction time is uniform in [min_delay_ms, max_delay_ms) and each answer
    is correct with probability ``skill_level``.
    """

    def __init__(self, skill_level: float = 0.7, min_delay_ms: int = 1000,
                 max_delay_ms: int = 4000, rng: Optional[random.Random] = None):
        self.skill_level = skill_level
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self._rng = rng or random.Random()

    def decide(self) -> Decision:
        delay = self.min_delay_ms + self._rng.random() * (self.max_delay_ms - self.min_delay_ms)
        return Decision(delay_ms=delay, is_correct=self._rng.random() < self.skill_level)


@dataclass(frozen=True)
class RealParticipant:
    # Socket.IO sid of the connection
    id: str


@dataclass(frozen=True)
class SyntheticParticipant:
    id: str
    opponent: SyntheticOpponent = field(compare=False)


Participant = Union[RealParticipant, SyntheticParticipant]


def new_synthetic_id(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return 'AI_' + ''.join(rng.choices(string.ascii_lowercase + string.digits, k=5))
