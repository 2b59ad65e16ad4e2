from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class GameSettings:
    """Gameplay tunables shared by sessions and the matchmaker."""

    question_duration_ms: int = 10000
    round_pause_ms: int = 2000
    lead_in_ms: int = 1000
    max_force: float = 15.0
    max_rope: float = 100.0
    ai_fallback_sec: float = 5.0
    matchmaker_tick_sec: float = 1.0
    ai_skill_level: float = 0.7
    ai_min_delay_ms: int = 1000
    ai_max_delay_ms: int = 4000

    def __post_init__(self):
        if self.question_duration_ms <= 0:
            raise ValueError('question_duration_ms must be positive')
        if self.max_rope <= 0:
            raise ValueError('max_rope must be positive')
        if self.ai_min_delay_ms > self.ai_max_delay_ms:
            raise ValueError('ai_min_delay_ms must not exceed ai_max_delay_ms')
        if not 0.0 <= self.ai_skill_level <= 1.0:
            raise ValueError('ai_skill_level must be within [0, 1]')
        if self.matchmaker_tick_sec <= 0:
            raise ValueError('matchmaker_tick_sec must be positive')

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'GameSettings':
        """Build settings from a Flask config, e.g. QUESTION_DURATION_MS -> question_duration_ms."""
        values = {}
        for f in fields(cls):
            key = f.name.upper()
            if key in config and config[key] is not None:
                values[f.name] = type(f.default)(config[key])
        return cls(**values)
