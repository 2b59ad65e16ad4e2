import random
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, eq=False)
class Question:
    text: str
    answer: int
    issued_at: float


def generate_question(issued_at: float, rng: Optional[random.Random] = None) -> Question:
    """Random addition or subtraction with operands in [1, 10].

    Subtraction always puts the larger operand first, so answers are never negative.
    """
    rng = rng or random
    a = rng.randint(1, 10)
    b = rng.randint(1, 10)
    if rng.random() > 0.5:
        return Question(text=f"{a} + {b}", answer=a + b, issued_at=issued_at)
    if a < b:
        a, b = b, a
    return Question(text=f"{a} - {b}", answer=a - b, issued_at=issued_at)


def parse_answer(raw: Any) -> Optional[int]:
    """Parse a free-form client answer; None when it is not an integer."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return None
