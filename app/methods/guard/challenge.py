# /app/methods/guard/challenge.py
import random
from dataclasses import dataclass
from typing import Optional

from configs.guard_config import GuardConfig, guard_config


@dataclass(frozen=True)
class Challenge:
    prompt: str
    answer: str
    kind: str  # arithmetic|word


class ChallengeGenerator:
    """Builds the small human-verification prompts shown next to the form."""

    def __init__(self, cfg: GuardConfig = guard_config, rng: Optional[random.Random] = None) -> None:
        self.cfg = cfg
        self.rng = rng or random.SystemRandom()

    def new(self) -> Challenge:
        if not self.cfg.word_bank or self.rng.random() < self.cfg.arithmetic_ratio:
            return self._arithmetic()
        return self._word()

    def _arithmetic(self) -> Challenge:
        op = self.rng.random()
        if op < 0.5:
            a, b = self.rng.randint(3, 12), self.rng.randint(2, 11)
            return Challenge(f"{a} + {b} = ?", str(a + b), "arithmetic")
        if op < 0.75:
            # a >= 8 > 6 >= b, always positive
            a, b = self.rng.randint(8, 15), self.rng.randint(2, 6)
            return Challenge(f"{a} - {b} = ?", str(a - b), "arithmetic")
        a, b = self.rng.randint(2, 6), self.rng.randint(2, 6)
        return Challenge(f"{a} × {b} = ?", str(a * b), "arithmetic")

    def _word(self) -> Challenge:
        word = self.rng.choice(self.cfg.word_bank)
        noun = "number" if word.isdigit() else "word"
        return Challenge(f'Type the {noun} "{word}"', word, "word")
