"""
Round engine: colour selection, guess evaluation, score and lives
"""
import enum
import logging
import random
from typing import Dict, List, Optional, Tuple

from .deltae import get_diff

logger = logging.getLogger("hueguess")

RGB = Tuple[int, int, int]

MAX_HEARTS = 7
NUM_OPTIONS = 6
# Every pair of options must be at least this far apart
MIN_SEPARATION = 10
# Rejected candidates before a round is thrown away and regenerated
MAX_ATTEMPTS = 10_000

# Acceptable distance band between the answer and each decoy
DIFFICULTIES: Dict[str, Dict[str, float]] = {
    "easy": {"min": 40, "max": 60},
    "medium": {"min": 20, "max": 40},
    "hard": {"min": 10, "max": 20},
}


class GuessOutcome(enum.Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    ALREADY_GUESSED = "already_guessed"
    INVALID = "invalid"

    @property
    def valid(self) -> bool:
        return self in (GuessOutcome.CORRECT, GuessOutcome.INCORRECT)


def is_difficulty(difficulty) -> bool:
    return isinstance(difficulty, str) and difficulty in DIFFICULTIES


def choose_random_rgb(rng: Optional[random.Random] = None) -> RGB:
    """Choose a random RGB colour"""
    rng = rng or random
    return (rng.randrange(256), rng.randrange(256), rng.randrange(256))


def rgb_to_hex(rgb: RGB) -> str:
    """Convert RGB to an upper case #RRGGBB string"""
    return "#" + "".join(f"{v:02X}" for v in rgb)


class Game:
    """
    One multiplayer game: the current round plus score and lives that
    carry across rounds until the lives run out.
    """

    def __init__(
        self,
        difficulty: str = "medium",
        background: Optional[RGB] = None,
        rng: Optional[random.Random] = None,
    ):
        if not is_difficulty(difficulty):
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        self.difficulty = difficulty
        self.background = background
        self.rng = rng or random.Random()
        self.answer: RGB = (0, 0, 0)
        self.colors: List[RGB] = []
        self.guessed: List[bool] = []
        self.lives = MAX_HEARTS
        self.score = 0
        self.new_round()

    @property
    def band(self) -> Tuple[float, float]:
        tier = DIFFICULTIES[self.difficulty]
        return tier["min"], tier["max"]

    def is_over(self) -> bool:
        return self.lives <= 0

    def _acceptable(self, color: RGB, low: float, high: float) -> bool:
        answer_diff = get_diff(color, self.answer)
        if not low < answer_diff < high:
            return False
        if any(get_diff(color, c) <= MIN_SEPARATION for c in self.colors):
            return False
        if self.background is not None and get_diff(color, self.background) <= MIN_SEPARATION:
            return False
        return True

    def _try_choose_colors(self) -> bool:
        low, high = self.band
        self.answer = choose_random_rgb(self.rng)
        self.colors = [self.answer]
        if self.background is not None and get_diff(self.answer, self.background) <= MIN_SEPARATION:
            return False

        attempts = 0
        while len(self.colors) < NUM_OPTIONS:
            if attempts >= MAX_ATTEMPTS:
                return False
            attempts += 1
            color = choose_random_rgb(self.rng)
            if self._acceptable(color, low, high):
                self.colors.append(color)
        return True

    def new_round(self) -> None:
        """Pick a fresh answer and decoys; score and lives are untouched"""
        # Some answers (near-black, near-white) have too few neighbours in
        # the band, so start over with a new answer.
        while not self._try_choose_colors():
            logger.debug(f"Colour generation stuck for {rgb_to_hex(self.answer)}, starting over")

        self.rng.shuffle(self.colors)
        self.guessed = [False] * NUM_OPTIONS

    def answer_index(self) -> int:
        return self.colors.index(self.answer)

    def guess(self, index) -> GuessOutcome:
        """
        Evaluate a guess against the current round

        A correct guess scores a point and starts a new round. A wrong one
        eliminates that option and costs a life. Invalid and repeated
        guesses change nothing.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            return GuessOutcome.INVALID
        if not 0 <= index < len(self.colors):
            return GuessOutcome.INVALID
        if self.guessed[index]:
            return GuessOutcome.ALREADY_GUESSED

        if self.colors[index] == self.answer:
            self.score += 1
            self.new_round()
            return GuessOutcome.CORRECT

        self.guessed[index] = True
        self.lives -= 1
        return GuessOutcome.INCORRECT

    def view(self, host: bool) -> dict:
        """
        Build the `state` payload for one recipient.

        The host gets the palette to click on, guessers get the answer so
        they can follow along. Nobody gets both.
        """
        return {
            "type": "state",
            "score": self.score,
            "lives": self.lives,
            "difficulty": self.difficulty,
            "answer": None if host else list(self.answer),
            "colors": [list(c) for c in self.colors] if host else None,
        }
