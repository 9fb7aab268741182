"""Human-shareable session codes."""

import random
from dataclasses import dataclass, field

CODE_WORDS: tuple[str, ...] = (
    "oak",
    "river",
    "bloom",
    "sky",
    "stone",
    "moss",
    "tide",
    "grove",
    "glow",
    "dawn",
)
_NUMBER_LOW = 100
_NUMBER_HIGH = 999


@dataclass
class CodeGenerator:
    """Draws ``word-word-NNN`` codes. Uniqueness is checked by the caller."""

    words: tuple[str, ...] = CODE_WORDS
    rng: random.Random = field(default_factory=random.Random)
    separator: str = "-"

    @property
    def keyspace(self) -> int:
        """Number of distinct codes this generator can produce."""
        return len(self.words) ** 2 * (_NUMBER_HIGH - _NUMBER_LOW + 1)

    def generate(self) -> str:
        """Return a random code such as ``"oak-river-247"``."""
        first = self.rng.choice(self.words)
        second = self.rng.choice(self.words)
        number = self.rng.randint(_NUMBER_LOW, _NUMBER_HIGH)
        return self.separator.join((first, second, str(number)))


def generate_code() -> str:
    """Return a code from a default generator."""
    return CodeGenerator().generate()


def normalize_code(raw: str) -> str:
    """Normalize user input before lookup; codes are generated lower-case."""
    return raw.strip().lower()
