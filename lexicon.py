"""Word-list loading.

Two plain-text lists are read, one word per line:
  - guessable words (anything the game accepts as a guess)
  - possible solutions

The loader folds the solutions into the guessable set, since the usual
"allowed guesses" list excludes them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Iterable

from wordle_env import WORD_LENGTH

log = logging.getLogger(__name__)

_WORD_RE = re.compile(rf"^[a-z]{{{WORD_LENGTH}}}$")


class InvalidWordList(ValueError):
    """A word list is malformed, or the two lists do not fit together."""


# ------------------------------------------------------------------
# WordSet dataclass
# ------------------------------------------------------------------

@dataclass(frozen=True)
class WordSet:
    """Guessable words and possible solutions, sorted and deduplicated."""
    guessable: tuple[str, ...]
    solutions: tuple[str, ...]

    def __post_init__(self) -> None:
        missing = set(self.solutions) - set(self.guessable)
        if missing:
            raise InvalidWordList(
                f"{len(missing)} solution(s) are not guessable, e.g. {sorted(missing)[:5]}"
            )
        if not self.solutions:
            raise InvalidWordList("the solution list is empty")

    @classmethod
    def from_lists(cls, guessable: Iterable[str], solutions: Iterable[str]) -> WordSet:
        sols = sorted(set(solutions))
        return cls(
            guessable=tuple(sorted(set(guessable) | set(sols))),
            solutions=tuple(sols),
        )

    @cached_property
    def guessable_set(self) -> frozenset[str]:
        return frozenset(self.guessable)

    @cached_property
    def solution_set(self) -> frozenset[str]:
        return frozenset(self.solutions)


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------

def load_word_list(path: str | Path) -> list[str]:
    """Read one word per line, keeping file order and dropping duplicates.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    InvalidWordList
        If a non-blank line is not ``WORD_LENGTH`` lowercase ASCII letters.
    """
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(f"Word list not found: {src}")

    seen: set[str] = set()
    words: list[str] = []
    for lineno, raw in enumerate(src.read_text(encoding="utf-8").splitlines(), 1):
        w = raw.rstrip()
        if not w:
            continue
        if not _WORD_RE.match(w):
            raise InvalidWordList(
                f"{src}:{lineno}: invalid word {w!r} "
                f"(must be {WORD_LENGTH} lowercase letters)"
            )
        if w in seen:
            continue
        seen.add(w)
        words.append(w)

    if not words:
        raise InvalidWordList(f"No {WORD_LENGTH}-letter words found in {src}")
    return words


def load_wordset(guessable_path: str | Path, solutions_path: str | Path) -> WordSet:
    """Load both lists and build the :class:`WordSet`."""
    guessable = load_word_list(guessable_path)
    solutions = load_word_list(solutions_path)
    wordset = WordSet.from_lists(guessable, solutions)
    log.info(
        "Loaded %d guessable words (%d from %s) and %d solutions from %s",
        len(wordset.guessable), len(guessable), guessable_path,
        len(wordset.solutions), solutions_path,
    )
    return wordset
