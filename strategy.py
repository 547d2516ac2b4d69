"""Guess-selection strategies and per-game configuration."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from wordle_env import Score, feedback


class Strategy(Enum):
    """How a guess is ranked from the partition it induces on the pool.

    ``GROUPSIZE`` minimises the largest group (worst case).
    ``GROUPCOUNT`` maximises the number of distinct groups, a cheap proxy
    for expected information.
    """

    GROUPSIZE = "groupsize"
    GROUPCOUNT = "groupcount"

    @classmethod
    def from_name(cls, name: str) -> Strategy:
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(repr(s.value) for s in cls)
            raise ValueError(f"strategies are {choices}, got {name!r}") from None

    @classmethod
    def names(cls) -> list[str]:
        return [s.value for s in cls]

    def metric_key(self, ev: GuessEval) -> int:
        """Sort key for *ev*: lower is better."""
        if self is Strategy.GROUPSIZE:
            return ev.size
        return -ev.count


@dataclass(frozen=True)
class GuessEval:
    """Shape of the partition a guess induces.

    Attributes
    ----------
    count : int
        Number of distinct scores (non-empty groups).
    size : int
        Size of the largest group.
    """

    count: int
    size: int


def evaluate_guess(guess: str, candidates: Iterable[str]) -> GuessEval:
    """Group *candidates* by the score *guess* would get and measure the groups."""
    groups = Counter(feedback(guess, c) for c in candidates)
    if not groups:
        return GuessEval(count=0, size=0)
    return GuessEval(count=len(groups), size=max(groups.values()))


def combine_evals(a: GuessEval, b: GuessEval) -> GuessEval:
    """Merge evals of one guess over two boards.

    Group counts add up; the worst case is the larger of the two.
    """
    return GuessEval(count=a.count + b.count, size=max(a.size, b.size))


def partition(guess: str, candidates: Iterable[str]) -> dict[Score, list[str]]:
    """Map each score to the candidates that would produce it, in pool order."""
    groups: dict[Score, list[str]] = defaultdict(list)
    for c in candidates:
        groups[feedback(guess, c)].append(c)
    return dict(groups)


@dataclass(frozen=True)
class GameConfig:
    """Settings a solver plays one game with.

    Attributes
    ----------
    strategy : Strategy
        Ranking rule for guesses.
    hard_mode : bool
        Only guess words consistent with every score seen so far.
    max_guesses : int
        Guess budget used to flag a game as solved in batch reports.
        Games are still played through to the win.
    max_workers : int or None
        Worker count used to split per-turn ranking into chunks when an
        executor is supplied. ``None`` means ``os.cpu_count()``.
    """

    strategy: Strategy = Strategy.GROUPSIZE
    hard_mode: bool = False
    max_guesses: int = 6
    max_workers: int | None = None

    @property
    def label(self) -> str:
        return f"{self.strategy.value}{' (hard)' if self.hard_mode else ''}"
