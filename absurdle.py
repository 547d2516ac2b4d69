#!/usr/bin/env python3
"""Absurdle: an adversary that answers each guess so as to keep the game going.

There is no fixed secret. For every guess the adversary groups the
remaining candidates by the score they would produce and reports the
score of the largest group. Ties go to the score that gives away the
least: fewest correct letters, then fewest present letters, then the
lexicographically smallest symbols (absent < present < correct).

Challenge mode asks for a sequence of guesses that steers the adversary
onto a chosen target word; :class:`ChallengeSolver` searches for one.

Usage:
    python3 absurdle.py guessable.txt solutions.txt table
    python3 absurdle.py guessable.txt solutions.txt table --hard-mode
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Sequence

from lexicon import WordSet, load_wordset
from strategy import partition
from wordle_env import (
    Contradiction,
    Score,
    ScoreSymbol,
    WordleEnv,
    feedback,
    filter_candidates,
    format_score,
    legal_guesses,
    score_index,
)

log = logging.getLogger(__name__)


def score_order_key(score: Score) -> tuple[int, int, int]:
    """Tie-break among equally large groups; the smallest key is reported."""
    return (
        sum(1 for s in score if s is ScoreSymbol.CORRECT),
        sum(1 for s in score if s is ScoreSymbol.PRESENT),
        score_index(score),
    )


def _pick_score(groups: dict[Score, list[str]]) -> Score:
    return min(groups, key=lambda s: (-len(groups[s]), score_order_key(s)))


def adversarial_score(guess: str, candidates: Iterable[str]) -> Score:
    """Return the score the adversary reports for *guess*."""
    groups = partition(guess, candidates)
    if not groups:
        raise Contradiction("the candidate pool is empty")
    return _pick_score(groups)


class AbsurdleEnv(WordleEnv):
    """A game in which :func:`adversarial_score` supplies every score.

    The game is won once the pool is down to one word and that word is
    guessed. Hard mode constrains the player exactly as in Wordle.
    """

    def reset(self, secret: str | None = None) -> None:
        if secret is not None:
            raise ValueError("Absurdle has no fixed secret")
        super().reset()

    @property
    def scores_itself(self) -> bool:
        return True

    def pending_score(self) -> Score:
        if self._pending is None:
            raise RuntimeError("no guess is awaiting a score")
        return adversarial_score(self._pending, self._candidates)


class ChallengeSolver:
    """Find guesses that force the adversary to end on *target*.

    At each step only guesses whose adversarial score keeps *target* alive
    are considered, and of those only the ones that eliminate the most
    candidates. The search backtracks through ties in alphabetical order.
    The target itself is only guessed once it is the last candidate.
    """

    def __init__(
        self,
        wordset: WordSet,
        target: str,
        hard_mode: bool = False,
        max_guesses: int | None = None,
    ) -> None:
        if target not in wordset.solution_set:
            raise ValueError(f"target {target!r} is not a possible solution")
        self._wordset = wordset
        self._target = target
        self._hard_mode = hard_mode
        self._max_guesses = max_guesses

    @property
    def target(self) -> str:
        return self._target

    def next_guesses(
        self,
        candidates: Sequence[str],
        history: Sequence[tuple[str, Score]] = (),
    ) -> list[str]:
        """Guesses that keep the target and eliminate the most candidates."""
        if len(candidates) == 1:
            return list(candidates)

        best: list[str] = []
        most_eliminated = 0
        for guess in legal_guesses(self._wordset.guessable, history, self._hard_mode):
            if guess == self._target:
                continue
            groups = partition(guess, candidates)
            score = _pick_score(groups)
            if score != feedback(guess, self._target):
                # Would eliminate the target.
                continue
            eliminated = len(candidates) - len(groups[score])
            if eliminated > most_eliminated:
                most_eliminated = eliminated
                best = [guess]
            elif eliminated == most_eliminated and eliminated > 0:
                best.append(guess)
        return best

    def solve(self) -> list[str] | None:
        """Return the winning guess sequence (ending in the target), or None."""
        return self._search(list(self._wordset.solutions), [])

    def _search(
        self,
        candidates: list[str],
        history: list[tuple[str, Score]],
    ) -> list[str] | None:
        used = len(history)
        if len(candidates) == 1:
            if self._max_guesses is not None and used + 1 > self._max_guesses:
                return None
            return [self._target]
        if self._max_guesses is not None and used + 2 > self._max_guesses:
            return None

        for guess in self.next_guesses(candidates, history):
            score = feedback(guess, self._target)
            remaining = filter_candidates(candidates, guess, score)
            log.debug(
                "%s%s %s -> %d left",
                "  " * used, guess, format_score(score), len(remaining),
            )
            found = self._search(remaining, history + [(guess, score)])
            if found is not None:
                return [guess] + found
        log.debug("%sdead end after %d guesses", "  " * used, used)
        return None


# ------------------------------------------------------------------
# CLI
# ------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Solve Absurdle challenge mode")
    parser.add_argument("guessable_path", help="The path to the file of guessable strings")
    parser.add_argument("solutions_path", help="The path to the file of possible solutions")
    parser.add_argument("target_word", help="The target word")
    parser.add_argument("--hard-mode", action="store_true",
                        help="Guesses must use all previously gained information")
    parser.add_argument("--max-guesses", type=int, default=None,
                        help="Give up on sequences longer than this")
    parser.add_argument("--verbose", action="store_true", help="Log the search tree")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    wordset = load_wordset(args.guessable_path, args.solutions_path)
    try:
        solver = ChallengeSolver(wordset, args.target_word, args.hard_mode, args.max_guesses)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        sys.exit(2)

    path = solver.solve()
    if path is None:
        print("Total failure!")
        sys.exit(1)

    env = AbsurdleEnv(wordset, hard_mode=args.hard_mode)
    for word in path:
        score = env.guess(word)
        print(f"{word} {format_score(score)}")
    print(f"{args.target_word} ✔ in {len(path)} guesses")


if __name__ == "__main__":
    main()
