#!/usr/bin/env python3
"""Solve several boards at once with one shared guess per round.

For Quordle-style games: every guess is played on every unfinished board
and each board reports its own score.

Usage:
    python3 multisolver.py guessable.txt solutions.txt 4
    python3 multisolver.py guessable.txt solutions.txt 4 --strategy groupcount
"""

from __future__ import annotations

import argparse
import logging
import sys
from functools import reduce

from lexicon import WordSet, load_wordset
from strategy import GuessEval, Strategy, combine_evals, evaluate_guess
from wordle_env import (
    Contradiction,
    EmptyGuessSpace,
    IllegalGuess,
    Score,
    WordleEnv,
    coerce_score,
)

log = logging.getLogger(__name__)


class MultiSolver:
    """Track *count* boards and rank guesses across all of them."""

    def __init__(
        self,
        wordset: WordSet,
        count: int,
        strategy: Strategy = Strategy.GROUPSIZE,
    ) -> None:
        if count < 1:
            raise ValueError("need at least one board")
        self._wordset = wordset
        self._strategy = strategy
        self._boards = [WordleEnv(wordset) for _ in range(count)]

    @property
    def boards(self) -> list[WordleEnv]:
        return list(self._boards)

    def unfinished(self) -> list[int]:
        return [i for i, b in enumerate(self._boards) if not b.game_over()]

    def all_done(self) -> bool:
        return not self.unfinished()

    def next_guess(self) -> str:
        """Finish a board whose answer is known, else the best combined guess."""
        active = [self._boards[i] for i in self.unfinished()]
        if not active:
            raise RuntimeError("all boards are solved")
        for board in active:
            if len(board.candidates) == 1:
                return board.candidates[0]

        pools = [b.candidates for b in active]
        best: tuple[int, str] | None = None
        for guess in self._wordset.guessable:
            ev: GuessEval = reduce(
                combine_evals, (evaluate_guess(guess, pool) for pool in pools)
            )
            key = (self._strategy.metric_key(ev), guess)
            if best is None or key < best:
                best = key
        if best is None:
            raise EmptyGuessSpace("no guessable words")
        return best[1]

    def respond_to_score(self, index: int, guess: str, score: Score | str) -> Score:
        """Apply the score board *index* gave for *guess*."""
        board = self._boards[index]
        if board.game_over():
            raise RuntimeError(f"board {index} is already finished")
        score = coerce_score(score)
        board.submit(guess)
        return board.apply_score(score)


# ------------------------------------------------------------------
# CLI
# ------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Solve several Wordle boards at once")
    parser.add_argument("guessable_path", help="The path to the file of guessable strings")
    parser.add_argument("solutions_path", help="The path to the file of possible solutions")
    parser.add_argument("count", type=int, help="How many boards to solve")
    parser.add_argument("--strategy", choices=Strategy.names(), default="groupsize",
                        help="Which solving strategy to use (default: groupsize)")
    parser.add_argument("--enter-guesses", action="store_true",
                        help="Manually enter guesses instead of using the generated ones")
    parser.add_argument("--verbose", action="store_true", help="Log remaining candidates")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    from play import read_score

    wordset = load_wordset(args.guessable_path, args.solutions_path)
    solver = MultiSolver(wordset, args.count, Strategy.from_name(args.strategy))

    while not solver.all_done():
        print("=" * 30)
        recommended = solver.next_guess()
        if args.enter_guesses:
            print(f"Recommended: {recommended}")
            guess = _read_guess(wordset)
        else:
            guess = recommended
            print(f"Guess: {guess}")

        for index in solver.unfinished():
            print(f"Need score for index {index}")
            try:
                solver.respond_to_score(index, guess, read_score())
            except Contradiction as exc:
                print(f"Contradiction on board {index}: {exc}", file=sys.stderr)
                sys.exit(1)

    print("Win!")


def _read_guess(wordset: WordSet) -> str:
    env = WordleEnv(wordset)
    while True:
        try:
            return env.check_guess(input("Guess: "))
        except IllegalGuess as exc:
            print(exc)


if __name__ == "__main__":
    main()
