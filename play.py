#!/usr/bin/env python3
"""Play one game with the solver's suggestions.

Scores come from one of three places:
  - typed in after each guess (``a`` absent, ``p`` present, ``c`` correct)
  - computed against a known secret (``--secret``)
  - the Absurdle adversary (``--absurdle``)

Usage:
    python3 play.py guessable.txt solutions.txt
    python3 play.py guessable.txt solutions.txt --hard-mode --strategy groupcount
    python3 play.py guessable.txt solutions.txt --secret cargo --max-guesses 6
    python3 play.py guessable.txt solutions.txt --workers 8
    python3 play.py guessable.txt solutions.txt --absurdle --enter-guesses
"""

from __future__ import annotations

import argparse
import logging
import sys
from concurrent.futures import ProcessPoolExecutor
from contextlib import ExitStack
from typing import Callable

from absurdle import AbsurdleEnv
from lexicon import load_wordset
from solver import Solver
from strategy import GameConfig, Strategy
from wordle_env import (
    Contradiction,
    EmptyGuessSpace,
    IllegalGuess,
    MalformedScore,
    Score,
    WordleEnv,
    format_score,
    parse_score,
)

log = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def read_score(input_fn: InputFn = input, output: OutputFn = print) -> Score:
    """Prompt until a well-formed score is entered."""
    while True:
        try:
            return parse_score(input_fn("Score: "))
        except MalformedScore as exc:
            output(str(exc))


def read_guess(env: WordleEnv, input_fn: InputFn = input, output: OutputFn = print) -> str:
    """Prompt until the game accepts the guess; the guess is then pending."""
    while True:
        try:
            return env.submit(input_fn("Guess: "))
        except IllegalGuess as exc:
            output(str(exc))


def play_session(
    env: WordleEnv,
    solver: Solver,
    enter_guesses: bool = False,
    input_fn: InputFn = input,
    output: OutputFn = print,
) -> int:
    """Run *env* until it is won or out of guesses; return the guesses used.

    Raises
    ------
    Contradiction
        If the supplied scores leave no candidate.
    """
    while not env.game_over():
        recommended = solver.next_guess(env)
        if enter_guesses:
            output(f"Recommended: {recommended}")
            guess = read_guess(env, input_fn, output)
        else:
            guess = env.submit(recommended)
            output(f"Guess: {guess}")

        if env.scores_itself:
            score = env.pending_score()
            output(f"Score: {format_score(score)}")
        else:
            score = read_score(input_fn, output)
        env.apply_score(score)

        candidates = env.candidates
        if not env.is_solved():
            if len(candidates) <= 10:
                output(f"Possibilities left: {', '.join(candidates)}")
            else:
                output(f"{len(candidates)} possibilities left")

    output("Win!" if env.is_solved() else "Out of guesses!")
    return len(env.history)


# ------------------------------------------------------------------
# CLI
# ------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Solve wordle")
    parser.add_argument("guessable_path", help="The path to the file of guessable strings")
    parser.add_argument("solutions_path", help="The path to the file of possible solutions")
    parser.add_argument("--strategy", choices=Strategy.names(), default="groupsize",
                        help="Which solving strategy to use (default: groupsize)")
    parser.add_argument("--hard-mode", action="store_true",
                        help="Guesses must use all previously gained information")
    parser.add_argument("--secret", type=str, default=None,
                        help="Score guesses against this word instead of asking")
    parser.add_argument("--absurdle", action="store_true",
                        help="Let the Absurdle adversary score the guesses")
    parser.add_argument("--max-guesses", type=int, default=None,
                        help="Stop after this many guesses (default: play until solved)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Processes used to rank guesses (default: CPU count; 1 ranks inline)")
    parser.add_argument("--enter-guesses", action="store_true",
                        help="Manually enter guesses instead of using the generated ones")
    parser.add_argument("--verbose", action="store_true", help="Print debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    if args.absurdle and args.secret:
        parser.error("--secret cannot be combined with --absurdle")

    if args.max_guesses is not None and args.max_guesses < 1:
        parser.error("--max-guesses must be at least 1")
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    wordset = load_wordset(args.guessable_path, args.solutions_path)
    config = GameConfig(
        strategy=Strategy.from_name(args.strategy),
        hard_mode=args.hard_mode,
        max_workers=args.workers,
    )

    if args.absurdle:
        env: WordleEnv = AbsurdleEnv(
            wordset, hard_mode=args.hard_mode, max_guesses=args.max_guesses,
        )
    else:
        env = WordleEnv(wordset, hard_mode=args.hard_mode, max_guesses=args.max_guesses)
        try:
            env.reset(secret=args.secret)
        except ValueError as exc:
            parser.error(str(exc))

    with ExitStack() as stack:
        executor = None
        if args.workers != 1:
            executor = stack.enter_context(ProcessPoolExecutor(max_workers=args.workers))
        solver = Solver(wordset, config, executor=executor)
        try:
            used = play_session(env, solver, enter_guesses=args.enter_guesses)
        except Contradiction as exc:
            print(f"Contradiction: {exc}. The scores entered are inconsistent.", file=sys.stderr)
            sys.exit(1)
        except EmptyGuessSpace as exc:
            print(f"Configuration error: {exc}", file=sys.stderr)
            sys.exit(1)
        except (EOFError, KeyboardInterrupt):
            print(file=sys.stderr)
            sys.exit(130)

    if not env.is_solved():
        if args.secret:
            print(f"The word was {args.secret}")
        sys.exit(1)
    log.info("Solved in %d guesses (%s)", used, config.label)


if __name__ == "__main__":
    main()
