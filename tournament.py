#!/usr/bin/env python3
"""Solve every possible secret with both strategies and compare them.

Features:
  - Plays groupsize and groupcount against each solution word.
  - Normal mode, hard mode, or both.
  - Splits the secrets across worker processes.
  - Outputs guess-count histograms, a head-to-head record, CSV/JSON and a plot.
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import os
import sys
import time as _time_mod
from collections import Counter, defaultdict
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from lexicon import WordSet, load_wordset
from solver import Solver
from strategy import GameConfig, Strategy
from wordle_env import WordleEnv

log = logging.getLogger(__name__)

RESULTS_DIR = Path.cwd() / "results"


# ------------------------------------------------------------------
# Result containers
# ------------------------------------------------------------------

@dataclass
class GameResult:
    strategy: str
    hard_mode: bool
    secret: str
    num_guesses: int
    solved: bool
    guesses: list[str] = field(default_factory=list)

    @property
    def variant(self) -> str:
        return GameConfig(Strategy(self.strategy), self.hard_mode).label


@dataclass
class TournamentResults:
    games: list[GameResult] = field(default_factory=list)

    def variants(self) -> list[str]:
        return sorted({g.variant for g in self.games})

    def by_variant(self) -> dict[str, list[GameResult]]:
        grouped: dict[str, list[GameResult]] = defaultdict(list)
        for g in self.games:
            grouped[g.variant].append(g)
        return dict(grouped)

    def histogram(self, strategy: Strategy, hard_mode: bool = False) -> list[int]:
        """``counts[n]`` is the number of secrets solved in exactly *n* guesses."""
        counts = Counter(
            g.num_guesses for g in self.games
            if g.strategy == strategy.value and g.hard_mode == hard_mode
        )
        if not counts:
            return []
        hist = [0] * (max(counts) + 1)
        for n, c in counts.items():
            hist[n] = c
        return hist

    def record(self, hard_mode: bool = False) -> tuple[int, int, int]:
        """Head-to-head over shared secrets: (groupcount wins, groupsize wins, ties)."""
        size = {
            g.secret: g.num_guesses for g in self.games
            if g.strategy == Strategy.GROUPSIZE.value and g.hard_mode == hard_mode
        }
        count = {
            g.secret: g.num_guesses for g in self.games
            if g.strategy == Strategy.GROUPCOUNT.value and g.hard_mode == hard_mode
        }
        count_wins = size_wins = ties = 0
        for secret in size.keys() & count.keys():
            if count[secret] < size[secret]:
                count_wins += 1
            elif size[secret] < count[secret]:
                size_wins += 1
            else:
                ties += 1
        return count_wins, size_wins, ties

    def to_csv(self, path: str | Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["strategy", "hard_mode", "secret", "num_guesses", "solved", "guesses"])
            for g in self.games:
                writer.writerow([
                    g.strategy, int(g.hard_mode), g.secret, g.num_guesses,
                    int(g.solved), " ".join(g.guesses),
                ])

    def print_summary(self) -> None:
        print(f"\n{'Variant':<20} {'Games':>6} {'Solved':>7} {'Rate':>6} "
              f"{'Mean':>6} {'Median':>7} {'Max':>5}")
        print("-" * 66)
        # Sort by mean guesses (ascending = best first)
        ranking = sorted(
            self.by_variant().items(),
            key=lambda kv: sum(r.num_guesses for r in kv[1]) / len(kv[1]),
        )
        for name, results in ranking:
            n = len(results)
            solved = sum(1 for r in results if r.solved)
            guesses = sorted(r.num_guesses for r in results)
            mean = sum(guesses) / n
            median = guesses[n // 2] if n % 2 == 1 else (
                guesses[n // 2 - 1] + guesses[n // 2]
            ) / 2
            rate = 100 * solved / n
            print(f"{name:<20} {n:>6} {solved:>6}  {rate:>5.1f}% "
                  f"{mean:>6.2f} {median:>7.1f} {max(guesses):>5}")
        print()

        for hard_mode in sorted({g.hard_mode for g in self.games}):
            tag = " (hard)" if hard_mode else ""
            for strategy in Strategy:
                hist = self.histogram(strategy, hard_mode)
                if hist:
                    print(f"{strategy.value.upper() + tag + ':':<20} {hist}")
            cw, sw, ties = self.record(hard_mode)
            if cw or sw or ties:
                print(f"RECORD{tag} (count wins - size wins - tie): [{cw}, {sw}, {ties}]")
        print()

    def plot_histograms(self, path: str | Path | None = None) -> None:
        """One bar chart per variant; games over the guess budget are stacked in red."""
        try:
            import matplotlib
            matplotlib.use("Agg")
            import matplotlib.pyplot as plt
        except ImportError:
            print("matplotlib not installed, skipping plot", file=sys.stderr)
            return

        grouped = self.by_variant()
        if not grouped:
            return

        names = sorted(grouped)
        fig, axes = plt.subplots(
            1, len(names), figsize=(4 * len(names), 3.5), sharey=True, squeeze=False,
        )
        xs = list(range(1, max(g.num_guesses for g in self.games) + 1))

        for ax, name in zip(axes[0], names):
            games = grouped[name]
            solved = Counter(g.num_guesses for g in games if g.solved)
            failed = Counter(g.num_guesses for g in games if not g.solved)
            heights = [solved[x] for x in xs]
            ax.bar(xs, heights, color="tab:blue", edgecolor="black", label="solved")
            ax.bar(xs, [failed[x] for x in xs], bottom=heights,
                   color="tab:red", edgecolor="black", label="over budget")
            mean = sum(g.num_guesses for g in games) / len(games)
            ax.set_title(f"{name} (mean {mean:.2f})", fontsize=10)
            ax.set_xticks(xs)
            ax.set_xlabel("Guesses")
        axes[0][0].set_ylabel("Secrets")
        axes[0][0].legend()

        fig.tight_layout()
        dest = Path(path) if path else RESULTS_DIR / "tournament_histograms.png"
        dest.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(dest, dpi=150)
        plt.close(fig)
        print(f"Histogram saved to {dest}")

    def to_json(self, path: str | Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "games": [asdict(g) for g in self.games],
            "histograms": {
                f"{s.value}{'_hard' if h else ''}": self.histogram(s, h)
                for s in Strategy for h in (False, True)
                if self.histogram(s, h)
            },
        }
        p.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


# ------------------------------------------------------------------
# Playing games
# ------------------------------------------------------------------

def play_game(wordset: WordSet, config: GameConfig, secret: str) -> GameResult:
    """Let the solver play against *secret* until it wins."""
    env = WordleEnv(wordset, hard_mode=config.hard_mode)
    env.reset(secret=secret)
    solver = Solver(wordset, config)
    while not env.is_solved():
        env.guess(solver.next_guess(env))
    guesses = [g for g, _ in env.history]
    return GameResult(
        strategy=config.strategy.value,
        hard_mode=config.hard_mode,
        secret=secret,
        num_guesses=len(guesses),
        solved=len(guesses) <= config.max_guesses,
        guesses=guesses,
    )


def _run_secrets_worker(
    guessable: Sequence[str],
    solutions: Sequence[str],
    secrets: list[str],
    variants: list[tuple[str, bool]],
    max_guesses: int,
) -> list[GameResult]:
    """Play every variant against every secret in *secrets*. Executed in a subprocess."""
    wordset = WordSet(guessable=tuple(guessable), solutions=tuple(solutions))
    configs = [
        GameConfig(strategy=Strategy(name), hard_mode=hard, max_guesses=max_guesses)
        for name, hard in variants
    ]
    results: list[GameResult] = []
    for secret in secrets:
        for config in configs:
            results.append(play_game(wordset, config, secret))
    return results


# ------------------------------------------------------------------
# Tournament runner
# ------------------------------------------------------------------

def run_tournament(
    wordset: WordSet,
    secrets: Iterable[str] | None = None,
    strategies: Iterable[Strategy] = tuple(Strategy),
    hard_modes: Iterable[bool] = (False,),
    max_guesses: int = 6,
    max_workers: int | None = None,
) -> TournamentResults:
    """Play each (strategy, hard mode) variant against each secret.

    ``max_workers=1`` runs everything in this process.
    """
    secrets = list(wordset.solutions if secrets is None else secrets)
    unknown = [s for s in secrets if s not in wordset.solution_set]
    if unknown:
        raise ValueError(f"not possible solutions: {unknown[:5]}")
    variants = [(s.value, h) for h in hard_modes for s in strategies]
    if not variants or not secrets:
        return TournamentResults()

    if max_workers is None:
        max_workers = os.cpu_count() or 4

    print(f"Running {len(variants)} variant(s) on {len(secrets)} words "
          f"(workers: {max_workers}) ...", flush=True)

    results = TournamentResults()

    if max_workers == 1:
        results.games.extend(_run_secrets_worker(
            wordset.guessable, wordset.solutions, secrets, variants, max_guesses,
        ))
    else:
        chunk_size = max(1, len(secrets) // (max_workers * 4))
        chunks = [secrets[i:i + chunk_size] for i in range(0, len(secrets), chunk_size)]
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(
                    _run_secrets_worker,
                    wordset.guessable,
                    wordset.solutions,
                    chunk,
                    variants,
                    max_guesses,
                ): chunk
                for chunk in chunks
            }
            done = 0
            for fut in as_completed(futures):
                chunk = futures[fut]
                done += 1
                try:
                    results.games.extend(fut.result())
                    log.debug("[%d/%d] chunk %s..%s done", done, len(chunks), chunk[0], chunk[-1])
                except Exception as exc:
                    print(f"  chunk {chunk[0]}..{chunk[-1]} FAILED: {exc}", file=sys.stderr)

    results.games.sort(key=lambda g: (g.hard_mode, g.strategy, g.secret))
    return results


# ------------------------------------------------------------------
# CLI
# ------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(
        description="Solve every possible secret and compare strategies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  python tournament.py guessable.txt solutions.txt                  # both strategies
  python tournament.py guessable.txt solutions.txt --hard-mode both # normal + hard
  python tournament.py guessable.txt solutions.txt --strategy groupsize --limit 100
""",
    )
    parser.add_argument("guessable_path", help="The path to the file of guessable strings")
    parser.add_argument("solutions_path", help="The path to the file of possible solutions")
    parser.add_argument("--strategy", choices=Strategy.names() + ["both"], default="both",
                        help="Strategy to evaluate (default: both)")
    parser.add_argument("--hard-mode", choices=["off", "on", "both"], default="off",
                        help="Play in hard mode (default: off)")
    parser.add_argument("--max-guesses", type=int, default=6,
                        help="Guess budget for counting a game as solved (default: 6)")
    parser.add_argument("--limit", type=int, default=None,
                        help="Only solve the first N secrets")
    parser.add_argument("--workers", type=int, default=None,
                        help="Max parallel workers (default: CPU count)")
    parser.add_argument("--csv", type=str, default=None, help="Save results CSV path")
    parser.add_argument("--json", type=str, default=None, help="Save results JSON path")
    parser.add_argument("--plot", type=str, default=None, help="Save histogram path")
    parser.add_argument("--verbose", action="store_true", help="Print debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    wordset = load_wordset(args.guessable_path, args.solutions_path)
    strategies = list(Strategy) if args.strategy == "both" else [Strategy.from_name(args.strategy)]
    hard_modes = {"off": [False], "on": [True], "both": [False, True]}[args.hard_mode]
    secrets = list(wordset.solutions)
    if args.limit is not None:
        secrets = secrets[:args.limit]

    t0 = _time_mod.time()
    results = run_tournament(
        wordset,
        secrets=secrets,
        strategies=strategies,
        hard_modes=hard_modes,
        max_guesses=args.max_guesses,
        max_workers=args.workers,
    )
    elapsed = _time_mod.time() - t0

    results.print_summary()
    print(f"Elapsed: {elapsed:.1f}s")

    if args.csv:
        results.to_csv(args.csv)
        print(f"CSV saved to {args.csv}")
    if args.json:
        results.to_json(args.json)
        print(f"JSON saved to {args.json}")
    if args.plot:
        results.plot_histograms(args.plot)


if __name__ == "__main__":
    main()
