"""Pick the next guess by ranking every legal guess against the candidate pool.

Ranking is embarrassingly parallel: when an executor is supplied the legal
guesses are split into chunks, each worker returns the best key of its
chunk, and the keys are reduced with ``min``. The inline path and the
parallel path select the same guess.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Executor
from typing import Collection, Sequence

from lexicon import WordSet
from strategy import GameConfig, Strategy, evaluate_guess
from wordle_env import Score, WordleEnv, legal_guesses

log = logging.getLogger(__name__)

# Below this many (guess, candidate) pairs the inline loop beats shipping
# the pool to worker processes.
MIN_PARALLEL_WORK = 200_000

RankKey = tuple[int, bool, str]


def rank_key(
    strategy: Strategy,
    guess: str,
    candidates: Sequence[str],
    candidate_set: Collection[str],
) -> RankKey:
    """Sort key for *guess*; the smallest key wins.

    Metric first, then guesses that could win outright, then alphabetical.
    """
    ev = evaluate_guess(guess, candidates)
    return strategy.metric_key(ev), guess not in candidate_set, guess


# ── Worker function (module-level for pickling) ───────────

def _rank_chunk(chunk: list[str], candidates: list[str], strategy_name: str) -> RankKey:
    """Worker: best key among *chunk*."""
    strategy = Strategy(strategy_name)
    candidate_set = frozenset(candidates)
    return min(rank_key(strategy, g, candidates, candidate_set) for g in chunk)


class Solver:
    """Suggest guesses for a game under one :class:`GameConfig`.

    The solver keeps no game state of its own; it reads the candidate pool
    and history from the caller (usually a :class:`WordleEnv`).

    Parameters
    ----------
    wordset : WordSet
        Shared, read-only word lists.
    config : GameConfig
        Strategy and hard-mode setting.
    executor : Executor or None
        Pool used to rank guesses in parallel. ``None`` ranks inline.
    min_parallel_work : int
        Smallest ``len(guesses) * len(candidates)`` handed to the executor.
    """

    def __init__(
        self,
        wordset: WordSet,
        config: GameConfig | None = None,
        executor: Executor | None = None,
        min_parallel_work: int = MIN_PARALLEL_WORK,
    ) -> None:
        self._wordset = wordset
        self._config = config or GameConfig()
        self._executor = executor
        self._min_parallel_work = min_parallel_work

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def strategy(self) -> Strategy:
        return self._config.strategy

    def legal_guesses(self, history: Sequence[tuple[str, Score]]) -> list[str]:
        return legal_guesses(self._wordset.guessable, history, self._config.hard_mode)

    def rank(
        self,
        candidates: Sequence[str],
        history: Sequence[tuple[str, Score]] = (),
    ) -> list[tuple[RankKey, str]]:
        """Every legal guess with its key, best first. Always inline."""
        candidates = list(candidates)
        candidate_set = frozenset(candidates)
        keyed = [
            (rank_key(self.strategy, g, candidates, candidate_set), g)
            for g in self.legal_guesses(history)
        ]
        keyed.sort()
        return keyed

    def best_guess(
        self,
        candidates: Sequence[str],
        history: Sequence[tuple[str, Score]] = (),
    ) -> str:
        """Return the best legal guess against *candidates*."""
        candidates = list(candidates)
        if not candidates:
            raise ValueError("the candidate pool is empty")
        if len(candidates) == 1:
            return candidates[0]

        guesses = self.legal_guesses(history)
        work = len(guesses) * len(candidates)
        if self._executor is not None and work >= self._min_parallel_work:
            key = self._best_key_parallel(guesses, candidates)
        else:
            key = _rank_chunk(guesses, candidates, self.strategy.value)

        metric, not_candidate, guess = key
        if not_candidate:
            log.debug("Guessing a word that is not a possible solution: %s", guess)
        log.debug("Best guess %s (metric %d over %d candidates)", guess, metric, len(candidates))
        return guess

    def next_guess(self, env: WordleEnv) -> str:
        return self.best_guess(env.candidates, env.history)

    def _best_key_parallel(self, guesses: list[str], candidates: list[str]) -> RankKey:
        max_workers = self._config.max_workers or os.cpu_count() or 4
        chunk_size = max(50, len(guesses) // (max_workers * 4))
        chunks = [guesses[i:i + chunk_size] for i in range(0, len(guesses), chunk_size)]
        log.debug(
            "Evaluating %d guesses x %d candidates in %d chunks",
            len(guesses), len(candidates), len(chunks),
        )
        futures = [
            self._executor.submit(_rank_chunk, chunk, candidates, self.strategy.value)
            for chunk in chunks
        ]
        return min(fut.result() for fut in futures)
