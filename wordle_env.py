"""Wordle engine: scoring, candidate filtering and the state of one game."""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from lexicon import WordSet

log = logging.getLogger(__name__)

WORD_LENGTH = 5


class ScoreSymbol(IntEnum):
    """Per-letter feedback. The integer values double as base-3 digits."""

    ABSENT = 0
    PRESENT = 1
    CORRECT = 2


Score = tuple[ScoreSymbol, ...]
History = list[tuple[str, Score]]

WIN: Score = (ScoreSymbol.CORRECT,) * WORD_LENGTH

_SYMBOL_CHARS = {
    ScoreSymbol.ABSENT: "a",
    ScoreSymbol.PRESENT: "p",
    ScoreSymbol.CORRECT: "c",
}
_CHAR_SYMBOLS = {ch: sym for sym, ch in _SYMBOL_CHARS.items()}


# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------

class WordleError(Exception):
    """Base class for errors raised by the engine."""


class MalformedScore(WordleError, ValueError):
    """A score string has the wrong length or symbols outside ``a/c/p``."""


class IllegalGuess(WordleError, ValueError):
    """A guess is not guessable, or breaks the hard-mode rules."""


class Contradiction(WordleError, RuntimeError):
    """No candidate is consistent with the feedback observed so far."""


class EmptyGuessSpace(WordleError, RuntimeError):
    """No legal guess remains. Points at a broken word-list pairing."""


# ------------------------------------------------------------------
# Scoring
# ------------------------------------------------------------------

def feedback(guess: str, secret: str) -> Score:
    """Return the score *guess* receives against *secret*.

    Exact matches are resolved before any letter is marked present, so a
    repeated guess letter only earns as many ``PRESENT`` marks as there are
    unmatched copies of it left in the secret.
    """
    n = len(secret)
    if len(guess) != n:
        raise ValueError(f"guess length ({len(guess)}) != secret length ({n})")

    pat = [ScoreSymbol.ABSENT] * n
    remaining = Counter(secret)

    # Pass 1 - correct
    for i, (g, s) in enumerate(zip(guess, secret)):
        if g == s:
            pat[i] = ScoreSymbol.CORRECT
            remaining[g] -= 1

    # Pass 2 - present
    for i, g in enumerate(guess):
        if pat[i] is ScoreSymbol.CORRECT:
            continue
        if remaining[g] > 0:
            pat[i] = ScoreSymbol.PRESENT
            remaining[g] -= 1

    return tuple(pat)


def is_win(score: Score) -> bool:
    return all(sym is ScoreSymbol.CORRECT for sym in score)


def score_index(score: Score) -> int:
    """Pack *score* into an int in ``[0, 3**len)``, first position most significant."""
    val = 0
    for sym in score:
        val = val * 3 + int(sym)
    return val


def parse_score(text: str) -> Score:
    """Parse an ``a``/``p``/``c`` string such as ``"ppaaa"`` into a score.

    Raises
    ------
    MalformedScore
        If the string is not exactly ``WORD_LENGTH`` characters from the
        score alphabet.
    """
    cleaned = text.strip()
    if len(cleaned) != WORD_LENGTH or any(ch not in _CHAR_SYMBOLS for ch in cleaned):
        raise MalformedScore(
            f"Score must be {WORD_LENGTH} characters, all either 'a' (absent), "
            f"'c' (correct), or 'p' (present); got {text.strip()!r}"
        )
    return tuple(_CHAR_SYMBOLS[ch] for ch in cleaned)


def coerce_score(score: Score | str) -> Score:
    """Accept a score string or a sequence of symbols/ints; raise MalformedScore."""
    if isinstance(score, str):
        return parse_score(score)
    try:
        result = tuple(ScoreSymbol(s) for s in score)
    except ValueError as exc:
        raise MalformedScore(f"invalid score symbol: {exc}") from exc
    if len(result) != WORD_LENGTH:
        raise MalformedScore(f"score must have {WORD_LENGTH} symbols, got {len(result)}")
    return result


def format_score(score: Score) -> str:
    return "".join(_SYMBOL_CHARS[ScoreSymbol(sym)] for sym in score)


# ------------------------------------------------------------------
# Candidate pool and legality
# ------------------------------------------------------------------

def filter_candidates(
    candidates: Iterable[str],
    guess: str,
    score: Score,
) -> list[str]:
    """Keep only candidates that would have produced *score* for *guess*.

    Raises
    ------
    Contradiction
        If no candidate survives.
    """
    score = tuple(score)
    kept = [w for w in candidates if feedback(guess, w) == score]
    if not kept:
        raise Contradiction(
            f"no candidate is consistent with {guess} scoring {format_score(score)}"
        )
    return kept


def is_hard_mode_legal(guess: str, history: Sequence[tuple[str, Score]]) -> bool:
    """True if *guess* could still be the secret given every scored guess.

    Correct letters stay in place, present letters are reused at least as
    often as they were revealed, and letters revealed absent are not
    played again.
    """
    return all(feedback(prev, guess) == tuple(score) for prev, score in history)


def legal_guesses(
    guessable: Iterable[str],
    history: Sequence[tuple[str, Score]],
    hard_mode: bool,
) -> list[str]:
    """Return the guessable words that may be played next.

    Raises
    ------
    EmptyGuessSpace
        If the filter leaves nothing to play.
    """
    if hard_mode and history:
        legal = [w for w in guessable if is_hard_mode_legal(w, history)]
    else:
        legal = list(guessable)
    if not legal:
        raise EmptyGuessSpace("no legal guesses remain; check the word lists")
    return legal


def normalize_guess(word: str) -> str:
    """Lower-case *word* and check its shape, raising :class:`IllegalGuess`."""
    w = word.strip().lower()
    if len(w) != WORD_LENGTH or not (w.isascii() and w.isalpha()):
        raise IllegalGuess(f"Guess must be {WORD_LENGTH} lowercase letters, got {word!r}")
    return w


# ------------------------------------------------------------------
# One game
# ------------------------------------------------------------------

class GameState(Enum):
    AWAITING_GUESS = "awaiting_guess"
    AWAITING_SCORE = "awaiting_score"
    WON = "won"
    CONTRADICTION = "contradiction"


class WordleEnv:
    """A single Wordle game.

    The candidate pool starts as every solution and shrinks as scores are
    applied. Scores come from one of two places: the caller
    (:meth:`apply_score`, e.g. a human reading the real game) or the env
    itself when it was reset with a known secret (:meth:`guess`).

    Parameters
    ----------
    wordset : WordSet
        Guessable words and possible solutions (read-only).
    hard_mode : bool
        Restrict guesses to words consistent with all feedback so far.
    max_guesses : int or None
        Guess budget. ``None`` plays until the game is won.
    """

    def __init__(
        self,
        wordset: WordSet,
        hard_mode: bool = False,
        max_guesses: int | None = None,
    ) -> None:
        self._wordset = wordset
        self._hard_mode = hard_mode
        self._max_guesses = max_guesses

        # Game state (set by reset)
        self._secret: str | None = None
        self._candidates: list[str] = []
        self._history: History = []
        self._pending: str | None = None
        self._state = GameState.AWAITING_GUESS
        self.reset()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset(self, secret: str | None = None) -> None:
        """Start a new game, optionally against a known *secret*."""
        if secret is not None and secret not in self._wordset.solution_set:
            raise ValueError(f"secret {secret!r} is not a possible solution")
        self._secret = secret
        self._candidates = list(self._wordset.solutions)
        self._history = []
        self._pending = None
        self._state = GameState.AWAITING_GUESS

    def check_guess(self, word: str) -> str:
        """Return the normalized guess, or raise :class:`IllegalGuess`."""
        w = normalize_guess(word)
        if w not in self._wordset.guessable_set:
            raise IllegalGuess(f"{w!r} is not a valid guess")
        if self._hard_mode and not is_hard_mode_legal(w, self._history):
            raise IllegalGuess(f"{w!r} does not use all the information revealed so far")
        return w

    def submit(self, word: str) -> str:
        """Play *word*; the game then waits for its score."""
        if self._state is not GameState.AWAITING_GUESS:
            raise RuntimeError(f"cannot guess while {self._state.value}")
        if self._max_guesses is not None and len(self._history) >= self._max_guesses:
            raise RuntimeError("Game is already over")
        self._pending = self.check_guess(word)
        self._state = GameState.AWAITING_SCORE
        return self._pending

    def pending_score(self) -> Score:
        """Score the pending guess without outside help."""
        if self._pending is None:
            raise RuntimeError("no guess is awaiting a score")
        if self._secret is None:
            raise RuntimeError("no secret is known; supply the score with apply_score()")
        return feedback(self._pending, self._secret)

    def apply_score(self, score: Score | str) -> Score:
        """Record the score for the pending guess and narrow the pool.

        Raises
        ------
        MalformedScore
            If a score string cannot be parsed (the turn is not advanced).
        Contradiction
            If no candidate is left, or a winning score is given for a
            word that is not a candidate; the game is over.
        """
        if self._state is not GameState.AWAITING_SCORE:
            raise RuntimeError("no guess is awaiting a score")
        score = coerce_score(score)

        guess = self._pending
        self._pending = None
        self._history.append((guess, score))

        if is_win(score):
            if guess not in self._candidates:
                self._candidates = []
                self._state = GameState.CONTRADICTION
                raise Contradiction(f"{guess!r} was scored as a win but is not a possible solution")
            self._candidates = [guess]
            self._state = GameState.WON
            return score

        try:
            self._candidates = filter_candidates(self._candidates, guess, score)
        except Contradiction:
            self._candidates = []
            self._state = GameState.CONTRADICTION
            raise

        self._state = GameState.AWAITING_GUESS
        if len(self._candidates) <= 10:
            log.debug("Possibilities left: %s", ", ".join(self._candidates))
        else:
            log.debug("%d possibilities left", len(self._candidates))
        return score

    def guess(self, word: str) -> Score:
        """Submit *word* and score it immediately."""
        self.submit(word)
        return self.apply_score(self.pending_score())

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def scores_itself(self) -> bool:
        """True if :meth:`pending_score` can produce scores."""
        return self._secret is not None

    def is_solved(self) -> bool:
        return self._state is GameState.WON

    def game_over(self) -> bool:
        if self._state in (GameState.WON, GameState.CONTRADICTION):
            return True
        return self._max_guesses is not None and len(self._history) >= self._max_guesses

    def remaining_guesses(self) -> int | None:
        if self._max_guesses is None:
            return None
        return self._max_guesses - len(self._history)

    @property
    def candidates(self) -> list[str]:
        return list(self._candidates)

    @property
    def history(self) -> History:
        return list(self._history)

    @property
    def hard_mode(self) -> bool:
        return self._hard_mode

    @property
    def wordset(self) -> WordSet:
        return self._wordset

    @property
    def secret(self) -> str:
        """Reveal the secret word (only after game over)."""
        if self._secret is None:
            raise RuntimeError("No secret in this game")
        if not self.game_over():
            raise RuntimeError("Game is still in progress")
        return self._secret
