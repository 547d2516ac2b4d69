import pytest

from wordle_env import (
    WIN,
    Contradiction,
    EmptyGuessSpace,
    GameState,
    IllegalGuess,
    MalformedScore,
    ScoreSymbol,
    WordleEnv,
    feedback,
    filter_candidates,
    format_score,
    is_hard_mode_legal,
    is_win,
    legal_guesses,
    parse_score,
    score_index,
)

A, P, C = ScoreSymbol.ABSENT, ScoreSymbol.PRESENT, ScoreSymbol.CORRECT


# --- scorer golden tests (duplicates + placements) ---
@pytest.mark.parametrize("guess,secret,expected", [
    ("squid", "maker", "aaaaa"),
    ("squid", "squib", "cccca"),
    # doubled letters in the guess
    ("espoo", "glorp", "aappa"),
    ("espoo", "footy", "aaapp"),
    ("sassy", "class", "ppaca"),
    # same letter both correct and present
    ("aabbb", "acccc", "caaaa"),
    ("motto", "lofty", "acaca"),
    ("arise", "verge", "apaac"),
    ("repeg", "paper", "pacca"),
    ("arise", "cargo", "ppaaa"),
])
def test_feedback_golden(guess, secret, expected):
    assert feedback(guess, secret) == parse_score(expected)


def test_feedback_sassy_class_symbols():
    assert feedback("sassy", "class") == (P, P, A, C, A)


@pytest.mark.parametrize("word", ["arise", "sassy", "mamma", "cargo"])
def test_feedback_self_is_win(word):
    assert feedback(word, word) == WIN
    assert is_win(feedback(word, word))


def test_feedback_length_mismatch():
    with pytest.raises(ValueError):
        feedback("abc", "cargo")


def test_parse_and_format_score():
    assert parse_score("ppaaa") == (P, P, A, A, A)
    assert parse_score("ccapa\n") == (C, C, A, P, A)
    assert format_score((P, P, A, A, A)) == "ppaaa"


@pytest.mark.parametrize("text", [
    "ppaa", "ppaab", "", "ppaaaa", "xxxxx", "PPAAA", "CCCCC", "ppAaa",
])
def test_parse_score_malformed(text):
    with pytest.raises(MalformedScore):
        parse_score(text)


def test_malformed_score_is_value_error():
    with pytest.raises(ValueError):
        parse_score("cccb")


def test_score_index():
    assert score_index((A,) * 5) == 0
    assert score_index(WIN) == 3 ** 5 - 1
    assert score_index((A, A, A, A, P)) == 1
    assert score_index((P, A, A, A, A)) == 81


# --- candidate filter ---
def test_filter_candidates_keeps_consistent_words():
    words = ["arise", "cargo", "morra", "zinco", "carol", "compt"]
    kept = filter_candidates(words, "arise", feedback("arise", "cargo"))
    assert kept == ["cargo", "morra", "carol"]


def test_filter_candidates_contradiction():
    with pytest.raises(Contradiction):
        filter_candidates(["zinco", "compt"], "arise", parse_score("ppaaa"))


# --- hard mode ---
def test_hard_mode_rejects_absent_letters():
    history = [("xqzjv", parse_score("aaaaa"))]
    assert not is_hard_mode_legal("jumbo", history)
    assert not is_hard_mode_legal("zinco", history)
    assert is_hard_mode_legal("cargo", history)


def test_hard_mode_requires_revealed_letters():
    history = [("arise", parse_score("ppaaa"))]
    assert is_hard_mode_legal("carol", history)
    assert not is_hard_mode_legal("compt", history)
    # 'a' and 'r' present but not where they were guessed
    assert not is_hard_mode_legal("arose", history)


def test_hard_mode_keeps_correct_positions():
    history = [("cargo", parse_score("cccap"))]
    assert is_hard_mode_legal("carol", history)
    assert not is_hard_mode_legal("morra", history)


def test_legal_guesses_hard_is_subset():
    words = ["arise", "bglmx", "cargo", "carol", "compt", "morra"]
    history = [("arise", parse_score("ppaaa"))]
    hard = legal_guesses(words, history, hard_mode=True)
    easy = legal_guesses(words, history, hard_mode=False)
    assert set(hard) <= set(easy)
    assert hard == ["cargo", "carol", "morra"]


def test_legal_guesses_empty():
    with pytest.raises(EmptyGuessSpace):
        legal_guesses(["cargo"], [("arise", WIN)], hard_mode=True)


# --- one game ---
def test_env_self_scoring(wordset):
    env = WordleEnv(wordset)
    env.reset(secret="cargo")
    assert env.guess("arise") == parse_score("ppaaa")
    assert env.state is GameState.AWAITING_GUESS
    assert env.candidates == ["cargo", "carol", "morra"]
    assert env.guess("cargo") == WIN
    assert env.is_solved()
    assert env.game_over()
    assert env.secret == "cargo"
    assert [g for g, _ in env.history] == ["arise", "cargo"]


def test_env_pool_never_grows(wordset):
    env = WordleEnv(wordset)
    env.reset(secret="morra")
    sizes = [len(env.candidates)]
    for word in ["compt", "arise", "carol", "morra"]:
        env.guess(word)
        sizes.append(len(env.candidates))
    assert sizes == sorted(sizes, reverse=True)
    assert env.is_solved()


def test_env_external_scores_and_malformed(wordset):
    env = WordleEnv(wordset)
    env.submit("arise")
    assert env.state is GameState.AWAITING_SCORE
    for bad in ["ppaa", "ppaab"]:
        with pytest.raises(MalformedScore):
            env.apply_score(bad)
        assert env.state is GameState.AWAITING_SCORE
    assert env.history == []
    env.apply_score("ppaaa")
    assert env.candidates == ["cargo", "carol", "morra"]
    assert len(env.history) == 1


def test_env_contradiction(wordset):
    env = WordleEnv(wordset)
    env.submit("arise")
    with pytest.raises(Contradiction):
        env.apply_score("aaaac")
    assert env.state is GameState.CONTRADICTION
    assert env.game_over()
    assert not env.is_solved()
    with pytest.raises(RuntimeError):
        env.submit("cargo")


def test_env_win_needs_a_candidate(wordset):
    env = WordleEnv(wordset)
    env.submit("xqzjv")
    with pytest.raises(Contradiction):
        env.apply_score("ccccc")
    assert env.state is GameState.CONTRADICTION
    assert not env.is_solved()
    assert env.candidates == []


def test_env_hard_mode_rejects_absent_letters(wordset):
    env = WordleEnv(wordset, hard_mode=True)
    env.submit("xqzjv")
    env.apply_score("aaaaa")
    for word in ["zinco", "jumbo"]:
        with pytest.raises(IllegalGuess):
            env.submit(word)
        assert env.state is GameState.AWAITING_GUESS
    assert env.submit("carol") == "carol"


def test_env_rejects_unknown_guesses(wordset):
    env = WordleEnv(wordset)
    for word in ["zzzzz", "abc", "car0l", "cargos"]:
        with pytest.raises(IllegalGuess):
            env.submit(word)
    assert env.submit(" CARGO ") == "cargo"


def test_env_secret_must_be_solution(wordset):
    env = WordleEnv(wordset)
    with pytest.raises(ValueError):
        env.reset(secret="zinco")


def test_env_secret_hidden_during_game(wordset):
    env = WordleEnv(wordset)
    env.reset(secret="cargo")
    with pytest.raises(RuntimeError):
        env.secret


def test_env_pending_score_needs_secret(wordset):
    env = WordleEnv(wordset)
    env.submit("arise")
    assert not env.scores_itself
    with pytest.raises(RuntimeError):
        env.pending_score()


def test_env_max_guesses(wordset):
    env = WordleEnv(wordset, max_guesses=1)
    env.reset(secret="cargo")
    env.guess("arise")
    assert env.game_over()
    assert env.remaining_guesses() == 0
    with pytest.raises(RuntimeError):
        env.submit("cargo")
