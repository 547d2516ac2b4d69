from concurrent.futures import ThreadPoolExecutor

import pytest

from solver import Solver, rank_key
from strategy import GameConfig, Strategy
from wordle_env import EmptyGuessSpace, WordleEnv, feedback, parse_score

STRATEGIES = list(Strategy)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_prefers_candidate_on_tie(wordset, strategy):
    # bglmx separates the three words as well as cargo does, and sorts
    # first, but cargo can win outright.
    solver = Solver(wordset, GameConfig(strategy=strategy))
    pool = ["cargo", "carol", "morra"]
    assert solver.best_guess(pool) == "cargo"

    keys = dict((g, k) for k, g in solver.rank(pool))
    assert keys["bglmx"][0] == keys["cargo"][0]
    assert keys["bglmx"] > keys["cargo"]


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_two_candidates_alphabetical(shale_wordset, strategy):
    solver = Solver(shale_wordset, GameConfig(strategy=strategy))
    assert solver.best_guess(["shale", "shame"]) == "shale"


def test_single_candidate_is_returned(wordset):
    solver = Solver(wordset)
    assert solver.best_guess(["morra"]) == "morra"


def test_empty_pool(wordset):
    with pytest.raises(ValueError):
        Solver(wordset).best_guess([])


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_deterministic(wordset, strategy):
    solver = Solver(wordset, GameConfig(strategy=strategy))
    first = solver.best_guess(wordset.solutions)
    assert all(solver.best_guess(wordset.solutions) == first for _ in range(3))
    assert solver.rank(wordset.solutions)[0][1] == first


def test_groupsize_minimises_largest_group(wordset):
    solver = Solver(wordset, GameConfig(strategy=Strategy.GROUPSIZE))
    ranked = solver.rank(wordset.solutions)
    best_metric = ranked[0][0][0]
    assert best_metric == min(k[0] for k, _ in ranked)
    assert best_metric <= len(wordset.solutions)


def test_rank_key_shape(wordset):
    pool = list(wordset.solutions)
    key = rank_key(Strategy.GROUPCOUNT, "arise", pool, set(pool))
    assert key == (-3, False, "arise")
    key = rank_key(Strategy.GROUPSIZE, "xqzjv", pool, set(pool))
    assert key == (5, True, "xqzjv")


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_parallel_matches_inline(wordset, strategy):
    config = GameConfig(strategy=strategy, max_workers=2)
    inline = Solver(wordset, config)
    with ThreadPoolExecutor(max_workers=2) as executor:
        parallel = Solver(wordset, config, executor=executor, min_parallel_work=0)
        for pool in (wordset.solutions, ["cargo", "carol", "morra"]):
            assert parallel.best_guess(pool) == inline.best_guess(pool)


def test_hard_mode_guesses_subset(wordset):
    history = [("arise", parse_score("ppaaa"))]
    hard = Solver(wordset, GameConfig(hard_mode=True)).legal_guesses(history)
    easy = Solver(wordset, GameConfig(hard_mode=False)).legal_guesses(history)
    assert set(hard) < set(easy)
    assert "bglmx" not in hard


def test_hard_mode_guess_is_consistent(wordset):
    env = WordleEnv(wordset, hard_mode=True)
    env.reset(secret="morra")
    solver = Solver(wordset, GameConfig(hard_mode=True))
    while not env.is_solved():
        guess = solver.next_guess(env)
        assert all(feedback(prev, guess) == score for prev, score in env.history)
        env.guess(guess)


def test_empty_guess_space(wordset):
    solver = Solver(wordset, GameConfig(hard_mode=True))
    with pytest.raises(EmptyGuessSpace):
        solver.best_guess(["cargo", "carol"], [("arise", parse_score("caaaa"))])


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize("hard_mode", [False, True])
def test_solves_every_secret(wordset, strategy, hard_mode):
    solver = Solver(wordset, GameConfig(strategy=strategy, hard_mode=hard_mode))
    for secret in wordset.solutions:
        env = WordleEnv(wordset, hard_mode=hard_mode)
        env.reset(secret=secret)
        while not env.is_solved():
            env.guess(solver.next_guess(env))
        assert env.history[-1][0] == secret
        assert len(env.history) <= len(wordset.solutions)
