from __future__ import annotations

import pytest

from lexicon import WordSet

SOLUTIONS = ["arise", "cargo", "carol", "compt", "morra"]
EXTRA_GUESSES = ["bglmx", "jumbo", "xqzjv", "zinco"]


@pytest.fixture
def wordset() -> WordSet:
    return WordSet.from_lists(EXTRA_GUESSES, SOLUTIONS)


@pytest.fixture
def shale_wordset() -> WordSet:
    return WordSet.from_lists([], ["shale", "shame"])
