"""Shared fixtures for the Jeopardy board tests.

Provides:
- FakeTriviaClient: in-memory stand-in for the trivia service
- make_clue / make_category: data factories
"""

import random

import pytest

from models import Category, Clue
from trivia_client import CategoryNotFound, TriviaNetworkError


def make_clue(question="What is 2+2?", answer="4", value=200, **overrides):
    return Clue(question=question, answer=answer, value=value, **overrides)


def make_category(cat_id=1, title=None, n_clues=5, clues=None):
    if clues is None:
        clues = [
            make_clue(f"Question {i} of {cat_id}", f"Answer {i} of {cat_id}", (i + 1) * 100)
            for i in range(n_clues)
        ]
    return Category(id=cat_id, title=title or f"Category {cat_id}", clues=tuple(clues))


class FakeTriviaClient:
    """Serves categories from a dict; anything else is not found.

    `failures` maps an id to an exception raised the next time it is fetched.
    """

    def __init__(self, categories=None, failures=None):
        self.categories = {c.id: c for c in (categories or [])}
        self.failures = dict(failures or {})
        self.calls = []

    def fetch_category(self, category_id):
        self.calls.append(category_id)
        if category_id in self.failures:
            raise self.failures.pop(category_id)
        try:
            return self.categories[category_id]
        except KeyError:
            raise CategoryNotFound(f"category {category_id} not found")


class ScriptedRng:
    """random.Random whose randrange returns a scripted sequence first."""

    def __init__(self, draws, seed=0):
        self._draws = list(draws)
        self._fallback = random.Random(seed)

    def randrange(self, n):
        if self._draws:
            return self._draws.pop(0)
        return self._fallback.randrange(n)

    def sample(self, population, k):
        return self._fallback.sample(population, k)

    def choice(self, seq):
        return self._fallback.choice(seq)


@pytest.fixture
def network_error():
    return TriviaNetworkError("connection reset")


@pytest.fixture
def six_categories():
    return [make_category(cat_id=i, n_clues=8) for i in (7, 3, 19, 42, 100, 5)]


@pytest.fixture
def fake_client(six_categories):
    return FakeTriviaClient(six_categories)
