"""Tests for category acquisition."""

from unittest.mock import MagicMock

import pytest

from categories import (
    AcquisitionError,
    acquire_category_ids,
    backoff_delay,
    distinct_question_count,
    is_usable,
)
from conftest import FakeTriviaClient, ScriptedRng, make_category, make_clue
from trivia_client import MalformedResponse, TriviaClient


def _acquire(client, draws, **kwargs):
    kwargs.setdefault("sleep", MagicMock())
    kwargs.setdefault("max_attempts", 100)
    return acquire_category_ids(client, rng=ScriptedRng(draws), id_space=200, **kwargs)


class TestUsable:
    def test_duplicates_are_counted_once(self):
        clues = [make_clue("same"), make_clue("same"), make_clue("a"), make_clue("b"), make_clue("c")]
        category = make_category(clues=clues)
        assert distinct_question_count(category) == 4
        assert not is_usable(category)

    def test_blank_questions_do_not_count(self):
        clues = [make_clue(q) for q in ("a", "b", "c", "d", "", "   ")]
        assert not is_usable(make_category(clues=clues))

    def test_five_distinct_questions_is_enough(self):
        assert is_usable(make_category(n_clues=5))


class TestAcquire:
    def test_returns_ids_in_acceptance_order(self, fake_client):
        ids = _acquire(fake_client, [7, 3, 19, 42, 100, 5], count=6)
        assert ids == [7, 3, 19, 42, 100, 5]

    def test_returns_exactly_count_distinct_usable_ids(self, six_categories):
        client = FakeTriviaClient(six_categories)
        for count in range(1, 7):
            ids = _acquire(client, [], count=count, max_attempts=10000)
            assert len(ids) == count
            assert len(set(ids)) == count
            assert all(is_usable(client.categories[i]) for i in ids)

    def test_skips_duplicates_without_refetching(self, fake_client):
        ids = _acquire(fake_client, [7, 7, 3], count=2)
        assert ids == [7, 3]
        assert fake_client.calls == [7, 3]

    def test_rejects_categories_with_too_few_clues(self):
        client = FakeTriviaClient([make_category(1, n_clues=4), make_category(2)])
        assert _acquire(client, [1, 2], count=1) == [2]

    def test_fetch_failures_are_retried(self, network_error):
        client = FakeTriviaClient(
            [make_category(1), make_category(2)],
            failures={1: network_error, 2: MalformedResponse("garbage")},
        )
        assert _acquire(client, [1, 50, 2, 1, 2], count=2) == [1, 2]

    def test_accepts_id_reported_by_service(self):
        client = MagicMock()
        client.fetch_category.return_value = make_category(cat_id=77)
        assert _acquire(client, [3], count=1) == [77]

    def test_backs_off_exponentially_on_consecutive_failures(self, network_error):
        client = FakeTriviaClient(
            [make_category(9)],
            failures={1: network_error, 2: network_error, 3: network_error},
        )
        sleep = MagicMock()
        _acquire(client, [1, 2, 3, 9], count=1, sleep=sleep, backoff_base=0.5, backoff_max=10)
        assert [c.args[0] for c in sleep.call_args_list] == [0.5, 1.0, 2.0]

    def test_backoff_resets_after_a_successful_fetch(self, network_error):
        client = FakeTriviaClient(
            [make_category(4, n_clues=2), make_category(9)],
            failures={1: network_error, 2: network_error},
        )
        sleep = MagicMock()
        _acquire(client, [1, 4, 2, 9], count=1, sleep=sleep, backoff_base=0.5, backoff_max=10)
        assert [c.args[0] for c in sleep.call_args_list] == [0.5, 0.5]

    def test_gives_up_after_max_attempts(self):
        client = FakeTriviaClient([])
        with pytest.raises(AcquisitionError):
            _acquire(client, [], count=1, max_attempts=25)
        assert len(client.calls) == 25

    @pytest.mark.parametrize("count, id_space", [(0, 10), (1, 0)])
    def test_invalid_arguments(self, fake_client, count, id_space):
        with pytest.raises(ValueError):
            acquire_category_ids(fake_client, count=count, id_space=id_space)


def test_backoff_delay_is_capped():
    assert backoff_delay(0, 0.1, 5) == 0
    assert backoff_delay(1, 0.1, 5) == pytest.approx(0.1)
    assert backoff_delay(4, 0.1, 5) == pytest.approx(0.8)
    assert backoff_delay(20, 0.1, 5) == 5


def test_category_with_infinite_value_does_not_stop_acquisition():
    session = MagicMock()
    good = {
        "id": 9,
        "title": "fine",
        "clues": [{"question": f"q{i}", "answer": f"a{i}", "value": 100} for i in range(5)],
    }
    odd = {
        "id": 5,
        "title": "huge value",
        "clues": [{"question": f"q{i}", "answer": f"a{i}", "value": 1e400} for i in range(5)],
    }

    def get(url, params, timeout):
        response = MagicMock(status_code=200)
        response.json.return_value = odd if params["id"] == 5 else good
        return response

    session.get.side_effect = get
    client = TriviaClient(base_url="https://trivia.test/api", timeout=1, session=session)

    assert _acquire(client, [5, 9], count=2) == [5, 9]
    assert all(c.value is None for c in client.fetch_category(5).clues)
