"""Tests for practice queue selection."""

import dataclasses
import random

import pytest

from wordquest.config import settings
from wordquest.models import MasteryStage
from wordquest.services.selection import categorise, quotas, select_practice_items
from wordquest.validation import PracticeValidationError


def _category(item):
    return item.id.split("-")[0]


class ReversingShuffler:
    """Deterministic stand-in for a random source."""

    def __init__(self):
        self.calls = 0

    def shuffle(self, x):
        self.calls += 1
        x.reverse()


class TestQuotas:
    @pytest.mark.parametrize(
        "count,expected",
        [
            (10, (6, 2, 2)),
            (15, (9, 3, 3)),
            (7, (5, 2, 0)),
            (1, (1, 1, 0)),
            (0, (0, 0, 0)),
        ],
    )
    def test_needs_and_maintenance_round_up(self, count, expected):
        assert quotas(count) == expected

    def test_custom_mix(self):
        config = dataclasses.replace(settings, needs_practice_pct=50, maintenance_pct=50)
        assert quotas(10, config) == (5, 5, 0)


class TestCategorise:
    def test_split_and_mastered_dropped(self, pool_factory):
        needs, maintenance, new = categorise(pool_factory(needs=3, maintenance=2, new=4, mastered=5))
        assert len(needs) == 3
        assert len(maintenance) == 2
        assert len(new) == 4

    def test_level_five_without_mastered_stage_is_excluded(self, make_item):
        item = make_item(10, 10, 80.0, MasteryStage.BLOOMING)
        assert categorise([item]) == ([], [], [])

    def test_few_attempts_need_practice(self, make_item):
        item = make_item(2, 2, 100.0)
        needs, _, _ = categorise([item])
        assert needs == [item]


class TestSelectPracticeItems:
    def test_category_mix(self, pool_factory, rng):
        queue = select_practice_items(pool_factory(needs=50, maintenance=50, new=50), 10, rng=rng)

        categories = [_category(item) for item in queue]
        assert len(queue) == 10
        assert categories.count("needs") == 6
        assert categories.count("maint") == 2
        assert categories.count("new") == 2

    def test_mastered_items_never_selected(self, pool_factory, rng):
        pool = pool_factory(needs=5, maintenance=5, new=5, mastered=20)
        for _ in range(20):
            queue = select_practice_items(pool, 10, rng=rng)
            assert all(item.current_stage != MasteryStage.MASTERED for item in queue)

    def test_small_pool_returns_everything_once(self, pool_factory, rng):
        pool = pool_factory(needs=3, new=2, mastered=5)
        queue = select_practice_items(pool, 10, rng=rng)

        ids = [item.id for item in queue]
        assert len(ids) == 5
        assert len(set(ids)) == 5
        assert not any(i.startswith("mastered") for i in ids)

    def test_short_category_is_backfilled(self, pool_factory, rng):
        queue = select_practice_items(pool_factory(needs=1, maintenance=50), 10, rng=rng)

        ids = [item.id for item in queue]
        assert len(ids) == 10
        assert len(set(ids)) == 10
        assert "needs-0" in ids

    def test_same_seed_same_queue(self, pool_factory):
        pool = pool_factory(needs=20, maintenance=20, new=20)
        first = select_practice_items(pool, 10, rng=random.Random(7))
        second = select_practice_items(pool, 10, rng=random.Random(7))
        assert [i.id for i in first] == [i.id for i in second]

    def test_injected_shuffler_is_used(self, pool_factory):
        shuffler = ReversingShuffler()
        queue = select_practice_items(pool_factory(needs=6, maintenance=2, new=2), 10, rng=shuffler)
        assert len(queue) == 10
        # one shuffle per category plus the final presentation shuffle
        assert shuffler.calls == 4

    def test_zero_count(self, pool_factory, rng):
        assert select_practice_items(pool_factory(needs=3), 0, rng=rng) == []

    def test_negative_count_rejected(self, pool_factory, rng):
        with pytest.raises(PracticeValidationError):
            select_practice_items(pool_factory(needs=3), -1, rng=rng)

    def test_empty_pool(self, rng):
        assert select_practice_items([], 10, rng=rng) == []

    def test_pool_is_not_mutated(self, pool_factory, rng):
        pool = pool_factory(needs=10, maintenance=10, new=10)
        before = [item.id for item in pool]
        select_practice_items(pool, 10, rng=rng)
        assert [item.id for item in pool] == before
