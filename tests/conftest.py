"""Shared pytest fixtures for the practice engine tests."""

import datetime as dt
import random

import pytest
from fastapi.testclient import TestClient

from wordquest.models import MasteryStage, PracticeItem


@pytest.fixture
def rng():
    """Seeded random source so selection tests never flake."""
    return random.Random(1234)


@pytest.fixture
def today():
    return dt.date(2026, 3, 10)


@pytest.fixture
def make_item():
    """Factory for practice items with sensible defaults."""
    counter = iter(range(1, 100_000))

    def _make(
        times_practiced=0,
        times_correct=0,
        best_accuracy=None,
        stage=MasteryStage.SEEDLING,
        item_id=None,
        text="word",
    ):
        return PracticeItem(
            id=item_id or f"item-{next(counter)}",
            text=text,
            times_practiced=times_practiced,
            times_correct=times_correct,
            best_accuracy=best_accuracy,
            current_stage=stage,
        )

    return _make


@pytest.fixture
def pool_factory(make_item):
    """Build a pool with the requested number of items per category."""

    def _pool(needs=0, maintenance=0, new=0, mastered=0):
        pool = []
        pool += [make_item(10, 2, 100.0, item_id=f"needs-{i}") for i in range(needs)]
        pool += [
            make_item(10, 7, 100.0, MasteryStage.BLOOMING, item_id=f"maint-{i}")
            for i in range(maintenance)
        ]
        pool += [make_item(item_id=f"new-{i}") for i in range(new)]
        pool += [
            make_item(10, 10, 100.0, MasteryStage.MASTERED, item_id=f"mastered-{i}")
            for i in range(mastered)
        ]
        return pool

    return _pool


@pytest.fixture
def client():
    """FastAPI test client with the app lifespan running."""
    from main import app

    with TestClient(app) as test_client:
        yield test_client
