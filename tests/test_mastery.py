"""Tests for mastery levels, word stages and attempt recording."""

import dataclasses
import datetime as dt

import pytest

from wordquest.config import settings
from wordquest.models import MasteryStage, PracticeItem
from wordquest.services.mastery import (
    classify_stage,
    mastery_level,
    record_attempt,
    update_stage,
)
from wordquest.validation import PracticeValidationError


class TestMasteryLevel:
    """Five-level scale from the accuracy ratio."""

    @pytest.mark.parametrize(
        "practiced,correct,expected",
        [
            (0, 0, 0),
            (2, 2, 0),  # below the minimum attempt count
            (3, 3, 5),
            (10, 9, 5),
            (10, 8, 4),
            (10, 7, 3),
            (10, 5, 2),
            (10, 3, 1),
            (10, 2, 0),
        ],
    )
    def test_bands(self, practiced, correct, expected):
        assert mastery_level(practiced, correct) == expected

    def test_correct_above_practiced_rejected(self):
        with pytest.raises(PracticeValidationError):
            mastery_level(3, 4)

    def test_negative_counts_rejected(self):
        with pytest.raises(PracticeValidationError):
            mastery_level(-1, 0)


class TestClassifyStage:
    @pytest.mark.parametrize(
        "practiced,correct,best,expected",
        [
            (0, 0, None, MasteryStage.SEEDLING),
            (2, 2, 100.0, MasteryStage.SEEDLING),
            (10, 2, 100.0, MasteryStage.SEEDLING),
            (10, 5, 100.0, MasteryStage.GROWING),
            (10, 7, 100.0, MasteryStage.BLOOMING),
            (10, 8, 100.0, MasteryStage.BLOOMING),
            (10, 10, 100.0, MasteryStage.MASTERED),
            (10, 10, 95.0, MasteryStage.MASTERED),
        ],
    )
    def test_stage_bands(self, practiced, correct, best, expected):
        assert classify_stage(practiced, correct, best) == expected

    def test_top_band_without_best_accuracy_stays_blooming(self):
        assert classify_stage(10, 10, None) == MasteryStage.BLOOMING
        assert classify_stage(10, 10, 90.0) == MasteryStage.BLOOMING

    def test_mastery_bar_is_configurable(self):
        lenient = dataclasses.replace(settings, mastered_best_accuracy=80.0)
        assert classify_stage(10, 10, 85.0, config=lenient) == MasteryStage.MASTERED

    def test_best_accuracy_out_of_range_rejected(self):
        with pytest.raises(PracticeValidationError):
            classify_stage(5, 5, 120.0)


class TestUpdateStage:
    def test_idempotent(self):
        first = update_stage(6, 5, 100.0, MasteryStage.GROWING)
        second = update_stage(6, 5, 100.0, MasteryStage.GROWING)
        assert first == second

    def test_feeding_result_back_is_stable(self):
        update = update_stage(10, 9, 100.0, MasteryStage.SEEDLING)
        again = update_stage(10, 9, 100.0, update.stage)
        assert again.stage == update.stage
        assert not again.just_advanced

    def test_just_advanced_flag(self):
        update = update_stage(3, 3, 100.0, MasteryStage.SEEDLING)
        assert update.stage == MasteryStage.MASTERED
        assert update.previous_stage == MasteryStage.SEEDLING
        assert update.just_advanced
        assert update.level == 5

    def test_no_regression_after_misses(self):
        update = update_stage(10, 5, 100.0, MasteryStage.BLOOMING)
        assert update.stage == MasteryStage.BLOOMING
        assert not update.just_advanced

    def test_stage_accepts_string_label(self):
        update = update_stage(10, 5, 100.0, "blooming")
        assert update.stage == MasteryStage.BLOOMING

    def test_correct_attempts_never_lower_the_stage(self):
        for practiced in range(0, 15):
            for correct in range(0, practiced + 1):
                for best in (None, 50.0, 100.0):
                    before = classify_stage(practiced, correct, best)
                    after = classify_stage(practiced + 1, correct + 1, best)
                    assert after >= before


class TestRecordAttempt:
    def test_first_correct_attempt(self):
        item = PracticeItem(id="w1", text="cat")
        at = dt.datetime(2026, 3, 10, 9, 30)
        updated, update = record_attempt(item, True, at=at)

        assert updated.times_practiced == 1
        assert updated.times_correct == 1
        assert updated.best_accuracy == 100.0
        assert updated.last_practiced_at == at
        assert updated.version == 1
        assert updated.current_stage == MasteryStage.SEEDLING
        assert not update.just_advanced
        # The input record is untouched
        assert item.times_practiced == 0

    def test_three_correct_attempts_master_the_word(self):
        item = PracticeItem(id="w1", text="cat")
        advanced = []
        for _ in range(3):
            item, update = record_attempt(item, True)
            advanced.append(update.just_advanced)

        assert item.current_stage == MasteryStage.MASTERED
        assert advanced == [False, False, True]
        assert item.version == 3

    def test_miss_keeps_best_accuracy(self):
        item = PracticeItem(id="w1", text="cat", times_practiced=1, times_correct=1, best_accuracy=100.0)
        updated, _ = record_attempt(item, False)
        assert updated.times_practiced == 2
        assert updated.times_correct == 1
        assert updated.best_accuracy == 100.0

    def test_sentence_items_carry_no_stage(self):
        sentence = PracticeItem(id="s1", text="The dog ran.", current_stage=None)
        updated, update = record_attempt(sentence, True, accuracy=80.0)
        assert updated.current_stage is None
        assert updated.best_accuracy == 80.0
        assert not update.just_advanced

    def test_invalid_accuracy_rejected(self):
        with pytest.raises(PracticeValidationError):
            record_attempt(PracticeItem(id="w1", text="cat"), True, accuracy=101.0)


class TestPracticeItemInvariants:
    def test_correct_cannot_exceed_practiced(self):
        with pytest.raises(PracticeValidationError):
            PracticeItem(id="w1", text="cat", times_practiced=1, times_correct=2)

    def test_stage_label_coerced(self):
        item = PracticeItem(id="w1", text="cat", times_practiced=5, times_correct=3, current_stage="growing")
        assert item.current_stage is MasteryStage.GROWING

    @pytest.mark.parametrize("stage", ["growing", "blooming", "mastered"])
    def test_stage_needs_enough_attempts(self, stage):
        with pytest.raises(PracticeValidationError):
            PracticeItem(id="w1", text="cat", times_practiced=2, times_correct=2, current_stage=stage)

    def test_seedling_and_sentence_items_need_no_attempts(self):
        assert PracticeItem(id="w1", text="cat").current_stage is MasteryStage.SEEDLING
        assert PracticeItem(id="s1", text="The dog ran.", current_stage=None).current_stage is None
