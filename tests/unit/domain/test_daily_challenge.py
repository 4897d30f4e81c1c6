from datetime import date

from src.config import QuestionCategory
from src.quiz.domain.daily_challenge import (
    PREVIEW_THEMES,
    DailyChallengeSelector,
    hash_seed,
    shuffle_with_seed,
    tomorrow_preview,
)


class TestHashSeed:
    def test_known_values(self):
        assert hash_seed("") == 0
        assert hash_seed("a") == 97
        assert hash_seed("ab") == 97 * 31 + 98

    def test_stays_within_32_bits(self):
        seed = hash_seed("daily-challenge-2025-06-10" * 20)
        assert 0 <= seed < 2**32


class TestShuffleWithSeed:
    def test_same_seed_same_order(self):
        items = list(range(20))
        assert shuffle_with_seed(items, 123) == shuffle_with_seed(items, 123)

    def test_does_not_mutate_input(self):
        items = list(range(10))
        shuffle_with_seed(items, 5)
        assert items == list(range(10))

    def test_is_a_permutation(self):
        items = list(range(10))
        assert sorted(shuffle_with_seed(items, 99)) == items


class TestDailyChallengeSelector:
    def test_same_day_same_questions(self, sample_pool):
        """
        GIVEN the same pool (in any order) and the same day
        WHEN two players open the daily challenge
        THEN both get identical questions in identical order
        """
        selector = DailyChallengeSelector()
        day = date(2025, 6, 10)

        first = selector.select(sample_pool, day)
        second = selector.select(list(reversed(sample_pool)), day)

        assert [q.id for q in first] == [q.id for q in second]
        assert len(first) == 5

    def test_different_days_usually_differ(self, sample_pool):
        selector = DailyChallengeSelector()
        days = [date(2025, 6, d) for d in range(1, 8)]

        picks = {tuple(q.id for q in selector.select(sample_pool, d)) for d in days}

        assert len(picks) > 1

    def test_category_filter(self, sample_pool):
        picked = DailyChallengeSelector().select(
            sample_pool, date(2025, 6, 10), category=QuestionCategory.THEORY
        )

        assert len(picked) == 5
        assert all(q.category is QuestionCategory.THEORY for q in picked)

    def test_short_pool_returns_everything(self, make_question):
        pool = [make_question(f"Q{i}") for i in range(3)]

        picked = DailyChallengeSelector().select(pool, date(2025, 6, 10))

        assert sorted(q.id for q in picked) == ["Q0", "Q1", "Q2"]


class TestTomorrowPreview:
    def test_is_deterministic_and_from_theme_list(self):
        day = date(2025, 6, 10)

        assert tomorrow_preview(day) == tomorrow_preview(day)
        assert tomorrow_preview(day) in PREVIEW_THEMES

    def test_uses_next_day_seed(self):
        day = date(2025, 6, 10)
        seed = hash_seed("tomorrow-preview-2025-06-11")

        assert tomorrow_preview(day) == PREVIEW_THEMES[seed % len(PREVIEW_THEMES)]
