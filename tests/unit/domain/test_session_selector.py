import random
from collections import Counter

import pytest

from src.config import GameConfig, QuestionCategory
from src.quiz.domain.models import BiasLevel, SessionComposition, SessionOptions
from src.quiz.domain.session_selector import SessionSelector
from tests.drivers.builders import build_question


def _featured_top(qid: str):
    return build_question(qid, bias=BiasLevel.TOP, situation=f"Ohtani at bat {qid}")


def _fixed(selector: SessionSelector, real: int, theory: int, knowledge: int):
    selector.pick_composition = lambda: SessionComposition(real, theory, knowledge)
    return selector


class TestComposition:
    @pytest.mark.parametrize("seed", range(25))
    def test_session_is_full_unique_and_valid(self, sample_pool, seed):
        """
        GIVEN a pool with plenty of every category
        WHEN a session is selected
        THEN it has 5 distinct questions and a composition from the menu
        """
        selected = SessionSelector(rng=random.Random(seed)).select(sample_pool)

        assert len(selected) == GameConfig.QUESTIONS_PER_SESSION
        assert len({q.id for q in selected}) == len(selected)

        comp = SessionComposition.of(selected)
        assert comp.is_valid()
        triple = (comp.real, comp.theory, comp.knowledge)
        assert triple in GameConfig.COMPOSITION_WEIGHTS

    def test_data_only_returns_only_real_data(self, sample_pool):
        selector = SessionSelector(rng=random.Random(1))

        selected = selector.select(sample_pool, SessionOptions(data_only=True))

        assert len(selected) == 5
        assert all(q.category is QuestionCategory.REAL_DATA for q in selected)

    def test_pick_composition_follows_weights(self):
        """
        GIVEN the weighted composition menu
        WHEN many compositions are drawn
        THEN observed frequencies track the weights
        """
        selector = SessionSelector(rng=random.Random(7))
        draws = 6000
        counts = Counter(
            (c.real, c.theory, c.knowledge)
            for c in (selector.pick_composition() for _ in range(draws))
        )
        total_weight = sum(GameConfig.COMPOSITION_WEIGHTS.values())

        assert set(counts) <= set(GameConfig.COMPOSITION_WEIGHTS)
        for triple, weight in GameConfig.COMPOSITION_WEIGHTS.items():
            expected = weight / total_weight
            assert abs(counts[triple] / draws - expected) < 0.03

    def test_menu_triples_are_all_valid(self):
        for real, theory, knowledge in GameConfig.COMPOSITION_WEIGHTS:
            assert SessionComposition(real, theory, knowledge).is_valid()


class TestBiasBalance:
    def test_round_robin_spreads_bias_levels(self, sample_pool):
        """
        GIVEN 8 REAL_DATA questions in each bias group
        WHEN a data-only session is drawn
        THEN every bias level appears and TOP (first in the rotation) twice
        """
        selected = SessionSelector(rng=random.Random(3)).select(
            sample_pool, SessionOptions(data_only=True)
        )

        levels = Counter(q.bias_level for q in selected)
        assert levels == {
            BiasLevel.TOP: 2,
            BiasLevel.MID: 1,
            BiasLevel.AVG: 1,
            BiasLevel.LOW: 1,
        }

    def test_exhausted_group_is_skipped(self):
        """
        GIVEN only TOP and LOW REAL_DATA questions
        WHEN a data-only session is drawn
        THEN the draw alternates between the non-empty groups
        """
        pool = [build_question(f"T{i}", bias=BiasLevel.TOP) for i in range(5)]
        pool += [build_question(f"L{i}", bias=BiasLevel.LOW) for i in range(5)]

        selected = SessionSelector(rng=random.Random(0)).select(
            pool, SessionOptions(data_only=True)
        )

        levels = Counter(q.bias_level for q in selected)
        assert levels == {BiasLevel.TOP: 3, BiasLevel.LOW: 2}

    def test_bias_levels_have_comparable_frequency(self, sample_pool):
        """
        GIVEN 8 REAL_DATA questions in each bias group and no exclusions
        WHEN 1000 mixed sessions are drawn
        THEN every bias level shows up in the REAL_DATA picks and no level
        dominates the others
        """
        selector = SessionSelector(rng=random.Random(2024))
        levels: Counter[BiasLevel] = Counter()
        for _ in range(1000):
            selected = selector.select(sample_pool)
            levels.update(
                q.bias_level
                for q in selected
                if q.category is QuestionCategory.REAL_DATA
            )

        total = sum(levels.values())
        shares = {level: levels[level] / total for level in BiasLevel}
        assert all(0.1 < share < 0.4 for share in shares.values())
        assert max(shares.values()) / min(shares.values()) < 2.5


class TestFeaturedCap:
    @pytest.mark.parametrize("seed", range(20))
    def test_at_most_one_featured_top_question(self, seed):
        """
        GIVEN many featured TOP questions and enough alternatives
        WHEN a data-only session is drawn
        THEN at most one selected question is featured and TOP
        """
        pool = [_featured_top(f"F{i}") for i in range(6)]
        for level in (BiasLevel.MID, BiasLevel.AVG, BiasLevel.LOW):
            pool += [build_question(f"{level.value}{i}", bias=level) for i in range(3)]

        selected = SessionSelector(rng=random.Random(seed)).select(
            pool, SessionOptions(data_only=True)
        )

        assert len(selected) == 5
        assert sum(1 for q in selected if q.is_featured_top) <= 1

    def test_featured_mid_questions_are_not_capped(self):
        pool = [
            build_question(f"M{i}", bias=BiasLevel.MID, situation=f"Judge swing {i}")
            for i in range(5)
        ]

        selected = SessionSelector(rng=random.Random(0)).select(
            pool, SessionOptions(data_only=True)
        )

        assert len(selected) == 5
        assert all(q.is_featured and not q.is_featured_top for q in selected)

    def test_cap_yields_when_no_alternative_exists(self):
        """
        GIVEN only featured TOP questions
        WHEN a data-only session is drawn
        THEN the slots are still filled (cap is best effort)
        """
        pool = [_featured_top(f"F{i}") for i in range(5)]

        selected = SessionSelector(rng=random.Random(0)).select(
            pool, SessionOptions(data_only=True)
        )

        assert len(selected) == 5

    @pytest.mark.parametrize("seed", range(200))
    def test_cap_holds_with_plain_top_questions_left(self, seed):
        """
        GIVEN featured and plain questions that are all TOP
        WHEN a data-only session is drawn
        THEN the plain TOP questions fill the slots past the cap
        """
        pool = [_featured_top(f"F{i}") for i in range(3)]
        pool += [build_question(f"P{i}", bias=BiasLevel.TOP) for i in range(5)]

        selected = SessionSelector(rng=random.Random(seed)).select(
            pool, SessionOptions(data_only=True)
        )

        assert len(selected) == 5
        assert sum(1 for q in selected if q.is_featured_top) <= 1

    @pytest.mark.parametrize("seed", range(20))
    def test_replacement_skips_featured_top_questions(self, seed):
        """
        GIVEN only TOP questions left, one of them plain
        WHEN a capped slot needs a replacement
        THEN the plain question is taken out of its group and returned
        """
        plain = build_question("P0", bias=BiasLevel.TOP)
        groups = {level: [] for level in BiasLevel}
        groups[BiasLevel.TOP] = [_featured_top(f"F{i}") for i in range(4)] + [plain]

        alt = SessionSelector(rng=random.Random(seed))._draw_replacement(groups)

        assert alt is plain
        assert plain not in groups[BiasLevel.TOP]
        assert len(groups[BiasLevel.TOP]) == 4

    def test_no_replacement_when_only_featured_top_questions_remain(self):
        groups = {level: [] for level in BiasLevel}
        groups[BiasLevel.TOP] = [_featured_top(f"F{i}") for i in range(3)]

        alt = SessionSelector(rng=random.Random(0))._draw_replacement(groups)

        assert alt is None
        assert len(groups[BiasLevel.TOP]) == 3


class TestExclusions:
    def test_excluded_ids_are_avoided_when_possible(self, sample_pool):
        excluded = frozenset(q.id for q in sample_pool[:20])

        for seed in range(10):
            selected = SessionSelector(rng=random.Random(seed)).select(
                sample_pool, SessionOptions(excluded_ids=excluded)
            )
            assert len(selected) == 5
            assert not {q.id for q in selected} & excluded

    def test_falls_back_to_repeats_when_exclusions_starve_a_category(self):
        """
        GIVEN 5 REAL_DATA questions, 4 of them already seen today
        WHEN a data-only session is requested
        THEN repeats are allowed so the session is still full
        """
        pool = [build_question(f"R{i}", bias=BiasLevel.AVG) for i in range(5)]
        excluded = frozenset(f"R{i}" for i in range(4))

        selected = SessionSelector(rng=random.Random(0)).select(
            pool, SessionOptions(data_only=True, excluded_ids=excluded)
        )

        assert len(selected) == 5

    def test_no_fallback_without_exclusions(self):
        pool = [build_question(f"R{i}") for i in range(3)]

        selected = SessionSelector(rng=random.Random(0)).select(
            pool, SessionOptions(data_only=True)
        )

        assert len(selected) == 3

    def test_backfill_falls_back_to_repeats_when_theory_is_missing(self):
        """
        GIVEN 10 REAL_DATA questions, 6 already seen today, and no THEORY
        WHEN a (4, 1, 0) session is requested
        THEN the unfilled THEORY slot takes a repeat so the session is full
        """
        pool = [build_question(f"R{i}") for i in range(10)]
        excluded = frozenset(f"R{i}" for i in range(6))
        selector = _fixed(SessionSelector(rng=random.Random(0)), 4, 1, 0)

        selected = selector.select(pool, SessionOptions(excluded_ids=excluded))

        ids = {q.id for q in selected}
        assert len(selected) == 5
        assert len(ids) == 5
        assert {"R6", "R7", "R8", "R9"} <= ids
        assert len(ids & excluded) == 1


class TestShortfall:
    def test_empty_pool_returns_empty_list(self):
        assert SessionSelector(rng=random.Random(0)).select([]) == []

    def test_missing_categories_are_backfilled_with_real_data(self):
        pool = [build_question(f"R{i}", bias=BiasLevel.MID) for i in range(10)]
        selector = _fixed(SessionSelector(rng=random.Random(0)), 3, 2, 0)

        selected = selector.select(pool)

        assert len(selected) == 5
        assert all(q.category is QuestionCategory.REAL_DATA for q in selected)

    def test_theory_backfills_when_real_data_runs_out(self):
        """
        GIVEN 2 REAL_DATA, 6 THEORY and no KNOWLEDGE questions
        WHEN the (2, 2, 1) composition is drawn
        THEN the knowledge slot is filled with another THEORY question
        """
        pool = [build_question(f"R{i}") for i in range(2)]
        pool += [
            build_question(f"T{i}", category=QuestionCategory.THEORY)
            for i in range(6)
        ]
        selector = _fixed(SessionSelector(rng=random.Random(0)), 2, 2, 1)

        selected = selector.select(pool)

        comp = SessionComposition.of(selected)
        assert (comp.real, comp.theory, comp.knowledge) == (2, 3, 0)
        assert comp.is_valid()

    def test_short_pool_returns_short_session(self):
        pool = [build_question(f"R{i}") for i in range(3)]
        pool.append(build_question("T0", category=QuestionCategory.THEORY))

        selected = SessionSelector(rng=random.Random(0)).select(pool)

        assert len(selected) == 4
        assert len({q.id for q in selected}) == 4

    def test_duplicate_ids_in_pool_are_selected_once(self):
        pool = [build_question("R-dup") for _ in range(4)]
        pool += [build_question(f"R{i}") for i in range(2)]

        selected = SessionSelector(rng=random.Random(0)).select(
            pool, SessionOptions(data_only=True)
        )

        assert sorted(q.id for q in selected) == ["R-dup", "R0", "R1"]
