import random

from src.config import GameConfig, QuestionCategory
from src.quiz.domain.models import (
    BIAS_ORDER,
    BiasLevel,
    Question,
    SessionComposition,
    SessionOptions,
)
from src.shared.telemetry import Telemetry


class SessionSelector:
    """
    Pure Domain Logic.
    Builds one quiz session: a weighted category mix, bias-level round robin
    for REAL_DATA questions, a cap on featured names among TOP-bias picks, and
    exclusion of already-seen questions with a fallback to repeats.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()
        self.telemetry = Telemetry("SessionSelector")

    def select(
        self, pool: list[Question], options: SessionOptions | None = None
    ) -> list[Question]:
        options = options or SessionOptions()
        size = GameConfig.QUESTIONS_PER_SESSION

        # 1. Segregate Pools (first occurrence wins on duplicate ids)
        pools: dict[QuestionCategory, list[Question]] = {
            c: [] for c in QuestionCategory
        }
        seen_ids: set[str] = set()
        for q in pool:
            if q.id in seen_ids:
                continue
            seen_ids.add(q.id)
            pools[q.category].append(q)

        # 2. Calculate Targets
        if options.data_only:
            composition = SessionComposition(real=size, theory=0, knowledge=0)
        else:
            composition = self.pick_composition()

        # 3. Selection Logic
        real_candidates = self._apply_exclusions(
            pools[QuestionCategory.REAL_DATA], options.excluded_ids, composition.real
        )
        selected = self._draw_balanced(real_candidates, composition.real, [])

        extra_targets = [
            (QuestionCategory.THEORY, composition.theory),
            (QuestionCategory.KNOWLEDGE, composition.knowledge),
        ]
        leftovers: dict[QuestionCategory, list[Question]] = {}
        for category, target in extra_targets:
            candidates = self._apply_exclusions(
                pools[category], options.excluded_ids, target
            )
            drawn = self.rng.sample(candidates, min(target, len(candidates)))
            selected.extend(drawn)
            drawn_ids = {q.id for q in drawn}
            leftovers[category] = [q for q in candidates if q.id not in drawn_ids]

        # 4. Backfill a short category with REAL_DATA, then THEORY.
        # Knowledge stays at most one per session.
        if len(selected) < size and not options.data_only:
            real_taken = sum(
                1 for q in selected if q.category is QuestionCategory.REAL_DATA
            )
            real_candidates = self._apply_exclusions(
                pools[QuestionCategory.REAL_DATA],
                options.excluded_ids,
                real_taken + size - len(selected),
            )
            selected = self._draw_balanced(real_candidates, size, selected)
            if len(selected) < size:
                needed = size - len(selected)
                spare = leftovers.get(QuestionCategory.THEORY, [])
                selected.extend(self.rng.sample(spare, min(needed, len(spare))))

        if len(selected) < size:
            self.telemetry.log_warning(
                "Insufficient content for a full session",
                requested=size,
                selected=len(selected),
                data_only=options.data_only,
            )

        self.rng.shuffle(selected)

        self.telemetry.log_info(
            "Session Composed",
            target=(composition.real, composition.theory, composition.knowledge),
            actual=SessionComposition.of(selected),
            excluded=len(options.excluded_ids),
        )
        return selected

    def pick_composition(self) -> SessionComposition:
        triples = list(GameConfig.COMPOSITION_WEIGHTS.keys())
        weights = list(GameConfig.COMPOSITION_WEIGHTS.values())
        real, theory, knowledge = self.rng.choices(triples, weights=weights, k=1)[0]
        return SessionComposition(real=real, theory=theory, knowledge=knowledge)

    def _apply_exclusions(
        self, candidates: list[Question], excluded_ids: frozenset[str], needed: int
    ) -> list[Question]:
        """
        Drops already-seen questions. When exclusions were supplied and leave
        fewer than `needed` candidates, the unfiltered list is used instead
        (repeats are preferred over a short session).
        """
        if not excluded_ids:
            return candidates

        filtered = [q for q in candidates if q.id not in excluded_ids]
        if len(filtered) < needed:
            self.telemetry.log_info(
                "Exclusion fallback: allowing repeats",
                needed=needed,
                available=len(filtered),
                total=len(candidates),
            )
            return candidates
        return filtered

    def _draw_balanced(
        self, candidates: list[Question], target: int, selected: list[Question]
    ) -> list[Question]:
        """
        Round-robin across TOP/MID/AVG/LOW until `selected` reaches `target`.
        An exhausted group is skipped for that round.
        """
        result = list(selected)
        taken = {q.id for q in result}
        featured_top = sum(1 for q in result if q.is_featured_top)

        groups: dict[BiasLevel, list[Question]] = {level: [] for level in BIAS_ORDER}
        for q in candidates:
            if q.id not in taken:
                groups[q.bias_level].append(q)
        for group in groups.values():
            self.rng.shuffle(group)

        while len(result) < target and any(groups.values()):
            for level in BIAS_ORDER:
                if len(result) >= target:
                    break
                group = groups[level]
                if not group:
                    continue

                pick = group.pop()
                over_cap = featured_top >= GameConfig.FEATURED_TOP_CAP
                if pick.is_featured_top and over_cap:
                    replacement = self._draw_replacement(groups)
                    if replacement is not None:
                        # Requeue behind the rest of its group
                        group.insert(0, pick)
                        pick = replacement
                    else:
                        self.telemetry.log_info(
                            "Featured cap exceeded: no alternative", q_id=pick.id
                        )

                if pick.is_featured_top:
                    featured_top += 1
                taken.add(pick.id)
                result.append(pick)

        return result

    def _draw_replacement(
        self, groups: dict[BiasLevel, list[Question]]
    ) -> Question | None:
        """
        Finds a question for a capped slot. Retries come from the pooled
        MID/AVG/LOW groups, or from what is left of TOP once those are empty.
        Returns None only when no question outside the cap remains.
        """
        pooled = [q for level in BIAS_ORDER[1:] for q in groups[level]]
        if not pooled:
            pooled = list(groups[BiasLevel.TOP])

        for _ in range(GameConfig.FEATURED_RETRY_LIMIT):
            if not pooled:
                return None
            alt = self.rng.choice(pooled)
            if not alt.is_featured_top:
                groups[alt.bias_level].remove(alt)
                return alt

        eligible = [q for q in pooled if not q.is_featured_top]
        if not eligible:
            return None
        alt = self.rng.choice(eligible)
        groups[alt.bias_level].remove(alt)
        return alt
