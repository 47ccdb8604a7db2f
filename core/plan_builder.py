"""
core/plan_builder.py
────────────────────────────────────────────────────────────────────────
Seven-day plan assembly.

For every day and every meal slot the builder scores the still-unused
candidates against the slot's share of the calorie target and picks one
of the best `top_n` at random. The set of used recipe ids is threaded
through the loop as an immutable value, so a recipe appears at most once
in the whole week.

Each day's meals are written as one batch; a failed batch is reported in
`GenerationResult.persistence_failures` and the remaining days are still
generated.
"""

from __future__ import annotations

import logging
import random
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import List, Protocol, Sequence, Tuple

import numpy as np
import pandas as pd

from core.errors import PersistenceError
from core.models import (
    DailyMealPlan,
    DayPersistenceFailure,
    GenerationResult,
    Meal,
    MealSlot,
    Preferences,
    Recipe,
    WeeklyMealPlan,
)
from core.nutrition import summarize_day, total_calories

_LOG = logging.getLogger(__name__)

PLAN_DAYS = 7
DEFAULT_TOP_N = 3

MEAL_SLOTS: Tuple[MealSlot, ...] = (
    MealSlot("breakfast", "08:00", 0.25),
    MealSlot("lunch", "13:00", 0.35),
    MealSlot("dinner", "19:00", 0.40),
)
SNACK_SLOT = MealSlot("snack", "15:30", 0.10)

# shown when a recipe has no picture of its own
DEFAULT_MEAL_IMAGES = {
    "breakfast": "https://images.pexels.com/photos/376464/pexels-photo-376464.jpeg",
    "lunch": "https://images.pexels.com/photos/1640777/pexels-photo-1640777.jpeg",
    "dinner": "https://images.pexels.com/photos/958545/pexels-photo-958545.jpeg",
    "snack": "https://images.pexels.com/photos/1092730/pexels-photo-1092730.jpeg",
}


def meal_image(meal_type: str, image_url: str | None) -> str:
    return image_url or DEFAULT_MEAL_IMAGES.get(meal_type, DEFAULT_MEAL_IMAGES["lunch"])


# extra tags that make a recipe fit a slot besides the slot name itself
_SLOT_TAGS = {
    "breakfast": {"breakfast"},
    "lunch": {"lunch", "main-course"},
    "dinner": {"dinner", "main-course"},
    "snack": {"snack", "light"},
}

DIFFICULTY_SCORE = {"easy": 1.0, "medium": 0.7, "hard": 0.4}
CUISINE_BONUS = 1.2
# minutes at which the time score reaches zero
TIME_HORIZON = 120

W_CALORIES, W_DIFFICULTY, W_TIME = 0.4, 0.3, 0.3


class MealPlanStore(Protocol):
    async def create_plan(self, plan: WeeklyMealPlan) -> None: ...

    async def insert_meals(self, day: date, meals: Sequence[Meal]) -> None: ...


def slots_for(include_snacks: bool) -> Tuple[MealSlot, ...]:
    return MEAL_SLOTS + (SNACK_SLOT,) if include_snacks else MEAL_SLOTS


def is_suitable(recipe: Recipe, meal_type: str) -> bool:
    tags = set(recipe.lower_tags)
    if meal_type in tags or "any-meal" in tags:
        return True
    if not tags.isdisjoint(_SLOT_TAGS.get(meal_type, ())):
        return True
    return meal_type == "breakfast" and "breakfast" in recipe.name.lower()


# ──────────────────────────── scoring ─────────────────────────── #
def score_candidates(
    recipes: Sequence[Recipe],
    target_calories: float,
    cuisines: Sequence[str] = (),
) -> pd.DataFrame:
    """
    One row per recipe (index = position in `recipes`) with a `score`
    column. Higher is better; the calorie term is not clamped and goes
    negative for meals far off target.
    """
    prefs = [c.lower() for c in cuisines]
    df = pd.DataFrame(
        {
            "calories": [r.calories_per_serving for r in recipes],
            "difficulty": [r.difficulty for r in recipes],
            "total_time": [r.total_time_minutes for r in recipes],
            "cuisine_match": [
                any(p in tag for tag in r.lower_tags for p in prefs) for r in recipes
            ],
        }
    )

    calorie = 1 - (df["calories"] - target_calories).abs() / target_calories
    difficulty = df["difficulty"].map(DIFFICULTY_SCORE).fillna(DIFFICULTY_SCORE["hard"])
    timing = 1 - df["total_time"] / TIME_HORIZON
    bonus = np.where(df["cuisine_match"].astype(bool) & bool(prefs), CUISINE_BONUS, 1.0)

    total = (calorie * W_CALORIES + difficulty * W_DIFFICULTY + timing * W_TIME) * bonus
    return df.assign(score=total.astype(float))


def select_recipe(
    candidates: Sequence[Recipe],
    meal_type: str,
    target_calories: float,
    used: frozenset[str],
    prefs: Preferences,
    rng: random.Random,
    top_n: int = DEFAULT_TOP_N,
) -> Recipe | None:
    unused = [r for r in candidates if r.id not in used]
    if not unused:
        return None

    suitable = [r for r in unused if is_suitable(r, meal_type)]
    if not suitable:
        _LOG.debug("no %s-suitable recipe left – random unused pick", meal_type)
        return rng.choice(unused)

    scored = score_candidates(suitable, target_calories, prefs.cuisine_preferences)
    top = scored.sort_values("score", ascending=False, kind="stable").head(top_n)
    return suitable[rng.choice(top.index.tolist())]


# ──────────────────────────── builder ─────────────────────────── #
class WeeklyPlanBuilder:
    def __init__(
        self,
        store: MealPlanStore,
        rng: random.Random | None = None,
        top_n: int = DEFAULT_TOP_N,
    ) -> None:
        self._store = store
        self._rng = rng or random.Random()
        self._top_n = top_n

    def plan_day(
        self,
        plan_id: str,
        day: date,
        candidates: Sequence[Recipe],
        prefs: Preferences,
        used: frozenset[str],
    ) -> Tuple[List[Meal], frozenset[str]]:
        """Fill one day's slots; returns the meals and the grown `used` set."""
        meals: List[Meal] = []
        for slot in slots_for(prefs.include_snacks):
            target = prefs.calorie_target * slot.calorie_ratio
            recipe = select_recipe(
                candidates, slot.meal_type, target, used, prefs, self._rng, self._top_n
            )
            if recipe is None:
                _LOG.warning("no unused recipes left – %s on %s stays empty", slot.meal_type, day)
                continue

            used = used | {recipe.id}
            meals.append(
                Meal(
                    id=str(uuid.uuid4()),
                    meal_plan_id=plan_id,
                    recipe_id=recipe.id,
                    meal_type=slot.meal_type,
                    scheduled_date=day,
                    scheduled_time=slot.time,
                    servings=1,
                    completed=False,
                    name=recipe.name,
                    calories=recipe.calories_per_serving,
                    prep_time=recipe.prep_time_minutes,
                    cook_time=recipe.cook_time_minutes,
                    image_url=meal_image(slot.meal_type, recipe.image_url),
                )
            )
        return meals, used

    async def build(
        self,
        user_id: str,
        candidates: Sequence[Recipe],
        prefs: Preferences,
        start_date: date,
    ) -> GenerationResult:
        now = datetime.now(timezone.utc)
        plan = WeeklyMealPlan(
            id=str(uuid.uuid4()),
            user_id=user_id,
            week_starting=start_date,
            created_at=now,
            updated_at=now,
        )
        await self._store.create_plan(plan)

        recipes_by_id = {r.id: r for r in candidates}
        used: frozenset[str] = frozenset()
        failures: List[DayPersistenceFailure] = []

        for offset in range(PLAN_DAYS):
            day = start_date + timedelta(days=offset)
            meals, used = self.plan_day(plan.id, day, candidates, prefs, used)

            if meals:
                try:
                    await self._store.insert_meals(day, meals)
                except PersistenceError as exc:
                    _LOG.error("error inserting meals for %s: %s", day, exc)
                    failures.append(
                        DayPersistenceFailure(date=day, meal_count=len(meals), error=str(exc))
                    )

            plan.daily_plans.append(
                DailyMealPlan(
                    date=day,
                    meals=meals,
                    total_calories=total_calories(meals),
                    nutrition_summary=summarize_day(meals, recipes_by_id),
                )
            )

        _LOG.info(
            "plan %s: %d meals over %d days (%d day(s) not stored)",
            plan.id,
            sum(len(d.meals) for d in plan.daily_plans),
            PLAN_DAYS,
            len(failures),
        )
        return GenerationResult(plan=plan, persistence_failures=failures)
