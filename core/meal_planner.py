"""
core/meal_planner.py
────────────────────────────────────────────────────────────────────────
Entry point for weekly plan generation:

  • PreferenceSource     → profile / meal prefs / planning settings / recipes
  • merge_preferences()  → one canonical `Preferences`
  • RecipeFilter         → candidate recipes (raises NoMatchError)
  • WeeklyPlanBuilder    → 7-day plan, persisted through a MealPlanStore

All public I/O happens through `generate_weekly_meal_plan(...)`.
"""
from __future__ import annotations

import asyncio
import logging
import random
from datetime import date, datetime
from typing import List, Protocol

from core.errors import InputError
from core.models import (
    GenerationResult,
    MealPlanningSettings,
    MealPreferences,
    PreferenceOverrides,
    Recipe,
    UserProfile,
)
from core.plan_builder import DEFAULT_TOP_N, MealPlanStore, WeeklyPlanBuilder
from core.preferences import merge_preferences
from core.recipe_filter import DEFAULT_CANDIDATE_LIMIT, RecipeFilter

_LOG = logging.getLogger(__name__)


class PreferenceSource(Protocol):
    async def get_profile(self, user_id: str) -> UserProfile | None: ...

    async def get_meal_preferences(self, user_id: str) -> MealPreferences | None: ...

    async def get_planning_settings(self, user_id: str) -> MealPlanningSettings | None: ...

    async def load_recipes(self, max_prep_minutes: int) -> List[Recipe]: ...


def parse_start_date(value: str | date | None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise InputError("User ID and start date are required")
    text = str(value).strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        # full timestamps are accepted, trailing junk is not
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise InputError(f"start date must be an ISO-8601 date, got {value!r}") from exc


async def generate_weekly_meal_plan(
    user_id: str,
    start_date: str | date,
    overrides: PreferenceOverrides | None = None,
    *,
    source: PreferenceSource,
    store: MealPlanStore,
    rng: random.Random | None = None,
    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
    top_n: int = DEFAULT_TOP_N,
) -> GenerationResult:
    if not user_id or not str(user_id).strip():
        raise InputError("User ID and start date are required")
    start = parse_start_date(start_date)

    # the three reads are independent
    profile, meal_prefs, planning = await asyncio.gather(
        source.get_profile(user_id),
        source.get_meal_preferences(user_id),
        source.get_planning_settings(user_id),
    )
    prefs = merge_preferences(profile, meal_prefs, planning, overrides)
    _LOG.info("combined preferences for user %s: %s", user_id, prefs.model_dump())

    corpus = await source.load_recipes(max_prep_minutes=prefs.cooking_time_limit)
    candidates = RecipeFilter(corpus, limit=candidate_limit).filter(prefs)

    builder = WeeklyPlanBuilder(store, rng=rng, top_n=top_n)
    return await builder.build(user_id, candidates, prefs, start)
