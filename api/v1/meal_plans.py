# api/v1/meal_plans.py
from __future__ import annotations

import random

from fastapi import APIRouter, Depends, HTTPException, status

from config import settings
from core.meal_planner import PreferenceSource, generate_weekly_meal_plan
from core.models import WeeklyMealPlan
from core.nutrition import summarize_week
from services.db import SqlMealPlanStore
from api.v1.deps import get_rng, get_source, get_store
from api.v1.schemas import GeneratePlanRequest, GeneratePlanResponse

router = APIRouter()


@router.post(
    "",
    response_model=GeneratePlanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate and store a new 7-day meal plan",
)
async def generate_plan(
    body: GeneratePlanRequest,
    source: PreferenceSource = Depends(get_source),
    store: SqlMealPlanStore = Depends(get_store),
    rng: random.Random = Depends(get_rng),
) -> GeneratePlanResponse:
    """
    Merge the user's stored preferences with `preferences`, pick recipes
    and persist the plan. Days whose meals could not be stored are listed
    in `persistence_failures`; the plan itself is still returned.
    """
    result = await generate_weekly_meal_plan(
        body.user_id,
        body.start_date,
        body.preferences,
        source=source,
        store=store,
        rng=rng,
        candidate_limit=settings.recipe_candidate_limit,
        top_n=settings.plan_top_n,
    )
    return GeneratePlanResponse(
        plan=result.plan,
        weekly_average=summarize_week(result.plan.daily_plans),
        persistence_failures=result.persistence_failures,
    )


@router.get(
    "/{user_id}/current",
    response_model=WeeklyMealPlan,
    summary="Fetch the user's active meal plan",
)
async def current_plan(
    user_id: str,
    store: SqlMealPlanStore = Depends(get_store),
) -> WeeklyMealPlan:
    plan = await store.get_current_plan(user_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="No active meal plan")
    return plan
