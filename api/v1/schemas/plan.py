from __future__ import annotations

from pydantic import BaseModel, Field

from core.models import (
    DayPersistenceFailure,
    NutritionSummary,
    PreferenceOverrides,
    WeeklyMealPlan,
)


class GeneratePlanRequest(BaseModel):
    user_id: str = Field(..., examples=["7f9c1e2a-3b44-4c55-9d66-0e7f8a9b0c1d"])
    start_date: str = Field(..., examples=["2024-01-01"])
    preferences: PreferenceOverrides | None = None


class GeneratePlanResponse(BaseModel):
    plan: WeeklyMealPlan
    weekly_average: NutritionSummary
    persistence_failures: list[DayPersistenceFailure] = []
