from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

BudgetRange = Literal["low", "medium", "high"]


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    dietary_restrictions: list[str] = []
    allergies: list[str] = []
    health_goals: list[str] = []
    activity_level: str = "moderately-active"
    lifestyle_factors: list[str] = []


class MealPreferences(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    cuisine_types: list[str] = []
    cooking_time_preference: str | None = "moderate"
    meal_complexity: str | None = "moderate"
    budget_range: BudgetRange | None = "medium"


class MealPlanningSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    cooking_time_preference: str | None = "moderate"
    budget_range: BudgetRange | None = "medium"
    preferred_cuisines: list[str] = []
    household_size: int = 2
    include_snacks: bool = True


class PreferenceOverrides(BaseModel):
    """Request-level knobs; anything left as None falls through to stored data."""

    dietary_restrictions: list[str] | None = None
    allergies: list[str] | None = None
    cuisine_preferences: list[str] | None = None
    cooking_time_limit: int | None = Field(None, gt=0)
    budget_range: BudgetRange | None = None
    calorie_target: int | None = Field(None, gt=0)
    protein_target: float | None = None
    carb_target: float | None = None
    fat_target: float | None = None
    include_snacks: bool | None = None


class Preferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    dietary_restrictions: tuple[str, ...] = ()
    allergies: tuple[str, ...] = ()
    cuisine_preferences: tuple[str, ...] = ()
    cooking_time_limit: int = 60
    budget_range: BudgetRange = "medium"
    calorie_target: int = Field(2000, ge=1500, le=3000)
    protein_target: float | None = None
    carb_target: float | None = None
    fat_target: float | None = None
    include_snacks: bool = True
    health_goals: tuple[str, ...] = ()
    activity_level: str = "moderately-active"
