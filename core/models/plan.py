from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


@dataclass(frozen=True)
class MealSlot:
    meal_type: MealType
    time: str              # "HH:MM"
    calorie_ratio: float   # share of the daily calorie target


class Meal(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    meal_plan_id: str
    recipe_id: str
    meal_type: MealType
    scheduled_date: dt.date
    scheduled_time: str
    servings: float = 1
    completed: bool = False

    # display copy of the recipe, not persisted
    name: str = ""
    calories: float = 0
    prep_time: int = 0
    cook_time: int = 0
    image_url: str | None = None


class NutritionSummary(BaseModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    sugar: float = 0
    sodium: float = 0


class DailyMealPlan(BaseModel):
    date: dt.date
    meals: list[Meal] = []
    total_calories: float = 0
    nutrition_summary: NutritionSummary = Field(default_factory=NutritionSummary)


class GroceryItem(BaseModel):
    id: str
    name: str
    quantity: float
    unit: str
    category: str
    estimated_cost: float | None = None


class WeeklyMealPlan(BaseModel):
    id: str
    user_id: str
    week_starting: dt.date
    daily_plans: list[DailyMealPlan] = []
    grocery_list: list[GroceryItem] = []
    created_at: dt.datetime
    updated_at: dt.datetime


class DayPersistenceFailure(BaseModel):
    date: dt.date
    meal_count: int
    error: str


class GenerationResult(BaseModel):
    plan: WeeklyMealPlan
    persistence_failures: list[DayPersistenceFailure] = []

    @property
    def fully_persisted(self) -> bool:
        return not self.persistence_failures
