from __future__ import annotations

from pydantic import BaseModel, Field


class ServingsIn(BaseModel):
    servings: float = Field(..., gt=0, examples=[2])


class MealSwapIn(BaseModel):
    from_meal_id: str
    to_meal_id: str
