# api/v1/meals.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from services.db import SqlMealPlanStore
from api.v1.deps import get_store
from api.v1.schemas import MealSwapIn, ServingsIn

router = APIRouter()


@router.post(
    "/swap",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Exchange the scheduled day/time of two meals",
)
async def swap_meals(
    body: MealSwapIn,
    store: SqlMealPlanStore = Depends(get_store),
) -> Response:
    await store.swap_meals(body.from_meal_id, body.to_meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{meal_id}/complete",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark a planned meal as eaten",
)
async def complete_meal(
    meal_id: str,
    store: SqlMealPlanStore = Depends(get_store),
) -> Response:
    await store.complete_meal(meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{meal_id}/servings",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Scale a planned meal",
)
async def scale_meal(
    meal_id: str,
    body: ServingsIn,
    store: SqlMealPlanStore = Depends(get_store),
) -> Response:
    await store.scale_meal(meal_id, body.servings)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
