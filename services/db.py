"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Models for the preference, recipe and meal-plan tables
* `SqlPreferenceSource` / `SqlMealPlanStore` – the collaborators the
  planner reads from and writes to
"""
from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Any, AsyncGenerator, AsyncIterator, List, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings
from core.errors import MealNotFoundError, PersistenceError
from core.models import (
    DailyMealPlan,
    Meal,
    MealPlanningSettings,
    MealPreferences,
    Recipe,
    UserProfile,
    WeeklyMealPlan,
)
from core.nutrition import summarize_day, total_calories
from core.plan_builder import meal_image

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None


def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = create_async_engine(settings.database_url, pool_pre_ping=True)
    return _ENGINE


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class UserProfileRow(Base):
    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # = user id
    dietary_restrictions: Mapped[list | None] = mapped_column(JSON)
    allergies: Mapped[list | None] = mapped_column(JSON)
    health_goals: Mapped[list | None] = mapped_column(JSON)
    activity_level: Mapped[str | None] = mapped_column(String)
    lifestyle_factors: Mapped[list | None] = mapped_column(JSON)


class MealPreferencesRow(Base):
    __tablename__ = "meal_preferences"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    cuisine_types: Mapped[list | None] = mapped_column(JSON)
    cooking_time_preference: Mapped[str | None] = mapped_column(String)
    meal_complexity: Mapped[str | None] = mapped_column(String)
    budget_range: Mapped[str | None] = mapped_column(String)


class MealPlanningSettingsRow(Base):
    __tablename__ = "meal_planning_settings"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    cooking_time_preference: Mapped[str | None] = mapped_column(String)
    budget_range: Mapped[str | None] = mapped_column(String)
    preferred_cuisines: Mapped[list | None] = mapped_column(JSON)
    household_size: Mapped[int | None] = mapped_column(Integer)
    include_snacks: Mapped[bool | None] = mapped_column(Boolean)


class RecipeRow(Base):
    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String)
    description: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(String)
    prep_time_minutes: Mapped[int] = mapped_column(Integer, default=0, index=True)
    cook_time_minutes: Mapped[int] = mapped_column(Integer, default=0)
    servings: Mapped[int] = mapped_column(Integer, default=1)
    difficulty: Mapped[str] = mapped_column(String, default="medium")
    instructions: Mapped[list | None] = mapped_column(JSON)
    tags: Mapped[list | None] = mapped_column(JSON)
    calories_per_serving: Mapped[float] = mapped_column(Float, default=0)
    protein_g: Mapped[float] = mapped_column(Float, default=0)
    carbs_g: Mapped[float] = mapped_column(Float, default=0)
    fat_g: Mapped[float] = mapped_column(Float, default=0)
    fibre_g: Mapped[float] = mapped_column(Float, default=0)
    sugar_g: Mapped[float] = mapped_column(Float, default=0)
    sodium_mg: Mapped[float] = mapped_column(Float, default=0)


class MealPlanRow(Base):
    __tablename__ = "meal_plans"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    name: Mapped[str] = mapped_column(String)
    start_date: Mapped[date] = mapped_column(Date)
    end_date: Mapped[date] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class MealRow(Base):
    __tablename__ = "meals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    meal_plan_id: Mapped[str] = mapped_column(ForeignKey("meal_plans.id"), index=True)
    recipe_id: Mapped[str] = mapped_column(ForeignKey("recipes.id"))
    meal_type: Mapped[str] = mapped_column(String)
    scheduled_date: Mapped[date] = mapped_column(Date)
    scheduled_time: Mapped[str] = mapped_column(String(5))
    servings: Mapped[float] = mapped_column(Float, default=1)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


# ───────── row → domain helpers ──────────────────────────────────────
_M = TypeVar("_M", bound=BaseModel)


def _to_model(model: Type[_M], row: Any) -> _M:
    """NULL columns fall back to the model's defaults."""
    data = {
        name: getattr(row, name)
        for name in model.model_fields
        if getattr(row, name, None) is not None
    }
    return model.model_validate(data)


def _recipe(row: RecipeRow) -> Recipe:
    return _to_model(Recipe, row)


# ───────── preference / corpus reads ─────────────────────────────────
class SqlPreferenceSource:
    """
    Reads go through one `AsyncSession`, which must not be used by two
    tasks at once. The planner gathers the three preference reads, so each
    read holds `_lock` while it touches the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._db = session
        self._lock = asyncio.Lock()

    async def _get(self, model: Type[_M], row_type: Any, user_id: str) -> _M | None:
        async with self._lock:
            row = await self._db.get(row_type, user_id)
            return _to_model(model, row) if row else None

    async def get_profile(self, user_id: str) -> UserProfile | None:
        return await self._get(UserProfile, UserProfileRow, user_id)

    async def get_meal_preferences(self, user_id: str) -> MealPreferences | None:
        return await self._get(MealPreferences, MealPreferencesRow, user_id)

    async def get_planning_settings(self, user_id: str) -> MealPlanningSettings | None:
        return await self._get(MealPlanningSettings, MealPlanningSettingsRow, user_id)

    async def load_recipes(self, max_prep_minutes: int) -> List[Recipe]:
        async with self._lock:
            rows = await self._db.scalars(
                select(RecipeRow)
                .where(RecipeRow.prep_time_minutes <= max_prep_minutes)
                .order_by(RecipeRow.id)
            )
            return [_recipe(r) for r in rows]


# ───────── plan writes / reads ───────────────────────────────────────
class SqlMealPlanStore:
    def __init__(self, session: AsyncSession) -> None:
        self._db = session

    async def create_plan(self, plan: WeeklyMealPlan) -> None:
        # one active plan per user
        await self._db.execute(
            update(MealPlanRow)
            .where(MealPlanRow.user_id == plan.user_id, MealPlanRow.is_active.is_(True))
            .values(is_active=False)
        )
        self._db.add(
            MealPlanRow(
                id=plan.id,
                user_id=plan.user_id,
                name=f"Week of {plan.week_starting.isoformat()}",
                start_date=plan.week_starting,
                end_date=plan.week_starting + timedelta(days=6),
                is_active=True,
                created_at=plan.created_at,
                updated_at=plan.updated_at,
            )
        )
        await self._db.commit()

    async def insert_meals(self, day: date, meals: Sequence[Meal]) -> None:
        self._db.add_all(
            [
                MealRow(
                    id=m.id,
                    meal_plan_id=m.meal_plan_id,
                    recipe_id=m.recipe_id,
                    meal_type=m.meal_type,
                    scheduled_date=m.scheduled_date,
                    scheduled_time=m.scheduled_time,
                    servings=m.servings,
                    completed=m.completed,
                )
                for m in meals
            ]
        )
        try:
            await self._db.commit()
        except SQLAlchemyError as exc:
            await self._db.rollback()
            raise PersistenceError(day, str(exc)) from exc

    async def get_current_plan(self, user_id: str) -> WeeklyMealPlan | None:
        plan = (
            await self._db.scalars(
                select(MealPlanRow)
                .where(MealPlanRow.user_id == user_id, MealPlanRow.is_active.is_(True))
                .order_by(MealPlanRow.created_at.desc())
                .limit(1)
            )
        ).first()
        if plan is None:
            return None

        rows = (
            await self._db.execute(
                select(MealRow, RecipeRow)
                .join(RecipeRow, RecipeRow.id == MealRow.recipe_id)
                .where(MealRow.meal_plan_id == plan.id)
                .order_by(MealRow.scheduled_date, MealRow.scheduled_time)
            )
        ).all()

        by_date: dict[date, list[Meal]] = defaultdict(list)
        recipes: dict[str, Recipe] = {}
        for meal_row, recipe_row in rows:
            recipe = recipes.setdefault(recipe_row.id, _recipe(recipe_row))
            by_date[meal_row.scheduled_date].append(
                Meal(
                    id=meal_row.id,
                    meal_plan_id=meal_row.meal_plan_id,
                    recipe_id=meal_row.recipe_id,
                    meal_type=meal_row.meal_type,
                    scheduled_date=meal_row.scheduled_date,
                    scheduled_time=meal_row.scheduled_time,
                    servings=meal_row.servings,
                    completed=meal_row.completed,
                    name=recipe.name,
                    calories=recipe.calories_per_serving,
                    prep_time=recipe.prep_time_minutes,
                    cook_time=recipe.cook_time_minutes,
                    image_url=meal_image(meal_row.meal_type, recipe.image_url),
                )
            )

        days = [
            plan.start_date + timedelta(days=i)
            for i in range((plan.end_date - plan.start_date).days + 1)
        ]
        return WeeklyMealPlan(
            id=plan.id,
            user_id=plan.user_id,
            week_starting=plan.start_date,
            daily_plans=[
                DailyMealPlan(
                    date=d,
                    meals=by_date[d],
                    total_calories=total_calories(by_date[d]),
                    nutrition_summary=summarize_day(by_date[d], recipes),
                )
                for d in days
            ],
            grocery_list=[],
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )

    async def _meal(self, meal_id: str) -> MealRow:
        row = await self._db.get(MealRow, meal_id)
        if row is None:
            raise MealNotFoundError(f"meal {meal_id} not found")
        return row

    async def complete_meal(self, meal_id: str) -> None:
        row = await self._meal(meal_id)
        row.completed = True
        row.completed_at = datetime.now(timezone.utc)
        await self._db.commit()

    async def scale_meal(self, meal_id: str, servings: float) -> None:
        row = await self._meal(meal_id)
        row.servings = servings
        await self._db.commit()

    async def swap_meals(self, from_meal_id: str, to_meal_id: str) -> None:
        """Exchange the scheduled slots of two meals."""
        a = await self._meal(from_meal_id)
        b = await self._meal(to_meal_id)
        a.scheduled_date, b.scheduled_date = b.scheduled_date, a.scheduled_date
        a.scheduled_time, b.scheduled_time = b.scheduled_time, a.scheduled_time
        await self._db.commit()


# ───────── schema / session helpers ──────────────────────────────────

async def create_all() -> None:
    async with engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(engine(), expire_on_commit=False)
    async with async_session() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session
