"""
API dependencies: storage collaborators and the plan random source.

Tests swap these out through `app.dependency_overrides`.
"""
from __future__ import annotations

import random

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from services.db import SqlMealPlanStore, SqlPreferenceSource, get_session


def get_source(db: AsyncSession = Depends(get_session)) -> SqlPreferenceSource:
    return SqlPreferenceSource(db)


def get_store(db: AsyncSession = Depends(get_session)) -> SqlMealPlanStore:
    return SqlMealPlanStore(db)


def get_rng() -> random.Random:
    return random.Random(settings.plan_random_seed)
