"""
`python -m workers.generate_weekly_plan --user-id=123 [--start-date=2024-01-01]`
Run as a cron / Cloud Run job to pre-build next week's plan.
"""
import argparse
import asyncio
import logging
import random
from datetime import date, timedelta

from config import settings
from core.meal_planner import generate_weekly_meal_plan
from core.models import PreferenceOverrides
from core.nutrition import summarize_week
from services.db import SqlMealPlanStore, SqlPreferenceSource, session_scope


def _next_monday(today: date) -> date:
    return today + timedelta(days=(7 - today.weekday()) or 7)


async def _run(uid: str, start: date, overrides: PreferenceOverrides) -> None:
    async with session_scope() as db:
        result = await generate_weekly_meal_plan(
            uid,
            start,
            overrides,
            source=SqlPreferenceSource(db),
            store=SqlMealPlanStore(db),
            rng=random.Random(settings.plan_random_seed),
            candidate_limit=settings.recipe_candidate_limit,
            top_n=settings.plan_top_n,
        )

    plan = result.plan
    print(f"plan {plan.id} for user {uid}, week of {plan.week_starting}")
    for day in plan.daily_plans:
        names = ", ".join(f"{m.meal_type}: {m.name}" for m in day.meals) or "–"
        print(f"  {day.date}  {day.total_calories:6.0f} kcal  {names}")
    avg = summarize_week(plan.daily_plans)
    print(f"  avg/day: {avg.calories:.0f} kcal, {avg.protein:.0f} g protein")
    for failure in result.persistence_failures:
        print(f"  ! {failure.date} not stored: {failure.error}")


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--user-id", required=True)
    ap.add_argument("--start-date", type=date.fromisoformat, default=None)
    ap.add_argument("--calories", type=int, default=None, help="daily calorie override")
    ap.add_argument("--allergy", action="append", default=None, help="repeatable")
    args = ap.parse_args()

    logging.basicConfig(level=settings.log_level.upper())
    overrides = PreferenceOverrides(calorie_target=args.calories, allergies=args.allergy)
    start = args.start_date or _next_monday(date.today())
    asyncio.run(_run(args.user_id, start, overrides))


if __name__ == "__main__":
    main()
