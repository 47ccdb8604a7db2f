"""
FastAPI application for weekly meal-plan generation.

Run locally with

    uvicorn main:app --reload
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from config import settings
from core.errors import InputError, MealNotFoundError, MealPlanError, NoMatchError
from api.v1.router import api_router
from services.db import create_all

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_LOG = logging.getLogger("mealplan")


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.auto_create_tables:
        await create_all()
    yield


app = FastAPI(title="Meal-Plan API", version="1.0.0", lifespan=lifespan)

# CORS (public demo only – lock down in prod)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


# ───────── error mapping ─────────────────────────────────────────────
_STATUS = {InputError: 400, NoMatchError: 422, MealNotFoundError: 404}


@app.exception_handler(MealPlanError)
async def meal_plan_error(_: Request, exc: MealPlanError) -> JSONResponse:
    code = _STATUS.get(type(exc), 500)
    if code == 500:
        _LOG.error("meal plan generation error: %s", exc)
    return JSONResponse(status_code=code, content={"error": str(exc)})



@app.get("/health", tags=["meta"])
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.env_name}
