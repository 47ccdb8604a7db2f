"""
Seed demo recipes into the `recipes` table (creates tables if missing).

Usage
-----

    # default hard-coded demo set
    python -m scripts.seed_recipes

    # custom list (same schema as core.models.Recipe) in a JSON file
    python -m scripts.seed_recipes --file path/to/recipes.json
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, List

from core.models import Recipe
from services.db import RecipeRow, create_all, session_scope

# ────────────────────────────────────────────────────────────────────
_DEFAULT_RECIPES: List[dict[str, Any]] = [
    {
        "id": "masala-oats",
        "name": "Masala Oats with Veggies",
        "prep_time_minutes": 5, "cook_time_minutes": 10, "difficulty": "easy",
        "tags": ["breakfast", "indian", "vegetarian"],
        "calories_per_serving": 380, "protein_g": 14, "carbs_g": 58, "fat_g": 9,
        "fibre_g": 8, "sugar_g": 4, "sodium_mg": 420,
    },
    {
        "id": "greek-yogurt-bowl",
        "name": "Greek Yogurt Berry Bowl",
        "prep_time_minutes": 5, "cook_time_minutes": 0, "difficulty": "easy",
        "tags": ["breakfast", "mediterranean", "vegetarian", "gluten-free"],
        "calories_per_serving": 320, "protein_g": 22, "carbs_g": 38, "fat_g": 8,
        "fibre_g": 5, "sugar_g": 20, "sodium_mg": 90,
    },
    {
        "id": "tandoori-quinoa",
        "name": "Grilled Tandoori Chicken & Quinoa",
        "prep_time_minutes": 15, "cook_time_minutes": 25, "difficulty": "medium",
        "tags": ["lunch", "main-course", "indian", "high-protein"],
        "calories_per_serving": 510, "protein_g": 42, "carbs_g": 48, "fat_g": 17,
        "fibre_g": 6, "sugar_g": 5, "sodium_mg": 640,
    },
    {
        "id": "caprese-wrap",
        "name": "Caprese Chicken Wrap",
        "prep_time_minutes": 10, "cook_time_minutes": 10, "difficulty": "easy",
        "tags": ["lunch", "italian"],
        "calories_per_serving": 560, "protein_g": 38, "carbs_g": 45, "fat_g": 22,
        "fibre_g": 4, "sugar_g": 6, "sodium_mg": 780,
    },
    {
        "id": "palak-paneer",
        "name": "Palak Paneer with Brown-Rice Phulka",
        "prep_time_minutes": 15, "cook_time_minutes": 30, "difficulty": "medium",
        "tags": ["dinner", "main-course", "indian", "vegetarian"],
        "calories_per_serving": 560, "protein_g": 32, "carbs_g": 55, "fat_g": 22,
        "fibre_g": 9, "sugar_g": 6, "sodium_mg": 700,
    },
    {
        "id": "salmon-traybake",
        "name": "Lemon Salmon Traybake",
        "prep_time_minutes": 10, "cook_time_minutes": 25, "difficulty": "easy",
        "tags": ["dinner", "main-course", "gluten-free", "fish"],
        "calories_per_serving": 620, "protein_g": 40, "carbs_g": 30, "fat_g": 34,
        "fibre_g": 5, "sugar_g": 4, "sodium_mg": 510,
    },
    {
        "id": "hummus-crudites",
        "name": "Hummus & Crudités",
        "prep_time_minutes": 5, "cook_time_minutes": 0, "difficulty": "easy",
        "tags": ["snack", "light", "vegan", "sesame"],
        "calories_per_serving": 210, "protein_g": 7, "carbs_g": 20, "fat_g": 11,
        "fibre_g": 6, "sugar_g": 3, "sodium_mg": 300,
    },
]


async def _seed(recipes: list[dict[str, Any]]) -> None:
    await create_all()
    async with session_scope() as db:
        for raw in recipes:
            recipe = Recipe.model_validate(raw)  # reject bad rows early
            await db.merge(RecipeRow(**recipe.model_dump(mode="json")))
        await db.commit()
    print(f"✓ upserted {len(recipes)} recipes")


def _load_json(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text())
    if not isinstance(data, list):
        raise ValueError("JSON file must contain a list of recipe dictionaries")
    return data


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--file",
        type=Path,
        help="optional JSON file with recipes to seed (overrides defaults)",
    )
    args = parser.parse_args()

    recipes = _load_json(args.file) if args.file else _DEFAULT_RECIPES
    asyncio.run(_seed(recipes))


if __name__ == "__main__":
    main()
