"""
core/recipe_filter.py
────────────────────────────────────────────────────────────────────────
Narrow the recipe corpus down to plan candidates.

Responsibilities
----------------
1.   `primary()`  – time budget (60 % prep / 80 % cook) plus dietary and
     cuisine tag overlap.
2.   `fallback()` – prep-time budget only, used when `primary()` is empty.
3.   `exclude_allergens()` – manual pass run on whichever result is used;
     any tag *containing* an allergy term drops the recipe.
4.   `filter()` – the above in order, raising `NoMatchError` when nothing
     survives.

Both searches are capped at `limit` rows to bound scoring cost.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, List

import pandas as pd

from core.errors import NoMatchError
from core.models import Preferences, Recipe

_LOG = logging.getLogger(__name__)

DEFAULT_CANDIDATE_LIMIT = 50

_WS = re.compile(r"\s+")


def normalize_tag(value: str) -> str:
    return _WS.sub("-", value.lower())


def recipes_to_frame(recipes: Iterable[Recipe]) -> pd.DataFrame:
    """One row per recipe; the frame index is the position in `recipes`."""
    rows = [
        {
            "id": r.id,
            "prep_time_minutes": r.prep_time_minutes,
            "cook_time_minutes": r.cook_time_minutes,
            "tags": r.lower_tags,
        }
        for r in recipes
    ]
    return pd.DataFrame(
        rows, columns=["id", "prep_time_minutes", "cook_time_minutes", "tags"]
    )


def _tag_mask(tags: pd.Series, predicate) -> pd.Series:
    return pd.Series([bool(predicate(ts)) for ts in tags], index=tags.index, dtype=bool)


def _overlaps(tags: pd.Series, wanted: set[str]) -> pd.Series:
    return _tag_mask(tags, lambda ts: not wanted.isdisjoint(ts))


class RecipeFilter:
    def __init__(self, corpus: Iterable[Recipe], limit: int = DEFAULT_CANDIDATE_LIMIT) -> None:
        self._catalogue = list(corpus)
        self._recipes = recipes_to_frame(self._catalogue)
        self._limit = limit

    # ─────────────────────────────── queries ──────────────────────── #
    def primary(self, prefs: Preferences) -> pd.DataFrame:
        df = self._recipes
        limit = prefs.cooking_time_limit
        df = df[
            (df["prep_time_minutes"] <= math.floor(limit * 0.6))
            & (df["cook_time_minutes"] <= math.floor(limit * 0.8))
        ]

        if prefs.dietary_restrictions:
            dietary = {normalize_tag(d) for d in prefs.dietary_restrictions}
            df = df[_overlaps(df["tags"], dietary)]

        if prefs.cuisine_preferences:
            cuisines = {normalize_tag(c) for c in prefs.cuisine_preferences}
            df = df[_overlaps(df["tags"], cuisines)]

        return df.head(self._limit)

    def fallback(self, prefs: Preferences) -> pd.DataFrame:
        df = self._recipes
        df = df[df["prep_time_minutes"] <= prefs.cooking_time_limit]
        return df.head(self._limit)

    # ─────────────────────────────── allergies ────────────────────── #
    @staticmethod
    def exclude_allergens(df: pd.DataFrame, allergies: Iterable[str]) -> pd.DataFrame:
        terms = [a.lower() for a in allergies if a]
        if not terms or df.empty:
            return df
        has_allergen = _tag_mask(
            df["tags"],
            lambda ts: any(term in tag for tag in ts for term in terms)
        )
        return df[~has_allergen]

    # ─────────────────────────────── wrapper ──────────────────────── #
    def filter(self, prefs: Preferences) -> List[Recipe]:
        matched = self.primary(prefs)

        if matched.empty:
            _LOG.warning("no recipes with strict filters – trying broader search")
            matched = self.fallback(prefs)

        matched = self.exclude_allergens(matched, prefs.allergies)
        if matched.empty:
            raise NoMatchError()

        _LOG.info("found %d matching recipes", len(matched))
        return [self._catalogue[i] for i in matched.index]
