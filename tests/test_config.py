# tests/test_config.py
from __future__ import annotations

import pytest
from pydantic import ValidationError

from config import _Settings


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PLAN_TOP_N", "5")
    monkeypatch.setenv("PLAN_RANDOM_SEED", "42")
    s = _Settings()
    assert s.plan_top_n == 5
    assert s.plan_random_seed == 42
    assert s.recipe_candidate_limit == 50


@pytest.mark.parametrize("var", ["PLAN_TOP_N", "RECIPE_CANDIDATE_LIMIT"])
def test_zero_limits_rejected(monkeypatch, var):
    monkeypatch.setenv(var, "0")
    with pytest.raises(ValidationError):
        _Settings()
