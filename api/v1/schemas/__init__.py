"""Re-export individual schema modules for easy imports."""

from .meal import MealSwapIn, ServingsIn
from .plan import GeneratePlanRequest, GeneratePlanResponse

__all__ = [
    "MealSwapIn",
    "ServingsIn",
    "GeneratePlanRequest",
    "GeneratePlanResponse",
]
