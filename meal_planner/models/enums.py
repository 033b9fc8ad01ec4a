"""Enums for model fields."""

from enum import Enum


class IngredientCategory(str, Enum):
    """Grocery aisle category of an ingredient."""

    PROTEIN = "protein"
    VEGETABLE = "vegetable"
    GRAIN = "grain"
    DAIRY = "dairy"
    SPICE = "spice"
    OTHER = "other"


class Difficulty(str, Enum):
    """How hard a recipe is to cook."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MealType(str, Enum):
    """Meal slot within a planner day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"

    @property
    def sort_index(self) -> int:
        """Position of the meal within a day."""
        return list(MealType).index(self)
