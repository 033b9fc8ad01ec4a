"""SQLAlchemy models."""

from meal_planner.models.grocery import GroceryListEntry
from meal_planner.models.ingredient import IngredientCatalogItem, IngredientPackaging
from meal_planner.models.meal_plan import MealPlanEntry
from meal_planner.models.recipe import Recipe, RecipeIngredient
from meal_planner.models.user import User

__all__ = [
    "User",
    "Recipe",
    "RecipeIngredient",
    "IngredientCatalogItem",
    "IngredientPackaging",
    "MealPlanEntry",
    "GroceryListEntry",
]
