"""Pydantic schemas for API requests and responses."""

from meal_planner.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from meal_planner.schemas.grocery import CustomItemCreate, GroceryItem, PersistedGroceryRow
from meal_planner.schemas.ingredient import CatalogItem, PackagingOption, PackagingOptionCreate
from meal_planner.schemas.planner import MealSlot, PersistOutcome, PersistStatus
from meal_planner.schemas.recipe import Ingredient, IngredientCreate, Recipe, RecipeCreate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "Ingredient",
    "IngredientCreate",
    "Recipe",
    "RecipeCreate",
    "CatalogItem",
    "PackagingOption",
    "PackagingOptionCreate",
    "MealSlot",
    "PersistOutcome",
    "PersistStatus",
    "GroceryItem",
    "PersistedGroceryRow",
    "CustomItemCreate",
]
