"""Data backend interface shared by the database and local-store implementations."""

from abc import ABC, abstractmethod
from datetime import date

from meal_planner.models.enums import MealType
from meal_planner.schemas.grocery import PersistedGroceryRow
from meal_planner.schemas.ingredient import CatalogItem, PackagingOption, PackagingOptionCreate
from meal_planner.schemas.planner import MealSlot
from meal_planner.schemas.recipe import Recipe, RecipeCreate


class BackendError(Exception):
    """A read or write against the data backend failed."""


class BackendNotConfiguredError(BackendError):
    """The operation needs the database backend, which is not configured."""

    def __init__(self, message: str = "Backend is not configured") -> None:
        super().__init__(message)


class StorageQuotaExceededError(BackendError):
    """A write to the local store would exceed its quota."""


class DataBackend(ABC):
    """Storage for recipes, the ingredient catalog, meal plans and grocery lists."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when backed by the database; False for the local fallback store."""

    # --- Recipes ---

    @abstractmethod
    def list_recipes(self) -> list[Recipe]: ...

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Recipe | None: ...

    @abstractmethod
    def create_recipe(self, data: RecipeCreate, user_id: int | None) -> Recipe: ...

    @abstractmethod
    def get_owned_recipe(self, recipe_id: str, user_id: int | None) -> Recipe | None:
        """The recipe when the user may replace it; None for missing, foreign or read-only ones."""

    @abstractmethod
    def replace_recipe(self, recipe_id: str, data: RecipeCreate, user_id: int | None) -> Recipe | None:
        """Replace a recipe wholesale. Returns None when no such recipe is owned by the user."""

    @abstractmethod
    def bulk_insert_recipes(self, recipes: list[RecipeCreate]) -> int: ...

    @abstractmethod
    def upload_recipe_image(self, data: bytes, content_type: str) -> str:
        """Store an image and return a reference to it ("" when it could not be stored)."""

    # --- Ingredient catalog ---

    @abstractmethod
    def list_catalog(self) -> list[CatalogItem]: ...

    @abstractmethod
    def upsert_catalog_items(self, items: list[CatalogItem]) -> None: ...

    @abstractmethod
    def list_packaging(self, ingredient_name: str) -> list[PackagingOption]: ...

    @abstractmethod
    def upsert_packaging_options(self, options: list[PackagingOptionCreate]) -> None: ...

    @abstractmethod
    def delete_packaging_option(self, option_id: str) -> bool: ...

    # --- Meal plans (per user) ---

    @abstractmethod
    def fetch_meal_plans(self, user_id: int) -> list[MealSlot]: ...

    @abstractmethod
    def upsert_meal_plan(self, user_id: int, day: date, meal: MealType, recipe_id: str) -> None: ...

    @abstractmethod
    def delete_meal_plan(self, user_id: int, day: date, meal: MealType) -> None: ...

    # --- Grocery lists (per user) ---

    @abstractmethod
    def fetch_grocery_list(self, user_id: int) -> list[PersistedGroceryRow]: ...

    @abstractmethod
    def upsert_grocery_item(self, row: PersistedGroceryRow) -> None: ...

    @abstractmethod
    def delete_grocery_item(self, user_id: int, ingredient_name: str, unit: str) -> None: ...

    @abstractmethod
    def clear_grocery_list(self, user_id: int) -> None: ...
