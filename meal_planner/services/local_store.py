"""Local fallback store used when no database backend is configured.

Collections are kept as whole JSON blobs in a small key-value store with a byte
quota. Only recipes and the ingredient catalog live here; user-scoped data
(meal plans, grocery checklists) and packaging options need the database.
"""

import json
import logging
import uuid
from datetime import date
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from meal_planner.config import Settings, get_settings
from meal_planner.models.enums import MealType
from meal_planner.schemas.grocery import PersistedGroceryRow
from meal_planner.schemas.ingredient import CatalogItem, PackagingOption, PackagingOptionCreate
from meal_planner.schemas.planner import MealSlot
from meal_planner.schemas.recipe import Ingredient, Recipe, RecipeCreate
from meal_planner.services.data_backend import (
    BackendNotConfiguredError,
    DataBackend,
    StorageQuotaExceededError,
)
from meal_planner.services.images import encode_data_url, is_data_url
from meal_planner.services.sample_recipes import SAMPLE_RECIPES

logger = logging.getLogger(__name__)

RECIPES_KEY = "custom_recipes_v1"
CATALOG_KEY = "ingredient_catalog_v1"

_recipes_adapter = TypeAdapter(list[Recipe])
_catalog_adapter = TypeAdapter(list[CatalogItem])


class LocalKeyValueStore:
    """String key-value storage on disk, one file per key, with a total byte quota."""

    def __init__(self, directory: str | Path, quota_bytes: int) -> None:
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def used_bytes(self, exclude: str | None = None) -> int:
        if not self.directory.exists():
            return 0
        return sum(
            path.stat().st_size
            for path in self.directory.glob("*.json")
            if exclude is None or path != self._path(exclude)
        )

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one.

        Raises:
            StorageQuotaExceededError: if the store would grow past its quota
        """
        encoded = value.encode("utf-8")
        if self.used_bytes(exclude=key) + len(encoded) > self.quota_bytes:
            raise StorageQuotaExceededError(
                f"Storing {key} ({len(encoded)} bytes) exceeds the {self.quota_bytes} byte quota"
            )
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_bytes(encoded)

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class LocalBackend(DataBackend):
    """Sample recipes plus locally authored recipes and catalog, no user data."""

    def __init__(self, store: LocalKeyValueStore):
        self.store = store

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "LocalBackend":
        settings = settings or get_settings()
        return cls(LocalKeyValueStore(settings.local_store_dir, settings.local_store_quota_bytes))

    @property
    def is_configured(self) -> bool:
        return False

    # --- Recipes ---

    def get_stored_recipes(self) -> list[Recipe]:
        raw = self.store.get_item(RECIPES_KEY)
        if not raw:
            return []
        try:
            return _recipes_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable local recipe list: {e}")
            return []

    def _write_recipes(self, recipes: list[Recipe]) -> None:
        self.store.set_item(RECIPES_KEY, _recipes_adapter.dump_json(recipes).decode("utf-8"))

    def save_recipe(self, recipe: Recipe) -> Recipe:
        """Insert or replace a stored recipe by id.

        When the write exceeds the quota it is retried once with an embedded
        data: image removed; if that also fails the first error is raised.
        """
        others = [r for r in self.get_stored_recipes() if r.id != recipe.id]
        try:
            self._write_recipes([*others, recipe])
            return recipe
        except StorageQuotaExceededError as err:
            if not is_data_url(recipe.image):
                raise
            slimmed = recipe.model_copy(update={"image": ""})
            logger.info(f"Local store full, saving recipe {recipe.id} without its image")
            try:
                self._write_recipes([*others, slimmed])
            except StorageQuotaExceededError:
                raise err from None
            return slimmed

    def list_recipes(self) -> list[Recipe]:
        by_id = {recipe.id: recipe for recipe in SAMPLE_RECIPES}
        for recipe in self.get_stored_recipes():
            by_id[recipe.id] = recipe
        return sorted(by_id.values(), key=lambda r: r.name)

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        for recipe in self.list_recipes():
            if recipe.id == recipe_id:
                return recipe
        return None

    def _build_recipe(self, recipe_id: str, data: RecipeCreate, user_id: int | None) -> Recipe:
        return Recipe(
            id=recipe_id,
            user_id=user_id,
            name=data.name,
            description=data.description,
            image=data.image,
            cook_time=data.cook_time,
            servings=data.servings,
            difficulty=data.difficulty,
            ingredients=[
                Ingredient(id=str(uuid.uuid4()), **ing.model_dump()) for ing in data.ingredients
            ],
            instructions=data.instructions,
            tags=data.tags,
        )

    def create_recipe(self, data: RecipeCreate, user_id: int | None) -> Recipe:
        return self.save_recipe(self._build_recipe(str(uuid.uuid4()), data, user_id))

    def get_owned_recipe(self, recipe_id: str, user_id: int | None) -> Recipe | None:
        # Bundled samples are read-only
        for recipe in self.get_stored_recipes():
            if recipe.id == recipe_id:
                return recipe
        return None

    def replace_recipe(self, recipe_id: str, data: RecipeCreate, user_id: int | None) -> Recipe | None:
        if self.get_owned_recipe(recipe_id, user_id) is None:
            return None
        return self.save_recipe(self._build_recipe(recipe_id, data, user_id))

    def bulk_insert_recipes(self, recipes: list[RecipeCreate]) -> int:
        for data in recipes:
            self.create_recipe(data, None)
        return len(recipes)

    def upload_recipe_image(self, data: bytes, content_type: str) -> str:
        # No object storage here: the image stays embedded in the recipe
        return encode_data_url(data, content_type)

    # --- Ingredient catalog ---

    def list_catalog(self) -> list[CatalogItem]:
        raw = self.store.get_item(CATALOG_KEY)
        if not raw:
            return []
        try:
            return _catalog_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable local ingredient catalog: {e}")
            return []

    def upsert_catalog_items(self, items: list[CatalogItem]) -> None:
        by_name = {item.name.lower(): item for item in self.list_catalog()}
        for item in items:
            by_name[item.name.lower()] = item
        payload = _catalog_adapter.dump_json(list(by_name.values())).decode("utf-8")
        self.store.set_item(CATALOG_KEY, payload)

    def list_packaging(self, ingredient_name: str) -> list[PackagingOption]:
        return []

    def upsert_packaging_options(self, options: list[PackagingOptionCreate]) -> None:
        raise BackendNotConfiguredError("Packaging options require the database backend")

    def delete_packaging_option(self, option_id: str) -> bool:
        raise BackendNotConfiguredError("Packaging options require the database backend")

    # --- User-scoped data ---

    def fetch_meal_plans(self, user_id: int) -> list[MealSlot]:
        raise BackendNotConfiguredError("Meal plans are not persisted without a database")

    def upsert_meal_plan(self, user_id: int, day: date, meal: MealType, recipe_id: str) -> None:
        raise BackendNotConfiguredError("Meal plans are not persisted without a database")

    def delete_meal_plan(self, user_id: int, day: date, meal: MealType) -> None:
        raise BackendNotConfiguredError("Meal plans are not persisted without a database")

    def fetch_grocery_list(self, user_id: int) -> list[PersistedGroceryRow]:
        raise BackendNotConfiguredError("Grocery lists are not persisted without a database")

    def upsert_grocery_item(self, row: PersistedGroceryRow) -> None:
        raise BackendNotConfiguredError("Grocery lists are not persisted without a database")

    def delete_grocery_item(self, user_id: int, ingredient_name: str, unit: str) -> None:
        raise BackendNotConfiguredError("Grocery lists are not persisted without a database")

    def clear_grocery_list(self, user_id: int) -> None:
        raise BackendNotConfiguredError("Grocery lists are not persisted without a database")
