"""Data backend on the application database."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from meal_planner.models.enums import MealType
from meal_planner.models.grocery import GroceryListEntry
from meal_planner.models.ingredient import IngredientCatalogItem, IngredientPackaging
from meal_planner.models.meal_plan import MealPlanEntry
from meal_planner.models.recipe import Recipe as RecipeModel
from meal_planner.models.recipe import RecipeIngredient
from meal_planner.schemas.grocery import PersistedGroceryRow
from meal_planner.schemas.ingredient import CatalogItem, PackagingOption, PackagingOptionCreate
from meal_planner.schemas.planner import MealSlot
from meal_planner.schemas.recipe import Recipe, RecipeCreate
from meal_planner.services.data_backend import BackendError, DataBackend
from meal_planner.services.images import ObjectStorageClient

logger = logging.getLogger(__name__)


class RemoteBackend(DataBackend):
    """Backend storing everything in the SQL database and images in object storage.

    Every method runs inside _guard(): any SQLAlchemy error rolls the session
    back and surfaces as BackendError.
    """

    def __init__(self, db: Session, storage: ObjectStorageClient | None = None):
        self.db = db
        self.storage = storage or ObjectStorageClient.from_settings()

    @property
    def is_configured(self) -> bool:
        return True

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Database {action} failed: {e}")
            raise BackendError(str(e)) from e

    # --- Recipes ---

    def list_recipes(self) -> list[Recipe]:
        with self._guard("list_recipes"):
            rows = self.db.query(RecipeModel).order_by(RecipeModel.name).all()
            return [Recipe.model_validate(row) for row in rows]

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        with self._guard("get_recipe"):
            row = self.db.query(RecipeModel).filter(RecipeModel.id == recipe_id).first()
            return Recipe.model_validate(row) if row else None

    def _owned_query(self, recipe_id: str, user_id: int | None):
        return self.db.query(RecipeModel).filter(
            RecipeModel.id == recipe_id, RecipeModel.user_id == user_id
        )

    def get_owned_recipe(self, recipe_id: str, user_id: int | None) -> Recipe | None:
        with self._guard("get_owned_recipe"):
            row = self._owned_query(recipe_id, user_id).first()
            return Recipe.model_validate(row) if row else None

    def _fill_recipe(self, recipe: RecipeModel, data: RecipeCreate) -> None:
        recipe.name = data.name
        recipe.description = data.description
        recipe.image = data.image
        recipe.cook_time = data.cook_time
        recipe.servings = data.servings
        recipe.difficulty = data.difficulty.value
        recipe.instructions = list(data.instructions)
        recipe.tags = list(data.tags)
        recipe.ingredients = [
            RecipeIngredient(
                position=position,
                name=ing.name,
                amount=ing.amount,
                unit=ing.unit,
                category=ing.category.value,
            )
            for position, ing in enumerate(data.ingredients)
        ]

    def create_recipe(self, data: RecipeCreate, user_id: int | None) -> Recipe:
        with self._guard("create_recipe"):
            recipe = RecipeModel(user_id=user_id)
            self._fill_recipe(recipe, data)
            self.db.add(recipe)
            self.db.commit()
            self.db.refresh(recipe)
            return Recipe.model_validate(recipe)

    def replace_recipe(self, recipe_id: str, data: RecipeCreate, user_id: int | None) -> Recipe | None:
        with self._guard("replace_recipe"):
            recipe = self._owned_query(recipe_id, user_id).first()
            if recipe is None:
                return None
            self._fill_recipe(recipe, data)
            self.db.commit()
            self.db.refresh(recipe)
            return Recipe.model_validate(recipe)

    def bulk_insert_recipes(self, recipes: list[RecipeCreate]) -> int:
        with self._guard("bulk_insert_recipes"):
            for data in recipes:
                recipe = RecipeModel(user_id=None)
                self._fill_recipe(recipe, data)
                self.db.add(recipe)
            self.db.commit()
        return len(recipes)

    def upload_recipe_image(self, data: bytes, content_type: str) -> str:
        return self.storage.upload_recipe_image(data, content_type)

    # --- Ingredient catalog ---

    def list_catalog(self) -> list[CatalogItem]:
        with self._guard("list_catalog"):
            rows = self.db.query(IngredientCatalogItem).order_by(IngredientCatalogItem.name).all()
            return [CatalogItem.model_validate(row) for row in rows]

    def upsert_catalog_items(self, items: list[CatalogItem]) -> None:
        with self._guard("upsert_catalog_items"):
            for item in items:
                normalized = item.name.lower().strip()
                existing = (
                    self.db.query(IngredientCatalogItem)
                    .filter(IngredientCatalogItem.normalized_name == normalized)
                    .first()
                )
                if existing is None:
                    existing = IngredientCatalogItem(normalized_name=normalized)
                    self.db.add(existing)
                existing.name = item.name.strip()
                existing.default_unit = item.default_unit
                existing.category = item.category.value
                self.db.flush()
            self.db.commit()

    def list_packaging(self, ingredient_name: str) -> list[PackagingOption]:
        with self._guard("list_packaging"):
            rows = (
                self.db.query(IngredientPackaging)
                .filter(IngredientPackaging.ingredient_name == ingredient_name)
                .order_by(IngredientPackaging.pack_amount)
                .all()
            )
            return [PackagingOption.model_validate(row) for row in rows]

    def upsert_packaging_options(self, options: list[PackagingOptionCreate]) -> None:
        with self._guard("upsert_packaging_options"):
            for option in options:
                exists = (
                    self.db.query(IngredientPackaging)
                    .filter(
                        IngredientPackaging.ingredient_name == option.ingredient_name,
                        IngredientPackaging.unit == option.unit,
                        IngredientPackaging.pack_amount == option.pack_amount,
                    )
                    .first()
                )
                if exists is None:
                    self.db.add(IngredientPackaging(**option.model_dump()))
                    self.db.flush()
            self.db.commit()

    def delete_packaging_option(self, option_id: str) -> bool:
        with self._guard("delete_packaging_option"):
            deleted = (
                self.db.query(IngredientPackaging)
                .filter(IngredientPackaging.id == option_id)
                .delete()
            )
            self.db.commit()
        return deleted > 0

    # --- Meal plans ---

    def fetch_meal_plans(self, user_id: int) -> list[MealSlot]:
        with self._guard("fetch_meal_plans"):
            rows = (
                self.db.query(MealPlanEntry)
                .filter(MealPlanEntry.user_id == user_id)
                .order_by(MealPlanEntry.date)
                .all()
            )
            return [
                MealSlot(
                    date=row.date,
                    meal=MealType(row.meal),
                    recipe=Recipe.model_validate(row.recipe) if row.recipe else None,
                )
                for row in rows
            ]

    def _meal_plan_query(self, user_id: int, day: date, meal: MealType):
        return self.db.query(MealPlanEntry).filter(
            MealPlanEntry.user_id == user_id,
            MealPlanEntry.date == day,
            MealPlanEntry.meal == meal.value,
        )

    def upsert_meal_plan(self, user_id: int, day: date, meal: MealType, recipe_id: str) -> None:
        with self._guard("upsert_meal_plan"):
            entry = self._meal_plan_query(user_id, day, meal).first()
            if entry is None:
                entry = MealPlanEntry(user_id=user_id, date=day, meal=meal.value)
                self.db.add(entry)
            entry.recipe_id = recipe_id
            self.db.commit()

    def delete_meal_plan(self, user_id: int, day: date, meal: MealType) -> None:
        with self._guard("delete_meal_plan"):
            self._meal_plan_query(user_id, day, meal).delete()
            self.db.commit()

    # --- Grocery lists ---

    def _grocery_query(self, user_id: int, ingredient_name: str, unit: str):
        return self.db.query(GroceryListEntry).filter(
            GroceryListEntry.user_id == user_id,
            func.lower(GroceryListEntry.ingredient_name) == ingredient_name.lower(),
            GroceryListEntry.unit == unit,
        )

    def fetch_grocery_list(self, user_id: int) -> list[PersistedGroceryRow]:
        with self._guard("fetch_grocery_list"):
            rows = (
                self.db.query(GroceryListEntry)
                .filter(GroceryListEntry.user_id == user_id)
                .order_by(GroceryListEntry.ingredient_name)
                .all()
            )
            return [PersistedGroceryRow.model_validate(row) for row in rows]

    def upsert_grocery_item(self, row: PersistedGroceryRow) -> None:
        with self._guard("upsert_grocery_item"):
            entry = self._grocery_query(row.user_id, row.ingredient_name, row.unit).first()
            if entry is None:
                entry = GroceryListEntry(user_id=row.user_id, unit=row.unit)
                if row.id:
                    entry.id = row.id
                self.db.add(entry)
            entry.ingredient_name = row.ingredient_name
            entry.amount = row.amount
            entry.category = row.category.value
            entry.checked = row.checked
            entry.is_custom = row.is_custom
            self.db.commit()

    def delete_grocery_item(self, user_id: int, ingredient_name: str, unit: str) -> None:
        with self._guard("delete_grocery_item"):
            self._grocery_query(user_id, ingredient_name, unit).delete(synchronize_session=False)
            self.db.commit()

    def clear_grocery_list(self, user_id: int) -> None:
        with self._guard("clear_grocery_list"):
            self.db.query(GroceryListEntry).filter(GroceryListEntry.user_id == user_id).delete()
            self.db.commit()
