"""Recipe service for browsing and authoring recipes."""

import logging
from collections.abc import Iterable

from meal_planner.config import get_settings
from meal_planner.schemas.ingredient import CatalogItem
from meal_planner.schemas.recipe import Recipe, RecipeCreate
from meal_planner.services.data_backend import DataBackend
from meal_planner.services.images import compress_image, decode_data_url, is_data_url

logger = logging.getLogger(__name__)


def filter_recipes(
    recipes: Iterable[Recipe], search: str | None = None, tags: list[str] | None = None
) -> list[Recipe]:
    """Filter by case-insensitive text in name/description and by any of the given tags."""
    needle = (search or "").strip().lower()
    selected = set(tags or [])
    result = []
    for recipe in recipes:
        if needle and needle not in recipe.name.lower() and needle not in recipe.description.lower():
            continue
        if selected and not selected.intersection(recipe.tags):
            continue
        result.append(recipe)
    return result


def collect_tags(recipes: Iterable[Recipe]) -> list[str]:
    """Distinct tags in first-seen order."""
    return list(dict.fromkeys(tag for recipe in recipes for tag in recipe.tags))


class RecipeService:
    """Service for recipe-related operations."""

    def __init__(self, backend: DataBackend):
        self.backend = backend
        self.settings = get_settings()

    def browse(self, search: str | None = None, tags: list[str] | None = None) -> list[Recipe]:
        return filter_recipes(self.backend.list_recipes(), search, tags)

    def upload_image(self, image_data: bytes) -> str:
        """Compress an image and hand it to the backend's image storage."""
        compressed, content_type = compress_image(
            image_data,
            max_width=self.settings.image_max_width,
            quality=self.settings.image_jpeg_quality,
        )
        return self.backend.upload_recipe_image(compressed, content_type)

    def _resolve_image(self, image: str) -> str:
        if not is_data_url(image):
            return image
        try:
            image_data, _ = decode_data_url(image)
        except ValueError as e:
            logger.warning(f"Dropping undecodable recipe image: {e}")
            return ""
        return self.upload_image(image_data)

    def _update_catalog(self, data: RecipeCreate) -> None:
        items = [
            CatalogItem(name=ing.name, default_unit=ing.unit, category=ing.category)
            for ing in data.ingredients
        ]
        if items:
            self.backend.upsert_catalog_items(items)

    def create_recipe(self, data: RecipeCreate, user_id: int | None) -> Recipe:
        """Save a new recipe, recording its ingredients in the catalog.

        An image given as a data: URL is compressed and uploaded first; a failed
        upload leaves the recipe without an image. The catalog is only updated
        once the recipe has been stored.
        """
        data = data.model_copy(update={"image": self._resolve_image(data.image)})
        recipe = self.backend.create_recipe(data, user_id)
        self._update_catalog(data)
        logger.info(f"Created recipe {recipe.id} ({recipe.name})")
        return recipe

    def replace_recipe(self, recipe_id: str, data: RecipeCreate, user_id: int | None) -> Recipe | None:
        """Replace one of the user's recipes. Returns None, with nothing written, when it is not theirs."""
        if self.backend.get_owned_recipe(recipe_id, user_id) is None:
            return None
        data = data.model_copy(update={"image": self._resolve_image(data.image)})
        recipe = self.backend.replace_recipe(recipe_id, data, user_id)
        if recipe is not None:
            self._update_catalog(data)
        return recipe
