"""Recipe API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from meal_planner.api.dependencies import get_backend, get_owner_id, get_recipe_service
from meal_planner.schemas.recipe import (
    Recipe,
    RecipeCreate,
    RecipeImageResponse,
    RecipeTagsResponse,
)
from meal_planner.services.data_backend import DataBackend
from meal_planner.services.planner import LOCAL_USER_ID
from meal_planner.services.recipe_service import RecipeService, collect_tags

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
MAX_IMAGE_BYTES = 10 * 1024 * 1024


def _author_id(owner_id: int) -> int | None:
    return None if owner_id == LOCAL_USER_ID else owner_id


# --- Static routes first (before /{recipe_id}) ---


@router.get("", response_model=list[Recipe])
def list_recipes(
    service: Annotated[RecipeService, Depends(get_recipe_service)],
    search: str | None = Query(default=None, description="Text to find in name or description"),
    tags: list[str] = Query(default=[], description="Match recipes carrying any of these tags"),
):
    """List recipes ordered by name, optionally filtered."""
    return service.browse(search, tags)


@router.get("/tags", response_model=RecipeTagsResponse)
def list_tags(backend: Annotated[DataBackend, Depends(get_backend)]):
    """Get every tag used by a recipe."""
    return RecipeTagsResponse(tags=collect_tags(backend.list_recipes()))


@router.post("", response_model=Recipe, status_code=status.HTTP_201_CREATED)
def create_recipe(
    recipe_data: RecipeCreate,
    owner_id: Annotated[int, Depends(get_owner_id)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Create a new recipe with ingredients."""
    return service.create_recipe(recipe_data, _author_id(owner_id))


@router.post("/images", response_model=RecipeImageResponse)
async def upload_recipe_image(
    file: Annotated[UploadFile, File(description="Recipe image (JPEG, PNG, GIF, or WebP)")],
    owner_id: Annotated[int, Depends(get_owner_id)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Compress and store a recipe image.

    Returns an empty URL when storage is unavailable; the recipe can still be
    saved without an image.

    Note: This endpoint must remain async because UploadFile.read() is async.
    """
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type. Allowed types: {', '.join(sorted(ALLOWED_IMAGE_TYPES))}",
        )

    image_data = await file.read()
    if len(image_data) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File too large. Maximum size is 10MB.",
        )

    return RecipeImageResponse(url=service.upload_image(image_data))


# --- Single recipe ---


@router.get("/{recipe_id}", response_model=Recipe)
def get_recipe(
    recipe_id: str,
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """Get a recipe with its ingredients and steps."""
    recipe = backend.get_recipe(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return recipe


@router.put("/{recipe_id}", response_model=Recipe)
def replace_recipe(
    recipe_id: str,
    recipe_data: RecipeCreate,
    owner_id: Annotated[int, Depends(get_owner_id)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Replace one of your recipes wholesale."""
    recipe = service.replace_recipe(recipe_id, recipe_data, _author_id(owner_id))
    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return recipe
