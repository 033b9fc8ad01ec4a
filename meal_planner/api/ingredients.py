"""Ingredient catalog API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from meal_planner.api.dependencies import get_backend, get_owner_id, require_configured_backend
from meal_planner.schemas.ingredient import CatalogItem, PackagingOption, PackagingOptionCreate
from meal_planner.services.data_backend import DataBackend

router = APIRouter(prefix="/api/v1/ingredients", tags=["ingredients"])


@router.get("", response_model=list[CatalogItem])
def list_catalog(backend: Annotated[DataBackend, Depends(get_backend)]):
    """List known ingredients with their default unit and category."""
    return backend.list_catalog()


@router.put("", response_model=list[CatalogItem], dependencies=[Depends(get_owner_id)])
def upsert_catalog(
    items: list[CatalogItem],
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """Add or update catalog entries (matched by name, case-insensitively)."""
    backend.upsert_catalog_items(items)
    return backend.list_catalog()


@router.get("/{ingredient_name}/packaging", response_model=list[PackagingOption])
def list_packaging(
    ingredient_name: str,
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """List pack sizes for an ingredient, smallest first."""
    return backend.list_packaging(ingredient_name)


@router.post(
    "/packaging",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(get_owner_id)],
)
def upsert_packaging(
    options: list[PackagingOptionCreate],
    backend: Annotated[DataBackend, Depends(require_configured_backend)],
):
    """Record pack sizes; existing (ingredient, unit, amount) entries are kept."""
    backend.upsert_packaging_options(options)


@router.delete(
    "/packaging/{option_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(get_owner_id)],
)
def delete_packaging(
    option_id: str,
    backend: Annotated[DataBackend, Depends(require_configured_backend)],
):
    """Delete a pack size."""
    if not backend.delete_packaging_option(option_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Packaging option not found"
        )
