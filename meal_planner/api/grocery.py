"""Grocery list API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from meal_planner.api.dependencies import get_backend, get_planner_session
from meal_planner.schemas.grocery import (
    CustomItemCreate,
    GroceryCategoryGroup,
    GroceryItemResponse,
    GroceryListResponse,
    GroceryOutcomeResponse,
)
from meal_planner.services.aggregation import group_by_category
from meal_planner.services.data_backend import DataBackend
from meal_planner.services.planner import DuplicateGroceryItemError, PlannerSession

router = APIRouter(prefix="/api/v1/grocery-list", tags=["grocery"])


def _item_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")


@router.get("", response_model=GroceryListResponse)
def get_grocery_list(
    session: Annotated[PlannerSession, Depends(get_planner_session)],
):
    """Get the grocery list for the planned meals, grouped by category."""
    items = session.grocery_items
    checked_count = sum(1 for item in items if item.checked)
    total_count = len(items)
    return GroceryListResponse(
        items=items,
        groups=[
            GroceryCategoryGroup(category=category, items=group)
            for category, group in group_by_category(items)
        ],
        checked_count=checked_count,
        total_count=total_count,
        progress=round(checked_count / total_count * 100, 1) if total_count else 0.0,
        planned_recipe_count=len(session.planned_recipes()),
    )


@router.post("/items", response_model=GroceryItemResponse, status_code=status.HTTP_201_CREATED)
def add_custom_item(
    item_data: CustomItemCreate,
    session: Annotated[PlannerSession, Depends(get_planner_session)],
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """Add an item that is not part of any planned recipe."""
    try:
        item, outcome = session.add_custom_item(backend, item_data)
    except DuplicateGroceryItemError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return GroceryItemResponse(item=item, outcome=outcome)


@router.post("/items/{item_id}/toggle", response_model=GroceryItemResponse)
def toggle_item(
    item_id: str,
    session: Annotated[PlannerSession, Depends(get_planner_session)],
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """Check or uncheck an item."""
    result = session.toggle_item(backend, item_id)
    if result is None:
        raise _item_not_found()
    item, outcome = result
    return GroceryItemResponse(item=item, outcome=outcome)


@router.delete("/items/{item_id}", response_model=GroceryOutcomeResponse)
def remove_item(
    item_id: str,
    session: Annotated[PlannerSession, Depends(get_planner_session)],
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """Remove an item from the list."""
    outcome = session.remove_item(backend, item_id)
    if outcome is None:
        raise _item_not_found()
    return GroceryOutcomeResponse(outcome=outcome)


@router.delete("", response_model=GroceryOutcomeResponse)
def clear_grocery_list(
    session: Annotated[PlannerSession, Depends(get_planner_session)],
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """Remove every item from the list."""
    return GroceryOutcomeResponse(outcome=session.clear_grocery(backend))
