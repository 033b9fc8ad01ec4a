"""Weekly meal planner API endpoints."""

from datetime import date, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from meal_planner.api.dependencies import get_backend, get_planner_session
from meal_planner.models.enums import MealType
from meal_planner.schemas.planner import (
    AssignSlotRequest,
    MealSlot,
    PlannedIngredientsResponse,
    PlannerWeekResponse,
    SlotUpdateResponse,
)
from meal_planner.services.data_backend import DataBackend
from meal_planner.services.planner import PLANNER_DAYS, PlannerSession

router = APIRouter(prefix="/api/v1/planner", tags=["planner"])


def _week(session: PlannerSession, start: date) -> PlannerWeekResponse:
    return PlannerWeekResponse(
        start=start,
        end=start + timedelta(days=PLANNER_DAYS - 1),
        days=session.week(start),
    )


@router.get("/week", response_model=PlannerWeekResponse)
def get_week(
    session: Annotated[PlannerSession, Depends(get_planner_session)],
    start: date | None = Query(default=None, description="First day (defaults to today)"),
):
    """Get seven days of breakfast, lunch and dinner slots."""
    return _week(session, start or date.today())


@router.post("/reload", response_model=PlannerWeekResponse)
def reload_planner(
    session: Annotated[PlannerSession, Depends(get_planner_session)],
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """Re-fetch the meal plan and grocery checklist from the backend."""
    session.load(backend)
    return _week(session, date.today())


@router.get("/ingredients", response_model=PlannedIngredientsResponse)
def get_planned_ingredients(
    session: Annotated[PlannerSession, Depends(get_planner_session)],
):
    """Get the summed ingredients of every planned meal."""
    return PlannedIngredientsResponse(
        planned_recipe_count=len(session.planned_recipes()),
        ingredients=session.total_ingredients(),
    )


@router.get("/slots/{day}/{meal}", response_model=MealSlot)
def get_slot(
    day: date,
    meal: MealType,
    session: Annotated[PlannerSession, Depends(get_planner_session)],
):
    """Get one slot."""
    return session.slot(day, meal)


@router.put("/slots/{day}/{meal}", response_model=SlotUpdateResponse)
def assign_slot(
    day: date,
    meal: MealType,
    request: AssignSlotRequest,
    session: Annotated[PlannerSession, Depends(get_planner_session)],
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """Put a recipe into a slot, replacing any recipe already there."""
    recipe = backend.get_recipe(request.recipe_id)
    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")

    outcome = session.assign(backend, day, meal, recipe)
    return SlotUpdateResponse(slot=session.slot(day, meal), outcome=outcome)


@router.delete("/slots/{day}/{meal}", response_model=SlotUpdateResponse)
def remove_slot(
    day: date,
    meal: MealType,
    session: Annotated[PlannerSession, Depends(get_planner_session)],
    backend: Annotated[DataBackend, Depends(get_backend)],
):
    """Empty a slot. Emptying an empty slot is not an error."""
    outcome = session.remove(backend, day, meal)
    return SlotUpdateResponse(slot=session.slot(day, meal), outcome=outcome)
