"""Meal planner schemas."""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel

from meal_planner.models.enums import MealType
from meal_planner.schemas.recipe import Ingredient, Recipe


class PersistStatus(StrEnum):
    """What happened to a best-effort write after the local state was updated."""

    SAVED = "saved"
    SKIPPED = "skipped"  # backend not configured
    FAILED = "failed"


class PersistOutcome(BaseModel):
    """Result of a best-effort persistence side effect."""

    action: str
    status: PersistStatus
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == PersistStatus.SAVED


class MealSlot(BaseModel):
    """One (date, meal) cell of the planner."""

    date: date
    meal: MealType
    recipe: Recipe | None = None


class AssignSlotRequest(BaseModel):
    """Recipe to place into a slot."""

    recipe_id: str


class SlotUpdateResponse(BaseModel):
    """Slot state after an assign/remove, plus the persistence outcome."""

    slot: MealSlot
    outcome: PersistOutcome


class PlannerDay(BaseModel):
    """A day column of the weekly planner."""

    date: date
    weekday: str
    day_num: int
    is_today: bool
    slots: list[MealSlot]


class PlannerWeekResponse(BaseModel):
    """Seven consecutive planner days."""

    start: date
    end: date
    days: list[PlannerDay]


class PlannedIngredientsResponse(BaseModel):
    """Aggregated ingredients of every planned recipe."""

    planned_recipe_count: int
    ingredients: list[Ingredient]
