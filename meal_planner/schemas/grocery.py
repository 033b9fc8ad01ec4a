"""Grocery list schemas."""

from pydantic import BaseModel, ConfigDict, Field

from meal_planner.models.enums import IngredientCategory
from meal_planner.schemas.planner import PersistOutcome


class GroceryItem(BaseModel):
    """An entry of the displayed grocery list."""

    id: str
    name: str
    amount: float = Field(0, ge=0)
    unit: str = ""
    category: IngredientCategory = IngredientCategory.OTHER
    checked: bool = False
    is_custom: bool = False


class PersistedGroceryRow(BaseModel):
    """Checklist state as stored by the data backend."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    user_id: int
    ingredient_name: str
    amount: float = Field(0, ge=0)
    unit: str = ""
    category: IngredientCategory = IngredientCategory.OTHER
    checked: bool = False
    is_custom: bool = False


class CustomItemCreate(BaseModel):
    """A grocery item added by hand."""

    name: str = Field("Custom Item", min_length=1, max_length=255)
    amount: float = Field(1, ge=0)
    unit: str = Field("piece", max_length=50)
    category: IngredientCategory = IngredientCategory.OTHER


class GroceryCategoryGroup(BaseModel):
    """Items of one category."""

    category: IngredientCategory
    items: list[GroceryItem]


class GroceryListResponse(BaseModel):
    """The grocery list grouped by category with progress counters."""

    items: list[GroceryItem]
    groups: list[GroceryCategoryGroup]
    checked_count: int
    total_count: int
    progress: float
    planned_recipe_count: int


class GroceryItemResponse(BaseModel):
    """An item after a change, plus the persistence outcome."""

    item: GroceryItem
    outcome: PersistOutcome


class GroceryOutcomeResponse(BaseModel):
    """Persistence outcome of a change that returns no item."""

    outcome: PersistOutcome
