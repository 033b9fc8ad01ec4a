"""Ingredient catalog schemas."""

from pydantic import BaseModel, ConfigDict, Field

from meal_planner.models.enums import IngredientCategory


class CatalogItem(BaseModel):
    """Catalog entry used to pre-fill unit and category while authoring."""

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(..., min_length=1, max_length=255)
    default_unit: str = Field("", max_length=50)
    category: IngredientCategory = IngredientCategory.OTHER


class PackagingOptionCreate(BaseModel):
    """A pack size to record for an ingredient."""

    ingredient_name: str = Field(..., min_length=1, max_length=255)
    unit: str = Field(..., max_length=50)  # 'g' | 'ml' | 'piece' | ...
    pack_amount: float = Field(..., gt=0)


class PackagingOption(PackagingOptionCreate):
    """Stored packaging option."""

    model_config = ConfigDict(from_attributes=True)

    id: str
