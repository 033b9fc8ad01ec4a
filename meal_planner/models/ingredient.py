"""Ingredient catalog and packaging models."""

from sqlalchemy import Column, Float, String, UniqueConstraint

from meal_planner.database import Base
from meal_planner.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class IngredientCatalogItem(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Known ingredient with its default unit and category."""

    __tablename__ = "ingredient_catalog"

    normalized_name = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    default_unit = Column(String(50), nullable=False, default="")
    category = Column(String(20), nullable=False, default="other")


class IngredientPackaging(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A pack size an ingredient is sold in (e.g. 500 g, 1 piece)."""

    __tablename__ = "ingredient_packaging"
    __table_args__ = (UniqueConstraint("ingredient_name", "unit", "pack_amount"),)

    ingredient_name = Column(String(255), nullable=False, index=True)
    unit = Column(String(50), nullable=False)
    pack_amount = Column(Float, nullable=False)
