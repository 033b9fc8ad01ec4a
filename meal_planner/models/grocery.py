"""Grocery list model."""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, UniqueConstraint

from meal_planner.database import Base
from meal_planner.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class GroceryListEntry(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Persisted checklist state for one grocery item of a user."""

    __tablename__ = "grocery_lists"
    __table_args__ = (UniqueConstraint("user_id", "ingredient_name", "unit"),)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    ingredient_name = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False, default=0)
    unit = Column(String(50), nullable=False, default="")
    category = Column(String(20), nullable=False, default="other")
    checked = Column(Boolean, nullable=False, default=False)
    is_custom = Column(Boolean, nullable=False, default=False)
