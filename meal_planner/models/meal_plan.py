"""Meal plan model."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from meal_planner.database import Base
from meal_planner.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class MealPlanEntry(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A recipe scheduled into one (date, meal) slot of a user's planner."""

    __tablename__ = "meal_plans"
    __table_args__ = (UniqueConstraint("user_id", "date", "meal"),)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    meal = Column(String(10), nullable=False)  # 'breakfast', 'lunch', 'dinner'
    recipe_id = Column(String(36), ForeignKey("recipes.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    recipe = relationship("Recipe")
