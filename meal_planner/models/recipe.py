"""Recipe and RecipeIngredient models."""

from sqlalchemy import JSON, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from meal_planner.database import Base
from meal_planner.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Recipe(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Recipe model for storing recipe definitions."""

    __tablename__ = "recipes"

    # NULL for seeded sample recipes
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    image = Column(Text, nullable=False, default="")
    cook_time = Column(Integer, nullable=False, default=0)  # minutes
    servings = Column(Integer, nullable=False, default=1)
    difficulty = Column(String(10), nullable=False, default="easy")
    instructions = Column(JSON, nullable=False, default=list)  # ["step 1", ...]
    tags = Column(JSON, nullable=False, default=list)

    # Relationships
    user = relationship("User", backref="recipes")
    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.position",
    )


class RecipeIngredient(Base, UUIDPrimaryKeyMixin):
    """Ingredient within a recipe."""

    __tablename__ = "recipe_ingredients"

    recipe_id = Column(String(36), ForeignKey("recipes.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False, default=0)
    unit = Column(String(50), nullable=False, default="")
    category = Column(String(20), nullable=False, default="other")

    # Relationships
    recipe = relationship("Recipe", back_populates="ingredients")
