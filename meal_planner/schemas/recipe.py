"""Recipe schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from meal_planner.models.enums import Difficulty, IngredientCategory

# --- Ingredient ---


class IngredientCreate(BaseModel):
    """Ingredient line of a recipe being authored."""

    name: str = Field("", max_length=255)
    amount: float = Field(0, ge=0)
    unit: str = Field("g", max_length=50)
    category: IngredientCategory = IngredientCategory.OTHER


class Ingredient(IngredientCreate):
    """Ingredient line of a stored recipe."""

    model_config = ConfigDict(from_attributes=True)

    id: str


# --- Recipe ---


class RecipeCreate(BaseModel):
    """Create (or fully replace) a recipe.

    Blank instructions and unnamed ingredients are dropped, names are trimmed and
    tags are de-duplicated. A recipe needs a name, a description, at least one
    instruction and at least one named ingredient.
    """

    name: str = Field(..., max_length=255)
    description: str = Field(..., max_length=2000)
    image: str = ""  # URL, or a data: URL to be uploaded
    cook_time: int = Field(15, ge=0)
    servings: int = Field(2, gt=0)
    difficulty: Difficulty = Difficulty.EASY
    ingredients: list[IngredientCreate] = []
    instructions: list[str] = []
    tags: list[str] = []

    @model_validator(mode="after")
    def clean_and_require_content(self) -> "RecipeCreate":
        self.name = self.name.strip()
        self.description = self.description.strip()
        self.instructions = [step.strip() for step in self.instructions if step.strip()]
        self.ingredients = [
            ing.model_copy(update={"name": ing.name.strip()})
            for ing in self.ingredients
            if ing.name.strip()
        ]
        self.tags = list(dict.fromkeys(tag.strip() for tag in self.tags if tag.strip()))

        if not self.name:
            raise ValueError("Recipe name is required")
        if not self.description:
            raise ValueError("Recipe description is required")
        if not self.instructions:
            raise ValueError("At least one instruction is required")
        if not self.ingredients:
            raise ValueError("At least one named ingredient is required")
        return self


class Recipe(BaseModel):
    """Recipe with its ordered ingredients and instruction steps."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: int | None = None
    name: str
    description: str = ""
    image: str = ""
    cook_time: int = Field(0, ge=0)
    servings: int = Field(1, gt=0)
    difficulty: Difficulty = Difficulty.EASY
    ingredients: list[Ingredient] = []
    instructions: list[str] = []
    tags: list[str] = []


class RecipeImageResponse(BaseModel):
    """Public URL of an uploaded recipe image ("" when the upload was skipped)."""

    url: str


class RecipeTagsResponse(BaseModel):
    """All tags in use across recipes."""

    tags: list[str]
