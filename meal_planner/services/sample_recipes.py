"""Bundled sample recipes shown when no database is configured."""

from meal_planner.schemas.recipe import Ingredient, Recipe


def _ing(ing_id: str, name: str, amount: float, unit: str, category: str) -> Ingredient:
    return Ingredient(id=ing_id, name=name, amount=amount, unit=unit, category=category)


SAMPLE_RECIPES: list[Recipe] = [
    Recipe(
        id="1",
        name="Grilled Salmon with Roasted Vegetables",
        description="Fresh salmon fillet with seasonal roasted vegetables and herbs",
        cook_time=25,
        servings=2,
        difficulty="medium",
        ingredients=[
            _ing("1", "Salmon fillet", 2, "pieces", "protein"),
            _ing("2", "Broccoli", 200, "g", "vegetable"),
            _ing("3", "Bell peppers", 1, "piece", "vegetable"),
            _ing("4", "Olive oil", 2, "tbsp", "other"),
            _ing("5", "Lemon", 1, "piece", "other"),
            _ing("6", "Garlic", 2, "cloves", "spice"),
            _ing("7", "Fresh herbs", 1, "bunch", "spice"),
        ],
        instructions=[
            "Preheat oven to 200°C",
            "Season salmon with salt, pepper and herbs",
            "Cut vegetables into chunks and toss with olive oil",
            "Roast vegetables for 15 minutes",
            "Grill salmon for 4-5 minutes each side",
            "Serve with lemon wedges",
        ],
        tags=["healthy", "protein", "quick", "gluten-free"],
    ),
    Recipe(
        id="2",
        name="Pasta Primavera",
        description="Creamy pasta with fresh seasonal vegetables and parmesan",
        cook_time=20,
        servings=4,
        difficulty="easy",
        ingredients=[
            _ing("8", "Pasta", 400, "g", "grain"),
            _ing("9", "Heavy cream", 200, "ml", "dairy"),
            _ing("10", "Parmesan cheese", 100, "g", "dairy"),
            _ing("11", "Zucchini", 1, "piece", "vegetable"),
            _ing("12", "Cherry tomatoes", 200, "g", "vegetable"),
            _ing("13", "Asparagus", 150, "g", "vegetable"),
            _ing("14", "Garlic", 3, "cloves", "spice"),
        ],
        instructions=[
            "Cook pasta according to package instructions",
            "Sauté garlic in olive oil until fragrant",
            "Add vegetables and cook until tender",
            "Pour in cream and simmer",
            "Add cooked pasta and toss with cheese",
            "Season with salt, pepper and fresh herbs",
        ],
        tags=["vegetarian", "comfort-food", "easy", "family-friendly"],
    ),
    Recipe(
        id="3",
        name="Chicken Stir-Fry",
        description="Healthy chicken stir-fry with colorful vegetables and ginger",
        cook_time=15,
        servings=3,
        difficulty="easy",
        ingredients=[
            _ing("15", "Chicken breast", 400, "g", "protein"),
            _ing("16", "Soy sauce", 3, "tbsp", "other"),
            _ing("17", "Ginger", 2, "cm", "spice"),
            _ing("18", "Bell peppers", 2, "pieces", "vegetable"),
            _ing("19", "Snap peas", 150, "g", "vegetable"),
            _ing("20", "Carrots", 1, "piece", "vegetable"),
            _ing("21", "Sesame oil", 1, "tbsp", "other"),
        ],
        instructions=[
            "Cut chicken into bite-sized pieces",
            "Heat oil in a wok or large pan",
            "Stir-fry chicken until golden",
            "Add vegetables and stir-fry for 3-4 minutes",
            "Add soy sauce and ginger",
            "Serve immediately over rice",
        ],
        tags=["healthy", "quick", "protein", "asian", "low-carb"],
    ),
]
