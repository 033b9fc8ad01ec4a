"""Ingredient aggregation and grocery checklist merging.

Both functions here are pure: they never touch a backend, so they can be run on
every planner change and tested in isolation.
"""

import uuid
from collections.abc import Iterable, Sequence

from meal_planner.schemas.grocery import GroceryItem, PersistedGroceryRow
from meal_planner.schemas.recipe import Ingredient, Recipe


def ingredient_key(name: str) -> str:
    """Aggregation identity of an ingredient: its trimmed, lowercased name."""
    return name.strip().lower()


def grocery_key(name: str, unit: str) -> tuple[str, str]:
    """Checklist identity of a grocery item: lowercased name plus exact unit."""
    return (name.lower(), unit)


def aggregate_ingredients(ingredients: Iterable[Ingredient]) -> list[Ingredient]:
    """Sum amounts of ingredients sharing a name.

    The first occurrence of a name supplies the name, unit and category of the
    result. Units are not converted: "200 g" and "100 ml" of the same name sum
    to 300 in the first-seen unit.
    """
    totals: dict[str, Ingredient] = {}
    for ingredient in ingredients:
        key = ingredient_key(ingredient.name)
        existing = totals.get(key)
        if existing is None:
            totals[key] = ingredient.model_copy()
        else:
            totals[key] = existing.model_copy(
                update={"amount": existing.amount + ingredient.amount}
            )
    return list(totals.values())


def aggregate(recipes: Iterable[Recipe]) -> list[Ingredient]:
    """Aggregate the ingredients of every recipe, in recipe order."""
    return aggregate_ingredients(
        ingredient for recipe in recipes for ingredient in recipe.ingredients
    )


def new_item_id() -> str:
    return uuid.uuid4().hex[:9]


def derive_grocery_items(ingredients: Iterable[Ingredient]) -> list[GroceryItem]:
    """Turn aggregated ingredients into fresh, unchecked grocery items."""
    return [
        GroceryItem(
            id=new_item_id(),
            name=ingredient.name,
            amount=ingredient.amount,
            unit=ingredient.unit,
            category=ingredient.category,
        )
        for ingredient in ingredients
    ]


def merge_grocery_state(
    derived: Sequence[GroceryItem], persisted: Sequence[PersistedGroceryRow]
) -> list[GroceryItem]:
    """Overlay persisted checklist state onto freshly derived items.

    A derived item that matches a persisted row on (lowercased name, unit) takes
    the row's id and checked flag; its amount stays the freshly computed one.
    Persisted custom rows that match no derived item are appended unchanged.
    """
    saved = {grocery_key(row.ingredient_name, row.unit): row for row in persisted}

    merged: list[GroceryItem] = []
    for item in derived:
        row = saved.get(grocery_key(item.name, item.unit))
        if row is None:
            merged.append(item)
        else:
            update = {"checked": row.checked}
            if row.id:
                update["id"] = row.id
            merged.append(item.model_copy(update=update))

    derived_keys = {grocery_key(item.name, item.unit) for item in merged}
    custom = [
        GroceryItem(
            id=row.id or new_item_id(),
            name=row.ingredient_name,
            amount=row.amount,
            unit=row.unit,
            category=row.category,
            checked=row.checked,
            is_custom=True,
        )
        for row in persisted
        if row.is_custom and grocery_key(row.ingredient_name, row.unit) not in derived_keys
    ]
    return merged + custom


def group_by_category(items: Iterable[GroceryItem]) -> list[tuple[str, list[GroceryItem]]]:
    """Group items by category; categories sorted alphabetically, items in list order."""
    groups: dict[str, list[GroceryItem]] = {}
    for item in items:
        groups.setdefault(item.category.value, []).append(item)
    return sorted(groups.items())
