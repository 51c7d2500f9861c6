"""Plain-text export of recipes and cookbooks."""

from typing import Sequence

from ..models import Cookbook, Recipe

SEPARATOR = "-" * 80
PAGES_PER_RECIPE = 2

SUPPORTED_FORMATS = ("txt",)


def _num(value) -> str:
    return f"{value:g}" if isinstance(value, float) else str(value)


def _metadata(recipe: Recipe) -> str:
    text = ""
    if recipe.source is not None:
        text += f"Source: {recipe.source.name}\n"
    if recipe.classification is not None:
        text += f"Classification: {recipe.classification.name}\n"
    if recipe.servings:
        text += f"Servings: {recipe.servings}\n"
    if recipe.tags:
        text += f"Tags: {', '.join(recipe.tags)}\n"
    return text


def _content(recipe: Recipe) -> str:
    text = "\nINGREDIENTS:\n"
    text += f"{recipe.ingredients}\n\n"
    text += "INSTRUCTIONS:\n"
    text += f"{recipe.instructions}\n\n"
    if recipe.notes:
        text += "NOTES:\n"
        text += f"{recipe.notes}\n\n"
    return text


def _nutrition(recipe: Recipe) -> str:
    if not recipe.has_nutrition:
        return ""
    text = "NUTRITIONAL INFORMATION:\n"
    if recipe.calories:
        text += f"Calories: {_num(recipe.calories)}\n"
    if recipe.fat:
        text += f"Fat: {_num(recipe.fat)}g\n"
    if recipe.cholesterol:
        text += f"Cholesterol: {_num(recipe.cholesterol)}mg\n"
    if recipe.sodium:
        text += f"Sodium: {_num(recipe.sodium)}mg\n"
    if recipe.protein:
        text += f"Protein: {_num(recipe.protein)}g\n"
    return text


def recipe_text(recipe: Recipe) -> str:
    return f"RECIPE: {recipe.name}\n\n" + _metadata(recipe) + _content(recipe) + _nutrition(recipe)


def cookbook_text(cookbook: Cookbook, recipes: Sequence[Recipe]) -> str:
    """Cookbook with a table of contents; `recipes` must already be in display order."""
    text = f"COOKBOOK: {cookbook.name}\n\n"
    if cookbook.description:
        text += "DESCRIPTION:\n"
        text += f"{cookbook.description}\n\n"

    text += "TABLE OF CONTENTS:\n"
    page = 1
    for index, recipe in enumerate(recipes, start=1):
        text += f"{index}. {recipe.name} - Page {page}\n"
        page += PAGES_PER_RECIPE
    text += "\n\n"

    for index, recipe in enumerate(recipes, start=1):
        text += f"{SEPARATOR}\n"
        text += f"RECIPE {index}: {recipe.name}\n"
        text += f"{SEPARATOR}\n\n"
        text += _metadata(recipe)
        text += _content(recipe)
        text += _nutrition(recipe)
        text += "\n\n"

    return text
