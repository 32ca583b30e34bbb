from __future__ import annotations

from typing import Iterable, Sequence

from smartmeal.app.domain.models import IngredientWarning


def _warning_message(term: str) -> str:
    return f"This recipe contains '{term}' which is in your ingredients to avoid list"


def check_ingredient_conflicts(
    ingredients: Sequence[str],
    ingredients_to_avoid: Iterable[str],
) -> list[IngredientWarning]:
    """
    Flag ingredient lines that contain an avoided term (case-insensitive substring).

    Each line yields at most one warning, for the first avoided term it contains.
    """
    terms = [term.strip().lower() for term in ingredients_to_avoid or []]
    terms = [term for term in terms if term]
    if not terms:
        return []

    warnings: list[IngredientWarning] = []
    for ingredient in ingredients:
        line = ingredient.lower()
        for term in terms:
            if term in line:
                warnings.append(IngredientWarning(ingredient=term, message=_warning_message(term)))
                break
    return warnings
