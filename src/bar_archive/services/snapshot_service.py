"""
Entity Snapshot Service - convert loaded entities into canonical export records.

A canonical record is a plain tree of str/int/float/bool/None, lists and
dicts. Key order is fixed per entity type and nested collections keep their
display order, so the same entity state always yields the same record.

Usage:
    from bar_archive.services.snapshot_service import load_cocktails, snapshot

    for cocktail in load_cocktails(session, bar_id):
        record = snapshot(cocktail)
        print(record["_id"])
"""

from typing import Any, Dict, List, Tuple

from sqlalchemy import inspect
from sqlalchemy.orm import Session, joinedload, selectinload

from bar_archive.models.base_data import CocktailMethod, Glass, IngredientCategory, Utensil
from bar_archive.models.cocktail import (
    Cocktail,
    CocktailIngredient,
    CocktailIngredientSubstitute,
)
from bar_archive.models.image import Image
from bar_archive.models.ingredient import Ingredient
from bar_archive.services.exceptions import IncompleteEntityError
from bar_archive.services.format_encoder import normalize_block_text


CanonicalRecord = Dict[str, Any]

# Base data file stem -> (model, exported columns)
BASE_DATA_TABLES: Dict[str, Tuple[type, Tuple[str, ...]]] = {
    "base_glasses": (Glass, ("name", "description")),
    "base_methods": (CocktailMethod, ("name", "dilution_percentage")),
    "base_utensils": (Utensil, ("name", "description")),
    "base_ingredient_categories": (IngredientCategory, ("name", "description")),
}


# ============================================================================
# Loading
# ============================================================================


def load_cocktails(session: Session, bar_id: int) -> List[Cocktail]:
    """Load every cocktail of a bar with all relations snapshot() needs."""
    return (
        session.query(Cocktail)
        .options(
            selectinload(Cocktail.ingredients).selectinload(CocktailIngredient.ingredient),
            selectinload(Cocktail.ingredients)
            .selectinload(CocktailIngredient.substitutes)
            .selectinload(CocktailIngredientSubstitute.ingredient),
            selectinload(Cocktail.images),
            joinedload(Cocktail.glass),
            joinedload(Cocktail.method),
            selectinload(Cocktail.tags),
        )
        .filter(Cocktail.bar_id == bar_id)
        .order_by(Cocktail.id)
        .populate_existing()
        .all()
    )


def load_ingredients(session: Session, bar_id: int) -> List[Ingredient]:
    """Load every ingredient of a bar with images, category and parent."""
    return (
        session.query(Ingredient)
        .options(
            selectinload(Ingredient.images),
            joinedload(Ingredient.category),
            joinedload(Ingredient.parent),
        )
        .filter(Ingredient.bar_id == bar_id)
        .order_by(Ingredient.id)
        .populate_existing()
        .all()
    )


def load_base_rows(session: Session, bar_id: int, model: type) -> list:
    """Load the rows of one base taxonomy table for a bar, in id order."""
    return (
        session.query(model)
        .filter(model.bar_id == bar_id)
        .order_by(model.id)
        .all()
    )


# ============================================================================
# Helpers
# ============================================================================


def _require_loaded(entity, *relations: str) -> None:
    """Raise IncompleteEntityError if any relation has not been loaded."""
    unloaded = inspect(entity).unloaded
    for relation in relations:
        if relation in unloaded:
            raise IncompleteEntityError(type(entity).__name__, entity.id, relation)


def export_id(entity) -> str:
    """Stable export identifier. Slugs are non-empty and unique per bar."""
    return entity.slug


def sorted_images(images) -> List[Image]:
    """Images in canonical export order (ascending sort, then id)."""
    return sorted(images, key=lambda image: (image.sort, image.id or 0))


def _free_text(value):
    # Same text in every format, see normalize_block_text()
    if isinstance(value, str) and ("\n" in value or "\r" in value):
        return normalize_block_text(value)
    return value


def _snapshot_images(images) -> List[CanonicalRecord]:
    return [
        {
            "sort": image.sort,
            "copyright": image.copyright,
            "placeholder_hash": image.placeholder_hash,
        }
        for image in sorted_images(images)
    ]


def _ingredient_ref(ingredient: Ingredient) -> CanonicalRecord:
    return {"_id": export_id(ingredient), "name": ingredient.name}


# ============================================================================
# Snapshotters
# ============================================================================


def snapshot_cocktail(cocktail: Cocktail) -> CanonicalRecord:
    """
    Build the canonical record for a cocktail.

    Requires ingredients (with ingredient and substitutes), images, glass,
    method and tags to be loaded.

    Raises:
        IncompleteEntityError: If a required relation was not loaded
    """
    _require_loaded(cocktail, "ingredients", "images", "glass", "method", "tags")

    ingredients = []
    for usage in sorted(cocktail.ingredients, key=lambda ci: (ci.sort, ci.id or 0)):
        _require_loaded(usage, "ingredient", "substitutes")
        substitutes = []
        for substitute in usage.substitutes:
            _require_loaded(substitute, "ingredient")
            substitutes.append(_ingredient_ref(substitute.ingredient))

        ingredients.append({
            **_ingredient_ref(usage.ingredient),
            "amount": float(usage.amount),
            "units": usage.units,
            "optional": bool(usage.optional),
            "sort": usage.sort,
            "substitutes": substitutes,
        })

    return {
        "_id": export_id(cocktail),
        "name": cocktail.name,
        "instructions": _free_text(cocktail.instructions),
        "description": _free_text(cocktail.description),
        "garnish": _free_text(cocktail.garnish),
        "source": cocktail.source,
        "glass": cocktail.glass.name if cocktail.glass else None,
        "method": cocktail.method.name if cocktail.method else None,
        "tags": sorted(tag.name for tag in cocktail.tags),
        "ingredients": ingredients,
        "images": _snapshot_images(cocktail.images),
    }


def snapshot_ingredient(ingredient: Ingredient) -> CanonicalRecord:
    """
    Build the canonical record for an ingredient.

    Only the direct parent is included (id and name), never the full tree.

    Raises:
        IncompleteEntityError: If images, category or parent was not loaded
    """
    _require_loaded(ingredient, "images", "category", "parent")

    parent = ingredient.parent
    return {
        "_id": export_id(ingredient),
        "name": ingredient.name,
        "strength": float(ingredient.strength or 0.0),
        "description": _free_text(ingredient.description),
        "origin": ingredient.origin,
        "color": ingredient.color,
        "category": ingredient.category.name if ingredient.category else None,
        "parent": _ingredient_ref(parent) if parent is not None else None,
        "images": _snapshot_images(ingredient.images),
    }


def snapshot_base_rows(rows, columns: Tuple[str, ...]) -> List[CanonicalRecord]:
    """Project base taxonomy rows onto the exported columns, keeping row order."""
    return [{column: _free_text(getattr(row, column)) for column in columns} for row in rows]


_SNAPSHOTTERS = {
    Cocktail: snapshot_cocktail,
    Ingredient: snapshot_ingredient,
}


def snapshot(entity) -> CanonicalRecord:
    """
    Build the canonical record for a cocktail or ingredient.

    Raises:
        IncompleteEntityError: If a required relation was not loaded
        TypeError: If the entity type has no snapshotter
    """
    snapshotter = _SNAPSHOTTERS.get(type(entity))
    if snapshotter is None:
        raise TypeError(f"No snapshotter for {type(entity).__name__}")
    return snapshotter(entity)
