"""
Ingredient service - creation and parent tree maintenance.

The ingredient tree is stored as a parent_ingredient_id edge. Assigning a
parent is rejected when it would make an ingredient its own ancestor or
link ingredients from different bars.
"""

from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from bar_archive.models.bar import Bar
from bar_archive.models.ingredient import Ingredient
from bar_archive.services.database import session_scope
from bar_archive.services.exceptions import (
    BarNotFound,
    CircularReferenceError,
    IngredientNotFound,
    ValidationError,
)
from bar_archive.utils.slug_utils import create_slug


def create_ingredient(bar_id: int, name: str, session: Optional[Session] = None, **fields) -> Ingredient:
    """
    Create an ingredient with a bar-unique slug.

    Args:
        bar_id: Owning bar
        name: Display name; the slug is derived from it
        session: Optional SQLAlchemy session
        **fields: Other Ingredient columns (strength, description, origin,
            color, ingredient_category_id)

    Returns:
        The flushed Ingredient

    Raises:
        BarNotFound: If the bar does not exist
        ValidationError: If parent_ingredient_id is passed (use set_parent)
    """
    if "parent_ingredient_id" in fields:
        raise ValidationError(["Use set_parent() to assign a parent ingredient"])

    def _impl(session):
        if session.get(Bar, bar_id) is None:
            raise BarNotFound(bar_id)

        ingredient = Ingredient(
            bar_id=bar_id,
            name=name,
            slug=create_slug(name, session=session, model=Ingredient, bar_id=bar_id),
            **fields,
        )
        session.add(ingredient)
        session.flush()
        return ingredient

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def get_ancestors(ingredient_id: int, session: Optional[Session] = None) -> List[Dict]:
    """
    Get path from ingredient to root.

    Returns:
        List of ancestor dictionaries ordered from immediate parent to root

    Raises:
        IngredientNotFound: If ingredient_id doesn't exist
    """
    def _impl(session):
        ingredient = session.get(Ingredient, ingredient_id)
        if ingredient is None:
            raise IngredientNotFound(ingredient_id)

        ancestors = []
        current = ingredient.parent
        while current is not None:
            ancestors.append(current.to_dict())
            current = current.parent
        return ancestors

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def would_create_cycle(ingredient_id: int, new_parent_id: int, session: Optional[Session] = None) -> bool:
    """
    Check if setting new_parent_id would create a circular reference.

    Returns:
        True if a cycle would be created, False if safe
    """
    def _impl(session):
        if ingredient_id == new_parent_id:
            return True

        # Walk from the new parent up to the root
        current = session.get(Ingredient, new_parent_id)
        while current is not None:
            if current.id == ingredient_id:
                return True
            current = current.parent
        return False

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def set_parent(
    ingredient_id: int, parent_id: Optional[int], session: Optional[Session] = None
) -> Dict:
    """
    Assign (or clear) an ingredient's parent.

    Args:
        ingredient_id: Ingredient to update
        parent_id: New parent, or None to make it a root
        session: Optional SQLAlchemy session

    Returns:
        Updated ingredient dictionary

    Raises:
        IngredientNotFound: If the ingredient or parent does not exist
        ValidationError: If the parent belongs to another bar
        CircularReferenceError: If the assignment would create a cycle
    """
    def _impl(session):
        ingredient = session.get(Ingredient, ingredient_id)
        if ingredient is None:
            raise IngredientNotFound(ingredient_id)

        if parent_id is not None:
            parent = session.get(Ingredient, parent_id)
            if parent is None:
                raise IngredientNotFound(parent_id)
            if parent.bar_id != ingredient.bar_id:
                raise ValidationError([
                    f"Parent ingredient {parent_id} belongs to bar {parent.bar_id}, "
                    f"not bar {ingredient.bar_id}"
                ])
            if would_create_cycle(ingredient_id, parent_id, session=session):
                raise CircularReferenceError(ingredient_id, parent_id)

        ingredient.parent_ingredient_id = parent_id
        session.flush()
        session.expire(ingredient, ["parent"])
        return ingredient.to_dict()

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)
