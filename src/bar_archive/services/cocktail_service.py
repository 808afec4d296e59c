"""
Cocktail service - creation and ingredient lines.

Every ingredient line and substitute must reference an ingredient of the
cocktail's own bar.
"""

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from bar_archive.models.bar import Bar
from bar_archive.models.base_data import Tag
from bar_archive.models.cocktail import (
    Cocktail,
    CocktailIngredient,
    CocktailIngredientSubstitute,
)
from bar_archive.models.ingredient import Ingredient
from bar_archive.services.database import session_scope
from bar_archive.services.exceptions import (
    BarNotFound,
    CocktailNotFound,
    IngredientNotFound,
    ValidationError,
)
from bar_archive.utils.slug_utils import create_slug


def _get_bar_ingredient(session: Session, ingredient_id: int, bar_id: int) -> Ingredient:
    ingredient = session.get(Ingredient, ingredient_id)
    if ingredient is None:
        raise IngredientNotFound(ingredient_id)
    if ingredient.bar_id != bar_id:
        raise ValidationError([
            f"Ingredient {ingredient_id} belongs to bar {ingredient.bar_id}, not bar {bar_id}"
        ])
    return ingredient


def create_cocktail(
    bar_id: int,
    name: str,
    tags: Iterable[str] = (),
    session: Optional[Session] = None,
    **fields,
) -> Cocktail:
    """
    Create a cocktail with a bar-unique slug.

    Tags are matched by name within the bar and created when missing.

    Args:
        bar_id: Owning bar
        name: Display name; the slug is derived from it
        tags: Tag names
        session: Optional SQLAlchemy session
        **fields: Other Cocktail columns (instructions, description, garnish,
            source, glass_id, cocktail_method_id)

    Returns:
        The flushed Cocktail

    Raises:
        BarNotFound: If the bar does not exist
    """
    def _impl(session):
        if session.get(Bar, bar_id) is None:
            raise BarNotFound(bar_id)

        cocktail = Cocktail(
            bar_id=bar_id,
            name=name,
            slug=create_slug(name, session=session, model=Cocktail, bar_id=bar_id),
            **fields,
        )
        for tag_name in tags:
            tag = session.query(Tag).filter(Tag.bar_id == bar_id, Tag.name == tag_name).first()
            if tag is None:
                tag = Tag(bar_id=bar_id, name=tag_name)
                session.add(tag)
            cocktail.tags.append(tag)

        session.add(cocktail)
        session.flush()
        return cocktail

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def add_cocktail_ingredient(
    cocktail_id: int,
    ingredient_id: int,
    amount: float,
    units: str,
    optional: bool = False,
    sort: Optional[int] = None,
    session: Optional[Session] = None,
) -> CocktailIngredient:
    """
    Add an ingredient line to a cocktail.

    Args:
        sort: Display position; defaults to after the last line

    Raises:
        CocktailNotFound: If the cocktail does not exist
        IngredientNotFound: If the ingredient does not exist
        ValidationError: If the ingredient belongs to another bar
    """
    def _impl(session):
        cocktail = session.get(Cocktail, cocktail_id)
        if cocktail is None:
            raise CocktailNotFound(cocktail_id)
        _get_bar_ingredient(session, ingredient_id, cocktail.bar_id)

        position = sort
        if position is None:
            position = max((line.sort for line in cocktail.ingredients), default=0) + 1

        line = CocktailIngredient(
            ingredient_id=ingredient_id,
            amount=amount,
            units=units,
            optional=optional,
            sort=position,
        )
        cocktail.ingredients.append(line)
        session.flush()
        return line

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def add_substitute(
    cocktail_ingredient_id: int,
    ingredient_id: int,
    session: Optional[Session] = None,
) -> CocktailIngredientSubstitute:
    """
    Add a substitute ingredient to a cocktail ingredient line.

    Raises:
        IngredientNotFound: If the ingredient does not exist
        ValidationError: If the line is missing or the ingredient belongs to
            another bar
    """
    def _impl(session):
        line = session.get(CocktailIngredient, cocktail_ingredient_id)
        if line is None:
            raise ValidationError([f"Cocktail ingredient {cocktail_ingredient_id} not found"])
        _get_bar_ingredient(session, ingredient_id, line.cocktail.bar_id)

        substitute = CocktailIngredientSubstitute(ingredient_id=ingredient_id)
        line.substitutes.append(substitute)
        session.flush()
        return substitute

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)
