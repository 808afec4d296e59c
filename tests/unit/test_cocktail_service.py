"""
Tests for cocktail creation and ingredient lines.
"""

import pytest

from bar_archive.models import Bar, Tag
from bar_archive.services import cocktail_service, ingredient_service
from bar_archive.services.exceptions import (
    BarNotFound,
    CocktailNotFound,
    IngredientNotFound,
    ValidationError,
)


@pytest.fixture
def bars(db_session):
    main = Bar(name="Main", slug="main")
    other = Bar(name="Other", slug="other")
    db_session.add_all([main, other])
    db_session.flush()
    return main, other


class TestCreateCocktail:
    """Tests for create_cocktail()."""

    def test_creates_with_slug_and_fields(self, db_session, bars):
        main, _ = bars
        cocktail = cocktail_service.create_cocktail(
            main.id, "Mai Tai", instructions="Shake.", garnish="Mint", session=db_session
        )
        assert cocktail.slug == "mai-tai"
        assert cocktail.garnish == "Mint"

    def test_tags_are_reused_within_bar(self, db_session, bars):
        main, other = bars
        cocktail_service.create_cocktail(
            main.id, "Negroni", tags=["Classic", "Bitter"], session=db_session
        )
        manhattan = cocktail_service.create_cocktail(
            main.id, "Manhattan", tags=["Classic"], session=db_session
        )
        cocktail_service.create_cocktail(other.id, "Daiquiri", tags=["Classic"], session=db_session)

        assert db_session.query(Tag).filter(Tag.bar_id == main.id).count() == 2
        assert db_session.query(Tag).filter(Tag.bar_id == other.id).count() == 1
        assert [tag.name for tag in manhattan.tags] == ["Classic"]

    def test_unknown_bar(self, db_session):
        with pytest.raises(BarNotFound):
            cocktail_service.create_cocktail(42, "Negroni", session=db_session)


class TestIngredientLines:
    """Tests for add_cocktail_ingredient() and add_substitute()."""

    def test_default_sort_appends(self, db_session, bars):
        main, _ = bars
        cocktail = cocktail_service.create_cocktail(main.id, "Daiquiri", session=db_session)
        rum = ingredient_service.create_ingredient(main.id, "Rum", session=db_session)
        lime = ingredient_service.create_ingredient(main.id, "Lime Juice", session=db_session)

        first = cocktail_service.add_cocktail_ingredient(
            cocktail.id, rum.id, 60, "ml", session=db_session
        )
        second = cocktail_service.add_cocktail_ingredient(
            cocktail.id, lime.id, 22.5, "ml", optional=True, session=db_session
        )

        assert first.sort == 1
        assert second.sort == 2
        assert second.optional is True
        assert [line.ingredient_id for line in cocktail.ingredients] == [rum.id, lime.id]

    def test_ingredient_from_other_bar_rejected(self, db_session, bars):
        main, other = bars
        cocktail = cocktail_service.create_cocktail(main.id, "Daiquiri", session=db_session)
        foreign_rum = ingredient_service.create_ingredient(other.id, "Rum", session=db_session)

        with pytest.raises(ValidationError):
            cocktail_service.add_cocktail_ingredient(
                cocktail.id, foreign_rum.id, 60, "ml", session=db_session
            )

    def test_missing_cocktail_or_ingredient(self, db_session, bars):
        main, _ = bars
        cocktail = cocktail_service.create_cocktail(main.id, "Daiquiri", session=db_session)
        rum = ingredient_service.create_ingredient(main.id, "Rum", session=db_session)

        with pytest.raises(CocktailNotFound):
            cocktail_service.add_cocktail_ingredient(999, rum.id, 60, "ml", session=db_session)
        with pytest.raises(IngredientNotFound):
            cocktail_service.add_cocktail_ingredient(cocktail.id, 999, 60, "ml", session=db_session)

    def test_substitutes(self, db_session, bars):
        main, other = bars
        cocktail = cocktail_service.create_cocktail(main.id, "Negroni", session=db_session)
        campari = ingredient_service.create_ingredient(main.id, "Campari", session=db_session)
        aperol = ingredient_service.create_ingredient(main.id, "Aperol", session=db_session)
        foreign = ingredient_service.create_ingredient(other.id, "Cynar", session=db_session)
        line = cocktail_service.add_cocktail_ingredient(
            cocktail.id, campari.id, 30, "ml", session=db_session
        )

        cocktail_service.add_substitute(line.id, aperol.id, session=db_session)
        assert [sub.ingredient_id for sub in line.substitutes] == [aperol.id]

        with pytest.raises(ValidationError):
            cocktail_service.add_substitute(line.id, foreign.id, session=db_session)
        with pytest.raises(ValidationError):
            cocktail_service.add_substitute(999, aperol.id, session=db_session)
