"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .bar import Bar
from .base_data import Glass, CocktailMethod, Utensil, IngredientCategory, Tag
from .ingredient import Ingredient
from .cocktail import Cocktail, CocktailIngredient, CocktailIngredientSubstitute, cocktail_tag
from .image import Image, MediaOwner
from .enums import ExportFormat, ExportState, MediaOwnerKind

__all__ = [
    "Base",
    "BaseModel",
    "Bar",
    # Base taxonomy
    "Glass",
    "CocktailMethod",
    "Utensil",
    "IngredientCategory",
    "Tag",
    # Recipes
    "Ingredient",
    "Cocktail",
    "CocktailIngredient",
    "CocktailIngredientSubstitute",
    "cocktail_tag",
    # Media
    "Image",
    "MediaOwner",
    # Enums
    "ExportFormat",
    "ExportState",
    "MediaOwnerKind",
]
