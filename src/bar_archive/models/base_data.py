"""
Base taxonomy models scoped to a bar.

This module contains the simple lookup tables exported as base data:
- Glass: serving glass (name + description)
- CocktailMethod: preparation method (name + dilution percentage)
- Utensil: bar tool (name + description)
- IngredientCategory: ingredient grouping (name + description)
- Tag: free-form cocktail label
"""

from sqlalchemy import Column, String, Text, Integer, ForeignKey, Index

from .base import BaseModel


class Glass(BaseModel):
    """Serving glass available in a bar."""

    __tablename__ = "glasses"

    bar_id = Column(Integer, ForeignKey("bars.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    __table_args__ = (Index("idx_glass_bar", "bar_id"),)


class CocktailMethod(BaseModel):
    """
    Preparation method (shake, stir, build...).

    Attributes:
        dilution_percentage: Expected water dilution from this method
    """

    __tablename__ = "cocktail_methods"

    bar_id = Column(Integer, ForeignKey("bars.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    dilution_percentage = Column(Integer, nullable=False, default=0)

    __table_args__ = (Index("idx_cocktail_method_bar", "bar_id"),)


class Utensil(BaseModel):
    """Bar tool used to prepare cocktails."""

    __tablename__ = "utensils"

    bar_id = Column(Integer, ForeignKey("bars.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    __table_args__ = (Index("idx_utensil_bar", "bar_id"),)


class IngredientCategory(BaseModel):
    """Grouping for ingredients (spirits, syrups, juices...)."""

    __tablename__ = "ingredient_categories"

    bar_id = Column(Integer, ForeignKey("bars.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    __table_args__ = (Index("idx_ingredient_category_bar", "bar_id"),)


class Tag(BaseModel):
    """Free-form cocktail label."""

    __tablename__ = "tags"

    bar_id = Column(Integer, ForeignKey("bars.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)

    __table_args__ = (Index("idx_tag_bar", "bar_id"),)
