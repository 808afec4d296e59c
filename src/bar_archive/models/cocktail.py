"""
Cocktail models.

This module contains:
- Cocktail: Main cocktail recipe
- CocktailIngredient: Ingredient usage line within a cocktail
- CocktailIngredientSubstitute: Alternative ingredient for a usage line
- cocktail_tag: Association table between cocktails and tags
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, BaseModel


cocktail_tag = Table(
    "cocktail_tag",
    Base.metadata,
    Column("cocktail_id", Integer, ForeignKey("cocktails.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Cocktail(BaseModel):
    """
    Cocktail recipe.

    Attributes:
        bar_id: Owning bar
        name: Display name
        slug: Non-empty identifier unique within the bar, used as the export _id
        instructions: Preparation steps, usually multi-line
        description: Optional free text
        garnish: Optional garnish text
        source: Where the recipe came from
        glass_id: Optional serving glass
        cocktail_method_id: Optional preparation method
    """

    __tablename__ = "cocktails"

    bar_id = Column(Integer, ForeignKey("bars.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    instructions = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=True)
    garnish = Column(Text, nullable=True)
    source = Column(String(500), nullable=True)

    glass_id = Column(Integer, ForeignKey("glasses.id", ondelete="SET NULL"), nullable=True)
    cocktail_method_id = Column(
        Integer, ForeignKey("cocktail_methods.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    bar = relationship("Bar", back_populates="cocktails")
    glass = relationship("Glass", lazy="select")
    method = relationship("CocktailMethod", lazy="select")
    tags = relationship("Tag", secondary=cocktail_tag, lazy="select")
    ingredients = relationship(
        "CocktailIngredient",
        back_populates="cocktail",
        order_by="CocktailIngredient.sort",
        cascade="all, delete-orphan",
        lazy="select",
    )
    images = relationship(
        "Image",
        back_populates="cocktail",
        order_by="Image.sort",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        UniqueConstraint("bar_id", "slug", name="uq_cocktail_bar_slug"),
        CheckConstraint("trim(slug) != ''", name="ck_cocktail_slug_not_empty"),
        Index("idx_cocktail_bar", "bar_id"),
    )

    def __repr__(self) -> str:
        return f"Cocktail(id={self.id}, slug='{self.slug}')"


class CocktailIngredient(BaseModel):
    """
    One ingredient line of a cocktail.

    Attributes:
        amount: Quantity in `units`
        units: Unit label (ml, oz, dash...)
        optional: Whether the ingredient can be left out
        sort: Display order within the cocktail
    """

    __tablename__ = "cocktail_ingredients"

    cocktail_id = Column(
        Integer, ForeignKey("cocktails.id", ondelete="CASCADE"), nullable=False
    )
    ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False
    )
    amount = Column(Float, nullable=False, default=0.0)
    units = Column(String(50), nullable=False, default="")
    optional = Column(Boolean, nullable=False, default=False)
    sort = Column(Integer, nullable=False, default=0)

    cocktail = relationship("Cocktail", back_populates="ingredients")
    ingredient = relationship("Ingredient", lazy="select")
    substitutes = relationship(
        "CocktailIngredientSubstitute",
        back_populates="cocktail_ingredient",
        order_by="CocktailIngredientSubstitute.id",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (Index("idx_cocktail_ingredient_cocktail", "cocktail_id"),)


class CocktailIngredientSubstitute(BaseModel):
    """Alternative ingredient usable in place of a cocktail ingredient line."""

    __tablename__ = "cocktail_ingredient_substitutes"

    cocktail_ingredient_id = Column(
        Integer, ForeignKey("cocktail_ingredients.id", ondelete="CASCADE"), nullable=False
    )
    ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False
    )

    cocktail_ingredient = relationship("CocktailIngredient", back_populates="substitutes")
    ingredient = relationship("Ingredient", lazy="select")
