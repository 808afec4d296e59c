"""
Ingredient model for bar ingredients.

Ingredients form a tree through parent_ingredient_id (e.g. "Gin" is the
parent of "London Dry Gin"). The tree is kept acyclic by
ingredient_service.set_parent(); export only needs one level.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    String,
    Text,
    Float,
    Integer,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class Ingredient(BaseModel):
    """
    Ingredient model.

    Attributes:
        bar_id: Owning bar
        name: Display name (e.g. "Campari")
        slug: Non-empty identifier unique within the bar, used as the export _id
        strength: ABV percentage
        description: Free text, may span multiple lines
        origin: Where the ingredient comes from
        color: Hex color used by clients
        ingredient_category_id: Optional category
        parent_ingredient_id: Optional parent in the ingredient tree
    """

    __tablename__ = "ingredients"

    bar_id = Column(Integer, ForeignKey("bars.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    strength = Column(Float, nullable=False, default=0.0)
    description = Column(Text, nullable=True)
    origin = Column(String(255), nullable=True)
    color = Column(String(20), nullable=True)

    ingredient_category_id = Column(
        Integer, ForeignKey("ingredient_categories.id", ondelete="SET NULL"), nullable=True
    )
    parent_ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    bar = relationship("Bar", back_populates="ingredients")
    category = relationship("IngredientCategory", lazy="select")
    parent = relationship("Ingredient", remote_side="Ingredient.id", lazy="select")
    images = relationship(
        "Image",
        back_populates="ingredient",
        order_by="Image.sort",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        UniqueConstraint("bar_id", "slug", name="uq_ingredient_bar_slug"),
        CheckConstraint("trim(slug) != ''", name="ck_ingredient_slug_not_empty"),
        Index("idx_ingredient_bar", "bar_id"),
        Index("idx_ingredient_parent", "parent_ingredient_id"),
    )

    def __repr__(self) -> str:
        return f"Ingredient(id={self.id}, slug='{self.slug}')"
