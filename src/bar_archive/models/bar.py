"""
Bar model - the tenant scope that owns a recipe dataset.
"""

from sqlalchemy import Column, String, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class Bar(BaseModel):
    """
    Bar model representing one tenant's recipe collection.

    Every cocktail, ingredient and base taxonomy row belongs to exactly
    one bar. Export only ever reads a bar.

    Attributes:
        name: Bar display name
        slug: URL-friendly identifier
    """

    __tablename__ = "bars"

    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)

    cocktails = relationship("Cocktail", back_populates="bar", lazy="select")
    ingredients = relationship("Ingredient", back_populates="bar", lazy="select")

    __table_args__ = (Index("idx_bar_name", "name"),)

    def __repr__(self) -> str:
        return f"Bar(id={self.id}, slug='{self.slug}')"
