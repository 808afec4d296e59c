"""
Image model for media attached to cocktails and ingredients.

An image belongs to exactly one owner. Instead of a dynamic type+id pair the
owner is stored as two nullable foreign keys guarded by a CHECK constraint,
while the export code passes owners around as tagged MediaOwner values.
"""

from dataclasses import dataclass

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import MediaOwnerKind


@dataclass(frozen=True)
class MediaOwner:
    """Tagged reference to the entity owning an image."""

    kind: MediaOwnerKind
    owner_id: int

    @classmethod
    def cocktail(cls, owner_id: int) -> "MediaOwner":
        return cls(MediaOwnerKind.COCKTAIL, owner_id)

    @classmethod
    def ingredient(cls, owner_id: int) -> "MediaOwner":
        return cls(MediaOwnerKind.INGREDIENT, owner_id)


class Image(BaseModel):
    """
    Stored image file reference.

    Attributes:
        file_path: Path relative to the uploads root
        file_extension: Extension without the dot (jpg, png, webp)
        sort: Display order within the owner; export order is ascending sort
        copyright: Optional attribution text
        placeholder_hash: ThumbHash placeholder produced at upload time
        cocktail_id: Owning cocktail (mutually exclusive with ingredient_id)
        ingredient_id: Owning ingredient (mutually exclusive with cocktail_id)
    """

    __tablename__ = "images"

    file_path = Column(String(500), nullable=False)
    file_extension = Column(String(10), nullable=False)
    sort = Column(Integer, nullable=False, default=0)
    copyright = Column(String(255), nullable=True)
    placeholder_hash = Column(String(255), nullable=True)

    cocktail_id = Column(
        Integer, ForeignKey("cocktails.id", ondelete="CASCADE"), nullable=True
    )
    ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=True
    )

    cocktail = relationship("Cocktail", back_populates="images")
    ingredient = relationship("Ingredient", back_populates="images")

    __table_args__ = (
        CheckConstraint(
            "(cocktail_id IS NULL) != (ingredient_id IS NULL)",
            name="ck_image_single_owner",
        ),
        Index("idx_image_cocktail", "cocktail_id"),
        Index("idx_image_ingredient", "ingredient_id"),
    )

    def __repr__(self) -> str:
        return f"Image(id={self.id}, file_path='{self.file_path}', sort={self.sort})"
