"""
Test fixtures for bar recipe datasets.

Provides a small builder that creates bars, ingredients, cocktails and
images in the test database, and writes image files into an uploads root.
"""

from pathlib import Path
from typing import Optional

from bar_archive.models import (
    Bar,
    CocktailMethod,
    Glass,
    Image,
    IngredientCategory,
    Utensil,
)
from bar_archive.services import cocktail_service, ingredient_service

# Smallest valid JPEG header, enough for a stored file
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


class BarTestFixtures:
    """
    Builder for bar datasets used by the export tests.

    Args:
        session: Session all rows are created in
        uploads_dir: Root that Image.file_path values are relative to
    """

    def __init__(self, session, uploads_dir: Path):
        self.session = session
        self.uploads_dir = Path(uploads_dir)

    def create_bar(self, name: str = "Test Bar", slug: str = "test-bar") -> Bar:
        bar = Bar(name=name, slug=slug)
        self.session.add(bar)
        self.session.flush()
        return bar

    def create_glass(self, bar: Bar, name: str, description: Optional[str] = None) -> Glass:
        glass = Glass(bar_id=bar.id, name=name, description=description)
        self.session.add(glass)
        self.session.flush()
        return glass

    def create_method(self, bar: Bar, name: str, dilution_percentage: int = 0) -> CocktailMethod:
        method = CocktailMethod(bar_id=bar.id, name=name, dilution_percentage=dilution_percentage)
        self.session.add(method)
        self.session.flush()
        return method

    def create_utensil(self, bar: Bar, name: str, description: Optional[str] = None) -> Utensil:
        utensil = Utensil(bar_id=bar.id, name=name, description=description)
        self.session.add(utensil)
        self.session.flush()
        return utensil

    def create_category(
        self, bar: Bar, name: str, description: Optional[str] = None
    ) -> IngredientCategory:
        category = IngredientCategory(bar_id=bar.id, name=name, description=description)
        self.session.add(category)
        self.session.flush()
        return category

    def create_ingredient(self, bar: Bar, name: str, **fields):
        return ingredient_service.create_ingredient(bar.id, name, session=self.session, **fields)

    def create_cocktail(self, bar: Bar, name: str, **fields):
        return cocktail_service.create_cocktail(bar.id, name, session=self.session, **fields)

    def add_image(
        self,
        owner,
        sort: int,
        extension: str = "jpg",
        write_file: bool = True,
        copyright: Optional[str] = None,
    ) -> Image:
        """
        Attach an image to a cocktail or ingredient.

        The stored file is named after the owner's slug and sort value and
        contains the sort value, so tests can tell copied files apart.
        """
        file_path = f"{owner.slug}/{sort}.{extension}"
        if write_file:
            target = self.uploads_dir / file_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(JPEG_BYTES + str(sort).encode("ascii"))

        image = Image(
            file_path=file_path,
            file_extension=extension,
            sort=sort,
            copyright=copyright,
            placeholder_hash=f"hash-{sort}",
        )
        owner.images.append(image)
        self.session.flush()
        return image
