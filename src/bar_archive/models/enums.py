"""
Enumerations shared by models and services.
"""

import enum


class MediaOwnerKind(str, enum.Enum):
    """Kind of entity an image is attached to."""

    COCKTAIL = "cocktail"
    INGREDIENT = "ingredient"


class ExportFormat(str, enum.Enum):
    """
    Interchange format for serialized entity files.

    The value doubles as the file extension inside the archive.
    """

    YAML = "yaml"
    JSON = "json"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: str) -> "ExportFormat":
        """Parse a user-supplied format name ("yaml", "json", "structured-text")."""
        normalized = value.strip().lower()
        if normalized in ("structured-text", "yml"):
            return cls.YAML
        return cls(normalized)


class ExportState(str, enum.Enum):
    """Lifecycle of a single export run."""

    IDLE = "idle"
    OPENING = "opening"
    WRITING_COCKTAILS = "writing_cocktails"
    WRITING_INGREDIENTS = "writing_ingredients"
    WRITING_BASE_DATA = "writing_base_data"
    WRITING_MANIFEST = "writing_manifest"
    FINALIZED = "finalized"
    ABORTED = "aborted"
