"""Service layer exception classes for Bar Archive.

Exception Hierarchy:
    ServiceError (base)
    ├── BarNotFound
    ├── IngredientNotFound
    ├── CocktailNotFound
    ├── ValidationError
    ├── CircularReferenceError
    └── ExportError (fatal, aborts an export run)
        ├── ContainerCreateError
        ├── ArchiveWriteError
        ├── IncompleteEntityError
        ├── EncodeError
        └── ExportCancelled

    MediaMissingWarning (UserWarning) - collected, never raised by the exporter
"""

from pathlib import Path
from typing import Optional


class ServiceError(Exception):
    """Base exception for all service layer errors."""

    pass


class BarNotFound(ServiceError):
    """Raised when a bar cannot be found by ID."""

    def __init__(self, bar_id: int):
        self.bar_id = bar_id
        super().__init__(f"Bar with ID {bar_id} not found")


class IngredientNotFound(ServiceError):
    """Raised when an ingredient cannot be found by ID."""

    def __init__(self, ingredient_id: int):
        self.ingredient_id = ingredient_id
        super().__init__(f"Ingredient with ID {ingredient_id} not found")


class CocktailNotFound(ServiceError):
    """Raised when a cocktail cannot be found by ID."""

    def __init__(self, cocktail_id: int):
        self.cocktail_id = cocktail_id
        super().__init__(f"Cocktail with ID {cocktail_id} not found")


class ValidationError(ServiceError):
    """Raised when data validation fails."""

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class CircularReferenceError(ServiceError):
    """Raised when a parent assignment would make an ingredient its own ancestor.

    Example:
        >>> raise CircularReferenceError(5, 9)
        CircularReferenceError: Cannot set ingredient 9 as parent of 5: would create a cycle
    """

    def __init__(self, ingredient_id: int, parent_id: int):
        self.ingredient_id = ingredient_id
        self.parent_id = parent_id
        super().__init__(
            f"Cannot set ingredient {parent_id} as parent of {ingredient_id}: "
            f"would create a cycle"
        )


# ============================================================================
# Export Exceptions
# ============================================================================


class ExportError(ServiceError):
    """Base class for errors that abort an export run."""

    pass


class ContainerCreateError(ExportError):
    """Raised when the output archive cannot be opened for writing.

    Args:
        path: Destination path that could not be opened
        original_error: Underlying OS error, if any
    """

    def __init__(self, path, original_error: Optional[Exception] = None):
        self.path = Path(path)
        self.original_error = original_error
        reason = f": {original_error}" if original_error else ""
        super().__init__(f"Error creating zip archive with filepath \"{self.path}\"{reason}")


class ArchiveWriteError(ExportError):
    """Raised when an entry cannot be written to an open archive."""

    def __init__(self, entry_name: str, original_error: Optional[Exception] = None):
        self.entry_name = entry_name
        self.original_error = original_error
        reason = f": {original_error}" if original_error else ""
        super().__init__(f"Failed to write archive entry '{entry_name}'{reason}")


class IncompleteEntityError(ExportError):
    """Raised when an entity reaches the snapshotter without a required relation.

    Example:
        >>> raise IncompleteEntityError("Cocktail", 12, "images")
        IncompleteEntityError: Cocktail 12 is missing required relation 'images'
    """

    def __init__(self, entity_type: str, entity_id, relation: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.relation = relation
        super().__init__(
            f"{entity_type} {entity_id} is missing required relation '{relation}'"
        )


class EncodeError(ExportError):
    """Raised when a canonical record cannot be serialized."""

    def __init__(self, record_id, export_format: str, original_error: Optional[Exception] = None):
        self.record_id = record_id
        self.export_format = export_format
        self.original_error = original_error
        super().__init__(
            f"Failed to encode record '{record_id}' as {export_format}: {original_error}"
        )


class ExportCancelled(ExportError):
    """Raised when an export run is cancelled from outside."""

    def __init__(self, bar_id: int):
        self.bar_id = bar_id
        super().__init__(f"Export of bar {bar_id} was cancelled")


# ============================================================================
# Warnings
# ============================================================================


class MediaMissingWarning(UserWarning):
    """A referenced image file is absent on disk; that image is skipped.

    Args:
        owner_id: Export _id of the owning cocktail/ingredient
        source_path: Path that was expected to exist
        sort: Sort value of the skipped image
    """

    def __init__(self, owner_id: str, source_path, sort: int):
        self.owner_id = owner_id
        self.source_path = Path(source_path)
        self.sort = sort
        super().__init__(
            f"Image for '{owner_id}' (sort {sort}) not found at {self.source_path}; skipped"
        )
