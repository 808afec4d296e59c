"""
Media storage collaborator.

Maps stored image references to readable files under the uploads root.
Resizing and placeholder hashing happen at upload time elsewhere; this
module only reads finalized references.
"""

from pathlib import Path
from typing import Optional, Union

from bar_archive.models.image import Image
from bar_archive.utils.config import get_config


class MediaStorage:
    """
    Read-only view of the uploads directory.

    Args:
        root: Directory that Image.file_path values are relative to.
            Defaults to the configured uploads directory.
    """

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root) if root is not None else get_config().uploads_dir

    def source_path(self, image: Image) -> Path:
        """Absolute path of the stored file for an image."""
        return self.root / image.file_path

    def exists(self, image: Image) -> bool:
        """True if the image's file is present and is a regular file."""
        return self.source_path(image).is_file()

    def __repr__(self) -> str:
        return f"MediaStorage(root='{self.root}')"
