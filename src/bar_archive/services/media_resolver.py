"""
Media Resolver - map an owner's ordered images to archive entries.

Entry names are `{folder}/images/{owner_id}-{n}.{extension}` where n is
1-based and assigned in ascending `sort` order. Numbering restarts for every
owner. A missing source file produces a MediaMissingWarning and does not
consume a number, so the surviving files stay densely numbered.
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List

from bar_archive.models.enums import MediaOwnerKind
from bar_archive.models.image import MediaOwner
from bar_archive.services.exceptions import MediaMissingWarning
from bar_archive.services.logging_utils import get_service_logger, log_operation
from bar_archive.services.media_storage import MediaStorage
from bar_archive.services.snapshot_service import sorted_images
from bar_archive.utils.constants import COCKTAILS_DIR, IMAGES_SUBDIR, INGREDIENTS_DIR


logger = get_service_logger(__name__)

OWNER_FOLDERS: Dict[MediaOwnerKind, str] = {
    MediaOwnerKind.COCKTAIL: COCKTAILS_DIR,
    MediaOwnerKind.INGREDIENT: INGREDIENTS_DIR,
}


@dataclass(frozen=True)
class ResolvedMedia:
    """One image file to copy into the archive."""

    source_path: Path
    entry_name: str
    file_name: str
    position: int  # index in the owner's sorted image list
    sort: int


@dataclass
class MediaResolution:
    """Resolved entries plus warnings for images that were skipped."""

    entries: List[ResolvedMedia] = field(default_factory=list)
    warnings: List[MediaMissingWarning] = field(default_factory=list)


def media_folder(owner: MediaOwner) -> str:
    """Archive folder holding the images of an owner kind."""
    return f"{OWNER_FOLDERS[owner.kind]}/{IMAGES_SUBDIR}"


def resolve_media(
    owner: MediaOwner,
    owner_id: str,
    images,
    storage: MediaStorage,
) -> MediaResolution:
    """
    Resolve an owner's images to (source path, archive entry name) pairs.

    Args:
        owner: Tagged owner, selects the archive folder
        owner_id: Export _id of the owner, prefix of every file name
        images: The owner's Image rows in any order
        storage: Media storage used to locate source files

    Returns:
        MediaResolution with entries in archive order and any warnings
    """
    resolution = MediaResolution()
    folder = media_folder(owner)
    index = 1

    for position, image in enumerate(sorted_images(images)):
        source_path = storage.source_path(image)
        if not storage.exists(image):
            warning = MediaMissingWarning(owner_id, source_path, image.sort)
            resolution.warnings.append(warning)
            log_operation(
                logger,
                operation="resolve_media",
                outcome="media_missing",
                level=logging.WARNING,
                owner_id=owner_id,
                source_path=str(source_path),
                sort=image.sort,
            )
            continue

        file_name = f"{owner_id}-{index}.{image.file_extension}"
        resolution.entries.append(
            ResolvedMedia(
                source_path=source_path,
                entry_name=f"{folder}/{file_name}",
                file_name=file_name,
                position=position,
                sort=image.sort,
            )
        )
        index += 1

    return resolution


def renumber(entries: List[ResolvedMedia], owner_id: str) -> List[ResolvedMedia]:
    """
    Number entries 1..n again, keeping their order.

    Used when files that resolved could not be opened afterwards.
    """
    renumbered = []
    for index, media in enumerate(entries, start=1):
        folder = media.entry_name.rpartition("/")[0]
        file_name = f"{owner_id}-{index}{Path(media.file_name).suffix}"
        renumbered.append(replace(media, entry_name=f"{folder}/{file_name}", file_name=file_name))
    return renumbered
