"""
Recipe Export Service - export a bar's recipe dataset to one portable archive.

Archive layout ({fmt} is yaml or json):
- cocktails/{slug}.{fmt}, cocktails/images/{slug}-{n}.{ext}
- ingredients/{slug}.{fmt}, ingredients/images/{slug}-{n}.{ext}
- base_glasses.{fmt}, base_methods.{fmt}, base_utensils.{fmt},
  base_ingredient_categories.{fmt} (only for tables with rows)
- _meta.json (always JSON): version, date, called_from

Usage:
    from bar_archive.services.recipe_export_service import export_bar

    result = export_bar(1, export_format="json")
    print(result.get_summary())

    # Validate a finished archive
    report = validate_archive(result.file_path)
"""

import json
import logging
import re
import threading
import zipfile
from collections import defaultdict
from contextlib import ExitStack
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from bar_archive.models.bar import Bar
from bar_archive.models.enums import ExportFormat, ExportState
from bar_archive.models.image import MediaOwner
from bar_archive.services.archive_writer import ArchiveWriter
from bar_archive.services.database import session_scope
from bar_archive.services.exceptions import (
    BarNotFound,
    ContainerCreateError,
    ExportCancelled,
    MediaMissingWarning,
)
from bar_archive.services.format_encoder import get_encoder
from bar_archive.services.logging_utils import get_service_logger, log_operation
from bar_archive.services.media_resolver import ResolvedMedia, renumber, resolve_media
from bar_archive.services.media_storage import MediaStorage
from bar_archive.services.snapshot_service import (
    BASE_DATA_TABLES,
    load_base_rows,
    load_cocktails,
    load_ingredients,
    snapshot,
    snapshot_base_rows,
)
from bar_archive.utils.config import Config, get_config
from bar_archive.utils.constants import (
    APP_VERSION,
    COCKTAILS_DIR,
    IMAGES_SUBDIR,
    INGREDIENTS_DIR,
    JSON_INDENT,
    MANIFEST_FILENAME,
)
from bar_archive.utils.datetime_utils import to_iso8601, utc_now

logger = get_service_logger(__name__)


# ============================================================================
# Data Classes
# ============================================================================


@dataclass
class ExportResult:
    """Result of a finished export run."""

    file_path: Path
    export_format: ExportFormat
    entity_counts: Dict[str, int] = field(default_factory=dict)
    media_count: int = 0
    warnings: List[MediaMissingWarning] = field(default_factory=list)

    def get_summary(self) -> str:
        """Get a summary string of the export results."""
        lines = [f"Exported bar archive to {self.file_path} ({self.export_format.value})"]
        lines.append("")
        for entity, count in self.entity_counts.items():
            lines.append(f"  {entity}: {count}")
        lines.append(f"  images: {self.media_count}")

        if self.warnings:
            lines.append("")
            lines.append(f"{len(self.warnings)} warning(s):")
            for warning in self.warnings:
                lines.append(f"  - {warning}")

        return "\n".join(lines)


def _attach_file_names(image_records: List[Dict], entries: List[ResolvedMedia]) -> List[Dict]:
    """Keep only images that made it into the archive, tagged with their file name."""
    return [
        {**image_records[media.position], "file_name": media.file_name}
        for media in entries
    ]


# ============================================================================
# Exporter
# ============================================================================


class RecipeExporter:
    """
    Sequential export of one bar into one archive.

    State goes Idle -> Opening -> WritingCocktails -> WritingIngredients ->
    WritingBaseData -> WritingManifest -> Finalized; any failure moves it to
    Aborted and the partial archive is deleted.

    Args:
        session: Session used for all reads
        storage: Media storage for image files (default: configured uploads dir)
        config: Configuration for default output paths (default: get_config())
        cancel_event: When set, the run aborts before the next entity or file
        clock: Source of the export timestamp
    """

    def __init__(
        self,
        session: Session,
        storage: Optional[MediaStorage] = None,
        config: Optional[Config] = None,
        cancel_event: Optional[threading.Event] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session = session
        self.config = config if config is not None else get_config()
        self.storage = storage if storage is not None else MediaStorage(self.config.uploads_dir)
        self.cancel_event = cancel_event
        self.clock = clock
        self.state = ExportState.IDLE

    def export(
        self,
        bar_id: int,
        output_path: Optional[Union[str, Path]] = None,
        export_format: Union[ExportFormat, str] = ExportFormat.YAML,
    ) -> ExportResult:
        """
        Export a bar to a single archive.

        Args:
            bar_id: Bar to export
            output_path: Archive path; defaults to
                {backups_dir}/{YYYYMMDDHHmm}_recipes.zip
            export_format: Format of entity files (meta is always JSON)

        Returns:
            ExportResult with the final path, counts and media warnings

        Raises:
            BarNotFound: If the bar does not exist
            ContainerCreateError: If the archive cannot be created
            IncompleteEntityError: If an entity is missing a required relation
            EncodeError: If a record cannot be serialized
            ArchiveWriteError: If writing an entry fails
            ExportCancelled: If cancel_event was set during the run
        """
        encoder = get_encoder(export_format)
        if self.session.get(Bar, bar_id) is None:
            raise BarNotFound(bar_id)

        started_at = self.clock()
        target = Path(output_path) if output_path else self.config.get_backup_path(started_at)
        result = ExportResult(file_path=target, export_format=encoder.export_format)

        log_operation(
            logger,
            operation="export_bar",
            outcome="started",
            bar_id=bar_id,
            file_path=str(target),
            export_format=encoder.export_format.value,
        )

        try:
            self._transition(ExportState.OPENING)
            self._ensure_directory(target)

            with ArchiveWriter(target) as writer:
                self._transition(ExportState.WRITING_COCKTAILS)
                cocktails = load_cocktails(self.session, bar_id)
                for cocktail in cocktails:
                    self._write_entity(
                        writer, encoder, bar_id, cocktail,
                        MediaOwner.cocktail(cocktail.id), COCKTAILS_DIR, result,
                    )
                result.entity_counts[COCKTAILS_DIR] = len(cocktails)

                self._transition(ExportState.WRITING_INGREDIENTS)
                ingredients = load_ingredients(self.session, bar_id)
                for ingredient in ingredients:
                    self._write_entity(
                        writer, encoder, bar_id, ingredient,
                        MediaOwner.ingredient(ingredient.id), INGREDIENTS_DIR, result,
                    )
                result.entity_counts[INGREDIENTS_DIR] = len(ingredients)

                self._transition(ExportState.WRITING_BASE_DATA)
                for stem, (model, columns) in BASE_DATA_TABLES.items():
                    self._check_cancelled(bar_id)
                    rows = snapshot_base_rows(load_base_rows(self.session, bar_id, model), columns)
                    result.entity_counts[stem] = len(rows)
                    if not rows:
                        # Empty tables get no file
                        continue
                    writer.put_bytes(
                        f"{stem}.{encoder.extension}", encoder.encode(rows, record_id=stem)
                    )

                self._transition(ExportState.WRITING_MANIFEST)
                writer.put_bytes(MANIFEST_FILENAME, self._build_manifest(started_at))

                result.file_path = writer.finalize()

            self._transition(ExportState.FINALIZED)
        except Exception as e:
            self.state = ExportState.ABORTED
            log_operation(
                logger,
                operation="export_bar",
                outcome="aborted",
                level=logging.ERROR,
                bar_id=bar_id,
                file_path=str(target),
                error=str(e),
            )
            raise

        log_operation(
            logger,
            operation="export_bar",
            outcome="success",
            bar_id=bar_id,
            file_path=str(result.file_path),
            media_count=result.media_count,
            warning_count=len(result.warnings),
        )
        return result

    def _write_entity(self, writer, encoder, bar_id, entity, owner, folder, result) -> None:
        """Write one entity record, then its images."""
        self._check_cancelled(bar_id)

        record = snapshot(entity)
        resolution = resolve_media(owner, record["_id"], entity.images, self.storage)

        with ExitStack() as stack:
            # Open every source first so the record lists exactly the copied files
            opened, handles = [], []
            for media in resolution.entries:
                try:
                    handles.append(stack.enter_context(open(media.source_path, "rb")))
                    opened.append(media)
                except FileNotFoundError:
                    resolution.warnings.append(
                        MediaMissingWarning(record["_id"], media.source_path, media.sort)
                    )
                    log_operation(
                        logger,
                        operation="export_bar",
                        outcome="media_vanished",
                        level=logging.WARNING,
                        owner_id=record["_id"],
                        source_path=str(media.source_path),
                    )

            entries = renumber(opened, record["_id"])
            record["images"] = _attach_file_names(record["images"], entries)
            writer.put_bytes(
                f"{folder}/{record['_id']}.{encoder.extension}",
                encoder.encode(record, record_id=record["_id"]),
            )
            for media, source in zip(entries, handles):
                self._check_cancelled(bar_id)
                writer.put_file(source, media.entry_name)

        result.media_count += len(entries)
        result.warnings.extend(resolution.warnings)

    def _build_manifest(self, started_at: datetime) -> bytes:
        meta = {
            "version": APP_VERSION,
            "date": to_iso8601(started_at),
            "called_from": f"{type(self).__module__}.{type(self).__qualname__}",
        }
        return json.dumps(meta, indent=JSON_INDENT).encode("utf-8")

    def _ensure_directory(self, target: Path) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ContainerCreateError(target, e) from e

    def _check_cancelled(self, bar_id: int) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ExportCancelled(bar_id)

    def _transition(self, state: ExportState) -> None:
        logger.debug(f"Export state {self.state.value} -> {state.value}")
        self.state = state


def export_bar(
    bar_id: int,
    output_path: Optional[Union[str, Path]] = None,
    export_format: Union[ExportFormat, str] = ExportFormat.YAML,
    storage: Optional[MediaStorage] = None,
    cancel_event: Optional[threading.Event] = None,
    session: Optional[Session] = None,
) -> ExportResult:
    """
    Export a bar's cocktails, ingredients, base data and images to one archive.

    Args:
        bar_id: Bar to export
        output_path: Archive path (default: timestamped file in the backups dir)
        export_format: "yaml" / "structured-text" or "json"
        storage: Media storage for image files
        cancel_event: Optional event that cancels the run when set
        session: Optional SQLAlchemy session for transactional composition

    Returns:
        ExportResult with the final archive path and any media warnings
    """
    def _impl(session):
        exporter = RecipeExporter(session, storage=storage, cancel_event=cancel_event)
        return exporter.export(bar_id, output_path=output_path, export_format=export_format)

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


# ============================================================================
# Validation
# ============================================================================

_RECORD_RE = re.compile(
    rf"^({COCKTAILS_DIR}|{INGREDIENTS_DIR})/(?P<id>[^/]+)\.(yaml|json)$"
)
_IMAGE_RE = re.compile(
    rf"^(?P<folder>{COCKTAILS_DIR}|{INGREDIENTS_DIR})/{IMAGES_SUBDIR}/"
    r"(?P<id>[^/]+)-(?P<n>\d+)\.[^./]+$"
)


def validate_archive(archive_path: Union[str, Path]) -> Dict:
    """
    Validate a finished archive.

    Checks that _meta.json exists with version, date and called_from, that
    every image entry has an owning record entry, and that each owner's
    images are numbered 1..n without gaps.

    Args:
        archive_path: Path to the ZIP archive

    Returns:
        Dictionary with validation results:
        - valid: True if no errors were found
        - entry_count: Number of entries in the archive
        - errors: List of problems found
    """
    try:
        zf = zipfile.ZipFile(archive_path, "r")
    except (OSError, zipfile.BadZipFile) as e:
        return {"valid": False, "entry_count": 0, "errors": [f"Cannot open archive: {e}"]}

    errors = []
    with zf:
        names = zf.namelist()

        if MANIFEST_FILENAME not in names:
            errors.append(f"{MANIFEST_FILENAME} not found")
        else:
            try:
                meta = json.loads(zf.read(MANIFEST_FILENAME).decode("utf-8"))
            except ValueError as e:
                meta = {}
                errors.append(f"{MANIFEST_FILENAME} is not valid JSON: {e}")
            for key in ("version", "date", "called_from"):
                if key not in meta:
                    errors.append(f"{MANIFEST_FILENAME} missing '{key}'")

        records = defaultdict(set)
        for name in names:
            match = _RECORD_RE.match(name)
            if match:
                records[match.group(1)].add(match.group("id"))

        numbers = defaultdict(list)
        for name in names:
            match = _IMAGE_RE.match(name)
            if not match:
                continue
            folder, owner_id = match.group("folder"), match.group("id")
            if owner_id not in records[folder]:
                errors.append(f"Image {name} has no owning record in {folder}/")
            numbers[(folder, owner_id)].append(int(match.group("n")))

        for (folder, owner_id), found in numbers.items():
            if sorted(found) != list(range(1, len(found) + 1)):
                errors.append(f"Images for {folder}/{owner_id} are not numbered 1..{len(found)}")

    return {
        "valid": len(errors) == 0,
        "entry_count": len(names),
        "errors": errors,
    }
