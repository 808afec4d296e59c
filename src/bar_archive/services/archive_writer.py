"""
Archive Container Writer - one ZIP container per export run.

The writer streams into a temporary sibling file and only moves it onto the
target path in finalize(). Any failure, or leaving the `with` block through
an exception, deletes the temporary file, so the target path never holds a
half-written archive.

Usage:
    with ArchiveWriter(path) as writer:
        writer.put_bytes("cocktails/negroni.yaml", data)
        writer.put_file(image_path, "cocktails/images/negroni-1.jpg")
        writer.finalize()
"""

import os
import shutil
import tempfile
import threading
import zipfile
from pathlib import Path
from typing import BinaryIO, List, Optional, Set, Union

from bar_archive.services.exceptions import ArchiveWriteError, ContainerCreateError
from bar_archive.services.logging_utils import get_service_logger
from bar_archive.utils.constants import ZIP_ENTRY_DATE_TIME

logger = get_service_logger(__name__)

CHUNK_SIZE = 1024 * 1024

# Target paths with an open writer in this process
_active_paths: Set[Path] = set()
_active_lock = threading.Lock()


class ArchiveWriter:
    """
    Writer for a single output container.

    All put_* calls are serialized with a lock, so worker threads may share
    one writer.

    Args:
        path: Final archive path
        compression: zipfile compression method (default ZIP_DEFLATED)
    """

    def __init__(self, path: Union[str, Path], compression: int = zipfile.ZIP_DEFLATED):
        self.path = Path(path)
        self.compression = compression
        self._zip: Optional[zipfile.ZipFile] = None
        self._tmp_path: Optional[Path] = None
        self._key: Optional[Path] = None
        self._lock = threading.Lock()
        self._entries: List[str] = []
        self.finalized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> "ArchiveWriter":
        """
        Open the container for writing.

        Raises:
            ContainerCreateError: If the path is already being written, is a
                directory, or its directory is missing or not writable
        """
        key = self.path.absolute()
        with _active_lock:
            if key in _active_paths:
                raise ContainerCreateError(
                    self.path, RuntimeError("another export is writing to this path")
                )
            _active_paths.add(key)
        self._key = key

        try:
            if self.path.is_dir():
                raise IsADirectoryError(f"{self.path} is a directory")
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".part", dir=self.path.parent
            )
            os.close(fd)
            self._tmp_path = Path(tmp_name)
            self._zip = zipfile.ZipFile(self._tmp_path, "w", self.compression)
        except OSError as e:
            self._cleanup_tmp()
            self._release()
            raise ContainerCreateError(self.path, e) from e

        logger.debug(f"Opened archive {self.path} (staging at {self._tmp_path})")
        return self

    def finalize(self) -> Path:
        """
        Close the container and move it onto the target path.

        Returns:
            The final archive path

        Raises:
            ArchiveWriteError: If the archive cannot be closed or moved
        """
        self._ensure_open()
        with self._lock:
            try:
                self._zip.close()
                # mkstemp creates 0600 files
                os.chmod(self._tmp_path, 0o644)
                os.replace(self._tmp_path, self.path)
            except OSError as e:
                self._zip = None
                self._cleanup_tmp()
                self._release()
                raise ArchiveWriteError(str(self.path), e) from e

            self._zip = None
            self._tmp_path = None
            self.finalized = True
            self._release()

        logger.debug(f"Finalized archive {self.path} with {len(self._entries)} entries")
        return self.path

    def discard(self) -> None:
        """Abandon the container and delete the partial file."""
        if self._zip is not None:
            try:
                self._zip.close()
            except (OSError, ValueError) as e:
                logger.warning(f"Error closing discarded archive {self._tmp_path}: {e}")
            self._zip = None
        self._cleanup_tmp()
        self._release()
        logger.debug(f"Discarded archive {self.path}")

    def __enter__(self) -> "ArchiveWriter":
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is not None:
            self.discard()
        elif not self.finalized:
            self.finalize()

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    @property
    def entries(self) -> List[str]:
        """Entry names written so far, in write order."""
        return list(self._entries)

    def put_bytes(self, entry_name: str, data: bytes) -> None:
        """
        Store a byte payload under entry_name.

        Raises:
            ArchiveWriteError: On duplicate names or write failure
        """
        self._ensure_open()
        info = self._entry_info(entry_name)

        with self._lock:
            self._check_new_entry(entry_name)
            try:
                self._zip.writestr(info, data)
            except (OSError, ValueError) as e:
                raise ArchiveWriteError(entry_name, e) from e
            self._entries.append(entry_name)

    def put_file(self, source: Union[str, Path, BinaryIO], entry_name: str) -> None:
        """
        Copy a file into the archive, streaming it in chunks.

        Args:
            source: Path of the file, or a binary file object already open
                for reading (read from its current position, left open)
            entry_name: Name of the archive entry

        Raises:
            ArchiveWriteError: On duplicate names, unreadable source or write failure
        """
        if isinstance(source, (str, Path)):
            try:
                with open(source, "rb") as fileobj:
                    self.put_file(fileobj, entry_name)
            except OSError as e:
                raise ArchiveWriteError(entry_name, e) from e
            return

        self._ensure_open()
        with self._lock:
            self._check_new_entry(entry_name)
            try:
                with self._zip.open(self._entry_info(entry_name), "w") as target:
                    shutil.copyfileobj(source, target, CHUNK_SIZE)
            except (OSError, ValueError) as e:
                raise ArchiveWriteError(entry_name, e) from e
            self._entries.append(entry_name)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _entry_info(self, entry_name: str) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo(entry_name, date_time=ZIP_ENTRY_DATE_TIME)
        info.compress_type = self.compression
        info.external_attr = 0o644 << 16
        return info

    def _ensure_open(self) -> None:
        if self._zip is None:
            raise ArchiveWriteError(str(self.path), RuntimeError("archive is not open"))

    def _check_new_entry(self, entry_name: str) -> None:
        if entry_name in self._entries:
            raise ArchiveWriteError(entry_name, ValueError("duplicate entry name"))

    def _cleanup_tmp(self) -> None:
        if self._tmp_path is not None:
            self._tmp_path.unlink(missing_ok=True)
            self._tmp_path = None

    def _release(self) -> None:
        if self._key is not None:
            with _active_lock:
                _active_paths.discard(self._key)
            self._key = None
