"""Spooling area for incoming multipart bodies."""

import logging
import os
import shutil
import tempfile
import threading
from dataclasses import dataclass
from typing import BinaryIO, Optional, Protocol, Set

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    temporary_path: str
    original_name: str
    size_bytes: int


class UploadSource(Protocol):
    def is_uploaded_file(self, path: str) -> bool:
        """True only if *path* is a temp file this source received."""
        ...

    def release(self, path: str) -> None:
        """Forget *path* once it has been moved away."""
        ...


class TempUploadArea:
    """
    Receives upload bodies into a private temp directory.

    Only paths written by :meth:`spool` are recognised as uploads, so a
    forged temp path (``/etc/passwd``, another user's file) is refused by
    :meth:`is_uploaded_file`.
    """

    def __init__(self, tmp_dir: Optional[str] = None):
        if tmp_dir:
            os.makedirs(tmp_dir, exist_ok=True)
        else:
            tmp_dir = tempfile.mkdtemp(prefix="filestage_")
        self.tmp_dir = os.path.realpath(tmp_dir)
        self._paths: Set[str] = set()
        self._lock = threading.Lock()

    def spool(self, file: BinaryIO, original_name: str) -> UploadedFile:
        fd, path = tempfile.mkstemp(prefix="upl_", dir=self.tmp_dir)
        try:
            with os.fdopen(fd, "wb") as out:
                shutil.copyfileobj(file, out)
        except OSError:
            os.unlink(path)
            raise

        path = os.path.realpath(path)
        with self._lock:
            self._paths.add(path)
        size = os.path.getsize(path)
        logger.debug(f"Spooled upload {original_name} ({size} bytes) to {path}")
        return UploadedFile(temporary_path=path, original_name=original_name, size_bytes=size)

    def is_uploaded_file(self, path: str) -> bool:
        if not path:
            return False
        real = os.path.realpath(path)
        with self._lock:
            known = real in self._paths
        return known and os.path.isfile(real)

    def release(self, path: str) -> None:
        with self._lock:
            self._paths.discard(os.path.realpath(path))

    def discard(self, upload: UploadedFile) -> None:
        """Delete a spooled file that was never staged."""
        self.release(upload.temporary_path)
        try:
            os.unlink(upload.temporary_path)
        except FileNotFoundError:
            pass
