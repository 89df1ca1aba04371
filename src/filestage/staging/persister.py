import logging
import os
import random
import shutil
import time
from typing import Optional

from filestage.imaging import (
    ImagePayloadError,
    decode_image_payload,
    infer_extension_from_image_bytes,
    normalize_orientation,
)
from filestage.staging.directories import DEFAULT_MODE, ensure_directory
from filestage.staging.paths import (
    Clock,
    RandInt,
    UnresolvableNameError,
    UploadTarget,
    resolve_file_name,
    resolve_target,
)
from filestage.staging.results import UploadErrorKind, UploadResult
from filestage.uploads.temp_area import UploadedFile, UploadSource

logger = logging.getLogger(__name__)

DIRECTORY_MESSAGE = (
    "Failed to create the upload directory. Check the path and its permissions."
)
MISSING_SOURCE_MESSAGE = (
    "No uploaded file was passed in. Check the argument."
)
NOT_AN_UPLOAD_MESSAGE = (
    "The file was not uploaded to the temp area. Check that the request actually carried a file."
)
COPY_MESSAGE = (
    "Failed to move the file from the temp area to the upload directory. "
    "Check that the directory exists and is writable."
)
WRITE_MESSAGE = (
    "Failed to write the decoded image. Check that the directory exists and is writable."
)


class FileStager:
    """
    Persists received files into the dated staging directory of one system.

    Every public method returns an :class:`UploadResult`; failures are
    reported through it and never raised.
    """

    def __init__(
        self,
        upload_source: UploadSource,
        system_name: str = "defaults",
        base_upload_dir: str = "/tmp/upload-file",
        directory_mode: int = DEFAULT_MODE,
        clock: Clock = time.time,
        randint: RandInt = random.randint,
    ):
        self.upload_source = upload_source
        self.system_name = system_name
        self.base_upload_dir = base_upload_dir
        self.directory_mode = directory_mode
        self._clock = clock
        self._randint = randint
        ensure_directory(self.base_upload_dir, self.directory_mode)

    # ---------- helpers ---------- #
    def target(self) -> UploadTarget:
        return resolve_target(self.base_upload_dir, self.system_name, self._clock)

    def staging_directory(self) -> str:
        return self.target().staging_directory

    def _file_name(self, original_name: Optional[str], overwrite: bool, extension: Optional[str] = None) -> str:
        return resolve_file_name(
            original_name,
            overwrite=overwrite,
            extension=extension,
            clock=self._clock,
            randint=self._randint,
        )

    def _prepare_directory(self) -> Optional[str]:
        upload_dir = self.staging_directory()
        if not ensure_directory(upload_dir, self.directory_mode):
            return None
        return upload_dir

    # ---------- API ---------- #
    def persist_uploaded_file(self, upload: Optional[UploadedFile], overwrite: bool = False) -> UploadResult:
        """Move a spooled multipart upload into the staging directory."""
        upload_dir = self._prepare_directory()
        if upload_dir is None:
            return UploadResult.failure(UploadErrorKind.DIRECTORY, DIRECTORY_MESSAGE)

        if upload is None or not upload.temporary_path:
            return UploadResult.failure(UploadErrorKind.MISSING_SOURCE, MISSING_SOURCE_MESSAGE)

        if not self.upload_source.is_uploaded_file(upload.temporary_path):
            logger.warning(f"Refusing to stage {upload.temporary_path}: not a received upload")
            return UploadResult.failure(UploadErrorKind.NOT_AN_UPLOAD, NOT_AN_UPLOAD_MESSAGE)

        try:
            file_name = self._file_name(upload.original_name, overwrite)
        except UnresolvableNameError as e:
            return UploadResult.failure(UploadErrorKind.UNRESOLVABLE_NAME, str(e))

        upload_path = os.path.abspath(os.path.join(upload_dir, file_name))
        try:
            shutil.move(upload.temporary_path, upload_path)
        except OSError as e:
            logger.error(f"Failed to move {upload.temporary_path} to {upload_path}: {e}")
            return UploadResult.failure(UploadErrorKind.COPY, COPY_MESSAGE)

        self.upload_source.release(upload.temporary_path)
        logger.info(f"Staged upload {upload.original_name} at {upload_path}")
        return UploadResult.success(upload_path)

    def persist_bytes(self, data: bytes, destination: str) -> UploadResult:
        """Write *data* to *destination*, replacing anything already there."""
        if not ensure_directory(os.path.dirname(destination) or ".", self.directory_mode):
            return UploadResult.failure(UploadErrorKind.DIRECTORY, DIRECTORY_MESSAGE)

        destination = os.path.abspath(destination)
        try:
            with open(destination, "wb") as out:
                written = out.write(data)
        except OSError as e:
            logger.error(f"Failed to write {destination}: {e}")
            return UploadResult.failure(UploadErrorKind.WRITE, WRITE_MESSAGE)

        if written != len(data):
            logger.error(f"Short write to {destination}: {written} of {len(data)} bytes")
            return UploadResult.failure(UploadErrorKind.WRITE, WRITE_MESSAGE)

        return UploadResult.success(destination)

    def persist_base64_image(self, file_name: Optional[str], payload: str, overwrite: bool = False) -> UploadResult:
        """
        Decode a base64 image, fix its orientation and stage it.

        When *file_name* has no extension, one is inferred from the decoded
        image (jpg, png, gif or bmp).
        """
        upload_dir = self._prepare_directory()
        if upload_dir is None:
            return UploadResult.failure(UploadErrorKind.DIRECTORY, DIRECTORY_MESSAGE)

        try:
            data = decode_image_payload(payload)
        except ImagePayloadError as e:
            logger.warning(f"Rejected base64 payload for {file_name}: {e}")
            return UploadResult.failure(UploadErrorKind.DECODE, str(e))

        extension = None
        if not os.path.splitext(file_name or "")[1]:
            extension = infer_extension_from_image_bytes(data)
        data = normalize_orientation(data)

        try:
            staged_name = self._file_name(file_name, overwrite, extension=extension)
        except UnresolvableNameError as e:
            return UploadResult.failure(UploadErrorKind.UNRESOLVABLE_NAME, str(e))

        result = self.persist_bytes(data, os.path.join(upload_dir, staged_name))
        if result.ok:
            logger.info(f"Staged base64 image {file_name} at {result.path}")
        return result
