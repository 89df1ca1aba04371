from dataclasses import dataclass
from enum import StrEnum
from typing import Optional


class UploadErrorKind(StrEnum):
    DIRECTORY = "directory"  # Staging directory could not be created
    MISSING_SOURCE = "missing_source"  # No upload supplied
    NOT_AN_UPLOAD = "not_an_upload"  # Temp path is not one we received
    COPY = "copy"  # Moving the temp file into place failed
    WRITE = "write"  # Writing bytes to the destination failed
    UNRESOLVABLE_NAME = "unresolvable_name"  # No usable file name
    DECODE = "decode"  # Base64 payload could not be decoded


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a staging operation: a path or an error, never both."""

    path: Optional[str] = None
    error: Optional[UploadErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, path: str) -> "UploadResult":
        return cls(path=path)

    @classmethod
    def failure(cls, error: UploadErrorKind, message: str) -> "UploadResult":
        return cls(error=error, message=message)
