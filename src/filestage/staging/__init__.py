from .directories import ensure_directory
from .paths import (
    UnresolvableNameError,
    UploadTarget,
    resolve_file_name,
    resolve_staging_directory,
)
from .persister import FileStager
from .results import UploadErrorKind, UploadResult

__all__ = [
    "ensure_directory",
    "UnresolvableNameError",
    "UploadTarget",
    "resolve_file_name",
    "resolve_staging_directory",
    "FileStager",
    "UploadErrorKind",
    "UploadResult",
]
