"""
Staging path resolution.

Files for one logical system on one day are staged under
``<base_dir>/<system_name>/<YYYYMMDD>/`` and, unless overwriting was asked
for, get ``_<unix seconds><4 random digits>`` appended to their base name:

    /tmp/upload-file/defaults/20170717/staff_15003012511168.csv

Clock and random source are plain callables so tests can pin them.
"""

import os
import random
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

Clock = Callable[[], float]
RandInt = Callable[[int, int], int]

RANDOM_LOW = 1000
RANDOM_HIGH = 9999


class UnresolvableNameError(ValueError):
    """Raised when no usable file name can be derived from the original."""
    pass


def date_stamp(clock: Clock = time.time) -> str:
    """Local calendar date of *clock* as YYYYMMDD."""
    return datetime.fromtimestamp(clock()).strftime("%Y%m%d")


def unique_suffix(clock: Clock = time.time, randint: RandInt = random.randint) -> str:
    return f"{int(clock())}{randint(RANDOM_LOW, RANDOM_HIGH)}"


@dataclass(frozen=True)
class UploadTarget:
    system_name: str
    base_directory: str
    date_stamp: str

    @property
    def staging_directory(self) -> str:
        return os.path.join(self.base_directory, self.system_name, self.date_stamp)


def resolve_target(base_dir: str, system_name: str, clock: Clock = time.time) -> UploadTarget:
    return UploadTarget(
        system_name=system_name,
        base_directory=base_dir,
        date_stamp=date_stamp(clock),
    )


def resolve_staging_directory(base_dir: str, system_name: str, clock: Clock = time.time) -> str:
    return resolve_target(base_dir, system_name, clock).staging_directory


def split_file_name(original_name: Optional[str]) -> tuple[str, str]:
    """
    Split a client supplied name into ``(base, extension)``.

    Directory components are dropped, both ``/`` and ``\\`` count as
    separators. The extension is returned without its dot.

    Raises:
        UnresolvableNameError: If nothing usable is left of the name.
    """
    if not original_name:
        raise UnresolvableNameError("No file name was supplied")

    name = os.path.basename(original_name.replace("\\", "/"))
    if name in ("", ".", ".."):
        raise UnresolvableNameError(f"Cannot derive a file name from '{original_name}'")

    base, ext = os.path.splitext(name)
    return base, ext.lstrip(".")


def resolve_file_name(
    original_name: Optional[str],
    overwrite: bool = False,
    extension: Optional[str] = None,
    clock: Clock = time.time,
    randint: RandInt = random.randint,
) -> str:
    """
    Build the staged file name for *original_name*.

    *extension* is only used when the original name has none (the image
    payload path infers it from content).
    """
    base, ext = split_file_name(original_name)
    if not ext and extension:
        ext = extension

    if not overwrite:
        base = f"{base}_{unique_suffix(clock, randint)}"
    return f"{base}.{ext}" if ext else base
