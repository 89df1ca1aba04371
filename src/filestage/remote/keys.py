import hashlib
import random
import time

from filestage.staging.paths import Clock, RandInt, date_stamp, unique_suffix


def derive_remote_key(
    system_name: str,
    file_name: str,
    clock: Clock = time.time,
    randint: RandInt = random.randint,
) -> str:
    """
    Object key for *file_name*: ``<system>/<YYYYMMDD>/<sha256>.<ext>``.

    The digest covers the system name, the current time, a random number
    and the file name, so uploading the same file twice gives two keys.
    """
    digest = hashlib.sha256(
        f"{system_name}{unique_suffix(clock, randint)}{file_name}".encode("utf-8")
    ).hexdigest()
    # Everything after the last dot, so ".env" keeps "env"
    ext = file_name.rpartition(".")[2] if "." in file_name else ""
    suffix = f".{ext}" if ext else ""
    return f"{system_name}/{date_stamp(clock)}/{digest}{suffix}"
