import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_MODE = 0o777


def ensure_directory(path: str, mode: int = DEFAULT_MODE) -> bool:
    """
    Make sure *path* exists, creating it (and its parents) if needed.

    An existing entry is accepted as is, even if it is not a directory.
    Newly created directories get *mode* re-applied with chmod since
    makedirs is subject to the process umask.
    """
    if os.path.exists(path):
        return True

    try:
        os.makedirs(path, mode=mode)
    except FileExistsError:
        # Someone else created the entry between our check and makedirs,
        # their permissions stand
        return True
    except OSError as e:
        logger.error(f"Failed to create directory {path}: {e}")
        return False

    try:
        os.chmod(path, mode)
    except OSError as e:
        logger.error(f"Failed to set permissions {oct(mode)} on {path}: {e}")
        return False

    logger.debug(f"Created directory {path} with mode {oct(mode)}")
    return True
