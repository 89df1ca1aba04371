import logging
import os
import random
import time

from filestage.remote.keys import derive_remote_key
from filestage.staging.paths import Clock, RandInt
from filestage.storage.base import BaseStore

logger = logging.getLogger(__name__)


class RemoteTransporter:
    """
    Sends staged files to the object store under a hashed, dated key.

    Errors from opening the file or from the store are not caught here;
    retrying is up to the caller or the store client.
    """

    def __init__(
        self,
        store: BaseStore,
        system_name: str = "defaults",
        bucket_name: str = "upload-file",
        clock: Clock = time.time,
        randint: RandInt = random.randint,
    ):
        self.store = store
        self.system_name = system_name
        self.bucket_name = bucket_name
        self._clock = clock
        self._randint = randint

    def set_bucket_name(self, bucket_name: str) -> None:
        self.bucket_name = bucket_name

    def upload(self, local_dir: str, local_file_name: str) -> str:
        """Upload ``local_dir/local_file_name`` and return the object URL."""
        key = derive_remote_key(self.system_name, local_file_name, self._clock, self._randint)
        path = os.path.join(local_dir, local_file_name)

        with open(path, "rb") as body:
            url = self.store.put_object(self.bucket_name, key, body)

        logger.info(f"Uploaded {path} to {self.bucket_name}/{key}")
        return url

    def upload_path(self, path: str) -> str:
        local_dir, local_file_name = os.path.split(path)
        return self.upload(local_dir, local_file_name)
