# filestage/storage/local.py
import shutil
from pathlib import Path
from typing import BinaryIO
from urllib.parse import urljoin

from .base import BaseStore

class LocalStore(BaseStore):
    """
    Stores objects under <base_path>/<bucket>/<object_key>
    where *object_key* can include slashes (e.g. defaults/20250701/<hash>.png).

    Stands in for S3 on development machines.
    """

    def __init__(self, base_path: str = "/tmp/object-store", base_url: str = "/objects/"):
        self.root = Path(base_path).expanduser().resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/") + "/"

    # ---------- helpers ---------- #
    def _full(self, bucket: str, key: str) -> Path:
        path = self.root.joinpath(bucket, key).resolve()
        if not path.is_relative_to(self.root):
            raise ValueError(f"Object key escapes the store root: {bucket}/{key}")
        return path

    # ---------- API ---------- #
    def put_object(self, bucket: str, object_key: str, body: BinaryIO) -> str:
        dst = self._full(bucket, object_key)
        dst.parent.mkdir(parents=True, exist_ok=True)
        with open(dst, "wb") as out:
            shutil.copyfileobj(body, out)
        return self.url(bucket, object_key)

    def url(self, bucket: str, object_key: str, expires: int = 3600) -> str:
        # No signing, just the static URL.
        return urljoin(self.base_url, f"{bucket}/{object_key}")
