import io
import itertools
from datetime import datetime

import pytest
from PIL import Image

from filestage.staging import FileStager
from filestage.storage.base import BaseStore
from filestage.uploads import TempUploadArea

FIXED_NOW = datetime(2026, 10, 19, 12, 30, 0).timestamp()
FIXED_DATE = "20261019"


class FakeStore(BaseStore):
    """Records every put_object call instead of talking to S3."""

    def __init__(self, error: Exception | None = None):
        self.calls = []
        self.error = error

    def put_object(self, bucket, object_key, body):
        if self.error is not None:
            raise self.error
        self.calls.append({"bucket": bucket, "key": object_key, "body": body.read()})
        return self.url(bucket, object_key)

    def url(self, bucket, object_key, expires=3600):
        return f"https://{bucket}.example.test/{object_key}"


def scripted_randint(*values):
    draws = itertools.cycle(values)
    return lambda low, high: next(draws)


def image_bytes(fmt: str, size=(8, 8), color="white", **save_params) -> bytes:
    img = Image.new("RGB", size, color=color)
    buf = io.BytesIO()
    img.save(buf, format=fmt, **save_params)
    return buf.getvalue()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def base_dir(tmp_path):
    return str(tmp_path / "upload-file")


@pytest.fixture
def temp_area(tmp_path):
    return TempUploadArea(str(tmp_path / "spool"))


@pytest.fixture
def stager(temp_area, base_dir, fixed_clock):
    return FileStager(
        temp_area,
        base_upload_dir=base_dir,
        clock=fixed_clock,
        randint=scripted_randint(1234, 5678),
    )


@pytest.fixture
def fake_store():
    return FakeStore()
