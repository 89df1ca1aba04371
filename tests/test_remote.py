import hashlib
import re
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from filestage.remote import RemoteTransporter, derive_remote_key
from filestage.storage import LocalStore, S3Store
from tests.conftest import FIXED_DATE, FIXED_NOW, FakeStore, scripted_randint

KEY_PATTERN = re.compile(r"defaults/\d{8}/[0-9a-f]{64}\.txt")


def test_same_file_gets_a_new_key_each_time():
    randint = scripted_randint(1111, 2222)
    first = derive_remote_key("defaults", "a.txt", randint=randint)
    second = derive_remote_key("defaults", "a.txt", randint=randint)

    assert first != second
    assert KEY_PATTERN.fullmatch(first)
    assert KEY_PATTERN.fullmatch(second)


def test_key_digest_covers_system_time_random_and_name(fixed_clock):
    key = derive_remote_key("crm", "photo.png", clock=fixed_clock, randint=scripted_randint(4321))

    digest = hashlib.sha256(f"crm{int(FIXED_NOW)}4321photo.png".encode()).hexdigest()
    assert key == f"crm/{FIXED_DATE}/{digest}.png"


def test_key_without_extension(fixed_clock):
    key = derive_remote_key("defaults", "README", clock=fixed_clock)
    assert re.fullmatch(rf"defaults/{FIXED_DATE}/[0-9a-f]{{64}}", key)


def test_upload_streams_staged_file(tmp_path, fake_store, fixed_clock):
    (tmp_path / "report.csv").write_bytes(b"a,b\n1,2\n")
    transporter = RemoteTransporter(fake_store, clock=fixed_clock)

    url = transporter.upload(str(tmp_path), "report.csv")

    call = fake_store.calls[0]
    assert call["bucket"] == "upload-file"
    assert re.fullmatch(rf"defaults/{FIXED_DATE}/[0-9a-f]{{64}}\.csv", call["key"])
    assert call["body"] == b"a,b\n1,2\n"
    assert url == f"https://upload-file.example.test/{call['key']}"


def test_bucket_can_be_changed_before_upload(tmp_path, fake_store):
    (tmp_path / "a.txt").write_bytes(b"x")
    transporter = RemoteTransporter(fake_store, system_name="crm")
    transporter.set_bucket_name("crm-archive")

    transporter.upload_path(str(tmp_path / "a.txt"))

    assert fake_store.calls[0]["bucket"] == "crm-archive"
    assert fake_store.calls[0]["key"].startswith("crm/")


def test_missing_local_file_propagates(tmp_path, fake_store):
    transporter = RemoteTransporter(fake_store)
    with pytest.raises(FileNotFoundError):
        transporter.upload(str(tmp_path), "missing.txt")
    assert fake_store.calls == []


def test_store_failure_propagates(tmp_path):
    (tmp_path / "a.txt").write_bytes(b"x")
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
    transporter = RemoteTransporter(FakeStore(error=error))

    with pytest.raises(ClientError) as exc_info:
        transporter.upload(str(tmp_path), "a.txt")
    assert exc_info.value is error


def test_s3_store_public_url():
    client = MagicMock()
    store = S3Store(region="ap-northeast-1", client=client)
    body = MagicMock()

    url = store.put_object("upload-file", "defaults/20261019/abc.png", body)

    client.upload_fileobj.assert_called_once_with(body, "upload-file", "defaults/20261019/abc.png")
    assert url == "https://upload-file.s3.ap-northeast-1.amazonaws.com/defaults/20261019/abc.png"


def test_s3_store_custom_endpoint_uses_path_style():
    store = S3Store(endpoint_url="http://minio:9000/", client=MagicMock())
    assert store.url("bucket", "a/b.txt") == "http://minio:9000/bucket/a/b.txt"


def test_s3_store_presigned_url():
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://signed"
    store = S3Store(public=False, client=client)

    assert store.url("bucket", "a.txt", expires=60) == "https://signed"
    client.generate_presigned_url.assert_called_once_with(
        "get_object", Params={"Bucket": "bucket", "Key": "a.txt"}, ExpiresIn=60
    )


def test_s3_store_region_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    assert S3Store(client=MagicMock()).region == "eu-west-1"
    monkeypatch.delenv("AWS_DEFAULT_REGION")
    assert S3Store(client=MagicMock()).region == "ap-northeast-1"


def test_s3_store_builds_client_with_credentials_file(tmp_path, monkeypatch):
    credentials = tmp_path / "credentials"
    credentials.write_text("[default]\naws_access_key_id = AKIATEST\naws_secret_access_key = secret\n")
    monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
    monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)

    store = S3Store(region="ap-northeast-1", credential_path=str(credentials))

    assert store.s3.meta.region_name == "ap-northeast-1"


def test_local_store_writes_under_bucket(tmp_path):
    store = LocalStore(base_path=str(tmp_path), base_url="/objects")

    with open(__file__, "rb") as body:
        url = store.put_object("upload-file", "defaults/20261019/abc.py", body)

    assert (tmp_path / "upload-file" / "defaults" / "20261019" / "abc.py").exists()
    assert url == "/objects/upload-file/defaults/20261019/abc.py"


def test_local_store_rejects_escaping_keys(tmp_path):
    store = LocalStore(base_path=str(tmp_path / "root"))
    with pytest.raises(ValueError):
        store.put_object("bucket", "../../outside.txt", MagicMock())


@pytest.mark.parametrize("file_name, suffix", [
    (".env", ".env"),
    ("archive.tar.gz", ".gz"),
    ("trailing.", ""),
])
def test_key_extension_is_text_after_last_dot(fixed_clock, file_name, suffix):
    key = derive_remote_key("defaults", file_name, clock=fixed_clock)
    assert re.fullmatch(rf"defaults/{FIXED_DATE}/[0-9a-f]{{64}}{re.escape(suffix)}", key)
