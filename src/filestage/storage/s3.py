import os
from typing import BinaryIO, Optional
from urllib.parse import quote

import boto3
import botocore.session

from .base import BaseStore

DEFAULT_REGION = "ap-northeast-1"


class S3Store(BaseStore):
    """
    Wraps any S3-compatible service.
    Credentials come from the usual boto3 chain; *credential_path* points
    botocore at a specific shared credentials file instead of ~/.aws/credentials.
    """

    def __init__(
        self,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        credential_path: Optional[str] = None,
        public: bool = True,
        client=None,
    ):
        self.region = region or os.getenv("AWS_DEFAULT_REGION") or DEFAULT_REGION
        self.endpoint_url = endpoint_url or None
        self.public = public  # if True: return raw https URL instead of presigned
        self.s3 = client or self._make_client(credential_path)

    def _make_client(self, credential_path: Optional[str]):
        core = botocore.session.get_session()
        if credential_path:
            core.set_config_variable("credentials_file", credential_path)
        session = boto3.session.Session(botocore_session=core, region_name=self.region)
        return session.client("s3", endpoint_url=self.endpoint_url)

    # ---------- API ---------- #
    def put_object(self, bucket: str, object_key: str, body: BinaryIO) -> str:
        self.s3.upload_fileobj(body, bucket, object_key)
        return self.url(bucket, object_key)

    def url(self, bucket: str, object_key: str, expires: int = 3600) -> str:
        if self.public:
            # Works if bucket policy allows public read
            key = quote(object_key)
            if self.endpoint_url:
                return f"{self.endpoint_url.rstrip('/')}/{bucket}/{key}"
            return f"https://{bucket}.s3.{self.region}.amazonaws.com/{key}"
        # Pre-signed, time-limited URL
        return self.s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": bucket, "Key": object_key},
            ExpiresIn=expires,
        )
