from .local import LocalStore
from .s3 import S3Store
from .base import BaseStore
from functools import lru_cache
from filestage.configs.config import get_config


@lru_cache
def get_store() -> BaseStore:
    config = get_config()
    backend = config.storage_backend
    if backend == "s3":
        return S3Store(
            region=config.aws_region or None,
            endpoint_url=config.s3_endpoint or None,  # leave empty for AWS
            credential_path=config.credential_path,
            public=config.s3_public,
        )
    elif backend == "local":
        return LocalStore(
            base_path=config.local_path,
            base_url=config.local_base_url,
        )
    else:
        raise ValueError(f"Unknown storage backend: {backend}")
