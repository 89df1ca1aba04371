import functools
import sys
from enum import StrEnum
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic_settings import BaseSettings

load_dotenv(
    override=True,  # Override existing environment variables
)


class LogLevel(StrEnum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    TRACE = "trace"


class UploadOptions(BaseModel):
    """The options a stager/transporter pair is built from."""

    model_config = ConfigDict(frozen=True)

    base_upload_dir: str = "/tmp/upload-file"
    credential_path: Optional[str] = None
    bucket_name: str = "upload-file"


class Config(BaseSettings):
    # Staging configuration
    system_name: str = "defaults"  # Logical system, first level under base_upload_dir
    base_upload_dir: str = "/tmp/upload-file"  # Root of the dated staging directories
    upload_tmp_dir: str = ""  # Where incoming multipart bodies are spooled; empty = system temp
    directory_mode: int = 0o777  # Applied to every staging directory we create

    # Remote object store configuration
    storage_backend: str = "s3"  # Options: "s3", "local"
    bucket_name: str = "upload-file"
    credential_path: Optional[str] = None  # Shared credentials file handed to botocore
    aws_region: str = ""  # Empty = AWS_DEFAULT_REGION or ap-northeast-1
    s3_endpoint: str = ""  # Leave empty for AWS; set for MinIO and friends
    s3_public: bool = True  # False = hand out pre-signed URLs instead
    local_path: str = "/tmp/object-store"  # Bucket root for the "local" backend
    local_base_url: str = "/objects/"

    # Security configuration
    max_file_size_mb: int = 100  # Maximum upload size in MB

    # FastAPI configuration
    fastapi_host: str = "localhost"
    fastapi_port: int = 8000
    filestage_log_level: LogLevel = LogLevel.INFO

    @field_validator("filestage_log_level", mode="before")
    @classmethod
    def validate_filestage_log_level(cls, v) -> LogLevel:
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            v_lower = v.lower()
            for level in LogLevel:
                if level.value.lower() == v_lower:
                    return level
            valid_levels = [level.value for level in LogLevel]
            raise ValueError(
                f"filestage_log_level must be one of {valid_levels}, got '{v}'"
            )
        raise ValueError(
            f"filestage_log_level must be a string or LogLevel enum, got {type(v)}"
        )

    @field_validator("storage_backend", mode="after")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("s3", "local"):
            raise ValueError(f"storage_backend must be 's3' or 'local', got '{v}'")
        return v

    @field_validator("directory_mode", mode="before")
    @classmethod
    def validate_directory_mode(cls, v) -> int:
        # Accepts "0o777" and "511" alike
        if isinstance(v, str):
            return int(v, 0)
        return v

    @field_validator("system_name", mode="after")
    @classmethod
    def validate_system_name(cls, v: str) -> str:
        if not v or "/" in v or v in (".", ".."):
            raise ValueError(f"system_name must be a single path segment, got '{v}'")
        return v

    def upload_options(self) -> UploadOptions:
        return UploadOptions(
            base_upload_dir=self.base_upload_dir,
            credential_path=self.credential_path,
            bucket_name=self.bucket_name,
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@functools.lru_cache(maxsize=1)
def get_config() -> Config:
    try:
        return Config()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error while loading configuration: {e}", file=sys.stderr)
        sys.exit(1)
