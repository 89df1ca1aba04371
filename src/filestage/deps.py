from functools import lru_cache
from filestage.configs.config import get_config
from filestage.remote import RemoteTransporter
from filestage.staging import FileStager
from filestage.storage import get_store
from filestage.uploads import TempUploadArea

@lru_cache(maxsize=1)
def get_temp_area() -> TempUploadArea:
    return TempUploadArea(get_config().upload_tmp_dir or None)

@lru_cache(maxsize=1)
def get_stager() -> FileStager:
    config = get_config()
    return FileStager(
        get_temp_area(),
        system_name=config.system_name,
        base_upload_dir=config.upload_options().base_upload_dir,
        directory_mode=config.directory_mode,
    )

@lru_cache(maxsize=1)
def get_transporter() -> RemoteTransporter:
    config = get_config()
    return RemoteTransporter(
        get_store(),
        system_name=config.system_name,
        bucket_name=config.upload_options().bucket_name,
    )
