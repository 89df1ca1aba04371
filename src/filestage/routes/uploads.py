import logging
from typing import Annotated

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Depends, File, Form, HTTPException, UploadFile
from fastapi.routing import APIRouter

from filestage.configs.config import Config, get_config
from filestage.deps import get_stager, get_temp_area, get_transporter
from filestage.remote import RemoteTransporter
from filestage.staging import FileStager, UploadErrorKind, UploadResult
from filestage.uploads import TempUploadArea

logger = logging.getLogger("filestage.uploads")
router = APIRouter(
    prefix="/uploads",
    tags=["uploads"],
    responses={404: {"description": "Not found"}},
)

# Failures the client can fix by sending a different request
CLIENT_ERRORS = {
    UploadErrorKind.MISSING_SOURCE,
    UploadErrorKind.NOT_AN_UPLOAD,
    UploadErrorKind.UNRESOLVABLE_NAME,
    UploadErrorKind.DECODE,
}


def _raise_for_result(result: UploadResult) -> None:
    if result.ok:
        return
    if result.error in CLIENT_ERRORS:
        logger.warning(f"Upload rejected ({result.error}): {result.message}")
        raise HTTPException(status_code=400, detail={"error": result.error.value, "message": result.message})
    logger.error(f"Upload failed ({result.error}): {result.message}")
    raise HTTPException(status_code=500, detail={"error": result.error.value, "message": result.message})


def _transfer(transporter: RemoteTransporter, path: str) -> str:
    try:
        return transporter.upload_path(path)
    except (ClientError, BotoCoreError, OSError) as e:
        logger.error(f"Remote transfer of {path} failed: {e}")
        raise HTTPException(status_code=502, detail=f"Remote transfer failed: {str(e)}")


@router.post("/file")
def upload_file(
    upfile: Annotated[UploadFile, File(description="The file to stage")],
    transfer: Annotated[bool, Form(description="Also send the staged file to the object store")] = False,
    temp_area: TempUploadArea = Depends(get_temp_area),
    config: Config = Depends(get_config),
    stager: FileStager = Depends(get_stager),
    transporter: RemoteTransporter = Depends(get_transporter),
):
    """
    Stage a multipart upload, optionally forwarding it to the object store.
    """
    upload = temp_area.spool(upfile.file, upfile.filename or "")
    if upload.size_bytes == 0:
        temp_area.discard(upload)
        raise HTTPException(status_code=400, detail="No file was specified")

    max_bytes = config.max_file_size_mb * 1024 * 1024
    if upload.size_bytes > max_bytes:
        temp_area.discard(upload)
        raise HTTPException(
            status_code=413,
            detail=f"File size ({upload.size_bytes / 1024 / 1024:.1f} MB) exceeds "
                   f"maximum allowed size ({config.max_file_size_mb} MB)",
        )

    result = stager.persist_uploaded_file(upload)
    if not result.ok:
        temp_area.discard(upload)
    _raise_for_result(result)

    response = {
        "filename": upfile.filename,
        "size": upload.size_bytes,
        "path": result.path,
        "message": "File uploaded successfully",
    }
    if transfer:
        response["url"] = _transfer(transporter, result.path)
    return response


@router.post("/base64")
def upload_base64_image(
    upfile: Annotated[str, Form(description="Base64 encoded image, data-URI prefix allowed")],
    filename: Annotated[str, Form(description="Name to stage the image under")] = "uploadtest.png",
    transfer: Annotated[bool, Form(description="Also send the staged file to the object store")] = False,
    stager: FileStager = Depends(get_stager),
    transporter: RemoteTransporter = Depends(get_transporter),
):
    """
    Stage a base64 encoded image after correcting its orientation.
    """
    if not upfile:
        raise HTTPException(status_code=400, detail="No base64 encoded string was specified")

    result = stager.persist_base64_image(filename, upfile)
    _raise_for_result(result)

    response = {
        "filename": filename,
        "path": result.path,
        "message": "Image uploaded successfully",
    }
    if transfer:
        response["url"] = _transfer(transporter, result.path)
    return response
