import logging
import os

from fastapi import Depends, HTTPException
from fastapi.routing import APIRouter

from filestage.deps import get_stager
from filestage.staging import FileStager

logger = logging.getLogger("filestage.health")
router = APIRouter(
    prefix="/health",
    tags=["health"],
    responses={404: {"description": "Not found"}},
)


@router.get("/")
async def root():
    """
    Root endpoint for the health check.

    Returns:
        dict: A simple message indicating the health check endpoint.
    """
    return {"message": "Health check endpoint. Use /health/live for detailed status."}

@router.get("/live")
def health_check(stager: FileStager = Depends(get_stager)):
    """
    Report whether the staging base directory is usable.

    Returns:
        dict: The health status and the directory that was checked.
    """
    base_dir = stager.base_upload_dir
    writable = os.path.isdir(base_dir) and os.access(base_dir, os.W_OK)
    if not writable:
        logger.error(f"Health check failed: staging directory {base_dir} is not writable")
        raise HTTPException(status_code=503, detail=f"Staging directory {base_dir} is not writable")
    return {"status": "healthy", "code": 200, "staging_directory": base_dir}
