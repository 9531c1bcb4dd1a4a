import logging
from fastapi import APIRouter, Depends

from fabric_catalog.config import Config
from fabric_catalog.schemas.upload import UploadAuthorization, UploadComplete, UploadCompleteResponse
from fabric_catalog.services.upload_gate import Identity, require_uploader

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/uploads", tags=["uploads"])


@router.post("/authorize", response_model=UploadAuthorization)
async def authorize_upload(identity: Identity = Depends(require_uploader)):
    """Called by the upload service before it accepts any file."""
    return UploadAuthorization(
        user_id=identity.user_id,
        max_file_size_mb=Config.UPLOAD_MAX_FILE_SIZE_MB,
        max_file_count=Config.UPLOAD_MAX_FILE_COUNT,
    )


@router.post("/complete", response_model=UploadCompleteResponse)
async def upload_complete(body: UploadComplete, identity: Identity = Depends(require_uploader)):
    """Hand the stored file's URL back; it is saved later as an opaque string."""
    logger.info(f"Upload complete for userId: {identity.user_id}")
    logger.info(f"File URL: {body.url}")
    return UploadCompleteResponse(uploaded_file_url=body.url)
