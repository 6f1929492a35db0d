import logging

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool

from schemas import ApiResponse
from utils.auth.jwt_bearer import ADMIN_ONLY, require_roles
from utils.image_host import MAX_BYTES, CloudinaryClient, get_image_host, prepare_image
from utils.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])


@router.post("", response_model=ApiResponse[dict], dependencies=[Depends(require_roles(*ADMIN_ONLY))])
async def upload_image(file: UploadFile = File(...), image_host: CloudinaryClient = Depends(get_image_host)):
    """Validate an image and push it to the image host; returns its public URL."""
    # one byte past the limit is enough to reject an oversized file
    contents = await file.read(MAX_BYTES + 1)
    data = await run_in_threadpool(prepare_image, contents, file.content_type)
    url = await run_in_threadpool(image_host.upload, data, file.filename, file.content_type)
    logger.info("uploaded image %s (%d bytes)", file.filename, len(data))
    return ok({"url": url})
