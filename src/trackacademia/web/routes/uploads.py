"""Book cover upload endpoint."""

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from trackacademia.bootstrap import Services
from trackacademia.core.uploads import upload_cover, validate_cover
from trackacademia.session.controller import SessionState
from trackacademia.web.dependencies import get_services, require_view
from trackacademia.web.schemas import CoverUploadResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post("/covers", response_model=CoverUploadResponse)
async def upload_book_cover(
    file: UploadFile = File(...),
    state: SessionState = Depends(require_view(requires_profile_completion=True)),
    services: Services = Depends(get_services),
) -> CoverUploadResponse:
    """Upload a cover image and return its public URL.

    The URL is not attached to any book; send it as ``cover_url`` when
    creating or editing one.
    """
    if services.uploader is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Cover uploads are not configured",
        )

    config = services.config.uploads
    if file.size is not None:
        validate_cover(file.content_type, file.size, config)

    # One byte past the limit is enough for upload_cover to reject it
    content = await file.read(config.max_bytes + 1)
    url = await upload_cover(
        services.uploader,
        config,
        filename=file.filename or "cover",
        content=content,
        content_type=file.content_type,
    )
    logger.info("cover_uploaded", uid=state.identity.uid, url=url)
    return CoverUploadResponse(url=url)
