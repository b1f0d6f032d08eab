"""Single-lecture endpoints. Creation and listing live under /api/books."""

from fastapi import APIRouter, Depends, HTTPException, status

from trackacademia.bootstrap import Services
from trackacademia.core import lectures
from trackacademia.models import Topic
from trackacademia.session.controller import SessionState
from trackacademia.web.dependencies import get_services, require_view
from trackacademia.web.schemas import LectureResponse, LectureUpdate

router = APIRouter(prefix="/api/lectures", tags=["lectures"])

guard = require_view(requires_profile_completion=True)


def _not_found(lecture_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Lecture '{lecture_id}' not found",
    )


@router.get("/{lecture_id}", response_model=LectureResponse)
async def get_lecture(
    lecture_id: str,
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
) -> LectureResponse:
    lecture = await lectures.get_lecture(services.gateway, state.identity, lecture_id)
    if lecture is None:
        raise _not_found(lecture_id)
    return LectureResponse.model_validate(lecture)


@router.patch("/{lecture_id}", response_model=LectureResponse)
async def update_lecture(
    lecture_id: str,
    request: LectureUpdate,
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
) -> LectureResponse:
    """Change date and/or topics."""
    topics = (
        [Topic(**t.model_dump()) for t in request.topics]
        if request.topics is not None
        else None
    )
    lecture = await lectures.edit_lecture(
        services.gateway,
        state.identity,
        lecture_id,
        lecture_date=request.date,
        topics=topics,
    )
    if lecture is None:
        raise _not_found(lecture_id)
    return LectureResponse.model_validate(lecture)


@router.delete("/{lecture_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lecture(
    lecture_id: str,
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
) -> None:
    if not await lectures.remove_lecture(services.gateway, state.identity, lecture_id):
        raise _not_found(lecture_id)
