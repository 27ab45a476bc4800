"""Testimonial and student success story API endpoints.

Both resources share the same shape of routes; each gets its own router.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sitecms.database import get_db
from sitecms.dependencies import CurrentUser, Submission, read_submission, require_admin
from sitecms.schemas.base import MessageResponse
from sitecms.schemas.testimonial import (
    StoryListResponse,
    StoryResponse,
    TestimonialListResponse,
    TestimonialResponse,
)
from sitecms.services.testimonial import RankedEntityService, get_story_service, get_testimonial_service

router = APIRouter(prefix="/testimonials", tags=["Testimonials"])
stories_router = APIRouter(prefix="/student-success-stories", tags=["Student Success Stories"])


# --- Testimonials ---


@router.post("/create", response_model=TestimonialResponse, status_code=201)
async def create_testimonial(
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: RankedEntityService = Depends(get_testimonial_service),
) -> TestimonialResponse:
    """Create a testimonial with an optional image or video ``media`` upload."""
    testimonial = await service.create(db, submission.fields, submission.files)
    return TestimonialResponse.model_validate(testimonial)


@router.get("", response_model=TestimonialListResponse)
def list_testimonials(
    is_active: bool | None = Query(None, alias="isActive"),
    db: Session = Depends(get_db),
    service: RankedEntityService = Depends(get_testimonial_service),
) -> TestimonialListResponse:
    """Testimonials by ``order`` ascending, then newest first."""
    items = service.list_ranked(db, is_active=is_active)
    return TestimonialListResponse(items=[TestimonialResponse.model_validate(t) for t in items], total=len(items))


@router.get("/{testimonial_id}", response_model=TestimonialResponse)
def get_testimonial(
    testimonial_id: int,
    db: Session = Depends(get_db),
    service: RankedEntityService = Depends(get_testimonial_service),
) -> TestimonialResponse:
    return TestimonialResponse.model_validate(service.get(db, testimonial_id))


@router.put("/{testimonial_id}", response_model=TestimonialResponse)
async def update_testimonial(
    testimonial_id: int,
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: RankedEntityService = Depends(get_testimonial_service),
) -> TestimonialResponse:
    testimonial = await service.update(db, testimonial_id, submission.fields, submission.files)
    return TestimonialResponse.model_validate(testimonial)


@router.delete("/{testimonial_id}", response_model=MessageResponse)
async def delete_testimonial(
    testimonial_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    service: RankedEntityService = Depends(get_testimonial_service),
) -> MessageResponse:
    await service.delete(db, testimonial_id)
    return MessageResponse(message="Testimonial deleted successfully.")


# --- Student success stories ---


@stories_router.post("/create", response_model=StoryResponse, status_code=201)
async def create_story(
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: RankedEntityService = Depends(get_story_service),
) -> StoryResponse:
    """Create a story with optional ``media`` and ``profileImage`` uploads."""
    story = await service.create(db, submission.fields, submission.files)
    return StoryResponse.model_validate(story)


@stories_router.get("", response_model=StoryListResponse)
def list_stories(
    is_active: bool | None = Query(None, alias="isActive"),
    db: Session = Depends(get_db),
    service: RankedEntityService = Depends(get_story_service),
) -> StoryListResponse:
    items = service.list_ranked(db, is_active=is_active)
    return StoryListResponse(items=[StoryResponse.model_validate(s) for s in items], total=len(items))


@stories_router.get("/{story_id}", response_model=StoryResponse)
def get_story(
    story_id: int, db: Session = Depends(get_db), service: RankedEntityService = Depends(get_story_service)
) -> StoryResponse:
    return StoryResponse.model_validate(service.get(db, story_id))


@stories_router.put("/{story_id}", response_model=StoryResponse)
async def update_story(
    story_id: int,
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: RankedEntityService = Depends(get_story_service),
) -> StoryResponse:
    story = await service.update(db, story_id, submission.fields, submission.files)
    return StoryResponse.model_validate(story)


@stories_router.delete("/{story_id}", response_model=MessageResponse)
async def delete_story(
    story_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    service: RankedEntityService = Depends(get_story_service),
) -> MessageResponse:
    await service.delete(db, story_id)
    return MessageResponse(message="Story deleted successfully.")
