"""Course API endpoints.

Static paths are registered before ``/{slug_or_id}`` so that they are not
captured by it.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sitecms.database import get_db
from sitecms.dependencies import CurrentUser, Submission, get_current_user, read_submission, require_admin
from sitecms.schemas.base import MessageResponse
from sitecms.schemas.course import CourseListResponse, CourseResponse, RatingRequest
from sitecms.services.course import CourseService, get_course_service

router = APIRouter(prefix="/courses", tags=["Courses"])


def _listing(items: list, total: int | None = None, page: int = 1, limit: int | None = None) -> CourseListResponse:
    return CourseListResponse(
        items=[CourseResponse.model_validate(c) for c in items],
        total=len(items) if total is None else total,
        page=page,
        limit=limit,
    )


@router.post("/create", response_model=CourseResponse, status_code=201)
async def create_course(
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: CourseService = Depends(get_course_service),
) -> CourseResponse:
    """Create a course. An image upload is required."""
    course = await service.create(db, submission.fields, submission.files)
    return CourseResponse.model_validate(course)


@router.get("/find", response_model=CourseListResponse)
def find_all_courses(
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    service: CourseService = Depends(get_course_service),
) -> CourseListResponse:
    """All courses, active or not, newest first."""
    items, total = service.list(db, search=search, page=page, limit=limit)
    return _listing(items, total, page, limit)


@router.get("/public", response_model=CourseListResponse)
def list_public_courses(
    db: Session = Depends(get_db), service: CourseService = Depends(get_course_service)
) -> CourseListResponse:
    return _listing(service.list_public(db))


@router.get("/featured", response_model=CourseListResponse)
def list_featured_courses(
    db: Session = Depends(get_db), service: CourseService = Depends(get_course_service)
) -> CourseListResponse:
    return _listing(service.list_public(db, featured=True))


@router.get("/search", response_model=CourseListResponse)
def search_courses(
    q: str | None = None,
    category: str | None = None,
    level: str | None = None,
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    db: Session = Depends(get_db),
    service: CourseService = Depends(get_course_service),
) -> CourseListResponse:
    """Search active courses by text, category, level and price range."""
    items = service.search(db, q=q, category=category, level=level, min_price=min_price, max_price=max_price)
    return _listing(items)


@router.get("/category/{category}", response_model=CourseListResponse)
def list_courses_by_category(
    category: str, db: Session = Depends(get_db), service: CourseService = Depends(get_course_service)
) -> CourseListResponse:
    return _listing(service.search(db, category=category))


@router.put("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: int,
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: CourseService = Depends(get_course_service),
) -> CourseResponse:
    course = await service.update(db, course_id, submission.fields, submission.files)
    return CourseResponse.model_validate(course)


@router.delete("/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    service: CourseService = Depends(get_course_service),
) -> MessageResponse:
    await service.delete(db, course_id)
    return MessageResponse(message="Course deleted successfully.")


@router.post("/{course_id}/rating", response_model=CourseResponse)
def rate_course(
    course_id: int,
    body: RatingRequest,
    _: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: CourseService = Depends(get_course_service),
) -> CourseResponse:
    """Add a 1-5 rating to the course's running average."""
    return CourseResponse.model_validate(service.rate(db, course_id, body.rating))


@router.get("/{slug_or_id}", response_model=CourseResponse)
def get_course(
    slug_or_id: str, db: Session = Depends(get_db), service: CourseService = Depends(get_course_service)
) -> CourseResponse:
    """An active course by slug, or by numeric id."""
    return CourseResponse.model_validate(service.get_by_slug_or_id(db, slug_or_id, active_only=True))
