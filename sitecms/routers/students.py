"""Student profile API endpoints."""

import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sitecms.database import get_db
from sitecms.dependencies import CurrentUser, Submission, read_submission, require_admin
from sitecms.schemas.base import MessageResponse
from sitecms.schemas.student import StudentListResponse, StudentResponse
from sitecms.services.student import StudentService, get_student_service

router = APIRouter(prefix="/api/students", tags=["Students"])


def _unpaged(items: list) -> StudentListResponse:
    return StudentListResponse(
        items=[StudentResponse.model_validate(s) for s in items], total=len(items), total_pages=1
    )


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: StudentService = Depends(get_student_service),
) -> StudentResponse:
    """Create a student profile with optional ``image`` and ``coverImage`` uploads."""
    student = await service.create(db, submission.fields, submission.files)
    return StudentResponse.model_validate(student)


@router.get("", response_model=StudentListResponse)
def list_students(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    search: str | None = None,
    specialization: str | None = None,
    db: Session = Depends(get_db),
    service: StudentService = Depends(get_student_service),
) -> StudentListResponse:
    """Paginated student list, searchable by name, title and bio."""
    items, total = service.list_students(db, page=page, limit=limit, search=search, specialization=specialization)
    return StudentListResponse(
        items=[StudentResponse.model_validate(s) for s in items],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


@router.get("/featured", response_model=StudentListResponse)
def list_featured_students(
    limit: int = Query(6, ge=1),
    db: Session = Depends(get_db),
    service: StudentService = Depends(get_student_service),
) -> StudentListResponse:
    """Students with at least one badge."""
    return _unpaged(service.list_featured(db, limit=limit))


@router.get("/slug/{slug}", response_model=StudentResponse)
def get_student_by_slug(
    slug: str, db: Session = Depends(get_db), service: StudentService = Depends(get_student_service)
) -> StudentResponse:
    return StudentResponse.model_validate(service.get_by_slug(db, slug))


@router.get("/specialization/{specialization}", response_model=StudentListResponse)
def list_students_by_specialization(
    specialization: str, db: Session = Depends(get_db), service: StudentService = Depends(get_student_service)
) -> StudentListResponse:
    return _unpaged(service.list_by_specialization(db, specialization))


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: int, db: Session = Depends(get_db), service: StudentService = Depends(get_student_service)
) -> StudentResponse:
    return StudentResponse.model_validate(service.get(db, student_id))


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: int,
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: StudentService = Depends(get_student_service),
) -> StudentResponse:
    student = await service.update(db, student_id, submission.fields, submission.files)
    return StudentResponse.model_validate(student)


@router.delete("/{student_id}", response_model=MessageResponse)
async def delete_student(
    student_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    service: StudentService = Depends(get_student_service),
) -> MessageResponse:
    await service.delete(db, student_id)
    return MessageResponse(message="Student deleted successfully.")


@router.post("/{student_id}/testimonials", response_model=StudentResponse, status_code=201)
def add_student_testimonial(
    student_id: int,
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: StudentService = Depends(get_student_service),
) -> StudentResponse:
    return StudentResponse.model_validate(service.add_testimonial(db, student_id, submission.fields))


@router.post("/{student_id}/projects", response_model=StudentResponse, status_code=201)
async def add_student_project(
    student_id: int,
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: StudentService = Depends(get_student_service),
) -> StudentResponse:
    """Append a project, optionally with an ``image`` upload."""
    student = await service.add_project(db, student_id, submission.fields, submission.files.get("image"))
    return StudentResponse.model_validate(student)


@router.post("/{student_id}/education", response_model=StudentResponse, status_code=201)
def add_student_education(
    student_id: int,
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: StudentService = Depends(get_student_service),
) -> StudentResponse:
    return StudentResponse.model_validate(service.add_education(db, student_id, submission.fields))
