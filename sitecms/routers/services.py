"""Service category API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sitecms.database import get_db
from sitecms.dependencies import CurrentUser, Submission, read_submission, require_admin
from sitecms.schemas.base import MessageResponse
from sitecms.schemas.service_category import ServiceCategoryListResponse, ServiceCategoryResponse
from sitecms.services.service_category import ServiceCategoryService, get_service_category_service

router = APIRouter(prefix="/services", tags=["Services"])


@router.post("/create", response_model=ServiceCategoryResponse, status_code=201)
async def create_service(
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: ServiceCategoryService = Depends(get_service_category_service),
) -> ServiceCategoryResponse:
    """Create a service category with its sub-services.

    Expects ``mainImage`` plus optional ``subServiceImage_{index}`` files
    matching the positions in the ``subServices`` JSON list.
    """
    category = await service.create(db, submission.fields, submission.files)
    return ServiceCategoryResponse.model_validate(category)


@router.get("/find", response_model=ServiceCategoryListResponse)
def find_all_services(
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    service: ServiceCategoryService = Depends(get_service_category_service),
) -> ServiceCategoryListResponse:
    items, total = service.list(db, search=search, page=page, limit=limit)
    return ServiceCategoryListResponse(
        items=[ServiceCategoryResponse.model_validate(c) for c in items], total=total, page=page, limit=limit
    )


@router.get("/public", response_model=ServiceCategoryListResponse)
def list_public_services(
    db: Session = Depends(get_db),
    service: ServiceCategoryService = Depends(get_service_category_service),
) -> ServiceCategoryListResponse:
    """Active service categories sorted by name."""
    items = service.list_public(db)
    return ServiceCategoryListResponse(
        items=[ServiceCategoryResponse.model_validate(c) for c in items], total=len(items)
    )


@router.get("/{slug_or_id}", response_model=ServiceCategoryResponse)
def get_service(
    slug_or_id: str,
    db: Session = Depends(get_db),
    service: ServiceCategoryService = Depends(get_service_category_service),
) -> ServiceCategoryResponse:
    return ServiceCategoryResponse.model_validate(service.get_by_slug_or_id(db, slug_or_id, active_only=True))


@router.put("/{service_id}", response_model=ServiceCategoryResponse)
async def update_service(
    service_id: int,
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: ServiceCategoryService = Depends(get_service_category_service),
) -> ServiceCategoryResponse:
    """Update a category and reconcile its sub-services against the submitted list."""
    category = await service.update(db, service_id, submission.fields, submission.files)
    return ServiceCategoryResponse.model_validate(category)


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    service: ServiceCategoryService = Depends(get_service_category_service),
) -> MessageResponse:
    await service.delete(db, service_id)
    return MessageResponse(message="Service deleted successfully.")
