"""Blog post API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sitecms.database import get_db
from sitecms.dependencies import CurrentUser, Submission, read_submission, require_admin
from sitecms.schemas.base import MessageResponse
from sitecms.schemas.blog import BlogListResponse, BlogResponse
from sitecms.services.blog import BlogService, get_blog_service

router = APIRouter(prefix="/blogs", tags=["Blogs"])


@router.post("/create", response_model=BlogResponse, status_code=201)
async def create_blog(
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: BlogService = Depends(get_blog_service),
) -> BlogResponse:
    """Create a blog post. The slug is derived from the title."""
    blog = await service.create(db, submission.fields, submission.files)
    return BlogResponse.model_validate(blog)


@router.get("", response_model=BlogListResponse)
def list_blogs(
    search: str | None = None,
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
    service: BlogService = Depends(get_blog_service),
) -> BlogListResponse:
    """List blog posts, newest first."""
    items, total = service.list(db, search=search, filters={"status": status}, page=page, limit=limit)
    return BlogListResponse(
        items=[BlogResponse.model_validate(b) for b in items], total=total, page=page, limit=limit
    )


@router.get("/slug/{slug}", response_model=BlogResponse)
def get_blog_by_slug(
    slug: str, db: Session = Depends(get_db), service: BlogService = Depends(get_blog_service)
) -> BlogResponse:
    return BlogResponse.model_validate(service.get_by_slug(db, slug))


@router.get("/{blog_id}", response_model=BlogResponse)
def get_blog(
    blog_id: int, db: Session = Depends(get_db), service: BlogService = Depends(get_blog_service)
) -> BlogResponse:
    return BlogResponse.model_validate(service.get(db, blog_id))


@router.put("/{blog_id}", response_model=BlogResponse)
async def update_blog(
    blog_id: int,
    _: CurrentUser = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    db: Session = Depends(get_db),
    service: BlogService = Depends(get_blog_service),
) -> BlogResponse:
    """Update a blog post. A new image replaces the stored one."""
    blog = await service.update(db, blog_id, submission.fields, submission.files)
    return BlogResponse.model_validate(blog)


@router.delete("/{blog_id}", response_model=MessageResponse)
async def delete_blog(
    blog_id: int,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    service: BlogService = Depends(get_blog_service),
) -> MessageResponse:
    await service.delete(db, blog_id)
    return MessageResponse(message="Blog post deleted successfully.")
