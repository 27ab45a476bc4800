"""Blog posts."""

from fastapi import Depends

from sitecms.config import get_settings
from sitecms.dependencies import get_media_store
from sitecms.models.blog import Blog
from sitecms.services.content import EntitySchema, EntityService, FieldSpec, MediaSlot
from sitecms.services.media import MediaStore

BLOG_SCHEMA = EntitySchema(
    label="Blog post",
    model=Blog,
    fields={
        "title": FieldSpec(required=True),
        "excerpt": FieldSpec(),
        "content": FieldSpec(),
        "category": FieldSpec(),
        "tags": FieldSpec(kind="csv"),
        "author": FieldSpec(),
        "publish_date": FieldSpec(kind="datetime"),
        "meta_title": FieldSpec(),
        "meta_description": FieldSpec(),
        "status": FieldSpec(choices=("draft", "published"), default="draft"),
    },
    media=(MediaSlot(field="image", url_attr="image_url", key_attr="image_key", folder="blogs"),),
    slug_from="title",
    search=("title", "excerpt", "category"),
)


class BlogService(EntityService):
    """Blog posts; the slug always follows the title."""

    def __init__(self, media: MediaStore, max_upload_mb: int = 100) -> None:
        super().__init__(BLOG_SCHEMA, media, max_upload_mb)


def get_blog_service(media: MediaStore = Depends(get_media_store)) -> BlogService:
    return BlogService(media, get_settings().MAX_UPLOAD_SIZE_MB)
