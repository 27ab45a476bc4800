"""API routers."""

from sitecms.routers.auth import router as auth_router
from sitecms.routers.blogs import router as blogs_router
from sitecms.routers.courses import router as courses_router
from sitecms.routers.services import router as services_router
from sitecms.routers.students import router as students_router
from sitecms.routers.testimonials import router as testimonials_router
from sitecms.routers.testimonials import stories_router

__all__ = [
    "auth_router",
    "blogs_router",
    "courses_router",
    "services_router",
    "students_router",
    "testimonials_router",
    "stories_router",
]
