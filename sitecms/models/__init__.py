"""SQLAlchemy models. Importing this package registers every table with Base.metadata."""

from sitecms.models.blog import Blog
from sitecms.models.course import Course
from sitecms.models.service_category import ServiceCategory, SubService
from sitecms.models.student import Student
from sitecms.models.testimonial import StudentSuccessStory, Testimonial
from sitecms.models.user import User

__all__ = [
    "Blog",
    "Course",
    "ServiceCategory",
    "Student",
    "StudentSuccessStory",
    "SubService",
    "Testimonial",
    "User",
]
