"""Testimonial and student success story models."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from sitecms.database import Base, utcnow


class Testimonial(Base):
    """Customer testimonial with optional image or video."""

    __tablename__ = "testimonial"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    designation = Column(String(256), nullable=False)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False, default=5)
    media_url = Column(String(1024), nullable=True)
    media_key = Column(String(1024), nullable=True)
    media_type = Column(String(16), nullable=False, default="none")  # image, video, none
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class StudentSuccessStory(Base):
    """A student's success story, shown on the public site in explicit order."""

    __tablename__ = "student_success_story"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    designation = Column(String(256), nullable=False)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False, default=5)
    media_url = Column(String(1024), nullable=True)
    media_key = Column(String(1024), nullable=True)
    media_type = Column(String(16), nullable=False, default="none")  # image, video, none
    profile_image_url = Column(String(1024), nullable=True)
    profile_image_key = Column(String(1024), nullable=True)
    location = Column(String(256), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
