"""Student profile model."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from sitecms.database import Base, utcnow


class Student(Base):
    """Public profile of a student or alumnus."""

    __tablename__ = "student"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(256), nullable=False, unique=True, index=True)
    name = Column(String(256), nullable=False)
    title = Column(String(256), nullable=True)
    image_url = Column(String(1024), nullable=True)
    image_key = Column(String(1024), nullable=True)
    cover_image_url = Column(String(1024), nullable=True)
    cover_image_key = Column(String(1024), nullable=True)
    badges = Column(JSON, nullable=False, default=list)
    location = Column(String(256), nullable=True)
    email = Column(String(256), nullable=True)
    phone = Column(String(32), nullable=True)
    experience = Column(String(256), nullable=True)
    bio = Column(Text, nullable=True)
    specializations = Column(JSON, nullable=False, default=list)
    # Embedded lists of dicts: {degree, institution, year, achievement}
    education = Column(JSON, nullable=False, default=list)
    # {name, role, text}
    testimonials = Column(JSON, nullable=False, default=list)
    # {name, description, year, imageUrl, imageKey}
    projects = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
