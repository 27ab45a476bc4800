"""Course model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text

from sitecms.database import Base, utcnow

COURSE_LEVELS = ("Beginner", "Intermediate", "Advanced")


class Course(Base):
    """A purchasable course listed on the public site."""

    __tablename__ = "course"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(512), nullable=False, unique=True)
    slug = Column(String(512), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    short_description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    original_price = Column(Float, nullable=True)
    rating = Column(Float, nullable=False, default=0)
    total_ratings = Column(Integer, nullable=False, default=0)
    image_url = Column(String(1024), nullable=False)
    image_key = Column(String(1024), nullable=False)
    category = Column(String(256), nullable=False, index=True)
    instructor = Column(String(256), nullable=False, default="Admin")
    duration = Column(String(128), nullable=True)
    level = Column(String(32), nullable=False, default="Beginner")
    language = Column(String(64), nullable=False, default="English")
    features = Column(JSON, nullable=False, default=list)
    requirements = Column(JSON, nullable=False, default=list)
    what_you_will_learn = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    enrollment_count = Column(Integer, nullable=False, default=0)
    certificate_included = Column(Boolean, nullable=False, default=True)
    lifetime_access = Column(Boolean, nullable=False, default=True)
    mobile_access = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
