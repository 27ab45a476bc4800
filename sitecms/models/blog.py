"""Blog post model."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from sitecms.database import Base, utcnow


class Blog(Base):
    """A blog post. The slug is derived from the title."""

    __tablename__ = "blog"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(512), nullable=False)
    slug = Column(String(512), nullable=False, unique=True, index=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    category = Column(String(256), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    author = Column(String(256), nullable=True)
    publish_date = Column(DateTime, nullable=True)
    meta_title = Column(String(512), nullable=True)
    meta_description = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="draft")  # draft, published
    image_url = Column(String(1024), nullable=True)
    image_key = Column(String(1024), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
