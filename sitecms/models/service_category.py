"""Service category and sub-service models."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from sitecms.database import Base, utcnow


class ServiceCategory(Base):
    """A top-level service offering with its own sub-services."""

    __tablename__ = "service_category"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False, unique=True)
    slug = Column(String(256), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    main_image_url = Column(String(1024), nullable=False)
    main_image_key = Column(String(1024), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    sub_services = relationship(
        "SubService",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="SubService.position",
    )


class SubService(Base):
    """An item inside a service category, optionally with an image."""

    __tablename__ = "sub_service"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("service_category.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(256), nullable=False)
    slug = Column(String(256), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(String(1024), nullable=True)
    image_key = Column(String(1024), nullable=True)

    category = relationship("ServiceCategory", back_populates="sub_services")
