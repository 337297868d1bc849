"""
Service (portfolio item) and its gallery images.

Status Flow:
    ongoing → completed → archived
"""

import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, Date, ForeignKey, JSON
from sqlalchemy.orm import relationship

from cms.database import Base
from cms.models.base import TimestampMixin, SoftDeleteMixin


class ServiceStatus(str, enum.Enum):
    ONGOING = "ongoing"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class Service(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    client_name = Column(String(255), nullable=True)
    project_url = Column(String(500), nullable=True)
    project_date = Column(Date, nullable=True)
    project_duration = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=ServiceStatus.ONGOING.value, index=True)
    featured = Column(Boolean, nullable=False, default=False)
    category = Column(String(100), nullable=True)
    technologies = Column(JSON, nullable=False, default=list)
    industry = Column(String(100), nullable=True)
    challenge = Column(Text, nullable=True)
    solution = Column(Text, nullable=True)
    results = Column(Text, nullable=True)
    metrics = Column(JSON, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    images = relationship(
        "ServiceImage",
        back_populates="service",
        cascade="all, delete-orphan",
        order_by="ServiceImage.display_order",
    )


class ServiceImage(TimestampMixin, Base):
    __tablename__ = "service_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String(500), nullable=False)
    caption = Column(Text, nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)

    service = relationship("Service", back_populates="images")
