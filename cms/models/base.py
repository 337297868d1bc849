"""
Shared column mixins for CMS models.

Timestamps are stored as naive UTC. Soft-deletable ("paranoid") models carry a
``deleted_at`` column; default queries must filter on ``deleted_at IS NULL``
(see ``cms.services.base.not_deleted``).
"""

from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func


class TimestampMixin:
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class SoftDeleteMixin:
    deleted_at = Column(DateTime, nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
