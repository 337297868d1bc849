from sqlalchemy import Column, Integer, String

from cms.database import Base
from cms.models.base import TimestampMixin


class Tag(TimestampMixin, Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    slug = Column(String(50), nullable=False, unique=True, index=True)
    usage_count = Column(Integer, nullable=False, default=0, index=True)
