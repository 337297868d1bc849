from sqlalchemy import Column, Integer, String, Text, ForeignKey

from cms.database import Base
from cms.models.base import TimestampMixin


class Category(TimestampMixin, Base):
    """
    Blog category. Hierarchy is a flat table with a nullable parent pointer;
    the tree is assembled in memory by ``build_category_tree``.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
