"""
User and Role models.

Roles carry a JSON permission map (module -> action -> bool) that is parsed
into a typed ``PermissionMap`` whenever it is read for an authorization
decision. Users are never hard-deleted.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from cms.database import Base
from cms.models.base import TimestampMixin, SoftDeleteMixin


class Role(TimestampMixin, Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    slug = Column(String(50), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    permissions = Column(JSON, nullable=False, default=dict)

    users = relationship("User", back_populates="role")


class User(TimestampMixin, SoftDeleteMixin, Base):
    """
    CMS account.

    Attributes:
        email: Login identifier (unique)
        password_hash: bcrypt hash
        role_id: Role granting permissions
        is_active: Deactivated users cannot log in or use tokens
        password_reset_token/expires: Pending reset request, cleared on use
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime, nullable=True)
    password_reset_token = Column(String(255), nullable=True, index=True)
    password_reset_expires = Column(DateTime, nullable=True)

    role = relationship("Role", back_populates="users", lazy="joined")
