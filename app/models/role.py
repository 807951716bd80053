import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import String, Boolean, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base

if TYPE_CHECKING:
    from app.models.user import UserRole


class RoleLevel(int, Enum):
    """
    Role hierarchy levels.
    Lower number = Higher authority.
    SUPER_ADMIN (0) is treated as admin everywhere.
    """
    SUPER_ADMIN = 0
    DIRECTOR = 1
    HEAD = 2
    MANAGER = 3
    EXECUTIVE = 4


# Role code that grants admin regardless of level
ADMIN_ROLE_CODE = "admin"


class Role(Base):
    """Role model for RBAC."""
    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Hierarchy level
    level: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="EXECUTIVE",
        comment="SUPER_ADMIN, DIRECTOR, HEAD, MANAGER, EXECUTIVE"
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    user_roles: Mapped[List["UserRole"]] = relationship(
        "UserRole",
        back_populates="role",
        cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        """Check if this role grants admin access."""
        return self.level == RoleLevel.SUPER_ADMIN.name or self.code == ADMIN_ROLE_CODE

    def __repr__(self) -> str:
        return f"<Role(name='{self.name}', code='{self.code}', level='{self.level}')>"
