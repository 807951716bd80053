"""
Document Sequence Model for Atomic Number Generation

One row per number prefix (e.g. ``RA-20261019``). The row is read
``FOR UPDATE`` and incremented, so numbers are never reused, even
after the documents carrying them are deleted.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class DocumentSequence(Base):
    """Last issued number for a prefix."""
    __tablename__ = "document_sequences"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    prefix: Mapped[str] = mapped_column(
        String(40),
        unique=True,
        nullable=False,
        index=True,
        comment="e.g., RA-20261019"
    )

    # Sequence Counter
    current_number: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Last used sequence number"
    )

    # Formatting
    padding_length: Mapped[int] = mapped_column(
        Integer,
        default=4,
        nullable=False,
        comment="Zero padding for sequence (4 = 0001)"
    )

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

    def get_next_number(self) -> str:
        """
        Increment and format the next number.

        Does not flush; the caller owns the transaction.
        """
        self.current_number += 1
        return f"{self.prefix}-{str(self.current_number).zfill(self.padding_length)}"

    def __repr__(self) -> str:
        return f"<DocumentSequence(prefix='{self.prefix}', current_number={self.current_number})>"
