"""
Bug Reporter Backend — Bug SQLAlchemy Model
=============================================

What:  ORM model representing the `bugs` table.
Why:   Maps Python objects to database rows; Alembic reads it for migrations.
Who:   Used by BugService for CRUD operations.

Table Design:
    - Integer autoincrement primary key: opaque, increasing, assigned by the store
    - created_at: UTC with timezone, set once at insert and never updated
    - status / priority: stored as their enum names in short VARCHARs
    - metadata: JSON object of scalar values (JSONB on PostgreSQL)

    Index on created_at DESC backs the newest-first listing.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime, Enum, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.schemas.bug import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    BugPriority,
    BugStatus,
)


class Bug(Base):
    """
    A reported bug.

    Lifecycle:
        1. Created through BugService.create_bug (status OPEN, priority
           defaulting to MEDIUM)
        2. Mutated only by explicit status, priority or metadata updates
        3. Hard-deleted; there is no tombstone

    The Python attribute for the metadata column is ``metadata_`` because
    ``metadata`` is reserved by SQLAlchemy's declarative base.
    """

    __tablename__ = "bugs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH),
        nullable=True,
    )

    screenshot_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    status: Mapped[BugStatus] = mapped_column(
        Enum(BugStatus, native_enum=False, length=20),
        nullable=False,
        default=DEFAULT_STATUS,
    )

    priority: Mapped[BugPriority] = mapped_column(
        Enum(BugPriority, native_enum=False, length=20),
        nullable=False,
        default=DEFAULT_PRIORITY,
    )

    metadata_: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        "metadata",
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )

    def merge_metadata(self, updates: Dict[str, Any]) -> None:
        """
        Merge keys into the stored metadata; the incoming value wins per key.

        Assigns a new dict so SQLAlchemy detects the change on the JSON column.
        """
        merged = dict(self.metadata_ or {})
        merged.update(updates)
        self.metadata_ = merged or None

    def __repr__(self) -> str:
        return (
            f"<Bug(id={self.id}, status='{self.status}', "
            f"priority='{self.priority}', created_at='{self.created_at}')>"
        )


# Backs the newest-first listing
Index("idx_bugs_created_at", Bug.created_at.desc())
