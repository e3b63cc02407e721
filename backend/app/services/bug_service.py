"""
Bug Reporter Backend — Bug Service (Record Store Gateway)
==========================================================

What:  Thin CRUD façade over the persisted `bugs` collection.
Why:   Keeps persistence details out of the route handlers; routes stay thin
       and the service can be tested without HTTP.
How:   Each method receives an AsyncSession (injected per request), performs
       its query, and returns API response models.
Who:   Called by the /api/bugs route handlers.

Business rules:
    There are almost none. The store assigns ``id`` and ``created_at``,
    defaults status to OPEN and priority to MEDIUM, and merges metadata keys
    on update. Status transitions are unconstrained.

Error Handling Strategy:
    - Missing rows      → NotFoundError (404)
    - Failed writes     → PersistenceError (500)
    - Failed reads      → RetrievalError (500)
    SQLAlchemy details are logged, never returned to the client.
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    NotFoundError,
    PersistenceError,
    RetrievalError,
    ValidationError,
)
from app.models.bug import Bug
from app.schemas.bug import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    BugCreate,
    BugPriority,
    BugResponse,
    BugStatus,
    Metadata,
)

logger = logging.getLogger(__name__)


def to_response(bug: Bug) -> BugResponse:
    """Build the API representation of a stored bug."""
    created_at = bug.created_at
    # SQLite hands back naive datetimes; stored values are always UTC
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return BugResponse(
        id=bug.id,
        title=bug.title,
        description=bug.description,
        screenshot_url=bug.screenshot_url,
        created_at=created_at,
        status=bug.status,
        priority=bug.priority,
        metadata=bug.metadata_ or None,
    )


class BugService:
    """
    Business logic layer for bug operations.

    Responsibilities:
        - create_bug(): persist a new bug with store-assigned fields
        - list_bugs(): every bug, newest first
        - get_bug(): single bug or NotFoundError
        - update_status() / update_priority(): replace one field
        - update_metadata(): merge keys into the stored metadata
        - delete_bug(): hard delete; deleting twice is an error
    """

    async def create_bug(self, db: AsyncSession, payload: BugCreate) -> BugResponse:
        """
        Persist a new bug.

        ``id`` comes from the database on flush; ``created_at``, ``status``
        and the priority default are set here so the client can never
        choose them.

        Raises:
            ValidationError: title is blank (guards direct callers; the API
                schema already rejects this)
            PersistenceError: the insert failed
        """
        title = (payload.title or "").strip()
        if not title:
            raise ValidationError(message="Title is required", field="title")

        bug = Bug(
            title=title,
            description=payload.description,
            screenshot_url=payload.screenshot_url,
            created_at=datetime.now(timezone.utc),
            status=DEFAULT_STATUS,
            priority=payload.priority or DEFAULT_PRIORITY,
            metadata_=dict(payload.metadata) if payload.metadata else None,
        )

        try:
            db.add(bug)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating bug: %s", str(e), exc_info=True)
            raise PersistenceError(context={"error_type": type(e).__name__})

        logger.info(
            "Bug %s created (priority=%s, metadata_keys=%d)",
            bug.id,
            bug.priority.value,
            len(bug.metadata_ or {}),
        )
        return to_response(bug)

    async def list_bugs(self, db: AsyncSession) -> List[BugResponse]:
        """
        Return every bug, newest first.

        Query plan:
            SELECT * FROM bugs ORDER BY created_at DESC, id DESC
            → backed by idx_bugs_created_at

        Raises:
            RetrievalError: the query failed
        """
        try:
            result = await db.execute(
                select(Bug).order_by(desc(Bug.created_at), desc(Bug.id))
            )
            bugs = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing bugs: %s", str(e), exc_info=True)
            raise RetrievalError(context={"error_type": type(e).__name__})

        return [to_response(bug) for bug in bugs]

    async def get_bug(self, db: AsyncSession, bug_id: int) -> BugResponse:
        """
        Retrieve a single bug by ID.

        Raises:
            NotFoundError: no bug with this ID (→ 404)
            RetrievalError: the query failed
        """
        bug = await self._load(db, bug_id)
        return to_response(bug)

    async def update_status(
        self, db: AsyncSession, bug_id: int, status: BugStatus
    ) -> BugResponse:
        """Replace the status field only. Any transition is allowed."""
        bug = await self._load(db, bug_id)
        previous = bug.status
        bug.status = status
        await self._flush(db, bug_id, "update_status")
        logger.info("Bug %s status %s → %s", bug_id, previous.value, status.value)
        return to_response(bug)

    async def update_priority(
        self, db: AsyncSession, bug_id: int, priority: BugPriority
    ) -> BugResponse:
        """Replace the priority field only."""
        bug = await self._load(db, bug_id)
        bug.priority = priority
        await self._flush(db, bug_id, "update_priority")
        logger.info("Bug %s priority set to %s", bug_id, priority.value)
        return to_response(bug)

    async def update_metadata(
        self, db: AsyncSession, bug_id: int, metadata: Metadata
    ) -> BugResponse:
        """
        Merge ``metadata`` into the stored mapping.

        Keys not mentioned are kept; mentioned keys take the new value.
        """
        bug = await self._load(db, bug_id)
        bug.merge_metadata(metadata)
        await self._flush(db, bug_id, "update_metadata")
        logger.info("Bug %s metadata updated (%d keys)", bug_id, len(metadata))
        return to_response(bug)

    async def delete_bug(self, db: AsyncSession, bug_id: int) -> None:
        """
        Hard-delete a bug.

        Not idempotent: deleting an ID that no longer exists raises
        NotFoundError.
        """
        bug = await self._load(db, bug_id)
        try:
            await db.delete(bug)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting bug %s: %s", bug_id, str(e), exc_info=True)
            raise PersistenceError(context={"bug_id": bug_id})
        logger.info("Bug %s deleted", bug_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, bug_id: int) -> Bug:
        try:
            result = await db.execute(select(Bug).where(Bug.id == bug_id))
            bug = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching bug %s: %s", bug_id, str(e))
            raise RetrievalError(
                message="Could not retrieve the bug report. Please try again.",
                context={"bug_id": bug_id},
            )

        if bug is None:
            raise NotFoundError(resource="bug", resource_id=str(bug_id))
        return bug

    async def _flush(self, db: AsyncSession, bug_id: int, operation: str) -> None:
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(
                "Database error in %s for bug %s: %s", operation, bug_id, str(e), exc_info=True
            )
            raise PersistenceError(context={"bug_id": bug_id, "operation": operation})


bug_service = BugService()
