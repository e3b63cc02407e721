"""
Bug Reporter Backend — Bug Service Unit Tests
===============================================

What:  Tests for BugService (the record store gateway).
How:   Mock DB sessions for error translation; an in-memory SQLite session
       for the behaviour that depends on real SQL (ordering, defaults,
       JSON metadata).
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import NotFoundError, PersistenceError, RetrievalError, ValidationError
from app.models.bug import Bug
from app.schemas.bug import BugCreate, BugPriority, BugStatus
from app.services.bug_service import BugService


def db_failure():
    return OperationalError("SELECT", {}, Exception("connection reset"))


class TestBugServiceCreate:
    """Tests for create_bug with a mocked session."""

    def setup_method(self):
        self.service = BugService()

    @pytest.mark.asyncio
    async def test_create_assigns_defaults(self, mock_db_session):
        """Unset priority becomes MEDIUM, status starts OPEN, createdAt is set."""

        async def fake_flush():
            mock_db_session.add.call_args[0][0].id = 1

        mock_db_session.flush = AsyncMock(side_effect=fake_flush)

        result = await self.service.create_bug(mock_db_session, BugCreate(title="Test Bug"))

        assert result.id == 1
        assert result.title == "Test Bug"
        assert result.priority == BugPriority.MEDIUM
        assert result.status == BugStatus.OPEN
        assert result.created_at.tzinfo is not None
        assert result.metadata is None
        mock_db_session.add.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_keeps_priority_and_metadata(self, mock_db_session):
        async def fake_flush():
            mock_db_session.add.call_args[0][0].id = 2

        mock_db_session.flush = AsyncMock(side_effect=fake_flush)
        payload = BugCreate(
            title="Crash on login",
            priority=BugPriority.CRITICAL,
            metadata={"reportedBy": "test@example.com", "build": 42},
        )

        result = await self.service.create_bug(mock_db_session, payload)

        assert result.priority == BugPriority.CRITICAL
        assert result.metadata == {"reportedBy": "test@example.com", "build": 42}

    @pytest.mark.asyncio
    async def test_create_rejects_blank_title(self, mock_db_session):
        """Direct callers bypassing the schema still cannot store a blank title."""
        payload = BugCreate.model_construct(title="   ")

        with pytest.raises(ValidationError, match="Title is required"):
            await self.service.create_bug(mock_db_session, payload)

        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_storage_failure_raises_persistence_error(self, mock_db_session):
        mock_db_session.flush = AsyncMock(side_effect=db_failure())

        with pytest.raises(PersistenceError):
            await self.service.create_bug(mock_db_session, BugCreate(title="Test Bug"))


class TestBugServiceRead:
    """Tests for get_bug / list_bugs with a mocked session."""

    def setup_method(self):
        self.service = BugService()

    @pytest.mark.asyncio
    async def test_get_bug_found(self, mock_db_session, sample_bug):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = sample_bug
        mock_db_session.execute.return_value = mock_result

        result = await self.service.get_bug(mock_db_session, 7)

        assert result.id == 7
        assert result.screenshot_url == "https://example.com/shot.png"
        assert result.metadata == {"browser": "Chrome"}

    @pytest.mark.asyncio
    async def test_get_bug_not_found(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NotFoundError):
            await self.service.get_bug(mock_db_session, 404)

    @pytest.mark.asyncio
    async def test_list_bugs_empty(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        assert await self.service.list_bugs(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_list_bugs_storage_failure_raises_retrieval_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=db_failure())

        with pytest.raises(RetrievalError):
            await self.service.list_bugs(mock_db_session)


class TestBugServiceUpdates:
    """Tests for status/priority/metadata updates and delete with a mocked session."""

    def setup_method(self):
        self.service = BugService()

    def _returning(self, mock_db_session, bug):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = bug
        mock_db_session.execute.return_value = mock_result

    @pytest.mark.asyncio
    async def test_update_status_replaces_status_only(self, mock_db_session, sample_bug):
        self._returning(mock_db_session, sample_bug)

        result = await self.service.update_status(mock_db_session, 7, BugStatus.CLOSED)

        assert result.status == BugStatus.CLOSED
        assert result.priority == BugPriority.HIGH
        assert result.title == "Save button does nothing"
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_any_status_transition_is_allowed(self, mock_db_session, sample_bug):
        sample_bug.status = BugStatus.CLOSED
        self._returning(mock_db_session, sample_bug)

        result = await self.service.update_status(mock_db_session, 7, BugStatus.OPEN)

        assert result.status == BugStatus.OPEN

    @pytest.mark.asyncio
    async def test_update_status_not_found(self, mock_db_session):
        self._returning(mock_db_session, None)

        with pytest.raises(NotFoundError):
            await self.service.update_status(mock_db_session, 99, BugStatus.CLOSED)

        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_priority(self, mock_db_session, sample_bug):
        self._returning(mock_db_session, sample_bug)

        result = await self.service.update_priority(mock_db_session, 7, BugPriority.LOW)

        assert result.priority == BugPriority.LOW

    @pytest.mark.asyncio
    async def test_update_metadata_merges_last_write_wins(self, mock_db_session, sample_bug):
        self._returning(mock_db_session, sample_bug)

        result = await self.service.update_metadata(
            mock_db_session, 7, {"browser": "Firefox", "os": "Linux"}
        )

        assert result.metadata == {"browser": "Firefox", "os": "Linux"}

    @pytest.mark.asyncio
    async def test_update_flush_failure_raises_persistence_error(self, mock_db_session, sample_bug):
        self._returning(mock_db_session, sample_bug)
        mock_db_session.flush = AsyncMock(side_effect=db_failure())

        with pytest.raises(PersistenceError):
            await self.service.update_priority(mock_db_session, 7, BugPriority.LOW)

    @pytest.mark.asyncio
    async def test_delete_existing(self, mock_db_session, sample_bug):
        self._returning(mock_db_session, sample_bug)

        await self.service.delete_bug(mock_db_session, 7)

        mock_db_session.delete.assert_awaited_once_with(sample_bug)

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, mock_db_session):
        self._returning(mock_db_session, None)

        with pytest.raises(NotFoundError):
            await self.service.delete_bug(mock_db_session, 99)

        mock_db_session.delete.assert_not_awaited()


class TestBugServiceDatabase:
    """Behaviour that needs a real SQL engine (in-memory SQLite)."""

    def setup_method(self):
        self.service = BugService()

    @pytest.mark.asyncio
    async def test_ids_increase(self, db_session):
        first = await self.service.create_bug(db_session, BugCreate(title="First"))
        second = await self.service.create_bug(db_session, BugCreate(title="Second"))

        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, db_session):
        older = Bug(
            title="Older",
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
            status=BugStatus.OPEN,
            priority=BugPriority.LOW,
        )
        db_session.add(older)
        await db_session.flush()
        newer = await self.service.create_bug(db_session, BugCreate(title="Newer"))

        bugs = await self.service.list_bugs(db_session)

        assert [b.id for b in bugs] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_metadata_round_trips_scalar_types(self, db_session):
        metadata = {"name": "x", "count": 3, "ratio": 0.5, "beta": True, "owner": None}
        created = await self.service.create_bug(
            db_session, BugCreate(title="Typed", metadata=metadata)
        )

        fetched = await self.service.get_bug(db_session, created.id)

        assert fetched.metadata == metadata

    @pytest.mark.asyncio
    async def test_metadata_update_keeps_existing_keys(self, db_session):
        created = await self.service.create_bug(
            db_session, BugCreate(title="Meta", metadata={"initialKey": "initialValue"})
        )

        await self.service.update_metadata(db_session, created.id, {"updatedKey": "updatedValue"})
        fetched = await self.service.get_bug(db_session, created.id)

        assert fetched.metadata == {"initialKey": "initialValue", "updatedKey": "updatedValue"}

    @pytest.mark.asyncio
    async def test_repeated_delete_is_an_error(self, db_session):
        created = await self.service.create_bug(db_session, BugCreate(title="Gone"))

        await self.service.delete_bug(db_session, created.id)

        with pytest.raises(NotFoundError):
            await self.service.delete_bug(db_session, created.id)
        assert await self.service.list_bugs(db_session) == []
