"""
Bug Reporter Client — Bug List State
======================================

What:  The client-side list of bugs a page displays, with loading and error
       state.
How:   ``load`` replaces the list from the server; ``add``, ``remove`` and
       ``set_status`` call the API and then patch the local list instead of
       re-fetching. Failures set ``error`` and leave the list untouched.
"""

import logging
from typing import Any, List, Mapping, Optional

from app.exceptions import BugTrackerError
from app.reporter.api_client import BugApiClient
from app.schemas.bug import BugResponse, BugStatus

logger = logging.getLogger(__name__)


class BugBoard:
    def __init__(self, api: BugApiClient):
        self.api = api
        self.bugs: List[BugResponse] = []
        self.loading = False
        self.error: Optional[str] = None

    async def load(self) -> bool:
        self.loading = True
        self.error = None
        try:
            self.bugs = await self.api.list_bugs()
            return True
        except BugTrackerError as e:
            self.error = "Failed to fetch bugs. Please try again later."
            logger.error("Error fetching bugs: %s", e.message)
            return False
        finally:
            self.loading = False

    async def add(self, payload: Mapping[str, Any]) -> bool:
        """Create a bug and show it first (the server lists newest first)."""
        self.error = None
        try:
            created = await self.api.create_bug(payload)
        except BugTrackerError as e:
            self.error = "Failed to create bug. Please try again."
            logger.error("Error creating bug: %s", e.message)
            return False
        self.bugs = [created] + self.bugs
        return True

    async def remove(self, bug_id: int) -> bool:
        self.error = None
        try:
            await self.api.delete_bug(bug_id)
        except BugTrackerError as e:
            self.error = "Failed to delete bug. Please try again."
            logger.error("Error deleting bug %s: %s", bug_id, e.message)
            return False
        self.bugs = [bug for bug in self.bugs if bug.id != bug_id]
        return True

    async def set_status(self, bug_id: int, status: BugStatus) -> bool:
        self.error = None
        try:
            updated = await self.api.update_status(bug_id, status)
        except BugTrackerError as e:
            self.error = "Failed to update bug status. Please try again."
            logger.error("Error updating bug %s: %s", bug_id, e.message)
            return False
        self.bugs = [updated if bug.id == bug_id else bug for bug in self.bugs]
        return True
