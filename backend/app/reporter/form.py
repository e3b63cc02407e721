"""
Bug Reporter Client — Report Form State
=========================================

What:  The state behind the embeddable "Report a Bug" form: field values,
       the editable metadata rows, and the submission status a UI renders
       (submitting, inline validation error, submission error, success).
How:   A UI layer binds inputs to the attributes, calls the metadata row
       helpers on edits, and awaits ``submit()`` when the form is sent.

Submission lifecycle:
    submit()
      ├─ already submitting → ignored (the submit control is disabled)
      ├─ SubmissionComposer.compose → ValidationError → validation_error set
      ├─ BugApiClient.create_bug   → error → error set, on_submit_error(exc),
      │                                      fields kept for a retry
      └─ success → fields reset, on_submit_success(), success flag shown,
                   cleared again after success_clear_delay seconds; if
                   on_submit_success raises, error is set and
                   on_submit_error(exc) is called

Everything runs on one event loop; the only suspension points are context
collection and the HTTP call. There is no cancellation.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional

import httpx

from app.exceptions import BugTrackerError, NotFoundError, ValidationError
from app.reporter.api_client import BugApiClient
from app.reporter.composer import MetadataField, SubmissionComposer, maybe_await
from app.reporter.config import ConfigSource, resolve_config
from app.schemas.bug import BugPriority, BugResponse

logger = logging.getLogger(__name__)

SUCCESS_CLEAR_DELAY = 3.0
SUBMIT_ERROR_MESSAGE = "An error occurred while submitting the form. Please try again."


class BugReporterForm:
    """
    One instance per rendered form.

    Args:
        options: widget options overlaid on the defaults (see resolve_config)
        client: optional httpx.AsyncClient used for the POST
        on_submit_success: called with no arguments after a successful submit
        on_submit_error: called with the exception after a failed submit
        success_clear_delay: seconds before ``success`` resets to False

    Callbacks may be plain functions or coroutine functions.
    """

    def __init__(
        self,
        options: ConfigSource = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        on_submit_success: Optional[Callable[[], Any]] = None,
        on_submit_error: Optional[Callable[[Exception], Any]] = None,
        success_clear_delay: float = SUCCESS_CLEAR_DELAY,
    ):
        self.config = resolve_config(options)
        self.composer = SubmissionComposer(self.config)
        self.api = BugApiClient(self.config.endpoint, client=client)
        self.on_submit_success = on_submit_success
        self.on_submit_error = on_submit_error
        self.success_clear_delay = success_clear_delay

        self.title = ""
        self.description = ""
        self.screenshot_url = ""
        self.priority: BugPriority = self.config.initial_priority
        self.metadata_fields: List[MetadataField] = [MetadataField()]

        self.submitting = False
        self.error: Optional[str] = None
        self.validation_error: Optional[str] = None
        self.success = False
        self._success_timer: Optional[asyncio.TimerHandle] = None

    # ── Display ───────────────────────────────────────────────────────────

    @property
    def submit_enabled(self) -> bool:
        return not self.submitting

    @property
    def success_message(self) -> Optional[str]:
        return self.config.success_message if self.success else None

    # ── Metadata rows ─────────────────────────────────────────────────────

    def add_metadata_field(self) -> MetadataField:
        field = MetadataField()
        self.metadata_fields.append(field)
        return field

    def remove_metadata_field(self, field_id: str) -> bool:
        """Remove a row. The last remaining row is kept; returns whether one was removed."""
        if len(self.metadata_fields) <= 1:
            return False
        before = len(self.metadata_fields)
        self.metadata_fields = [f for f in self.metadata_fields if f.id != field_id]
        return len(self.metadata_fields) < before

    def update_metadata_field(
        self,
        field_id: str,
        key: Optional[str] = None,
        value: Optional[str] = None,
    ) -> MetadataField:
        for field in self.metadata_fields:
            if field.id == field_id:
                if key is not None:
                    field.key = key
                if value is not None:
                    field.value = value
                return field
        raise NotFoundError(resource="metadata field", resource_id=field_id)

    # ── Submission ────────────────────────────────────────────────────────

    def reset(self) -> None:
        """Back to the initial values (priority to the configured default)."""
        self.title = ""
        self.description = ""
        self.screenshot_url = ""
        self.priority = self.config.initial_priority
        self.metadata_fields = [MetadataField()]

    async def submit(self) -> Optional[BugResponse]:
        """
        Validate, compose and send the report.

        Returns the stored bug on success, otherwise None; the outcome is also
        reflected in ``validation_error`` / ``error`` / ``success``.
        """
        if self.submitting:
            logger.debug("Submit ignored: a submission is already in flight")
            return None

        self.validation_error = None
        self.submitting = True
        try:
            payload = await self.composer.compose(
                title=self.title,
                description=self.description,
                screenshot_url=self.screenshot_url,
                priority=self.priority,
                metadata_fields=self.metadata_fields,
            )
            self.error = None
            created = await self.api.create_bug(payload)
        except ValidationError as e:
            self.validation_error = e.message
            return None
        except BugTrackerError as e:
            self.error = SUBMIT_ERROR_MESSAGE
            logger.error("Form submission error: %s", e.message)
            if self.on_submit_error is not None:
                await maybe_await(self.on_submit_error(e))
            return None
        finally:
            self.submitting = False

        logger.info("Bug report %s submitted", created.id)
        self.reset()
        self._show_success()
        if self.on_submit_success is not None:
            try:
                await maybe_await(self.on_submit_success())
            except Exception as e:
                # The bug is stored; only the embedding application's hook failed
                self.error = SUBMIT_ERROR_MESSAGE
                logger.error("Submit success callback failed: %s", e, exc_info=True)
                if self.on_submit_error is not None:
                    await maybe_await(self.on_submit_error(e))
        return created

    def _show_success(self) -> None:
        self.success = True
        if self._success_timer is not None:
            self._success_timer.cancel()
        loop = asyncio.get_running_loop()
        self._success_timer = loop.call_later(self.success_clear_delay, self._clear_success)

    def _clear_success(self) -> None:
        self.success = False
        self._success_timer = None
