"""
Bug Reporter Client — Submission Composer
===========================================

What:  Turns what the user typed plus the widget configuration and the
       embedding application's context data into one creation payload.
Why:   This is the only place where the three metadata sources meet, so the
       precedence rules live here and nowhere else.

Merge order (later wins per key):
    1. UI metadata fields, in the order they were added
       (only when showMetadataFields is on; blank keys/values skipped)
    2. Context data from getContextData
       (errors are logged and the context data is dropped)

The payload is camelCase JSON. ``metadata`` is nested under its own key and
omitted entirely when the merged mapping is empty.
"""

import inspect
import logging
import uuid
from typing import Any, Dict, Iterable, Mapping, Optional

import pydantic
from pydantic import BaseModel, Field, TypeAdapter

from app.exceptions import ContextCollectionError, ValidationError
from app.reporter.config import ReporterConfig
from app.schemas.bug import BugCreate, BugPriority, Metadata

logger = logging.getLogger(__name__)

_metadata_adapter = TypeAdapter(Metadata)


async def maybe_await(value: Any) -> Any:
    """Resolve ``value`` if it is awaitable; otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


class MetadataField(BaseModel):
    """One editable key/value row of the custom metadata input."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    key: str = ""
    value: str = ""

    def as_pair(self) -> Optional[tuple]:
        """The trimmed (key, value), or None when either side is blank."""
        key, value = self.key.strip(), self.value.strip()
        if key and value:
            return key, value
        return None


def metadata_from_fields(fields: Iterable[MetadataField]) -> Dict[str, str]:
    """Collect the complete rows; a repeated key keeps the last row's value."""
    metadata: Dict[str, str] = {}
    for field in fields:
        pair = field.as_pair()
        if pair is not None:
            metadata[pair[0]] = pair[1]
    return metadata


class SubmissionComposer:
    """
    Builds creation payloads for one widget configuration.

    Stateless apart from the configuration; a form creates one and calls
    ``compose`` on every submit.
    """

    def __init__(self, config: ReporterConfig):
        self.config = config

    @staticmethod
    def validate_title(title: Optional[str]) -> str:
        stripped = (title or "").strip()
        if not stripped:
            raise ValidationError(message="Title is required", field="title")
        return stripped

    async def collect_context(self) -> Metadata:
        """
        Call the configured context-data producer.

        Returns an empty mapping when none is configured or when it fails;
        failures are logged as ContextCollectionError and never raised.
        """
        provider = self.config.get_context_data
        if provider is None:
            return {}
        try:
            result = await maybe_await(provider())
            if not isinstance(result, Mapping):
                raise ContextCollectionError(
                    message="Context data must be a mapping",
                    context={"type": type(result).__name__},
                )
            return _metadata_adapter.validate_python(dict(result))
        except ContextCollectionError as e:
            logger.error("Error getting context data: %s", e.message)
        except Exception as e:
            error = ContextCollectionError(context={"error_type": type(e).__name__})
            logger.error("Error getting context data: %s (%s)", error.message, e, exc_info=True)
        return {}

    async def merge_metadata(self, fields: Iterable[MetadataField]) -> Metadata:
        metadata: Metadata = {}
        if self.config.show_metadata_fields:
            metadata.update(metadata_from_fields(fields))
        if self.config.get_context_data is not None:
            metadata.update(await self.collect_context())
        return metadata

    def resolve_priority(self, priority: Optional[BugPriority]) -> BugPriority:
        if self.config.show_priority and priority is not None:
            return BugPriority(priority)
        return self.config.initial_priority

    async def compose(
        self,
        title: Optional[str],
        description: Optional[str] = None,
        screenshot_url: Optional[str] = None,
        priority: Optional[BugPriority] = None,
        metadata_fields: Iterable[MetadataField] = (),
    ) -> Dict[str, Any]:
        """
        Validate the inputs and build the JSON payload for POST /api/bugs.

        The title is checked before anything is awaited, so an invalid title
        never triggers context collection or a network call.

        Raises:
            ValidationError: blank title, or a field the API would reject
                (e.g. a description over the length limit)
        """
        clean_title = self.validate_title(title)

        data: Dict[str, Any] = {
            "title": clean_title,
            "priority": self.resolve_priority(priority),
        }
        if self.config.show_description and description and description.strip():
            data["description"] = description.strip()
        if self.config.show_screenshot_url and screenshot_url and screenshot_url.strip():
            data["screenshot_url"] = screenshot_url.strip()

        metadata = await self.merge_metadata(metadata_fields)
        if metadata:
            data["metadata"] = metadata

        try:
            request = BugCreate.model_validate(data)
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise ValidationError(message=first["msg"], field=field)

        return request.model_dump(by_alias=True, exclude_unset=True, mode="json")
