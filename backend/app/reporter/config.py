"""
Bug Reporter Client — Widget Configuration
============================================

What:  The options an embedding application passes to the bug-report widget.
How:   ``ReporterConfig`` holds every recognized option with its default.
       ``resolve_config`` overlays any number of partial sources on those
       defaults, field by field; a later source wins, and a source only
       contributes the fields it explicitly sets.

Options (camelCase or snake_case keys are both accepted):
    showDescription, showPriority, showScreenshotUrl, showMetadataFields
        Which optional inputs the form shows. Hidden inputs never reach the
        payload.
    defaultPriority
        Initial and reset value of the priority input; also used when the
        priority input is hidden.
    getContextData
        Optional zero-argument callable returning a mapping of string keys to
        scalar values, either directly or as an awaitable. Called once per
        submission.
    apiEndpoint
        Collection URL of the bugs API. Empty means DEFAULT_API_ENDPOINT.
    title, submitButtonText, successMessage
        Display strings.
"""

from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.schemas.bug import DEFAULT_PRIORITY, BugPriority

DEFAULT_API_ENDPOINT = "http://localhost:8000/api/bugs"

ContextDataProvider = Callable[[], Any]


class ReporterConfig(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    # Feature toggles
    show_description: bool = True
    show_priority: bool = True
    show_screenshot_url: bool = True
    show_metadata_fields: bool = False

    default_priority: Optional[BugPriority] = DEFAULT_PRIORITY

    get_context_data: Optional[ContextDataProvider] = None

    api_endpoint: Optional[str] = DEFAULT_API_ENDPOINT

    # Display strings
    title: str = "Report a Bug"
    submit_button_text: str = "Submit Bug Report"
    success_message: str = "Bug report submitted successfully!"

    @property
    def endpoint(self) -> str:
        return self.api_endpoint or DEFAULT_API_ENDPOINT

    @property
    def initial_priority(self) -> BugPriority:
        return self.default_priority or DEFAULT_PRIORITY


ConfigSource = Union[ReporterConfig, Mapping[str, Any], None]


def resolve_config(*sources: ConfigSource) -> ReporterConfig:
    """
    Overlay ``sources`` on the defaults, later sources winning per field.

    >>> resolve_config({"showPriority": False}, {"title": "Report an Issue"}).show_priority
    False

    Unknown keys are ignored. ``None`` sources are skipped.

    Raises:
        pydantic.ValidationError: a source sets a field to an invalid value
    """
    merged = {}
    for source in sources:
        if source is None:
            continue
        if isinstance(source, ReporterConfig):
            parsed = source
        else:
            parsed = ReporterConfig.model_validate(dict(source))
        for name in parsed.model_fields_set:
            merged[name] = getattr(parsed, name)
    return ReporterConfig.model_validate(merged)


DEFAULT_CONFIG = ReporterConfig()
