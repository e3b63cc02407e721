"""
Bug Reporter Client
=====================

The embeddable reporting widget, minus the rendering:

    config.py      widget options and their overlay on the defaults
    composer.py    validation and metadata merge → creation payload
    form.py        form state and the submit lifecycle
    board.py       list state for the bug overview
    api_client.py  httpx client for /api/bugs

Example:
    form = BugReporterForm(
        {"showMetadataFields": True, "getContextData": lambda: {"appVersion": "1.2.3"}},
        on_submit_success=board.load,
    )
    form.title = "Save button does nothing"
    await form.submit()
"""

from app.reporter.api_client import BugApiClient
from app.reporter.board import BugBoard
from app.reporter.composer import MetadataField, SubmissionComposer
from app.reporter.config import DEFAULT_API_ENDPOINT, DEFAULT_CONFIG, ReporterConfig, resolve_config
from app.reporter.form import BugReporterForm

__all__ = [
    "BugApiClient",
    "BugBoard",
    "BugReporterForm",
    "DEFAULT_API_ENDPOINT",
    "DEFAULT_CONFIG",
    "MetadataField",
    "ReporterConfig",
    "SubmissionComposer",
    "resolve_config",
]
