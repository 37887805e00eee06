"""Event types published during scans and parsers for their payloads."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EventType(str, Enum):
    APP_UPDATE_AVAILABLE = "xeol-app-update-available"
    UPDATE_EOL_DATABASE = "xeol-update-eol-database"
    EOL_SCANNING_STARTED = "xeol-eol-scanning-started"
    EOL_SCANNING_FINISHED = "xeol-eol-scanning-finished"
    ATTESTATION_VERIFIED = "xeol-attestation-signature-passed"
    ATTESTATION_VERIFICATION_SKIPPED = "xeol-attestation-verification-skipped"
    NON_ROOT_COMMAND_FINISHED = "xeol-non-root-command-finished"


@dataclass(frozen=True)
class Event:
    type: Any
    value: Any = None


class BadPayloadError(ValueError):
    def __init__(self, event_type: Any, field: str, value: Any) -> None:
        self.type = event_type
        self.field = field
        self.value = value
        type_text = event_type.value if isinstance(event_type, EventType) else str(event_type)
        super().__init__(f"event='{type_text}' has bad event payload field='{field}': '{value}'")


def check_event_type(actual: Any, expected: EventType) -> None:
    if actual != expected:
        raise BadPayloadError(expected, "Type", actual)


def _parse(event: Event, expected: EventType, valid: bool) -> Any:
    check_event_type(event.type, expected)
    if not valid:
        raise BadPayloadError(event.type, "Value", event.value)
    return event.value


def parse_app_update_available(event: Event) -> str:
    return _parse(event, EventType.APP_UPDATE_AVAILABLE, isinstance(event.value, str))


def parse_non_root_command_finished(event: Event) -> str:
    return _parse(event, EventType.NON_ROOT_COMMAND_FINISHED, isinstance(event.value, str))


def parse_update_eol_database(event: Event) -> Any:
    """Return the staged progress object carried by a database update event."""
    return _parse(event, EventType.UPDATE_EOL_DATABASE, hasattr(event.value, "stage"))


def parse_eol_scanning_started(event: Event) -> Any:
    """Return the scan monitor carried by a scanning-started event."""
    value = event.value
    valid = hasattr(value, "packages_processed") and hasattr(value, "eol_discovered")
    return _parse(event, EventType.EOL_SCANNING_STARTED, valid)


def parse_eol_scanning_finished(event: Event) -> Any:
    """Return the presenter carried by a scanning-finished event."""
    valid = callable(getattr(event.value, "present", None))
    return _parse(event, EventType.EOL_SCANNING_FINISHED, valid)