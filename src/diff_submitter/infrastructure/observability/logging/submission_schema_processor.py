"""Schema processor for structlog.

Reshapes the flat structlog event_dict into nested root / processing / error /
event / context / extra blocks so JSON output stays stable across commands.
All field extraction uses dict.pop(key, default) to avoid KeyError.
"""

from __future__ import annotations

import os
from typing import Any

from diff_submitter.infrastructure.observability.redaction_service import redact_dict, redact_text


def _build_root_fields(event_dict: dict[str, Any]) -> dict[str, Any]:
    return {
        "timestamp": event_dict.pop("timestamp", None),
        "level": event_dict.pop("level", "info"),
        "service": os.environ.get("SERVICE_NAME", "diff-submitter"),
        "run_id": event_dict.pop("run_id", None),
        "message": redact_text(str(event_dict.pop("event", ""))),
    }


def _build_processing(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    status = event_dict.pop("processing_status", None)
    if status is None:
        return None
    return {
        "status": status,
        "retries": event_dict.pop("processing_retries", None),
    }


def _build_error(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    """Extract error block. Returns None if no error_type present."""
    error_type = event_dict.pop("error_type", None)
    if error_type is None:
        return None
    details = event_dict.pop("error_details", None)
    return {
        "type": error_type,
        "code": event_dict.pop("error_code", None),
        "details": redact_text(details) if isinstance(details, str) else details,
        "retryable": event_dict.pop("error_retryable", False),
    }


def _build_event_block(event_dict: dict[str, Any]) -> dict[str, Any]:
    return {
        "eventType": event_dict.pop("event_type", None),
        "actorId": event_dict.pop("actor_id", None),
        "diffId": event_dict.pop("diff_id", None),
    }


def _build_context(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    component = event_dict.pop("context_component", None)
    if component is None:
        return None
    return {
        "component": component,
        "method": event_dict.pop("context_method", None),
    }


def submission_schema_processor(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that reshapes a flat event_dict into the log schema."""
    result = _build_root_fields(event_dict)

    processing = _build_processing(event_dict)
    if processing is not None:
        result["processing"] = processing

    error = _build_error(event_dict)
    if error is not None:
        result["error"] = error

    result["event"] = _build_event_block(event_dict)

    context = _build_context(event_dict)
    if context is not None:
        result["context"] = context

    if event_dict:
        result["extra"] = redact_dict(dict(event_dict))

    return result
