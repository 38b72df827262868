"""Form template and reference parsing.

Turns the service's JSON description of forms and refs (as found in the
repository document) into `FormTemplate`/`Ref` objects. How that document is
obtained is up to the caller.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from DocQuery.core.models import FORM_URLENCODED, FieldSpec, FormTemplate, Ref
from DocQuery.parsers.response import parse_datetime


def parse_field_spec(raw: Mapping[str, Any], config_key: str) -> FieldSpec:
    """Parse one entry of a form's ``fields`` object.

    Example: ``{"type": "Integer", "multiple": false, "default": "1"}``.
    """
    if not isinstance(raw, Mapping):
        raise TypeError(f"{config_key} must be an object")
    field_type = raw.get("type", "String")
    if not isinstance(field_type, str):
        raise TypeError(f"{config_key}.type must be a string")
    default = raw.get("default")
    repeatable = raw.get("multiple", False)
    if not isinstance(repeatable, bool):
        raise TypeError(f"{config_key}.multiple must be a boolean")
    return FieldSpec(
        field_type=field_type,
        default=None if default is None else str(default),
        repeatable=repeatable,
    )


def parse_form_template(name: str, raw: Mapping[str, Any]) -> FormTemplate:
    """Parse a form description.

    Args:
        name: Form name (key in the repository ``forms`` object).
        raw: Form object with ``method``, ``enctype``, ``action`` and ``fields``.

    Returns:
        Immutable form template.

    Raises:
        TypeError: If the description has the wrong shape.
        ValueError: If the action URL is missing.
    """
    key = f"forms.{name}"
    if not isinstance(raw, Mapping):
        raise TypeError(f"{key} must be an object")

    action = raw.get("action")
    if not isinstance(action, str) or not action.strip():
        raise ValueError(f"Missing required form field: {key}.action")

    raw_fields = raw.get("fields") or {}
    if not isinstance(raw_fields, Mapping):
        raise TypeError(f"{key}.fields must be an object")

    rel = raw.get("rel")
    return FormTemplate(
        name=str(raw.get("name") or name),
        method=str(raw.get("method", "GET")).upper(),
        enctype=str(raw.get("enctype", FORM_URLENCODED)),
        action=action,
        fields={
            str(field_name): parse_field_spec(spec, f"{key}.fields.{field_name}")
            for field_name, spec in raw_fields.items()
        },
        rel=str(rel) if rel is not None else None,
    )


def parse_ref(raw: Mapping[str, Any]) -> Ref:
    """Parse a ref object such as ``{"id": "master", "ref": "UlfoxUnM08QWYXdl",
    "label": "Master", "isMasterRef": true}``.

    ``scheduledAt`` may be epoch milliseconds or an ISO datetime.
    """
    if not isinstance(raw, Mapping):
        raise TypeError("ref must be an object")
    token = raw.get("ref")
    if not isinstance(token, str) or not token:
        raise ValueError("Missing required ref field: ref")

    scheduled_raw = raw.get("scheduledAt")
    if isinstance(scheduled_raw, (int, float)) and not isinstance(scheduled_raw, bool):
        scheduled_at = datetime.fromtimestamp(scheduled_raw / 1000, tz=timezone.utc)
    else:
        scheduled_at = parse_datetime(scheduled_raw)

    return Ref(
        id=str(raw.get("id") or token),
        ref=token,
        label=str(raw.get("label") or ""),
        is_master=bool(raw.get("isMasterRef", False)),
        scheduled_at=scheduled_at,
    )


def parse_repository(raw: Mapping[str, Any]) -> tuple[dict[str, FormTemplate], tuple[Ref, ...]]:
    """Parse the ``forms`` and ``refs`` sections of a repository document."""
    if not isinstance(raw, Mapping):
        raise TypeError("repository must be an object")

    raw_forms = raw.get("forms") or {}
    if not isinstance(raw_forms, Mapping):
        raise TypeError("repository.forms must be an object")
    raw_refs = raw.get("refs") or []
    if not isinstance(raw_refs, list):
        raise TypeError("repository.refs must be a list")

    forms = {str(name): parse_form_template(str(name), spec) for name, spec in raw_forms.items()}
    refs = tuple(parse_ref(item) for item in raw_refs)
    return forms, refs
