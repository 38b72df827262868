"""Search response payload decoder."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from dateutil import parser as dt_parser

from DocQuery.core.errors import DecodingError
from DocQuery.core.models import AlternateLanguage, Document, Response


def decode_response(payload: Any) -> Response:
    """Decode a parsed search response into a `Response`.

    Args:
        payload: JSON value returned by a form submission.

    Returns:
        The fully decoded page.

    Raises:
        DecodingError: If a required field is missing or ill-typed, or if the
            number of results disagrees with ``results_size``.
    """
    if not isinstance(payload, Mapping):
        raise DecodingError("Response must be a JSON object", body=payload)

    raw_results = payload.get("results")
    if not isinstance(raw_results, list):
        raise DecodingError("Response field 'results' must be a list", body=payload)

    results = tuple(decode_document(item) for item in raw_results)
    results_size = _require_int(payload, "results_size")
    if len(results) != results_size:
        raise DecodingError(
            f"results_size={results_size} but {len(results)} results were returned",
            body=payload,
        )

    return Response(
        page=_require_int(payload, "page"),
        results_per_page=_require_int(payload, "results_per_page"),
        results_size=results_size,
        total_results_size=_require_int(payload, "total_results_size"),
        total_pages=_require_int(payload, "total_pages"),
        next_page=_optional_str(payload, "next_page"),
        prev_page=_optional_str(payload, "prev_page"),
        results=results,
    )


def decode_document(item: Any) -> Document:
    """Decode one entry of the ``results`` array."""
    if not isinstance(item, Mapping):
        raise DecodingError("Document must be a JSON object", body=item)

    doc_type = _require_str(item, "type")
    return Document(
        id=_require_str(item, "id"),
        uid=_optional_str(item, "uid"),
        type=doc_type,
        href=_require_str(item, "href"),
        tags=_str_list(item, "tags"),
        slugs=_str_list(item, "slugs"),
        first_publication_date=parse_datetime(item.get("first_publication_date")),
        last_publication_date=parse_datetime(item.get("last_publication_date")),
        lang=_optional_str(item, "lang"),
        alternate_languages=tuple(_decode_alternate(alt) for alt in _list(item, "alternate_languages")),
        fragments=_extract_fragments(item.get("data"), doc_type),
    )


def _decode_alternate(raw: Any) -> AlternateLanguage:
    if not isinstance(raw, Mapping):
        raise DecodingError("Alternate language must be a JSON object", body=raw)
    return AlternateLanguage(
        id=_require_str(raw, "id"),
        uid=_optional_str(raw, "uid"),
        type=_require_str(raw, "type"),
        lang=_require_str(raw, "lang"),
    )


def _extract_fragments(data: Any, doc_type: str) -> Mapping[str, Any]:
    """Return the fragment map, unwrapping the ``{type: {...}}`` envelope."""
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise DecodingError("Document field 'data' must be an object", body=data)
    inner = data.get(doc_type)
    if len(data) == 1 and isinstance(inner, Mapping):
        return inner
    return data


def parse_datetime(raw_value: Any) -> datetime | None:
    """Parse an ISO datetime into a timezone-aware datetime (naive -> UTC)."""
    if raw_value is None or raw_value == "":
        return None
    if not isinstance(raw_value, str):
        raise DecodingError(f"Invalid datetime: {raw_value!r}", body=raw_value)
    try:
        parsed = dt_parser.isoparse(raw_value)
    except (TypeError, ValueError) as e:
        raise DecodingError(f"Invalid datetime: {raw_value!r}", body=raw_value) from e

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _require_int(obj: Mapping[str, Any], key: str) -> int:
    value = obj.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodingError(f"Field '{key}' must be an integer", body=obj)
    return value


def _require_str(obj: Mapping[str, Any], key: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise DecodingError(f"Field '{key}' must be a string", body=obj)
    return value


def _optional_str(obj: Mapping[str, Any], key: str) -> str | None:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodingError(f"Field '{key}' must be a string or null", body=obj)
    return value


def _list(obj: Mapping[str, Any], key: str) -> list[Any]:
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodingError(f"Field '{key}' must be a list", body=obj)
    return value


def _str_list(obj: Mapping[str, Any], key: str) -> tuple[str, ...]:
    items = _list(obj, key)
    if not all(isinstance(item, str) for item in items):
        raise DecodingError(f"Field '{key}' must only hold strings", body=obj)
    return tuple(items)
