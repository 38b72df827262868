"""JSON output renderers.

Renders a decoded `Response` back into JSON-serializable objects with
normalized field names and ISO dates.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from DocQuery.core.models import Document, Response


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


def render_document(doc: Document) -> dict[str, Any]:
    return {
        "id": doc.id,
        "uid": doc.uid,
        "type": doc.type,
        "href": doc.href,
        "tags": list(doc.tags),
        "slugs": list(doc.slugs),
        "first_publication_date": _iso(doc.first_publication_date),
        "last_publication_date": _iso(doc.last_publication_date),
        "lang": doc.lang,
        "alternate_languages": [
            {"id": alt.id, "uid": alt.uid, "type": alt.type, "lang": alt.lang}
            for alt in doc.alternate_languages
        ],
        "data": dict(doc.fragments),
    }


def render_json(response: Response) -> dict[str, Any]:
    """Render a response page into a JSON-serializable dict.

    Args:
        response: Decoded response.

    Returns:
        Pagination fields plus the rendered documents.
    """
    return {
        "page": response.page,
        "results_per_page": response.results_per_page,
        "results_size": response.results_size,
        "total_results_size": response.total_results_size,
        "total_pages": response.total_pages,
        "next_page": response.next_page,
        "prev_page": response.prev_page,
        "results": [render_document(doc) for doc in response],
    }
