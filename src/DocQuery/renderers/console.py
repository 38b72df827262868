"""Console text output renderers.

Renders a `Response` page and form templates into human-friendly text.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from DocQuery.core.models import FormTemplate, Response


def _fmt_dt(dt: datetime | None) -> str:
    """Format datetime for console output.

    Args:
        dt: A datetime object or None.

    Returns:
        A short date string (YYYY-mm-dd) or "-" when dt is None.
    """
    if not dt:
        return "-"
    return dt.strftime("%Y-%m-%d")


def render_text(response: Response) -> str:
    """Render one page of documents into a text block.

    Args:
        response: Decoded response.

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = [
        f"Page {response.page}/{response.total_pages} "
        f"({response.results_size} of {response.total_results_size} documents)",
        "",
    ]
    first_index = (response.page - 1) * response.results_per_page + 1
    for idx, doc in enumerate(response, start=first_index):
        label = doc.uid or doc.slug
        lines.append(f"{idx}. [{doc.type}] {label}  id={doc.id}")
        if doc.lang:
            lines.append(f"   Lang: {doc.lang}")
        if doc.tags:
            lines.append(f"   Tags: {', '.join(doc.tags)}")
        lines.append(
            f"   Published: {_fmt_dt(doc.first_publication_date)}  "
            f"Updated: {_fmt_dt(doc.last_publication_date)}"
        )
        if doc.alternate_languages:
            langs = ", ".join(alt.lang for alt in doc.alternate_languages)
            lines.append(f"   Alternates: {langs}")
        lines.append(f"   Href: {doc.href}")
        lines.append("")

    if response.next_page:
        lines.append(f"Next page: {response.next_page}")
    return "\n".join(lines).rstrip() + "\n"


def render_forms(forms: Iterable[FormTemplate]) -> str:
    """Render form templates with their fields."""
    lines: list[str] = []
    for form in forms:
        lines.append(f"{form.name}: {form.method} {form.action}")
        for name, spec in form.fields.items():
            flags = []
            if spec.repeatable:
                flags.append("multiple")
            if spec.default is not None:
                flags.append(f"default={spec.default}")
            suffix = f" ({', '.join(flags)})" if flags else ""
            lines.append(f"   {name}: {spec.field_type}{suffix}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
