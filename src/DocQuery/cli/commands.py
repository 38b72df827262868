"""Command implementations for DocQuery CLI.

Encapsulates command logic, separated from CLI parameter handling.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Optional

import click

from DocQuery.api import Api
from DocQuery.core.models import Ref
from DocQuery.renderers import render_forms, render_json, render_text
from DocQuery.utils.log import log


@dataclass(slots=True)
class FormsCommand:
    """List the forms known to the Api."""

    api: Api

    def execute(self) -> None:
        for line in render_forms(self.api.forms.values()).splitlines():
            log.info(line)


@dataclass(slots=True)
class SearchCommand:
    """Fill one form from CLI options and print the results.

    Attributes:
        api: Api to submit through.
        form_name: Name of the form to fill.
        ref: Ref label/id or raw ref token; defaults to the master ref.
        query: Raw query string for the ``q`` field.
        fields: Extra ``(field, value)`` pairs, in command line order.
        output: One of ``text``, ``json`` or ``raw``.
    """

    api: Api
    form_name: str
    ref: Optional[str] = None
    query: Optional[str] = None
    page: Optional[int] = None
    page_size: Optional[int] = None
    orderings: Optional[str] = None
    lang: Optional[str] = None
    fields: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    output: str = "text"

    def resolve_ref(self) -> Ref | str | None:
        if not self.ref:
            return self.api.master_ref
        return self.api.ref(self.ref) or self.ref

    def execute(self) -> None:
        form = self.api.form(self.form_name)
        if self.query:
            form.query(self.query)
        form.page(self.page).page_size(self.page_size).orderings(self.orderings).lang(self.lang)
        for name, value in self.fields:
            form.set(name, value)

        ref = self.resolve_ref()
        log.debug("Submitting %r", form)

        if self.output == "raw":
            click.echo(form.submit_raw(ref))
            return

        response = form.submit(ref)
        log.debug("Fetched %d/%d documents", response.results_size, response.total_results_size)
        if self.output == "json":
            click.echo(json.dumps(render_json(response), ensure_ascii=False, indent=2))
            return
        for line in render_text(response).splitlines():
            log.info(line)
