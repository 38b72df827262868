"""Output renderers for search responses."""

from __future__ import annotations

from DocQuery.renderers.console import render_forms, render_text
from DocQuery.renderers.json import render_json

__all__ = ["render_text", "render_forms", "render_json"]
