"""Form templates, accessor tables, cache keys and the fillable SearchForm."""

from __future__ import annotations

from DocQuery.forms.accessors import accessor_name, build_accessor_table
from DocQuery.forms.cache_key import derive_cache_key
from DocQuery.forms.search_form import SearchForm, parse_max_age
from DocQuery.forms.templates import parse_form_template, parse_ref, parse_repository

__all__ = [
    "SearchForm",
    "accessor_name",
    "build_accessor_table",
    "derive_cache_key",
    "parse_max_age",
    "parse_form_template",
    "parse_ref",
    "parse_repository",
]
