"""Fillable search forms.

A `SearchForm` accumulates parameter values for one form template and submits
them: cache lookup, HTTP GET through the Api's transport, freshness-driven
cache population, HTTP status to error mapping and response decoding.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from DocQuery.core.errors import (
    AuthenticationError,
    AuthorizationError,
    DecodingError,
    FormSearchError,
    NoReferenceSetError,
    RefNotFoundError,
    UnsupportedFormKindError,
)
from DocQuery.core.models import FORM_URLENCODED, FieldSpec, FormTemplate, Ref, Response
from DocQuery.core.predicates import compile_query
from DocQuery.forms.accessors import REF_FIELD, build_accessor_table
from DocQuery.forms.cache_key import derive_cache_key
from DocQuery.parsers.response import decode_response
from DocQuery.utils.log import log

if TYPE_CHECKING:
    from DocQuery.api import Api
    from DocQuery.cache.base import ResultCache
    from DocQuery.transport.http import TransportResponse

FieldValue = Union[str, list[str], None]

_MAX_AGE_RE = re.compile(r"max-age\s*=\s*(\d+)")

_ERRORS_BY_STATUS: dict[int, type[FormSearchError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: RefNotFoundError,
}

_SETTER_NAMES = frozenset(
    {"page", "page_size", "orderings", "fetch", "fetch_links", "lang", "ref"}
)


def parse_max_age(cache_control: str | None) -> Optional[int]:
    """Extract the ``max-age`` directive (seconds) of a Cache-Control header."""
    match = _MAX_AGE_RE.search(cache_control or "")
    return int(match.group(1)) if match else None


class SearchForm:
    """Mutable query builder bound to one form template.

    Setters return the form itself so calls can be chained::

        response = (
            api.form("everything")
            .query(predicates.at("document.type", "blog-post"))
            .page(2)
            .page_size(20)
            .submit(api.master_ref)
        )

    Besides the fixed setters, every plain-identifier field of the template
    can be set through `assign` with its snake_case accessor name.

    A form has no terminal state: it may be changed and submitted again.
    It is meant for single-owner sequential use.
    """

    def __init__(
        self,
        api: Api,
        form: FormTemplate,
        data: Optional[Mapping[str, Any]] = None,
        ref: Union[Ref, str, None] = None,
    ) -> None:
        """Create a form pre-filled with the template defaults.

        Args:
            api: Api providing transport, cache and access token.
            form: Template this form fills.
            data: Initial values, applied after the template defaults.
            ref: Default reference for submissions.
        """
        self.api = api
        self.form = form
        self.data: dict[str, FieldValue] = {}
        self._ref: Optional[str] = None
        self.accessors = build_accessor_table(form.fields, reserved=_reserved_names())
        for key, value in form.default_data.items():
            self.set(key, value)
        for key, value in (data or {}).items():
            self.set(key, value)
        self.ref(ref)

    def __repr__(self) -> str:
        return f"SearchForm(form={self.form.name!r}, ref={self._ref!r}, data={self.data!r})"

    # Template accessors

    @property
    def form_name(self) -> str:
        return self.form.name

    @property
    def form_method(self) -> str:
        return self.form.method

    @property
    def form_rel(self) -> Optional[str]:
        return self.form.rel

    @property
    def form_enctype(self) -> str:
        return self.form.enctype

    @property
    def form_action(self) -> str:
        return self.form.action

    @property
    def form_fields(self) -> Mapping[str, FieldSpec]:
        return self.form.fields

    @property
    def bound_ref(self) -> Optional[str]:
        """Reference token used when `submit` gets none."""
        return self._ref

    # Setters

    def set(self, field_name: str, value: Any) -> SearchForm:
        """Set a parameter of this form.

        - None is ignored.
        - "" clears the field, including values accumulated so far.
        - Repeatable fields append the value; other fields are overwritten.

        Args:
            field_name: Field name as declared by the template.
            value: New value, converted to text (booleans as true/false).

        Returns:
            The form itself.
        """
        if value is None:
            return self
        if value == "":
            self.data[field_name] = None
            return self

        spec = self.form.fields.get(field_name)
        if spec is not None and spec.repeatable:
            current = self.data.get(field_name)
            if not isinstance(current, list):
                current = []
                self.data[field_name] = current
            current.append(_to_text(value))
        else:
            self.data[field_name] = _to_text(value)
        return self

    def assign(self, accessor: str, value: Any) -> SearchForm:
        """Set a field through its snake_case accessor name.

        Raises:
            KeyError: If the template has no field behind ``accessor``.
        """
        try:
            field_name = self.accessors[accessor]
        except KeyError:
            raise KeyError(f"Form {self.form.name!r} has no field accessor {accessor!r}") from None
        return self.set(field_name, value)

    def query(self, *expr: Any) -> SearchForm:
        """Set the ``q`` field from a raw query string or predicate tuples.

        See `DocQuery.core.predicates.compile_query` for the accepted shapes.
        A raw query string is stored as-is and must be the only argument.
        """
        if not expr:
            raise ValueError("query() needs a query string or at least one predicate")
        if isinstance(expr[0], str):
            if len(expr) > 1:
                raise ValueError("query() takes a single query string; call it again to add another")
            return self.set("q", expr[0])
        return self.set("q", compile_query(expr[0] if len(expr) == 1 else list(expr)))

    q = query

    def page(self, page: Union[int, str]) -> SearchForm:
        return self.set("page", page)

    def page_size(self, page_size: Union[int, str]) -> SearchForm:
        return self.set("pageSize", page_size)

    def orderings(self, orderings: str) -> SearchForm:
        """Order results, e.g. ``"[my.article.date desc]"``."""
        return self.set("orderings", orderings)

    def fetch(self, fields: str) -> SearchForm:
        """Restrict the returned fragments to comma-separated ``fields``."""
        return self.set("fetch", fields)

    def fetch_links(self, fields: str) -> SearchForm:
        """Include the given fragments of linked documents."""
        return self.set("fetchLinks", fields)

    def lang(self, lang: str) -> SearchForm:
        return self.set("lang", lang)

    def ref(self, ref: Union[Ref, str, None]) -> SearchForm:
        """Bind the reference to submit against (a `Ref` or its token)."""
        if ref is not None:
            self._ref = ref.ref if isinstance(ref, Ref) else str(ref)
        return self

    # Submission

    def submit(self, ref: Union[Ref, str, None] = None) -> Response:
        """Submit the form and decode the page of results.

        Args:
            ref: Reference to use; binds it like `ref` does.

        Returns:
            Decoded response (documents + pagination).

        Raises:
            NoReferenceSetError: If no reference is bound.
            DecodingError: If the body is not a valid response document.
            FormSearchError: On any non-200 answer (see `submit_raw`).
        """
        body = self.submit_raw(ref)
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise DecodingError("Response body is not valid JSON", body=body) from e
        return decode_response(payload)

    def submit_raw(self, ref: Union[Ref, str, None] = None) -> str:
        """Submit the form and return the JSON body untouched.

        The reference must be bound beforehand, either at creation, through
        `ref`, or through the ``ref`` argument.

        Raises:
            NoReferenceSetError: If no reference is bound (nothing is sent).
            UnsupportedFormKindError: If the form is not a url-encoded GET.
            AuthenticationError: On HTTP 401.
            AuthorizationError: On HTTP 403.
            RefNotFoundError: On HTTP 404.
            FormSearchError: On any other non-200 status.
        """
        self.ref(ref)
        if not self._ref:
            raise NoReferenceSetError()

        params: dict[str, FieldValue] = {
            key: list(value) if isinstance(value, list) else value for key, value in self.data.items()
        }
        params[REF_FIELD] = self._ref

        cache_key = derive_cache_key(self.form_method, self.form_action, params)
        cache = self.api.cache if self.api.has_cache else None

        if cache is not None:
            cached = self._read_cache(cache, cache_key)
            if cached is not None:
                log.debug("Cache hit: %s", cache_key)
                return cached
            log.debug("Cache miss: %s", cache_key)

        if self.form_method != "GET" or self.form_enctype != FORM_URLENCODED:
            raise UnsupportedFormKindError(self.form_method, self.form_enctype)

        if self.api.access_token:
            params["access_token"] = self.api.access_token
        query = {key: value for key, value in params.items() if value is not None}

        response = self.api.transport.get(self.form_action, query, {"Accept": "application/json"})
        if response.status != 200:
            raise _error_for(response)

        ttl = parse_max_age(response.header("Cache-Control"))
        if ttl is not None and cache is not None:
            self._write_cache(cache, cache_key, response.body, ttl)
        return response.body

    @staticmethod
    def _read_cache(cache: ResultCache, key: str) -> Optional[str]:
        try:
            return cache.get(key)
        except Exception as e:  # noqa: BLE001 - caching is best effort
            log.warning("Cache read failed, treating as miss: %s", e)
            return None

    @staticmethod
    def _write_cache(cache: ResultCache, key: str, body: str, ttl: int) -> None:
        try:
            cache.set(key, body, ttl)
            log.debug("Cached %s for %ds", key, ttl)
        except Exception as e:  # noqa: BLE001 - caching is best effort
            log.warning("Cache write failed for %s: %s", key, e)


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_for(response: TransportResponse) -> FormSearchError:
    """Build the typed error for a non-200 response."""
    try:
        body: Any = json.loads(response.body)
    except ValueError:
        body = response.body
    error_cls = _ERRORS_BY_STATUS.get(response.status, FormSearchError)
    log.debug("Form submission failed: status=%s error=%s", response.status, error_cls.__name__)
    return error_cls(body, status_code=response.status)


def _reserved_names() -> frozenset[str]:
    """Member names a generated accessor must not shadow."""
    members = {name for name in dir(SearchForm) if not name.startswith("_")}
    members.update({"api", "form", "data", "accessors"})
    return frozenset(members - _SETTER_NAMES)
