"""DocQuery: query client for form-based document repository APIs."""

from __future__ import annotations

from DocQuery.api import Api
from DocQuery.cache import LruCache, NullCache, SqliteCache
from DocQuery.core import predicates
from DocQuery.core.errors import (
    AuthenticationError,
    AuthorizationError,
    DecodingError,
    DocQueryError,
    FormSearchError,
    NoReferenceSetError,
    RefNotFoundError,
    UnsupportedFormKindError,
)
from DocQuery.core.models import (
    EXPERIMENTS_COOKIE,
    PREVIEW_COOKIE,
    AlternateLanguage,
    Document,
    FieldSpec,
    FormTemplate,
    Ref,
    Response,
)
from DocQuery.core.predicates import compile_query
from DocQuery.forms.search_form import SearchForm
from DocQuery.transport.http import RequestsTransport, TransportResponse

__version__ = "0.1.0"

__all__ = [
    "Api",
    "SearchForm",
    "FormTemplate",
    "FieldSpec",
    "Ref",
    "Response",
    "Document",
    "AlternateLanguage",
    "compile_query",
    "predicates",
    "LruCache",
    "NullCache",
    "SqliteCache",
    "RequestsTransport",
    "TransportResponse",
    "EXPERIMENTS_COOKIE",
    "PREVIEW_COOKIE",
    "DocQueryError",
    "NoReferenceSetError",
    "UnsupportedFormKindError",
    "FormSearchError",
    "AuthenticationError",
    "AuthorizationError",
    "RefNotFoundError",
    "DecodingError",
]
