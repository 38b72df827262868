from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Sequence

EXPERIMENTS_COOKIE = "io.prismic.experiment"

PREVIEW_COOKIE = "io.prismic.preview"

FORM_URLENCODED = "application/x-www-form-urlencoded"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Static description of one form parameter.

    Attributes:
        field_type: Type tag declared by the service (e.g. "String", "Integer").
        default: Default value, or None when the field has none.
        repeatable: Whether the field accepts several values.
    """

    field_type: str
    default: Optional[str] = None
    repeatable: bool = False


@dataclass(frozen=True, slots=True)
class FormTemplate:
    """Server-declared description of a query endpoint.

    Attributes:
        name: Form name (e.g. "everything").
        method: HTTP method, upper case.
        enctype: Encoding type of the submitted parameters.
        action: URL the form is submitted to.
        fields: Ordered mapping of field name to `FieldSpec`.
        rel: Optional relationship tag.
    """

    name: str
    method: str
    enctype: str
    action: str
    fields: Mapping[str, FieldSpec] = field(default_factory=dict)
    rel: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def default_data(self) -> dict[str, str]:
        """Field name to default value, for fields that declare a default."""
        return {name: spec.default for name, spec in self.fields.items() if spec.default is not None}


@dataclass(frozen=True, slots=True)
class Ref:
    """A fixed point in time of the document repository.

    Every form submission runs against one reference so that the same
    URL always returns the same results.
    """

    id: str
    ref: str
    label: str
    is_master: bool = False
    scheduled_at: Optional[datetime] = None

    @property
    def master(self) -> bool:
        return self.is_master


@dataclass(frozen=True, slots=True)
class AlternateLanguage:
    """Stub of a document translation."""

    id: str
    uid: Optional[str]
    type: str
    lang: str


@dataclass(frozen=True, slots=True)
class Document:
    """One document returned by a form submission.

    Attributes:
        id: Service-assigned identifier.
        uid: Optional user-assigned identifier.
        type: Custom type tag.
        href: Canonical API URL of the document.
        tags: Document tags.
        slugs: Slugs, most recent first.
        first_publication_date: First publication datetime if known.
        last_publication_date: Last publication datetime if known.
        lang: Language code.
        alternate_languages: Other language versions of this document.
        fragments: Opaque content payload, keyed by fragment name.
    """

    id: str
    uid: Optional[str]
    type: str
    href: str
    tags: Sequence[str] = ()
    slugs: Sequence[str] = ()
    first_publication_date: Optional[datetime] = None
    last_publication_date: Optional[datetime] = None
    lang: Optional[str] = None
    alternate_languages: Sequence[AlternateLanguage] = ()
    fragments: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fragments", MappingProxyType(dict(self.fragments)))

    @property
    def slug(self) -> str:
        """Most recent slug, or "-" when the document has none."""
        return self.slugs[0] if self.slugs else "-"


@dataclass(frozen=True, slots=True)
class Response:
    """One page of results of a form submission.

    You may not get all matching documents in the first page; walk
    ``next_page`` or raise the page size to get more.
    """

    page: int
    results_per_page: int
    results_size: int
    total_results_size: int
    total_pages: int
    next_page: Optional[str]
    prev_page: Optional[str]
    results: Sequence[Document]

    # Paginator-style aliases
    @property
    def current_page(self) -> int:
        return self.page

    @property
    def limit_value(self) -> int:
        return self.results_per_page

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.results)

    def __getitem__(self, index: int) -> Document:
        return self.results[index]
