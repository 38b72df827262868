"""Entry point holding a repository's forms, refs and capabilities."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

from DocQuery.cache.base import NullCache, ResultCache, is_enabled
from DocQuery.core.models import FormTemplate, Ref
from DocQuery.forms.search_form import SearchForm
from DocQuery.forms.templates import parse_repository
from DocQuery.transport.http import RequestsTransport, Transport
from DocQuery.utils.log import log


class Api:
    """Known forms and refs of one repository, plus the capabilities used to
    submit forms (transport, optional result cache, optional access token).

    Supports context manager protocol; closing only releases a transport the
    Api created itself.
    """

    def __init__(
        self,
        forms: Mapping[str, FormTemplate],
        refs: Iterable[Ref] = (),
        *,
        access_token: Optional[str] = None,
        transport: Optional[Transport] = None,
        cache: Optional[ResultCache] = None,
    ) -> None:
        self.forms = MappingProxyType(dict(forms))
        self.refs = tuple(refs)
        self.access_token = access_token or None
        self._owns_transport = transport is None
        self.transport: Transport = transport if transport is not None else RequestsTransport()
        self.cache: ResultCache = cache if cache is not None else NullCache()

    @classmethod
    def from_repository(cls, payload: Mapping[str, Any], **kwargs: Any) -> Api:
        """Build an Api from a repository document (``forms`` + ``refs``).

        Keyword arguments are passed to the constructor.
        """
        forms, refs = parse_repository(payload)
        log.debug("Repository parsed: forms=%s refs=%d", sorted(forms), len(refs))
        return cls(forms, refs, **kwargs)

    @property
    def has_cache(self) -> bool:
        return is_enabled(self.cache)

    @property
    def master_ref(self) -> Optional[Ref]:
        return next((ref for ref in self.refs if ref.is_master), None)

    def ref(self, label: str) -> Optional[Ref]:
        """Find a ref by label (or id)."""
        return next((ref for ref in self.refs if label in (ref.label, ref.id)), None)

    def form(
        self,
        name: str,
        data: Optional[Mapping[str, Any]] = None,
        ref: Union[Ref, str, None] = None,
    ) -> SearchForm:
        """Return a fresh `SearchForm` for the named form.

        Raises:
            KeyError: If the repository has no such form.
        """
        template = self.forms.get(name)
        if template is None:
            raise KeyError(f"Unknown form: {name} (available: {', '.join(sorted(self.forms))})")
        return SearchForm(self, template, data, ref)

    create_search_form = form

    def close(self) -> None:
        if self._owns_transport:
            self.transport.close()  # type: ignore[attr-defined]

    def __enter__(self) -> Api:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
