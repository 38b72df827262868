"""Field accessor table.

Maps snake_case accessor names to the camelCase field names a form template
declares, so callers can write ``form.assign("page_size", 20)`` for a
``pageSize`` field.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import AbstractSet, Iterable, Mapping

_FIELD_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_UPPER_RE = re.compile(r"([A-Z])")

REF_FIELD = "ref"


def accessor_name(field_name: str) -> str:
    """Rewrite camelCase boundaries as ``_lowercase`` (``fetchLinks`` -> ``fetch_links``)."""
    return _UPPER_RE.sub(r"_\1", field_name).lower()


def build_accessor_table(
    field_names: Iterable[str],
    reserved: AbstractSet[str] = frozenset(),
) -> Mapping[str, str]:
    """Build the accessor table of a form template.

    Fields are skipped when their name is not a plain identifier, when they
    are the ``ref`` field (which has its own setter), or when the accessor
    would shadow a reserved member name. The first field wins when two names
    map to the same accessor.

    Args:
        field_names: Field names in template order.
        reserved: Accessor names that must not be generated.

    Returns:
        Read-only mapping of accessor name to field name.
    """
    table: dict[str, str] = {}
    for name in field_names:
        if name == REF_FIELD or not _FIELD_NAME_RE.match(name):
            continue
        accessor = accessor_name(name)
        if accessor in reserved or accessor in table:
            continue
        table[accessor] = name
    return MappingProxyType(table)
