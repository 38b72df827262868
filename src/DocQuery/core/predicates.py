"""Predicate query compiler.

Compiles structured predicate tuples into the service's `q` parameter.

Grammar
- query     = "[" predicate* "]"
- predicate = "[:d = " op "(" arg (", " arg)* ")]"
- arg       = path | "\"" text "\"" | literal | "[" arg (", " arg)* "]"

Argument rules
- strings starting with `my.` or `document` are field paths, emitted as-is
- any other string is a quoted literal (embedded quotes are NOT escaped)
- lists/tuples are emitted as bracketed argument lists
- other scalars use their text form (booleans as true/false)

Several predicates are AND-combined by plain concatenation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Sequence, Union

_PATH_PREFIXES = ("my.", "document")


@dataclass(frozen=True, slots=True)
class PathRef:
    """Reference to a document field, e.g. ``my.article.author``."""

    path: str


@dataclass(frozen=True, slots=True)
class Literal:
    """Scalar value; strings are quoted on output."""

    value: Any


@dataclass(frozen=True, slots=True)
class ArgList:
    """Bracketed list of arguments."""

    items: tuple[Argument, ...]


Argument = Union[PathRef, Literal, ArgList]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def to_argument(value: Any) -> Argument:
    """Classify a raw Python value as a predicate argument."""
    if isinstance(value, (PathRef, Literal, ArgList)):
        return value
    if _is_sequence(value):
        return ArgList(tuple(to_argument(item) for item in value))
    if isinstance(value, str) and value.startswith(_PATH_PREFIXES):
        return PathRef(value)
    return Literal(value)


def serialize_argument(arg: Argument) -> str:
    if isinstance(arg, ArgList):
        return "[" + ", ".join(serialize_argument(item) for item in arg.items) + "]"
    if isinstance(arg, PathRef):
        return arg.path
    value = arg.value
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _compile_predicate(predicate: Sequence[Any]) -> str:
    if not predicate:
        raise ValueError("Empty predicate")
    op, *args = predicate
    rendered = ", ".join(serialize_argument(to_argument(arg)) for arg in args)
    return f"[:d = {op}({rendered})]"


def compile_query(expr: str | Sequence[Any]) -> str:
    """Compile a predicate expression into a query string.

    Accepted shapes:
    - a string, returned unchanged (pre-built query)
    - one flat predicate: ``("at", "document.type", "blog-post")``
    - a list of predicates: ``[("at", ...), ("any", ...)]``
    - a list of predicate groups: ``[[("at", ...)], [("any", ...)]]``

    The list/group distinction only looks at the first element of the first
    predicate, so a lone predicate whose operator slot is itself a list is
    read as a group.

    Args:
        expr: Predicate expression.

    Returns:
        Query string for the `q` form field.

    Raises:
        ValueError: If the expression is empty.
    """
    if isinstance(expr, str):
        return expr

    predicates = list(expr)
    if not predicates:
        raise ValueError("Empty predicate expression")
    if not _is_sequence(predicates[0]):
        predicates = [predicates]

    if predicates[0] and _is_sequence(predicates[0][0]):
        groups = predicates
    else:
        groups = [predicates]

    return "[" + "".join(_compile_predicate(p) for group in groups for p in group) + "]"


def _format_date(value: date | datetime | int | str) -> Any:
    if isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    if isinstance(value, date):
        return value.isoformat()
    return value


# Predicate constructors: each returns one predicate tuple for compile_query.


def at(fragment: str, value: Any) -> tuple[Any, ...]:
    return ("at", fragment, value)


def not_(fragment: str, value: Any) -> tuple[Any, ...]:
    return ("not", fragment, value)


def any_(fragment: str, values: Sequence[Any]) -> tuple[Any, ...]:
    return ("any", fragment, list(values))


def in_(fragment: str, values: Sequence[Any]) -> tuple[Any, ...]:
    return ("in", fragment, list(values))


def has(fragment: str) -> tuple[Any, ...]:
    return ("has", fragment)


def missing(fragment: str) -> tuple[Any, ...]:
    return ("missing", fragment)


def fulltext(fragment: str, value: str) -> tuple[Any, ...]:
    return ("fulltext", fragment, value)


def similar(document_id: str, max_results: int) -> tuple[Any, ...]:
    return ("similar", document_id, max_results)


def lt(fragment: str, value: int | float) -> tuple[Any, ...]:
    return ("number.lt", fragment, value)


def gt(fragment: str, value: int | float) -> tuple[Any, ...]:
    return ("number.gt", fragment, value)


def in_range(fragment: str, before: int | float, after: int | float) -> tuple[Any, ...]:
    return ("number.inRange", fragment, before, after)


def date_before(fragment: str, before: date | datetime | int | str) -> tuple[Any, ...]:
    """Dates become epoch milliseconds (datetime) or ISO strings (date)."""
    return ("date.before", fragment, _format_date(before))


def date_after(fragment: str, after: date | datetime | int | str) -> tuple[Any, ...]:
    return ("date.after", fragment, _format_date(after))


def date_between(
    fragment: str,
    start: date | datetime | int | str,
    end: date | datetime | int | str,
) -> tuple[Any, ...]:
    return ("date.between", fragment, _format_date(start), _format_date(end))
