"""Cache key derivation for form submissions."""

from __future__ import annotations

from typing import Mapping, Sequence, Union
from urllib.parse import urlencode

ParamValue = Union[str, Sequence[str], None]


def encode_params(params: Mapping[str, ParamValue]) -> str:
    """URL-encode parameters in a canonical order.

    Keys are sorted; values of repeatable fields keep their stored order;
    absent (None) values are dropped.
    """
    pairs: list[tuple[str, str]] = []
    for key in sorted(params):
        value = params[key]
        if value is None:
            continue
        if isinstance(value, str):
            pairs.append((key, value))
        else:
            pairs.extend((key, item) for item in value)
    return urlencode(pairs)


def derive_cache_key(method: str, action: str, params: Mapping[str, ParamValue]) -> str:
    """Build ``"{METHOD}::{ACTION}?{encoded params}"``.

    Two parameter maps holding the same values produce the same key whatever
    their insertion order.
    """
    return f"{method}::{action}?{encode_params(params)}"
