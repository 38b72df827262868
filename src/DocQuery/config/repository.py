"""Repository configuration: known forms and refs.

Uses the service's own JSON shape so that a saved repository document can be
pasted under the ``repository`` key as YAML.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from DocQuery.config.common import get_section
from DocQuery.core.models import FormTemplate, Ref
from DocQuery.forms.templates import parse_repository


@dataclass(frozen=True, slots=True)
class RepositoryConfig:
    """Form templates and refs of the configured repository."""

    forms: Mapping[str, FormTemplate]
    refs: tuple[Ref, ...]


def load_repository(raw: Mapping[str, Any]) -> RepositoryConfig:
    """Load the ``repository`` section.

    Raises:
        TypeError: If forms/refs have the wrong shape.
        ValueError: If the section or a required form/ref key is missing.
    """
    section = get_section(raw, "repository", required=True)
    forms, refs = parse_repository(section)
    return RepositoryConfig(forms=forms, refs=refs)


def check_repository(config: RepositoryConfig) -> None:
    """Validate repository constraints.

    Raises:
        ValueError: If no form is declared or several refs claim to be master.
    """
    if not config.forms:
        raise ValueError("repository.forms must include at least one form")
    masters = [ref for ref in config.refs if ref.is_master]
    if len(masters) > 1:
        raise ValueError("repository.refs must include at most one master ref")
