"""Shared plumbing for the orchestration services."""
from typing import Any, Dict, Iterable, Optional

from nomina.repositories import RepositorySet
from nomina.services.hierarchy_validation import HierarchyValidationService


def normalize_text(value):
    """Trims surrounding whitespace; non-strings are left for model validation."""
    if isinstance(value, str):
        return value.strip()
    return value


class BaseService:
    """Base for one orchestration service per entity type."""

    # Free-text fields trimmed before they reach a repository
    text_fields: Iterable[str] = ()

    def __init__(self, repositories: RepositorySet, validator: Optional[HierarchyValidationService] = None):
        self.repositories = repositories
        self.validator = validator or HierarchyValidationService(repositories)

    def _normalize(self, values: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        values = dict(values or {})
        for name in self.text_fields:
            if name in values:
                values[name] = normalize_text(values[name])
        return values
