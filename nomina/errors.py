"""
Error taxonomy for nomina.

Every failure raised by the core derives from NominaError and exposes a
stable ``kind`` (the class name) the transport layer can map to a response.
"""
from typing import Dict, Optional


class NominaError(Exception):
    """Base class for all typed nomina failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def as_dict(self) -> Dict[str, str]:
        return {'kind': self.kind, 'message': self.message}


class NotFound(NominaError):
    """Referenced entity is absent."""

    def __init__(self, message: str = None, entity_id: Optional[str] = None):
        self.entity_id = entity_id
        super().__init__(message or f"entity `{entity_id}` not found")


class OrganizationNotFound(NotFound):
    def __init__(self, entity_id: str):
        super().__init__(f"organization `{entity_id}` not found", entity_id)


class PayrollNotFound(NotFound):
    def __init__(self, entity_id: str):
        super().__init__(f"payroll `{entity_id}` not found", entity_id)


class DivisionNotFound(NotFound):
    def __init__(self, entity_id: str):
        super().__init__(f"division `{entity_id}` not found", entity_id)


class CrossPayrollParent(NominaError):
    """Parent division belongs to a different payroll."""

    def __init__(self, parent_division_id: str, payroll_id: str):
        self.parent_division_id = parent_division_id
        self.payroll_id = payroll_id
        super().__init__(
            f"parent division `{parent_division_id}` does not belong to payroll `{payroll_id}`")


class SelfParent(NominaError):
    def __init__(self, division_id: str):
        self.division_id = division_id
        super().__init__(f"division `{division_id}` cannot be its own parent")


class CycleDetected(NominaError):
    """Proposed parent link would close a loop in the division forest."""

    def __init__(self, division_id: str, parent_division_id: str):
        self.division_id = division_id
        self.parent_division_id = parent_division_id
        super().__init__(
            f"moving division `{division_id}` under `{parent_division_id}` would create a cycle")


class HasDependents(NominaError):
    """Entity cannot be deleted while other entities still reference it."""

    def __init__(self, entity_kind: str, entity_id: str, dependents: Dict[str, int]):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        self.dependents = dependents
        summary = ', '.join(f"{count} {name}" for name, count in dependents.items())
        super().__init__(f"{entity_kind} `{entity_id}` still has dependents: {summary}")


class Conflict(NominaError):
    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"entity `{entity_id}` already exists")


class DatabaseError(NominaError):
    """The persistent store failed or returned something unusable."""


class ModelValidationError(NominaError):
    """
    Exception raised when one or more validation errors occur in a model.

    Attributes:
        errors (list): A list of error messages returned from validation methods.
    """

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        elif not isinstance(errors, list):
            raise ValueError("Errors should be a string or a list of strings")
        self.errors = errors
        super().__init__(self.format_errors())

    def format_errors(self):
        return "\n".join(self.errors)

    def __str__(self):
        return self.format_errors()


class ConfigurationError(NominaError):
    """Required process configuration is missing or malformed."""
