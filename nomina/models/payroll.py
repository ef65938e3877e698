"""
Payroll model
"""

from dataclasses import dataclass
from typing import Optional

from nomina.errors import PayrollNotFound
from .base_model import BaseModel, validate_required_text


@dataclass
class Payroll(BaseModel):
    """A payroll owned by exactly one organization."""

    organization_id: Optional[str] = None
    name: Optional[str] = None
    description: str = ""

    parent_field = 'organization_id'
    not_found_error = PayrollNotFound

    def validate_organization_id(self):
        if not self.organization_id:
            return "payroll organization_id is required"
        return None

    def validate_name(self):
        return validate_required_text(self.name, "payroll name")
