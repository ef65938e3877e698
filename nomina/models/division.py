"""
Division model
"""

from dataclasses import dataclass
from typing import Optional

from nomina.errors import DivisionNotFound
from .base_model import BaseModel, validate_required_text


@dataclass
class Division(BaseModel):
    """
    A division of a payroll.

    Divisions of one payroll form a forest: ``parent_division_id`` is a lookup
    key into the same payroll's divisions, never an embedded object.
    """

    payroll_id: Optional[str] = None
    name: Optional[str] = None
    description: str = ""
    budget_code: Optional[str] = None
    parent_division_id: Optional[str] = None

    parent_field = 'payroll_id'
    not_found_error = DivisionNotFound

    def validate_payroll_id(self):
        if not self.payroll_id:
            return "division payroll_id is required"
        return None

    def validate_name(self):
        return validate_required_text(self.name, "division name")

    def validate_parent_division_id(self):
        if self.parent_division_id is not None and self.parent_division_id == self.entity_id:
            return "division cannot be its own parent"
        return None
