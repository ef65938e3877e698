"""
Job model
"""

import math
from dataclasses import dataclass
from typing import Optional

from .base_model import BaseModel, validate_required_text


@dataclass
class Job(BaseModel):
    """A job position budgeted on a payroll."""

    payroll_id: Optional[str] = None
    title: Optional[str] = None
    salary: float = 0.0

    parent_field = 'payroll_id'
    sort_field = 'title'

    def validate_payroll_id(self):
        if not self.payroll_id:
            return "job payroll_id is required"
        return None

    def validate_title(self):
        return validate_required_text(self.title, "job title")

    def validate_salary(self):
        if isinstance(self.salary, bool) or not isinstance(self.salary, (int, float)):
            return f"salary must be a number, got {type(self.salary).__name__}"
        if math.isnan(self.salary) or self.salary < 0:
            return "salary cannot be negative"
        if math.isinf(self.salary):
            return "salary must be finite"
        return None
