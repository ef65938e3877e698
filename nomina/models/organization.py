"""
Organization model
"""

from dataclasses import dataclass
from typing import Optional

from nomina.errors import OrganizationNotFound
from .base_model import BaseModel, validate_required_text


@dataclass
class Organization(BaseModel):
    """An organization model. Root of the containment hierarchy."""

    name: Optional[str] = None

    not_found_error = OrganizationNotFound

    def validate_name(self):
        return validate_required_text(self.name, "organization name")
