"""
Models for nomina
"""

from .base_model import BaseModel, get_uuid_hex
from nomina.errors import ModelValidationError
from .organization import Organization
from .payroll import Payroll
from .division import Division
from .job import Job

MODELS = {model.kind(): model for model in (Organization, Payroll, Division, Job)}
