"""Services for nomina"""
from dataclasses import dataclass

from nomina.repositories import RepositorySet
from .hierarchy_validation import HierarchyValidationService
from .organization_service import OrganizationService
from .payroll_service import PayrollService
from .division_service import DivisionService
from .job_service import JobService


@dataclass
class Services:
    """The use-cases the transport layer calls, sharing one validator."""

    validator: HierarchyValidationService
    organizations: OrganizationService
    payrolls: PayrollService
    divisions: DivisionService
    jobs: JobService


def build_services(repositories: RepositorySet) -> Services:
    validator = HierarchyValidationService(repositories)
    return Services(
        validator=validator,
        organizations=OrganizationService(repositories, validator),
        payrolls=PayrollService(repositories, validator),
        divisions=DivisionService(repositories, validator),
        jobs=JobService(repositories, validator),
    )
