"""
Shared pytest fixtures: an in-memory repository wiring and the services built on it.
"""
import pytest

from nomina.repositories import in_memory_repositories
from nomina.services import build_services


@pytest.fixture
def repositories():
    return in_memory_repositories()


@pytest.fixture
def services(repositories):
    return build_services(repositories)


@pytest.fixture
def organization(services):
    return services.organizations.create("Acme")


@pytest.fixture
def payroll(services, organization):
    return services.payrolls.create(organization.entity_id, "2024-Q1", "First quarter")
