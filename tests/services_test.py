"""
Tests for the orchestration services
"""
import pytest

from nomina.errors import (
    CrossPayrollParent,
    CycleDetected,
    DivisionNotFound,
    HasDependents,
    ModelValidationError,
    NotFound,
    OrganizationNotFound,
    PayrollNotFound,
    SelfParent,
)


class TestOrganizationService:

    def test_create_trims_name(self, services):
        organization = services.organizations.create("  Acme  ")

        assert organization.name == "Acme"
        assert services.organizations.get(organization.entity_id) == organization

    def test_create_rejects_empty_name(self, services):
        with pytest.raises(ModelValidationError):
            services.organizations.create("   ")

        assert services.organizations.list() == []

    def test_list_is_sorted_by_name(self, services):
        services.organizations.create("Zeta")
        services.organizations.create("Alpha")

        assert [o.name for o in services.organizations.list()] == ["Alpha", "Zeta"]

    def test_update_name(self, services, organization):
        updated = services.organizations.update(organization.entity_id, {'name': " Acme Corp "})

        assert updated.name == "Acme Corp"

    def test_update_with_empty_patch_is_identity(self, services, organization):
        assert services.organizations.update(organization.entity_id, {}) == organization

    def test_delete_with_payroll_rejected(self, services, organization, payroll):
        with pytest.raises(HasDependents):
            services.organizations.delete(organization.entity_id)

        assert services.organizations.get(organization.entity_id) == organization

    def test_delete_leaf(self, services, organization):
        services.organizations.delete(organization.entity_id)

        with pytest.raises(OrganizationNotFound):
            services.organizations.get(organization.entity_id)


class TestPayrollService:

    def test_create_under_missing_organization_writes_nothing(self, services, repositories):
        with pytest.raises(OrganizationNotFound):
            services.payrolls.create("missing", "2024-Q1")

        assert repositories.payrolls.list_by_parent("missing") == []

    def test_list_requires_organization(self, services, organization, payroll):
        assert services.payrolls.list(organization.entity_id) == [payroll]
        with pytest.raises(OrganizationNotFound):
            services.payrolls.list("missing")

    def test_get_scoped_to_organization(self, services, organization, payroll):
        other = services.organizations.create("Other")

        assert services.payrolls.get(payroll.entity_id, organization.entity_id) == payroll
        with pytest.raises(PayrollNotFound):
            services.payrolls.get(payroll.entity_id, other.entity_id)

    def test_update_description_only(self, services, payroll):
        updated = services.payrolls.update(payroll.entity_id, {'description': "  Monthly  "})

        assert updated.description == "Monthly"
        assert updated.organization_id == payroll.organization_id

    def test_update_with_organization_relocates(self, services, payroll):
        other = services.organizations.create("Other")

        updated = services.payrolls.update(payroll.entity_id, {'name': "2024-Q2", 'organization_id': other.entity_id})

        assert updated.name == "2024-Q2"
        assert updated.organization_id == other.entity_id

    def test_move_to_missing_organization(self, services, payroll):
        with pytest.raises(OrganizationNotFound):
            services.payrolls.move(payroll.entity_id, "missing")

        assert services.payrolls.get(payroll.entity_id).organization_id == payroll.organization_id

    def test_update_relocation_to_missing_organization_writes_nothing(self, services, payroll):
        with pytest.raises(OrganizationNotFound):
            services.payrolls.update(payroll.entity_id, {'name': "Renamed", 'organization_id': "missing"})

        assert services.payrolls.get(payroll.entity_id) == payroll


class TestDivisionService:

    def test_create_with_missing_payroll(self, services):
        with pytest.raises(PayrollNotFound):
            services.divisions.create("missing", "Engineering")

    def test_create_with_missing_parent_writes_nothing(self, services, payroll):
        with pytest.raises(DivisionNotFound):
            services.divisions.create(payroll.entity_id, "Backend", parent_division_id="missing")

        assert services.divisions.list(payroll.entity_id) == []

    def test_create_tree_and_list(self, services, payroll):
        engineering = services.divisions.create(payroll.entity_id, "Engineering", budget_code=" ENG-01 ")
        backend = services.divisions.create(payroll.entity_id, "Backend", parent_division_id=engineering.entity_id)

        assert engineering.budget_code == "ENG-01"
        assert backend.parent_division_id == engineering.entity_id
        assert [d.name for d in services.divisions.list(payroll.entity_id)] == ["Backend", "Engineering"]

    def test_list_scoped_to_organization(self, services, organization, payroll):
        other = services.organizations.create("Other")

        assert services.divisions.list(payroll.entity_id, organization.entity_id) == []
        with pytest.raises(PayrollNotFound):
            services.divisions.list(payroll.entity_id, other.entity_id)
        with pytest.raises(PayrollNotFound):
            services.divisions.list("missing")

    def test_get_scoped_to_payroll(self, services, organization, payroll):
        other_payroll = services.payrolls.create(organization.entity_id, "2024-Q2")
        division = services.divisions.create(payroll.entity_id, "Engineering")

        assert services.divisions.get(division.entity_id, payroll.entity_id, organization.entity_id) == division
        with pytest.raises(DivisionNotFound):
            services.divisions.get(division.entity_id, other_payroll.entity_id)

    def test_rename_skips_hierarchy_validation(self, services, repositories, payroll):
        engineering = services.divisions.create(payroll.entity_id, "Engineering")
        backend = services.divisions.create(payroll.entity_id, "Backend", parent_division_id=engineering.entity_id)
        # Corrupt the parent link; a rename must still go through
        repositories.divisions.update(engineering.entity_id, {'parent_division_id': backend.entity_id})

        renamed = services.divisions.update(backend.entity_id, {'name': "Platform"})

        assert renamed.name == "Platform"

    def test_update_detaches_to_root(self, services, payroll):
        engineering = services.divisions.create(payroll.entity_id, "Engineering")
        backend = services.divisions.create(payroll.entity_id, "Backend", parent_division_id=engineering.entity_id)

        updated = services.divisions.update(backend.entity_id, {'parent_division_id': None})

        assert updated.parent_division_id is None

    def test_update_cannot_change_payroll(self, services, organization, payroll):
        other_payroll = services.payrolls.create(organization.entity_id, "2024-Q2")
        division = services.divisions.create(payroll.entity_id, "Engineering")

        with pytest.raises(ModelValidationError):
            services.divisions.update(division.entity_id, {'payroll_id': other_payroll.entity_id})

    def test_move_self_parent(self, services, payroll):
        division = services.divisions.create(payroll.entity_id, "Engineering")

        with pytest.raises(SelfParent):
            services.divisions.move(division.entity_id, division.entity_id)

    def test_move_under_descendant_leaves_graph_unchanged(self, services, payroll):
        root = services.divisions.create(payroll.entity_id, "Root")
        child = services.divisions.create(payroll.entity_id, "Child", parent_division_id=root.entity_id)
        grandchild = services.divisions.create(payroll.entity_id, "Grandchild", parent_division_id=child.entity_id)

        with pytest.raises(CycleDetected):
            services.divisions.move(root.entity_id, grandchild.entity_id)

        assert services.divisions.get(root.entity_id).parent_division_id is None

    def test_delete_parent_division_rejected(self, services, payroll):
        engineering = services.divisions.create(payroll.entity_id, "Engineering")
        backend = services.divisions.create(payroll.entity_id, "Backend", parent_division_id=engineering.entity_id)

        with pytest.raises(HasDependents):
            services.divisions.delete(engineering.entity_id)

        services.divisions.delete(backend.entity_id)
        services.divisions.delete(engineering.entity_id)
        with pytest.raises(DivisionNotFound):
            services.divisions.get(engineering.entity_id)


class TestJobService:

    def test_create_with_missing_payroll_writes_nothing(self, services, repositories):
        with pytest.raises(PayrollNotFound):
            services.jobs.create("missing", "Engineer", 100.0)

        assert repositories.jobs.list_by_parent("missing") == []

    @pytest.mark.parametrize("salary", [0, 0.0, 1500.5])
    def test_non_negative_salary_accepted(self, services, payroll, salary):
        job = services.jobs.create(payroll.entity_id, "Engineer", salary)

        assert job.salary == salary

    @pytest.mark.parametrize("salary", [-0.01, -100, "100", None, True, float('nan')])
    def test_invalid_salary_rejected(self, services, payroll, salary):
        with pytest.raises(ModelValidationError):
            services.jobs.create(payroll.entity_id, "Engineer", salary)

        assert services.jobs.list(payroll.entity_id) == []

    def test_list_sorted_by_title(self, services, payroll):
        services.jobs.create(payroll.entity_id, "Tester", 1.0)
        services.jobs.create(payroll.entity_id, "Architect", 2.0)

        assert [j.title for j in services.jobs.list(payroll.entity_id)] == ["Architect", "Tester"]

    def test_get_scoped_to_payroll(self, services, organization, payroll):
        other_payroll = services.payrolls.create(organization.entity_id, "2024-Q2")
        job = services.jobs.create(payroll.entity_id, "Engineer", 1.0)

        assert services.jobs.get(job.entity_id, payroll.entity_id) == job
        with pytest.raises(NotFound):
            services.jobs.get(job.entity_id, other_payroll.entity_id)

    def test_update_salary_and_relocate(self, services, organization, payroll):
        other_payroll = services.payrolls.create(organization.entity_id, "2024-Q2")
        job = services.jobs.create(payroll.entity_id, "Engineer", 1.0)

        updated = services.jobs.update(job.entity_id, {'salary': 2.0, 'payroll_id': other_payroll.entity_id})

        assert updated.salary == 2.0
        assert updated.payroll_id == other_payroll.entity_id

    def test_move_to_missing_payroll(self, services, payroll):
        job = services.jobs.create(payroll.entity_id, "Engineer", 1.0)

        with pytest.raises(PayrollNotFound):
            services.jobs.move(job.entity_id, "missing")

    def test_get_twice_is_stable(self, services, payroll):
        job = services.jobs.create(payroll.entity_id, "Engineer", 1.0)

        assert services.jobs.get(job.entity_id) == services.jobs.get(job.entity_id)


class TestScenarios:

    def test_engineering_backend_cycle(self, services):
        acme = services.organizations.create("Acme")
        q1 = services.payrolls.create(acme.entity_id, "2024-Q1")
        engineering = services.divisions.create(q1.entity_id, "Engineering")
        backend = services.divisions.create(q1.entity_id, "Backend", parent_division_id=engineering.entity_id)

        with pytest.raises(CycleDetected):
            services.divisions.update(engineering.entity_id, {'parent_division_id': backend.entity_id})

    def test_cross_payroll_parent(self, services):
        acme = services.organizations.create("Acme")
        payroll_a = services.payrolls.create(acme.entity_id, "A")
        payroll_b = services.payrolls.create(acme.entity_id, "B")
        division_a = services.divisions.create(payroll_a.entity_id, "Division A")
        division_b = services.divisions.create(payroll_b.entity_id, "Division B")

        with pytest.raises(CrossPayrollParent):
            services.divisions.update(division_a.entity_id, {'parent_division_id': division_b.entity_id})

    def test_delete_payroll_after_its_job(self, services):
        acme = services.organizations.create("Acme")
        payroll = services.payrolls.create(acme.entity_id, "2024-Q1")
        job = services.jobs.create(payroll.entity_id, "Engineer", 1000.0)

        with pytest.raises(HasDependents):
            services.payrolls.delete(payroll.entity_id)

        services.jobs.delete(job.entity_id)
        services.payrolls.delete(payroll.entity_id)

        with pytest.raises(PayrollNotFound):
            services.payrolls.get(payroll.entity_id)


@pytest.mark.parametrize("missing_id", ["", None])
def test_create_with_empty_parent_id_is_not_found(services, missing_id):
    with pytest.raises(OrganizationNotFound):
        services.payrolls.create(missing_id, "2024-Q1")
    with pytest.raises(PayrollNotFound):
        services.divisions.create(missing_id, "Engineering")
    with pytest.raises(PayrollNotFound):
        services.jobs.create(missing_id, "Engineer", 1.0)


def test_missing_parent_reported_before_invalid_fields(services):
    with pytest.raises(PayrollNotFound):
        services.divisions.create("missing", "   ")
    with pytest.raises(PayrollNotFound):
        services.jobs.create("missing", "", -1)


def test_optional_free_text_may_be_empty(services, payroll):
    division = services.divisions.create(payroll.entity_id, "Engineering", description="   ")
    other = services.payrolls.create(payroll.organization_id, "2024-Q2", "  ")

    assert division.description == ""
    assert division.budget_code is None
    assert other.description == ""


class TestScopedWrites:

    @pytest.fixture
    def other_organization(self, services):
        return services.organizations.create("Other")

    @pytest.fixture
    def other_payroll(self, services, organization):
        return services.payrolls.create(organization.entity_id, "2024-Q2")

    def test_payroll_writes_under_wrong_organization(self, services, payroll, other_organization):
        with pytest.raises(PayrollNotFound):
            services.payrolls.update(payroll.entity_id, {'name': "Renamed"}, other_organization.entity_id)
        with pytest.raises(PayrollNotFound):
            services.payrolls.move(payroll.entity_id, other_organization.entity_id, other_organization.entity_id)
        with pytest.raises(PayrollNotFound):
            services.payrolls.delete(payroll.entity_id, other_organization.entity_id)

        assert services.payrolls.get(payroll.entity_id) == payroll

    def test_payroll_writes_under_own_organization(self, services, organization, payroll):
        updated = services.payrolls.update(payroll.entity_id, {'name': "Renamed"}, organization.entity_id)
        services.payrolls.delete(payroll.entity_id, organization.entity_id)

        assert updated.name == "Renamed"
        with pytest.raises(PayrollNotFound):
            services.payrolls.get(payroll.entity_id)

    def test_division_writes_under_wrong_payroll(self, services, payroll, other_payroll):
        division = services.divisions.create(payroll.entity_id, "Engineering")
        parent = services.divisions.create(payroll.entity_id, "Company")

        with pytest.raises(DivisionNotFound):
            services.divisions.update(division.entity_id, {'name': "Renamed"}, other_payroll.entity_id)
        with pytest.raises(DivisionNotFound):
            services.divisions.move(division.entity_id, parent.entity_id, other_payroll.entity_id)
        with pytest.raises(DivisionNotFound):
            services.divisions.delete(division.entity_id, other_payroll.entity_id)

        assert services.divisions.get(division.entity_id) == division

    def test_division_writes_under_wrong_organization(self, services, payroll, other_organization):
        division = services.divisions.create(payroll.entity_id, "Engineering")

        with pytest.raises(DivisionNotFound):
            services.divisions.get(division.entity_id, organization_id=other_organization.entity_id)
        with pytest.raises(DivisionNotFound):
            services.divisions.delete(division.entity_id, organization_id=other_organization.entity_id)
        with pytest.raises(PayrollNotFound):
            services.divisions.update(division.entity_id, {'name': "Renamed"},
                                      payroll.entity_id, other_organization.entity_id)

        assert services.divisions.get(division.entity_id) == division

    def test_division_writes_under_own_scope(self, services, organization, payroll):
        division = services.divisions.create(payroll.entity_id, "Engineering")
        parent = services.divisions.create(payroll.entity_id, "Company")

        moved = services.divisions.move(division.entity_id, parent.entity_id,
                                        payroll.entity_id, organization.entity_id)
        services.divisions.delete(division.entity_id, payroll.entity_id, organization.entity_id)

        assert moved.parent_division_id == parent.entity_id
        with pytest.raises(DivisionNotFound):
            services.divisions.get(division.entity_id)

    def test_job_writes_under_wrong_payroll(self, services, payroll, other_payroll):
        job = services.jobs.create(payroll.entity_id, "Engineer", 1.0)

        with pytest.raises(NotFound):
            services.jobs.update(job.entity_id, {'salary': 2.0}, other_payroll.entity_id)
        with pytest.raises(NotFound):
            services.jobs.move(job.entity_id, other_payroll.entity_id, other_payroll.entity_id)
        with pytest.raises(NotFound):
            services.jobs.delete(job.entity_id, other_payroll.entity_id)

        assert services.jobs.get(job.entity_id) == job

    def test_job_writes_under_wrong_organization(self, services, payroll, other_organization):
        job = services.jobs.create(payroll.entity_id, "Engineer", 1.0)

        with pytest.raises(NotFound):
            services.jobs.delete(job.entity_id, organization_id=other_organization.entity_id)

        assert services.jobs.get(job.entity_id) == job

    def test_job_writes_under_own_scope(self, services, organization, payroll, other_payroll):
        job = services.jobs.create(payroll.entity_id, "Engineer", 1.0)

        moved = services.jobs.move(job.entity_id, other_payroll.entity_id, payroll.entity_id, organization.entity_id)
        services.jobs.delete(job.entity_id, other_payroll.entity_id)

        assert moved.payroll_id == other_payroll.entity_id
        with pytest.raises(NotFound):
            services.jobs.get(job.entity_id)
