"""
Hierarchy validation.

Decides, before any write, whether a proposed mutation keeps the
Organization -> Payroll -> {Division, Job} containment graph consistent and
the division parent links a forest. The service only reads through the
repositories; graph shape is re-derived on every call because other
requests may be mutating it concurrently.
"""
import logging
from typing import Dict, Optional

from nomina.errors import (
    CrossPayrollParent,
    CycleDetected,
    HasDependents,
    NotFound,
    PayrollNotFound,
    SelfParent,
)
from nomina.models import Division, Job, Organization, Payroll
from nomina.repositories import RepositorySet

logger = logging.getLogger(__name__)


class HierarchyValidationService:
    """Read-only checks run by the orchestration services before they write."""

    def __init__(self, repositories: RepositorySet):
        self.repositories = repositories

    def validate_payroll_parent(self, organization_id: str) -> Organization:
        """
        Raises OrganizationNotFound unless the organization exists.
        """
        return self.repositories.organizations.get(organization_id)

    def validate_job_parent(self, payroll_id: str) -> Payroll:
        """
        Raises PayrollNotFound unless the payroll exists.
        """
        return self.repositories.payrolls.get(payroll_id)

    def validate_division_parent(self, payroll_id: str, parent_division_id: Optional[str] = None) -> Optional[Division]:
        """
        Checks that a division may be attached to ``payroll_id`` under ``parent_division_id``.

        Raises:
            PayrollNotFound: the payroll does not exist.
            DivisionNotFound: the parent division does not exist.
            CrossPayrollParent: the parent division belongs to another payroll.
        """
        self.repositories.payrolls.get(payroll_id)
        if parent_division_id is None:
            return None

        parent = self.repositories.divisions.get(parent_division_id)
        if parent.payroll_id != payroll_id:
            logger.warning("Rejected parent division %s: belongs to payroll %s, not %s",
                           parent_division_id, parent.payroll_id, payroll_id)
            raise CrossPayrollParent(parent_division_id, payroll_id)
        return parent

    def validate_division_move(self, division_id: str, new_parent_division_id: Optional[str] = None) -> Division:
        """
        Checks that ``division_id`` may be re-parented under ``new_parent_division_id``.

        ``None`` detaches the division into a root of its payroll's forest.

        Raises:
            DivisionNotFound: the division or the new parent does not exist.
            PayrollNotFound: the division's payroll has disappeared.
            CrossPayrollParent: the new parent belongs to another payroll.
            SelfParent: the division would become its own parent.
            CycleDetected: the new parent is a descendant of the division.
        """
        division = self.repositories.divisions.get(division_id)
        if new_parent_division_id == division_id:
            logger.warning("Rejected move of division %s under itself", division_id)
            raise SelfParent(division_id)

        self.validate_division_parent(division.payroll_id, new_parent_division_id)
        if new_parent_division_id is not None:
            self._ensure_not_ancestor(division, new_parent_division_id)
        return division

    def _ensure_not_ancestor(self, division: Division, start_id: str):
        """
        Walks parent links upward from ``start_id`` and fails if it meets ``division``.

        The walk is bounded by the payroll's division count, so it terminates on
        a corrupted graph; a revisited node or an exhausted bound also counts
        as a cycle.
        """
        bound = self.repositories.divisions.count_by_parent(division.payroll_id)
        visited = set()
        current_id = start_id
        steps = 0

        while current_id is not None:
            if current_id == division.entity_id or current_id in visited or steps > bound:
                logger.warning("Rejected move of division %s under %s: cycle after %d steps",
                               division.entity_id, start_id, steps)
                raise CycleDetected(division.entity_id, start_id)
            visited.add(current_id)
            steps += 1
            try:
                current = self.repositories.divisions.get(current_id)
            except NotFound:
                logger.debug("Ancestry walk from %s ended at dangling link %s", start_id, current_id)
                return
            current_id = current.parent_division_id

        logger.debug("Ancestry walk from %s reached a root in %d steps", start_id, steps)

    def validate_payroll_move(self, payroll_id: str, organization_id: str) -> Payroll:
        """Checks that a payroll exists and the target organization does too."""
        payroll = self.repositories.payrolls.get(payroll_id)
        self.validate_payroll_parent(organization_id)
        return payroll

    def validate_job_move(self, job_id: str, payroll_id: str) -> Job:
        """Checks that a job exists and the target payroll does too."""
        job = self.repositories.jobs.get(job_id)
        self.validate_job_parent(payroll_id)
        return job

    def ensure_payroll_in_organization(self, organization_id: str, payroll_id: str) -> Payroll:
        """
        Checks that ``payroll_id`` is addressed under its own organization.

        A payroll of another organization is reported as PayrollNotFound, as
        if it did not exist within ``organization_id``.
        """
        self.validate_payroll_parent(organization_id)
        payroll = self.repositories.payrolls.get(payroll_id)
        if payroll.organization_id != organization_id:
            raise PayrollNotFound(payroll_id)
        return payroll

    def dependents_of(self, entity_kind: str, entity_id: str) -> Dict[str, int]:
        """Counts the records directly owned by an entity, by kind."""
        repositories = self.repositories
        if entity_kind == Organization.kind():
            counts = {'payrolls': repositories.payrolls.count_by_parent(entity_id)}
        elif entity_kind == Payroll.kind():
            counts = {
                'divisions': repositories.divisions.count_by_parent(entity_id),
                'jobs': repositories.jobs.count_by_parent(entity_id),
            }
        elif entity_kind == Division.kind():
            division = repositories.divisions.get(entity_id)
            children = [d for d in repositories.divisions.list_by_parent(division.payroll_id)
                        if d.parent_division_id == entity_id]
            counts = {'divisions': len(children)}
        elif entity_kind == Job.kind():
            counts = {}
        else:
            raise ValueError(f"Unknown entity kind: {entity_kind}")
        return {name: count for name, count in counts.items() if count}

    def validate_deletable(self, entity_kind: str, entity_id: str):
        """
        Checks that an entity exists and nothing depends on it.

        Deletion never cascades: callers must remove leaves first.

        Raises:
            NotFound: (typed per kind) the entity does not exist.
            HasDependents: at least one dependent still references the entity.
        """
        self.repositories.for_kind(entity_kind).get(entity_id)
        dependents = self.dependents_of(entity_kind, entity_id)
        if dependents:
            logger.warning("Rejected delete of %s %s: dependents %s", entity_kind, entity_id, dependents)
            raise HasDependents(entity_kind, entity_id, dependents)
