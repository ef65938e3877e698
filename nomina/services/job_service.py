"""Job use-cases."""
import logging
from typing import Any, Dict, List, Optional

from nomina.errors import NotFound
from nomina.models import Job
from nomina.services.base_service import BaseService

logger = logging.getLogger(__name__)


class JobService(BaseService):
    text_fields = ('title',)

    def create(self, payroll_id: str, title: str, salary: float) -> Job:
        job = Job(payroll_id=payroll_id, salary=salary, **self._normalize({'title': title}))
        self.validator.validate_job_parent(payroll_id)
        job.validate()
        entity_id = self.repositories.jobs.create(job)
        logger.info("Created job %s in payroll %s", entity_id, payroll_id)
        return self.repositories.jobs.get(entity_id)

    def get(
        self,
        job_id: str,
        payroll_id: Optional[str] = None,
        organization_id: Optional[str] = None
    ) -> Job:
        if organization_id is not None and payroll_id is not None:
            self.validator.ensure_payroll_in_organization(organization_id, payroll_id)
        job = self.repositories.jobs.get(job_id)
        if payroll_id is not None and job.payroll_id != payroll_id:
            raise NotFound(f"job `{job_id}` not found", job_id)
        if organization_id is not None and payroll_id is None:
            payroll = self.repositories.payrolls.get(job.payroll_id)
            if payroll.organization_id != organization_id:
                raise NotFound(f"job `{job_id}` not found", job_id)
        return job

    def list(self, payroll_id: str, organization_id: Optional[str] = None) -> List[Job]:
        if organization_id is not None:
            self.validator.ensure_payroll_in_organization(organization_id, payroll_id)
        else:
            self.validator.validate_job_parent(payroll_id)
        return self.repositories.jobs.list_by_parent(payroll_id)

    def update(
        self,
        job_id: str,
        patch: Dict[str, Any],
        payroll_id: Optional[str] = None,
        organization_id: Optional[str] = None
    ) -> Job:
        """
        Applies a partial update. A ``payroll_id`` in the patch relocates the
        job after the payroll has been validated; the ``payroll_id`` argument
        only scopes the lookup.
        """
        self.get(job_id, payroll_id, organization_id)
        patch = self._normalize(patch)
        relocating = Job.parent_field in patch
        new_payroll_id = patch.pop(Job.parent_field, None)
        if relocating:
            self.validator.validate_job_move(job_id, new_payroll_id)
        job = self.repositories.jobs.update(job_id, patch)
        if relocating and new_payroll_id != job.payroll_id:
            job = self.move(job_id, new_payroll_id)
        return job

    def move(
        self,
        job_id: str,
        new_payroll_id: str,
        payroll_id: Optional[str] = None,
        organization_id: Optional[str] = None
    ) -> Job:
        self.get(job_id, payroll_id, organization_id)
        self.validator.validate_job_move(job_id, new_payroll_id)
        job = self.repositories.jobs.move(job_id, new_payroll_id)
        logger.info("Moved job %s to payroll %s", job_id, new_payroll_id)
        return job

    def delete(self, job_id: str, payroll_id: Optional[str] = None, organization_id: Optional[str] = None) -> None:
        self.get(job_id, payroll_id, organization_id)
        self.validator.validate_deletable(Job.kind(), job_id)
        self.repositories.jobs.delete(job_id)
        logger.info("Deleted job %s", job_id)
