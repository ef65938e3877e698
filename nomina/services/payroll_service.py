"""Payroll use-cases."""
import logging
from typing import Any, Dict, List, Optional

from nomina.models import Payroll
from nomina.services.base_service import BaseService

logger = logging.getLogger(__name__)


class PayrollService(BaseService):
    text_fields = ('name', 'description')

    def create(self, organization_id: str, name: str, description: str = "") -> Payroll:
        payroll = Payroll(organization_id=organization_id,
                          **self._normalize({'name': name, 'description': description}))
        self.validator.validate_payroll_parent(organization_id)
        payroll.validate()
        entity_id = self.repositories.payrolls.create(payroll)
        logger.info("Created payroll %s in organization %s", entity_id, organization_id)
        return self.repositories.payrolls.get(entity_id)

    def get(self, payroll_id: str, organization_id: Optional[str] = None) -> Payroll:
        if organization_id is not None:
            return self.validator.ensure_payroll_in_organization(organization_id, payroll_id)
        return self.repositories.payrolls.get(payroll_id)

    def list(self, organization_id: str) -> List[Payroll]:
        self.validator.validate_payroll_parent(organization_id)
        return self.repositories.payrolls.list_by_parent(organization_id)

    def update(self, payroll_id: str, patch: Dict[str, Any], organization_id: Optional[str] = None) -> Payroll:
        """
        Applies a partial update. An ``organization_id`` in the patch relocates
        the payroll after the organization has been validated.

        ``organization_id`` scopes the lookup: a payroll of another
        organization is reported as PayrollNotFound.
        """
        self.get(payroll_id, organization_id)
        patch = self._normalize(patch)
        relocating = Payroll.parent_field in patch
        new_organization_id = patch.pop(Payroll.parent_field, None)
        if relocating:
            self.validator.validate_payroll_move(payroll_id, new_organization_id)
        payroll = self.repositories.payrolls.update(payroll_id, patch)
        if relocating and new_organization_id != payroll.organization_id:
            payroll = self.move(payroll_id, new_organization_id)
        return payroll

    def move(self, payroll_id: str, new_organization_id: str, organization_id: Optional[str] = None) -> Payroll:
        self.get(payroll_id, organization_id)
        self.validator.validate_payroll_move(payroll_id, new_organization_id)
        payroll = self.repositories.payrolls.move(payroll_id, new_organization_id)
        logger.info("Moved payroll %s to organization %s", payroll_id, new_organization_id)
        return payroll

    def delete(self, payroll_id: str, organization_id: Optional[str] = None) -> None:
        self.get(payroll_id, organization_id)
        self.validator.validate_deletable(Payroll.kind(), payroll_id)
        self.repositories.payrolls.delete(payroll_id)
        logger.info("Deleted payroll %s", payroll_id)
