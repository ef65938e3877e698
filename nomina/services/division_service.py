"""Division use-cases."""
import logging
from typing import Any, Dict, List, Optional

from nomina.errors import DivisionNotFound
from nomina.models import Division
from nomina.services.base_service import BaseService

logger = logging.getLogger(__name__)

PARENT_DIVISION_FIELD = 'parent_division_id'


class DivisionService(BaseService):
    text_fields = ('name', 'description', 'budget_code')

    def create(
        self,
        payroll_id: str,
        name: str,
        description: str = "",
        budget_code: Optional[str] = None,
        parent_division_id: Optional[str] = None
    ) -> Division:
        division = Division(
            payroll_id=payroll_id,
            parent_division_id=parent_division_id,
            **self._normalize({'name': name, 'description': description, 'budget_code': budget_code})
        )
        self.validator.validate_division_parent(payroll_id, parent_division_id)
        division.validate()
        entity_id = self.repositories.divisions.create(division)
        logger.info("Created division %s in payroll %s", entity_id, payroll_id)
        return self.repositories.divisions.get(entity_id)

    def get(
        self,
        division_id: str,
        payroll_id: Optional[str] = None,
        organization_id: Optional[str] = None
    ) -> Division:
        """
        Fetches a division, optionally scoped to a payroll and organization.

        A division addressed under a payroll or organization it does not
        belong to is reported as DivisionNotFound.
        """
        if organization_id is not None and payroll_id is not None:
            self.validator.ensure_payroll_in_organization(organization_id, payroll_id)
        division = self.repositories.divisions.get(division_id)
        if payroll_id is not None and division.payroll_id != payroll_id:
            raise DivisionNotFound(division_id)
        if organization_id is not None and payroll_id is None:
            payroll = self.repositories.payrolls.get(division.payroll_id)
            if payroll.organization_id != organization_id:
                raise DivisionNotFound(division_id)
        return division

    def list(self, payroll_id: str, organization_id: Optional[str] = None) -> List[Division]:
        if organization_id is not None:
            self.validator.ensure_payroll_in_organization(organization_id, payroll_id)
        else:
            self.repositories.payrolls.get(payroll_id)
        return self.repositories.divisions.list_by_parent(payroll_id)

    def update(
        self,
        division_id: str,
        patch: Dict[str, Any],
        payroll_id: Optional[str] = None,
        organization_id: Optional[str] = None
    ) -> Division:
        """
        Applies a partial update.

        Hierarchy validation runs only when ``parent_division_id`` is part of
        the patch; ``None`` detaches the division into a root.
        """
        self.get(division_id, payroll_id, organization_id)
        patch = self._normalize(patch)
        if PARENT_DIVISION_FIELD in patch:
            self.validator.validate_division_move(division_id, patch[PARENT_DIVISION_FIELD])
        division = self.repositories.divisions.update(division_id, patch)
        if PARENT_DIVISION_FIELD in patch:
            logger.info("Moved division %s under %s", division_id, patch[PARENT_DIVISION_FIELD])
        return division

    def move(
        self,
        division_id: str,
        new_parent_division_id: Optional[str],
        payroll_id: Optional[str] = None,
        organization_id: Optional[str] = None
    ) -> Division:
        return self.update(division_id, {PARENT_DIVISION_FIELD: new_parent_division_id}, payroll_id, organization_id)

    def delete(self, division_id: str, payroll_id: Optional[str] = None, organization_id: Optional[str] = None) -> None:
        self.get(division_id, payroll_id, organization_id)
        self.validator.validate_deletable(Division.kind(), division_id)
        self.repositories.divisions.delete(division_id)
        logger.info("Deleted division %s", division_id)
