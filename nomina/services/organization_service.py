"""Organization use-cases."""
import logging
from typing import Any, Dict, List

from nomina.models import Organization
from nomina.services.base_service import BaseService

logger = logging.getLogger(__name__)


class OrganizationService(BaseService):
    text_fields = ('name',)

    def create(self, name: str) -> Organization:
        organization = Organization(**self._normalize({'name': name}))
        entity_id = self.repositories.organizations.create(organization)
        logger.info("Created organization %s", entity_id)
        return self.repositories.organizations.get(entity_id)

    def get(self, organization_id: str) -> Organization:
        return self.repositories.organizations.get(organization_id)

    def list(self) -> List[Organization]:
        return self.repositories.organizations.list_by_parent()

    def update(self, organization_id: str, patch: Dict[str, Any]) -> Organization:
        return self.repositories.organizations.update(organization_id, self._normalize(patch))

    def delete(self, organization_id: str) -> None:
        self.validator.validate_deletable(Organization.kind(), organization_id)
        self.repositories.organizations.delete(organization_id)
        logger.info("Deleted organization %s", organization_id)
