"""
base repository for nomina
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from nomina.errors import NotFound
from nomina.models import BaseModel, Division, Job, Organization, Payroll


class BaseRepository(ABC):
    """
    Storage contract shared by every entity type.

    Implementations never cascade and never change the owner link of a
    record except through ``move``.
    """

    def __init__(self, model: Type[BaseModel]):
        self.model = model
        self.table_name = model.kind()

    def _not_found(self, entity_id: str) -> NotFound:
        if self.model.not_found_error is NotFound:
            return NotFound(f"{self.table_name} `{entity_id}` not found", entity_id)
        return self.model.not_found_error(entity_id)

    def _parent_conditions(self, parent_id: Optional[str]) -> Dict[str, Any]:
        if self.model.parent_field is None:
            return {}
        return {self.model.parent_field: parent_id}

    @abstractmethod
    def create(self, instance: BaseModel) -> str:
        """
        Stores a new record.

        :param instance: the record to store
        :return: the record's entity_id
        :raises Conflict: if a record with the same entity_id exists
        """

    @abstractmethod
    def get(self, entity_id: str) -> BaseModel:
        """
        Fetches one record.

        :raises NotFound: (the model's typed variant) if absent
        """

    @abstractmethod
    def list_by_parent(self, parent_id: Optional[str] = None) -> List[BaseModel]:
        """
        Lists every record owned by ``parent_id``, ordered by the model's sort field.

        Root models ignore ``parent_id`` and list everything.
        """

    @abstractmethod
    def update(self, entity_id: str, patch: Dict[str, Any]) -> BaseModel:
        """
        Merges ``patch`` into the stored record and writes it back.

        :raises NotFound: if absent
        :raises ModelValidationError: if the patch touches identity or owner fields,
            or the merged record is invalid
        """

    @abstractmethod
    def move(self, entity_id: str, new_parent_id: str) -> BaseModel:
        """Re-points the owner link of a record. Callers validate first."""

    @abstractmethod
    def delete(self, entity_id: str) -> None:
        """
        Removes one record. Dependents are left untouched.

        :raises NotFound: if absent
        """

    def exists(self, entity_id: Optional[str]) -> bool:
        if not entity_id:
            return False
        try:
            self.get(entity_id)
        except NotFound:
            return False
        return True

    def count_by_parent(self, parent_id: Optional[str] = None) -> int:
        return len(self.list_by_parent(parent_id))


@dataclass
class RepositorySet:
    """One repository per entity type, as wired at startup."""

    organizations: BaseRepository
    payrolls: BaseRepository
    divisions: BaseRepository
    jobs: BaseRepository

    def for_kind(self, entity_kind: str) -> BaseRepository:
        repositories = {
            Organization.kind(): self.organizations,
            Payroll.kind(): self.payrolls,
            Division.kind(): self.divisions,
            Job.kind(): self.jobs,
        }
        try:
            return repositories[entity_kind]
        except KeyError:
            raise ValueError(f"Unknown entity kind: {entity_kind}") from None
