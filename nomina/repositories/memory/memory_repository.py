"""InMemoryRepository class"""
import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Type

from nomina.errors import Conflict
from nomina.models import BaseModel, Division, Job, Organization, Payroll
from nomina.repositories.base_repository import BaseRepository, RepositorySet

logger = logging.getLogger(__name__)


class InMemoryRepository(BaseRepository):
    """
    Repository keeping records in an ordered map guarded by a lock.

    Records are copied on the way in and on the way out, so no caller ever
    holds a reference into the store.
    """

    def __init__(self, model: Type[BaseModel]):
        super().__init__(model)
        self._records: "OrderedDict[str, BaseModel]" = OrderedDict()
        self._lock = threading.RLock()

    def _sort_key(self, record: BaseModel):
        value = getattr(record, self.model.sort_field)
        return (value is None, value or '')

    def create(self, instance: BaseModel) -> str:
        record = instance.copy()
        record.prepare_for_save()
        with self._lock:
            if record.entity_id in self._records:
                raise Conflict(record.entity_id)
            self._records[record.entity_id] = record
        logger.debug("Created %s %s", self.table_name, record.entity_id)
        return record.entity_id

    def get(self, entity_id: str) -> BaseModel:
        with self._lock:
            record = self._records.get(entity_id)
            if record is None:
                raise self._not_found(entity_id)
            return record.copy()

    def list_by_parent(self, parent_id: Optional[str] = None) -> List[BaseModel]:
        conditions = self._parent_conditions(parent_id)
        with self._lock:
            records = [
                record.copy() for record in self._records.values()
                if all(getattr(record, k) == v for k, v in conditions.items())
            ]
        return sorted(records, key=self._sort_key)

    def _write(self, entity_id: str, patch: Dict[str, Any], allow_parent: bool) -> BaseModel:
        with self._lock:
            current = self._records.get(entity_id)
            if current is None:
                raise self._not_found(entity_id)
            if not patch:
                return current.copy()
            record = current.apply_patch(patch, allow_parent=allow_parent)
            record.prepare_for_save()
            self._records[entity_id] = record
            return record.copy()

    def update(self, entity_id: str, patch: Dict[str, Any]) -> BaseModel:
        return self._write(entity_id, patch, allow_parent=False)

    def move(self, entity_id: str, new_parent_id: str) -> BaseModel:
        if self.model.parent_field is None:
            raise TypeError(f"{self.table_name} records have no owner to move between")
        return self._write(entity_id, {self.model.parent_field: new_parent_id}, allow_parent=True)

    def delete(self, entity_id: str) -> None:
        with self._lock:
            if self._records.pop(entity_id, None) is None:
                raise self._not_found(entity_id)
        logger.debug("Deleted %s %s", self.table_name, entity_id)


def in_memory_repositories() -> RepositorySet:
    """Builds a RepositorySet backed entirely by in-memory doubles."""
    return RepositorySet(
        organizations=InMemoryRepository(Organization),
        payrolls=InMemoryRepository(Payroll),
        divisions=InMemoryRepository(Division),
        jobs=InMemoryRepository(Job),
    )
