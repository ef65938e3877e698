"""SurrealDbRepository class"""

import logging
from typing import Any, Dict, List, Optional, Type

from nomina.data.base import DbAdapter
from nomina.errors import Conflict
from nomina.models import BaseModel, Division, Job, Organization, Payroll
from nomina.repositories.base_repository import BaseRepository, RepositorySet

logger = logging.getLogger(__name__)


class SurrealDbRepository(BaseRepository):
    """
    Repository storing each record as ``<table>:<entity_id>`` in SurrealDB.

    Every call opens and closes the adapter context. The adapter keeps one
    connection per thread, so one adapter can serve concurrent request threads.
    """

    def __init__(self, db_adapter: DbAdapter, model: Type[BaseModel]):
        super().__init__(model)
        self.adapter = db_adapter

    def _execute_within_context(
        self,
        func,
        *args,
        **kwargs
    ):
        """Utility method to execute adapter methods within the context manager."""
        with self.adapter:
            return func(*args, **kwargs)

    def _process_data_before_save(self, instance: BaseModel) -> Dict[str, Any]:
        """Convert a model instance to a dict suitable for SurrealDB"""
        instance.prepare_for_save()
        return instance.as_dict(convert_datetime_to_iso_string=True)

    def _fetch(self, entity_id: str) -> BaseModel:
        if not entity_id:
            raise self._not_found(entity_id)
        data = self._execute_within_context(self.adapter.get_one, self.table_name, entity_id)
        if not data:
            raise self._not_found(entity_id)
        return self.model.from_dict(data)

    def create(self, instance: BaseModel) -> str:
        record = instance.copy()
        data = self._process_data_before_save(record)
        # Not atomic with the insert; CREATE on an existing record id also fails in the store
        if self._execute_within_context(self.adapter.get_one, self.table_name, record.entity_id):
            raise Conflict(record.entity_id)
        self._execute_within_context(self.adapter.insert, self.table_name, data)
        logger.debug("Created %s %s", self.table_name, record.entity_id)
        return record.entity_id

    def get(self, entity_id: str) -> BaseModel:
        return self._fetch(entity_id)

    def list_by_parent(self, parent_id: Optional[str] = None) -> List[BaseModel]:
        records = self._execute_within_context(
            self.adapter.get_many,
            self.table_name,
            self._parent_conditions(parent_id),
            sort=[(self.model.sort_field, 'ASC')],
        )
        return [self.model.from_dict(record) for record in records]

    def count_by_parent(self, parent_id: Optional[str] = None) -> int:
        return self._execute_within_context(
            self.adapter.get_count,
            self.table_name,
            self._parent_conditions(parent_id),
        )

    def _write(self, entity_id: str, patch: Dict[str, Any], allow_parent: bool) -> BaseModel:
        current = self._fetch(entity_id)
        if not patch:
            return current
        record = current.apply_patch(patch, allow_parent=allow_parent)
        data = self._process_data_before_save(record)
        saved = self._execute_within_context(self.adapter.save, self.table_name, data)
        if not saved:
            # Deleted between the read and the write
            raise self._not_found(entity_id)
        return self.model.from_dict(saved)

    def update(self, entity_id: str, patch: Dict[str, Any]) -> BaseModel:
        return self._write(entity_id, patch, allow_parent=False)

    def move(self, entity_id: str, new_parent_id: str) -> BaseModel:
        if self.model.parent_field is None:
            raise TypeError(f"{self.table_name} records have no owner to move between")
        return self._write(entity_id, {self.model.parent_field: new_parent_id}, allow_parent=True)

    def delete(self, entity_id: str) -> None:
        if not self._execute_within_context(self.adapter.delete, self.table_name, entity_id):
            raise self._not_found(entity_id)
        logger.debug("Deleted %s %s", self.table_name, entity_id)


def surrealdb_repositories(db_adapter: DbAdapter) -> RepositorySet:
    """Builds a RepositorySet persisting through the given SurrealDB adapter."""
    return RepositorySet(
        organizations=SurrealDbRepository(db_adapter, Organization),
        payrolls=SurrealDbRepository(db_adapter, Payroll),
        divisions=SurrealDbRepository(db_adapter, Division),
        jobs=SurrealDbRepository(db_adapter, Job),
    )
