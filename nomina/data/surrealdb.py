import asyncio
import logging
import threading
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import UUID
from surrealdb import AsyncSurreal

from nomina.config import SurrealConfig
from nomina.data.base import DbAdapter
from nomina.errors import DatabaseError

logger = logging.getLogger(__name__)


class SurrealDbAdapter(DbAdapter):
    """SurrealDB adapter for interacting with SurrealDB."""

    def __init__(
        self, endpoint: str, username: str, password: str, namespace: str, db_name: str
    ):
        """Initializes a new SurrealDB adapter."""
        self._endpoint = endpoint
        self._username = username
        self._password = password
        self._namespace = namespace
        self._db_name = db_name
        # Each thread entering the adapter gets its own event loop and connection
        self._local = threading.local()

    @property
    def _db(self):
        return getattr(self._local, "db", None)

    @_db.setter
    def _db(self, value):
        self._local.db = value

    @property
    def _event_loop(self):
        return getattr(self._local, "event_loop", None)

    @_event_loop.setter
    def _event_loop(self, value):
        self._local.event_loop = value

    @classmethod
    def from_config(cls, config: SurrealConfig) -> 'SurrealDbAdapter':
        return cls(
            endpoint=config.url,
            username=config.username,
            password=config.password,
            namespace=config.namespace,
            db_name=config.database,
        )

    def __enter__(self):
        """Context manager entry point for preparing DB connection."""
        self._event_loop = asyncio.new_event_loop()
        try:
            self._db = self._event_loop.run_until_complete(self._prepare_db())
        except Exception as ex:
            self._event_loop.close()
            self._event_loop = None
            raise DatabaseError(f"could not connect to SurrealDB at {self._endpoint}: {ex}") from ex
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """Context manager exit point for closing DB connection."""
        try:
            self._event_loop.run_until_complete(self._db.close())
        except Exception as ex:
            logger.warning("Closing SurrealDB connection failed: %s", ex)
            if exc_type is None:
                raise DatabaseError(f"could not close SurrealDB connection: {ex}") from ex
        finally:
            self._event_loop.close()
            self._event_loop = None
            self._db = None

    async def _prepare_db(self):
        """Prepares the DB connection."""
        db = AsyncSurreal(self._endpoint)
        await db.connect()
        await db.signin({"username": self._username, "password": self._password})
        await db.use(self._namespace, self._db_name)
        return db

    def _call_db(self, function_name, *args, **kwargs):
        """Calls a function specified by function_name argument in SurrealDB connection passing forward args and kwargs."""
        if not self._db:
            raise DatabaseError("No connection to SurrealDB.")
        try:
            return self._event_loop.run_until_complete(getattr(self._db, function_name)(*args, **kwargs))
        except Exception as ex:
            logger.error("SurrealDB %s failed: %s", function_name, ex)
            raise DatabaseError(str(ex)) from ex

    def _build_where_clause(self, conditions: Dict[str, Any], _vars: Dict[str, Any]) -> str:
        condition_strs = []
        for key, value in (conditions or {}).items():
            if isinstance(value, UUID):
                value = value.hex
            if value is None:
                condition_strs.append(f"{key} IS NONE")
            elif isinstance(value, list):
                _vars[key] = value
                condition_strs.append(f"{key} IN ${key}")
            elif isinstance(value, (str, bool, int, float)):
                _vars[key] = value
                condition_strs.append(f"{key} = ${key}")
            else:
                raise DatabaseError(f"Unsupported type {type(value)} for condition key: {key}, value: {value}")
        if not condition_strs:
            return ""
        return f" WHERE {' AND '.join(condition_strs)}"

    def execute_query(self, sql, _vars=None):
        """Executes a query against the DB."""
        if _vars is None:
            _vars = {}

        logger.debug("SurrealQL: %s %s", sql, _vars)
        return self._call_db('query', sql, _vars)

    def parse_db_response(self, response: Any) -> List[Dict[str, Any]]:
        """
        Parse the response from SurrealDB into a list of records.

        Accepts either the statement results directly or the raw
        ``[{"status": ..., "result": [...]}]`` envelope.
        """
        if not response:
            return []
        if isinstance(response, dict):
            return [response]
        if not isinstance(response, list):
            return []

        first = response[0]
        if isinstance(first, dict) and 'status' in first and 'result' in first:
            if first['status'] != 'OK':
                raise DatabaseError(str(first['result']))
            results = first['result']
            if results is None:
                return []
            return results if isinstance(results, list) else [results]
        return response

    def _strip_record_id(self, record: Dict[str, Any]) -> Dict[str, Any]:
        record = dict(record)
        record.pop('id', None)
        return record

    def get_one(self, table: str, entity_id: str) -> Union[Dict[str, Any], None]:
        records = self.parse_db_response(self.execute_query(
            "SELECT * FROM type::thing($table, $entity_id)",
            {'table': table, 'entity_id': entity_id}
        ))
        if not records:
            return None
        return self._strip_record_id(records[0])

    def get_many(
        self,
        table: str,
        conditions: Dict[str, Any] = None,
        sort: List[Tuple[str, str]] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        _vars = {'table': table}
        query = "SELECT * FROM type::table($table)"
        query += self._build_where_clause(conditions, _vars)
        if sort:
            sort_strs = [f"{column} {direction}" for column, direction in sort]
            query += f" ORDER BY {', '.join(sort_strs)}"
        if limit is not None:
            query += f" LIMIT {int(limit)}"

        records = self.parse_db_response(self.execute_query(query, _vars))
        return [self._strip_record_id(record) for record in records]

    def get_count(self, table: str, conditions: Dict[str, Any] = None) -> int:
        _vars = {'table': table}
        query = "SELECT count() FROM type::table($table)"
        query += self._build_where_clause(conditions, _vars)
        query += " GROUP ALL"

        records = self.parse_db_response(self.execute_query(query, _vars))
        if not records:
            return 0
        return int(records[0].get('count', 0))

    def insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        records = self.parse_db_response(self.execute_query(
            "CREATE type::thing($table, $entity_id) CONTENT $data",
            {'table': table, 'entity_id': data['entity_id'], 'data': data}
        ))
        if not records:
            raise DatabaseError(f"database did not return created {table}")
        return self._strip_record_id(records[0])

    def save(self, table: str, data: Dict[str, Any]) -> Union[Dict[str, Any], None]:
        records = self.parse_db_response(self.execute_query(
            "UPDATE type::thing($table, $entity_id) CONTENT $data",
            {'table': table, 'entity_id': data['entity_id'], 'data': data}
        ))
        if not records:
            return None
        return self._strip_record_id(records[0])

    def delete(self, table: str, entity_id: str) -> bool:
        records = self.parse_db_response(self.execute_query(
            "DELETE type::thing($table, $entity_id) RETURN BEFORE",
            {'table': table, 'entity_id': entity_id}
        ))
        return bool(records)
