from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple, Union


class DbAdapter(ABC):
    """Abstract base class for database adapters."""

    @abstractmethod
    def __enter__(self) -> 'DbAdapter':
        """Context manager entry point for preparing DB connection."""
        pass

    @abstractmethod
    def __exit__(self, exc_type, exc_value, traceback):
        """Context manager exit point for closing DB connection."""
        pass

    @abstractmethod
    def execute_query(self, sql: str, _vars: Dict[str, Any] = None) -> Any:
        """Executes a raw query against the DB."""
        pass

    @abstractmethod
    def parse_db_response(self, response: Any) -> List[Dict[str, Any]]:
        """Parses the raw response from the database and returns structured data."""
        pass

    @abstractmethod
    def get_one(self, table: str, entity_id: str) -> Union[Dict[str, Any], None]:
        """Fetches the record with the given entity_id, or None."""
        pass

    @abstractmethod
    def get_many(self, table: str, conditions: Dict[str, Any] = None, sort: List[Tuple[str, str]] = None,
                 limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Fetches multiple records from the specified table based on given conditions."""
        pass

    @abstractmethod
    def get_count(self, table: str, conditions: Dict[str, Any] = None) -> int:
        """Counts the records of a table matching the given conditions."""
        pass

    @abstractmethod
    def insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Creates a new record keyed by data['entity_id']."""
        pass

    @abstractmethod
    def save(self, table: str, data: Dict[str, Any]) -> Union[Dict[str, Any], None]:
        """Replaces the stored record keyed by data['entity_id']."""
        pass

    @abstractmethod
    def delete(self, table: str, entity_id: str) -> bool:
        """Deletes a record, returning whether anything was removed."""
        pass
