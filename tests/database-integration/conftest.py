"""
Shared pytest fixtures for database integration tests.

Provides a SurrealDB adapter whose tables are emptied before every test.
"""
import pytest

from integration_settings import get_surrealdb_config
from nomina.models import MODELS


@pytest.fixture
def surrealdb_adapter():
    from nomina.data.surrealdb import SurrealDbAdapter

    adapter = SurrealDbAdapter.from_config(get_surrealdb_config())
    with adapter:
        for table in MODELS:
            adapter.execute_query("DELETE type::table($table)", {'table': table})
    return adapter
