"""SurrealDB repositories"""
from .surreal_db_repository import SurrealDbRepository, surrealdb_repositories
