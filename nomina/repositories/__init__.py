"""Repositories for nomina"""
from .base_repository import BaseRepository, RepositorySet
from .memory import InMemoryRepository, in_memory_repositories
