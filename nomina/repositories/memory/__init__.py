"""In-memory repositories"""
from .memory_repository import InMemoryRepository, in_memory_repositories
