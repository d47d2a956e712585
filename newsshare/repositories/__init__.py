from .base import NewsRepository
from .in_memory import InMemoryNewsRepository
from .sql import SqlNewsRepository

__all__ = ["NewsRepository", "InMemoryNewsRepository", "SqlNewsRepository"]
