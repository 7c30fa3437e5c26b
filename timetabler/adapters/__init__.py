"""
Adapters layer - Data sources for events and work hours.
"""

from .json_repository import JsonScheduleRepository
from .memory_repository import CachedScheduleRepository, InMemoryScheduleRepository

__all__ = ["CachedScheduleRepository", "InMemoryScheduleRepository", "JsonScheduleRepository"]
