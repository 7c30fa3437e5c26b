"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import REFERENCE_DATE, AvailabilityService, ScheduleRepositoryProtocol

__all__ = ["AvailabilityService", "REFERENCE_DATE", "ScheduleRepositoryProtocol"]
