"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .scheduling import SchedulingService, SlotSourceProtocol

__all__ = ["SchedulingService", "SlotSourceProtocol"]
