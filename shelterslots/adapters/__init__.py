"""
Adapters layer - External slot data sources.
"""

from .json_slot_source import JsonSlotSource

__all__ = ["JsonSlotSource"]
