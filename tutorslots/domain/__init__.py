"""
Domain layer - Pure availability logic without external dependencies.
"""

from .availability_resolver import AvailabilityResolver, format_minutes, to_minutes
from .models import AvailabilityWindow, BookedInterval, FreeSlot, MinuteInterval

__all__ = [
    "AvailabilityResolver",
    "AvailabilityWindow",
    "BookedInterval",
    "FreeSlot",
    "MinuteInterval",
    "format_minutes",
    "to_minutes",
]
