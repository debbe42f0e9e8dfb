"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import (
    AvailabilityResponse,
    RecordStoreProtocol,
    TrueAvailabilityService,
    day_bounds,
)

__all__ = ["AvailabilityResponse", "RecordStoreProtocol", "TrueAvailabilityService", "day_bounds"]
