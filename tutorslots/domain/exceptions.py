"""
Domain-specific exception hierarchy for the tutorslots application.
"""


class TutorSlotsError(Exception):
    """Base class for all application-level errors."""


class RecordStoreError(TutorSlotsError):
    """Raised when availability or booking records cannot be fetched or parsed."""


class InvalidRequestError(TutorSlotsError):
    """Raised when an availability request is missing fields or malformed."""


class ConfigurationError(TutorSlotsError):
    """Raised when the configuration is incomplete for the selected backend."""
