"""
tutorslots - true tutor availability for a tutoring marketplace.
"""

__version__ = "0.1.0"
