"""
HTTP surface exposing true availability as a request/response endpoint.
"""

from .app import create_app

__all__ = ["create_app"]
