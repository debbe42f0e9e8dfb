"""
Adapters layer - External integrations (hosted record store).
"""

from .mock_record_store import MockRecordStoreClient
from .record_store_client import RestRecordStoreClient

__all__ = ["MockRecordStoreClient", "RestRecordStoreClient"]
