"""
                        Services Module

Backend integration and presentation helpers. Each backend service has a
development implementation and a hosted (staging/production) one, picked
by ENV_MODE through a cached factory.

Services:
    - realtime: record tree (in-memory / Postgres + Redis)
    - storage: object storage (local filesystem / Azure Blob)
    - records: snapshot decoding, sorting and list filters
    - dashboard: counters, status badges, category helpers
"""

from app.services.realtime import get_realtime_db
from app.services.storage import get_storage_service

__all__ = ["get_realtime_db", "get_storage_service"]
