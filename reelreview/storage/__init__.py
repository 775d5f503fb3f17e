"""
Entity Store backends

Usage:
    from reelreview.storage import build_storage
    store = build_storage()        # backend from STORAGE_BACKEND
    store = build_storage("sql")   # explicit
"""
from typing import Optional
import logging
import os

from reelreview.storage.base import EntityStore
from reelreview.storage.memory import MemoryStorage
from reelreview.storage.sql import SqlStorage

logger = logging.getLogger(__name__)

__all__ = [
    "EntityStore",
    "MemoryStorage",
    "SqlStorage",
    "build_storage"
]


def build_storage(backend: Optional[str] = None) -> EntityStore:
    """Construct the store once for the process entry point"""
    backend = (backend or os.getenv("STORAGE_BACKEND", "memory")).lower()

    if backend == "memory":
        logger.info("Using in-memory storage")
        return MemoryStorage()

    if backend == "sql":
        from reelreview.database import SessionLocal, create_tables

        create_tables()
        logger.info("Using SQL storage")
        return SqlStorage(SessionLocal)

    raise ValueError(f"Unknown STORAGE_BACKEND '{backend}'. Allowed: memory, sql")
