"""
Persistence Module
==================

Profile load/save boundary and key-value backends.

    - ProfileStore: load() -> Profile | None, save(profile) -> SaveResult
    - JsonFileBackend / InMemoryBackend: blob storage
"""

from visimos.persistence.backends import InMemoryBackend, JsonFileBackend, KeyValueBackend
from visimos.persistence.store import (
    DEFAULT_NAMESPACE,
    ProfileStore,
    ProfileStoreError,
    SaveResult,
)

__all__ = [
    "ProfileStore",
    "ProfileStoreError",
    "SaveResult",
    "DEFAULT_NAMESPACE",
    "KeyValueBackend",
    "JsonFileBackend",
    "InMemoryBackend",
]
