from .backends import CacheBackend, CacheEntry, FileSystemBackend, MemoryBackend
from .store import CacheStore

__all__ = [
    "CacheBackend",
    "CacheEntry",
    "FileSystemBackend",
    "MemoryBackend",
    "CacheStore",
]
