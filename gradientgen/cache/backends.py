"""Key-value storage backends for rendered gradients."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from ..errors import StorageError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    key: str
    size: int
    last_access: float
    last_modified: float


class CacheBackend(Protocol):
    """Storage port used by CacheStore."""

    def list_entries(self) -> List[CacheEntry]:
        """Every stored entry with its size and timestamps."""
        ...

    def get(self, key: str) -> Optional[Tuple[bytes, float]]:
        """Bytes and last-modified time, or None when absent. Does not touch."""
        ...

    def put(self, key: str, data: bytes) -> None:
        """Store bytes, setting both timestamps to now."""
        ...

    def delete(self, key: str) -> bool:
        """Remove an entry. Returns False if it was already gone."""
        ...

    def stat(self, key: str) -> Optional[CacheEntry]:
        ...

    def touch(self, key: str) -> None:
        """Mark an entry as accessed now."""
        ...


@dataclass
class _Record:
    data: bytes
    last_access: float
    last_modified: float


class MemoryBackend:
    """In-process backend. Entries do not survive the process."""

    def __init__(self, clock: Clock = time.time) -> None:
        self._records: Dict[str, _Record] = {}
        self._clock = clock

    def list_entries(self) -> List[CacheEntry]:
        return [
            CacheEntry(k, len(r.data), r.last_access, r.last_modified)
            for k, r in self._records.items()
        ]

    def get(self, key: str) -> Optional[Tuple[bytes, float]]:
        rec = self._records.get(key)
        if rec is None:
            return None
        return rec.data, rec.last_modified

    def put(self, key: str, data: bytes) -> None:
        now = self._clock()
        self._records[key] = _Record(bytes(data), now, now)

    def delete(self, key: str) -> bool:
        return self._records.pop(key, None) is not None

    def stat(self, key: str) -> Optional[CacheEntry]:
        rec = self._records.get(key)
        if rec is None:
            return None
        return CacheEntry(key, len(rec.data), rec.last_access, rec.last_modified)

    def touch(self, key: str) -> None:
        rec = self._records.get(key)
        if rec is not None:
            rec.last_access = self._clock()


class FileSystemBackend:
    """
    One file per entry in a shared directory.

    The file's atime records the last access and its mtime the last write.
    Access times are set explicitly so that ``noatime``/``relatime`` mounts
    still order entries correctly. Writes go through a temporary file and
    ``os.replace`` so readers never see a partial image; concurrent writers
    of the same key are last-writer-wins.
    """

    def __init__(self, root: Path, suffix: str = ".png", clock: Clock = time.time) -> None:
        self.root = Path(root)
        self.suffix = suffix
        self._clock = clock

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}{self.suffix}"

    def _key_for(self, name: str) -> Optional[str]:
        if not name.endswith(self.suffix) or name.startswith("."):
            return None
        return name[: -len(self.suffix)]

    def list_entries(self) -> List[CacheEntry]:
        entries = []
        try:
            with os.scandir(self.root) as it:
                for dirent in it:
                    key = self._key_for(dirent.name)
                    if key is None:
                        continue
                    try:
                        if not dirent.is_file():
                            continue
                        st = dirent.stat()
                    except FileNotFoundError:
                        # removed by another process mid-scan
                        continue
                    entries.append(CacheEntry(key, st.st_size, st.st_atime, st.st_mtime))
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"cannot list cache directory {self.root}: {exc}", self.root) from exc
        return entries

    def get(self, key: str) -> Optional[Tuple[bytes, float]]:
        path = self.path_for(key)
        try:
            with open(path, "rb") as fh:
                data = fh.read()
                mtime = os.fstat(fh.fileno()).st_mtime
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"cannot read cache entry {path}: {exc}", path) from exc
        return data, mtime

    def put(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".", suffix=".tmp")
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
            tmp_name = None
            now = self._clock()
            os.utime(path, (now, now))
        except OSError as exc:
            raise StorageError(f"cannot write cache entry {path}: {exc}", path) from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug(
                        "could not remove temp file %s", tmp_name, extra={"event": "temp_cleanup_failed"}
                    )

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            os.unlink(path)
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"cannot delete cache entry {path}: {exc}", path) from exc
        return True

    def stat(self, key: str) -> Optional[CacheEntry]:
        path = self.path_for(key)
        try:
            st = os.stat(path)
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"cannot stat cache entry {path}: {exc}", path) from exc
        return CacheEntry(key, st.st_size, st.st_atime, st.st_mtime)

    def touch(self, key: str) -> None:
        path = self.path_for(key)
        try:
            st = os.stat(path)
            os.utime(path, (self._clock(), st.st_mtime))
        except OSError as exc:
            # access time is advisory
            logger.debug(
                "could not update access time of %s: %s", path, exc, extra={"event": "touch_failed"}
            )
