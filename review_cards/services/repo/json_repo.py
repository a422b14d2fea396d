from __future__ import annotations

import io
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Generic, Iterator, List, Optional, Type, TypeVar

from pydantic import BaseModel

from review_cards.config import Settings
from review_cards.core.models import ApiConfiguration, ReviewCard
from review_cards.services.exceptions import RepoError

M = TypeVar("M", bound=BaseModel)


# Cross-platform file lock (fcntl for *nix; msvcrt for Windows)
@contextmanager
def _locked(path: str) -> Iterator[io.FileIO]:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    f = open(path, "a+b")  # create if missing
    try:
        try:
            import fcntl  # type: ignore
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            locker = ("fcntl", None)
        except ImportError:
            try:
                import msvcrt  # type: ignore
                msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)
                locker = ("msvcrt", 1)
            except Exception as e:
                raise RepoError(f"Could not lock file {path}: {e}") from e
        try:
            yield f
        finally:
            if locker[0] == "fcntl":
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
            else:
                msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, locker[1])
    finally:
        f.close()


def _atomic_write(path: str, data: bytes) -> None:
    d = os.path.dirname(path) or "."
    os.makedirs(d, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp-", dir=d)
    try:
        with os.fdopen(fd, "wb") as w:
            w.write(data)
            w.flush()
            os.fsync(w.fileno())
        os.replace(tmp, path)
    except OSError as e:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise RepoError(f"Atomic write failed for {path}: {e}") from e


_thread_locks: Dict[str, threading.Lock] = {}
_thread_locks_guard = threading.Lock()


@contextmanager
def _write_lock(path: str) -> Iterator[None]:
    """Exclusive lock for a read-modify-write of `path`, across threads and processes."""
    key = os.path.abspath(path)
    with _thread_locks_guard:
        tlock = _thread_locks.setdefault(key, threading.Lock())
    with tlock:
        # Separate file: list() takes the data file lock itself.
        with _locked(path + ".lock"):
            yield


class JSONRecordRepo(Generic[M]):
    """
    Local cache: a JSON array of records in a single file, newest first.

    Reads take the file lock; writes replace the file atomically. The whole list is
    rewritten on every change, which is fine for the handful of rows this app keeps.
    """
    model: Type[M]

    def __init__(self, path: str):
        self.path = path

    # -- raw I/O --

    def list(self) -> List[M]:
        try:
            if not os.path.exists(self.path):
                return []
            with _locked(self.path) as f:
                f.seek(0)
                raw = f.read() or b"[]"
            rows = json.loads(raw.decode("utf-8"))
            if not isinstance(rows, list):
                raise ValueError("expected a JSON array")
            return [self.model.model_validate(r) for r in rows]
        except RepoError:
            raise
        except Exception as e:
            raise RepoError(f"Failed to load records from {self.path}: {e}") from e

    def _write(self, records: List[M]) -> None:
        try:
            payload = json.dumps([r.model_dump(mode="json") for r in records],
                                 ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RepoError(f"Failed to serialize records for {self.path}: {e}") from e
        _atomic_write(self.path, payload)

    def _modify(self, change: Callable[[List[M]], Optional[List[M]]]) -> bool:
        """Apply `change` to the current list under the write lock. None from `change` means no write."""
        with _write_lock(self.path):
            records = change(self.list())
            if records is None:
                return False
            self._write(records)
            return True

    def replace_all(self, records: List[M]) -> None:
        with _write_lock(self.path):
            self._write(records)

    # -- record operations --

    def get(self, record_id: str) -> Optional[M]:
        return next((r for r in self.list() if getattr(r, "id") == record_id), None)

    def add(self, record: M) -> None:
        self._modify(lambda records: [record] + records)

    def update(self, record: M) -> bool:
        """Replace the record with the same id. Returns False (and writes nothing) if absent."""
        record_id = getattr(record, "id")

        def change(records: List[M]) -> Optional[List[M]]:
            for i, r in enumerate(records):
                if getattr(r, "id") == record_id:
                    records[i] = record
                    return records
            return None

        return self._modify(change)

    def delete(self, record_id: str) -> bool:
        def change(records: List[M]) -> Optional[List[M]]:
            kept = [r for r in records if getattr(r, "id") != record_id]
            return kept if len(kept) != len(records) else None

        return self._modify(change)

    def clear(self) -> None:
        with _write_lock(self.path):
            try:
                if os.path.exists(self.path):
                    os.remove(self.path)
            except OSError as e:
                raise RepoError(f"Failed to clear {self.path}: {e}") from e


class JSONCardRepo(JSONRecordRepo[ReviewCard]):
    model = ReviewCard

    def __init__(self, settings: Settings):
        super().__init__(settings.cards_file)

    def get_by_slug(self, slug: str) -> Optional[ReviewCard]:
        return next((c for c in self.list() if c.slug == slug), None)


class JSONApiConfigRepo(JSONRecordRepo[ApiConfiguration]):
    model = ApiConfiguration

    def __init__(self, settings: Settings):
        super().__init__(settings.api_configs_file)
