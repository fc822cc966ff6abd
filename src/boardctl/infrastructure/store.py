"""JSON snapshot store: durability for the whole board collection.

The store reads and writes one JSON document holding every board. It is
responsible for durability only; consistency (locking, validation) lives
in :class:`~boardctl.infrastructure.workspace.Workspace` and the services.

Read policy:
- Missing file: initialize and persist an empty snapshot.
- Existing but unreadable or corrupt file: raise :class:`StoreCorruptError`.
  With ``recover_corrupt=True`` the file is moved aside (never deleted) and
  a fresh snapshot is initialized instead.

Write policy: write to a temp file, ``fsync``, then ``os.replace``. A failed
write raises :class:`StoreWriteError` and leaves the previous file intact.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from boardctl.domain.models import SCHEMA_VERSION, Snapshot

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for persistence failures. Always fatal for the operation."""


class StoreCorruptError(StoreError):
    """The backing document exists but cannot be read or parsed."""


class StoreWriteError(StoreError):
    """The snapshot could not be written."""


class StoreLockTimeout(StoreError):
    """The store lock could not be acquired in time."""


class ConcurrentModificationError(StoreError):
    """The document on disk changed since the snapshot being saved was loaded."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Store revision is {actual}, expected {expected}")
        self.expected = expected
        self.actual = actual


class JsonSnapshotStore:
    """Load and save :class:`Snapshot` documents at *path*.

    Parameters:
        path: Location of the JSON document.
        indent: JSON indentation used when writing.
        recover_corrupt: Move a corrupt document aside and start empty
            instead of raising.
    """

    def __init__(self, path: Path, *, indent: int = 2, recover_corrupt: bool = False) -> None:
        self.path = path
        self._indent = indent
        self._recover_corrupt = recover_corrupt

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Snapshot:
        """Return the persisted snapshot, initializing an empty one if absent."""
        if not self.path.exists():
            logger.debug("No store at %s, initializing empty snapshot", self.path)
            return self._initialize()

        try:
            return self._read()
        except StoreCorruptError:
            if not self._recover_corrupt:
                raise
            moved = self._quarantine()
            logger.warning("Corrupt store moved to %s; starting empty", moved)
            return self._initialize()

    def save(self, snapshot: Snapshot, *, expected_revision: int | None = None) -> Snapshot:
        """Persist *snapshot* in full and return it with its new revision.

        When *expected_revision* is given, the write is refused with
        :class:`ConcurrentModificationError` if the document on disk carries
        a different revision.
        """
        if expected_revision is not None:
            actual = self._disk_revision()
            if actual != expected_revision:
                raise ConcurrentModificationError(expected_revision, actual)

        saved = snapshot.model_copy(update={"revision": snapshot.revision + 1}, deep=True)
        self._write(saved)
        logger.debug("Saved revision %d to %s", saved.revision, self.path)
        return saved

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _initialize(self) -> Snapshot:
        snapshot = Snapshot()
        self._write(snapshot)
        return snapshot

    def _read_raw(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"{self.path.name}: {exc.__class__.__name__}: {exc}"
            raise StoreCorruptError(msg) from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"{self.path.name}: JSONDecodeError: {exc}"
            raise StoreCorruptError(msg) from exc
        if not isinstance(data, dict):
            msg = f"{self.path.name}: expected object, got {type(data).__name__}"
            raise StoreCorruptError(msg)
        return data

    def _read(self) -> Snapshot:
        data = self._read_raw()
        try:
            snapshot = Snapshot.model_validate(data)
        except ValidationError as exc:
            msg = f"{self.path.name}: invalid snapshot: {exc.error_count()} error(s)"
            raise StoreCorruptError(msg) from exc
        if snapshot.version > SCHEMA_VERSION:
            msg = (
                f"{self.path.name}: schema version {snapshot.version} is newer "
                f"than supported version {SCHEMA_VERSION}"
            )
            raise StoreCorruptError(msg)
        return snapshot

    def _disk_revision(self) -> int:
        if not self.path.exists():
            return 0
        revision = self._read_raw().get("revision", 0)
        return revision if isinstance(revision, int) else 0

    def _write(self, snapshot: Snapshot) -> None:
        payload = json.dumps(snapshot.model_dump(mode="json"), indent=self._indent)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            msg = f"Failed to write {self.path}: {exc}"
            raise StoreWriteError(msg) from exc

    def _quarantine(self) -> Path:
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%f")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        n = 1
        while target.exists():
            target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}-{n}")
            n += 1
        os.replace(self.path, target)
        return target
