"""
Progress persistence boundary.

The progress record is stored as one JSON document in a key-value byte store:
read once at startup, rewritten whole on every mutation. Stores only move
bytes; encoding and the defensive decode live here too.

Default location: ~/.acetrainer/progress.json
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

from loguru import logger
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from acetrainer.core.errors import PersistenceFailure
from acetrainer.core.models import ProgressRecord

# Each pass drops every top-level field pydantic rejected; nested validators
# already filter bad list entries, so a couple of passes always settle.
_MAX_DECODE_PASSES = 3


class ByteStore(Protocol):
    """Key-value byte storage for the single progress document."""

    def load(self) -> bytes | None:
        """Return the persisted bytes, or None when nothing was saved yet."""
        ...

    def save(self, data: bytes) -> None:
        """Replace the persisted bytes. Raises PersistenceFailure on I/O errors."""
        ...


class MemoryByteStore:
    """In-process store, used for tests and ephemeral sessions."""

    def __init__(self, data: bytes | None = None):
        self.data = data
        self.saves = 0

    def load(self) -> bytes | None:
        return self.data

    def save(self, data: bytes) -> None:
        self.data = data
        self.saves += 1


class FileByteStore:
    """
    Store backed by a single JSON file.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace`` so a crash never leaves a half-written document.
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def load(self) -> bytes | None:
        if not self.path.exists():
            return None
        try:
            return self.path.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read progress file {self.path}: {e}")
            return None

    def save(self, data: bytes) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceFailure(f"Could not write progress file {self.path}: {e}") from e


def encode_record(record: ProgressRecord) -> bytes:
    """Serialize the record using the persisted camelCase field names."""
    return record.model_dump_json(by_alias=True, indent=2).encode("utf-8")


def decode_record(data: bytes | None) -> ProgressRecord:
    """
    Hydrate a record from persisted bytes.

    Absent or undecodable data yields the default zero record. Fields that
    fail validation are dropped (and so fall back to their defaults) instead
    of discarding the whole document.
    """
    if not data:
        return ProgressRecord()

    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Progress data is not valid JSON, starting fresh: {e}")
        return ProgressRecord()

    if not isinstance(payload, dict):
        logger.warning("Progress data is not a JSON object, starting fresh")
        return ProgressRecord()

    for _ in range(_MAX_DECODE_PASSES):
        try:
            return ProgressRecord.model_validate(payload)
        except ValidationError as e:
            rejected = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
            if not rejected:
                break
            logger.warning(f"Dropping malformed progress fields: {sorted(rejected)}")
            payload = {
                key: value
                for key, value in payload.items()
                if key not in rejected and to_camel(key) not in rejected
            }

    logger.warning("Progress data could not be repaired, starting fresh")
    return ProgressRecord()
