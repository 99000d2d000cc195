"""
Storage: progress persistence and the process-wide ProgressStore.
"""

from acetrainer.storage.persistence import (
    ByteStore,
    FileByteStore,
    MemoryByteStore,
    decode_record,
    encode_record,
)
from acetrainer.storage.progress_store import ProgressStore

__all__ = [
    "ByteStore",
    "FileByteStore",
    "MemoryByteStore",
    "ProgressStore",
    "decode_record",
    "encode_record",
]
