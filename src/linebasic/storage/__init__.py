"""linebasic storage — named program snapshots.

Public API::

    from linebasic.storage import DirectoryProgramStore
    store = DirectoryProgramStore("~/basic")
"""

from ._base import (
    ProgramNotFoundError,
    ProgramStore,
    ProgramStoreError,
    SnapshotFormatError,
    decode_snapshot,
    encode_snapshot,
)
from ._directory import DirectoryProgramStore
from ._memory import MemoryProgramStore

__all__ = [
    "DirectoryProgramStore",
    "MemoryProgramStore",
    "ProgramNotFoundError",
    "ProgramStore",
    "ProgramStoreError",
    "SnapshotFormatError",
    "decode_snapshot",
    "encode_snapshot",
]
