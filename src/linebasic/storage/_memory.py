"""In-process program store."""

from __future__ import annotations

import logging

from linebasic.model.program import ProgramSnapshot

from ._base import ProgramNotFoundError, ProgramStore, decode_snapshot, encode_snapshot

logger = logging.getLogger(__name__)


class MemoryProgramStore(ProgramStore):
    """Keeps encoded snapshots in a dict, like browser local storage.

    Snapshots are stored encoded so that loading goes through the same
    validation as a file-backed store.
    """

    def __init__(self, entries: dict[str, str] | None = None) -> None:
        self.entries: dict[str, str] = dict(entries or {})

    def save(self, name: str, snapshot: ProgramSnapshot) -> None:
        logger.debug("saving %s (%d lines) in memory", name, len(snapshot))
        self.entries[name] = encode_snapshot(snapshot)

    def load(self, name: str) -> ProgramSnapshot:
        try:
            raw = self.entries[name]
        except KeyError:
            raise ProgramNotFoundError(name) from None
        return decode_snapshot(raw)

    def list(self) -> list[str]:
        return sorted(self.entries)

    def delete(self, name: str) -> None:
        if name not in self.entries:
            raise ProgramNotFoundError(name)
        del self.entries[name]
