"""Program store backed by a directory of JSON files."""

from __future__ import annotations

import logging
from pathlib import Path

from linebasic.model.program import ProgramSnapshot

from ._base import (
    ProgramNotFoundError,
    ProgramStore,
    ProgramStoreError,
    decode_snapshot,
    encode_snapshot,
)

logger = logging.getLogger(__name__)

_SUFFIX = ".json"


class DirectoryProgramStore(ProgramStore):
    """One ``<NAME>.json`` file per saved program.

    The directory is created on first use. Filesystem failures other than
    a missing program surface as ``ProgramStoreError``.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _file(self, name: str) -> Path:
        return self.path / f"{name}{_SUFFIX}"

    def save(self, name: str, snapshot: ProgramSnapshot) -> None:
        target = self._file(name)
        logger.debug("saving %s (%d lines) to %s", name, len(snapshot), target)
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            target.write_text(encode_snapshot(snapshot), encoding="utf-8")
        except OSError as exc:
            raise ProgramStoreError(str(exc)) from exc

    def load(self, name: str) -> ProgramSnapshot:
        target = self._file(name)
        try:
            raw = target.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ProgramNotFoundError(name) from None
        except OSError as exc:
            raise ProgramStoreError(str(exc)) from exc
        logger.debug("loaded %s from %s", name, target)
        return decode_snapshot(raw)

    def list(self) -> list[str]:
        try:
            if not self.path.is_dir():
                return []
            return sorted(p.stem for p in self.path.glob(f"*{_SUFFIX}") if p.is_file())
        except OSError as exc:
            raise ProgramStoreError(str(exc)) from exc

    def delete(self, name: str) -> None:
        target = self._file(name)
        try:
            target.unlink()
        except FileNotFoundError:
            raise ProgramNotFoundError(name) from None
        except OSError as exc:
            raise ProgramStoreError(str(exc)) from exc
        logger.debug("deleted %s", target)
