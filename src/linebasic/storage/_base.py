"""Program store interface and snapshot encoding."""

from __future__ import annotations

import abc

from pydantic import ValidationError

from linebasic.model.program import ProgramSnapshot


class ProgramNotFoundError(KeyError):
    """No program is saved under the requested name."""


class SnapshotFormatError(ValueError):
    """A saved program could not be decoded into a valid snapshot."""


class ProgramStoreError(Exception):
    """The backing storage could not be read or written."""


def encode_snapshot(snapshot: ProgramSnapshot) -> str:
    return snapshot.model_dump_json()


def decode_snapshot(raw: str | bytes) -> ProgramSnapshot:
    """Parse and validate a stored snapshot.

    Raises ``SnapshotFormatError`` for malformed JSON, a wrong shape,
    non-positive or duplicate line numbers.
    """
    try:
        return ProgramSnapshot.model_validate_json(raw)
    except ValidationError as exc:
        raise SnapshotFormatError(str(exc)) from exc


class ProgramStore(abc.ABC):
    """Named program snapshots.

    Names arrive already normalised (upper case, no quotes); stores use
    them verbatim.
    """

    @abc.abstractmethod
    def save(self, name: str, snapshot: ProgramSnapshot) -> None:
        """Store *snapshot* under *name*, replacing any previous one."""

    @abc.abstractmethod
    def load(self, name: str) -> ProgramSnapshot:
        """Return the snapshot saved as *name*.

        Raises ``ProgramNotFoundError`` or ``SnapshotFormatError``.
        """

    @abc.abstractmethod
    def list(self) -> list[str]:
        """Names of all saved programs, sorted."""

    @abc.abstractmethod
    def delete(self, name: str) -> None:
        """Remove *name*; raises ``ProgramNotFoundError`` if absent."""
