"""JSON snapshot store for the per-validator unbonding ledger.

The snapshot is a single JSON object mapping validator moniker to an
array of {completion_time, balance} objects. Every write replaces the
whole file; there is no versioning and no append.
"""

import json
import os
import tempfile
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from unbonding.exceptions import SnapshotFormatError, SnapshotMissingError
from unbonding.logging import get_logger
from unbonding.models import Ledger, UnbondingEntry

logger = get_logger(__name__)

_LEDGER_ADAPTER = TypeAdapter(dict[str, list[UnbondingEntry]])


class SnapshotStore:
    """Reads and writes the ledger snapshot file.

    Usage:
        store = SnapshotStore("unbonding.json")
        store.write(ledger)
        ledger = store.load()
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, ledger: Ledger) -> None:
        """Serialize the ledger and atomically replace the snapshot file.

        The JSON is written to a temp file in the same directory and moved
        over the target, so readers never observe a partial snapshot.
        """
        data = {
            moniker: [entry.model_dump() for entry in entries]
            for moniker, entries in ledger.items()
        }
        text = json.dumps(data, indent=2, ensure_ascii=False)

        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=directory, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info(
            "snapshot_written",
            path=str(self._path),
            validators=len(ledger),
            entries=sum(len(entries) for entries in ledger.values()),
        )

    def load(self) -> Ledger:
        """Read and validate the snapshot file.

        Raises:
            SnapshotMissingError: If the file does not exist.
            SnapshotFormatError: If the content is not valid JSON or not a
                moniker -> [{completion_time, balance}] mapping.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError as e:
            raise SnapshotMissingError(f"Snapshot not found: {self._path}") from e

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SnapshotFormatError(f"Snapshot {self._path} is not UTF-8 text") from e

        try:
            ledger = _LEDGER_ADAPTER.validate_json(text)
        except ValidationError as e:
            raise SnapshotFormatError(
                f"Snapshot {self._path} is not a valid unbonding ledger: "
                f"{e.error_count()} error(s)"
            ) from e

        logger.debug("snapshot_loaded", path=str(self._path), validators=len(ledger))
        return ledger
