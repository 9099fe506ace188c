"""Tests for the JSON SnapshotStore."""

import json
from pathlib import Path

import pytest

from unbonding.exceptions import SnapshotFormatError, SnapshotMissingError
from unbonding.models import UnbondingEntry
from unbonding.snapshot import SnapshotStore


@pytest.fixture
def store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(tmp_path / "unbonding.json")


class TestWrite:
    """Tests for full-overwrite snapshot writes."""

    def test_write_then_load_preserves_order(
        self, store: SnapshotStore, sample_ledger: dict
    ) -> None:
        store.write(sample_ledger)

        loaded = store.load()
        assert loaded == sample_ledger
        assert list(loaded) == ["ValA", "ValB"]

    def test_write_overwrites_previous_snapshot(
        self, store: SnapshotStore, sample_ledger: dict
    ) -> None:
        store.write(sample_ledger)
        store.write({})

        assert json.loads(store.path.read_text()) == {}

    def test_write_leaves_no_temp_files(
        self, store: SnapshotStore, sample_ledger: dict, tmp_path: Path
    ) -> None:
        store.write(sample_ledger)

        assert [p.name for p in tmp_path.iterdir()] == ["unbonding.json"]

    def test_write_creates_parent_directory(self, tmp_path: Path) -> None:
        store = SnapshotStore(tmp_path / "nested" / "dir" / "unbonding.json")
        store.write({})
        assert store.path.exists()

    def test_balances_written_as_strings(self, store: SnapshotStore) -> None:
        huge = str(2**80)
        store.write(
            {"Big": [UnbondingEntry(completion_time="2024-01-02T00:00:00Z", balance=huge)]}
        )

        data = json.loads(store.path.read_text())
        assert data["Big"][0]["balance"] == huge

    def test_unicode_monikers_kept_readable(self, store: SnapshotStore) -> None:
        store.write(
            {"Validátor 🚀": [UnbondingEntry(completion_time="2024-01-02T00:00:00Z", balance="1")]}
        )

        assert "Validátor 🚀" in store.path.read_text(encoding="utf-8")


class TestLoad:
    """Tests for snapshot reading and validation."""

    def test_missing_file(self, store: SnapshotStore) -> None:
        with pytest.raises(SnapshotMissingError):
            store.load()

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "not json",
            "[]",
            '{"ValA": {"completion_time": "2024-01-02T00:00:00Z", "balance": "1"}}',
            '{"ValA": [{"completion_time": "2024-01-02T00:00:00Z"}]}',
            '{"ValA": [{"completion_time": "2024-01-02T00:00:00Z", "balance": 5000000}]}',
            '{"ValA": [{"completion_time": "2024-01-02T00:00:00Z", "balance": "-1"}]}',
            '{"ValA": [{"completion_time": "soon", "balance": "1"}]}',
            '{"ValA": [{"completion_time": "2024-01-02T00:00:00Z", "balance": "²"}]}',
            '{"ValA": [{"completion_time": "2024-01-02T00:00:00Z", "balance": "١٢"}]}',
        ],
    )
    def test_malformed_content(self, store: SnapshotStore, content: str) -> None:
        store.path.write_text(content, encoding="utf-8")

        with pytest.raises(SnapshotFormatError):
            store.load()

    def test_empty_object_is_valid(self, store: SnapshotStore) -> None:
        store.path.write_text("{}")
        assert store.load() == {}

    def test_non_utf8_bytes(self, store: SnapshotStore) -> None:
        store.path.write_bytes(b'{"A\xff": []}')

        with pytest.raises(SnapshotFormatError, match="not UTF-8"):
            store.load()
