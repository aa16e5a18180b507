"""Tests for the BackupLocationCache."""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from autosave.core.allocator import InstanceDirectoryAllocator
from autosave.core.location import BackupLocationCache


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    return tmp_path / "backup"


@pytest.fixture
def cache(backup_dir: Path) -> BackupLocationCache:
    allocator = InstanceDirectoryAllocator("EditorInstance", sleep=lambda _: None)
    return BackupLocationCache(backup_dir, allocator, clock=lambda: datetime(2020, 12, 26, 9, 30))


class TestResolve:
    def test_creates_date_partition_and_instance(self, cache: BackupLocationCache, backup_dir: Path) -> None:
        location = cache.resolve()
        assert location == backup_dir / "2020-12-26" / "EditorInstance1"
        assert location.is_dir()
        assert cache.cached == location

    def test_repeated_resolve_is_idempotent(self, cache: BackupLocationCache) -> None:
        first = cache.resolve()
        assert cache.resolve() == first
        assert cache.resolve() == first
        assert sorted(p.name for p in first.parent.iterdir()) == ["EditorInstance1"]

    def test_deleted_directory_recreated_at_same_path(self, cache: BackupLocationCache) -> None:
        first = cache.resolve()
        # Another process claims the next number meanwhile; we must not move to it
        (first.parent / "EditorInstance2").mkdir()
        shutil.rmtree(first)

        again = cache.resolve()
        assert again == first
        assert again.is_dir()

    def test_whole_tree_deleted_recreated(self, cache: BackupLocationCache, backup_dir: Path) -> None:
        first = cache.resolve()
        shutil.rmtree(backup_dir)
        assert cache.resolve() == first
        assert first.is_dir()

    def test_invalidate_allocates_new_directory(self, cache: BackupLocationCache) -> None:
        first = cache.resolve()
        cache.invalidate()
        assert cache.cached is None
        second = cache.resolve()
        assert second != first
        assert second.name == "EditorInstance2"

    def test_allocates_only_once(self, backup_dir: Path) -> None:
        allocator = MagicMock()
        allocator.allocate.side_effect = lambda root: root / "EditorInstance1"
        cache = BackupLocationCache(backup_dir, allocator)
        cache.resolve()
        cache.resolve()
        allocator.allocate.assert_called_once()

    def test_custom_date_format(self, backup_dir: Path) -> None:
        allocator = InstanceDirectoryAllocator("Inst", sleep=lambda _: None)
        cache = BackupLocationCache(
            backup_dir, allocator, subdir_format="%Y%m%d", clock=lambda: datetime(2024, 5, 1)
        )
        assert cache.backup_root() == backup_dir / "20240501"
        assert cache.resolve() == backup_dir / "20240501" / "Inst1"
