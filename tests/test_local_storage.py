from __future__ import annotations

import os
from pathlib import Path

import pytest

from persistent_settings import (
    InvalidArgumentError,
    LocalStorage,
    SettingsNotFoundError,
    StorageIOError,
    StorageSpace,
    UnsupportedStorageSpaceError,
)
from persistent_settings.storage import local


def test_user_roots_come_from_platformdirs(tmp_path: Path, monkeypatch):
    calls = []

    def fake_user_data_dir(appname=None, appauthor=None, roaming=False):
        calls.append(roaming)
        return str(tmp_path / ("roaming" if roaming else "local"))

    monkeypatch.setattr(local.platformdirs, "user_data_dir", fake_user_data_dir)
    storage = LocalStorage()

    assert storage.resolve_root(StorageSpace.ROAMING) == tmp_path / "roaming"
    assert storage.resolve_root(StorageSpace.LOCAL) == tmp_path / "local"
    assert calls == [True, False]


def test_instance_root_is_an_absolute_directory():
    root = LocalStorage().resolve_root(StorageSpace.INSTANCE)

    assert root.is_absolute()
    assert root.is_dir()


def test_custom_root_requires_absolute_path(tmp_path: Path):
    storage = LocalStorage()

    assert storage.resolve_root(StorageSpace.CUSTOM, tmp_path) == tmp_path
    with pytest.raises(InvalidArgumentError):
        storage.resolve_root(StorageSpace.CUSTOM)
    with pytest.raises(InvalidArgumentError):
        storage.resolve_root(StorageSpace.CUSTOM, Path("relative/dir"))


def test_unknown_storage_space_is_rejected():
    with pytest.raises(UnsupportedStorageSpaceError):
        LocalStorage().resolve_root("nowhere")


def test_create_directory_is_idempotent(tmp_path: Path):
    storage = LocalStorage()
    target = tmp_path / "a" / "b"

    storage.create_directory(target)
    storage.create_directory(target)

    assert storage.directory_exists(target)


def test_create_directory_under_a_file_fails(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(StorageIOError):
        LocalStorage().create_directory(blocker / "sub")


def test_read_missing_file_raises_not_found(tmp_path: Path):
    with pytest.raises(SettingsNotFoundError) as excinfo:
        LocalStorage().read_bytes(tmp_path / "missing.dat")

    assert isinstance(excinfo.value, FileNotFoundError)


def test_write_replaces_content_and_leaves_no_temp_files(tmp_path: Path):
    storage = LocalStorage()
    target = tmp_path / "Settings.dat"

    storage.write_bytes(target, b"first")
    storage.write_bytes(target, b"second")

    assert storage.file_exists(target)
    assert storage.read_bytes(target) == b"second"
    assert [p.name for p in tmp_path.iterdir()] == ["Settings.dat"]


def test_failed_write_keeps_previous_file(tmp_path: Path, monkeypatch):
    storage = LocalStorage()
    target = tmp_path / "Settings.dat"
    storage.write_bytes(target, b"valid")

    def broken_replace(src, dst):
        raise PermissionError("denied")

    monkeypatch.setattr(os, "replace", broken_replace)

    with pytest.raises(StorageIOError):
        storage.write_bytes(target, b"half")

    monkeypatch.undo()
    assert target.read_bytes() == b"valid"
    assert [p.name for p in tmp_path.iterdir()] == ["Settings.dat"]


def test_write_into_missing_directory_fails(tmp_path: Path):
    with pytest.raises(StorageIOError):
        LocalStorage().write_bytes(tmp_path / "nope" / "Settings.dat", b"data")


def test_delete_file_is_idempotent(tmp_path: Path):
    storage = LocalStorage()
    target = tmp_path / "Settings.dat"
    target.write_bytes(b"data")

    storage.delete_file(target)
    storage.delete_file(target)

    assert not storage.file_exists(target)


def test_delete_directory(tmp_path: Path):
    storage = LocalStorage()
    target = tmp_path / "MyApp"
    (target / "nested").mkdir(parents=True)
    (target / "nested" / "Settings.dat").write_bytes(b"data")

    with pytest.raises(StorageIOError):
        storage.delete_directory(target)

    storage.delete_directory(target, recursive=True)
    storage.delete_directory(target, recursive=True)

    assert not storage.directory_exists(target)
