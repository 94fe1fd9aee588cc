"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from pspublisher.core.errors import PublisherApiError
from pspublisher.models.release import ApkUpload
from pspublisher.publisher.base import Publisher


class RecordingPublisher(Publisher):
    """In-memory publisher that records every call.

    Set ``failures[operation] = "message"`` to make an operation raise
    PublisherApiError.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, str] = {}
        self.edit_id = "edit-1"
        self.listings: list[dict[str, Any]] = [{"language": "en-US", "title": "Example"}]
        self.tracks: list[dict[str, Any]] = [{"track": "production"}, {"track": "beta"}]
        self.apk = ApkUpload(version_code=42, sha1="abc123")
        self.track_bodies: list[dict[str, Any]] = []

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if operation in self.failures:
            raise PublisherApiError(operation, self.failures[operation], status=400)

    @property
    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]

    def create_edit(self, package_id: str) -> str:
        self._record("create_edit", package_id)
        return self.edit_id

    def delete_edit(self, package_id: str, edit_id: str) -> None:
        self._record("delete_edit", package_id, edit_id)

    def list_listings(self, package_id: str, edit_id: str) -> list[dict[str, Any]]:
        self._record("list_listings", package_id, edit_id)
        return self.listings

    def list_tracks(self, package_id: str, edit_id: str) -> list[dict[str, Any]]:
        self._record("list_tracks", package_id, edit_id)
        return self.tracks

    def upload_apk(self, package_id: str, edit_id: str, apk_path: Path) -> ApkUpload:
        self._record("upload_apk", package_id, edit_id, apk_path)
        return self.apk

    def upload_deobfuscation_file(
        self, package_id: str, edit_id: str, version_code: int, mapping_path: Path
    ) -> dict[str, Any]:
        self._record("upload_deobfuscation_file", package_id, edit_id, version_code, mapping_path)
        return {"deobfuscationFile": {"symbolType": "proguard"}}

    def update_track(
        self, package_id: str, edit_id: str, track: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        self._record("update_track", package_id, edit_id, track, body)
        self.track_bodies.append(body)
        return body

    def validate_edit(self, package_id: str, edit_id: str) -> dict[str, Any]:
        self._record("validate_edit", package_id, edit_id)
        return {"id": edit_id}

    def commit_edit(self, package_id: str, edit_id: str) -> dict[str, Any]:
        self._record("commit_edit", package_id, edit_id)
        return {"id": edit_id}


@pytest.fixture
def publisher() -> RecordingPublisher:
    """A call-recording publisher where every operation succeeds."""
    return RecordingPublisher()


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory so user settings never leak in."""
    config_home = tmp_path / "xdg-config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo logging configuration done by CLI invocations."""
    yield
    for name in ("pspublisher", "pspublisher.publisher.wire"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def apk_file(tmp_path: Path) -> Path:
    """A dummy APK file."""
    path = tmp_path / "app-release.apk"
    path.write_bytes(b"PK\x03\x04 not really an apk")
    return path


@pytest.fixture
def key_file(tmp_path: Path) -> Path:
    """A dummy service account key file."""
    path = tmp_path / "service-account.json"
    path.write_text('{"type": "service_account"}')
    return path


@pytest.fixture
def mapping_file(tmp_path: Path) -> Path:
    """A dummy ProGuard mapping file."""
    path = tmp_path / "mapping.txt"
    path.write_text("com.example.Foo -> a:\n")
    return path
