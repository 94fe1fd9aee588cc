"""Abstract base class for publishing API clients.

This module defines the Publisher interface that the edit transaction
workflow talks to. The production implementation wraps the Google Play
Android Publisher API; tests use a recording fake.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pspublisher.models.release import ApkUpload

APK_CONTENT_TYPE = "application/vnd.android.package-archive"
MAPPING_CONTENT_TYPE = "application/octet-stream"
PROGUARD_FILE_TYPE = "proguard"


class Publisher(ABC):
    """Abstract base class for publishing API clients.

    Every method issues exactly one synchronous request. Failures are
    raised as :class:`~pspublisher.core.errors.PublisherApiError`.

    Example:
        >>> publisher = GooglePlayPublisher.from_key_file(Path("key.json"))
        >>> edit_id = publisher.create_edit("com.example.app")
        >>> publisher.commit_edit("com.example.app", edit_id)
    """

    @abstractmethod
    def create_edit(self, package_id: str) -> str:
        """Open a new edit.

        Returns:
            The edit id.
        """

    @abstractmethod
    def delete_edit(self, package_id: str, edit_id: str) -> None:
        """Discard an edit and all changes made in it."""

    @abstractmethod
    def list_listings(self, package_id: str, edit_id: str) -> list[dict[str, Any]]:
        """List store listings, one per language."""

    @abstractmethod
    def list_tracks(self, package_id: str, edit_id: str) -> list[dict[str, Any]]:
        """List tracks of the package."""

    @abstractmethod
    def upload_apk(self, package_id: str, edit_id: str, apk_path: Path) -> ApkUpload:
        """Upload an APK file to the edit."""

    @abstractmethod
    def upload_deobfuscation_file(
        self,
        package_id: str,
        edit_id: str,
        version_code: int,
        mapping_path: Path,
    ) -> dict[str, Any]:
        """Upload a ProGuard mapping file for ``version_code``."""

    @abstractmethod
    def update_track(
        self,
        package_id: str,
        edit_id: str,
        track: str,
        body: dict[str, Any],
    ) -> dict[str, Any]:
        """Replace a track's configuration with ``body``."""

    @abstractmethod
    def validate_edit(self, package_id: str, edit_id: str) -> dict[str, Any]:
        """Check the edit for consistency without committing."""

    @abstractmethod
    def commit_edit(self, package_id: str, edit_id: str) -> dict[str, Any]:
        """Commit the edit."""
