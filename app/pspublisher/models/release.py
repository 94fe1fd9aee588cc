"""Release domain models.

This module defines the data structures passed between input validation,
the edit transaction workflow and the publishing API client.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

# Hard upper bound enforced by Google Play on release notes per language.
MAX_RELEASE_NOTES_LENGTH = 500

DEFAULT_RELEASE_NOTES = "Uploaded with pspublisher"


class PublishStatus(str, Enum):
    """Status of a release on a track.

    Attributes:
        COMPLETED: Release is rolled out to all users of the track.
        DRAFT: Release is created but not yet rolled out.
        HALTED: Rollout is halted.
        IN_PROGRESS: Staged rollout in progress.
    """

    COMPLETED = "completed"
    DRAFT = "draft"
    HALTED = "halted"
    IN_PROGRESS = "inProgress"


@dataclass(frozen=True, slots=True)
class UploadRequest:
    """Raw, unvalidated input for an upload.

    Every field mirrors a CLI flag. Empty strings and None both mean
    "not given".
    """

    package_id: str | None = None
    key: str | None = None
    apk: str | None = None
    track: str | None = None
    mapping: str | None = None
    release_notes: str | None = None
    release_notes_file: str | None = None
    status: str | None = None


@dataclass(frozen=True, slots=True)
class UploadConfig:
    """Validated upload configuration.

    Attributes:
        package_id: Application package name, e.g. ``com.example.app``.
        key_path: Service account key file.
        apk_path: APK file to upload.
        track: Name of the target track (production, beta, ...).
        release_notes: Release notes text, at most 500 characters.
        status: Status for the new release.
        mapping_path: Optional ProGuard mapping file.
    """

    package_id: str
    key_path: Path
    apk_path: Path
    track: str
    release_notes: str
    status: PublishStatus
    mapping_path: Path | None = None

    def __post_init__(self) -> None:
        if len(self.release_notes) > MAX_RELEASE_NOTES_LENGTH:
            msg = f"Release notes cannot exceed {MAX_RELEASE_NOTES_LENGTH} characters"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ApkUpload:
    """Result of uploading an APK to an edit.

    Attributes:
        version_code: Version code assigned to the uploaded APK.
        sha1: SHA-1 checksum of the uploaded binary.
        sha256: SHA-256 checksum, if reported.
    """

    version_code: int
    sha1: str
    sha256: str | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> "ApkUpload":
        """Build from an ``edits.apks.upload`` response body."""
        binary = response.get("binary") or {}
        return cls(
            version_code=int(response["versionCode"]),
            sha1=binary.get("sha1", ""),
            sha256=binary.get("sha256"),
        )


@dataclass(frozen=True, slots=True)
class LocalizedText:
    """Text in a single language."""

    language: str
    text: str

    def to_body(self) -> dict[str, str]:
        return {"language": self.language, "text": self.text}


@dataclass(frozen=True, slots=True)
class TrackRelease:
    """A single release on a track.

    Attributes:
        status: Release status.
        version_codes: Version codes included in the release.
        release_notes: Localized release notes.
    """

    status: PublishStatus
    version_codes: tuple[int, ...]
    release_notes: tuple[LocalizedText, ...] = field(default_factory=tuple)

    def to_body(self) -> dict[str, Any]:
        """Serialize to the API representation.

        Version codes are int64 values and therefore encoded as strings.
        """
        return {
            "status": self.status.value,
            "versionCodes": [str(code) for code in self.version_codes],
            "releaseNotes": [note.to_body() for note in self.release_notes],
        }


def build_track_body(track: str, release: TrackRelease) -> dict[str, Any]:
    """Build a track update body that replaces all releases with ``release``."""
    return {"track": track, "releases": [release.to_body()]}
