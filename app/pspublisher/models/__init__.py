"""Data models for pspublisher.

This module exports the core data structures used throughout the application.
"""

from pspublisher.models.release import (
    DEFAULT_RELEASE_NOTES,
    MAX_RELEASE_NOTES_LENGTH,
    ApkUpload,
    LocalizedText,
    PublishStatus,
    TrackRelease,
    UploadConfig,
    UploadRequest,
    build_track_body,
)

__all__ = [
    "DEFAULT_RELEASE_NOTES",
    "MAX_RELEASE_NOTES_LENGTH",
    "ApkUpload",
    "LocalizedText",
    "PublishStatus",
    "TrackRelease",
    "UploadConfig",
    "UploadRequest",
    "build_track_body",
]
