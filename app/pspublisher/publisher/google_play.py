"""Google Play Android Publisher API client.

Thin wrapper around the ``androidpublisher v3`` discovery client. Each
method maps to one API call and converts library errors into
:class:`PublisherApiError`.
"""

from __future__ import annotations

import http.client
import logging
from pathlib import Path
from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiClientError
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload

from pspublisher.core.errors import PublisherApiError, SessionError
from pspublisher.models.release import ApkUpload
from pspublisher.publisher.base import (
    APK_CONTENT_TYPE,
    MAPPING_CONTENT_TYPE,
    PROGUARD_FILE_TYPE,
    Publisher,
)

logger = logging.getLogger(__name__)
# Raw response dumps, only enabled with --verbose
wire_logger = logging.getLogger("pspublisher.publisher.wire")

ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"


def _describe(error: Exception) -> tuple[str, int | None]:
    """Extract a message and HTTP status from a library error."""
    if isinstance(error, HttpError):
        status = getattr(error.resp, "status", None)
        return str(error), int(status) if status is not None else None
    return str(error) or type(error).__name__, None


class GooglePlayPublisher(Publisher):
    """Publisher backed by the Google Play Android Publisher API.

    Attributes:
        service: The discovery resource returned by ``googleapiclient.discovery.build``.
    """

    def __init__(self, service: Any) -> None:
        self.service = service

    @classmethod
    def from_key_file(cls, key_path: Path) -> GooglePlayPublisher:
        """Authenticate with a service account key file.

        Args:
            key_path: Path to the service account JSON key.

        Returns:
            A ready-to-use publisher.

        Raises:
            SessionError: If the key is unusable or the client cannot be built.
        """
        try:
            credentials = Credentials.from_service_account_file(
                str(key_path), scopes=[ANDROID_PUBLISHER_SCOPE]
            )
            service = build(
                "androidpublisher",
                "v3",
                credentials=credentials,
                cache_discovery=False,
            )
        except (OSError, ValueError, GoogleAuthError, GoogleApiClientError) as e:
            raise SessionError(f"Failed to create publisher service:\n{e}") from e
        logger.debug("Built androidpublisher v3 client for %s", key_path)
        return cls(service)

    def _execute(self, operation: str, request: Any) -> Any:
        """Execute a prepared request, translating failures."""
        logger.debug("--> %s", operation)
        try:
            response = request.execute()
        except (
            GoogleApiClientError,
            GoogleAuthError,
            httplib2.HttpLib2Error,
            http.client.HTTPException,
            OSError,
        ) as e:
            message, status = _describe(e)
            raise PublisherApiError(operation, message, status=status) from e
        wire_logger.debug("<-- %s %r", operation, response)
        return response

    def create_edit(self, package_id: str) -> str:
        edits = self.service.edits()
        response = self._execute("edits.insert", edits.insert(packageName=package_id, body={}))
        try:
            return response["id"]
        except (KeyError, TypeError) as e:
            raise PublisherApiError(
                "edits.insert", f"Unexpected insert response: {response!r}"
            ) from e

    def delete_edit(self, package_id: str, edit_id: str) -> None:
        edits = self.service.edits()
        self._execute("edits.delete", edits.delete(packageName=package_id, editId=edit_id))

    def list_listings(self, package_id: str, edit_id: str) -> list[dict[str, Any]]:
        listings = self.service.edits().listings()
        response = self._execute(
            "edits.listings.list", listings.list(packageName=package_id, editId=edit_id)
        )
        return list((response or {}).get("listings", []))

    def list_tracks(self, package_id: str, edit_id: str) -> list[dict[str, Any]]:
        tracks = self.service.edits().tracks()
        response = self._execute(
            "edits.tracks.list", tracks.list(packageName=package_id, editId=edit_id)
        )
        return list((response or {}).get("tracks", []))

    def upload_apk(self, package_id: str, edit_id: str, apk_path: Path) -> ApkUpload:
        logger.debug("Uploading apk file %s", apk_path.name)
        try:
            media = MediaFileUpload(str(apk_path), mimetype=APK_CONTENT_TYPE)
        except OSError as e:
            raise PublisherApiError("edits.apks.upload", str(e)) from e
        apks = self.service.edits().apks()
        response = self._execute(
            "edits.apks.upload",
            apks.upload(packageName=package_id, editId=edit_id, media_body=media),
        )
        try:
            return ApkUpload.from_response(response)
        except (KeyError, TypeError, ValueError) as e:
            raise PublisherApiError(
                "edits.apks.upload", f"Unexpected upload response: {response!r}"
            ) from e

    def upload_deobfuscation_file(
        self,
        package_id: str,
        edit_id: str,
        version_code: int,
        mapping_path: Path,
    ) -> dict[str, Any]:
        logger.debug("Uploading mapping file %s for %d", mapping_path.name, version_code)
        try:
            media = MediaFileUpload(str(mapping_path), mimetype=MAPPING_CONTENT_TYPE)
        except OSError as e:
            raise PublisherApiError("edits.deobfuscationfiles.upload", str(e)) from e
        files = self.service.edits().deobfuscationfiles()
        return self._execute(
            "edits.deobfuscationfiles.upload",
            files.upload(
                packageName=package_id,
                editId=edit_id,
                apkVersionCode=version_code,
                deobfuscationFileType=PROGUARD_FILE_TYPE,
                media_body=media,
            ),
        )

    def update_track(
        self,
        package_id: str,
        edit_id: str,
        track: str,
        body: dict[str, Any],
    ) -> dict[str, Any]:
        tracks = self.service.edits().tracks()
        return self._execute(
            "edits.tracks.update",
            tracks.update(packageName=package_id, editId=edit_id, track=track, body=body),
        )

    def validate_edit(self, package_id: str, edit_id: str) -> dict[str, Any]:
        edits = self.service.edits()
        return self._execute(
            "edits.validate", edits.validate(packageName=package_id, editId=edit_id)
        )

    def commit_edit(self, package_id: str, edit_id: str) -> dict[str, Any]:
        edits = self.service.edits()
        return self._execute("edits.commit", edits.commit(packageName=package_id, editId=edit_id))
