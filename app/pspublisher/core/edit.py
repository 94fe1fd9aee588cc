"""Edit transaction session.

An edit is a server-side transaction that scopes a set of publishing
changes to one package. :class:`EditSession` owns exactly one open edit
and exposes each transaction step as a method returning a Result. Once
the edit is committed or deleted the session is closed and refuses any
further call.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from pspublisher.core.errors import (
    EditClosedError,
    PublisherApiError,
    WorkflowError,
    WorkflowStep,
)
from pspublisher.core.result import Err, Ok, Result
from pspublisher.models.release import ApkUpload, TrackRelease, build_track_body
from pspublisher.publisher.base import Publisher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EditState(str, Enum):
    """Lifecycle state of an edit session."""

    CREATED = "created"
    LISTINGS_FETCHED = "listings_fetched"
    APK_UPLOADED = "apk_uploaded"
    MAPPING_UPLOADED = "mapping_uploaded"
    TRACK_UPDATED = "track_updated"
    VALIDATED = "validated"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"

    @property
    def is_terminal(self) -> bool:
        """Check if no further calls are allowed in this state."""
        return self in (EditState.COMMITTED, EditState.ROLLED_BACK)


class EditSession:
    """A single open edit for one package.

    Attributes:
        publisher: API client used for every call.
        package_id: Package the edit is scoped to.
        edit_id: Server-assigned edit id.
        state: Current lifecycle state.
    """

    def __init__(self, publisher: Publisher, package_id: str, edit_id: str) -> None:
        self.publisher = publisher
        self.package_id = package_id
        self.edit_id = edit_id
        self.state = EditState.CREATED

    @classmethod
    def open(cls, publisher: Publisher, package_id: str) -> Result[EditSession, WorkflowError]:
        """Create a new edit for ``package_id``.

        Nothing needs rolling back if this fails.
        """
        try:
            edit_id = publisher.create_edit(package_id)
        except PublisherApiError as e:
            return Err(WorkflowError(WorkflowStep.CREATE_EDIT, str(e)))
        logger.debug("Opened edit %s for %s", edit_id, package_id)
        return Ok(cls(publisher, package_id, edit_id))

    @property
    def is_closed(self) -> bool:
        return self.state.is_terminal

    def _ensure_open(self) -> None:
        if self.is_closed:
            msg = f"Edit {self.edit_id} is already {self.state.value}"
            raise EditClosedError(msg)

    def _call(
        self,
        step: WorkflowStep,
        call: Callable[[], T],
        next_state: EditState | None = None,
    ) -> Result[T, WorkflowError]:
        """Run one API call as a workflow step.

        Args:
            step: Step reported if the call fails.
            call: Zero-argument callable issuing the request.
            next_state: State to enter on success, if the step advances the edit.
        """
        self._ensure_open()
        try:
            value = call()
        except PublisherApiError as e:
            logger.debug("%s failed for edit %s: %s", e.operation, self.edit_id, e)
            return Err(WorkflowError(step, str(e), edit_id=self.edit_id))
        if next_state is not None:
            self.state = next_state
        return Ok(value)

    def fetch_language(self) -> Result[str, WorkflowError]:
        """Return the language of the first store listing.

        Release notes are published in this language. A package without
        any listing has no language to use, which fails the step.
        """
        result = self._call(
            WorkflowStep.FETCH_LISTINGS,
            lambda: self.publisher.list_listings(self.package_id, self.edit_id),
        )
        if isinstance(result, Err):
            return result
        listings = result.value
        if not listings or not listings[0].get("language"):
            return Err(
                WorkflowError(
                    WorkflowStep.FETCH_LISTINGS,
                    f"No store listings found for {self.package_id}; "
                    "cannot determine release notes language",
                    edit_id=self.edit_id,
                )
            )
        self.state = EditState.LISTINGS_FETCHED
        logger.debug("Found %d listing(s), using %s", len(listings), listings[0]["language"])
        return Ok(listings[0]["language"])

    def list_track_names(self) -> Result[list[str], WorkflowError]:
        """Return the names of the tracks known to the edit."""
        result = self._call(
            WorkflowStep.LIST_TRACKS,
            lambda: self.publisher.list_tracks(self.package_id, self.edit_id),
        )
        return result.map(lambda tracks: [t.get("track", "") for t in tracks])

    def upload_apk(self, apk_path: Path) -> Result[ApkUpload, WorkflowError]:
        return self._call(
            WorkflowStep.UPLOAD_APK,
            lambda: self.publisher.upload_apk(self.package_id, self.edit_id, apk_path),
            EditState.APK_UPLOADED,
        )

    def upload_mapping(
        self, version_code: int, mapping_path: Path
    ) -> Result[dict[str, Any], WorkflowError]:
        return self._call(
            WorkflowStep.UPLOAD_MAPPING,
            lambda: self.publisher.upload_deobfuscation_file(
                self.package_id, self.edit_id, version_code, mapping_path
            ),
            EditState.MAPPING_UPLOADED,
        )

    def update_track(
        self, track: str, release: TrackRelease
    ) -> Result[dict[str, Any], WorkflowError]:
        body = build_track_body(track, release)
        return self._call(
            WorkflowStep.UPDATE_TRACK,
            lambda: self.publisher.update_track(self.package_id, self.edit_id, track, body),
            EditState.TRACK_UPDATED,
        )

    def validate(self) -> Result[dict[str, Any], WorkflowError]:
        return self._call(
            WorkflowStep.VALIDATE,
            lambda: self.publisher.validate_edit(self.package_id, self.edit_id),
            EditState.VALIDATED,
        )

    def commit(self) -> Result[dict[str, Any], WorkflowError]:
        return self._call(
            WorkflowStep.COMMIT,
            lambda: self.publisher.commit_edit(self.package_id, self.edit_id),
            EditState.COMMITTED,
        )

    def delete(self) -> str | None:
        """Delete the edit, discarding every change made in it.

        Deletion is attempted at most once; the session is closed
        afterwards whether or not the call succeeded.

        Returns:
            None on success, otherwise the error text.

        Raises:
            EditClosedError: If the edit was already committed or deleted.
        """
        self._ensure_open()
        self.state = EditState.ROLLED_BACK
        try:
            self.publisher.delete_edit(self.package_id, self.edit_id)
        except PublisherApiError as e:
            return str(e)
        return None
