"""Upload workflow with compensating rollback.

Runs the edit transaction for one APK:

    create -> fetch listings -> upload apk -> [upload mapping]
           -> update track -> validate -> commit

If any step after the edit was created fails, the edit is deleted once
and the failure is returned to the caller together with the rollback
outcome. Nothing here terminates the process.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

from pspublisher.core.edit import EditSession
from pspublisher.core.errors import WorkflowError
from pspublisher.core.result import Err, Ok, Result
from pspublisher.models.release import ApkUpload, LocalizedText, TrackRelease, UploadConfig
from pspublisher.publisher.base import Publisher
from pspublisher.utils.formatting import print_info, print_success

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UploadOutcome:
    """Summary of a committed upload.

    Attributes:
        edit_id: Id of the committed edit.
        apk: Upload result of the APK.
        track: Track that received the release.
        release: The release that was published.
        mapping_uploaded: Whether a mapping file was uploaded.
    """

    edit_id: str
    apk: ApkUpload
    track: str
    release: TrackRelease
    mapping_uploaded: bool = False


def build_release(config: UploadConfig, apk: ApkUpload, language: str) -> TrackRelease:
    """Build the single release published to the track."""
    return TrackRelease(
        status=config.status,
        version_codes=(apk.version_code,),
        release_notes=(LocalizedText(language=language, text=config.release_notes),),
    )


def _log_known_tracks(session: EditSession, track: str) -> Result[None, WorkflowError]:
    """List the edit's tracks at debug level before updating one."""
    if not logger.isEnabledFor(logging.DEBUG):
        return Ok(None)
    names = session.list_track_names()
    if isinstance(names, Err):
        return names
    logger.debug("Known tracks: %s", ", ".join(names.value) or "<none>")
    if track not in names.value:
        logger.debug("Track %s not listed yet; the API decides whether it exists", track)
    return Ok(None)


def _run_steps(session: EditSession, config: UploadConfig) -> Result[UploadOutcome, WorkflowError]:
    print_info("Getting app listings...")
    language = session.fetch_language()
    if isinstance(language, Err):
        return language
    print_success("Listings OK")

    print_info("Uploading APK...")
    uploaded = session.upload_apk(config.apk_path)
    if isinstance(uploaded, Err):
        return uploaded
    apk = uploaded.value
    print_success(f"APK upload {apk.sha1} OK (version code {apk.version_code})")

    if config.mapping_path is not None:
        print_info("Uploading mapping file...")
        mapping = session.upload_mapping(apk.version_code, config.mapping_path)
        if isinstance(mapping, Err):
            return mapping
        print_success("Mapping upload OK")

    print_info("Update track...")
    known = _log_known_tracks(session, config.track)
    if isinstance(known, Err):
        return known
    release = build_release(config, apk, language.value)
    track = session.update_track(config.track, release)
    if isinstance(track, Err):
        return track
    print_success(f"Track {track.value.get('track', config.track)} update OK")

    print_info("Validate changes...")
    validated = session.validate()
    if isinstance(validated, Err):
        return validated
    print_success("Validation OK")

    print_info("Committing changes...")
    committed = session.commit()
    if isinstance(committed, Err):
        return committed
    print_success("Commit OK")

    return Ok(
        UploadOutcome(
            edit_id=session.edit_id,
            apk=apk,
            track=config.track,
            release=release,
            mapping_uploaded=config.mapping_path is not None,
        )
    )


def roll_back(session: EditSession, error: WorkflowError) -> WorkflowError:
    """Delete the edit after ``error`` and record how that went."""
    print_info(f"Deleting edit {session.edit_id}...")
    rollback_error = session.delete()
    if rollback_error is None:
        print_success(f"Delete {session.edit_id} OK")
    else:
        logger.debug("Deleting edit %s failed: %s", session.edit_id, rollback_error)
    return dataclasses.replace(
        error,
        edit_id=session.edit_id,
        rolled_back=rollback_error is None,
        rollback_error=rollback_error,
    )


def run_upload(config: UploadConfig, publisher: Publisher) -> Result[UploadOutcome, WorkflowError]:
    """Publish an APK to a track in a single edit transaction.

    Args:
        config: Validated upload configuration.
        publisher: Authenticated publishing API client.

    Returns:
        Ok with the outcome after a successful commit, or Err describing
        the failed step. When an edit was open, the error also reports
        whether it was deleted.
    """
    print_info("Creating new edit...")
    opened = EditSession.open(publisher, config.package_id)
    if isinstance(opened, Err):
        return opened
    session = opened.value
    print_success(f"Edit {session.edit_id} OK")

    result = _run_steps(session, config)
    if isinstance(result, Err):
        return Err(roll_back(session, result.error))
    return result
