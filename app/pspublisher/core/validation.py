"""Input validation for the upload command.

Turns a raw :class:`UploadRequest` into a validated :class:`UploadConfig`
without touching the network. Files are opened once to check that they
are readable and closed again; uploads reopen them by path.
"""

import logging
from pathlib import Path

from pspublisher.core.errors import ConfigError, ConfigErrorKind
from pspublisher.core.result import Err, Ok, Result
from pspublisher.models.release import (
    DEFAULT_RELEASE_NOTES,
    MAX_RELEASE_NOTES_LENGTH,
    PublishStatus,
    UploadConfig,
    UploadRequest,
)

logger = logging.getLogger(__name__)

VALID_STATUSES = tuple(status.value for status in PublishStatus)


def _missing(message: str) -> Err[ConfigError]:
    return Err(ConfigError(ConfigErrorKind.MISSING_FIELD, message))


def _probe_readable(path: str, label: str) -> ConfigError | None:
    """Open ``path`` for reading and close it immediately.

    Returns:
        None if the file is readable, otherwise a ConfigError.
    """
    try:
        with open(path, "rb"):
            pass
    except OSError as e:
        return ConfigError(ConfigErrorKind.UNREADABLE_FILE, f"Cannot open {label}:\n{e}")
    logger.debug("%s is readable: %s", label, path)
    return None


def read_release_notes(path: str) -> Result[str, ConfigError]:
    """Read release notes from a UTF-8 text file."""
    try:
        return Ok(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ConfigError(
                ConfigErrorKind.UNREADABLE_FILE,
                f"Cannot read release notes file contents:\n{e}",
            )
        )


def parse_status(value: str | None) -> Result[PublishStatus, ConfigError]:
    """Parse a publish status string.

    None means "not given" and selects ``completed``. An empty string is
    rejected like any other unknown value.
    """
    if value is None:
        return Ok(PublishStatus.COMPLETED)
    try:
        return Ok(PublishStatus(value))
    except ValueError:
        return Err(
            ConfigError(
                ConfigErrorKind.INVALID_STATUS,
                f"Publish status not recognized. It needs to be one of {', '.join(VALID_STATUSES)}",
            )
        )


def validate_upload_request(request: UploadRequest) -> Result[UploadConfig, ConfigError]:
    """Validate raw upload input.

    Checks run in a fixed order and stop at the first failure:
    required fields, file readability, release notes length, status.

    Args:
        request: Raw input from the command line and settings file.

    Returns:
        Ok with the validated configuration, or Err describing the first
        problem found.
    """
    if not request.package_id:
        return _missing("Package id is required")
    if not request.key:
        return _missing("Key file is required")
    if not request.track:
        return _missing("Publish track is required")

    probes = [(request.apk or "", "apk file")]
    if request.mapping:
        probes.append((request.mapping, "mapping file"))
    probes.append((request.key, "key file"))
    for path, label in probes:
        error = _probe_readable(path, label)
        if error is not None:
            return Err(error)

    release_notes = (
        request.release_notes if request.release_notes is not None else DEFAULT_RELEASE_NOTES
    )
    if request.release_notes_file:
        notes_result = read_release_notes(request.release_notes_file)
        if isinstance(notes_result, Err):
            return notes_result
        release_notes = notes_result.value

    if len(release_notes) > MAX_RELEASE_NOTES_LENGTH:
        return Err(
            ConfigError(
                ConfigErrorKind.NOTES_TOO_LONG,
                f"Release notes cannot exceed {MAX_RELEASE_NOTES_LENGTH} characters "
                f"(got {len(release_notes)})",
            )
        )

    status_result = parse_status(request.status)
    if isinstance(status_result, Err):
        return status_result

    return Ok(
        UploadConfig(
            package_id=request.package_id,
            key_path=Path(request.key),
            apk_path=Path(request.apk or ""),
            track=request.track,
            release_notes=release_notes,
            status=status_result.value,
            mapping_path=Path(request.mapping) if request.mapping else None,
        )
    )
