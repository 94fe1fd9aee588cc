"""User defaults for the upload command.

Defaults are read from ~/.config/pspublisher/config.toml, for example::

    key = "~/keys/play-service-account.json"
    track = "internal"
    status = "draft"
    release_notes = "Nightly build"

Values given on the command line always win over the file.
"""

import dataclasses
import logging
import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pspublisher.core.paths import get_settings_path
from pspublisher.models.release import MAX_RELEASE_NOTES_LENGTH, PublishStatus, UploadRequest

logger = logging.getLogger(__name__)


class PublisherSettings(BaseModel):
    """Defaults applied to flags that were not given on the command line.

    Attributes:
        key: Service account key file.
        track: Default track name.
        status: Default publish status.
        release_notes: Default release notes text.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: Annotated[
        str | None,
        Field(description="Service account key file"),
    ] = None
    track: Annotated[
        str | None,
        Field(min_length=1, description="Default track name"),
    ] = None
    status: Annotated[
        PublishStatus | None,
        Field(description="Default publish status"),
    ] = None
    release_notes: Annotated[
        str | None,
        Field(max_length=MAX_RELEASE_NOTES_LENGTH, description="Default release notes"),
    ] = None


class SettingsError(Exception):
    """Raised when the settings file cannot be read or is invalid."""


def load_settings(path: Path | None = None) -> PublisherSettings:
    """Load user defaults from a TOML file.

    A missing file is not an error; it yields empty defaults.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated PublisherSettings.

    Raises:
        SettingsError: If the file cannot be read, parsed or validated.
    """
    settings_path = path or get_settings_path()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        logger.debug("No settings file at %s", settings_path)
        return PublisherSettings()
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings file {settings_path}: {e}") from e

    try:
        settings = PublisherSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e}") from e

    logger.debug("Loaded settings from %s", settings_path)
    return settings


def apply_settings(request: UploadRequest, settings: PublisherSettings) -> UploadRequest:
    """Fill unset request fields from settings.

    Args:
        request: Raw request built from CLI flags.
        settings: User defaults.

    Returns:
        A new request with defaults applied.
    """
    key = request.key or (str(Path(settings.key).expanduser()) if settings.key else None)
    status = request.status
    if status is None and settings.status is not None:
        status = settings.status.value
    return dataclasses.replace(
        request,
        key=key,
        track=request.track or settings.track,
        status=status,
        release_notes=request.release_notes
        if request.release_notes is not None
        else settings.release_notes,
    )
