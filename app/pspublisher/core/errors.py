"""Error types for pspublisher.

Exceptions are raised at the API boundary only. Inside the workflow,
failures travel as :class:`ConfigError` and :class:`WorkflowError` values
in the ``Err`` branch of a Result.
"""

from dataclasses import dataclass
from enum import Enum


class PublisherError(Exception):
    """Base exception for publishing errors."""


class SessionError(PublisherError):
    """Raised when the publishing service cannot be authenticated or built."""


class PublisherApiError(PublisherError):
    """Raised when a call to the publishing API fails.

    Attributes:
        operation: Name of the API operation that failed.
        status: HTTP status code, if the failure came from an HTTP response.
    """

    def __init__(self, operation: str, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.status = status


class EditClosedError(PublisherError):
    """Raised when an edit is used after it was committed or deleted."""


class ConfigErrorKind(str, Enum):
    """Category of an input validation failure."""

    MISSING_FIELD = "missing_field"
    UNREADABLE_FILE = "unreadable_file"
    NOTES_TOO_LONG = "notes_too_long"
    INVALID_STATUS = "invalid_status"
    INVALID_SETTINGS = "invalid_settings"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """A configuration problem detected before any remote call.

    Attributes:
        kind: Failure category.
        message: Human-readable description.
    """

    kind: ConfigErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


class WorkflowStep(str, Enum):
    """Steps of the edit transaction that can fail."""

    CREATE_EDIT = "create edit"
    FETCH_LISTINGS = "fetch listings"
    UPLOAD_APK = "upload apk"
    UPLOAD_MAPPING = "upload mapping file"
    LIST_TRACKS = "list tracks"
    UPDATE_TRACK = "update track"
    VALIDATE = "validate"
    COMMIT = "commit"


@dataclass(frozen=True, slots=True)
class WorkflowError:
    """A failed workflow step, together with the rollback outcome.

    Attributes:
        step: The step that failed.
        message: Underlying error text.
        edit_id: Id of the edit that was open when the step failed.
        rolled_back: True if the edit was deleted successfully.
        rollback_error: Error text if deleting the edit failed.
    """

    step: WorkflowStep
    message: str
    edit_id: str | None = None
    rolled_back: bool = False
    rollback_error: str | None = None

    def __str__(self) -> str:
        return f"Failed to {self.step.value}:\n{self.message}"
