"""uploadApk command implementation.

Validates the input, authenticates against Google Play and publishes the
APK to a track in one edit transaction. Any failure exits with status 1;
if an edit was open it is deleted first.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from pspublisher import __version__
from pspublisher.core.errors import SessionError, WorkflowError
from pspublisher.core.logs import configure_logging
from pspublisher.core.result import Err
from pspublisher.core.settings import SettingsError, apply_settings, load_settings
from pspublisher.core.validation import validate_upload_request
from pspublisher.core.workflow import run_upload
from pspublisher.models.release import DEFAULT_RELEASE_NOTES, UploadRequest
from pspublisher.publisher.base import Publisher
from pspublisher.publisher.google_play import GooglePlayPublisher
from pspublisher.utils.formatting import err_console, print_error, print_info, print_success

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Upload an APK to a Play Store track.",
    invoke_without_command=True,
)


def create_publisher(key_path: Path) -> Publisher:
    """Authenticate and return the publishing API client."""
    return GooglePlayPublisher.from_key_file(key_path)


def show_command_help(ctx: typer.Context) -> None:
    """Print uploadApk usage and its arguments to standard error."""
    err_console.print(f"pspublisher {__version__}", highlight=False)
    err_console.print(
        f"Usage: pspublisher {ctx.info_name} [<args>]", highlight=False, markup=False
    )
    err_console.print("Supported arguments", highlight=False)
    for param in ctx.command.params:
        err_console.print(f"  {', '.join(param.opts)}", highlight=False, markup=False)
        help_text = getattr(param, "help", None)
        if help_text:
            err_console.print(f"    \t{help_text}", highlight=False, markup=False)


def _report_workflow_error(error: WorkflowError) -> None:
    print_error(str(error))
    if error.rollback_error is not None:
        print_error(f"Failed to delete edit {error.edit_id}:\n{error.rollback_error}")
    elif error.rolled_back:
        print_info(f"Edit {error.edit_id} was discarded, nothing was published.")


@app.callback(invoke_without_command=True)
def upload_apk(
    ctx: typer.Context,
    package_id: Annotated[
        str | None,
        typer.Option("--id", "-id", help="Required. Application package name id."),
    ] = None,
    key: Annotated[
        str | None,
        typer.Option("--key", "-key", help="Required. Service account key file."),
    ] = None,
    apk: Annotated[
        str | None,
        typer.Option("--apk", "-apk", help="Required. Path to apk file to upload."),
    ] = None,
    track: Annotated[
        str | None,
        typer.Option(
            "--track", "-track", help="Required. Name of track where to publish the apk."
        ),
    ] = None,
    mapping: Annotated[
        str | None,
        typer.Option(
            "--mapping", "-mapping", help="Optional. Path to ProGuard mapping file to upload."
        ),
    ] = None,
    release_notes: Annotated[
        str | None,
        typer.Option(
            "--releasenotes",
            "-releasenotes",
            help=f"Optional. Release notes. Defaults to \"{DEFAULT_RELEASE_NOTES}\".",
        ),
    ] = None,
    release_notes_file: Annotated[
        str | None,
        typer.Option(
            "--releasenotesfile",
            "-releasenotesfile",
            help="Optional. Path to file containing release notes.",
        ),
    ] = None,
    status: Annotated[
        str | None,
        typer.Option(
            "--status",
            "-status",
            help="Optional. Publish status: completed, draft, halted or inProgress. "
            "Defaults to completed.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-verbose", help="Optional. Enable verbose logging."),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-debug", help="Optional. Enable debug logging."),
    ] = False,
) -> None:
    """Upload an APK to a Play Store track.

    Creates an edit, uploads the APK (and optional mapping file), updates
    the track with a single release, validates and commits. The edit is
    deleted if any step fails.
    """
    configure_logging(verbose=verbose, debug=debug)

    flag_values = (
        package_id,
        key,
        apk,
        track,
        mapping,
        release_notes,
        release_notes_file,
        status,
    )
    if all(value is None for value in flag_values) and not (verbose or debug):
        show_command_help(ctx)
        raise typer.Exit(code=1)

    try:
        settings = load_settings()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    request = apply_settings(
        UploadRequest(
            package_id=package_id,
            key=key,
            apk=apk,
            track=track,
            mapping=mapping,
            release_notes=release_notes,
            release_notes_file=release_notes_file,
            status=status,
        ),
        settings,
    )

    validated = validate_upload_request(request)
    if isinstance(validated, Err):
        print_error(str(validated.error))
        raise typer.Exit(code=1)
    config = validated.value
    logger.debug(
        "Publishing %s to track %s with status %s",
        config.package_id,
        config.track,
        config.status.value,
    )

    print_info("Creating new service...")
    try:
        publisher = create_publisher(config.key_path)
    except SessionError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success("Service OK")

    result = run_upload(config, publisher)
    if isinstance(result, Err):
        _report_workflow_error(result.error)
        raise typer.Exit(code=1)

    outcome = result.value
    print_success(
        f"Published version code {outcome.apk.version_code} to {outcome.track} "
        f"({outcome.release.status.value})"
    )
