"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from pspublisher import __version__
from pspublisher.cli.commands import upload
from pspublisher.utils.formatting import err_console

UPLOAD_APK_COMMAND = "uploadApk"

# Create main Typer app
app = typer.Typer(
    name="pspublisher",
    help="Publish Android packages to Google Play.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pspublisher version {__version__}")
        raise typer.Exit()


def show_usage() -> None:
    """Print top-level usage to standard error."""
    err_console.print(f"pspublisher {__version__}", highlight=False)
    err_console.print("Usage: pspublisher <command> [<args>]", highlight=False, markup=False)
    err_console.print("Supported commands", highlight=False)
    err_console.print(f"    {UPLOAD_APK_COMMAND}\tUpload Apk to Play Store", highlight=False)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """pspublisher - upload APKs to Google Play release tracks."""
    if ctx.invoked_subcommand is None:
        show_usage()
        raise typer.Exit(code=1)


# Register commands
app.add_typer(upload.app, name=UPLOAD_APK_COMMAND)


if __name__ == "__main__":
    app()
