"""AppBinder - Package applications with resources."""
from __future__ import annotations

from pathlib import Path

import click

from binder_core.errors import BinderError, ExternalToolFailure

from .pipeline import ARCHIVE_FORMATS, bind


@click.command()
@click.argument("executable", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("resource_dirs", nargs=-1, type=click.Path(path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write the bundled executable here")
@click.option("--format", "archive_format", type=click.Choice(ARCHIVE_FORMATS), default="pck", show_default=True)
@click.option(
    "--tool",
    "tool_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="APPBINDER_PCK_TOOL",
    help="Path to godotpcktool (default: tool/ next to this program)",
)
def main(
    executable: Path,
    resource_dirs: tuple[Path, ...],
    output: Path | None,
    archive_format: str,
    tool_path: Path | None,
) -> None:
    """Bundle EXECUTABLE with RESOURCE_DIRS into a single file.

    Example: appbinder game.x86_64 script sounds -o bundled_game
    """
    try:
        bind(
            executable,
            list(resource_dirs),
            output,
            archive_format=archive_format,
            tool_path=tool_path,
        )
    except ExternalToolFailure as e:
        click.echo(f"FATAL: {e.code}: {e}", err=True)
        if e.stderr:
            click.echo(f"stderr: {e.stderr}", err=True)
        raise SystemExit(1)
    except BinderError as e:
        # Fail closed with a single-line reason, no stack trace.
        click.echo(f"FATAL: {e.code}: {e}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
