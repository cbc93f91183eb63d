import json
from pathlib import Path
import click
from binder_core.errors import BinderError
from binder_core.footer import FooterFormat
from .splice import append, compose, extract, inspect_composite

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}

def _fail(e: BinderError):
    # Fail closed with a single-line reason, no stack trace.
    click.echo(f"FATAL: {e.code}: {e}", err=True)
    raise SystemExit(1)

@click.group()
def main():
    pass

@main.command("compose")
@click.argument("launcher", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--size-only", is_flag=True, help="Write an untagged 8-byte footer")
def compose_cmd(launcher: Path, archive: Path, output: Path, size_only: bool):
    fmt = FooterFormat.SIZE_ONLY if size_only else FooterFormat.SIZE_AND_TAG
    try:
        r = compose(launcher, archive, output, fmt)
    except BinderError as e:
        _fail(e)
    click.echo(f"Composed {output}: launcher {r.launcher_size} + archive {r.archive_size} + footer {fmt.width} = {r.total_size} bytes")

@main.command("extract")
@click.argument("composite", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("launcher_out", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--archive", "archive_out", type=click.Path(dir_okay=False, path_type=Path), help="Also write the embedded archive here")
@click.option("--strict", is_flag=True, help="Fail instead of scanning when the footer is invalid")
def extract_cmd(composite: Path, launcher_out: Path, archive_out: Path | None, strict: bool):
    try:
        r = extract(composite, launcher_out, archive_out, strict=strict)
    except BinderError as e:
        _fail(e)
    b = r.boundary
    if b.method == "footer":
        click.echo(f"Found archive via footer size. Size: {b.archive_size}")
    click.echo(f"Extracted launcher size: {b.launcher_size} bytes")
    if archive_out is not None:
        if r.archive_path is None:
            click.echo("No embedded archive found in executable.")
        else:
            click.echo(f"Extracted archive size: {b.archive_size} bytes")

@main.command("append")
@click.argument("composite", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
def append_cmd(composite: Path, archive: Path, output: Path):
    try:
        r = append(composite, archive, output)
    except BinderError as e:
        _fail(e)
    click.echo(f"Appended {r.appended_size} bytes to {output}; footer {r.previous_size} -> {r.footer_size}")

@main.command("inspect")
@click.argument("composite", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect_cmd(composite: Path):
    try:
        info = inspect_composite(composite)
    except BinderError as e:
        _fail(e)
    click.echo(json.dumps(info, **CANONICAL_JSON_KW))

if __name__ == "__main__":
    main()
