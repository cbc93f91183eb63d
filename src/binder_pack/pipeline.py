"""AppBinder - Resource directories to single-file executable."""
from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from binder_splice.splice import append, compose, extract

from .builders import PckToolBuilder, ZipArchiveBuilder, default_tool_path
from .staging import stage_resources

ARCHIVE_FORMATS = ("pck", "zip")
STAGING_DIR_NAME = "app-resources"
LAUNCHER_NAME = "launcher.exe" if os.name == "nt" else "launcher"


@dataclass(frozen=True)
class BindResult:
    archive_format: str
    staged: list[str]
    archive_size: int
    output: Path | None
    base_archive_reused: bool = False


def _bind_pck(executable: Path, root: Path, work: Path, output: Path | None, tool_path: Path) -> tuple[int, bool]:
    builder = PckToolBuilder(tool_path)
    builder.check()
    print(f"Using {builder.tool_path.name} at {builder.tool_path}")

    pck_path = work / "app.pck"
    launcher_copy = work / LAUNCHER_NAME

    # Reuse an already embedded archive as the base for new resources.
    r = extract(executable, launcher_copy, pck_path)
    b = r.boundary
    if b.method == "footer":
        print(f"Found archive via footer size. Size: {b.archive_size}")
    print(f"Extracted launcher size: {b.launcher_size} bytes")
    reused = r.archive_path is not None
    if not reused:
        print("No embedded archive found in executable.")

    builder.build(root, pck_path, root)
    print("PCK file created successfully")

    archive_size = pck_path.stat().st_size
    if output is not None:
        c = compose(launcher_copy, pck_path, output)
        print(f"Wrote {output} ({c.total_size} bytes)")
    return archive_size, reused


def _bind_zip(executable: Path, root: Path, work: Path, output: Path | None) -> int:
    zip_path = work / "app.zip"
    ZipArchiveBuilder().build(root, zip_path, root)
    print("ZIP file created successfully")

    archive_size = zip_path.stat().st_size
    if output is not None:
        a = append(executable, zip_path, output)
        print(f"Wrote {output}; archive size {a.previous_size} -> {a.footer_size}")
    return archive_size


def bind(
    executable: Path,
    resource_dirs: list[Path],
    output: Path | None = None,
    *,
    archive_format: str = "pck",
    tool_path: Path | None = None,
    workdir: Path | None = None,
) -> BindResult | None:
    """Stage resources, build an archive and splice it onto `executable`.

    pck: the archive already embedded in `executable` (if any) is extracted,
    extended by the packer and composed with a tagged footer.
    zip: a fresh zip is appended to `executable`, accumulating its
    size-only footer.
    Nothing is written when `output` is None.
    """
    if archive_format not in ARCHIVE_FORMATS:
        raise ValueError(f"Unknown archive format {archive_format!r}")
    executable = Path(executable)

    if not resource_dirs:
        print("No resource directories specified")
        return None
    print(f"Processing {len(resource_dirs)} resource directories")

    with tempfile.TemporaryDirectory(dir=workdir) as tmp:
        work = Path(tmp)
        root = work / STAGING_DIR_NAME
        staged = stage_resources([Path(d) for d in resource_dirs], root)

        if archive_format == "pck":
            size, reused = _bind_pck(
                executable, root, work, output, Path(tool_path) if tool_path else default_tool_path()
            )
        else:
            size, reused = _bind_zip(executable, root, work, output), False

    return BindResult(
        archive_format=archive_format,
        staged=[p.name for p in staged],
        archive_size=size,
        output=Path(output) if output is not None else None,
        base_archive_reused=reused,
    )
