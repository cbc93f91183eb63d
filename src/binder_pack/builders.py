"""Archive builders.

Both builders expose build(root_dir, output_path, strip_prefix) and know
nothing about composites. The splice engine only ever sees the finished file.
"""
from __future__ import annotations

import os
import shutil
import subprocess
import sys
import zipfile
from pathlib import Path

from binder_core.errors import ExternalToolFailure, SpliceIOError
from binder_core.protocol import COPY_CHUNK_SIZE

PCK_TOOL_NAME = "godotpcktool.exe" if os.name == "nt" else "godotpcktool"


def default_tool_path() -> Path:
    """Packer shipped next to the running program, under tool/."""
    return Path(sys.argv[0]).resolve().parent / "tool" / PCK_TOOL_NAME


class PckToolBuilder:
    """Adds a directory tree to a PCK archive via the external packer.

    If the output archive already exists the packer adds to it.
    """

    def __init__(self, tool_path: Path):
        self.tool_path = Path(tool_path)

    def check(self) -> None:
        if not self.tool_path.is_file():
            raise ExternalToolFailure(f"{self.tool_path.name} not found at {self.tool_path}")

    def command(self, root_dir: Path, output_path: Path, strip_prefix: Path) -> list[str]:
        return [
            str(self.tool_path),
            str(output_path),
            "-a", "add", str(root_dir),
            "--remove-prefix", str(strip_prefix),
        ]

    def build(self, root_dir: Path, output_path: Path, strip_prefix: Path) -> Path:
        self.check()
        cmd = self.command(root_dir, output_path, strip_prefix)
        try:
            r = subprocess.run(
                cmd, check=False, capture_output=True, text=True, encoding="utf-8", errors="replace"
            )
        except OSError as e:
            raise ExternalToolFailure(f"Failed to execute {self.tool_path.name}: {e}") from e
        if r.returncode != 0:
            raise ExternalToolFailure(
                f"{self.tool_path.name} exited with status {r.returncode}",
                returncode=r.returncode,
                stderr=r.stderr,
            )
        return Path(output_path)


class ZipArchiveBuilder:
    """Writes a directory tree into a fresh zip archive, entries sorted."""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression

    def build(self, root_dir: Path, output_path: Path, strip_prefix: Path) -> Path:
        root_dir, strip_prefix = Path(root_dir), Path(strip_prefix)
        files = sorted(p for p in root_dir.rglob("*") if p.is_file())
        try:
            with zipfile.ZipFile(output_path, "w", compression=self.compression) as zf:
                for p in files:
                    info = zipfile.ZipInfo.from_file(p, p.relative_to(strip_prefix).as_posix())
                    info.compress_type = self.compression
                    with open(p, "rb") as src, zf.open(info, "w") as dst:
                        shutil.copyfileobj(src, dst, COPY_CHUNK_SIZE)
        except (OSError, ValueError) as e:
            raise SpliceIOError(f"Failed to write zip archive {output_path}: {e}") from e
        return Path(output_path)
