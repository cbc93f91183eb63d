from __future__ import annotations

import shutil
from pathlib import Path
from warnings import warn

from binder_core.errors import SpliceIOError


def stage_resources(resource_dirs: list[Path], staging_root: Path) -> list[Path]:
    """Copy each resource directory into `staging_root/<dir name>`.

    Directories sharing a name are merged. A missing source is skipped with a
    warning; the others still get staged.
    """
    staging_root = Path(staging_root)
    staging_root.mkdir(parents=True, exist_ok=True)
    staged: list[Path] = []

    for src in resource_dirs:
        src = Path(src)
        print(f"Processing resource directory: {src}")
        if not src.is_dir():
            warn(f"Source directory does not exist: {src}")
            continue

        name = src.resolve().name
        if not name:
            raise SpliceIOError(f"Cannot stage {src}: it has no directory name")
        dest = staging_root / name
        try:
            shutil.copytree(src, dest, dirs_exist_ok=True)
        except (OSError, shutil.Error) as e:
            raise SpliceIOError(f"Failed to stage {src} into {dest}: {e}") from e
        staged.append(dest)

    return staged
