from __future__ import annotations

import io
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO
from warnings import catch_warnings, simplefilter, warn

from binder_core.errors import ArchiveBoundaryNotFound, InvalidFooterError, SpliceIOError
from binder_core.footer import FooterFormat, decode_tail, encode_footer, read_footer
from binder_core.protocol import (
    COPY_CHUNK_SIZE,
    MAX_ARCHIVE_SIZE,
    MIN_FOOTER_LEN,
    SCAN_CHUNK_SIZE,
    SIZE_ONLY_FOOTER_LEN,
    TAG,
    TAG_LEN,
    TAGGED_FOOTER_LEN,
)


@dataclass(frozen=True)
class Boundary:
    """Where the archive sits inside a composite of `total` bytes.

    method is "footer" (verified via tagged footer), "scan" (first tag
    occurrence) or "none" (no archive, launcher is the whole file).
    """

    start: int
    end: int
    total: int
    method: str

    @property
    def launcher_size(self) -> int:
        return self.start

    @property
    def archive_size(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ExtractResult:
    boundary: Boundary
    launcher_path: Path
    archive_path: Path | None


@dataclass(frozen=True)
class ComposeResult:
    launcher_size: int
    archive_size: int
    footer: FooterFormat
    total_size: int


@dataclass(frozen=True)
class AppendResult:
    previous_size: int
    appended_size: int
    footer_size: int
    total_size: int


def _read_exact(f: BinaryIO, n: int) -> bytes:
    data = f.read(n)
    if len(data) != n:
        raise SpliceIOError(f"Short read: wanted {n} bytes, got {len(data)}")
    return data


def _copy_range(src: BinaryIO, dst: BinaryIO, length: int) -> int:
    """Copy exactly `length` bytes from the current position of `src`."""
    left = length
    while left > 0:
        chunk = src.read(min(COPY_CHUNK_SIZE, left))
        if not chunk:
            raise SpliceIOError(f"Source truncated: {left} of {length} bytes missing")
        dst.write(chunk)
        left -= len(chunk)
    return length


def _copy_stream(src: BinaryIO, dst: BinaryIO) -> int:
    copied = 0
    while True:
        chunk = src.read(COPY_CHUNK_SIZE)
        if not chunk:
            return copied
        dst.write(chunk)
        copied += len(chunk)


def _scan_for_tag(f: BinaryIO, total: int) -> int:
    """Return the offset of the first tag occurrence in `f`, or -1."""
    # Keep a small overlap so a tag split across chunks is still found.
    overlap = TAG_LEN - 1
    prev_tail = b""
    pos = 0

    f.seek(0)
    while pos < total:
        chunk = f.read(min(SCAN_CHUNK_SIZE, total - pos))
        if not chunk:
            break
        hay = prev_tail + chunk
        hit = hay.find(TAG)
        if hit != -1:
            return pos - len(prev_tail) + hit
        prev_tail = hay[-overlap:]
        pos += len(chunk)
    return -1


def _refuse_same_file(output: Path, *inputs: Path) -> None:
    if not output.exists():
        return
    for p in inputs:
        if p.exists() and os.path.samefile(output, p):
            raise SpliceIOError(f"Output {output} would overwrite input {p}")


def locate_archive(f: BinaryIO, total: int, strict: bool = False) -> Boundary:
    """Resolve the archive boundary of the composite open as `f`.

    Tries the tagged footer first and checks the tag echoed at the archive
    start. Falls back to the first tag occurrence unless `strict`.
    """
    if total < MIN_FOOTER_LEN:
        raise InvalidFooterError(f"Composite is {total} bytes, shorter than any footer")

    if total >= TAGGED_FOOTER_LEN:
        f.seek(total - TAGGED_FOOTER_LEN)
        decoded = decode_tail(_read_exact(f, TAGGED_FOOTER_LEN))
        if decoded is not None:
            size, width = decoded
            # Header echo must lie inside the archive region.
            if TAG_LEN <= size <= total - width:
                start = total - width - size
                f.seek(start)
                if f.read(TAG_LEN) == TAG:
                    return Boundary(start, total - width, total, "footer")

    if strict:
        raise ArchiveBoundaryNotFound("Footer not found or invalid; refusing to scan for tag")

    warn("Footer not found or invalid, searching for archive tag")
    pos = _scan_for_tag(f, total)
    if pos == -1:
        return Boundary(total, total, total, "none")
    return Boundary(pos, total, total, "scan")


def resolve_boundary(buffer: bytes, strict: bool = False) -> Boundary:
    """In-memory variant of locate_archive."""
    return locate_archive(io.BytesIO(buffer), len(buffer), strict=strict)


def extract(
    composite: Path,
    launcher_out: Path,
    archive_out: Path | None = None,
    *,
    strict: bool = False,
    require_archive: bool = False,
) -> ExtractResult:
    """Split a composite into launcher bytes and (optionally) archive bytes.

    The archive file is only written when an archive was found, so an
    archive builder pointed at `archive_out` starts from scratch otherwise.
    """
    composite = Path(composite)
    launcher_out = Path(launcher_out)
    archive_out = Path(archive_out) if archive_out is not None else None
    _refuse_same_file(launcher_out, composite)
    if archive_out is not None:
        _refuse_same_file(archive_out, composite)
        if archive_out.resolve() == launcher_out.resolve():
            raise SpliceIOError(f"Launcher and archive outputs are the same file: {archive_out}")
        _refuse_same_file(archive_out, launcher_out)

    try:
        with open(composite, "rb") as src:
            total = os.fstat(src.fileno()).st_size
            boundary = locate_archive(src, total, strict=strict)
            if require_archive and boundary.archive_size == 0:
                raise ArchiveBoundaryNotFound(f"No embedded archive found in {composite}")

            with open(launcher_out, "wb") as out:
                src.seek(0)
                _copy_range(src, out, boundary.launcher_size)

            written = None
            if archive_out is not None and boundary.archive_size > 0:
                with open(archive_out, "wb") as out:
                    src.seek(boundary.start)
                    _copy_range(src, out, boundary.archive_size)
                written = archive_out
    except OSError as e:
        raise SpliceIOError(f"Extract failed for {composite}: {e}") from e

    return ExtractResult(boundary, launcher_out, written)


def compose(
    launcher: Path,
    archive: Path,
    output: Path,
    fmt: FooterFormat = FooterFormat.SIZE_AND_TAG,
) -> ComposeResult:
    """Write launcher ++ archive ++ footer to `output`, streaming both inputs."""
    launcher, archive, output = Path(launcher), Path(archive), Path(output)
    _refuse_same_file(output, launcher, archive)

    try:
        with open(launcher, "rb") as f_launcher, open(archive, "rb") as f_archive:
            with open(output, "wb") as out:
                launcher_size = _copy_stream(f_launcher, out)
                archive_size = _copy_stream(f_archive, out)
                out.write(encode_footer(archive_size, fmt))
    except OSError as e:
        raise SpliceIOError(f"Compose failed for {output}: {e}") from e

    return ComposeResult(
        launcher_size=launcher_size,
        archive_size=archive_size,
        footer=fmt,
        total_size=launcher_size + archive_size + fmt.width,
    )


def append(composite: Path, archive: Path, output: Path) -> AppendResult:
    """Append `archive` to a composite carrying a size-only footer.

    Everything before the old footer is copied verbatim. The new footer holds
    the old footer value plus the number of bytes appended. A tagged footer or
    a sum past u64 is rejected before `output` is opened.
    """
    composite, archive, output = Path(composite), Path(archive), Path(output)
    _refuse_same_file(output, composite, archive)

    try:
        with open(composite, "rb") as src, open(archive, "rb") as f_archive:
            total = os.fstat(src.fileno()).st_size
            if total < SIZE_ONLY_FOOTER_LEN:
                raise InvalidFooterError(
                    f"Composite {composite} is {total} bytes, shorter than a size-only footer"
                )
            tail_len = min(total, TAGGED_FOOTER_LEN)
            src.seek(total - tail_len)
            tail = _read_exact(src, tail_len)
            decoded = decode_tail(tail)
            if decoded is not None:
                raise InvalidFooterError(
                    f"Composite {composite} ends in a tagged footer; append needs a size-only footer"
                )
            old_size = read_footer(tail, FooterFormat.SIZE_ONLY)
            body = total - SIZE_ONLY_FOOTER_LEN
            incoming = os.fstat(f_archive.fileno()).st_size
            if old_size + incoming > MAX_ARCHIVE_SIZE:
                raise InvalidFooterError(
                    f"Footer {old_size} + {incoming} appended bytes does not fit in u64"
                )

            with open(output, "wb") as out:
                src.seek(0)
                _copy_range(src, out, body)
                added = _copy_stream(f_archive, out)
                new_size = old_size + added
                out.write(encode_footer(new_size, FooterFormat.SIZE_ONLY))
    except OSError as e:
        raise SpliceIOError(f"Append failed for {output}: {e}") from e

    return AppendResult(
        previous_size=old_size,
        appended_size=added,
        footer_size=new_size,
        total_size=body + added + SIZE_ONLY_FOOTER_LEN,
    )


def inspect_composite(path: Path) -> dict:
    """Describe the footer and archive boundary of a composite, read-only."""
    path = Path(path)
    try:
        with open(path, "rb") as f:
            total = os.fstat(f.fileno()).st_size
            if total < MIN_FOOTER_LEN:
                raise InvalidFooterError(f"{path} is {total} bytes, shorter than any footer")
            f.seek(total - min(total, TAGGED_FOOTER_LEN))
            tail = f.read()
            tagged = decode_tail(tail)
            size_only = read_footer(tail, FooterFormat.SIZE_ONLY)
            with catch_warnings():
                simplefilter("ignore")
                boundary = locate_archive(f, total)
    except OSError as e:
        raise SpliceIOError(f"Inspect failed for {path}: {e}") from e

    return {
        "path": str(path),
        "total": total,
        "tagged_footer": None if tagged is None else {"archive_size": tagged[0], "width": tagged[1]},
        "size_only_value": size_only,
        "boundary": {
            "method": boundary.method,
            "start": boundary.start,
            "end": boundary.end,
            "launcher_size": boundary.launcher_size,
            "archive_size": boundary.archive_size,
        },
    }
