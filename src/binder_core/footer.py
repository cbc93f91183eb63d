"""AppBinder footer codec.

A footer is the fixed-width trailer at the absolute end of a composite binary.
It stores the archive length and, in the tagged variant, the archive tag.
"""
from __future__ import annotations

import struct
from enum import Enum

from .errors import InvalidFooterError
from .protocol import (
    MAX_ARCHIVE_SIZE,
    SIZE_FMT,
    SIZE_LEN,
    SIZE_ONLY_FOOTER_LEN,
    TAG,
    TAG_LEN,
    TAGGED_FOOTER_LEN,
)


class FooterFormat(Enum):
    SIZE_ONLY = SIZE_ONLY_FOOTER_LEN
    SIZE_AND_TAG = TAGGED_FOOTER_LEN

    @property
    def width(self) -> int:
        return self.value

    @property
    def tagged(self) -> bool:
        return self is FooterFormat.SIZE_AND_TAG


def encode_footer(archive_length: int, fmt: FooterFormat) -> bytes:
    """Encode a footer for an archive of `archive_length` bytes."""
    if not 0 <= archive_length <= MAX_ARCHIVE_SIZE:
        raise InvalidFooterError(f"Archive length {archive_length} does not fit in u64")
    size = struct.pack(SIZE_FMT, archive_length)
    return size + TAG if fmt.tagged else size


def encode(archive_length: int, tagged: bool) -> bytes:
    fmt = FooterFormat.SIZE_AND_TAG if tagged else FooterFormat.SIZE_ONLY
    return encode_footer(archive_length, fmt)


def read_footer(tail: bytes, fmt: FooterFormat) -> int:
    """Read the archive length from the last `fmt.width` bytes of `tail`.

    Strict: fails if `tail` is too short or, for the tagged variant, does not
    end with the tag.
    """
    n = len(tail)
    if n < fmt.width:
        raise InvalidFooterError(
            f"Need {fmt.width} bytes for a {fmt.name} footer, got {n}"
        )
    if fmt.tagged:
        if tail[n - TAG_LEN:] != TAG:
            raise InvalidFooterError(f"Footer tag mismatch: {bytes(tail[n - TAG_LEN:])!r}")
        start = n - TAGGED_FOOTER_LEN
    else:
        start = n - SIZE_ONLY_FOOTER_LEN
    (size,) = struct.unpack(SIZE_FMT, tail[start:start + SIZE_LEN])
    return size


def decode_tail(buffer: bytes, allow_untagged: bool = False) -> tuple[int, int] | None:
    """Decode the footer at the end of `buffer`.

    Returns (archive_length, footer_width), or None when no supported footer
    fits. The untagged variant is only considered when the caller expects it.
    """
    n = len(buffer)
    if n >= TAGGED_FOOTER_LEN and buffer[n - TAG_LEN:] == TAG:
        return read_footer(buffer, FooterFormat.SIZE_AND_TAG), TAGGED_FOOTER_LEN
    if allow_untagged and n >= SIZE_ONLY_FOOTER_LEN:
        return read_footer(buffer, FooterFormat.SIZE_ONLY), SIZE_ONLY_FOOTER_LEN
    return None
