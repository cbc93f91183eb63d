"""AppBinder Splice - Attach and recover archives in composite binaries."""
from .splice import (
    AppendResult,
    Boundary,
    ComposeResult,
    ExtractResult,
    append,
    compose,
    extract,
    inspect_composite,
    locate_archive,
    resolve_boundary,
)

__all__ = [
    "AppendResult",
    "Boundary",
    "ComposeResult",
    "ExtractResult",
    "append",
    "compose",
    "extract",
    "inspect_composite",
    "locate_archive",
    "resolve_boundary",
]
