"""AppBinder Core - Container protocol and footer codec."""
from .errors import (
    ERRORS,
    ArchiveBoundaryNotFound,
    BinderError,
    ExternalToolFailure,
    InvalidFooterError,
    SpliceIOError,
)
from .footer import FooterFormat, decode_tail, encode, encode_footer, read_footer

__all__ = [
    "ERRORS",
    "ArchiveBoundaryNotFound",
    "BinderError",
    "ExternalToolFailure",
    "InvalidFooterError",
    "SpliceIOError",
    "FooterFormat",
    "decode_tail",
    "encode",
    "encode_footer",
    "read_footer",
]
