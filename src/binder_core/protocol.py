"""AppBinder container protocol constants.

Single source of truth for the trailer layout of composite binaries.
Keep this file stable. Writers and readers must remain synchronized.
"""

# Archive tag: footer suffix and PCK header magic
TAG = b"GDPC"
TAG_LEN = 4

# Footer: [Size(8)] or [Size(8) | Tag(4)], always at the end of the file
SIZE_FMT = "<Q"
SIZE_LEN = 8
SIZE_ONLY_FOOTER_LEN = SIZE_LEN
TAGGED_FOOTER_LEN = SIZE_LEN + TAG_LEN
MIN_FOOTER_LEN = SIZE_ONLY_FOOTER_LEN

MAX_ARCHIVE_SIZE = 2**64 - 1

# Streaming bounds
SCAN_CHUNK_SIZE = 64 * 1024  # 64KB read window for the fallback tag scan
COPY_CHUNK_SIZE = 1024 * 1024  # 1 MiB copy buffer
