ERRORS = {
  "E_IO": "Input unreadable or output unwritable",
  "E_FOOTER": "Buffer too short or malformed for the requested footer",
  "E_NO_ARCHIVE": "No embedded archive found",
  "E_TOOL": "Archive builder failed",
}


class BinderError(RuntimeError):
    code = "E_IO"

    def __str__(self) -> str:
        msg = super().__str__()
        return msg or ERRORS[self.code]


class SpliceIOError(BinderError):
    code = "E_IO"


class InvalidFooterError(SpliceIOError):
    code = "E_FOOTER"


class ArchiveBoundaryNotFound(BinderError):
    code = "E_NO_ARCHIVE"


class ExternalToolFailure(BinderError):
    code = "E_TOOL"

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
