"""AppBinder Pack - Staging, archive builders and the bind pipeline."""
from .builders import PckToolBuilder, ZipArchiveBuilder, default_tool_path
from .pipeline import BindResult, bind
from .staging import stage_resources

__all__ = [
    "PckToolBuilder",
    "ZipArchiveBuilder",
    "default_tool_path",
    "BindResult",
    "bind",
    "stage_resources",
]
