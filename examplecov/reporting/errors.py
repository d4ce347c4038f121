"""Coverage export error types."""

from pathlib import Path


class ExportError(Exception):
    """Base error for coverage exports."""

    def __init__(self, message: str, path: str | Path) -> None:
        super().__init__(message)
        self.path = Path(path)


class DirectoryCreationError(ExportError):
    """Output directory could not be created or accessed."""

    def __init__(self, path: str | Path, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot create output directory {path}{detail}", path)


class SerializationError(ExportError):
    """A report could not be converted to its output representation."""

    def __init__(self, path: str | Path, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot serialize report for {path}{detail}", path)


class WriteError(ExportError):
    """A report file could not be written."""

    def __init__(self, path: str | Path, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot write report {path}{detail}", path)
