"""Ports the use cases depend on. Implemented in infrastructure and interface."""

from typing import Protocol

from rspec_conventions.domain.entities import Report, Severity


class TelemetryPort(Protocol):
    """Protocol for progress and diagnostic output (never the report itself)."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def exists(self, path: str) -> bool:
        """True if path exists."""
        ...

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        ...

    def is_readable_directory(self, path: str) -> bool:
        """True if path is a directory this process may list and enter."""
        ...

    def find_files(self, root: str, suffixes: tuple[str, ...]) -> list[str]:
        """Files under root (or root itself) whose names end with one of suffixes, sorted."""
        ...

    def relative_posix(self, path: str, root: str) -> str:
        """path relative to root as a POSIX string."""
        ...

    def read_text(self, path: str) -> str:
        """Read a text file as UTF-8, replacing undecodable bytes."""
        ...


class ReporterProtocol(Protocol):
    """Renders a report into output text and an exit code."""

    def render(self, report: Report, fail_on: Severity = Severity.WARNING) -> tuple[str, int]:
        """Return (text, exit_code)."""
        ...
