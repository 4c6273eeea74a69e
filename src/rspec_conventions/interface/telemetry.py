"""Telemetry on the standard logging module. Writes to stderr; stdout is the report."""

import logging
import sys
from typing import TextIO


class ProjectTelemetry:
    """TelemetryPort implementation: progress steps at INFO, problems at WARNING/ERROR."""

    def __init__(self, project_name: str, welcome: str, stream: TextIO | None = None) -> None:
        self.project_name = project_name
        self.welcome = welcome
        self.logger = logging.getLogger("rspec_conventions")
        self._stream = stream
        self._handler: logging.Handler | None = None

    def configure(self, verbose: bool = False) -> None:
        """Attach a stderr handler once; verbose shows progress steps and debug detail."""
        if self._handler is None:
            handler = logging.StreamHandler(self._stream or sys.stderr)
            handler.setFormatter(logging.Formatter(f"[{self.project_name}] %(levelname)s: %(message)s"))
            self.logger.addHandler(handler)
            self.logger.propagate = False
            self._handler = handler
        self.logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    def handshake(self) -> None:
        self.logger.info(self.welcome)

    def step(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)
