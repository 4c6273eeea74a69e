"""Dependency Injection Container for the convention checker."""

from typing import Any, Optional, cast

from rspec_conventions.domain.config import ConfigurationLoader
from rspec_conventions.domain.protocols import FileSystemProtocol
from rspec_conventions.infrastructure.config_file_loader import ConfigFileLoader
from rspec_conventions.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from rspec_conventions.interface.telemetry import ProjectTelemetry


class RulesContainer:
    """Singleton registry wired at the composition root."""

    _instance: Optional["RulesContainer"] = None

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols. Config loads lazily."""
        self.register_singleton(
            "TelemetryPort", ProjectTelemetry("RSPEC-CONVENTIONS", "Convention checker online")
        )
        self.register_singleton("FileSystemGateway", FileSystemGateway())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_telemetry_port(self) -> ProjectTelemetry:
        return cast(ProjectTelemetry, self.get("TelemetryPort"))

    def get_filesystem_gateway(self) -> FileSystemProtocol:
        return cast(FileSystemProtocol, self.get("FileSystemGateway"))

    def get_config_loader(self) -> ConfigurationLoader:
        """Configuration from pyproject.toml; raises ConfigurationError when invalid."""
        if "ConfigurationLoader" not in self._singletons:
            config = ConfigurationLoader(ConfigFileLoader.load_config_from_fs())
            self.register_singleton("ConfigurationLoader", config)
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    @classmethod
    def get_instance(cls) -> "RulesContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = RulesContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
