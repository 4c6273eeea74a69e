"""Load [tool.rspec-conventions] from pyproject.toml. Infrastructure I/O only."""

import tomllib
from pathlib import Path

from rspec_conventions.domain.constants import CONFIG_SECTION
from rspec_conventions.domain.exceptions import ConfigurationError


class ConfigFileLoader:
    """
    Loads config from the nearest pyproject.toml. No top-level functions.
    """

    @staticmethod
    def find_pyproject(start: Path | None = None) -> Path | None:
        """Walk up from start (default: cwd) to the first pyproject.toml."""
        current_path = (start or Path.cwd()).resolve()
        for candidate in (current_path, *current_path.parents):
            config_file = candidate / "pyproject.toml"
            if config_file.is_file():
                return config_file
        return None

    @staticmethod
    def load_config_from_fs(start: Path | None = None) -> dict[str, object]:
        """Return the [tool.rspec-conventions] table, or {} when there is none.

        Raises:
            ConfigurationError: the file exists but is not valid TOML.
        """
        config_file = ConfigFileLoader.find_pyproject(start)
        if config_file is None:
            return {}
        try:
            with config_file.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"{config_file}: {exc}") from exc
        except OSError:
            return {}
        tool_section = data.get("tool", {}) or {}
        section = tool_section.get(CONFIG_SECTION, {}) or {}
        return dict(section) if isinstance(section, dict) else {}
