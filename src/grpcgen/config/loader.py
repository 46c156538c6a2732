"""Loads generator configuration from YAML files."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from grpcgen.config.base import GeneratorConfig
from grpcgen.errors import ConfigError

DEFAULT_CONFIG_NAME = "grpcgen.yaml"


class ConfigLoader:
    """Loads and saves GeneratorConfig as YAML."""

    def load_file(self, path: Path | str) -> GeneratorConfig:
        """Load a configuration from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Loaded GeneratorConfig
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        with open(path) as f:
            content = f.read()

        return self.load_from_string(content)

    def load_from_string(self, content: str) -> GeneratorConfig:
        """Load a configuration from a YAML string.

        Args:
            content: YAML content as string

        Returns:
            Loaded GeneratorConfig
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config must be a YAML mapping")

        return self._parse_config(data)

    def _parse_config(self, data: dict[str, Any]) -> GeneratorConfig:
        """Build the config, ignoring keys it does not know."""
        known = {
            key: value
            for key, value in data.items()
            if key in GeneratorConfig.model_fields
        }
        try:
            return GeneratorConfig.model_validate(known)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def save_file(self, config: GeneratorConfig, path: Path | str) -> None:
        """Save a configuration to a YAML file.

        Args:
            config: The configuration to save
            path: Path for the output file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def load_config(path: Path | str | None = None) -> GeneratorConfig:
    """Load a config file, or the defaults when no path is given.

    Args:
        path: Optional path to the YAML file

    Returns:
        Loaded GeneratorConfig
    """
    if path is None:
        return GeneratorConfig()
    return ConfigLoader().load_file(path)
