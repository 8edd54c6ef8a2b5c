"""
ConfigStorage - Reads config entities from a Drupal config sync directory.

A config export holds one YAML file per config object, named
{config_prefix}.{id}.yml (e.g. image.style.thumbnail.yml).
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from .exceptions import ConfigError


class ConfigStorage:
    """
    Read-only access to the YAML files of one config entity type.
    """

    def __init__(
        self,
        config_dir: str,
        config_prefix: str,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize config storage.

        Args:
            config_dir: Config sync directory
            config_prefix: Config name prefix, e.g. 'image.style'
            logger: Optional logger instance
        """
        self.config_dir = Path(config_dir)
        self.config_prefix = config_prefix
        self.logger = logger or logging.getLogger(__name__)

    def _path(self, config_id: str) -> Path:
        return self.config_dir / f"{self.config_prefix}.{config_id}.yml"

    def list_ids(self) -> List[str]:
        """
        All config ids of this type, sorted.

        Raises:
            ConfigError: If the config directory cannot be read
        """
        if not self.config_dir.is_dir():
            raise ConfigError(f"Config directory not found: {self.config_dir}")
        prefix = f"{self.config_prefix}."
        try:
            names = [p.name for p in self.config_dir.iterdir()]
        except OSError as e:
            raise ConfigError(f"Cannot read config directory {self.config_dir}: {e}") from e
        return sorted(
            name[len(prefix):-len('.yml')]
            for name in names
            if name.startswith(prefix) and name.endswith('.yml')
        )

    def read(self, config_id: str) -> Optional[Dict[str, Any]]:
        """
        Read one config object.

        Returns:
            The parsed mapping, or None if the file does not exist

        Raises:
            ConfigError: If the file is unreadable or not a YAML mapping
        """
        path = self._path(config_id)
        if not path.is_file():
            return None
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot parse {path.name}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path.name} does not contain a mapping")
        return data

    def read_all(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        """
        Yield (config_id, data) for every config object, in id order.

        Malformed files are logged and skipped.

        Raises:
            ConfigError: If the config directory cannot be read
        """
        for config_id in self.list_ids():
            try:
                data = self.read(config_id)
            except ConfigError as e:
                self.logger.warning(f"Skipping {self.config_prefix}.{config_id}: {e}")
                continue
            if data is not None:
                yield config_id, data
