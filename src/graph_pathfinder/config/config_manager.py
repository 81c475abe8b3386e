"""Hydra configuration for graph_pathfinder.

The composed configuration has two sections that matter at runtime:
``search`` (default algorithm, weight field and the ``defaults`` option map
every ``find_path`` call starts from) and ``logging``. One configuration can
be made global; ``find_path`` reads its ``search.defaults`` when present.
"""

import os
import logging
from typing import Any, Dict, List, Optional, Union
from pathlib import Path
from omegaconf import DictConfig, OmegaConf, open_dict
from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra

from .validators import validate_config

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "GRAPH_PATHFINDER_CONFIG_DIR"

_global_config: Optional[DictConfig] = None


def default_config_dir() -> Path:
    """Config directory from the environment, else ``conf/`` at the project root."""
    if os.environ.get(CONFIG_DIR_ENV):
        return Path(os.environ[CONFIG_DIR_ENV])
    return Path(__file__).resolve().parents[3] / "conf"


class ConfigManager:
    """Composes, validates and edits one Hydra configuration."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_dir: Directory holding ``config.yaml``. Defaults to
                ``$GRAPH_PATHFINDER_CONFIG_DIR`` or the project's ``conf/``.

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        self.config_dir = Path(config_dir or default_config_dir()).resolve()
        self.config: Optional[DictConfig] = None

        if not self.config_dir.is_dir():
            raise FileNotFoundError(f"Configuration directory not found: {self.config_dir}")

        logger.debug(f"Using configuration directory {self.config_dir}")

    def load_config(self,
                    config_name: str = "config",
                    overrides: Optional[List[str]] = None,
                    validate: bool = True) -> DictConfig:
        """Compose the configuration and make it the global one.

        Args:
            config_name: Primary config file name without ``.yaml``
            overrides: Hydra overrides, e.g. ``search.defaults.maxDepth=10``
            validate: Run ``validate_config`` on the result

        Returns:
            Composed configuration
        """
        global _global_config

        overrides = list(overrides or [])
        GlobalHydra.instance().clear()
        try:
            with initialize_config_dir(config_dir=str(self.config_dir), version_base=None):
                cfg = compose(config_name=config_name, overrides=overrides)
        except Exception as e:
            logger.error(f"Failed to compose configuration '{config_name}': {e}")
            raise

        if validate:
            validate_config(cfg)

        self.config = cfg
        _global_config = cfg

        logger.info(f"Configuration loaded: {config_name}"
                    + (f" with overrides {overrides}" if overrides else ""))
        return cfg

    def _require_config(self) -> DictConfig:
        if self.config is None:
            raise RuntimeError("No configuration loaded. Call load_config() first.")
        return self.config

    def get_config(self) -> Optional[DictConfig]:
        return self.config

    def search_defaults(self) -> Dict[str, Any]:
        """The ``search.defaults`` option map as plain Python values."""
        defaults = OmegaConf.select(self._require_config(), 'search.defaults')
        if defaults is None:
            return {}
        return OmegaConf.to_container(defaults, resolve=True)

    def get_parameter(self, key: str, default: Any = None) -> Any:
        """Get a parameter by dotted key, e.g. ``search.defaults.dFactor``."""
        return OmegaConf.select(self._require_config(), key, default=default)

    def set_parameter(self, key: str, value: Any) -> None:
        config = self._require_config()
        with open_dict(config):
            OmegaConf.update(config, key, value)
        logger.debug(f"Parameter set: {key} = {value}")

    def update_config(self, updates: Dict[str, Any]) -> None:
        """Apply several dotted-key updates at once."""
        for key, value in updates.items():
            self.set_parameter(key, value)
        logger.info(f"Configuration updated with: {updates}")

    def save_config(self, output_path: Union[str, Path]) -> None:
        """Write the configuration as YAML, creating parent directories."""
        config = self._require_config()
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        OmegaConf.save(config, output_path)
        logger.info(f"Configuration saved to: {output_path}")

    def to_yaml(self, resolve: bool = True) -> str:
        if self.config is None:
            return ""
        return OmegaConf.to_yaml(self.config, resolve=resolve)


def load_config(config_name: str = "config",
                overrides: Optional[List[str]] = None,
                config_dir: Optional[Union[str, Path]] = None,
                validate: bool = True) -> DictConfig:
    """Compose a configuration with a fresh manager and make it global."""
    return ConfigManager(config_dir).load_config(config_name, overrides, validate)


def get_config() -> Optional[DictConfig]:
    """The global configuration, or None if nothing was loaded."""
    return _global_config


def clear_config() -> None:
    """Forget the global configuration; searches fall back to built-in defaults."""
    global _global_config
    _global_config = None


def get_parameter(key: str, default: Any = None) -> Any:
    """Read a dotted key from the global configuration.

    Returns ``default`` (with a warning) when no configuration is loaded.
    """
    config = get_config()
    if config is None:
        logger.warning("No global configuration loaded")
        return default
    return OmegaConf.select(config, key, default=default)


class ConfigContext:
    """Temporarily change keys of the global configuration.

    Example::

        with ConfigContext(**{"search.defaults.maxDepth": 5}):
            find_path("astar", "A", "B", accessor=graph)
    """

    def __init__(self, **changes):
        self.changes = changes
        self.original_values: Dict[str, Any] = {}
        self.config = get_config()

    def __enter__(self):
        if self.config is None:
            raise RuntimeError("No global configuration loaded")

        with open_dict(self.config):
            for key, value in self.changes.items():
                self.original_values[key] = OmegaConf.select(self.config, key)
                OmegaConf.update(self.config, key, value)
        return self.config

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.config is None:
            return

        with open_dict(self.config):
            for key, value in self.original_values.items():
                OmegaConf.update(self.config, key, value)
