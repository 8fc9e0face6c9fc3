"""
Config system - layered typed configuration.

Merge precedence (later overrides earlier):
    defaults < .env file < environment variables < overrides
"""

import logging
import os
from dataclasses import MISSING, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_TRUE = ("true", "yes", "1", "on")
_FALSE = ("false", "no", "0", "off")


@dataclass
class Config:
    """Application settings."""

    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "info"
    max_body_size: int = 10_485_760


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigLoader:
    """
    Loads and merges configuration for a ``Config`` dataclass.

    Environment keys are the upper-cased field names behind a prefix,
    e.g. ``NESTLET_PORT=8080``.
    """

    def __init__(self, env_prefix: str = "NESTLET_", config_class: type = Config):
        self.env_prefix = env_prefix
        self.config_class = config_class
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        env_prefix: str = "NESTLET_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
        config_class: type = Config,
    ) -> "ConfigLoader":
        """
        Load configuration from all sources.

        Args:
            env_prefix: Prefix for environment variables
            env_file: Path to a .env file (skipped when missing)
            overrides: Manual overrides (highest precedence)
            environ: Environment mapping (defaults to ``os.environ``)
            config_class: Dataclass describing the settings

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix, config_class=config_class)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env(os.environ if environ is None else environ)

        if overrides:
            for key, value in overrides.items():
                if value is not None:
                    loader.config_data[key] = value

        return loader

    def _load_env_file(self, path: str):
        env_path = Path(path)
        if not env_path.exists():
            return
        self._load_from_env({k: v for k, v in dotenv_values(env_path).items() if v is not None})

    def _load_from_env(self, environ: Mapping[str, str]):
        for key, value in environ.items():
            if key.startswith(self.env_prefix):
                self.config_data[key[len(self.env_prefix):].lower()] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.config_data.get(key, default)

    def to_dict(self) -> dict:
        return dict(self.config_data)

    def build(self) -> Any:
        """Instantiate the config dataclass, coercing string values."""
        kwargs = {}
        for field_info in fields(self.config_class):
            name = field_info.name
            if name in self.config_data:
                kwargs[name] = self._coerce(name, self.config_data[name], field_info.type)
            elif field_info.default is MISSING and field_info.default_factory is MISSING:
                raise ConfigError(f"Required config field '{name}' not provided")
        return self.config_class(**kwargs)

    @staticmethod
    def _coerce(name: str, value: Any, expected: Any) -> Any:
        type_name = expected if isinstance(expected, str) else getattr(expected, "__name__", "")
        if type_name == "bool":
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE:
                return True
            if text in _FALSE:
                return False
        elif type_name == "int":
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            try:
                return int(str(value).strip())
            except ValueError:
                pass
        elif type_name == "str":
            return str(value)
        else:
            return value
        raise ConfigError(f"Config field '{name}' expected {type_name}, got {value!r}")


def load_config(env_file: Optional[str] = None, **overrides: Any) -> Config:
    """Shortcut for ``ConfigLoader.load(...).build()``."""
    return ConfigLoader.load(env_file=env_file, overrides=overrides).build()


def configure_logging(level: str = "info") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
