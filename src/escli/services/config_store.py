"""Versioned configuration store for escli."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import yaml

from escli.errors import ConfigInvalid
from escli.errors_catalog import actionable_error
from escli.models import CONFIG_VERSIONS, CURRENT_VERSION, AnyConfig, Config, ConfigV1

logger = logging.getLogger("escli")

CONFIG_ENV_VAR = "ESCLI_CONFIG"
VERSION_KEY = "version"


def default_config_path() -> str:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path
    return os.path.join(os.path.expanduser("~"), ".escli", "config.yaml")


def migrate_v1_to_v2(config: ConfigV1) -> Config:
    return Config(
        profile="",
        elasticsearch_url=config.elasticsearchurl,
        aws_region=config.awsregion,
    )


# Keyed by the version being migrated from; each step yields the next version.
MIGRATIONS: Dict[int, Callable[[Any], AnyConfig]] = {
    ConfigV1.VERSION: migrate_v1_to_v2,
}


def detect_version(data: Mapping[str, Any], path: str = "<config>") -> int:
    """Return the schema version of a parsed configuration mapping."""
    if VERSION_KEY in data:
        declared = data[VERSION_KEY]
        if isinstance(declared, bool) or not isinstance(declared, int) or declared not in CONFIG_VERSIONS:
            raise ConfigInvalid(actionable_error("config_version", path=path, version=repr(declared)))
        return declared

    keys = set(data)
    legacy_keys = keys & set(ConfigV1.FIELDS)
    current_keys = keys & set(Config.FIELDS)

    if legacy_keys and not current_keys:
        return ConfigV1.VERSION
    if current_keys and not legacy_keys:
        return Config.VERSION
    if legacy_keys and current_keys:
        raise ConfigInvalid(
            actionable_error("config_shape", path=path, reason="mixes legacy and current keys")
        )
    raise ConfigInvalid(
        actionable_error("config_shape", path=path, reason="matches no known configuration shape")
    )


def build_config(data: Mapping[str, Any], version: int, path: str = "<config>") -> AnyConfig:
    config_cls = CONFIG_VERSIONS[version]
    fields = dict(data)
    fields.pop(VERSION_KEY, None)

    unknown = sorted(str(key) for key in set(fields) - set(config_cls.FIELDS))
    if unknown:
        raise ConfigInvalid(
            actionable_error(
                "config_shape",
                path=path,
                reason=f"has unknown keys for version {version}: {', '.join(unknown)}",
            )
        )

    values = {}
    for name, value in fields.items():
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ConfigInvalid(
                actionable_error("config_shape", path=path, reason=f"has a non-string value for '{name}'")
            )
        values[name] = value

    return config_cls(**values)


def migrate(config: AnyConfig) -> Config:
    """Apply migrations until the configuration reaches the current version."""
    while config.VERSION != CURRENT_VERSION:
        step = MIGRATIONS[config.VERSION]
        logger.debug("Migrating configuration from version %s", config.VERSION)
        config = step(config)
    return config


class ConfigStore:
    """Reads, migrates and explicitly saves the escli configuration file."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or default_config_path()

    def load(self) -> Config:
        data = self._read()
        version = detect_version(data, self.path)
        logger.debug("Detected configuration version %s in %s", version, self.path)

        config = migrate(build_config(data, version, self.path))
        if version != CURRENT_VERSION:
            logger.info(
                "Using legacy configuration from %s; run `escli config migrate` to upgrade it.",
                self.path,
            )

        if not config.elasticsearch_url.strip():
            raise ConfigInvalid(
                actionable_error("config_shape", path=self.path, reason="has an empty elasticsearch_url")
            )
        return config

    def save(self, config: Config):
        path = Path(self.path)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(prefix=".config-", suffix=".yaml", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file_obj:
                yaml.safe_dump(config.to_dict(), file_obj, default_flow_style=False, sort_keys=False)
            os.replace(temp_path, self.path)
        except OSError as exc:
            raise ConfigInvalid(
                actionable_error("config_unreadable", path=self.path, reason=str(exc))
            ) from exc
        finally:
            if os.path.exists(temp_path):
                os.remove(temp_path)
        logger.info("Configuration saved to %s", self.path)

    def _read(self) -> Dict[str, Any]:
        path = Path(self.path)
        if not path.exists():
            raise ConfigInvalid(actionable_error("config_not_found", path=self.path))

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError, UnicodeDecodeError) as exc:
            raise ConfigInvalid(
                actionable_error("config_unreadable", path=self.path, reason=str(exc))
            ) from exc

        if parsed is None:
            raise ConfigInvalid(actionable_error("config_shape", path=self.path, reason="is empty"))
        if not isinstance(parsed, dict):
            raise ConfigInvalid(
                actionable_error("config_shape", path=self.path, reason="must contain a YAML mapping at the root")
            )
        if any(not isinstance(key, str) for key in parsed):
            raise ConfigInvalid(actionable_error("config_shape", path=self.path, reason="has non-string keys"))
        return parsed
