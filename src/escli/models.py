"""Configuration models for escli.

Each persisted configuration shape is its own frozen dataclass carrying a
``VERSION`` discriminator. ``AnyConfig`` is the union the migration chain
operates on; ``Config`` is always the current shape.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class ConfigV1:
    """Configuration shape shipped with escli 0.0.3."""

    VERSION = 1
    FIELDS = ("elasticsearchurl", "awsregion")

    elasticsearchurl: str = ""
    awsregion: str = ""


@dataclass(frozen=True)
class Config:
    """Current configuration shape."""

    VERSION = 2
    FIELDS = ("profile", "elasticsearch_url", "aws_region")

    profile: str = ""
    elasticsearch_url: str = ""
    aws_region: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.VERSION,
            "profile": self.profile,
            "elasticsearch_url": self.elasticsearch_url,
            "aws_region": self.aws_region,
        }


AnyConfig = Union[ConfigV1, Config]

CONFIG_VERSIONS = {ConfigV1.VERSION: ConfigV1, Config.VERSION: Config}
CURRENT_VERSION = Config.VERSION
