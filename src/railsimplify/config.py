"""
Configuration management for railsimplify.

Loads YAML configuration with sensible defaults for all pipeline stages.
"""

import os
from dataclasses import dataclass, field

import yaml


# Max distance between the anchors of two mergeable pieces
DISTANCE_LIMIT = 10.0
# Max bearing between two mergeable pieces, degrees
BEARING_LIMIT = 10.0
# Max segments in a merged piece
MAX_SEGMENTS = 97
# Slack on both limits for floating point noise in computed distances and headings
LIMIT_TOLERANCE = 1e-9


@dataclass
class MergeConfig:
    """Configuration for pairwise piece merging."""
    distance_limit: float = DISTANCE_LIMIT
    bearing_limit: float = BEARING_LIMIT
    max_segments: int = MAX_SEGMENTS
    legacy_heading: bool = False  # reproduce the historical east component

    @property
    def distance_limit_squared(self):
        return self.distance_limit * self.distance_limit


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""
    merge: MergeConfig = field(default_factory=MergeConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = PipelineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    if "merge" in yaml_data:
        for key, value in yaml_data["merge"].items():
            if hasattr(config.merge, key):
                setattr(config.merge, key, value)

    if "tracing" in yaml_data:
        for key, value in yaml_data["tracing"].items():
            if hasattr(config.tracing, key):
                setattr(config.tracing, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = PipelineConfig()

    yaml_data = {
        "merge": {
            "distance_limit": config.merge.distance_limit,
            "bearing_limit": config.merge.bearing_limit,
            "max_segments": config.merge.max_segments,
            "legacy_heading": config.merge.legacy_heading,
        },
        "tracing": {
            "enabled": config.tracing.enabled,
            "level": config.tracing.level,
        },
    }

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
