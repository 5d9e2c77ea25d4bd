"""Configuration loader for semgraph."""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv

from semgraph.transform import validate_p_max

logger = logging.getLogger(__name__)

# .env at the project root may set SEMGRAPH_CONFIG
load_dotenv(Path(__file__).parent.parent.parent.parent / ".env")

CONFIG_ENV_VAR = "SEMGRAPH_CONFIG"


@dataclass(frozen=True)
class TransformConfig:
    """Parameter table -> graph transformation."""

    p_max: float = 0.10  # edges need p_value strictly below this


@dataclass(frozen=True)
class PaletteConfig:
    """Colours used by the renderer."""

    latent_fill: str = "#a371f7"
    observed_fill: str = "#58a6ff"
    negative: str = "#d73027"
    neutral: str = "#bdbdbd"
    positive: str = "#1a9850"


@dataclass(frozen=True)
class StyleConfig:
    """Rendering attributes handed to the graph layout engine."""

    layout: str = "dot"  # layered DAG layout
    rankdir: str = "LR"
    label_digits: int = 2
    latent_size: float = 1.2
    observed_size: float = 0.8
    palette: PaletteConfig = field(default_factory=PaletteConfig)


@dataclass(frozen=True)
class SemgraphConfig:
    """Full configuration."""

    transform: TransformConfig = field(default_factory=TransformConfig)
    style: StyleConfig = field(default_factory=StyleConfig)


def _find_config_path() -> Path | None:
    """Find config.yaml via SEMGRAPH_CONFIG, else by walking up from this file."""
    explicit = os.getenv(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path

    current = Path(__file__).resolve()
    for parent in current.parents:
        config_path = parent / "config.yaml"
        if config_path.exists():
            return config_path
    return None


def parse_config(raw: dict | None) -> SemgraphConfig:
    """Build a SemgraphConfig from a parsed YAML mapping.

    Missing sections fall back to defaults; unknown keys raise TypeError
    from the dataclass constructor.
    """
    raw = dict(raw or {})

    transform_raw = raw.get("transform") or {}
    transform_config = TransformConfig(**transform_raw) if transform_raw else TransformConfig()
    validate_p_max(transform_config.p_max)

    style_raw = dict(raw.get("style") or {})
    palette_raw = style_raw.pop("palette", {})
    style_config = StyleConfig(
        **style_raw,
        palette=PaletteConfig(**palette_raw) if palette_raw else PaletteConfig(),
    )

    return SemgraphConfig(transform=transform_config, style=style_config)


@lru_cache(maxsize=1)
def load_config() -> SemgraphConfig:
    """Load and parse the configuration.

    Returns cached config on subsequent calls. Without a config.yaml every
    setting takes its default.

    Raises:
        FileNotFoundError: If SEMGRAPH_CONFIG names a missing file.
        ValueError: If the file is not valid YAML or has unknown or invalid keys.
    """
    config_path = _find_config_path()
    if config_path is None:
        logger.debug("No config.yaml found, using defaults")
        return SemgraphConfig()

    try:
        with config_path.open() as f:
            raw = yaml.safe_load(f)
        config = parse_config(raw)
    except (TypeError, ValueError, yaml.YAMLError) as exc:
        raise ValueError(f"{config_path}: invalid config: {exc}") from exc

    logger.debug("Loaded config from %s", config_path)
    return config


def get_config() -> SemgraphConfig:
    """Get the semgraph configuration."""
    return load_config()
