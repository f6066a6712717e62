"""Project configuration helpers."""

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, List

import yaml

from .errors import ConfigError, StateIOError
from .utils import atomic_write_text

if TYPE_CHECKING:
    from .context import ProjectContext


@dataclass
class StateConfig:
    """Configuration stored in .deploy-state/config.yaml."""

    ignore: List[str] = field(default_factory=list)  # gitignore-style patterns
    hash_workers: int = 1


def load_config(ctx: "ProjectContext") -> StateConfig:
    """Load configuration from .deploy-state/config.yaml if present."""
    cfg_path = ctx.config_path
    if not cfg_path.exists():
        return StateConfig()

    try:
        text = cfg_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigError(f"{cfg_path} is not UTF-8 text: {e}") from e
    except OSError as e:
        raise StateIOError(cfg_path, e) from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping")

    ignore = data.get("ignore", [])
    if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
        raise ConfigError(f"'ignore' in {cfg_path} must be a list of patterns")

    hash_workers = data.get("hash_workers", 1)
    if isinstance(hash_workers, bool) or not isinstance(hash_workers, int) or hash_workers < 1:
        raise ConfigError(f"'hash_workers' in {cfg_path} must be a positive integer")

    return StateConfig(ignore=ignore, hash_workers=hash_workers)


def save_config(config: StateConfig, ctx: "ProjectContext") -> None:
    """Save configuration atomically."""
    text = yaml.safe_dump(asdict(config), default_flow_style=False, sort_keys=False)
    atomic_write_text(ctx.config_path, text)
