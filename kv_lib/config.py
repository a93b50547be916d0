"""Configuration for the kv command line tool.

Settings come from an optional YAML file (`kv_config.yml` in the working
directory by default). Command-line flags override what the file sets.
"""
from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional
import logging

import yaml

from kv_lib.storage import SERIALIZERS, normalize_serializer_name

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("kv_config.yml")


@dataclass
class Config:
    data_dir: str = "."
    serializer: str = "bson"
    log_level: str = "WARNING"
    use_lock: bool = True


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load `Config` from YAML, falling back to defaults when the file is absent.

    Raises ValueError when the file exists but is not a YAML mapping, or
    when it names an unknown serializer or a non-boolean `use_lock`.
    """
    cfg_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if path:
            raise ValueError(f"config file not found: {cfg_path}")
        return Config()

    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"invalid config format in {cfg_path}: parse error") from e
    if not isinstance(data, dict):
        raise ValueError(f"invalid config format in {cfg_path}: expected mapping")

    known = {f.name for f in fields(Config)}
    for k in data:
        if k not in known:
            logger.warning("Ignoring unknown config key %r in %s", k, cfg_path)

    cfg = Config(**{k: v for k, v in data.items() if k in known})
    cfg.data_dir = str(cfg.data_dir)
    cfg.log_level = str(cfg.log_level)
    if not isinstance(cfg.use_lock, bool):
        raise ValueError(f"invalid config format in {cfg_path}: use_lock must be true or false")
    # only on-disk formats may be configured
    serializer = normalize_serializer_name(str(cfg.serializer))
    if serializer not in SERIALIZERS:
        raise ValueError("Serializer must be either Json or Bson")
    cfg.serializer = serializer
    logger.debug("Loaded config from %s: %s", cfg_path, cfg)
    return cfg
