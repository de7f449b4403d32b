from __future__ import annotations
import logging
from pathlib import Path
import yaml
from typing import Optional

from storage_util.config import DEFAULT_CONFIG_PATH


def configure_logging(config_path: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Configure root logging for an application using storage_util.

    The level comes from `level`, else from `log_level` in the YAML config,
    else WARNING. Accessor records go to the `storage_util.records` logger at
    INFO, so they only show once the level is lowered.
    """
    default_level = logging.WARNING

    cfg_path = config_path or DEFAULT_CONFIG_PATH
    if level is None and cfg_path.exists():
        try:
            with cfg_path.open('r', encoding='utf-8') as _f:
                _cfg = yaml.safe_load(_f) or {}
                level = _cfg.get('log_level')
        except (OSError, yaml.YAMLError):
            # If config parse fails, fall back to default level
            level = None
    if level:
        default_level = logging.getLevelName(level.upper())
        if not isinstance(default_level, int):
            default_level = logging.WARNING

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=default_level, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
    logger = logging.getLogger(__name__)
    logger.info('Log level set to: %s', logging.getLevelName(default_level))
    return logger
