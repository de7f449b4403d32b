"""YAML-backed configuration for storage and record logging."""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, field_validator

from storage_util import defaults
from storage_util.logs.formatter import JSONFormatter, SingleLineFormatter
from storage_util.logs.handlers import LoggingHandler
from storage_util.storage import StorageBackend, create_storage

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path('data/config/storage_config.yml')


class StorageConfig(BaseModel):
    backend: Literal['memory', 'file'] = 'memory'
    serializer: Literal['pickle', 'json', 'yaml'] = 'pickle'
    key_prefix: str = ''
    data_dir: str = './data'
    log_level: str = 'WARNING'
    log_format: Literal['line', 'json'] = 'line'

    @field_validator('log_level')
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level {v!r}')
        return level


def load_config(path: Optional[Path] = None) -> StorageConfig:
    """Read a StorageConfig from YAML. A missing or empty file gives the defaults."""
    cfg_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        logger.debug('No storage config at %s, using defaults', cfg_path)
        return StorageConfig()
    with cfg_path.open('r', encoding='utf-8') as f:
        raw = yaml.safe_load(f) or {}
    return StorageConfig.model_validate(raw)


def apply_config(config: StorageConfig) -> StorageBackend:
    """Install the configured storage and record handler as process defaults.

    `log_level` is applied to the `storage_util` logger tree, so accessor
    records (emitted at INFO) only show when it is INFO or lower.
    """
    storage = create_storage(
        backend=config.backend,
        serializer=config.serializer,
        key_prefix=config.key_prefix,
        data_dir=config.data_dir,
        label='configured',
    )
    formatter = JSONFormatter() if config.log_format == 'json' else SingleLineFormatter()
    defaults.set_default_storage(storage)
    defaults.set_default_log_handler(LoggingHandler(formatter=formatter))
    logging.getLogger('storage_util').setLevel(config.log_level)
    logger.info('Default storage set to %s', storage.identification_info)
    return storage
