from __future__ import annotations
import logging
import os
from typing import Optional


# Defaults
_DEFAULT_BLOCK_CACHE_SIZE = 256
_DEFAULT_LOG_LEVEL = 'WARNING'
_DEFAULT_REPL_HOST = '127.0.0.1'
_DEFAULT_REPL_PORT = 8765


def int_from_env(var: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None


def get_random_seed() -> Optional[int]:
    # None means "seed from OS entropy"
    return int_from_env('PSCRIPT_RANDOM_SEED', None)


def get_block_cache_size() -> int:
    size = int_from_env('PSCRIPT_BLOCK_CACHE_SIZE', _DEFAULT_BLOCK_CACHE_SIZE)
    return max(size, 0)


def get_log_level() -> int:
    raw = os.environ.get('PSCRIPT_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.WARNING


def get_repl_address() -> tuple[str, int]:
    host = os.environ.get('PSCRIPT_REPL_HOST', _DEFAULT_REPL_HOST)
    port = int_from_env('PSCRIPT_REPL_PORT', _DEFAULT_REPL_PORT)
    return host, port
