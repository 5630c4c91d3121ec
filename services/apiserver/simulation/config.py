"""
BlockingConfig — process-wide defaults for the blocking simulator.

A snapshot is a small immutable value.  ``from_env()`` builds a fresh one
each time it is called, so a simulator that loads per call picks up
reconfiguration between requests without holding any mutable global.

Configuration (env vars):
    BRM_BLOCKING_OPERATION_TYPE         str  default "sleep"
    BRM_BLOCKING_MIN_BLOCK_PERIOD_MS    int  default 1000
    BRM_BLOCKING_MAX_BLOCK_PERIOD_MS    int  default 5000
    BRM_BLOCKING_TEST_DATA_DIR          str  default "testdata/blocking"

Millisecond values outside [0, MAX_BLOCK_PERIOD_MS] are clamped with a warning.
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("BrmBlockingConfig")

DEFAULT_OPERATION_TYPE = "sleep"
DEFAULT_MIN_BLOCK_PERIOD_MS = 1000
DEFAULT_MAX_BLOCK_PERIOD_MS = 5000
DEFAULT_TEST_DATA_DIR = "testdata/blocking"

# Largest bound accepted anywhere (32-bit signed int, ~24.8 days)
MAX_BLOCK_PERIOD_MS = 2**31 - 1


@dataclass(frozen=True)
class BlockingConfig:
    operation_type: str = DEFAULT_OPERATION_TYPE
    min_block_period_ms: int = DEFAULT_MIN_BLOCK_PERIOD_MS
    max_block_period_ms: int = DEFAULT_MAX_BLOCK_PERIOD_MS
    test_data_dir: str = DEFAULT_TEST_DATA_DIR

    @classmethod
    def from_env(cls) -> "BlockingConfig":
        return cls(
            operation_type=os.getenv("BRM_BLOCKING_OPERATION_TYPE", DEFAULT_OPERATION_TYPE),
            min_block_period_ms=_env_ms("BRM_BLOCKING_MIN_BLOCK_PERIOD_MS", DEFAULT_MIN_BLOCK_PERIOD_MS),
            max_block_period_ms=_env_ms("BRM_BLOCKING_MAX_BLOCK_PERIOD_MS", DEFAULT_MAX_BLOCK_PERIOD_MS),
            test_data_dir=os.getenv("BRM_BLOCKING_TEST_DATA_DIR", DEFAULT_TEST_DATA_DIR),
        )


def _env_ms(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: '{raw}', using default {default}")
        return default
    if value < 0:
        logger.warning(f"Negative value for {name}: {value}, clamping to 0")
        return 0
    if value > MAX_BLOCK_PERIOD_MS:
        logger.warning(f"Value for {name}: {value} exceeds {MAX_BLOCK_PERIOD_MS}, clamping")
        return MAX_BLOCK_PERIOD_MS
    return value
