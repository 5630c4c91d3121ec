"""
BlockingSimulator — holds the calling thread for a controlled, randomised
period using one of several realistic blocking mechanisms.

Resolution order for every call:
    operation type   call-time string -> configured default (invalid -> SLEEP)
    min / max ms     call-time override -> configured default
    duration         min when min >= max, else uniform in [min, max] inclusive

Strategies:
    SLEEP       time.sleep for the whole duration
    FILE_IO     scratch-file writes + paced small-buffer reads (file_io.py)
    NETWORK_IO  three TCP connects to TEST-NET addresses (network_io.py)
    MIXED       one of the three above, picked uniformly per call

The public entry point never raises; internal failures degrade to logged
warnings.  The one exception is KeyboardInterrupt during a sleep, which
is logged and re-raised so the interrupt reaches the caller.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Optional

from simulation.config import MAX_BLOCK_PERIOD_MS, BlockingConfig
from simulation.file_io import FileIoBlocker
from simulation.network_io import NetworkIoBlocker
from simulation.operation import (
    CONCRETE_TYPES,
    OperationType,
    generate_duration,
    parse_operation_type,
)

logger = logging.getLogger("BrmBlockingSimulator")


@dataclass(frozen=True)
class BlockingPlan:
    operation_type: OperationType
    duration_ms: int
    min_ms: int
    max_ms: int


class BlockingSimulator:
    def __init__(
        self,
        config: Optional[BlockingConfig] = None,
        rng: Optional[random.Random] = None,
        network_blocker: Optional[NetworkIoBlocker] = None,
    ):
        # None -> a fresh env snapshot is read on every call
        self._config = config
        self.rng = rng if rng is not None else random.Random()
        self.network_blocker = network_blocker or NetworkIoBlocker()

    @property
    def config(self) -> BlockingConfig:
        return self._config if self._config is not None else BlockingConfig.from_env()

    def reconfigure(self, config: Optional[BlockingConfig]) -> None:
        self._config = config

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(
        self,
        operation_type: Optional[str] = None,
        min_block_period_ms: Optional[int] = None,
        max_block_period_ms: Optional[int] = None,
        config: Optional[BlockingConfig] = None,
    ) -> BlockingPlan:
        cfg = config or self.config

        requested = operation_type if operation_type is not None else cfg.operation_type
        resolved_type, fallback_used = parse_operation_type(requested)
        if fallback_used:
            logger.warning(f"Invalid operation type '{requested}', defaulting to SLEEP")

        min_ms = _clamp_ms(
            min_block_period_ms if min_block_period_ms is not None else cfg.min_block_period_ms,
            "min-block-period-ms",
        )
        max_ms = _clamp_ms(
            max_block_period_ms if max_block_period_ms is not None else cfg.max_block_period_ms,
            "max-block-period-ms",
        )

        return BlockingPlan(
            operation_type=resolved_type,
            duration_ms=generate_duration(min_ms, max_ms, self.rng),
            min_ms=min_ms,
            max_ms=max_ms,
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def perform_blocking_operation(
        self,
        operation_type: Optional[str] = None,
        min_block_period_ms: Optional[int] = None,
        max_block_period_ms: Optional[int] = None,
        config: Optional[BlockingConfig] = None,
    ) -> None:
        cfg = config or self.config
        plan = self.resolve(operation_type, min_block_period_ms, max_block_period_ms, cfg)

        if plan.operation_type is OperationType.MIXED:
            self.mixed_blocking(plan.duration_ms, plan.min_ms, plan.max_ms, cfg)
            return

        logger.info(
            f"Performing blocking operation: {plan.operation_type.value} for {plan.duration_ms}ms "
            f"(min: {plan.min_ms}, max: {plan.max_ms})"
        )
        self._run_strategy(plan.operation_type, plan.duration_ms, cfg)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def sleep_blocking(self, duration_ms: int) -> None:
        try:
            time.sleep(duration_ms / 1000.0)
        except KeyboardInterrupt:
            logger.warning(f"Sleep blocking was interrupted before {duration_ms}ms elapsed")
            raise

    def file_io_blocking(self, duration_ms: int, config: Optional[BlockingConfig] = None) -> None:
        cfg = config or self.config
        FileIoBlocker(cfg.test_data_dir, fallback=self.sleep_blocking).run(duration_ms)

    def network_io_blocking(self, duration_ms: int) -> None:
        self.network_blocker.run(duration_ms)

    def mixed_blocking(
        self,
        duration_ms: int,
        min_ms: Optional[int] = None,
        max_ms: Optional[int] = None,
        config: Optional[BlockingConfig] = None,
    ) -> OperationType:
        """Run one randomly chosen concrete strategy. Returns the one selected."""
        selected = self.rng.choice(CONCRETE_TYPES)
        logger.info(
            f"Performing blocking operation: MIXED (selected: {selected.value}) for {duration_ms}ms "
            f"(min: {min_ms}, max: {max_ms})"
        )
        self._run_strategy(selected, duration_ms, config)
        return selected

    def _run_strategy(
        self, operation_type: OperationType, duration_ms: int, config: Optional[BlockingConfig]
    ) -> None:
        if operation_type is OperationType.FILE_IO:
            self.file_io_blocking(duration_ms, config)
        elif operation_type is OperationType.NETWORK_IO:
            self.network_io_blocking(duration_ms)
        else:
            self.sleep_blocking(duration_ms)


def _clamp_ms(value: int, name: str) -> int:
    if value < 0:
        logger.warning(f"Negative {name} {value}, clamping to 0")
        return 0
    if value > MAX_BLOCK_PERIOD_MS:
        logger.warning(f"{name} {value} exceeds {MAX_BLOCK_PERIOD_MS}, clamping")
        return MAX_BLOCK_PERIOD_MS
    return value
