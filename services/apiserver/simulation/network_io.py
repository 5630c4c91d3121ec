"""
NetworkIoBlocker — stalls the calling thread in real TCP connect calls.

The duration is split into three equal connect timeouts aimed at the
TEST-NET documentation ranges (RFC 5737), which never carry real
traffic.  Timeouts and refusals are the expected outcome and are only
logged at DEBUG.  When the stack answers before the timeout (refused, or
no route on an isolated host) the rest of that attempt's window is
waited out so the three attempts still add up to the requested duration.
"""

import logging
import socket
import time
from typing import Callable, Sequence, Tuple

logger = logging.getLogger("BrmNetworkIoBlocker")

TEST_NET_TARGETS: Tuple[Tuple[str, int], ...] = (
    ("192.0.2.1", 80),      # TEST-NET-1
    ("198.51.100.1", 80),   # TEST-NET-2
    ("203.0.113.1", 53),    # TEST-NET-3
)


def per_attempt_timeout_ms(duration_ms: int, attempts: int = len(TEST_NET_TARGETS)) -> int:
    return max(1, duration_ms // attempts)


class NetworkIoBlocker:
    def __init__(
        self,
        targets: Sequence[Tuple[str, int]] = TEST_NET_TARGETS,
        connect: Callable[..., socket.socket] = socket.create_connection,
    ):
        self.targets = tuple(targets)
        self.connect = connect

    def run(self, duration_ms: int) -> None:
        timeout_ms = per_attempt_timeout_ms(duration_ms, len(self.targets))
        start = time.monotonic()

        for attempt, (host, port) in enumerate(self.targets, start=1):
            attempt_start = time.monotonic()
            try:
                with self.connect((host, port), timeout=timeout_ms / 1000.0):
                    logger.debug(f"Network I/O attempt {attempt} to {host}:{port} connected unexpectedly")
            except socket.timeout:
                logger.debug(f"Network I/O attempt {attempt} to {host}:{port} timed out after {timeout_ms}ms (expected)")
            except OSError as exc:
                logger.debug(f"Network I/O attempt {attempt} to {host}:{port} failed: {exc} (expected)")

            left_ms = timeout_ms - (time.monotonic() - attempt_start) * 1000.0
            if left_ms > 0:
                time.sleep(left_ms / 1000.0)

        total_ms = (time.monotonic() - start) * 1000.0
        logger.debug(f"Network I/O blocking completed: {duration_ms}ms requested, {total_ms:.0f}ms elapsed")
