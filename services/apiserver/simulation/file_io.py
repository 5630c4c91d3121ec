"""
FileIoBlocker — holds the calling thread in blocking disk I/O.

Each invocation writes its own scratch file sized to the duration tier,
then reads it back through a small unbuffered buffer so every chunk is a
separate read syscall.  Reads are paced closed-loop: after each pass the
remaining budget is measured and spread evenly over the passes still to
come, so slow or fast storage corrects itself instead of drifting.

Any OSError (permissions, full disk, vanished file) is absorbed: the
remaining budget is slept off through the fallback so the caller still
sees roughly the requested latency.
"""

import logging
import os
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

logger = logging.getLogger("BrmFileIoBlocker")

_WRITE_BUFFER_SIZE = 8192
_READ_BUFFER_SIZE = 4096  # small on purpose: many syscalls per pass


@dataclass(frozen=True)
class ScratchTier:
    name: str
    size_bytes: int
    ms_per_read: int  # expected cost of one full pass, sets the pass count


# (exclusive upper bound in ms, tier)
_BOUNDED_TIERS = (
    (100, ScratchTier("file_1kb.dat", 1 * 1024, 2)),
    (500, ScratchTier("file_100kb.dat", 100 * 1024, 5)),
    (2000, ScratchTier("file_1mb.dat", 1 * 1024 * 1024, 10)),
)
_LARGEST_TIER = ScratchTier("file_10mb.dat", 10 * 1024 * 1024, 20)


def select_tier(duration_ms: int) -> ScratchTier:
    for upper_ms, tier in _BOUNDED_TIERS:
        if duration_ms < upper_ms:
            return tier
    return _LARGEST_TIER


def read_iterations(duration_ms: int, tier: ScratchTier) -> int:
    return max(1, duration_ms // tier.ms_per_read)


def write_file(path: str, size_bytes: int) -> None:
    """Fill ``path`` with ``size_bytes`` random bytes, one buffer at a time."""
    remaining = size_bytes
    with open(path, "wb") as fh:
        while remaining > 0:
            chunk = min(_WRITE_BUFFER_SIZE, remaining)
            fh.write(os.urandom(chunk))
            remaining -= chunk
        fh.flush()


def read_file(path: str) -> int:
    """Read ``path`` to EOF through a 4 KiB buffer. Returns bytes read."""
    buffer = bytearray(_READ_BUFFER_SIZE)
    total = 0
    with open(path, "rb", buffering=0) as fh:
        while True:
            n = fh.readinto(buffer)
            if not n:
                break
            total += n
    return total


@contextmanager
def scratch_file(directory: str, tier: ScratchTier) -> Iterator[str]:
    """
    Create a per-invocation scratch file for ``tier`` inside ``directory``.

    The file name carries a unique suffix so concurrent calls never write
    the same file.  The file is removed on every exit path; a failed
    removal is logged and not raised.
    """
    os.makedirs(directory, exist_ok=True)
    stem, ext = os.path.splitext(tier.name)
    fd, path = tempfile.mkstemp(prefix=f"{stem}_", suffix=ext, dir=directory)
    os.close(fd)
    try:
        write_file(path, tier.size_bytes)
        yield path
    finally:
        try:
            os.remove(path)
        except OSError as exc:
            logger.warning(f"Failed to delete scratch file {path}: {exc}")


def _elapsed_ms(start: float) -> float:
    return (time.monotonic() - start) * 1000.0


class FileIoBlocker:
    def __init__(self, directory: str, fallback: Callable[[int], None]):
        self.directory = directory
        self.fallback = fallback

    def run(self, duration_ms: int) -> None:
        start = time.monotonic()
        tier = select_tier(duration_ms)
        iterations = read_iterations(duration_ms, tier)
        total_read = 0
        completed = 0

        try:
            with scratch_file(self.directory, tier) as path:
                for i in range(iterations):
                    total_read += read_file(path)
                    completed += 1

                    remaining_ms = duration_ms - _elapsed_ms(start)
                    if remaining_ms <= 0:
                        break
                    if i < iterations - 1:
                        self._pause(remaining_ms / (iterations - i - 1))
        except OSError as exc:
            remaining = max(0, int(duration_ms - _elapsed_ms(start)))
            logger.warning(
                f"File I/O blocking encountered an issue, falling back to sleep for {remaining}ms: {exc}"
            )
            self.fallback(remaining)
            return

        # A single short pass can finish well inside the budget
        leftover_ms = duration_ms - _elapsed_ms(start)
        if leftover_ms > 0:
            self._pause(leftover_ms)

        logger.debug(
            f"File I/O blocking completed: {duration_ms}ms, {completed}/{iterations} iterations, "
            f"{total_read} bytes read from {tier.name}"
        )

    @staticmethod
    def _pause(ms: float) -> None:
        time.sleep(ms / 1000.0)
