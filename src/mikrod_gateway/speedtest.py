"""
Throughput Probe Primitives
===========================

Transport-independent building blocks for the speed-test endpoints:

- :class:`RandomByteStream`: pull-based iterator producing exactly
  ``total_bytes`` random bytes in bounded chunks (download probe)
- :class:`UploadSink`: counts inbound bytes without keeping them (upload probe)
- :func:`simulate_ping`: waits a random 10-60 ms delay (ping probe)
- :func:`parse_size_mb`: query-string size parsing with clamping

Nothing here knows about HTTP, so the size and chunking contracts can be
tested without a server.
"""

import asyncio
import math
import os
import random
import re
from typing import AsyncIterable, Awaitable, Callable, Iterator, Optional

BYTES_PER_MB = 1024 * 1024
CHUNK_SIZE_BYTES = 128 * 1024

DOWNLOAD_DEFAULT_MB = 50
DOWNLOAD_MIN_MB = 1
DOWNLOAD_MAX_MB = 200

UPLOAD_DEFAULT_MB = 10
UPLOAD_MIN_MB = 1
UPLOAD_MAX_MB = 100

PING_MIN_MS = 10.0
PING_MAX_MS = 60.0

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_size_mb(
    raw: Optional[str], default: int, minimum: int, maximum: int
) -> int:
    """
    Parse a ``size`` query value in megabytes and clamp it to ``[minimum, maximum]``.

    Only the leading integer is read (``"12abc"`` -> 12, ``"7.5"`` -> 7).
    Missing or non-numeric input yields ``default``; numeric input, including
    zero and negatives, is clamped.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if match is None:
        return default
    return max(minimum, min(int(match.group(1)), maximum))


def format_two_decimals(value: float) -> str:
    return f"{value:.2f}"


class RandomByteStream:
    """
    Lazily generate ``total_bytes`` random bytes in chunks of ``chunk_size``.

    Each ``next()`` call produces one chunk of ``min(chunk_size, remaining)``
    bytes; no data is generated ahead of the consumer. ``StopIteration`` is
    raised once exactly ``total_bytes`` have been produced.

    Args:
        total_bytes: Exact length of the stream.
        chunk_size: Upper bound on the size of each chunk.
        random_source: Callable returning ``n`` random bytes (``os.urandom``).
    """

    def __init__(
        self,
        total_bytes: int,
        chunk_size: int = CHUNK_SIZE_BYTES,
        random_source: Callable[[int], bytes] = os.urandom,
    ):
        if total_bytes < 0:
            raise ValueError("total_bytes must be non-negative")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.total_bytes = total_bytes
        self.chunk_size = chunk_size
        self._random_source = random_source
        self.bytes_sent = 0

    @classmethod
    def for_megabytes(cls, size_mb: int, **kwargs) -> "RandomByteStream":
        return cls(size_mb * BYTES_PER_MB, **kwargs)

    @property
    def remaining(self) -> int:
        return self.total_bytes - self.bytes_sent

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0

    def __iter__(self) -> Iterator[bytes]:
        return self

    def __next__(self) -> bytes:
        if self.exhausted:
            raise StopIteration
        chunk = self._random_source(min(self.chunk_size, self.remaining))
        self.bytes_sent += len(chunk)
        return chunk

    def __repr__(self) -> str:
        return (
            f"RandomByteStream(total_bytes={self.total_bytes}, "
            f"bytes_sent={self.bytes_sent}, chunk_size={self.chunk_size})"
        )


class UploadSink:
    """Running byte counter for an inbound stream; content is discarded."""

    def __init__(self) -> None:
        self.bytes_received = 0

    def feed(self, chunk: bytes) -> None:
        self.bytes_received += len(chunk)

    async def consume(self, chunks: AsyncIterable[bytes]) -> int:
        """Drain ``chunks`` and return the total number of bytes seen."""
        async for chunk in chunks:
            self.feed(chunk)
        return self.bytes_received

    @property
    def received_mb(self) -> float:
        return self.bytes_received / BYTES_PER_MB

    def received_mb_text(self) -> str:
        return format_two_decimals(self.received_mb)


def draw_ping_delay_ms(rng: Optional[random.Random] = None) -> float:
    """
    Draw a delay in ``[10, 60)`` ms, truncated to two decimals.

    Truncation (not rounding) keeps the reported value strictly below 60.00.
    """
    source = rng or random
    raw = source.uniform(PING_MIN_MS, PING_MAX_MS)
    delay = math.floor(raw * 100) / 100
    return min(max(delay, PING_MIN_MS), PING_MAX_MS - 0.01)


async def simulate_ping(
    rng: Optional[random.Random] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> float:
    """Wait a randomized delay and return it in milliseconds."""
    delay_ms = draw_ping_delay_ms(rng)
    await sleep(delay_ms / 1000)
    return delay_ms
