"""Unit tests for the throughput probe primitives."""

import random

import pytest

from mikrod_gateway.speedtest import (
    BYTES_PER_MB,
    CHUNK_SIZE_BYTES,
    DOWNLOAD_DEFAULT_MB,
    DOWNLOAD_MAX_MB,
    DOWNLOAD_MIN_MB,
    PING_MAX_MS,
    PING_MIN_MS,
    RandomByteStream,
    UploadSink,
    draw_ping_delay_ms,
    format_two_decimals,
    parse_size_mb,
    simulate_ping,
)


def _download_size(raw):
    return parse_size_mb(raw, DOWNLOAD_DEFAULT_MB, DOWNLOAD_MIN_MB, DOWNLOAD_MAX_MB)


class TestParseSizeMb:
    """Tests for query-string size parsing and clamping."""

    def test_missing_uses_default(self):
        assert _download_size(None) == 50

    def test_non_numeric_uses_default(self):
        assert _download_size("abc") == 50
        assert _download_size("") == 50

    def test_in_range_value(self):
        assert _download_size("12") == 12

    def test_zero_clamps_to_minimum(self):
        assert _download_size("0") == 1

    def test_negative_clamps_to_minimum(self):
        assert _download_size("-20") == 1

    def test_large_clamps_to_maximum(self):
        assert _download_size("500") == 200

    def test_leading_integer_prefix(self):
        assert _download_size("12abc") == 12
        assert _download_size("7.9") == 7
        assert _download_size("  33") == 33

    def test_upload_bounds(self):
        assert parse_size_mb("150", 10, 1, 100) == 100
        assert parse_size_mb(None, 10, 1, 100) == 10


class TestRandomByteStream:
    """Tests for the pull-based random byte generator."""

    def test_total_length_is_exact(self):
        stream = RandomByteStream.for_megabytes(1)
        assert sum(len(c) for c in stream) == BYTES_PER_MB

    def test_chunks_are_bounded(self):
        stream = RandomByteStream(CHUNK_SIZE_BYTES * 2 + 100)
        sizes = [len(c) for c in stream]
        assert sizes == [CHUNK_SIZE_BYTES, CHUNK_SIZE_BYTES, 100]

    def test_last_chunk_truncated_to_remaining(self):
        stream = RandomByteStream(1000, chunk_size=300)
        assert [len(c) for c in stream] == [300, 300, 300, 100]
        assert stream.bytes_sent == 1000
        assert stream.remaining == 0

    def test_is_lazy(self):
        calls = []

        def source(n):
            calls.append(n)
            return b"\x00" * n

        stream = RandomByteStream(1000, chunk_size=300, random_source=source)
        assert calls == []

        next(stream)
        assert calls == [300]
        assert stream.bytes_sent == 300
        assert stream.remaining == 700

    def test_stops_after_exhaustion(self):
        stream = RandomByteStream(10, chunk_size=10)
        assert len(next(stream)) == 10
        with pytest.raises(StopIteration):
            next(stream)
        with pytest.raises(StopIteration):
            next(stream)

    def test_zero_length_stream(self):
        assert list(RandomByteStream(0)) == []

    def test_content_is_random(self):
        first = next(RandomByteStream(1024))
        second = next(RandomByteStream(1024))
        assert first != second

    def test_rejects_bad_arguments(self):
        with pytest.raises(ValueError):
            RandomByteStream(-1)
        with pytest.raises(ValueError):
            RandomByteStream(10, chunk_size=0)

    def test_default_chunk_size_is_128_kib(self):
        assert CHUNK_SIZE_BYTES == 131072


class TestUploadSink:
    """Tests for the upload byte counter."""

    @pytest.mark.asyncio
    async def test_consume_counts_bytes(self):
        async def chunks():
            yield b"a" * 1000
            yield b""
            yield b"b" * 24

        sink = UploadSink()
        total = await sink.consume(chunks())
        assert total == 1024
        assert sink.bytes_received == 1024

    def test_received_mb_text(self):
        sink = UploadSink()
        sink.feed(b"\x00" * (5 * BYTES_PER_MB))
        assert sink.received_mb == 5.0
        assert sink.received_mb_text() == "5.00"

    def test_fractional_mb(self):
        sink = UploadSink()
        sink.feed(b"\x00" * (BYTES_PER_MB // 4))
        assert sink.received_mb_text() == "0.25"


class TestPing:
    """Tests for the simulated latency probe."""

    def test_delay_in_range(self):
        rng = random.Random(1234)
        for _ in range(1000):
            delay = draw_ping_delay_ms(rng)
            assert PING_MIN_MS <= delay < PING_MAX_MS

    def test_delay_has_two_decimals(self):
        delay = draw_ping_delay_ms(random.Random(7))
        assert round(delay, 2) == delay

    def test_upper_edge_stays_below_sixty(self):
        class EdgeRandom:
            def uniform(self, a, b):
                return 59.99999

        delay = draw_ping_delay_ms(EdgeRandom())
        assert format_two_decimals(delay) == "59.99"

    @pytest.mark.asyncio
    async def test_simulate_ping_sleeps_for_delay(self):
        slept = []

        async def fake_sleep(seconds):
            slept.append(seconds)

        delay = await simulate_ping(random.Random(3), sleep=fake_sleep)
        assert slept == [pytest.approx(delay / 1000)]
        assert PING_MIN_MS <= delay < PING_MAX_MS
