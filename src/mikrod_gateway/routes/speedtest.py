"""
Speed-test probe endpoints (/api/speedtest/*).

- GET  /download?size=N  streams exactly N MiB of random bytes (1-200, default 50)
- POST /upload?size=N    counts the request body and reports MiB received;
                         ``size`` (1-100, default 10) is advisory only
- GET  /ping             waits 10-60 ms and reports the delay
"""

import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.requests import ClientDisconnect
from starlette.background import BackgroundTask

from ..observability import get_tracer, record_speedtest
from ..speedtest import (
    DOWNLOAD_DEFAULT_MB,
    DOWNLOAD_MAX_MB,
    DOWNLOAD_MIN_MB,
    UPLOAD_DEFAULT_MB,
    UPLOAD_MAX_MB,
    UPLOAD_MIN_MB,
    RandomByteStream,
    UploadSink,
    format_two_decimals,
    parse_size_mb,
    simulate_ping,
)
from . import speedtest_router
from .models import PingResult, UploadFailure, UploadResult

logger = logging.getLogger(__name__)


def _record_download(size_mb: int, stream: RandomByteStream) -> None:
    """Record the bytes actually produced once the response has finished."""
    record_speedtest(get_tracer(), "download", size_mb, stream.bytes_sent)


@speedtest_router.get("/download")
async def download(size: Optional[str] = None) -> StreamingResponse:
    size_mb = parse_size_mb(size, DOWNLOAD_DEFAULT_MB, DOWNLOAD_MIN_MB, DOWNLOAD_MAX_MB)
    stream = RandomByteStream.for_megabytes(size_mb)

    logger.debug(f"Download probe: {size_mb} MB ({stream.total_bytes} bytes)")

    return StreamingResponse(
        stream,
        media_type="application/octet-stream",
        headers={
            "Cache-Control": "no-store",
            "Content-Length": str(stream.total_bytes),
        },
        background=BackgroundTask(_record_download, size_mb, stream),
    )


@speedtest_router.post("/upload", response_model=UploadResult)
async def upload(request: Request, size: Optional[str] = None):
    size_hint_mb = parse_size_mb(size, UPLOAD_DEFAULT_MB, UPLOAD_MIN_MB, UPLOAD_MAX_MB)
    sink = UploadSink()

    try:
        await sink.consume(request.stream())
    except (ClientDisconnect, OSError) as e:
        logger.warning(
            f"Upload probe aborted after {sink.bytes_received} bytes: "
            f"{type(e).__name__}"
        )
        return JSONResponse(status_code=500, content=UploadFailure().model_dump())

    logger.debug(
        f"Upload probe: received {sink.bytes_received} bytes "
        f"(advisory size {size_hint_mb} MB)"
    )
    record_speedtest(get_tracer(), "upload", size_hint_mb, sink.bytes_received)

    return UploadResult(receivedMB=sink.received_mb_text())


@speedtest_router.get("/ping", response_model=PingResult)
async def ping():
    delay_ms = await simulate_ping()
    return PingResult(latency=format_two_decimals(delay_ms))
