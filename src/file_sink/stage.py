"""
File sink stage.

Terminal pipeline stage with a single inbound endpoint (``inWriteFile``).
Each accepted message is resolved to a destination path and its payload
stream is copied to that file. Failures never escape as anything other than
one FileSinkError per message, and each failure emits exactly one
ErrorReport.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Mapping, Optional, Union

from loguru import logger

from .envelope import Envelope, get_envelope
from .errors import (
    ConstructionFailure,
    FileSinkError,
    MissingPayload,
    map_transfer_error,
)
from .metrics import (
    FILE_SINK_BYTES_WRITTEN,
    FILE_SINK_ERRORS_TOTAL,
    FILE_SINK_IN_FLIGHT,
    FILE_SINK_WRITE_LATENCY,
    FILE_SINK_WRITES_TOTAL,
)
from .models import ErrorKind, ErrorReport, StageConfig, StageHealth, WriteResult
from .paths import resolve_destination
from .reports import ErrorReportBus, ReportSubscriber
from .streams import DEFAULT_CHUNK_SIZE, copy_stream, is_stream

MISSING_PAYLOAD_TEXT = "The payload of the message has no stream"


def _coerce_config(config: Any) -> StageConfig:
    if isinstance(config, StageConfig):
        return config
    if isinstance(config, Mapping):
        return StageConfig(directory=config.get("directory"), encoding=config.get("encoding"))
    return StageConfig(
        directory=getattr(config, "directory", None),
        encoding=getattr(config, "encoding", None),
    )


class FileSinkStage:
    """Writes message payload streams to files.

    Usage:
        async with FileSinkStage("archive", {"directory": "/out"}) as stage:
            await stage.receive({"header": {"file_name": "a.csv"}, "payload": fh})

    ``receive`` resolves once the file is written; ``dispatch`` returns a task
    immediately so accepting message N+1 never waits on message N.

    Args:
        name: Stage name (used in logs, metrics and error reports)
        config: StageConfig, mapping or object with optional ``directory``
            and ``encoding``. None is a construction failure.
        envelope: Envelope name ("header" or "info") or an Envelope instance
        chunk_size: Read size used when draining payload streams
        on_error: Optional callback subscribed to the stage's report bus
    """

    ENDPOINT = "inWriteFile"

    def __init__(
        self,
        name: str,
        config: Union[StageConfig, Mapping[str, Any], Any],
        *,
        envelope: Union[str, Envelope] = "header",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        on_error: Optional[ReportSubscriber] = None,
    ):
        if config is None:
            raise ConstructionFailure(f"Stage {name!r} requires a configuration object")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")

        self.name = name
        self._config = _coerce_config(config)
        self._envelope = get_envelope(envelope) if isinstance(envelope, str) else envelope
        self._chunk_size = chunk_size

        self.reports = ErrorReportBus()
        if on_error is not None:
            self.reports.subscribe(on_error)

        self._running = False
        self._tasks: set[asyncio.Task] = set()

    # --------------- configuration (read-only)

    @property
    def config(self) -> StageConfig:
        return self._config

    @property
    def directory(self) -> Optional[str]:
        return self._config.directory

    @property
    def encoding(self) -> Optional[str]:
        return self._config.encoding

    @property
    def is_running(self) -> bool:
        return self._running

    # --------------- lifecycle

    async def start(self) -> "FileSinkStage":
        self._running = True
        logger.info(
            f"Stage {self.name} started (directory={self.directory}, encoding={self.encoding})"
        )
        return self

    async def stop(self) -> None:
        """Stop the stage, waiting for in-flight writes. Writes are never cancelled."""
        self._running = False
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        logger.info(f"Stage {self.name} stopped")

    async def __aenter__(self) -> "FileSinkStage":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    def health(self) -> StageHealth:
        return StageHealth(
            name=self.name,
            running=self._running,
            in_flight=len(self._tasks),
            directory=self.directory,
            encoding=self.encoding,
        )

    # --------------- inbound endpoint

    def dispatch(self, message: Any) -> asyncio.Task:
        """Accept ``message`` without waiting for its write.

        Must be called from a running event loop. Tasks start in dispatch
        order; completion order is not guaranteed.
        """
        task = asyncio.get_running_loop().create_task(
            self.receive(message), name=f"{self.name}:{self.ENDPOINT}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    async def receive(self, message: Any) -> WriteResult:
        """Write one message and return the result.

        Raises:
            MissingFileName, RelativePathWithoutDirectory, MissingPayload:
                validation failures, raised before any I/O
            TransferFailure: the streaming copy failed
        """
        inbound = self._envelope.unwrap(message)
        try:
            path = resolve_destination(self.directory, inbound.file_name)
            if inbound.payload is None or not is_stream(inbound.payload):
                raise MissingPayload(MISSING_PAYLOAD_TEXT)
        except FileSinkError as exc:
            await self._reject(message, exc)
            raise

        return await self._write(message, inbound.payload, path)

    def error(self, report: ErrorReport) -> None:
        """Default error channel: log and count. Hosts may replace it."""
        FILE_SINK_ERRORS_TOTAL.labels(stage=self.name, kind=report.short_message.value).inc()
        if report.short_message is ErrorKind.TRANSFER_FAILURE:
            logger.error(f"[{self.name}] {report.short_message.value}: {report.detail}")
        else:
            logger.warning(f"[{self.name}] {report.short_message.value}: {report.detail}")

    # --------------- internals

    async def _write(self, message: Any, payload: Any, path: str) -> WriteResult:
        in_flight = FILE_SINK_IN_FLIGHT.labels(stage=self.name)
        in_flight.inc()
        t0 = time.perf_counter()
        try:
            written = await copy_stream(payload, path, self.encoding, self._chunk_size)
        except Exception as exc:
            failure = map_transfer_error(exc, path)
            await self._reject(message, failure)
            raise failure from exc
        finally:
            in_flight.dec()

        elapsed = time.perf_counter() - t0
        FILE_SINK_WRITES_TOTAL.labels(stage=self.name, status="success").inc()
        FILE_SINK_BYTES_WRITTEN.labels(stage=self.name).inc(written)
        FILE_SINK_WRITE_LATENCY.labels(stage=self.name).observe(elapsed)
        logger.debug(f"[{self.name}] wrote {written} bytes to {path} in {elapsed:.3f}s")
        return WriteResult(path=path, bytes_written=written, duration=elapsed)

    async def _reject(self, message: Any, exc: FileSinkError) -> None:
        report = ErrorReport(
            message=message,
            short_message=exc.kind,
            endpoint=self.ENDPOINT,
            stage=self.name,
            detail=exc.detail,
        )
        exc.report = report
        FILE_SINK_WRITES_TOTAL.labels(stage=self.name, status="failure").inc()
        self.error(report)
        await self.reports.publish(report)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        # Failures were already reported; mark the exception as retrieved.
        if not task.cancelled():
            task.exception()
