"""
Error report fan-out.

In-process pub/sub for ErrorReports emitted by a stage. Operators attach
subscribers (alerting, dead-letter capture, test collectors) without the
stage knowing about them.
"""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Union

from loguru import logger

from .models import ErrorReport

ReportSubscriber = Callable[[ErrorReport], Union[None, Awaitable[None]]]


class ErrorReportBus:
    """Fan-out bus for error reports.

    Subscribers may be plain or async callables and are called in
    registration order. One subscriber's failure does not affect others.

    Example:
        bus = ErrorReportBus()

        async def on_report(report: ErrorReport):
            await alert(report.short_message)

        bus.subscribe(on_report)
        await bus.publish(report)
    """

    def __init__(self) -> None:
        self._subs: list[ReportSubscriber] = []

    def subscribe(self, callback: ReportSubscriber) -> None:
        if callback not in self._subs:
            self._subs.append(callback)
            logger.debug(f"Report subscriber added (total: {len(self._subs)})")

    def unsubscribe(self, callback: ReportSubscriber) -> None:
        """Remove a subscriber. No-op if it was never subscribed."""
        try:
            self._subs.remove(callback)
            logger.debug(f"Report subscriber removed (total: {len(self._subs)})")
        except ValueError:
            pass

    async def publish(self, report: ErrorReport) -> None:
        if not self._subs:
            return

        # Iterate over copy to allow unsubscribe during iteration
        for callback in list(self._subs):
            try:
                result = callback(report)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.debug(f"Report subscriber error (ignored): {type(exc).__name__}: {exc}")

    @property
    def subscriber_count(self) -> int:
        return len(self._subs)
