"""Publish/subscribe stream of log records.

The console logger publishes every emitted record here so that embedding
callers (and tests) can observe what an operation reported without scraping
stdout. Subscriber failures are reported on stderr and never interrupt the
operation that logged.
"""

from __future__ import annotations

import contextlib
import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass

Subscriber = Callable[["LogRecord"], None]


@dataclass(frozen=True)
class LogRecord:
    level_name: str
    plain: str
    logger_name: str


class LogBus:
    def __init__(self) -> None:
        self._by_level: dict[str, list[Subscriber]] = {}
        self._all: list[Subscriber] = []

    def subscribe(self, level_name: str, cb: Subscriber) -> None:
        self._by_level.setdefault(level_name, []).append(cb)

    def subscribe_all(self, cb: Subscriber) -> None:
        self._all.append(cb)

    def unsubscribe_all(self, cb: Subscriber) -> None:
        with contextlib.suppress(ValueError):
            self._all.remove(cb)

    def publish(self, record: LogRecord) -> None:
        for cb in [*self._all, *self._by_level.get(record.level_name, [])]:
            try:
                cb(record)
            except Exception:
                # Never route through the logger here; that would recurse.
                with contextlib.suppress(Exception):
                    sys.stderr.write(
                        "LogBus subscriber raised; suppressed.\n" + traceback.format_exc()
                    )

    def clear(self) -> None:
        self._by_level.clear()
        self._all.clear()


_LOG_BUS: LogBus | None = None


def get_log_bus() -> LogBus:
    global _LOG_BUS
    if _LOG_BUS is None:
        _LOG_BUS = LogBus()
    return _LOG_BUS
