"""Processing messages and the report that collects them."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class LogLevel(str, Enum):
    """Ordered message severities."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
    LogLevel.FATAL: 4,
}


class ProcessingMessage(BaseModel):
    """Single structured diagnostic emitted during processing."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: LogLevel = LogLevel.ERROR
    message: str
    domain: Literal["syntax", "validation", "configuration"] = "validation"
    keyword: str | None = None
    schema_pointer: str | None = None
    instance_pointer: str | None = None
    context: dict[str, Any] = Field(default_factory=dict)

    def to_structured(self) -> dict[str, Any]:
        """Return a JSON-ready record; context fields sit beside fixed ones."""

        record: dict[str, Any] = {
            "level": self.level.value,
            "domain": self.domain,
            "message": self.message,
        }
        if self.keyword is not None:
            record["keyword"] = self.keyword
        if self.schema_pointer is not None:
            record["schema"] = {"pointer": self.schema_pointer}
        if self.instance_pointer is not None:
            record["instance"] = {"pointer": self.instance_pointer}
        for key, value in self.context.items():
            record.setdefault(key, value)
        return record


class ProcessingReport:
    """Ordered, append-only collection of processing messages.

    Rules:
    - messages keep emission order
    - success == no message of level error or above was appended
    - once closed, the report is read-only
    - messages below ``log_level`` are dropped; the threshold cannot exceed
      ``error`` so failures are never hidden
    """

    def __init__(self, log_level: LogLevel = LogLevel.INFO) -> None:
        if log_level.rank > LogLevel.ERROR.rank:
            raise ValueError(f"Report log level cannot exceed error: {log_level.value}")
        self._log_level = log_level
        self._messages: list[ProcessingMessage] = []
        self._highest: LogLevel | None = None
        self._closed = False

    @property
    def log_level(self) -> LogLevel:
        return self._log_level

    @property
    def messages(self) -> tuple[ProcessingMessage, ...]:
        return tuple(self._messages)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def success(self) -> bool:
        return self._highest is None or self._highest.rank < LogLevel.ERROR.rank

    def add(self, message: ProcessingMessage) -> None:
        if self._closed:
            raise RuntimeError("Cannot append to a closed processing report")
        if message.level.rank < self._log_level.rank:
            return
        if self._highest is None or message.level.rank > self._highest.rank:
            self._highest = message.level
        self._messages.append(message)

    def merge(self, other: ProcessingReport) -> None:
        """Append every message of ``other`` in order."""

        for message in other._messages:
            self.add(message)

    def close(self) -> None:
        self._closed = True

    def to_structured(self) -> list[dict[str, Any]]:
        return [message.to_structured() for message in self._messages]

    def error_count(self) -> int:
        return sum(1 for message in self._messages if message.level.rank >= LogLevel.ERROR.rank)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(tuple(self._messages))

    def __repr__(self) -> str:
        return f"ProcessingReport(success={self.success}, messages={len(self._messages)})"
