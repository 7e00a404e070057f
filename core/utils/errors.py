"""Custom exceptions for core logic."""

from __future__ import annotations

from typing import Any

from core.messages.bundle import MessageBundle, default_bundle
from core.report.models import LogLevel, ProcessingMessage


class ValidationConfigurationError(Exception):
    """Raised when the library/builder API is misused.

    This signals a defect in the calling code, not bad input data: it is
    never collected into a processing report.
    """

    def __init__(self, message: ProcessingMessage) -> None:
        super().__init__(message.message)
        self.processing_message = message

    @classmethod
    def from_key(
        cls,
        key: str,
        *,
        bundle: MessageBundle | None = None,
        **context: Any,
    ) -> ValidationConfigurationError:
        rendered = (bundle or default_bundle()).render(key, context)
        return cls(
            ProcessingMessage(
                level=LogLevel.FATAL,
                message=rendered,
                domain="configuration",
                context={"key": key, **context},
            )
        )

    @property
    def key(self) -> str | None:
        return self.processing_message.context.get("key")
