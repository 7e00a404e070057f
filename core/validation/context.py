"""Per-schema contexts handed to keyword syntax checkers and validators."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.messages.bundle import MessageBundle
from core.report.models import LogLevel, ProcessingMessage, ProcessingReport
from core.utils.json_tree import append_pointer

if TYPE_CHECKING:
    from core.library.library import Library
    from core.validation.policy import ValidationPolicy


@dataclass(frozen=True)
class SyntaxContext:
    """Location of one schema object during schema validation."""

    report: ProcessingReport
    bundle: MessageBundle
    pointer: str

    def message(self, level: LogLevel, keyword: str, key: str, **fields: Any) -> None:
        self.report.add(
            ProcessingMessage(
                level=level,
                message=self.bundle.render(key, {"keyword": keyword, **fields}),
                domain="syntax",
                keyword=keyword,
                schema_pointer=self.pointer,
                context=fields,
            )
        )

    def error(self, keyword: str, key: str, **fields: Any) -> None:
        self.message(LogLevel.ERROR, keyword, key, **fields)


ChildValidation = Callable[[Mapping[str, Any], Any, str, str, ProcessingReport], None]


@dataclass(frozen=True)
class InstanceContext:
    """Location of one (schema, instance) pair during instance validation."""

    library: Library
    policy: ValidationPolicy
    bundle: MessageBundle
    report: ProcessingReport
    schema_pointer: str
    instance_pointer: str
    validate_child: ChildValidation

    def message(self, level: LogLevel, keyword: str, key: str, **fields: Any) -> None:
        self.report.add(
            ProcessingMessage(
                level=level,
                message=self.bundle.render(key, {"keyword": keyword, **fields}),
                domain="validation",
                keyword=keyword,
                schema_pointer=self.schema_pointer,
                instance_pointer=self.instance_pointer,
                context=fields,
            )
        )

    def error(self, keyword: str, key: str, **fields: Any) -> None:
        self.message(LogLevel.ERROR, keyword, key, **fields)

    def warn(self, keyword: str, key: str, **fields: Any) -> None:
        self.message(LogLevel.WARNING, keyword, key, **fields)

    def descend(
        self,
        schema: Any,
        instance: Any,
        schema_tokens: tuple[str | int, ...],
        instance_tokens: tuple[str | int, ...] = (),
    ) -> None:
        """Validate ``instance`` against a sub-schema into this context's report."""

        self.validate_child(
            schema,
            instance,
            append_pointer(self.schema_pointer, *schema_tokens),
            append_pointer(self.instance_pointer, *instance_tokens),
            self.report,
        )

    def probe(
        self,
        schema: Any,
        instance: Any,
        schema_tokens: tuple[str | int, ...],
    ) -> ProcessingReport:
        """Validate into a detached report, for combinators like ``anyOf``."""

        report = ProcessingReport(log_level=self.report.log_level)
        self.validate_child(
            schema,
            instance,
            append_pointer(self.schema_pointer, *schema_tokens),
            self.instance_pointer,
            report,
        )
        report.close()
        return report
