"""Schema and instance validation drivers.

Ordering rules (deterministic for identical input):
- keywords of one schema object are visited in sorted name order
- schema validation checks every keyword of an object before descending
  into its sub-schemas, in the order the syntax checkers report them
- instance validation descends into sub-schemas inline, while the keyword
  holding them (``properties``, ``items``, ...) is being validated
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from core.keywords.base import KeywordValidator, SchemaPath, ValidatorFactory
from core.library.library import Library
from core.messages.bundle import MessageBundle, default_bundle
from core.report.models import LogLevel, ProcessingMessage, ProcessingReport
from core.utils.json_tree import append_pointer, canonical_json, node_type
from core.validation.cache import ValidatorCache
from core.validation.context import InstanceContext, SyntaxContext
from core.validation.policy import ValidationPolicy

logger = logging.getLogger("schemaops.validation")

_DIGEST_ERRORS = (ValueError, TypeError, KeyError)


class RunState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    DONE = "done"


class ValidationRun:
    """One synchronous driver invocation producing one report."""

    def __init__(self, action: Callable[[ProcessingReport], None], log_level: LogLevel) -> None:
        self._action = action
        self.state = RunState.NOT_STARTED
        self.report = ProcessingReport(log_level=log_level)

    def execute(self) -> ProcessingReport:
        if self.state is not RunState.NOT_STARTED:
            raise RuntimeError(f"Validation run cannot be restarted (state={self.state.value})")
        self.state = RunState.RUNNING
        try:
            self._action(self.report)
        finally:
            self.state = RunState.DONE
            self.report.close()
        return self.report


class ValidationEngine:
    """Validates schemas and instances against one frozen library.

    An engine is meant to be built once and shared: its validator cache is
    the only mutable state and is safe for concurrent use.
    """

    def __init__(
        self,
        library: Library,
        *,
        policy: ValidationPolicy | None = None,
        bundle: MessageBundle | None = None,
    ) -> None:
        self.library = library
        self.policy = policy or ValidationPolicy()
        self.bundle = bundle or default_bundle()
        self.cache = ValidatorCache()

    def validate_schema(self, document: Any) -> ProcessingReport:
        """Check that ``document`` is a syntactically valid schema."""

        run = ValidationRun(
            lambda report: self._check_schema(document, "", report),
            self.policy.log_level(),
        )
        report = run.execute()
        logger.debug(
            "schema validation done success=%s messages=%d", report.success, len(report)
        )
        return report

    def validate_instance(self, schema: Any, instance: Any) -> ProcessingReport:
        """Validate ``instance`` against ``schema``.

        The schema is not syntax-checked first; malformed keyword values are
        reported as digest failures of that keyword.
        """

        run = ValidationRun(
            lambda report: self._validate(schema, instance, "", "", report),
            self.policy.log_level(),
        )
        report = run.execute()
        logger.debug(
            "instance validation done success=%s messages=%d", report.success, len(report)
        )
        return report

    def _check_schema(self, schema: Any, pointer: str, report: ProcessingReport) -> None:
        context = SyntaxContext(report=report, bundle=self.bundle, pointer=pointer)
        if not isinstance(schema, Mapping):
            report.add(self._not_an_object(schema, "syntax", pointer, None))
            return

        children: list[SchemaPath] = []
        for name in sorted(schema, key=str):
            if not isinstance(name, str):
                context.error(str(name), "NON_STRING_MEMBER_NAME", name=name)
                continue
            checker = self.library.syntax_checkers.get(name)
            if checker is None:
                self._report_unknown_keyword(context, name)
                continue
            children.extend(checker.check_syntax(context, schema))

        for path in children:
            self._check_schema(_resolve(schema, path), append_pointer(pointer, *path), report)

    def _report_unknown_keyword(self, context: SyntaxContext, name: str) -> None:
        mode = self.policy.unknown_keywords
        if mode == "ignore":
            return
        level = LogLevel.WARNING if mode == "warning" else LogLevel.INFO
        context.message(level, name, "UNKNOWN_KEYWORD")

    def _validate(
        self,
        schema: Any,
        instance: Any,
        schema_pointer: str,
        instance_pointer: str,
        report: ProcessingReport,
    ) -> None:
        if not isinstance(schema, Mapping):
            report.add(self._not_an_object(schema, "validation", schema_pointer, instance_pointer))
            return

        context = InstanceContext(
            library=self.library,
            policy=self.policy,
            bundle=self.bundle,
            report=report,
            schema_pointer=schema_pointer,
            instance_pointer=instance_pointer,
            validate_child=self._validate,
        )
        for name in sorted(schema, key=str):
            factory = self.library.validator_factories.get(name)
            if factory is None:
                continue
            try:
                digest = self.library.digesters[name].digest(schema)
                validator = self._validator_for(name, canonical_json(digest), digest, factory)
            except _DIGEST_ERRORS as exc:
                context.error(name, "DIGEST_FAILED", error=str(exc))
                continue
            validator.validate(context, instance)

    def _validator_for(
        self,
        name: str,
        digest_key: str,
        digest: Any,
        factory: ValidatorFactory,
    ) -> KeywordValidator:
        if not self.policy.cache_validators:
            return factory(digest)
        return self.cache.get_or_create(name, digest_key, digest, factory)

    def _not_an_object(
        self,
        schema: Any,
        domain: str,
        schema_pointer: str,
        instance_pointer: str | None,
    ) -> ProcessingMessage:
        found = node_type(schema)
        return ProcessingMessage(
            level=LogLevel.ERROR,
            message=self.bundle.render("SCHEMA_NOT_OBJECT", {"found": found}),
            domain=domain,  # type: ignore[arg-type]
            schema_pointer=schema_pointer,
            instance_pointer=instance_pointer,
            context={"found": found},
        )


def validate_schema(
    library: Library,
    document: Any,
    *,
    policy: ValidationPolicy | None = None,
) -> ProcessingReport:
    """Validate ``document`` as a schema with a run-scoped validator cache."""

    return ValidationEngine(library, policy=policy).validate_schema(document)


def validate_instance(
    library: Library,
    schema: Any,
    document: Any,
    *,
    policy: ValidationPolicy | None = None,
) -> ProcessingReport:
    """Validate ``document`` against ``schema`` with a run-scoped validator cache."""

    return ValidationEngine(library, policy=policy).validate_instance(schema, document)


def _resolve(node: Any, path: SchemaPath) -> Any:
    for token in path:
        node = node[int(token)] if isinstance(node, list) else node[token]
    return node
