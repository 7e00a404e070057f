"""Typer CLI entrypoint for schemaops."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, cast

import typer

from apps.cli.io import load_document, write_reports_atomic
from apps.cli.report_human import (
    ReportStyle,
    RetCode,
    ValidationOutcome,
    combine_ret_codes,
    render_outcome,
)
from core.keywords.defaults import build_default_library
from core.validation.engine import ValidationEngine
from core.validation.policy import load_policy

app = typer.Typer(help="Schema validation CLI", rich_markup_mode=None)


@app.callback()
def cli_callback() -> None:
    """CLI root callback to keep `schemaops validate` as explicit command form."""


@app.command("validate")
def validate_command(
    schema: Annotated[Path, typer.Argument(exists=True, dir_okay=False, file_okay=True)],
    files: Annotated[list[Path] | None, typer.Argument(dir_okay=False, file_okay=True)] = None,
    syntax: Annotated[
        bool,
        typer.Option("--syntax", help="Validate every file as a schema only."),
    ] = False,
    brief: Annotated[
        bool, typer.Option("--brief", help="Print one line per validated file.")
    ] = False,
    quiet: Annotated[bool, typer.Option("--quiet", help="Print nothing; exit code only.")] = False,
    policy: Annotated[Path | None, typer.Option(help="Validation policy YAML.")] = None,
    report_out: Annotated[
        Path | None,
        typer.Option("--report-out", help="Write all structured reports to this JSON file."),
    ] = None,
) -> None:
    """Validate SCHEMA's syntax, then each FILE against it."""

    if brief and quiet:
        typer.echo("ERROR: --brief and --quiet cannot be used together.")
        raise typer.Exit(code=RetCode.CMD_ERROR)
    style = cast(ReportStyle, "quiet" if quiet else "brief" if brief else "default")

    instance_paths = list(files or [])
    if not syntax and not instance_paths:
        typer.echo("ERROR: at least one instance file is required unless --syntax is given.")
        raise typer.Exit(code=RetCode.CMD_ERROR)

    try:
        policy_model = load_policy(policy)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=RetCode.CMD_ERROR) from exc

    engine = ValidationEngine(build_default_library(), policy=policy_model)
    outcomes: list[ValidationOutcome] = []

    try:
        if syntax:
            for path in [schema, *instance_paths]:
                report = engine.validate_schema(load_document(path))
                outcomes.append(_emit(ValidationOutcome("schema", str(path), report), style))
        else:
            schema_document = load_document(schema)
            schema_outcome = _emit(
                ValidationOutcome("schema", str(schema), engine.validate_schema(schema_document)),
                style,
            )
            outcomes.append(schema_outcome)
            if schema_outcome.report.success:
                for path in instance_paths:
                    report = engine.validate_instance(schema_document, load_document(path))
                    outcomes.append(_emit(ValidationOutcome("instance", str(path), report), style))
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=RetCode.CMD_ERROR) from exc

    exit_code = combine_ret_codes([outcome.ret_code for outcome in outcomes])

    if report_out is not None:
        try:
            write_reports_atomic(report_out, _build_reports_payload(outcomes, exit_code))
        except OSError as exc:
            typer.echo(f"ERROR: write report failed: {exc}")
            raise typer.Exit(code=RetCode.CMD_ERROR) from exc

    raise typer.Exit(code=int(exit_code))


def _emit(outcome: ValidationOutcome, style: ReportStyle) -> ValidationOutcome:
    rendered = render_outcome(outcome, style)
    if rendered is not None:
        typer.echo(rendered)
    return outcome


def _build_reports_payload(outcomes: list[ValidationOutcome], exit_code: RetCode) -> dict[str, Any]:
    return {
        "exit_code": int(exit_code),
        "results": [
            {
                "file": outcome.file_name,
                "kind": outcome.kind,
                "success": outcome.report.success,
                "messages": outcome.report.to_structured(),
            }
            for outcome in outcomes
        ],
    }


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
