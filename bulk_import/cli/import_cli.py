"""
Command-line interface for bulk imports.

Usage:
    python -m bulk_import.cli.import_cli process --entity usuarios --input <file_path> [options]
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from bulk_import.batch import ImportPipeline, TemplateWriter
from bulk_import.clients import ApiClient
from bulk_import.core.errors import ImportPipelineError
from bulk_import.core.models import ImportResult, ValidationReport
from bulk_import.entities import EntityDefinition, get_entity
from bulk_import.observability import metrics
from bulk_import.observability.logger import get_logger

logger = get_logger(__name__)


def resolve_entity(args) -> EntityDefinition:
    """Pick the entity from --rules (YAML with a schema section) or --entity."""
    if args.rules:
        return EntityDefinition.from_yaml(args.rules, resource=args.resource)
    entity = get_entity(args.entity)
    if args.resource:
        entity = entity.model_copy(update={"resource": args.resource})
    return entity


async def _skip_create(record) -> None:
    """Create operation used when only validating."""
    raise RuntimeError("validation-only pipeline cannot create records")


def log_report(report: ValidationReport) -> None:
    """Log the review screen: counts, then every rejected and warned row."""
    summary = report.summary()
    logger.info("=" * 60)
    logger.info("VALIDATION RESULTS")
    logger.info("=" * 60)
    logger.info(f"Total rows: {summary['total']}")
    logger.info(f"Valid: {summary['valid']}")
    logger.info(f"With warnings (will be imported): {summary['warnings']}")
    logger.info(f"With errors (will not be imported): {summary['errors']}")

    for outcome in report.errors:
        for message in outcome.errors:
            logger.info(f"Fila {outcome.row_number} [error]: {message}")
    for outcome in report.warnings:
        for message in outcome.warnings:
            logger.info(f"Fila {outcome.row_number} [aviso]: {message}")
    logger.info("=" * 60)


def log_result(result: ImportResult) -> None:
    logger.info("=" * 60)
    logger.info("IMPORT COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Total processed: {result.total}")
    logger.info(f"Imported: {result.succeeded}")
    logger.info(f"Failed: {result.failed}")
    for failure in result.failures:
        logger.info(f"Fila {failure.row_number}: {failure.error}")
    logger.info("=" * 60)


def template_command(args) -> int:
    """Write the import template for an entity."""
    entity = resolve_entity(args)
    output_dir = Path(args.output)
    if not output_dir.is_dir():
        logger.error(f"Output directory not found: {args.output}")
        return 1

    path = TemplateWriter(entity.field_schema).write(output_dir)
    logger.info(f"Template written to {path}")
    return 0


def validate_command(args) -> int:
    """Parse and validate a file without importing it."""
    entity = resolve_entity(args)
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    pipeline = ImportPipeline(entity.field_schema, entity.rules, create=_skip_create)
    try:
        report = pipeline.load(input_path, file_format=args.format)
    except ImportPipelineError as e:
        logger.error(e.message)
        return 1

    log_report(report)
    return 0


async def _run_process(args, entity: EntityDefinition, input_path: Path) -> int:
    async with ApiClient(base_url=args.api_url, token=args.api_token) as api:
        resource = api.for_entity(entity)
        pipeline = ImportPipeline(entity.field_schema, entity.rules, create=resource.create)

        try:
            report = pipeline.load(input_path, file_format=args.format)
        except ImportPipelineError as e:
            logger.error(e.message)
            return 1

        log_report(report)

        if args.dry_run:
            logger.info("DRY RUN: no records were created")
            return 0

        if not report.has_eligible:
            logger.error("No hay registros válidos para importar")
            return 1

        last_logged = -1

        def on_progress(percent: int) -> None:
            nonlocal last_logged
            if percent // 10 > last_logged // 10 or percent == 100:
                logger.info(f"Importing {entity.name}: {percent}% completado")
                last_logged = percent

        result = await pipeline.run_import(on_progress=on_progress)
        log_result(result)
        return 0 if result.failed == 0 else 2


def process_command(args) -> int:
    """
    Validate a file and create its eligible records through the API.

    Returns:
        0 when every record was created, 2 when some failed, 1 on input errors
    """
    entity = resolve_entity(args)
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    logger.info(f"Starting import of {entity.name} from {input_path}")
    return asyncio.run(_run_process(args, entity, input_path))


def write_metrics(path: str) -> None:
    """Dump the import metrics registry for a node-exporter textfile collector."""
    Path(path).write_bytes(metrics.generate_metrics())
    logger.info(f"Metrics written to {path}")


def _add_entity_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--entity",
        default="usuarios",
        help="Built-in entity to import (default: usuarios)"
    )
    parser.add_argument(
        "--rules",
        help="YAML rule file with a 'schema' section (overrides --entity)"
    )
    parser.add_argument(
        "--resource",
        help="REST collection path for created records (default: entity's own)"
    )


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input",
        required=True,
        help="Path to input file"
    )
    parser.add_argument(
        "--format",
        choices=["csv", "json", "xlsx"],
        help="Input file format (default: detected from the file extension)"
    )
    parser.add_argument(
        "--metrics-output",
        help="Write Prometheus metrics for this run to a file (text exposition format)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bulk record import",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Download the user import template
  bulk-import template --entity usuarios --output .

  # Check a file without importing
  bulk-import validate --entity usuarios --input usuarios.csv

  # Import users through the API
  bulk-import process --entity usuarios --input usuarios.csv --api-url https://api.example.com/api

  # Import with a rule file instead of the built-in definition
  bulk-import process --rules config/users_import.yaml --resource /users --input usuarios.json
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    template_parser = subparsers.add_parser("template", help="Write the import template")
    _add_entity_arguments(template_parser)
    template_parser.add_argument(
        "--output",
        default=".",
        help="Directory to write the template into (default: current directory)"
    )

    validate_parser = subparsers.add_parser("validate", help="Validate a file without importing")
    _add_entity_arguments(validate_parser)
    _add_input_arguments(validate_parser)

    process_parser = subparsers.add_parser("process", help="Validate and import a file")
    _add_entity_arguments(process_parser)
    _add_input_arguments(process_parser)
    process_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate data without creating records"
    )
    process_parser.add_argument(
        "--api-url",
        help="API base URL (default: env var API_BASE_URL)"
    )
    process_parser.add_argument(
        "--api-token",
        help="API bearer token (default: env var API_TOKEN)"
    )

    return parser


COMMANDS = {
    "template": template_command,
    "validate": validate_command,
    "process": process_command,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        exit_code = COMMANDS[args.command](args)
    except (ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        exit_code = 1

    if getattr(args, "metrics_output", None):
        write_metrics(args.metrics_output)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
