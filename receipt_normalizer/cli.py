"""
Receipt Normalizer CLI

Developer tool for inspecting what the engine makes of a saved
document-analysis response.

    receipt-normalizer response.json
    receipt-normalizer response.json --table --threshold 85
    receipt-normalizer response.json -c config/engine.yaml --all-documents
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ConfigError, ConfigLoader
from .decision.confidence_triage import ConfidenceLevel, triage_extraction
from .parser.field_mapper import ExtractionResult

LEVEL_STYLES = {
    ConfidenceLevel.HIGH: 'green',
    ConfidenceLevel.MEDIUM: 'yellow',
    ConfidenceLevel.LOW: 'red',
}


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru logging for command-line use."""
    logger.remove()
    logger.enable('receipt_normalizer')
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level="DEBUG" if verbose else "WARNING",
        colorize=True,
    )


def print_table(console: Console, result: ExtractionResult, threshold: float, high: float) -> None:
    """Render one extraction as rich tables."""
    report = triage_extraction(result, threshold=threshold, high_threshold=high)

    table = Table(title="Extracted Fields")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_column("Confidence", justify="right")
    table.add_column("Level")

    for triaged in report.fields:
        value = '-' if not triaged.parsed else escape(str(triaged.value))
        style = LEVEL_STYLES[triaged.level]
        table.add_row(
            triaged.name,
            value,
            f"{triaged.confidence:.1f}",
            f"[{style}]{triaged.level.display_name}[/]",
        )

    console.print(table)

    if result.line_items:
        items = Table(title=f"Line Items ({len(result.line_items)})")
        items.add_column("#", justify="right")
        items.add_column("Description")
        items.add_column("Qty", justify="right")
        items.add_column("Unit Price", justify="right")
        for index, item in enumerate(result.line_items, 1):
            items.add_row(
                str(index),
                escape(str(item.get('description', ''))),
                str(item.get('quantity', '')),
                str(item.get('unitPrice', '')),
            )
        console.print(items)

    if report.average_confidence is not None:
        console.print(f"[bold]Average confidence:[/] {report.average_confidence}")
    if report.needs_review:
        console.print("[bold red]Review required[/]")


@click.command()
@click.argument(
    'response_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    '--config', '-c',
    'config_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='Path to engine.yaml configuration file'
)
@click.option(
    '--threshold', '-t',
    type=float,
    default=None,
    help='Confidence below which fields are flagged (default 80)'
)
@click.option(
    '--all-documents', '-a',
    is_flag=True,
    default=False,
    help='Extract every document instead of the first'
)
@click.option(
    '--table',
    'as_table',
    is_flag=True,
    help='Print rich tables instead of JSON'
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable debug logging'
)
def main(
    response_path: Path,
    config_path: Optional[Path],
    threshold: Optional[float],
    all_documents: bool,
    as_table: bool,
    verbose: bool
):
    """Normalize a saved document-analysis RESPONSE_PATH (JSON) into expense fields."""
    setup_logging(verbose=verbose)

    try:
        loader = ConfigLoader(config_path)
        mapper = loader.build_mapper()
    except ConfigError as e:
        raise click.ClickException(str(e))

    settings = loader.settings
    if threshold is not None:
        settings.review_threshold = threshold

    try:
        with open(response_path, 'r', encoding='utf-8') as f:
            response = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Cannot read {response_path}: {e}")

    if all_documents or settings.all_documents:
        results = mapper.parse_documents(response) or [ExtractionResult()]
    else:
        results = [mapper.parse_document(response)]

    if as_table:
        console = Console()
        for index, result in enumerate(results):
            if len(results) > 1:
                console.rule(f"Document {index + 1}")
            print_table(
                console, result, settings.review_threshold, settings.high_confidence_threshold
            )
        return

    output = [
        {
            **result.to_dict(),
            'triage': triage_extraction(
                result,
                threshold=settings.review_threshold,
                high_threshold=settings.high_confidence_threshold,
            ).to_dict(),
        }
        for result in results
    ]
    click.echo(json.dumps(output if len(output) > 1 else output[0], indent=2, ensure_ascii=False))


if __name__ == '__main__':
    main()
