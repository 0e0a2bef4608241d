"""CLI entry point for yaml-docs.

Provides the Click-based ``yaml-docs`` command that loads
configuration, sets up logging, and documents every configured chart.
"""

import logging
import sys
from typing import Optional

import click

from yaml_docs import __version__
from yaml_docs.document.printer import DocumentationPrinter, document_charts
from yaml_docs.utils.config import load_config
from yaml_docs.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="yaml-docs")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML configuration file.",
)
@click.option(
    "--values-file",
    "-f",
    "values_files",
    multiple=True,
    help="Values file of a chart to document. Repeatable.",
)
@click.option(
    "--template-files",
    "-t",
    "template_files",
    multiple=True,
    help="Override template file, relative to the working directory. Repeatable.",
)
@click.option(
    "--output-file",
    "-o",
    default=None,
    help="Markdown file written into each chart directory.",
)
@click.option(
    "--dry-run",
    "-d",
    is_flag=True,
    help="Print documentation to stdout instead of writing files.",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Number of charts documented in parallel.",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    default=None,
    help="Log level.",
)
def yaml_docs(
    config_path: Optional[str],
    values_files: tuple[str, ...],
    template_files: tuple[str, ...],
    output_file: Optional[str],
    dry_run: bool,
    jobs: Optional[int],
    log_level: Optional[str],
) -> None:
    """yaml-docs: generate Markdown documentation for charts.

    Renders each chart's values and metadata through the built-in
    fragments and any override templates, and writes the result next to
    the values file.
    """
    config = load_config(config_path)
    setup_logging(config.logging, level=log_level)

    files = list(values_files) or config.charts.values_files
    if not files:
        logger.warning("At least one `values-file` must be provided.")
        return

    templates = list(template_files) or config.charts.template_files
    logger.debug("Rendering from optional template files [%s]", ", ".join(templates))

    printer = DocumentationPrinter(
        template_files=templates,
        output_file=output_file or config.output.output_file,
        dry_run=dry_run or config.output.dry_run,
    )
    results = document_charts(
        files,
        printer,
        jobs=jobs or config.output.jobs,
        yaml_docs_version=__version__,
    )

    failed = [result for result in results if not result.ok]
    if failed:
        logger.error("Failed to document %d of %d charts", len(failed), len(results))
        sys.exit(1)
