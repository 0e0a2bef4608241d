"""Documentation output for parsed charts.

Parses each chart, resolves its template set, renders it, and either
writes the result next to the chart's values file or prints it to
stdout. A batch of charts is processed on a thread pool, or strictly
sequentially when printing so outputs never interleave.
"""

import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from yaml_docs.chart.info import ChartDocumentationInfo
from yaml_docs.chart.parser import parse_chart_information
from yaml_docs.document.errors import YamlDocsError
from yaml_docs.document.template import render, render_to_stream, resolve

logger = logging.getLogger(__name__)


@dataclass
class ChartResult:
    """Outcome of documenting one chart.

    Attributes:
        values_file: Values file the chart was parsed from.
        output_path: File the documentation was written to, if any.
        error: Error that stopped this chart, if any.
    """

    values_file: str
    output_path: Optional[Path] = None
    error: Optional[YamlDocsError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DocumentationPrinter:
    """Renders chart documentation to files or to a stream.

    Writes ``output_file`` into each chart directory, or in dry-run
    mode streams every document to ``stream`` (stdout by default).
    """

    def __init__(
        self,
        template_files: list[str],
        output_file: str = "README.md",
        dry_run: bool = False,
        stream: Optional[TextIO] = None,
    ) -> None:
        """Initialize the printer.

        Args:
            template_files: Override template paths, in order.
            output_file: File name written into each chart directory.
            dry_run: Print to ``stream`` instead of writing files.
            stream: Stream used in dry-run mode. Defaults to stdout.
        """
        self.template_files = list(template_files)
        self.output_file = output_file
        self.dry_run = dry_run
        self._stream = stream

    def print_documentation(self, info: ChartDocumentationInfo) -> Optional[Path]:
        """Render one chart's documentation and emit it.

        Args:
            info: The chart's documentation record.

        Returns:
            Path of the written file, or None in dry-run mode.

        Raises:
            YamlDocsError: If template resolution or rendering fails.
        """
        template_set = resolve(self.template_files, info.chart_directory)

        if self.dry_run:
            stream = self._stream or sys.stdout
            render_to_stream(template_set, info, stream)
            stream.flush()
            return None

        content = render(template_set, info)
        output_path = Path(info.chart_directory) / self.output_file
        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote documentation: %s", output_path)
        return output_path


def document_chart(
    values_file: str,
    printer: DocumentationPrinter,
    yaml_docs_version: Optional[str] = None,
) -> ChartResult:
    """Parse, render and emit documentation for one chart.

    Errors are logged with the chart path and returned instead of
    raised, so one broken chart never stops the rest of a batch.

    Args:
        values_file: Path to the chart's values file.
        printer: Printer that renders and emits the documentation.
        yaml_docs_version: Tool version to stamp in the footer.

    Returns:
        The result for this chart.
    """
    try:
        info = parse_chart_information(values_file, yaml_docs_version)
        output_path = printer.print_documentation(info)
    except YamlDocsError as e:
        logger.warning("Error generating documentation for %s, skipping: %s", values_file, e)
        return ChartResult(values_file=values_file, error=e)
    except OSError as e:
        logger.warning("Error writing documentation for %s, skipping: %s", values_file, e)
        return ChartResult(values_file=values_file, error=YamlDocsError(str(e)))
    return ChartResult(values_file=values_file, output_path=output_path)


def document_charts(
    values_files: list[str],
    printer: DocumentationPrinter,
    jobs: int = 4,
    yaml_docs_version: Optional[str] = None,
) -> list[ChartResult]:
    """Document a batch of charts.

    Charts are processed concurrently on ``jobs`` threads and the call
    returns once all of them are done. In dry-run mode, or with a single
    job, charts are processed one after another in the given order.

    Args:
        values_files: Values files of the charts to document.
        printer: Printer that renders and emits the documentation.
        jobs: Maximum number of charts processed at once.
        yaml_docs_version: Tool version to stamp in the footer.

    Returns:
        One result per values file, in input order.
    """
    if printer.dry_run or jobs <= 1 or len(values_files) <= 1:
        return [
            document_chart(values_file, printer, yaml_docs_version)
            for values_file in values_files
        ]

    with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="yaml-docs") as pool:
        futures = [
            pool.submit(document_chart, values_file, printer, yaml_docs_version)
            for values_file in values_files
        ]
        results = [future.result() for future in futures]

    failed = sum(1 for result in results if not result.ok)
    logger.debug("Documented %d charts, %d failed", len(results), failed)
    return results
