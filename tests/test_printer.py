"""Tests for documentation output and batch processing."""

import io
from pathlib import Path

import pytest

from yaml_docs.chart.info import ChartDocumentationInfo, ValueRow
from yaml_docs.document.errors import (
    ChartParseError,
    TemplateParseError,
    TemplateRenderError,
)
from yaml_docs.document.printer import (
    DocumentationPrinter,
    document_chart,
    document_charts,
)


def _make_chart(root: Path, name: str, replicas: int = 1) -> str:
    """Create a chart directory and return its values file path."""
    chart = root / name
    chart.mkdir()
    (chart / "Chart.yaml").write_text(f"name: {name}\nversion: 0.{replicas}.0\n")
    (chart / "values.yaml").write_text(
        f"# -- Number of replicas\nreplicaCount: {replicas}\n"
    )
    return f"{name}/values.yaml"


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test from a temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestDocumentationPrinter:
    """Tests for DocumentationPrinter."""

    def test_writes_readme(self, workdir: Path) -> None:
        info = ChartDocumentationInfo(
            chart_directory="demo",
            values=(ValueRow(key="a", type="int", default="1", description="A"),),
        )
        (workdir / "demo").mkdir()
        printer = DocumentationPrinter(template_files=["README.md.j2"])
        path = printer.print_documentation(info)
        assert path == Path("demo") / "README.md"
        assert "| a | int | 1 | A |" in (workdir / "demo" / "README.md").read_text()

    def test_custom_output_file(self, workdir: Path) -> None:
        (workdir / "demo").mkdir()
        printer = DocumentationPrinter(template_files=[], output_file="DOCS.md")
        printer.print_documentation(ChartDocumentationInfo(chart_directory="demo"))
        assert (workdir / "demo" / "DOCS.md").exists()

    def test_dry_run_streams(self, workdir: Path) -> None:
        (workdir / "demo").mkdir()
        stream = io.StringIO()
        printer = DocumentationPrinter(template_files=[], dry_run=True, stream=stream)
        info = ChartDocumentationInfo(
            chart_directory="demo", values=(ValueRow(key="a"),)
        )
        assert printer.print_documentation(info) is None
        assert "## Values" in stream.getvalue()
        assert not (workdir / "demo" / "README.md").exists()

    def test_uses_override_template(self, workdir: Path) -> None:
        (workdir / "README.md.j2").write_text('# {{ name }}\n\n{% include "docs.valuesSection" %}\n')
        values_file = _make_chart(workdir, "web")
        printer = DocumentationPrinter(template_files=["README.md.j2"])
        result = document_chart(values_file, printer)
        assert result.ok
        assert (workdir / "web" / "README.md").read_text().startswith("# web\n\n## Values")


class TestDocumentChart:
    """Tests for single chart processing."""

    def test_parse_error_is_returned(self, workdir: Path) -> None:
        printer = DocumentationPrinter(template_files=[])
        result = document_chart("missing/values.yaml", printer)
        assert not result.ok
        assert isinstance(result.error, ChartParseError)

    def test_template_error_is_returned(self, workdir: Path) -> None:
        (workdir / "broken.j2").write_text("{% if %}")
        values_file = _make_chart(workdir, "web")
        printer = DocumentationPrinter(template_files=["broken.j2"])
        result = document_chart(values_file, printer)
        assert isinstance(result.error, TemplateParseError)
        assert not (workdir / "web" / "README.md").exists()

    def test_runtime_error_is_returned(self, workdir: Path) -> None:
        (workdir / "divide.j2").write_text("{{ 1 / 0 }}\n")
        values_file = _make_chart(workdir, "web")
        printer = DocumentationPrinter(template_files=["divide.j2"])
        result = document_chart(values_file, printer)
        assert isinstance(result.error, TemplateRenderError)

    def test_version_stamped(self, workdir: Path) -> None:
        values_file = _make_chart(workdir, "web")
        printer = DocumentationPrinter(template_files=[])
        document_chart(values_file, printer, yaml_docs_version="9.9.9")
        assert "yaml-docs v9.9.9" in (workdir / "web" / "README.md").read_text()


class TestDocumentCharts:
    """Tests for batch processing."""

    def test_failures_do_not_stop_batch(self, workdir: Path) -> None:
        good = _make_chart(workdir, "good")
        bad = _make_chart(workdir, "bad")
        (workdir / "bad" / "values.yaml").write_text("key: [unclosed\n")
        printer = DocumentationPrinter(template_files=[])
        results = document_charts([bad, good], printer, jobs=2)
        assert [r.values_file for r in results] == [bad, good]
        assert not results[0].ok
        assert results[1].ok
        assert (workdir / "good" / "README.md").exists()

    def test_malformed_descriptor_does_not_stop_batch(self, workdir: Path) -> None:
        good = _make_chart(workdir, "good")
        bad = _make_chart(workdir, "bad")
        (workdir / "bad" / "Chart.yaml").write_text("name: bad\nsources: 5\n")
        printer = DocumentationPrinter(template_files=[])
        results = document_charts([good, bad], printer, jobs=1)
        assert [r.ok for r in results] == [True, False]
        assert isinstance(results[1].error, ChartParseError)

    def test_parallel_matches_sequential(self, workdir: Path) -> None:
        values_files = [_make_chart(workdir, f"chart{i}", replicas=i) for i in range(50)]
        printer = DocumentationPrinter(template_files=[])

        document_charts(values_files, printer, jobs=1)
        sequential = {
            f: (workdir / f).parent.joinpath("README.md").read_text() for f in values_files
        }

        for f in values_files:
            (workdir / f).parent.joinpath("README.md").unlink()

        results = document_charts(values_files, printer, jobs=8)
        assert all(result.ok for result in results)
        parallel = {
            f: (workdir / f).parent.joinpath("README.md").read_text() for f in values_files
        }
        assert parallel == sequential

    def test_dry_run_is_sequential(self, workdir: Path) -> None:
        values_files = [_make_chart(workdir, f"chart{i}", replicas=i) for i in range(5)]
        stream = io.StringIO()
        printer = DocumentationPrinter(template_files=[], dry_run=True, stream=stream)
        document_charts(values_files, printer, jobs=8)
        output = stream.getvalue()
        positions = [output.index(f"| replicaCount | int | `{i}` |") for i in range(5)]
        assert positions == sorted(positions)
