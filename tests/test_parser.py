"""Tests for the chart metadata parser."""

import textwrap
from pathlib import Path

import pytest
import yaml

from yaml_docs.chart.info import ChartDependency, Maintainer, ValueRow
from yaml_docs.chart.parser import (
    build_value_rows,
    format_default,
    infer_type,
    parse_chart_information,
    parse_value_annotations,
)
from yaml_docs.document.errors import ChartParseError

VALUES_YAML = textwrap.dedent("""\
    # -- Number of replicas
    replicaCount: 1

    image:
      # -- Image repository
      repository: nginx
      # Image tag, defaults to appVersion
      tag: ""
      # -- Pull policy
      # @default -- the chart appVersion
      pullPolicy: IfNotPresent

    # -- (int) Service port
    port: "8080"

    resources: {}

    # -- Extra annotations
    # for the pods
    podAnnotations:
      team: web

    args:
      - --verbose

    config: |
      key: value
      other: thing

    # ingress.enabled -- Enable the ingress
    ingress:
      enabled: false
""")

CHART_YAML = textwrap.dedent("""\
    apiVersion: v2
    name: demo
    description: A demo chart
    version: 1.0.0
    appVersion: "2.1"
    type: application
    home: https://example.com
    kubeVersion: ">=1.19"
    sources:
      - https://github.com/example/demo
    maintainers:
      - name: Jane
        email: jane@example.com
    dependencies:
      - name: postgresql
        version: 12.1.0
        repository: https://charts.bitnami.com/bitnami
        alias: db
""")


@pytest.fixture
def chart_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a demo chart and make its parent the working directory."""
    monkeypatch.chdir(tmp_path)
    chart = tmp_path / "demo"
    chart.mkdir()
    (chart / "values.yaml").write_text(VALUES_YAML)
    (chart / "Chart.yaml").write_text(CHART_YAML)
    return chart


class TestValueAnnotations:
    """Tests for comment annotation parsing."""

    def test_explicit_description(self) -> None:
        annotations = parse_value_annotations(VALUES_YAML)
        assert annotations["replicaCount"].description == "Number of replicas"
        assert annotations["image.repository"].description == "Image repository"

    def test_plain_comment_is_auto_description(self) -> None:
        annotation = parse_value_annotations(VALUES_YAML)["image.tag"]
        assert annotation.description is None
        assert annotation.auto_description == "Image tag, defaults to appVersion"

    def test_default_annotation(self) -> None:
        annotation = parse_value_annotations(VALUES_YAML)["image.pullPolicy"]
        assert annotation.default == "the chart appVersion"
        assert annotation.description == "Pull policy"

    def test_type_prefix(self) -> None:
        annotation = parse_value_annotations(VALUES_YAML)["port"]
        assert annotation.type == "int"
        assert annotation.description == "Service port"

    def test_continuation_lines(self) -> None:
        annotation = parse_value_annotations(VALUES_YAML)["podAnnotations"]
        assert annotation.description == "Extra annotations for the pods"

    def test_keyed_description(self) -> None:
        annotation = parse_value_annotations(VALUES_YAML)["ingress.enabled"]
        assert annotation.description == "Enable the ingress"

    def test_blank_line_detaches_comment(self) -> None:
        source = "# -- Orphan\n\nkey: 1\n"
        assert "key" not in parse_value_annotations(source)

    def test_block_scalar_content_ignored(self) -> None:
        source = "config: |\n  # -- not a comment\n  inner: 1\nnext: 2\n"
        annotations = parse_value_annotations(source)
        assert "config.inner" not in annotations
        assert "next" not in annotations


class TestValueRows:
    """Tests for flattening values into rows."""

    def test_rows_in_file_order(self) -> None:
        rows = build_value_rows(
            yaml.safe_load(VALUES_YAML), parse_value_annotations(VALUES_YAML)
        )
        assert [row.key for row in rows] == [
            "replicaCount",
            "image.repository",
            "image.tag",
            "image.pullPolicy",
            "port",
            "resources",
            "podAnnotations",
            "args",
            "config",
            "ingress.enabled",
        ]

    def test_described_mapping_is_single_row(self) -> None:
        rows = build_value_rows(
            {"podAnnotations": {"team": "web"}},
            parse_value_annotations("# -- Extra\npodAnnotations:\n  team: web\n"),
        )
        assert rows == [
            ValueRow(
                key="podAnnotations",
                type="object",
                auto_default='`{"team":"web"}`',
                description="Extra",
            )
        ]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, "bool"),
            (3, "int"),
            (1.5, "float"),
            ("x", "string"),
            (None, "string"),
            ([1], "list"),
            ({}, "object"),
        ],
    )
    def test_infer_type(self, value: object, expected: str) -> None:
        assert infer_type(value) == expected

    def test_format_default(self) -> None:
        assert format_default(["a", 1]) == '`["a",1]`'
        assert format_default(None) == "`null`"


class TestParseChartInformation:
    """Tests for parse_chart_information."""

    def test_chart_descriptor_fields(self, chart_dir: Path) -> None:
        info = parse_chart_information("demo/values.yaml", yaml_docs_version="0.1.0")
        assert info.chart_directory == "demo"
        assert info.name == "demo"
        assert info.description == "A demo chart"
        assert info.version == "1.0.0"
        assert info.app_version == "2.1"
        assert info.type == "application"
        assert info.kube_version == ">=1.19"
        assert info.sources == ("https://github.com/example/demo",)
        assert info.maintainers == (Maintainer(name="Jane", email="jane@example.com"),)
        assert info.dependencies == (
            ChartDependency(
                name="postgresql",
                version="12.1.0",
                repository="https://charts.bitnami.com/bitnami",
                alias="db",
            ),
        )
        assert info.yaml_docs_version == "0.1.0"

    def test_values_rows(self, chart_dir: Path) -> None:
        info = parse_chart_information("demo/values.yaml")
        rows = {row.key: row for row in info.values}
        assert rows["replicaCount"] == ValueRow(
            key="replicaCount",
            type="int",
            auto_default="`1`",
            description="Number of replicas",
        )
        assert rows["image.pullPolicy"].default == "the chart appVersion"
        assert rows["image.pullPolicy"].auto_default == '`"IfNotPresent"`'
        assert rows["port"].type == "int"
        assert rows["ingress.enabled"].auto_default == "`false`"

    def test_without_chart_descriptor(self, chart_dir: Path) -> None:
        (chart_dir / "Chart.yaml").unlink()
        info = parse_chart_information("demo/values.yaml")
        assert info.name == "demo"
        assert info.version is None
        assert info.maintainers == ()

    def test_missing_values_file(self, tmp_path: Path) -> None:
        with pytest.raises(ChartParseError):
            parse_chart_information(str(tmp_path / "values.yaml"))

    def test_invalid_yaml(self, chart_dir: Path) -> None:
        (chart_dir / "values.yaml").write_text("key: [unclosed\n")
        with pytest.raises(ChartParseError) as exc_info:
            parse_chart_information("demo/values.yaml")
        assert exc_info.value.path == "demo/values.yaml"

    def test_values_not_a_mapping(self, chart_dir: Path) -> None:
        (chart_dir / "values.yaml").write_text("- a\n- b\n")
        with pytest.raises(ChartParseError):
            parse_chart_information("demo/values.yaml")

    def test_invalid_dependency(self, chart_dir: Path) -> None:
        (chart_dir / "Chart.yaml").write_text("name: demo\ndependencies:\n  - version: 1\n")
        with pytest.raises(ChartParseError):
            parse_chart_information("demo/values.yaml")

    def test_empty_values_file(self, chart_dir: Path) -> None:
        (chart_dir / "values.yaml").write_text("")
        info = parse_chart_information("demo/values.yaml")
        assert info.values == ()

    def test_sources_not_a_list(self, chart_dir: Path) -> None:
        (chart_dir / "Chart.yaml").write_text("name: demo\nsources: 5\n")
        with pytest.raises(ChartParseError) as exc_info:
            parse_chart_information("demo/values.yaml")
        assert "sources" in exc_info.value.reason
