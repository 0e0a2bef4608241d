"""Chart metadata parser built on PyYAML.

Reads a values file and the Chart.yaml next to it, and extracts keys,
inferred types and defaults, comment annotations, maintainers, sources
and dependencies into a ChartDocumentationInfo.

Supported comment annotations in values files::

    # -- Number of replicas        explicit description of the next key
    # continues the description     continuation line
    # @default -- computed          explicit default of the next key
    # image.tag -- Image tag        description of a key by path
    # plain comment                 inferred description of the next key

A description may start with a type in parentheses, e.g.
``# -- (int) Port``, to override the inferred type.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from yaml_docs.chart.info import (
    ChartDependency,
    ChartDocumentationInfo,
    Maintainer,
    ValueRow,
)
from yaml_docs.document.errors import ChartParseError

logger = logging.getLogger(__name__)

CHART_DESCRIPTOR = "Chart.yaml"

_KEY_LINE_RE = re.compile(
    r"^(?P<indent> *)(?P<key>\"[^\"]*\"|'[^']*'|[^\s#'\"\-][^:#]*?)\s*:(?:\s+(?P<rest>.*))?$"
)
_BLOCK_SCALAR_RE = re.compile(r"^[|>][-+]?\d*\s*(#.*)?$")
_DESCRIPTION_RE = re.compile(r"^#\s*--(?:\s+(?P<text>.*))?$")
_KEYED_DESCRIPTION_RE = re.compile(r"^#\s*(?P<key>[^\s@][^\s]*)\s+--\s+(?P<text>.*)$")
_DEFAULT_RE = re.compile(r"^#\s*@default\s+--\s+(?P<text>.*)$")
_TYPE_PREFIX_RE = re.compile(r"^\((?P<type>[\w.\-/]+)\)\s*(?P<text>.*)$")


@dataclass
class ValueAnnotation:
    """Comment annotations collected for one key of a values file.

    Attributes:
        description: Explicit description from a ``--`` comment.
        default: Explicit default from an ``@default`` comment.
        type: Type override from a ``(type)`` description prefix.
        auto_description: Text of plain comments above the key.
    """

    description: Optional[str] = None
    default: Optional[str] = None
    type: Optional[str] = None
    auto_description: Optional[str] = None


@dataclass
class _PendingComments:
    description: list[str] = field(default_factory=list)
    plain: list[str] = field(default_factory=list)
    default: Optional[str] = None
    explicit: bool = False

    def to_annotation(self) -> ValueAnnotation:
        annotation = ValueAnnotation(default=self.default)
        if self.explicit:
            annotation.description, annotation.type = _split_type(
                " ".join(self.description).strip()
            )
        elif self.plain:
            annotation.auto_description = " ".join(self.plain).strip()
        return annotation

    def is_empty(self) -> bool:
        return not (self.explicit or self.plain or self.default is not None)


def _split_type(text: str) -> tuple[Optional[str], Optional[str]]:
    """Split an optional ``(type)`` prefix off a description."""
    match = _TYPE_PREFIX_RE.match(text)
    if match:
        return match.group("text") or None, match.group("type")
    return text or None, None


def _unquote(key: str) -> str:
    key = key.strip()
    if len(key) >= 2 and key[0] == key[-1] and key[0] in "'\"":
        return key[1:-1]
    return key


def parse_value_annotations(source: str) -> dict[str, ValueAnnotation]:
    """Collect comment annotations of a values file by dotted key path.

    Args:
        source: Raw contents of the values file.

    Returns:
        Mapping of dotted key path to its annotations.
    """
    annotations: dict[str, ValueAnnotation] = {}
    keyed: dict[str, tuple[Optional[str], Optional[str]]] = {}
    stack: list[tuple[int, str]] = []
    pending = _PendingComments()
    block_indent: Optional[int] = None

    for raw_line in source.splitlines():
        stripped = raw_line.strip()
        indent = len(raw_line) - len(raw_line.lstrip(" "))

        if block_indent is not None:
            if not stripped or indent > block_indent:
                continue
            block_indent = None

        if not stripped:
            pending = _PendingComments()
            continue

        if stripped.startswith("#"):
            keyed_match = _KEYED_DESCRIPTION_RE.match(stripped)
            if keyed_match and not _DESCRIPTION_RE.match(stripped):
                keyed[keyed_match.group("key")] = _split_type(
                    keyed_match.group("text").strip()
                )
                continue

            default_match = _DEFAULT_RE.match(stripped)
            if default_match:
                pending.default = default_match.group("text").strip()
                continue

            description_match = _DESCRIPTION_RE.match(stripped)
            if description_match:
                pending.explicit = True
                pending.description = [description_match.group("text") or ""]
                continue

            text = stripped.lstrip("#").strip()
            if pending.explicit:
                pending.description.append(text)
            else:
                pending.plain.append(text)
            continue

        match = _KEY_LINE_RE.match(raw_line)
        if not match:
            pending = _PendingComments()
            continue

        while stack and stack[-1][0] >= indent:
            stack.pop()
        key = _unquote(match.group("key"))
        path = ".".join([name for _, name in stack] + [key])
        stack.append((indent, key))

        if not pending.is_empty():
            annotations[path] = pending.to_annotation()
        pending = _PendingComments()

        rest = match.group("rest") or ""
        if _BLOCK_SCALAR_RE.match(rest.strip()):
            block_indent = indent

    for path, (description, type_override) in keyed.items():
        annotation = annotations.setdefault(path, ValueAnnotation())
        annotation.description = description
        if type_override:
            annotation.type = type_override

    return annotations


def infer_type(value: Any) -> str:
    """Infer the documented type of a values entry."""
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "object"
    return "string"


def format_default(value: Any) -> str:
    """Render a value as compact JSON wrapped in backticks."""
    return f"`{json.dumps(value, separators=(',', ':'), default=str)}`"


def build_value_rows(
    values: dict[str, Any],
    annotations: dict[str, ValueAnnotation],
    prefix: str = "",
) -> list[ValueRow]:
    """Flatten a values mapping into documented rows, in file order.

    Non-empty mappings are descended into unless the mapping itself
    carries an explicit description, in which case it is documented as
    a single object row.

    Args:
        values: Parsed values mapping.
        annotations: Comment annotations by dotted key path.
        prefix: Dotted path of ``values`` within the whole file.

    Returns:
        The rows of the values table.
    """
    rows: list[ValueRow] = []
    for key, value in values.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        annotation = annotations.get(path, ValueAnnotation())

        if isinstance(value, dict) and value and annotation.description is None:
            rows.extend(build_value_rows(value, annotations, path))
            continue

        rows.append(
            ValueRow(
                key=path,
                type=annotation.type or infer_type(value),
                default=annotation.default,
                auto_default=format_default(value),
                description=annotation.description,
                auto_description=annotation.auto_description,
            )
        )
    return rows


def _load_yaml(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ChartParseError(str(path), str(e)) from e


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def parse_chart_descriptor(chart_file: Path) -> dict[str, Any]:
    """Read Chart.yaml into the keyword arguments of the chart record.

    Args:
        chart_file: Path to the chart descriptor.

    Returns:
        ChartDocumentationInfo field values found in the descriptor.

    Raises:
        ChartParseError: If the file cannot be read or is not a mapping.
    """
    raw = _load_yaml(chart_file) or {}
    if not isinstance(raw, dict):
        raise ChartParseError(str(chart_file), "chart descriptor is not a mapping")

    sources = raw.get("sources") or []
    if not isinstance(sources, list):
        raise ChartParseError(str(chart_file), "sources is not a list")

    try:
        maintainers = tuple(
            Maintainer.from_dict(m) for m in raw.get("maintainers") or []
        )
        dependencies = tuple(
            ChartDependency.from_dict(d) for d in raw.get("dependencies") or []
        )
    except (AttributeError, KeyError, TypeError) as e:
        raise ChartParseError(str(chart_file), f"invalid entry: {e}") from e

    return {
        "name": _optional_str(raw.get("name")),
        "description": _optional_str(raw.get("description")),
        "version": _optional_str(raw.get("version")),
        "app_version": _optional_str(raw.get("appVersion")),
        "type": _optional_str(raw.get("type")),
        "home": _optional_str(raw.get("home")),
        "kube_version": _optional_str(raw.get("kubeVersion")),
        "deprecated": bool(raw.get("deprecated", False)),
        "sources": tuple(str(s) for s in sources),
        "maintainers": maintainers,
        "dependencies": dependencies,
    }


def parse_chart_information(
    values_file: str, yaml_docs_version: Optional[str] = None
) -> ChartDocumentationInfo:
    """Parse a values file and its chart descriptor.

    Args:
        values_file: Path to the values file.
        yaml_docs_version: Tool version to stamp in the footer.

    Returns:
        The chart's documentation record.

    Raises:
        ChartParseError: If a file is missing, unreadable or malformed.
    """
    values_path = Path(values_file)
    if not values_path.is_file():
        raise ChartParseError(values_file, "values file not found")

    try:
        source = values_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ChartParseError(values_file, str(e)) from e

    try:
        values = yaml.safe_load(source) or {}
    except yaml.YAMLError as e:
        raise ChartParseError(values_file, str(e)) from e
    if not isinstance(values, dict):
        raise ChartParseError(values_file, "values file is not a mapping")

    chart_dir = values_path.parent
    descriptor: dict[str, Any] = {}
    chart_file = chart_dir / CHART_DESCRIPTOR
    if chart_file.is_file():
        descriptor = parse_chart_descriptor(chart_file)
    else:
        logger.debug("No %s found in %s", CHART_DESCRIPTOR, chart_dir)

    if not descriptor.get("name"):
        descriptor["name"] = chart_dir.resolve().name

    rows = build_value_rows(values, parse_value_annotations(source))
    logger.info("Parsed %d values from %s", len(rows), values_file)

    return ChartDocumentationInfo(
        chart_directory=os.path.relpath(chart_dir),
        values=tuple(rows),
        yaml_docs_version=yaml_docs_version,
        **descriptor,
    )
