"""Template resolution and rendering for chart documentation.

Merges the built-in fragment library with user override templates into
a single named Jinja2 template set, and renders that set's root
template against a chart's documentation record.

Override files are concatenated, in the order given, into the body of
the root template. They may also contain named blocks::

    {% define "docs.valuesHeader" %}## Configuration{% enddefine %}

which replace the built-in fragment of the same name, or define the
root template explicitly. The root may only be defined once.
"""

import logging
import re
from collections.abc import Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional, TextIO

from jinja2 import DictLoader, Environment, Template, TemplateSyntaxError

from yaml_docs.chart.info import ChartDocumentationInfo
from yaml_docs.document.errors import (
    RootRedefinitionError,
    TemplateFileReadError,
    TemplateParseError,
    TemplateRenderError,
)
from yaml_docs.document.fragments import DEFAULT_DOCUMENTATION_TEMPLATE, fragment_library

logger = logging.getLogger(__name__)

BUILTIN_ORIGIN = "<builtin>"

_DEFINE_RE = re.compile(
    r"\{%(?P<open_trim>-?)\s*define\s+(?P<quote>[\"'])(?P<name>.+?)(?P=quote)\s*"
    r"(?P<body_ltrim>-?)%\}"
    r"(?P<body>.*?)"
    r"\{%(?P<body_rtrim>-?)\s*enddefine\s*-?%\}",
    re.DOTALL,
)


def _finalize(value: Any) -> Any:
    """Render missing optional fields as empty strings."""
    return "" if value is None else value


class TemplateSet:
    """A resolved, read-only set of named templates.

    Holds the mapping from template name to body together with the
    origin of each body, and a Jinja2 environment with every template
    already compiled. Safe to share between threads once built.
    """

    def __init__(
        self,
        root_name: str,
        templates: dict[str, str],
        origins: dict[str, str],
        root_segments: Optional[list[tuple[int, str]]] = None,
    ) -> None:
        """Compile every template of the set.

        Args:
            root_name: Name of the entry-point template.
            templates: Mapping of template name to Jinja2 source.
            origins: Mapping of template name to the file it came from.
            root_segments: Starting line and origin of each file that
                contributed to the root body, used to attribute syntax
                errors in the merged root.

        Raises:
            TemplateParseError: If any template has invalid syntax.
        """
        self.root_name = root_name
        self._templates = MappingProxyType(dict(templates))
        self._origins = MappingProxyType(dict(origins))
        self._root_segments = root_segments or []
        self._env = Environment(
            loader=DictLoader(dict(templates)),
            autoescape=False,
            keep_trailing_newline=True,
            finalize=_finalize,
        )

        for name in self._templates:
            try:
                self._env.get_template(name)
            except TemplateSyntaxError as e:
                origin, lineno = self._locate(e.name or name, e.lineno)
                raise TemplateParseError(
                    origin, e.name or name, e.message or str(e), lineno
                ) from e

        logger.debug(
            "Resolved template set %r with %d templates",
            root_name,
            len(self._templates),
        )

    @property
    def templates(self) -> MappingProxyType:
        """Read-only mapping of template name to source."""
        return self._templates

    def origin(self, name: str) -> str:
        """Return the file a template body was loaded from."""
        return self._origins[name]

    def list_templates(self) -> list[str]:
        """List template names in registration order."""
        return list(self._templates)

    def root_template(self) -> Template:
        """Return the compiled root template."""
        return self._env.get_template(self.root_name)

    def _locate(self, name: str, lineno: Optional[int]) -> tuple[str, Optional[int]]:
        """Map a line of a compiled template back to its source file."""
        if name != self.root_name or not self._root_segments or not lineno:
            return self._origins.get(name, BUILTIN_ORIGIN), lineno

        origin, first_line = self._root_segments[0][1], 1
        for start, segment_origin in self._root_segments:
            if start > lineno:
                break
            origin, first_line = segment_origin, start
        return origin, lineno - first_line + 1


def _read_template_file(path: Path) -> str:
    """Read one override template file.

    Raises:
        TemplateFileReadError: If the file exists but cannot be read.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateFileReadError(str(path), str(e)) from e


def extract_definitions(source: str) -> tuple[str, list[tuple[str, str]]]:
    """Split ``define`` blocks out of an override template.

    Args:
        source: Raw contents of an override template file.

    Returns:
        The remaining top-level text and the ``(name, body)`` pairs of
        every ``define`` block, in file order.
    """
    definitions: list[tuple[str, str]] = []

    def _collect(match: re.Match) -> str:
        body = match.group("body")
        if match.group("body_ltrim"):
            body = body.lstrip()
        if match.group("body_rtrim"):
            body = body.rstrip()
        definitions.append((match.group("name"), body))
        return ""

    remainder = _DEFINE_RE.sub(_collect, source)
    return remainder, definitions


def get_documentation_template(
    template_files: Sequence[str],
) -> tuple[list[tuple[str, str]], list[tuple[str, str, str]]]:
    """Read override files and assemble the root body.

    Missing files are skipped and cause the default root body to be
    appended after whatever custom content was found.

    Args:
        template_files: Candidate override template paths, in order.

    Returns:
        The ``(origin, text)`` segments that make up the root body, and
        the ``(name, body, origin)`` definitions found in the files.

    Raises:
        TemplateFileReadError: If an existing file cannot be read.
    """
    segments: list[tuple[str, str]] = []
    definitions: list[tuple[str, str, str]] = []
    template_not_found = not template_files

    for template_file in template_files:
        path = Path(template_file)
        if not path.exists():
            logger.debug(
                "Did not find template file %s, using default template", template_file
            )
            template_not_found = True
            continue

        remainder, file_definitions = extract_definitions(_read_template_file(path))
        segments.append((template_file, remainder))
        definitions.extend((name, body, template_file) for name, body in file_definitions)

    logger.debug("Using template files %s", list(template_files))

    if template_not_found:
        segments.append((BUILTIN_ORIGIN, DEFAULT_DOCUMENTATION_TEMPLATE))

    return segments, definitions


def resolve(template_files: Sequence[str], root_name: str) -> TemplateSet:
    """Build the template set used to render chart documentation.

    Registration order is fixed: built-in fragments first, then
    fragments redefined by override files, then the root template.

    Args:
        template_files: Candidate override template paths, in order.
            Missing paths fall back to the default root body.
        root_name: Name to register the root template under, usually
            the chart directory.

    Returns:
        A compiled, read-only TemplateSet.

    Raises:
        TemplateFileReadError: If an existing override cannot be read.
        TemplateParseError: If any template has invalid syntax.
        RootRedefinitionError: If the root is defined more than once.
    """
    segments, definitions = get_documentation_template(template_files)

    templates = fragment_library()
    origins = {name: BUILTIN_ORIGIN for name in templates}

    if root_name in templates:
        raise RootRedefinitionError(root_name, [BUILTIN_ORIGIN, "<root>"])

    root_origins: list[str] = []
    root_body: Optional[str] = None

    for name, body, origin in definitions:
        if name == root_name:
            root_origins.append(origin)
            root_body = body
            continue
        if name in templates:
            logger.debug("Template %r from %s replaces %s", name, origin, origins[name])
        templates[name] = body
        origins[name] = origin

    if root_body is None and not "".join(text for _, text in segments).strip():
        logger.debug("Override templates have no top-level content, using default")
        segments.append((BUILTIN_ORIGIN, DEFAULT_DOCUMENTATION_TEMPLATE))

    top_level = "".join(text for _, text in segments)
    contributors = [origin for origin, text in segments if text.strip()]
    if top_level.strip():
        # All top-level text is concatenated into a single root body.
        root_origins = [contributors[0]] + root_origins

    if len(root_origins) > 1:
        raise RootRedefinitionError(root_name, root_origins)

    root_segments: list[tuple[int, str]] = []
    if root_body is None:
        root_body = top_level
        line = 1
        for origin, text in segments:
            root_segments.append((line, origin))
            line += text.count("\n")

    templates[root_name] = root_body
    origins[root_name] = root_origins[0]

    return TemplateSet(root_name, templates, origins, root_segments)


def render(template_set: TemplateSet, info: ChartDocumentationInfo) -> str:
    """Render a chart's documentation into a string.

    Args:
        template_set: Resolved template set.
        info: Chart documentation record.

    Returns:
        The rendered Markdown.

    Raises:
        TemplateRenderError: If the template fails while rendering.
    """
    try:
        rendered = template_set.root_template().render(info.to_context())
    except Exception as e:
        raise TemplateRenderError(template_set.root_name, str(e)) from e
    logger.debug(
        "Rendered documentation for %s (%d chars)", info.chart_directory, len(rendered)
    )
    return rendered


def render_to_stream(
    template_set: TemplateSet, info: ChartDocumentationInfo, stream: TextIO
) -> None:
    """Render a chart's documentation directly into a text stream.

    Args:
        template_set: Resolved template set.
        info: Chart documentation record.
        stream: Writable text stream.

    Raises:
        TemplateRenderError: If the template fails while rendering.
    """
    try:
        template_set.root_template().stream(info.to_context()).dump(stream)
    except Exception as e:
        raise TemplateRenderError(template_set.root_name, str(e)) from e
