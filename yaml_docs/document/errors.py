"""Exceptions raised while parsing charts and building documentation.

Every error here is fatal for the chart being processed only; the
dispatcher catches them per chart so sibling charts still render.
"""

from typing import Optional


class YamlDocsError(Exception):
    """Base class for all yaml-docs errors."""


class ChartParseError(YamlDocsError):
    """A values file or chart descriptor could not be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse {path}: {reason}")


class TemplateFileReadError(YamlDocsError):
    """An override template exists but could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read template file {path}: {reason}")


class TemplateParseError(YamlDocsError):
    """A fragment, a user definition, or the merged root is malformed.

    Attributes:
        origin: File path the offending body came from, or
            ``<builtin>`` for library fragments.
        template_name: Name the body was registered under.
        lineno: Line number reported by Jinja2, if any.
    """

    def __init__(
        self,
        origin: str,
        template_name: str,
        message: str,
        lineno: Optional[int] = None,
    ) -> None:
        self.origin = origin
        self.template_name = template_name
        self.lineno = lineno
        location = f"{origin}:{lineno}" if lineno else origin
        super().__init__(
            f"Invalid template {template_name!r} ({location}): {message}"
        )


class RootRedefinitionError(YamlDocsError):
    """The root template was defined more than once."""

    def __init__(self, root_name: str, origins: list[str]) -> None:
        self.root_name = root_name
        self.origins = origins
        super().__init__(
            f"Root template {root_name!r} is defined more than once "
            f"(in {', '.join(origins)})"
        )


class TemplateRenderError(YamlDocsError):
    """Rendering the root template failed at runtime."""

    def __init__(self, root_name: str, reason: str) -> None:
        self.root_name = root_name
        self.reason = reason
        super().__init__(f"Failed to render {root_name!r}: {reason}")
