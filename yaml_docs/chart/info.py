"""Data models for chart documentation.

Defines immutable dataclasses for maintainers, dependencies, value
rows, and the per-chart documentation record that templates are
rendered against.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Maintainer:
    """A chart maintainer as listed in Chart.yaml.

    Attributes:
        name: Maintainer name.
        email: Contact email address.
        url: Personal or organisation URL.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary.

        Returns:
            Dictionary representation of this maintainer.
        """
        return {"name": self.name, "email": self.email, "url": self.url}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Maintainer:
        """Deserialize from a dictionary.

        Args:
            data: Dictionary with maintainer fields.

        Returns:
            A new Maintainer instance.
        """
        return cls(
            name=data.get("name"),
            email=data.get("email"),
            url=data.get("url"),
        )


@dataclass(frozen=True)
class ChartDependency:
    """A dependency declared by the chart.

    Attributes:
        name: Name of the dependent chart.
        repository: Repository the dependency is pulled from.
        version: Version constraint.
        alias: Optional alias the dependency is installed under.
    """

    name: str
    repository: Optional[str] = None
    version: Optional[str] = None
    alias: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary.

        Returns:
            Dictionary representation of this dependency.
        """
        return {
            "name": self.name,
            "repository": self.repository,
            "version": self.version,
            "alias": self.alias,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChartDependency:
        """Deserialize from a dictionary.

        Args:
            data: Dictionary with dependency fields.

        Returns:
            A new ChartDependency instance.
        """
        return cls(
            name=data["name"],
            repository=data.get("repository"),
            version=data.get("version"),
            alias=data.get("alias"),
        )


@dataclass(frozen=True)
class ValueRow:
    """One documented key of a values file.

    Explicit ``default`` and ``description`` come from comment
    annotations; ``auto_default`` and ``auto_description`` are inferred
    from the value itself and from plain comments. Templates prefer the
    explicit field when both are present.

    Attributes:
        key: Dotted path of the key, e.g. ``image.repository``.
        type: Inferred value type (string, int, float, bool, list, object).
        default: Explicit default from a ``@default`` annotation.
        auto_default: Default inferred from the value.
        description: Explicit description from a ``--`` annotation.
        auto_description: Description inferred from a plain comment.
    """

    key: str
    type: str = "string"
    default: Optional[str] = None
    auto_default: Optional[str] = None
    description: Optional[str] = None
    auto_description: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary.

        Returns:
            Dictionary representation of this value row.
        """
        return {
            "key": self.key,
            "type": self.type,
            "default": self.default,
            "auto_default": self.auto_default,
            "description": self.description,
            "auto_description": self.auto_description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValueRow:
        """Deserialize from a dictionary.

        Args:
            data: Dictionary with value row fields.

        Returns:
            A new ValueRow instance.
        """
        return cls(
            key=data["key"],
            type=data.get("type", "string"),
            default=data.get("default"),
            auto_default=data.get("auto_default"),
            description=data.get("description"),
            auto_description=data.get("auto_description"),
        )


@dataclass(frozen=True)
class ChartDocumentationInfo:
    """Everything a documentation template can see about one chart.

    Instances are created once per chart by the metadata parser and are
    never mutated; each render is a pure function of the template set
    and this record. Sequences keep the order of the source files.

    Attributes:
        chart_directory: Path of the chart directory, used as the root
            template name.
        name: Chart name.
        description: One-line chart description.
        version: Chart version.
        app_version: Version of the packaged application.
        type: Chart type (application or library).
        home: Project homepage URL.
        kube_version: Supported Kubernetes version constraint.
        deprecated: Whether the chart is deprecated.
        sources: Source code URLs.
        maintainers: Chart maintainers.
        dependencies: Chart dependencies.
        values: Documented keys of the values file.
        yaml_docs_version: Version of this tool, stamped in the footer.
    """

    chart_directory: str
    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    app_version: Optional[str] = None
    type: Optional[str] = None
    home: Optional[str] = None
    kube_version: Optional[str] = None
    deprecated: bool = False
    sources: tuple[str, ...] = ()
    maintainers: tuple[Maintainer, ...] = ()
    dependencies: tuple[ChartDependency, ...] = ()
    values: tuple[ValueRow, ...] = ()
    yaml_docs_version: Optional[str] = None

    def to_context(self) -> dict[str, Any]:
        """Build the variables visible to templates.

        Returns:
            Mapping of template variable names to field values.
        """
        return {
            "chart_directory": self.chart_directory,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "app_version": self.app_version,
            "type": self.type,
            "home": self.home,
            "kube_version": self.kube_version,
            "deprecated": self.deprecated,
            "sources": self.sources,
            "maintainers": self.maintainers,
            "dependencies": self.dependencies,
            "values": self.values,
            "yaml_docs_version": self.yaml_docs_version,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary.

        Returns:
            Dictionary representation of this chart record.
        """
        data = self.to_context()
        data["sources"] = list(self.sources)
        data["maintainers"] = [m.to_dict() for m in self.maintainers]
        data["dependencies"] = [d.to_dict() for d in self.dependencies]
        data["values"] = [v.to_dict() for v in self.values]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChartDocumentationInfo:
        """Deserialize from a dictionary.

        Args:
            data: Dictionary with chart documentation fields.

        Returns:
            A new ChartDocumentationInfo instance.
        """
        return cls(
            chart_directory=data["chart_directory"],
            name=data.get("name"),
            description=data.get("description"),
            version=data.get("version"),
            app_version=data.get("app_version"),
            type=data.get("type"),
            home=data.get("home"),
            kube_version=data.get("kube_version"),
            deprecated=data.get("deprecated", False),
            sources=tuple(data.get("sources", [])),
            maintainers=tuple(
                Maintainer.from_dict(m) for m in data.get("maintainers", [])
            ),
            dependencies=tuple(
                ChartDependency.from_dict(d) for d in data.get("dependencies", [])
            ),
            values=tuple(ValueRow.from_dict(v) for v in data.get("values", [])),
            yaml_docs_version=data.get("yaml_docs_version"),
        )
