"""Built-in library of named documentation fragments.

Each fragment is a Jinja2 template body registered under a stable name
so that custom templates can pull it in with
``{% include "docs.valuesSection" %}``. Fragments only read the chart's
render context and never touch files or the environment.

The names returned by :func:`fragment_library` are a public contract
for user templates and must not be renamed.
"""

from typing import Callable

DEFAULT_DOCUMENTATION_TEMPLATE = """\
{% include "docs.valuesSection" %}

{% include "yaml-docs.versionFooter" %}
"""

YAML_DOCS_RELEASES_URL = "https://github.com/theEndBeta/yaml-docs/releases"


def get_header_templates() -> dict[str, str]:
    """Chart name, heading and deprecation notice."""
    return {
        "docs.name": "{{ name }}",
        "docs.header": "{% if name %}# {{ name }}{% endif %}",
        "docs.deprecationWarning": (
            "{% if deprecated %}"
            "> **:exclamation: This Helm Chart is deprecated!**"
            "{% endif %}"
        ),
        "docs.description": "{{ description }}",
        "docs.homepageLine": "{% if home %}**Homepage:** <{{ home }}>{% endif %}",
    }


def get_badge_templates() -> dict[str, str]:
    """Version, type and app version values plus shields.io badges."""
    return {
        "docs.version": "{{ version }}",
        "docs.versionBadge": (
            "{% if version %}"
            "![Version: {{ version }}]"
            '(https://img.shields.io/badge/Version-{{ version | replace("-", "--") }}'
            "-informational?style=flat-square)"
            "{% endif %}"
        ),
        "docs.type": "{{ type }}",
        "docs.typeBadge": (
            "{% if type %}"
            "![Type: {{ type }}]"
            "(https://img.shields.io/badge/Type-{{ type }}-informational?style=flat-square)"
            "{% endif %}"
        ),
        "docs.appVersion": "{{ app_version }}",
        "docs.appVersionBadge": (
            "{% if app_version %}"
            "![AppVersion: {{ app_version }}]"
            '(https://img.shields.io/badge/AppVersion-{{ app_version | replace("-", "--") }}'
            "-informational?style=flat-square)"
            "{% endif %}"
        ),
        "docs.badgesSection": (
            "{% for badge in ["
            '(version, "docs.versionBadge"), '
            '(type, "docs.typeBadge"), '
            '(app_version, "docs.appVersionBadge")'
            "] if badge[0] %}"
            "{% if not loop.first %} {% endif %}"
            "{% include badge[1] %}"
            "{% endfor %}"
        ),
    }


def get_sources_templates() -> dict[str, str]:
    """Source code links section."""
    return {
        "docs.sourcesHeader": "## Source Code",
        "docs.sourcesList": (
            "{% for source in sources %}"
            "{% if not loop.first %}\n{% endif %}"
            "* <{{ source }}>"
            "{% endfor %}"
        ),
        "docs.sourcesSection": (
            "{% if sources %}"
            '{% include "docs.sourcesHeader" %}\n\n'
            '{% include "docs.sourcesList" %}'
            "{% endif %}"
        ),
    }


def get_requirements_table_templates() -> dict[str, str]:
    """Dependencies table and Kubernetes version requirement."""
    return {
        "docs.requirementsHeader": "## Requirements",
        "docs.kubeVersionLine": (
            "{% if kube_version %}Kubernetes: `{{ kube_version }}`{% endif %}"
        ),
        "docs.requirementsTable": (
            "| Repository | Name | Version |\n"
            "|------------|------|---------|\n"
            "{%- for dependency in dependencies %}\n"
            "| {{ dependency.repository }} | "
            "{% if dependency.alias %}{{ dependency.alias }}({{ dependency.name }})"
            "{% else %}{{ dependency.name }}{% endif %} | "
            "{{ dependency.version }} |"
            "{%- endfor %}"
        ),
        "docs.requirementsSection": (
            "{% if dependencies or kube_version %}"
            '{% include "docs.requirementsHeader" %}\n\n'
            "{% if kube_version %}"
            '{% include "docs.kubeVersionLine" %}'
            "{% if dependencies %}\n\n{% endif %}"
            "{% endif %}"
            '{% if dependencies %}{% include "docs.requirementsTable" %}{% endif %}'
            "{% endif %}"
        ),
    }


def get_values_table_templates() -> dict[str, str]:
    """Values header, table and section.

    Rows prefer the explicit default and description over the ones
    inferred from the values file.
    """
    return {
        "docs.valuesHeader": "## Values",
        "docs.valuesTable": (
            "| Key | Type | Default | Description |\n"
            "|-----|------|---------|-------------|\n"
            "{%- for value in values %}\n"
            "| {{ value.key }} | {{ value.type }} | "
            "{{ value.default or value.auto_default }} | "
            "{{ value.description or value.auto_description }} |"
            "{%- endfor %}"
        ),
        "docs.valuesSection": (
            "{% if values %}"
            '{% include "docs.valuesHeader" %}\n\n'
            '{% include "docs.valuesTable" %}'
            "{% endif %}"
        ),
    }


def get_maintainers_table_templates() -> dict[str, str]:
    """Maintainers header, table and section."""
    return {
        "docs.maintainersHeader": "## Maintainers",
        "docs.maintainersTable": (
            "| Name | Email | Url |\n"
            "| ---- | ------ | --- |\n"
            "{%- for maintainer in maintainers %}\n"
            "| {{ maintainer.name }} | "
            "{% if maintainer.email %}<{{ maintainer.email }}>{% endif %} | "
            "{% if maintainer.url %}<{{ maintainer.url }}>{% endif %} |"
            "{%- endfor %}"
        ),
        "docs.maintainersSection": (
            "{% if maintainers %}"
            '{% include "docs.maintainersHeader" %}\n\n'
            '{% include "docs.maintainersTable" %}'
            "{% endif %}"
        ),
    }


def get_yaml_docs_version_templates() -> dict[str, str]:
    """Tool version and the autogenerated footer."""
    return {
        "yaml-docs.version": "{{ yaml_docs_version }}",
        "yaml-docs.versionFooter": (
            "{% if yaml_docs_version %}\n"
            "----------------------------------------------\n"
            "Autogenerated from chart metadata using "
            "[yaml-docs v{{ yaml_docs_version }}]"
            f"({YAML_DOCS_RELEASES_URL}/v{{{{ yaml_docs_version }}}})"
            "{% endif %}"
        ),
    }


# Registration order of the fragment families.
FRAGMENT_FAMILIES: tuple[Callable[[], dict[str, str]], ...] = (
    get_header_templates,
    get_badge_templates,
    get_sources_templates,
    get_requirements_table_templates,
    get_values_table_templates,
    get_maintainers_table_templates,
    get_yaml_docs_version_templates,
)


def fragment_library() -> dict[str, str]:
    """Collect every built-in fragment in registration order.

    Returns:
        Mapping of fragment name to template body.

    Raises:
        ValueError: If two families declare the same fragment name.
    """
    library: dict[str, str] = {}
    for family in FRAGMENT_FAMILIES:
        for name, body in family().items():
            if name in library:
                raise ValueError(f"Duplicate built-in fragment: {name}")
            library[name] = body
    return library
