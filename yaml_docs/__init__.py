"""yaml-docs.

Generates Markdown documentation for charts by rendering composable
Jinja2 templates against metadata parsed from values files and
chart descriptors.
"""

__version__ = "0.1.0"
