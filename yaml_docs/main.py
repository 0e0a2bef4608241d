"""Entry point for yaml-docs.

Delegates to the Click command, which initializes configuration and
logging before documenting charts.
"""

from yaml_docs.cli.commands import yaml_docs


def main() -> None:
    """Launch the CLI."""
    yaml_docs(prog_name="yaml-docs")


if __name__ == "__main__":
    main()
