"""attpl Template package: compiled templates ready for rendering."""

from attpl.template.core import Template

__all__ = ["Template"]
