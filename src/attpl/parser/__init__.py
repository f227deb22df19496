"""attpl parser: tokens → immutable node tree with inheritance and includes resolved."""

from attpl.parser.blocks.template_structure import MISSING_INCLUDE_PLACEHOLDER
from attpl.parser.core import Parser

__all__ = ["MISSING_INCLUDE_PLACEHOLDER", "Parser"]
