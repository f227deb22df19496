"""Directive parsing mixins composed by ``attpl.parser.core.Parser``."""

from attpl.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from attpl.parser.blocks.core import BlockStackMixin, OpenDirective, TokenNavigationMixin
from attpl.parser.blocks.template_structure import TemplateStructureBlockParsingMixin

__all__ = [
    "BlockStackMixin",
    "ControlFlowBlockParsingMixin",
    "OpenDirective",
    "TemplateStructureBlockParsingMixin",
    "TokenNavigationMixin",
]
