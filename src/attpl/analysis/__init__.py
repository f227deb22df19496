"""Static analysis of compiled attpl templates."""

from attpl.analysis.analyzer import BindingCollector
from attpl.analysis.metadata import TemplateMetadata
from attpl.analysis.visitor import visit_children

__all__ = ["BindingCollector", "TemplateMetadata", "visit_children"]
