"""attpl environment: configuration, loaders, source caching and errors.

Public API:
    Environment: Configuration and template loading
    FileSystemLoader, DictLoader, ChoiceLoader, FunctionLoader: Template sources
    FileSourceCache, MemorySourceCache: Source caches with age-based expiry
    TemplateError and subclasses: Error channel

"""

from attpl.environment.exceptions import (
    CyclicIncludeError,
    ErrorCode,
    IncludeLimitError,
    InvalidArgumentError,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from attpl.environment.cache import CacheEntry, FileSourceCache, MemorySourceCache, SourceCache
from attpl.environment.loaders import ChoiceLoader, DictLoader, FileSystemLoader, FunctionLoader
from attpl.environment.core import Environment

__all__ = [
    "CacheEntry",
    "ChoiceLoader",
    "CyclicIncludeError",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSourceCache",
    "FileSystemLoader",
    "FunctionLoader",
    "IncludeLimitError",
    "InvalidArgumentError",
    "MemorySourceCache",
    "SourceCache",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
]
