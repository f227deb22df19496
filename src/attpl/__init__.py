"""attpl: compile and render ``@directive`` templates.

Templates mix literal text with a small directive language:

    {{name}}                              interpolation (HTML-escaped)
    @include[header]                      inline another template
    @forEach[users]{{name}}@end[users]    loop over records
    @for[tags]{{value}}@end[tags]         loop over scalars
    @if[admin](expr)...@else[admin]...@end[admin]
    @extend[layout] + @block[x]...@end[x] single-level layout inheritance

Quickstart:
    >>> from attpl import Context, DictLoader, Environment
    >>> env = Environment(loader=DictLoader({"hi": "Hello, {{name}}!"}))
    >>> env.load("hi").render(Context().set_param("name", "World"))
    'Hello, World!'

File-based templates (``tmpl/<name>.tpl`` by default):
    >>> env = Environment(folder="templates/")
    >>> env.load("index").render(ctx)

Architecture:
Template Source → Lexer → Parser → immutable tree → Renderer(Context) → str

Pipeline stages:
1. **Lexer**: Splits source into literal text and directive tokens
2. **Parser**: Builds the tree; resolves @extend/@block and expands
   @include at parse time, bounded by include count and depth
3. **Renderer**: Walks the tree against a Context, escaping every value
4. **Comment stripping** (optional): removes ``<!-- ... -->`` regions

Load-time strict, render-time lenient:
Malformed directives, missing templates/bases, include limits and cycles
raise. Missing params, loops and conditionals render as nothing.

Thread-Safety:
Compiled templates are immutable trees of frozen dataclasses. Each render
uses local state only, so one Template can serve concurrent renders, each
with its own Context.

"""

from attpl._types import Token, TokenType
from attpl.environment import (
    CacheEntry,
    ChoiceLoader,
    CyclicIncludeError,
    DictLoader,
    Environment,
    ErrorCode,
    FileSourceCache,
    FileSystemLoader,
    FunctionLoader,
    IncludeLimitError,
    InvalidArgumentError,
    MemorySourceCache,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from attpl.context import Context, RecordDataset, ScalarDataset
from attpl.lexer import tokenize
from attpl.parser import MISSING_INCLUDE_PLACEHOLDER
from attpl.template import Template
from attpl.utils.html import html_escape, strip_comments
from attpl.view import View

__version__ = "0.1.0"

__all__ = [
    "MISSING_INCLUDE_PLACEHOLDER",
    "CacheEntry",
    "ChoiceLoader",
    "Context",
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
    "RecordDataset",
    "ScalarDataset",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "View",
    "__version__",
    "html_escape",
    "strip_comments",
    "tokenize",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # Signal: this module is safe for free-threading
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'attpl' has no attribute {name!r}")
