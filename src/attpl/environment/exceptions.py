"""Exceptions for the attpl template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Template, base, or include source absent
├── TemplateSyntaxError       # Malformed directive nesting / unknown directive
├── IncludeLimitError         # Include count or depth ceiling exceeded
├── CyclicIncludeError        # Template includes itself (directly or not)
└── InvalidArgumentError      # Bad identifier or binding passed by the host

Load-time conditions are fatal and propagate to the host. Missing bindings
at render time are never errors: they render as empty output. The one
recoverable load-time condition (a missing include) is not an exception at
all; it is logged and recorded on ``Template.warnings``.

Example:
    ```
    A-PAR-002: Unclosed @forEach[users] (expected @end[users])
      --> page:3:0
       |
      3 | @forEach[users]
       | ^
       |
    ```

"""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for attpl errors.

    Format: A-{CATEGORY}-{NUMBER}
    Categories: PAR (parser), INC (includes), TPL (template loading),
    ARG (host arguments)
    """

    # Parser errors (A-PAR-xxx)
    UNEXPECTED_DIRECTIVE = "A-PAR-001"
    UNCLOSED_DIRECTIVE = "A-PAR-002"
    UNMATCHED_END = "A-PAR-003"
    UNKNOWN_DIRECTIVE = "A-PAR-004"
    INVALID_INHERITANCE = "A-PAR-005"

    # Include errors (A-INC-xxx)
    INCLUDE_LIMIT = "A-INC-001"
    CYCLIC_INCLUDE = "A-INC-002"

    # Template loading errors (A-TPL-xxx)
    TEMPLATE_NOT_FOUND = "A-TPL-001"
    SYNTAX_ERROR = "A-TPL-002"

    # Host argument errors (A-ARG-xxx)
    INVALID_ARGUMENT = "A-ARG-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'parser', 'include', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "INC": "include",
            "TPL": "template",
            "ARG": "argument",
        }.get(prefix, "unknown")


class TemplateError(Exception):
    """Base exception for all attpl errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a one-line-header diagnostic without traceback noise."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateNotFoundError(TemplateError):
    """Template source not found by the configured loader.

    Raised for the template passed to ``Environment.load()`` and for the base
    named by ``@extend``. Missing includes are not fatal and do not raise.
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Malformed directive structure in template source.

    When ``source`` and ``lineno`` are provided, the message includes the
    offending line with a caret under ``col_offset``.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        self.col_offset = col_offset
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _location(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"
        return location

    def _snippet(self) -> list[str]:
        if not (self.source and self.lineno):
            return []
        lines = self.source.splitlines()
        if not 0 < self.lineno <= len(lines):
            return []
        parts = ["   |", f"{self.lineno:>3} | {lines[self.lineno - 1]}"]
        if self.col_offset is not None:
            parts.append(f"   | {' ' * self.col_offset}^")
        return parts

    def _format_message(self) -> str:
        parts = [f"Syntax Error: {self.message}", f"  --> {self._location()}"]
        parts.extend(self._snippet())
        return "\n".join(parts)

    def format_compact(self) -> str:
        code_prefix = f"{self.code.value}: " if self.code else ""
        parts = [f"{code_prefix}{self.message}", f"  --> {self._location()}"]
        snippet = self._snippet()
        if snippet:
            parts.extend(snippet)
            parts.append("   |")
        return "\n".join(parts)


class IncludeLimitError(TemplateError):
    """Too many includes in one load, or includes nested too deeply.

    Attributes:
        limit: The ceiling that was exceeded
        template_name: The include that crossed it
    """

    code: ErrorCode | None = ErrorCode.INCLUDE_LIMIT

    def __init__(self, message: str, *, limit: int, template_name: str | None = None):
        self.limit = limit
        self.template_name = template_name
        super().__init__(message)


class CyclicIncludeError(TemplateError):
    """A template was included while already being expanded.

    Attributes:
        chain: Include path from the outermost template to the repeated name,
            e.g. ``("page", "a", "b", "a")``
    """

    code: ErrorCode | None = ErrorCode.CYCLIC_INCLUDE

    def __init__(self, chain: tuple[str, ...]):
        self.chain = chain
        super().__init__(f"Cyclic include detected: {' -> '.join(chain)}")


class InvalidArgumentError(TemplateError, TypeError):
    """The host passed an unusable identifier or binding.

    Examples: a non-string parameter name, a non-boolean conditional value,
    loop data that is not iterable, or a loop identifier registered twice.
    """

    code: ErrorCode | None = ErrorCode.INVALID_ARGUMENT
