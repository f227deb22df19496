"""Token types shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Kinds of tokens produced by the lexer.

    DATA spans are literal text. Every other type (except EOF) is a
    directive marker whose raw text is kept in ``Token.value`` so that the
    token stream always reproduces the source exactly.
    """

    DATA = auto()
    DIRECTIVE = auto()  # @word[arg]
    END = auto()  # @end[arg]
    VARIABLE = auto()  # {{name}}
    LEGACY_VARIABLE = auto()  # @{name}
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token.

    Attributes:
        type: Token kind
        value: Raw source text of the token
        lineno: 1-based line where the token starts
        col_offset: 0-based column where the token starts
        word: Directive word for DIRECTIVE/END tokens (``include``, ``for``, ...)
        arg: Bracket argument of a directive, or the name inside ``{{ }}``
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int
    word: str = ""
    arg: str = ""

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
