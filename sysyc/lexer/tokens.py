"""
Token definitions for the SysY lexer.

This module defines all token types produced by the lexer:
- Type names and keywords
- Identifiers and numeric literals
- Operators and delimiters
- End of input and malformed input
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Dict


class TokenType(Enum):
    """
    Enumeration of all token types in SysY.

    Organized by category for clarity.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input
    INVALID = auto()                # Malformed input, value holds the message

    # ========================================================================
    # Literals
    # ========================================================================
    INTEGER_LITERAL = auto()        # 42, 052, 0x2A
    FLOAT_LITERAL = auto()          # 3.14, 2.

    # ========================================================================
    # Identifiers
    # ========================================================================
    IDENTIFIER = auto()             # main, x_1

    # ========================================================================
    # Type names
    # ========================================================================
    INT = auto()                    # int
    FLOAT = auto()                  # float
    VOID = auto()                   # void

    # ========================================================================
    # Keywords
    # ========================================================================
    CONST = auto()                  # const
    IF = auto()                     # if
    ELSE = auto()                   # else
    WHILE = auto()                  # while
    RETURN = auto()                 # return

    # ========================================================================
    # Operators
    # ========================================================================

    # Arithmetic
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /

    # Assignment
    ASSIGN = auto()                 # =

    # Comparison
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    # Logical (no source spelling, a lone '!' is malformed)
    LOGICAL_NOT = auto()            # !

    # ========================================================================
    # Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    SEMICOLON = auto()              # ;
    COMMA = auto()                  # ,


class TokenCategory(Enum):
    """Coarse classification of a token, used by the parser and reports."""
    KEYWORD = auto()
    TYPE_NAME = auto()
    IDENTIFIER = auto()
    INTEGER_LITERAL = auto()
    FLOAT_LITERAL = auto()
    OPERATOR = auto()
    DELIMITER = auto()
    END_OF_FILE = auto()
    MALFORMED = auto()


@dataclass(frozen=True)
class SourceLocation:
    """Represents a location in source code."""
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a single token in the source code.

    The value payload depends on the category: the name for identifiers,
    the numeric value for literals and the error message for malformed
    tokens.
    """
    type: TokenType
    lexeme: str  # The actual text from source
    value: Any   # Parsed value
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r}, {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.lexeme!r}, {self.value!r}, {self.location!r})"

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    @property
    def category(self) -> TokenCategory:
        return TOKEN_CATEGORIES[self.type]

    @property
    def is_type_name(self) -> bool:
        return self.type in TYPE_NAMES

    @property
    def is_literal(self) -> bool:
        return self.type in {TokenType.INTEGER_LITERAL, TokenType.FLOAT_LITERAL}

    @property
    def is_invalid(self) -> bool:
        return self.type == TokenType.INVALID

    def describe(self) -> str:
        """One-line listing form, e.g. ``IDENTIFIER main``."""
        if self.type == TokenType.EOF:
            return "EOF"
        if self.type == TokenType.INVALID:
            return f"INVALID {self.lexeme} ({self.value})"
        return f"{self.type.name} {self.lexeme}"


# Type names reclassified from identifiers
TYPE_NAMES = {
    TokenType.INT,
    TokenType.FLOAT,
    TokenType.VOID,
}

# Reserved words
KEYWORDS: Dict[str, TokenType] = {
    "int": TokenType.INT,
    "float": TokenType.FLOAT,
    "void": TokenType.VOID,
    "const": TokenType.CONST,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "return": TokenType.RETURN,
}

# Operator and delimiter spellings, longest match wins
OPERATORS: Dict[str, TokenType] = {
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "=": TokenType.ASSIGN,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}

# Binary operators, all on one precedence tier
BINARY_OPERATORS = {
    TokenType.PLUS,
    TokenType.MINUS,
    TokenType.MULTIPLY,
    TokenType.DIVIDE,
    TokenType.LESS_THAN,
    TokenType.GREATER_THAN,
    TokenType.LESS_EQUAL,
    TokenType.GREATER_EQUAL,
    TokenType.EQUAL,
    TokenType.NOT_EQUAL,
}

# Printable spelling of every operator token
OPERATOR_SYMBOLS: Dict[TokenType, str] = {
    token_type: text for text, token_type in OPERATORS.items()
}
OPERATOR_SYMBOLS[TokenType.LOGICAL_NOT] = "!"

_DELIMITERS = {
    TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN,
    TokenType.LEFT_BRACKET, TokenType.RIGHT_BRACKET,
    TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
    TokenType.SEMICOLON, TokenType.COMMA,
}


def _categorize(token_type: TokenType) -> TokenCategory:
    if token_type == TokenType.EOF:
        return TokenCategory.END_OF_FILE
    if token_type == TokenType.INVALID:
        return TokenCategory.MALFORMED
    if token_type == TokenType.IDENTIFIER:
        return TokenCategory.IDENTIFIER
    if token_type == TokenType.INTEGER_LITERAL:
        return TokenCategory.INTEGER_LITERAL
    if token_type == TokenType.FLOAT_LITERAL:
        return TokenCategory.FLOAT_LITERAL
    if token_type in TYPE_NAMES:
        return TokenCategory.TYPE_NAME
    if token_type in KEYWORDS.values():
        return TokenCategory.KEYWORD
    if token_type in _DELIMITERS:
        return TokenCategory.DELIMITER
    return TokenCategory.OPERATOR


TOKEN_CATEGORIES: Dict[TokenType, TokenCategory] = {
    token_type: _categorize(token_type) for token_type in TokenType
}
