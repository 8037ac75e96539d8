"""
SysY Lexer Package

Pull-based lexical analyzer for SysY with bounded lookahead.

Key Features:
- Decimal, octal, hexadecimal and float literals
- Line and block comments skipped transparently
- Malformed input reported as INVALID tokens, never as exceptions
- Source location tracking for diagnostics
"""

from .tokens import Token, TokenType, TokenCategory, SourceLocation
from .lexer import Lexer, tokenize, tokenize_file
from .errors import Diagnostic, LexerError

__all__ = [
    "Lexer",
    "tokenize",
    "tokenize_file",
    "Token",
    "TokenType",
    "TokenCategory",
    "SourceLocation",
    "Diagnostic",
    "LexerError",
]
