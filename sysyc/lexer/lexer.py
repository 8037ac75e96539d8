"""
SysY Lexer - turns source text into tokens on demand

The parser pulls one token at a time with next_token() and looks ahead
with peek_token(). Malformed input never raises; it comes back as an
INVALID token whose value is the error message, and scanning always
moves past the offending character.
"""

import logging
import string
from typing import List

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, OPERATORS
from .errors import (
    LexerError, create_invalid_character_error,
    create_illegal_octal_error, create_illegal_hex_error
)

logger = logging.getLogger(__name__)

_DIGITS = set(string.digits)
_OCTAL_DIGITS = set(string.octdigits)
_HEX_DIGITS = set(string.hexdigits)
_IDENTIFIER_START = set(string.ascii_letters + "_")
_IDENTIFIER_CHARS = _IDENTIFIER_START | _DIGITS

# Characters allowed directly after a hexadecimal literal
_HEX_TERMINATORS = set("+-*/=<>!;(),[]{}")


class Lexer:
    """
    SysY lexical analyzer.

    Scans lazily: every call to next_token() skips whitespace and comments
    and produces exactly one token. Position, line and column are the only
    scan state, which is what makes peek_token() a save/replay/restore.
    """

    def __init__(self, source: str, filename: str = "<string>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.errors: List[LexerError] = []

    def next_token(self) -> Token:
        """Consume and return the next token. Returns EOF forever at end of input."""
        self._skip_whitespace_and_comments()

        start_pos = self.pos
        location = SourceLocation(self.filename, self.line, self.column, self.pos)

        if self.pos >= len(self.source):
            return Token(TokenType.EOF, "", None, location)

        current_char = self.source[self.pos]

        # Numbers
        if current_char in _DIGITS:
            return self._tokenize_number(location)

        # Identifiers and keywords
        if current_char in _IDENTIFIER_START:
            while self.pos < len(self.source) and self.source[self.pos] in _IDENTIFIER_CHARS:
                self._advance()
            text = self.source[start_pos:self.pos]
            token_type = KEYWORDS.get(text, TokenType.IDENTIFIER)
            value = text if token_type == TokenType.IDENTIFIER else None
            return Token(token_type, text, value, location)

        # Operators and delimiters (two-character forms first)
        for op_len in (2, 1):
            potential_op = self.source[self.pos:self.pos + op_len]
            if len(potential_op) == op_len and potential_op in OPERATORS:
                self._advance_by(op_len)
                return Token(OPERATORS[potential_op], potential_op, None, location)

        self._advance()
        return self._invalid_token(current_char, create_invalid_character_error(current_char, location))

    def peek_token(self, k: int = 0) -> Token:
        """
        Return the token k positions ahead without consuming input.

        k=0 is the token the next call to next_token() would return. The
        cursor is saved, next_token() replayed k+1 times, and the cursor
        restored, so the cost is O(k).
        """
        saved = (self.pos, self.line, self.column, len(self.errors))
        try:
            token = self.next_token()
            for _ in range(k):
                token = self.next_token()
        finally:
            self.pos, self.line, self.column, error_count = saved
            del self.errors[error_count:]
        return token

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code from the beginning.

        Returns:
            List of tokens including the EOF token
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.errors.clear()

        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        return tokens

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """Tokenize decimal, octal, hexadecimal and float literals."""
        start_pos = self.pos

        if self.source[self.pos] == '0' and self._peek() in ('x', 'X'):
            return self._tokenize_hex(location)

        while self.pos < len(self.source) and self.source[self.pos] in _DIGITS:
            self._advance()

        # A '.' after the digit run makes it a float; fraction digits are optional
        if self._current() == '.':
            self._advance()
            while self.pos < len(self.source) and self.source[self.pos] in _DIGITS:
                self._advance()
            text = self.source[start_pos:self.pos]
            return Token(TokenType.FLOAT_LITERAL, text, float(text), location)

        text = self.source[start_pos:self.pos]
        if len(text) > 1 and text[0] == '0':
            if text[1] == '0' or not set(text) <= _OCTAL_DIGITS:
                return self._invalid_token(text, create_illegal_octal_error(text, location))
            return Token(TokenType.INTEGER_LITERAL, text, int(text, 8), location)

        return Token(TokenType.INTEGER_LITERAL, text, int(text), location)

    def _tokenize_hex(self, location: SourceLocation) -> Token:
        start_pos = self.pos
        self._advance_by(2)  # 0x

        digits_start = self.pos
        while self.pos < len(self.source) and self.source[self.pos] in _HEX_DIGITS:
            self._advance()
        has_digits = self.pos > digits_start

        follower = self._current()
        bad_follower = (
            follower != '\0'
            and not follower.isspace()
            and follower not in _HEX_TERMINATORS
        )
        if bad_follower:
            self._advance()

        text = self.source[start_pos:self.pos]
        if bad_follower or not has_digits:
            return self._invalid_token(text, create_illegal_hex_error(text, location))

        return Token(TokenType.INTEGER_LITERAL, text, int(text[2:], 16), location)

    def _invalid_token(self, text: str, error: LexerError) -> Token:
        self.errors.append(error)
        diagnostic = error.diagnostic
        logger.debug("malformed token %r at %s: %s", text, diagnostic.location, diagnostic.message)
        return Token(TokenType.INVALID, text, diagnostic.message, diagnostic.location)

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and comments."""
        while self.pos < len(self.source):
            # Skip whitespace
            if self.source[self.pos].isspace():
                self._advance()
                continue

            # Skip line comments //
            if self.source[self.pos:self.pos + 2] == '//':
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
                continue

            # Skip block comments /* */, an unterminated one runs to end of input
            if self.source[self.pos:self.pos + 2] == '/*':
                self._advance_by(2)
                while (self.pos < len(self.source) and
                       self.source[self.pos:self.pos + 2] != '*/'):
                    self._advance()
                self._advance_by(2)
                continue

            break

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def _current(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return '\0'

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return '\0'

    def has_errors(self) -> bool:
        """Check if lexer produced any malformed tokens."""
        return len(self.errors) > 0


def tokenize(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Malformed input shows up as INVALID tokens in the result rather than
    as an exception.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens ending with EOF
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize(source, filepath)
