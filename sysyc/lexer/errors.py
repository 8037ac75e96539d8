"""
Error handling for the SysY lexer.

Also home of the Diagnostic record shared by every stage: each stage
reports a (class, line, message) triple plus a severity.
"""

from typing import Optional, List, Union
from dataclasses import dataclass

from .tokens import SourceLocation


# Diagnostic class of lexical errors
LEXICAL_ERROR_CLASS = "A"


@dataclass
class Diagnostic:
    """Base class for diagnostics (errors and warnings) of every stage."""
    message: str
    location: SourceLocation
    severity: str  # "error" or "warning"
    error_class: Union[str, int]  # "A" lexical, "B" syntax, 1-15 semantic
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None
    title: Optional[str] = None  # Short name of the code, from the stage's code table

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def render(self) -> str:
        """Render as ``Error type <class> at line <n> : <message>``."""
        prefix = "Error" if self.is_error else "Warning"
        return f"{prefix} type {self.error_class} at line {self.line} : {self.message}"

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        header = f"{severity_prefix}[{self.error_class}]"
        if self.code:
            header += f" {self.code}"
            if self.title:
                header += f" {self.title}"
        result = f"{header}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Error recorded for a malformed token.

    The lexer never raises it; malformed input becomes an INVALID token and
    one of these is appended to ``Lexer.errors``.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            error_class=LEXICAL_ERROR_CLASS,
            code=code,
            help_text=help_text,
            suggestions=suggestions,
            title=ERROR_CODES.get(code),
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


# Lexer error codes
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Illegal octal number",
    "L003": "Illegal hexadecimal number",
}


def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character that starts no token."""
    suggestions = []
    if char == "!":
        suggestions.append("Use '!=' for not equal")

    return LexerError(
        message=f"Invalid character '{char}'",
        location=location,
        code="L001",
        help_text=f"The character '{char}' is not valid here.",
        suggestions=suggestions or None
    )


def create_illegal_octal_error(text: str, location: SourceLocation) -> LexerError:
    """Create an error for an octal literal with bad digits or extra leading zeros."""
    return LexerError(
        message=f"illegal octal number '{text}'",
        location=location,
        code="L002",
        help_text="Octal literals start with a single '0' followed by digits 0-7.",
        suggestions=[f"Remove the leading zeros from '{text}'"] if text.startswith("00") else None
    )


def create_illegal_hex_error(text: str, location: SourceLocation) -> LexerError:
    """Create an error for a hexadecimal literal with missing or bad digits."""
    return LexerError(
        message=f"illegal hexadecimal number '{text}'",
        location=location,
        code="L003",
        help_text="Hexadecimal literals are '0x' followed by digits 0-9 and a-f.",
    )
