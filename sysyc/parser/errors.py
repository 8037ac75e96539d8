"""
Error handling for the SysY parser.

Syntax errors are raised as ParseError from deep inside the recursive
descent and caught once per top-level item, where the parser records them
and resynchronizes.
"""

from typing import Optional, List, Union

from ..lexer.tokens import Token, TokenType, SourceLocation, OPERATOR_SYMBOLS
from ..lexer.errors import Diagnostic


# Diagnostic class of syntax errors
SYNTAX_ERROR_CLASS = "B"


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            error_class=SYNTAX_ERROR_CLASS,
            code=code,
            help_text=help_text,
            suggestions=suggestions,
            title=PARSER_ERROR_CODES.get(code),
        )
        self.token = token

    @property
    def line(self) -> int:
        return self.diagnostic.line

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """Suggestions attached to syntax errors."""

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> List[str]:
        """Suggest what token might be missing."""
        token_suggestions = {
            TokenType.SEMICOLON: ["Add a semicolon ';' to end the statement"],
            TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
            TokenType.RIGHT_BRACKET: ["Add a closing bracket ']'"],
            TokenType.RIGHT_BRACE: ["Add a closing brace '}'"],
            TokenType.LEFT_BRACE: ["Add an opening brace '{' to start a block"],
            TokenType.LEFT_PAREN: ["Add an opening parenthesis '('"],
            TokenType.IDENTIFIER: ["Add a name here"],
        }
        return list(token_suggestions.get(expected, []))


def describe_token(token: Token) -> str:
    """Human-readable form of a token for error messages."""
    if token.type == TokenType.EOF:
        return "end of input"
    return f"'{token.lexeme}'"


def describe_token_type(token_type: TokenType) -> str:
    if token_type in OPERATOR_SYMBOLS:
        return f"'{OPERATOR_SYMBOLS[token_type]}'"
    if token_type == TokenType.IDENTIFIER:
        return "identifier"
    return token_type.name.lower()


# Parser error codes
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Unexpected token at top level",
    "P003": "Missing semicolon",
    "P004": "Invalid variable declaration",
    "P005": "Invalid expression",
    "P006": "Missing constant initializer",
    "P007": "Invalid type",
}


# Helper functions for creating common parser errors

def create_unexpected_token_error(expected: Union[TokenType, str], found: Token) -> ParseError:
    """Create an error for an unexpected token."""
    if isinstance(expected, TokenType):
        expected_str = describe_token_type(expected)
        suggestions = SyntaxErrorRecovery.suggest_missing_token(expected)
    else:
        expected_str = expected
        suggestions = []

    found_str = describe_token(found)
    return ParseError(
        message=f"Expected {expected_str}, found {found_str}",
        location=found.location,
        token=found,
        code="P001",
        help_text=f"The parser expected to see {expected_str} at this position, but found {found_str} instead.",
        suggestions=suggestions or None
    )


def create_unexpected_top_level_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start a declaration or function."""
    return ParseError(
        message=f"Unexpected token {describe_token(found)} at top level",
        location=found.location,
        token=found,
        code="P002",
        help_text="Only declarations and function definitions may appear at top level.",
        suggestions=["Move statements into a function body"]
    )


def create_missing_semicolon_error(found: Token) -> ParseError:
    """Create an error for a declaration that is not terminated."""
    return ParseError(
        message="Missing semicolon at end of variable declaration",
        location=found.location,
        token=found,
        code="P003",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(TokenType.SEMICOLON)
    )


def create_invalid_declaration_error(found: Token) -> ParseError:
    """Create an error for a declaration without a variable name."""
    return ParseError(
        message="Invalid variable declaration",
        location=found.location,
        token=found,
        code="P004",
        help_text=f"Expected a variable name, found {describe_token(found)}.",
    )


def create_invalid_expression_error(reason: str, found: Token) -> ParseError:
    """Create an error for an invalid expression."""
    return ParseError(
        message=f"Invalid expression: {reason}",
        location=found.location,
        token=found,
        code="P005",
        help_text=reason,
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_missing_initializer_error(name: str, found: Token) -> ParseError:
    """Create an error for a constant declared without a value."""
    return ParseError(
        message=f"Constant '{name}' requires an initializer",
        location=found.location,
        token=found,
        code="P006",
        suggestions=[f"Write 'const ... {name} = <value>'"]
    )


def create_invalid_type_error(found: Token) -> ParseError:
    """Create an error for a missing or unknown type name."""
    return ParseError(
        message=f"Invalid type {describe_token(found)}, expected int, float or void",
        location=found.location,
        token=found,
        code="P007",
    )
