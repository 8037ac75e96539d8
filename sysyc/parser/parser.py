"""
SysY Recursive Descent Parser

Pulls tokens from the lexer one at a time and builds the AST. The only
lookahead past the current token is the two-token peek used at top level
to tell a function definition from a variable declaration.

Syntax errors raise ParseError. Each top-level item is parsed into an
ItemOutcome; a failed item is recorded and the parser skips exactly one
token before trying again.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..lexer.lexer import Lexer
from ..lexer.errors import LexerError
from ..lexer.tokens import Token, TokenType, TYPE_NAMES, BINARY_OPERATORS
from .ast_nodes import (
    DataType, Program, FunctionDef, Parameter, Declaration, VariableDef,
    Statement, Block, IfStatement, WhileStatement, ReturnStatement,
    ExpressionStatement, DeclarationStatement, Expression, BinaryOp, UnaryOp,
    FunctionCall, IndexAccess, NumberLiteral, VariableRef
)
from .errors import (
    ParseError, create_unexpected_token_error, create_unexpected_top_level_error,
    create_missing_semicolon_error, create_invalid_declaration_error,
    create_invalid_expression_error, create_missing_initializer_error,
    create_invalid_type_error
)

logger = logging.getLogger(__name__)

# Tokens that end a declaration without belonging to it
_DECLARATION_FOLLOWERS = {
    TokenType.RIGHT_BRACE,
    TokenType.RIGHT_PAREN,
    TokenType.COMMA,
}

TopLevelItem = Union[Declaration, FunctionDef]


@dataclass
class ItemOutcome:
    """Result of parsing one top-level item: the node or the error."""
    node: Optional[TopLevelItem] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ParseResult:
    """A parsed program together with everything reported on the way."""
    program: Program
    lexer_errors: List[LexerError] = field(default_factory=list)
    parse_errors: List[ParseError] = field(default_factory=list)

    def has_errors(self) -> bool:
        return bool(self.lexer_errors or self.parse_errors)


class Parser:
    """
    SysY recursive descent parser.

    parse() always returns a Program; syntax errors are collected in
    ``errors`` instead of aborting the run.
    """

    def __init__(self, lexer: Lexer):
        """
        Initialize parser over a lexer.

        Args:
            lexer: Lexer positioned at the start of the source
        """
        self.lexer = lexer
        self.current_token = lexer.next_token()
        self.errors: List[ParseError] = []
        # Set after a failed item until the next item start is reached
        self._recovering = False

    def parse(self) -> Program:
        """
        Parse the whole token stream into a Program.

        Returns:
            Program node holding every declaration and function that parsed
        """
        location = self.current_token.location
        declarations: List[Declaration] = []
        functions: List[FunctionDef] = []

        while not self._check(TokenType.EOF):
            # A type name or 'const' starts a fresh item, so its errors are reported
            if self._check_type_name() or self._check(TokenType.CONST):
                self._recovering = False

            outcome = self._parse_item()

            if outcome.ok:
                self._recovering = False
                if isinstance(outcome.node, FunctionDef):
                    functions.append(outcome.node)
                else:
                    declarations.append(outcome.node)
                continue

            if self._recovering:
                logger.debug("suppressed follow-on syntax error at line %d: %s",
                             outcome.error.line, outcome.error.message)
            else:
                self.errors.append(outcome.error)
                logger.debug("syntax error at line %d: %s", outcome.error.line, outcome.error.message)
            self._recovering = True

            # Resynchronize by discarding exactly one token
            if not self._check(TokenType.EOF):
                skipped = self._advance()
                logger.debug("skipping %s at line %d", skipped.type.name, skipped.line)

        return Program(declarations, functions, location)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    # ========================================================================
    # Top-level items
    # ========================================================================

    def _parse_item(self) -> ItemOutcome:
        """Parse a top-level item (function definition or declaration)."""
        try:
            if self._check_type_name():
                # Both forms start with `type IDENT`; a following '(' means function
                if (self.lexer.peek_token(0).type == TokenType.IDENTIFIER and
                        self.lexer.peek_token(1).type == TokenType.LEFT_PAREN):
                    return ItemOutcome(node=self._parse_function_def())
                return ItemOutcome(node=self._parse_declaration())

            if self._check(TokenType.CONST):
                return ItemOutcome(node=self._parse_declaration())

            raise create_unexpected_top_level_error(self.current_token)
        except ParseError as e:
            return ItemOutcome(error=e)

    def _parse_function_def(self) -> FunctionDef:
        """Parse ``type name ( params ) block``."""
        type_token = self._advance()
        return_type = DataType.from_token_type(type_token.type)
        name = self._consume(TokenType.IDENTIFIER)

        self._consume(TokenType.LEFT_PAREN)
        params = []
        if not self._check(TokenType.RIGHT_PAREN):
            params.append(self._parse_parameter())
            while self._match(TokenType.COMMA):
                params.append(self._parse_parameter())
        self._consume(TokenType.RIGHT_PAREN)

        body = self._parse_block()
        return FunctionDef(return_type, name.value, params, body, type_token.location)

    def _parse_parameter(self) -> Parameter:
        """Parse ``type name [ '[' INT? ']' ]``."""
        if not self._check_type_name():
            raise create_invalid_type_error(self.current_token)
        type_token = self._advance()
        name = self._consume(TokenType.IDENTIFIER)

        is_array = False
        array_size = 0
        if self._match(TokenType.LEFT_BRACKET):
            is_array = True
            if self._check(TokenType.INTEGER_LITERAL):
                array_size = self._advance().value
            self._consume(TokenType.RIGHT_BRACKET)

        return Parameter(
            DataType.from_token_type(type_token.type), name.value, type_token.location,
            is_array=is_array, array_size=array_size
        )

    def _parse_declaration(self) -> Declaration:
        """
        Parse ``[const] type def (, def)*`` and its terminator.

        The terminator is ';'. A closing brace, closing paren or comma
        ends the declaration without being consumed; end of input also
        ends it.
        """
        start_token = self.current_token
        is_const = self._match(TokenType.CONST)

        if not self._check_type_name():
            raise create_invalid_type_error(self.current_token)
        var_type = DataType.from_token_type(self._advance().type)

        definitions: List[VariableDef] = []
        while True:
            if not self._check(TokenType.IDENTIFIER):
                if definitions:
                    break
                raise create_invalid_declaration_error(self.current_token)
            definitions.append(self._parse_variable_def(is_const))

            if not self._match(TokenType.COMMA):
                break

        if not self._match(TokenType.SEMICOLON):
            if (self.current_token.type not in _DECLARATION_FOLLOWERS and
                    not self._check(TokenType.EOF)):
                raise create_missing_semicolon_error(self.current_token)

        return Declaration(var_type, definitions, start_token.location, is_const=is_const)

    def _parse_variable_def(self, is_const: bool) -> VariableDef:
        name = self._advance()

        dimensions = []
        while self._match(TokenType.LEFT_BRACKET):
            size = 0
            if self._check(TokenType.INTEGER_LITERAL):
                size = self._advance().value
            dimensions.append(size)
            self._consume(TokenType.RIGHT_BRACKET)

        initializer = None
        if self._match(TokenType.ASSIGN):
            initializer = self._parse_expression()
        elif is_const:
            raise create_missing_initializer_error(name.value, self.current_token)

        return VariableDef(
            name.value, name.location, initializer=initializer,
            is_array=bool(dimensions), dimensions=dimensions
        )

    # ========================================================================
    # Statements
    # ========================================================================

    def _parse_block(self) -> Block:
        """Parse ``{ statement* }``."""
        brace = self._consume(TokenType.LEFT_BRACE)
        statements = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
            statements.append(self._parse_statement())
        self._consume(TokenType.RIGHT_BRACE)
        return Block(statements, brace.location)

    def _parse_statement(self) -> Statement:
        """Parse a statement, dispatching on the leading token."""
        token = self.current_token

        if self._check_type_name() or self._check(TokenType.CONST):
            declaration = self._parse_declaration()
            return DeclarationStatement(declaration, token.location)

        if self._match(TokenType.RETURN):
            value = None
            if not self._check(TokenType.SEMICOLON):
                value = self._parse_expression()
            self._consume(TokenType.SEMICOLON)
            return ReturnStatement(token.location, value=value)

        if self._match(TokenType.IF):
            self._consume(TokenType.LEFT_PAREN)
            condition = self._parse_expression()
            self._consume(TokenType.RIGHT_PAREN)
            then_branch = self._parse_statement()
            # Dangling else binds to the nearest if
            else_branch = None
            if self._match(TokenType.ELSE):
                else_branch = self._parse_statement()
            return IfStatement(condition, then_branch, token.location, else_branch=else_branch)

        if self._match(TokenType.WHILE):
            self._consume(TokenType.LEFT_PAREN)
            condition = self._parse_expression()
            self._consume(TokenType.RIGHT_PAREN)
            body = self._parse_statement()
            return WhileStatement(condition, body, token.location)

        if self._check(TokenType.LEFT_BRACE):
            return self._parse_block()

        expression = self._parse_expression()
        self._consume(TokenType.SEMICOLON)
        return ExpressionStatement(expression, token.location)

    # ========================================================================
    # Expressions
    # ========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_binary()

    def _parse_binary(self) -> Expression:
        """
        Fold binary operators left to right on a single precedence tier.

        '=' takes the whole remaining expression as its right side, which
        makes assignment right-associative and lowest precedence.
        """
        left = self._parse_unary()

        while True:
            if self._match(TokenType.ASSIGN):
                right = self._parse_binary()
                return BinaryOp(left, TokenType.ASSIGN, right, left.location)

            if self.current_token.type in BINARY_OPERATORS:
                operator = self._advance()
                right = self._parse_unary()
                left = BinaryOp(left, operator.type, right, left.location)
                continue

            return left

    def _parse_unary(self) -> Expression:
        if self._check(TokenType.MINUS) or self._check(TokenType.LOGICAL_NOT):
            operator = self._advance()
            operand = self._parse_unary()
            return UnaryOp(operator.type, operand, operator.location)
        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        token = self.current_token

        if self._match(TokenType.INTEGER_LITERAL):
            return NumberLiteral(token.value, DataType.INT, token.location)

        if self._match(TokenType.FLOAT_LITERAL):
            return NumberLiteral(token.value, DataType.FLOAT, token.location)

        if self._match(TokenType.LEFT_PAREN):
            expression = self._parse_expression()
            self._consume(TokenType.RIGHT_PAREN)
            return expression

        if self._match(TokenType.IDENTIFIER):
            expression: Expression = VariableRef(token.value, token.location)

            indexed = False
            while self._match(TokenType.LEFT_BRACKET):
                index = self._parse_expression()
                self._consume(TokenType.RIGHT_BRACKET)
                expression = IndexAccess(expression, index, token.location)
                indexed = True

            # A call suffix is only tried when no index suffix was seen
            if not indexed and self._match(TokenType.LEFT_PAREN):
                args = []
                if not self._check(TokenType.RIGHT_PAREN):
                    args.append(self._parse_expression())
                    while self._match(TokenType.COMMA):
                        args.append(self._parse_expression())
                self._consume(TokenType.RIGHT_PAREN)
                return FunctionCall(token.value, args, token.location)

            return expression

        raise create_invalid_expression_error(
            f"unexpected {token.type.name.lower()} token '{token.lexeme}'"
            if token.type != TokenType.EOF else "unexpected end of input",
            token
        )

    # ========================================================================
    # Token helpers
    # ========================================================================

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self.current_token.type == token_type

    def _check_type_name(self) -> bool:
        return self.current_token.type in TYPE_NAMES

    def _advance(self) -> Token:
        """Consume and return the current token, pulling the next from the lexer."""
        previous = self.current_token
        if previous.type != TokenType.EOF:
            self.current_token = self.lexer.next_token()
        return previous

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise create_unexpected_token_error(token_type, self.current_token)


def parse_string(source: str, filename: str = "<string>") -> ParseResult:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        ParseResult with the program and all lexical and syntax errors
    """
    lexer = Lexer(source, filename)
    parser = Parser(lexer)
    program = parser.parse()
    return ParseResult(program, list(lexer.errors), list(parser.errors))


def parse_file(filepath: str) -> ParseResult:
    """
    Convenience function to parse a source file.

    Raises:
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return parse_string(source, filepath)
