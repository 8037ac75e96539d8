"""
Runs lexer, parser and semantic analyzer over one source text.
"""

import logging
from dataclasses import dataclass
from typing import List

from .lexer import Lexer, Token, tokenize
from .lexer.errors import Diagnostic, LexerError
from .parser import Parser, Program
from .parser.errors import ParseError
from .analyzer import SemanticAnalyzer, AnalysisResult

logger = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    """Everything one compilation produced."""
    filename: str
    tokens: List[Token]
    program: Program
    lexer_errors: List[LexerError]
    parse_errors: List[ParseError]
    analysis: AnalysisResult

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Lexical, then syntax, then semantic diagnostics."""
        return (
            [error.diagnostic for error in self.lexer_errors] +
            [error.diagnostic for error in self.parse_errors] +
            self.analysis.diagnostics
        )

    def has_errors(self) -> bool:
        return bool(self.lexer_errors or self.parse_errors or self.analysis.has_errors())

    @property
    def exit_code(self) -> int:
        """1 if any error occurred; warnings alone still succeed."""
        return 1 if self.has_errors() else 0


def compile_source(source: str, filename: str = "<string>") -> CompilationResult:
    """
    Run the full front end over ``source``.

    Later stages still run after earlier ones report errors, so the result
    always carries every diagnostic that can be found.
    """
    tokens = tokenize(source, filename)

    lexer = Lexer(source, filename)
    parser = Parser(lexer)
    program = parser.parse()

    analysis = SemanticAnalyzer().analyze(program)

    logger.debug(
        "%s: %d tokens, %d lexical errors, %d syntax errors, %d semantic reports",
        filename, len(tokens), len(lexer.errors), len(parser.errors), len(analysis.reports)
    )
    return CompilationResult(
        filename=filename,
        tokens=tokens,
        program=program,
        lexer_errors=list(lexer.errors),
        parse_errors=list(parser.errors),
        analysis=analysis
    )
