"""
sysyc - a front end for the SysY teaching language

Turns SysY source text into a validated abstract syntax tree plus a
stream of diagnostics. There is no code generation.

Architecture:
    sysyc/
    ├── lexer/           # Tokenization with bounded lookahead
    ├── parser/          # Recursive descent parsing and the AST
    ├── analyzer/        # Scoped symbol table and semantic checks
    ├── pipeline.py      # Runs all three stages over one source text
    └── cli.py           # Command-line driver
"""

__version__ = "0.2.0"
__license__ = "MIT"

from .lexer import Lexer, tokenize
from .parser import Parser, parse_string
from .analyzer import SemanticAnalyzer, analyze_string
from .pipeline import CompilationResult, compile_source

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "SemanticAnalyzer",

    # Convenience entry points
    "tokenize",
    "parse_string",
    "analyze_string",
    "compile_source",
    "CompilationResult",

    # Version info
    "__version__",
    "__license__",
]
