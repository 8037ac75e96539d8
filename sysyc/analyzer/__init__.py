"""
SysY Semantic Analyzer Package

Implements semantic analysis including:
- Scoped symbol resolution with shadowing
- Type checking of operators, initializers and returns
- Function signature checking at call sites
- A numbered, stable diagnostic taxonomy
"""

from .semantic_analyzer import (
    SemanticAnalyzer, SemanticVisitor, AnalysisContext, AnalysisResult, analyze_string
)
from .symbol_table import SymbolTable, Symbol, SymbolKind, ValueKind, Scope, ScopeKind
from .errors import ErrorKind, SemanticError, SemanticWarning

__all__ = [
    # Main analyzer
    "SemanticAnalyzer", "SemanticVisitor", "AnalysisContext", "AnalysisResult",
    "analyze_string",

    # Symbol management
    "SymbolTable", "Symbol", "SymbolKind", "ValueKind", "Scope", "ScopeKind",

    # Error handling
    "ErrorKind", "SemanticError", "SemanticWarning",
]
