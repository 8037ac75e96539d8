"""
Symbol table and scope management for SysY semantic analysis.

A stack of scopes, innermost last. The global scope is pushed when the
table is created and can never be popped; function bodies and blocks push
and pop their own scopes around their traversal.
"""

import logging
from typing import Dict, List, Optional, Union
from dataclasses import dataclass, field
from enum import Enum

from ..lexer.tokens import SourceLocation
from ..parser.ast_nodes import DataType

logger = logging.getLogger(__name__)


class SymbolKind(Enum):
    """Kinds of named entities."""
    VARIABLE = "variable"
    CONSTANT = "constant"
    FUNCTION = "function"
    PARAMETER = "parameter"


class ValueKind(Enum):
    """Tag for the literal value carried by a constant."""
    NONE = "none"
    INT = "int"
    FLOAT = "float"


@dataclass
class Symbol:
    """Attributes recorded for one declared name."""
    name: str
    kind: SymbolKind
    symbol_type: DataType
    location: Optional[SourceLocation] = None
    is_array: bool = False
    dimensions: List[int] = field(default_factory=list)

    # Functions only
    param_count: int = 0
    param_types: List[DataType] = field(default_factory=list)

    # Constants initialised by a literal
    value: Optional[Union[int, float]] = None
    value_kind: ValueKind = ValueKind.NONE

    @property
    def line(self) -> int:
        return self.location.line if self.location else 0

    @property
    def is_function(self) -> bool:
        return self.kind == SymbolKind.FUNCTION

    @property
    def is_constant(self) -> bool:
        return self.kind == SymbolKind.CONSTANT

    def signature(self) -> str:
        """``int f(int, float)`` for functions, ``int a[]`` otherwise."""
        if self.is_function:
            params = ", ".join(str(t) for t in self.param_types)
            return f"{self.symbol_type} {self.name}({params})"
        suffix = "[]" if self.is_array else ""
        return f"{self.symbol_type} {self.name}{suffix}"

    def __str__(self) -> str:
        return f"{self.kind.value} {self.signature()}"


class ScopeKind(Enum):
    """Types of scopes."""
    GLOBAL = "global"
    FUNCTION = "function"
    BLOCK = "block"


@dataclass
class Scope:
    """Represents a lexical scope."""
    kind: ScopeKind
    name: str
    symbols: Dict[str, Symbol] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.symbols

    def __str__(self) -> str:
        return f"Scope({self.kind.value}, {self.name}, {len(self.symbols)} symbols)"


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate edit distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if not s2:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


class SymbolTable:
    """
    Scoped name to Symbol mapping.

    Inserting a name already present in the innermost scope fails;
    inserting one that exists only in an outer scope shadows it.
    """

    def __init__(self):
        """Initialize the symbol table with a global scope."""
        self.global_scope = Scope(ScopeKind.GLOBAL, "global")
        self.scopes: List[Scope] = [self.global_scope]

    @property
    def current_scope(self) -> Scope:
        return self.scopes[-1]

    @property
    def depth(self) -> int:
        """Number of scopes on the stack, 1 when only the global scope is open."""
        return len(self.scopes)

    def enter_scope(self, kind: ScopeKind = ScopeKind.BLOCK, name: str = "block") -> Scope:
        """Push a new innermost scope."""
        scope = Scope(kind, name)
        self.scopes.append(scope)
        logger.debug("enter %s scope '%s' (depth %d)", kind.value, name, self.depth)
        return scope

    def exit_scope(self) -> Scope:
        """
        Pop the innermost scope.

        Raises:
            RuntimeError: On an attempt to pop the global scope
        """
        if len(self.scopes) <= 1:
            raise RuntimeError("cannot exit the global scope")
        scope = self.scopes.pop()
        logger.debug("exit %s scope '%s' (depth %d)", scope.kind.value, scope.name, self.depth)
        return scope

    def insert(self, name: str, symbol: Symbol) -> bool:
        """Add ``symbol`` to the innermost scope. Returns False if the name is taken there."""
        if name in self.current_scope:
            return False
        self.current_scope.symbols[name] = symbol
        return True

    def lookup(self, name: str) -> Optional[Symbol]:
        """Find the innermost visible symbol named ``name``."""
        for scope in reversed(self.scopes):
            if name in scope:
                return scope.symbols[name]
        return None

    def lookup_current_scope(self, name: str) -> Optional[Symbol]:
        """Look up a symbol only in the innermost scope."""
        return self.current_scope.symbols.get(name)

    def visible_names(self) -> List[str]:
        names: Dict[str, None] = {}
        for scope in self.scopes:
            for name in scope.symbols:
                names.setdefault(name)
        return list(names)

    def get_similar_names(self, name: str, max_distance: int = 2) -> List[str]:
        """Get visible symbol names similar to the given name (for error suggestions)."""
        similar_names = []
        for symbol_name in self.visible_names():
            distance = levenshtein_distance(name.lower(), symbol_name.lower())
            if distance <= max_distance:
                similar_names.append((symbol_name, distance))

        similar_names.sort(key=lambda x: x[1])
        return [similar for similar, _ in similar_names[:3]]

    def __str__(self) -> str:
        return " > ".join(str(scope) for scope in self.scopes)
