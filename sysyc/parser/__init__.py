"""
SysY Parser Package

Recursive descent parser for SysY producing a closed set of AST nodes.

Key Features:
- Two-token lookahead to tell function definitions from declarations
- Single precedence tier for binary operators, right-associative assignment
- Per-item error recovery that skips one token and continues
- Visitor protocol with one method per node class
"""

from .ast_nodes import *
from .parser import Parser, ParseResult, parse_string, parse_file
from .printer import TreePrinter, format_tree
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser", "ParseResult", "parse_string", "parse_file",

    # AST nodes
    "AST", "ASTNode", "ASTVisitor", "DataType",
    "Program", "FunctionDef", "Parameter", "Declaration", "VariableDef",
    "Statement", "Block", "IfStatement", "WhileStatement", "ReturnStatement",
    "ExpressionStatement", "DeclarationStatement",
    "Expression", "BinaryOp", "UnaryOp", "FunctionCall", "IndexAccess",
    "NumberLiteral", "VariableRef",

    # Printing
    "TreePrinter", "format_tree",

    # Error handling
    "ParseError",
]
