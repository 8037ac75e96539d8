"""
Indented tree dump of an AST, used by ``sysyc --ast``.
"""

from typing import List, Optional, Dict

from ..lexer.tokens import OPERATOR_SYMBOLS
from .ast_nodes import (
    ASTVisitor, ASTNode, DataType, Expression, Program, FunctionDef, Parameter,
    Declaration, VariableDef, Block, IfStatement, WhileStatement,
    ReturnStatement, ExpressionStatement, DeclarationStatement, BinaryOp,
    UnaryOp, FunctionCall, IndexAccess, NumberLiteral, VariableRef
)


class TreePrinter(ASTVisitor):
    """
    Renders one line per node, children indented two spaces.

    When ``resolved_types`` is given (an analysis side table), expression
    lines are suffixed with their type.
    """

    def __init__(self, resolved_types: Optional[Dict[Expression, DataType]] = None):
        self.resolved_types = resolved_types or {}
        self.lines: List[str] = []
        self._depth = 0

    def render(self, node: ASTNode) -> str:
        self.lines = []
        self._depth = 0
        node.accept(self)
        return "\n".join(self.lines)

    def _emit(self, text: str, node: ASTNode):
        resolved = self.resolved_types.get(node) if isinstance(node, Expression) else None
        suffix = f" : {resolved}" if resolved is not None else ""
        self.lines.append(f"{'  ' * self._depth}{text}{suffix}  (line {node.line})")

    def _children(self, *nodes: Optional[ASTNode]):
        self._depth += 1
        for node in nodes:
            if node is not None:
                node.accept(self)
        self._depth -= 1

    def visit_program(self, node: Program):
        self._emit("Program", node)
        self._children(*node.declarations, *node.functions)

    def visit_function_def(self, node: FunctionDef):
        self._emit(f"FunctionDef {node.return_type} {node.name}", node)
        self._children(*node.params, node.body)

    def visit_parameter(self, node: Parameter):
        suffix = ""
        if node.is_array:
            suffix = f"[{node.array_size}]" if node.array_size else "[]"
        self._emit(f"Parameter {node.param_type} {node.name}{suffix}", node)

    def visit_declaration(self, node: Declaration):
        prefix = "const " if node.is_const else ""
        self._emit(f"Declaration {prefix}{node.var_type}", node)
        self._children(*node.definitions)

    def visit_variable_def(self, node: VariableDef):
        dims = "".join(f"[{size}]" if size else "[]" for size in node.dimensions)
        self._emit(f"VariableDef {node.name}{dims}", node)
        self._children(node.initializer)

    def visit_block(self, node: Block):
        self._emit("Block", node)
        self._children(*node.statements)

    def visit_if_statement(self, node: IfStatement):
        self._emit("IfStatement", node)
        self._children(node.condition, node.then_branch, node.else_branch)

    def visit_while_statement(self, node: WhileStatement):
        self._emit("WhileStatement", node)
        self._children(node.condition, node.body)

    def visit_return_statement(self, node: ReturnStatement):
        self._emit("ReturnStatement", node)
        self._children(node.value)

    def visit_expression_statement(self, node: ExpressionStatement):
        self._emit("ExpressionStatement", node)
        self._children(node.expression)

    def visit_declaration_statement(self, node: DeclarationStatement):
        self._emit("DeclarationStatement", node)
        self._children(node.declaration)

    def visit_binary_op(self, node: BinaryOp):
        self._emit(f"BinaryOp {OPERATOR_SYMBOLS[node.operator]}", node)
        self._children(node.left, node.right)

    def visit_unary_op(self, node: UnaryOp):
        self._emit(f"UnaryOp {OPERATOR_SYMBOLS[node.operator]}", node)
        self._children(node.operand)

    def visit_function_call(self, node: FunctionCall):
        self._emit(f"FunctionCall {node.callee}", node)
        self._children(*node.args)

    def visit_index_access(self, node: IndexAccess):
        self._emit("IndexAccess", node)
        self._children(node.base, node.index)

    def visit_number_literal(self, node: NumberLiteral):
        self._emit(f"NumberLiteral {node.value!r} ({node.literal_type})", node)

    def visit_variable_ref(self, node: VariableRef):
        self._emit(f"VariableRef {node.name}", node)


def format_tree(node: ASTNode, resolved_types: Optional[Dict[Expression, DataType]] = None) -> str:
    """Render ``node`` and its subtree as indented text."""
    return TreePrinter(resolved_types).render(node)
