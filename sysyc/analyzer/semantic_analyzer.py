"""
Semantic analyzer for SysY.

A single depth-first pass over the AST that:
- builds the scoped symbol table
- checks declarations, calls, returns and assignments
- records a resolved type for every expression it visits

All per-run state lives in an AnalysisContext created by analyze(), so
one SemanticAnalyzer can be used for any number of programs.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union

from ..lexer.tokens import OPERATOR_SYMBOLS, TokenType
from ..parser.ast_nodes import (
    ASTVisitor, DataType, Expression, Program, FunctionDef, Parameter,
    Declaration, VariableDef, Block, IfStatement, WhileStatement,
    ReturnStatement, ExpressionStatement, DeclarationStatement, BinaryOp,
    UnaryOp, FunctionCall, IndexAccess, NumberLiteral, VariableRef
)
from ..lexer.errors import Diagnostic
from ..parser.parser import parse_string
from .symbol_table import SymbolTable, Symbol, SymbolKind, ValueKind, ScopeKind
from .errors import (
    ErrorKind, SemanticError, SemanticWarning,
    create_undeclared_variable_error, create_redefinition_error,
    create_void_declaration_error, create_undefined_function_error,
    create_not_a_function_error, create_arity_mismatch_error,
    create_argument_type_error, create_non_integer_index_error,
    create_return_type_mismatch_error, create_return_value_in_void_error,
    create_missing_return_warning, create_operand_type_mismatch_error,
    create_invalid_assignment_target_error, create_assignment_to_constant_error,
    create_function_redefinition_error
)

logger = logging.getLogger(__name__)

SemanticReport = Union[SemanticError, SemanticWarning]

# Never warned about a missing return
_IMPLICIT_RETURN_FUNCTIONS = {"main"}


@dataclass
class AnalysisContext:
    """Mutable state of one analysis run."""
    symbol_table: SymbolTable = field(default_factory=SymbolTable)
    current_function: Optional[str] = None
    current_return_type: Optional[DataType] = None
    current_declaration: Optional[Declaration] = None
    in_loop: bool = False  # Reserved for break/continue checks
    saw_return: bool = False
    reports: List[SemanticReport] = field(default_factory=list)
    type_annotations: Dict[Expression, DataType] = field(default_factory=dict)

    def report(self, report: SemanticReport):
        self.reports.append(report)
        logger.debug("line %d: [%d] %s", report.line, report.kind, report.message)

    def resolve(self, node: Expression, data_type: DataType) -> DataType:
        """Record the resolved type of ``node`` and return it."""
        self.type_annotations[node] = data_type
        return data_type


@dataclass
class AnalysisResult:
    """Results of semantic analysis."""
    ast: Program
    symbol_table: SymbolTable
    errors: List[SemanticError]
    warnings: List[SemanticWarning]
    reports: List[SemanticReport]  # Errors and warnings in traversal order
    type_annotations: Dict[Expression, DataType]  # Resolved type of each expression

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Every diagnostic in traversal order."""
        return [report.diagnostic for report in self.reports]

    def kinds(self) -> List[ErrorKind]:
        return [report.kind for report in self.reports]

    def has_errors(self) -> bool:
        """Check if analysis found any errors."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if analysis found any warnings."""
        return len(self.warnings) > 0

    def resolved_type(self, node: Expression) -> Optional[DataType]:
        return self.type_annotations.get(node)

    def unresolved_expressions(self) -> List[Expression]:
        """Expressions of the program that never received a type."""
        return [
            node for node in self.ast.walk()
            if isinstance(node, Expression) and node not in self.type_annotations
        ]


class SemanticAnalyzer:
    """
    Main semantic analyzer for SysY.

    Usage::

        result = SemanticAnalyzer().analyze(program)
        for diagnostic in result.diagnostics:
            print(diagnostic.render())
    """

    def analyze(self, ast: Program) -> AnalysisResult:
        """
        Perform semantic analysis on the AST.

        Args:
            ast: The abstract syntax tree to analyze

        Returns:
            AnalysisResult containing the symbol table, resolved types and
            all errors and warnings
        """
        context = AnalysisContext()
        ast.accept(SemanticVisitor(context))

        logger.debug("analysis finished with %d reports", len(context.reports))
        return AnalysisResult(
            ast=ast,
            symbol_table=context.symbol_table,
            errors=[r for r in context.reports if isinstance(r, SemanticError)],
            warnings=[r for r in context.reports if isinstance(r, SemanticWarning)],
            reports=context.reports,
            type_annotations=context.type_annotations
        )


class SemanticVisitor(ASTVisitor):
    """The traversal itself. Expression visits return the resolved type."""

    def __init__(self, context: AnalysisContext):
        self.context = context

    @property
    def symbols(self) -> SymbolTable:
        return self.context.symbol_table

    # ========================================================================
    # Top level
    # ========================================================================

    def visit_program(self, node: Program):
        for declaration in node.declarations:
            declaration.accept(self)
        for function in node.functions:
            function.accept(self)

    def visit_function_def(self, node: FunctionDef):
        """
        Declare the function, then check its parameters and body in a new scope.

        A non-void function without any return statement gets a
        MISSING_RETURN warning, except `main`, for which that kind is never
        issued: falling off the end of `main` returns 0.
        """
        ctx = self.context

        # Inserted before the body so recursive calls resolve
        existing = self.symbols.lookup_current_scope(node.name)
        if existing is None:
            self.symbols.insert(node.name, Symbol(
                name=node.name,
                kind=SymbolKind.FUNCTION,
                symbol_type=node.return_type,
                location=node.location,
                param_count=len(node.params),
                param_types=[param.param_type for param in node.params]
            ))
        elif existing.is_function:
            ctx.report(create_function_redefinition_error(
                node.name, node.location, node, previous=existing.location))
        else:
            ctx.report(create_redefinition_error(
                node.name, "function", node.location, node, previous=existing.location))

        ctx.current_function = node.name
        ctx.current_return_type = node.return_type
        ctx.saw_return = False

        self.symbols.enter_scope(ScopeKind.FUNCTION, node.name)
        for param in node.params:
            param.accept(self)
        node.body.accept(self)
        self.symbols.exit_scope()

        if (node.return_type != DataType.VOID and not ctx.saw_return and
                node.name not in _IMPLICIT_RETURN_FUNCTIONS):
            ctx.report(create_missing_return_warning(
                node.name, str(node.return_type), node.location, node))

        ctx.current_function = None
        ctx.current_return_type = None

    def visit_parameter(self, node: Parameter):
        symbol = Symbol(
            name=node.name,
            kind=SymbolKind.PARAMETER,
            symbol_type=node.param_type,
            location=node.location,
            is_array=node.is_array,
            dimensions=[node.array_size] if node.is_array else []
        )
        if not self.symbols.insert(node.name, symbol):
            previous = self.symbols.lookup_current_scope(node.name)
            self.context.report(create_redefinition_error(
                node.name, "parameter", node.location, node, previous=previous.location))

    def visit_declaration(self, node: Declaration):
        if node.var_type == DataType.VOID:
            self.context.report(create_void_declaration_error(
                [definition.name for definition in node.definitions], node.location, node))
            return

        saved = self.context.current_declaration
        self.context.current_declaration = node
        for definition in node.definitions:
            definition.accept(self)
        self.context.current_declaration = saved

    def visit_variable_def(self, node: VariableDef):
        ctx = self.context
        declaration = ctx.current_declaration
        kind = SymbolKind.CONSTANT if declaration.is_const else SymbolKind.VARIABLE

        symbol = Symbol(
            name=node.name,
            kind=kind,
            symbol_type=declaration.var_type,
            location=node.location,
            is_array=node.is_array,
            dimensions=list(node.dimensions)
        )
        inserted = self.symbols.insert(node.name, symbol)
        if not inserted:
            previous = self.symbols.lookup_current_scope(node.name)
            ctx.report(create_redefinition_error(
                node.name, kind.value, node.location, node, previous=previous.location))

        if node.initializer is None:
            return

        # An initializer is an implicit assignment
        init_type = node.initializer.accept(self)
        if init_type != declaration.var_type:
            ctx.report(create_operand_type_mismatch_error(
                "=", str(declaration.var_type), str(init_type), node.location, node))

        if inserted and declaration.is_const:
            value = _literal_value(node.initializer)
            if value is not None:
                symbol.value = value
                symbol.value_kind = ValueKind.FLOAT if isinstance(value, float) else ValueKind.INT

    # ========================================================================
    # Statements
    # ========================================================================

    def visit_block(self, node: Block):
        self.symbols.enter_scope(ScopeKind.BLOCK)
        for statement in node.statements:
            statement.accept(self)
        self.symbols.exit_scope()

    def visit_if_statement(self, node: IfStatement):
        node.condition.accept(self)
        node.then_branch.accept(self)
        if node.else_branch is not None:
            node.else_branch.accept(self)

    def visit_while_statement(self, node: WhileStatement):
        was_in_loop = self.context.in_loop
        self.context.in_loop = True
        node.condition.accept(self)
        node.body.accept(self)
        self.context.in_loop = was_in_loop

    def visit_return_statement(self, node: ReturnStatement):
        ctx = self.context
        ctx.saw_return = True
        expected = ctx.current_return_type

        if node.value is not None:
            actual = node.value.accept(self)
            if expected == DataType.VOID:
                ctx.report(create_return_value_in_void_error(
                    ctx.current_function, node.location, node))
            elif actual != expected:
                ctx.report(create_return_type_mismatch_error(
                    ctx.current_function, str(expected), str(actual), node.location, node))
        elif expected != DataType.VOID:
            ctx.report(create_return_type_mismatch_error(
                ctx.current_function, str(expected), None, node.location, node))

    def visit_expression_statement(self, node: ExpressionStatement):
        node.expression.accept(self)

    def visit_declaration_statement(self, node: DeclarationStatement):
        node.declaration.accept(self)

    # ========================================================================
    # Expressions
    # ========================================================================

    def visit_binary_op(self, node: BinaryOp) -> DataType:
        ctx = self.context
        left = node.left.accept(self)
        right = node.right.accept(self)

        if node.is_assignment:
            self._check_assignment_target(node)

        if left != right:
            ctx.report(create_operand_type_mismatch_error(
                OPERATOR_SYMBOLS[node.operator], str(left), str(right), node.location, node))
            return ctx.resolve(node, DataType.INT)

        return ctx.resolve(node, left)

    def _check_assignment_target(self, node: BinaryOp):
        target = node.left
        if isinstance(target, IndexAccess):
            target = target.root()

        if not isinstance(target, VariableRef):
            self.context.report(create_invalid_assignment_target_error(node.location, node))
            return

        symbol = self.symbols.lookup(target.name)
        if symbol is not None and symbol.is_constant:
            self.context.report(create_assignment_to_constant_error(
                target.name, node.location, node))

    def visit_unary_op(self, node: UnaryOp) -> DataType:
        # The operand's type carries through, so -1.5 stays float
        return self.context.resolve(node, node.operand.accept(self))

    def visit_function_call(self, node: FunctionCall) -> DataType:
        ctx = self.context
        symbol = self.symbols.lookup(node.callee)

        callable_symbol = None
        if symbol is None:
            ctx.report(create_undefined_function_error(node.callee, node.location, node))
        elif not symbol.is_function:
            ctx.report(create_not_a_function_error(
                node.callee, symbol.kind.value, node.location, node))
        else:
            callable_symbol = symbol

        arg_types = [arg.accept(self) for arg in node.args]

        if callable_symbol is None:
            return ctx.resolve(node, DataType.INT)

        if len(arg_types) != callable_symbol.param_count:
            ctx.report(create_arity_mismatch_error(
                node.callee, callable_symbol.param_count, len(arg_types), node.location, node))

        for position, (actual, expected) in enumerate(zip(arg_types, callable_symbol.param_types), 1):
            if actual != expected:
                ctx.report(create_argument_type_error(
                    node.callee, position, str(expected), str(actual),
                    node.args[position - 1].location, node))

        return ctx.resolve(node, callable_symbol.symbol_type)

    def visit_index_access(self, node: IndexAccess) -> DataType:
        base_type = node.base.accept(self)
        index_type = node.index.accept(self)
        if index_type != DataType.INT:
            self.context.report(create_non_integer_index_error(
                str(index_type), node.index.location, node))
        return self.context.resolve(node, base_type)

    def visit_number_literal(self, node: NumberLiteral) -> DataType:
        return self.context.resolve(node, node.literal_type)

    def visit_variable_ref(self, node: VariableRef) -> DataType:
        symbol = self.symbols.lookup(node.name)
        if symbol is None:
            self.context.report(create_undeclared_variable_error(
                node.name, node.location, node,
                similar_names=self.symbols.get_similar_names(node.name)))
            return self.context.resolve(node, DataType.INT)
        return self.context.resolve(node, symbol.symbol_type)


def _literal_value(expression: Expression) -> Optional[Union[int, float]]:
    """Value of a literal or negated literal, None for anything else."""
    if isinstance(expression, NumberLiteral):
        return expression.value
    if (isinstance(expression, UnaryOp) and expression.operator == TokenType.MINUS and
            isinstance(expression.operand, NumberLiteral)):
        return -expression.operand.value
    return None


def analyze_string(source: str, filename: str = "<string>") -> AnalysisResult:
    """
    Parse and analyze a source string.

    Syntax errors are not part of the result; items that failed to parse
    are simply absent from the analyzed program. Use
    sysyc.pipeline.compile_source to get everything.
    """
    return SemanticAnalyzer().analyze(parse_string(source, filename).program)
