"""
Abstract Syntax Tree node definitions for SysY.

A closed set of node classes. Each node records the location of its first
token and supports the visitor pattern through a single accept() method.
Nodes are built once by the parser and never modified afterwards; the
semantic pass keeps its results (resolved types) in a side table keyed by
node identity instead of on the nodes.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Any, Union
from enum import Enum
import uuid

from ..lexer.tokens import SourceLocation, TokenType


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROGRAM = "Program"
    FUNCTION_DEF = "FunctionDef"
    PARAMETER = "Parameter"
    DECLARATION = "Declaration"
    VARIABLE_DEF = "VariableDef"

    # Statements
    BLOCK = "Block"
    IF_STATEMENT = "IfStatement"
    WHILE_STATEMENT = "WhileStatement"
    RETURN_STATEMENT = "ReturnStatement"
    EXPRESSION_STMT = "ExpressionStatement"
    DECLARATION_STMT = "DeclarationStatement"

    # Expressions
    BINARY_OP = "BinaryOp"
    UNARY_OP = "UnaryOp"
    FUNCTION_CALL = "FunctionCall"
    INDEX_ACCESS = "IndexAccess"
    NUMBER_LITERAL = "NumberLiteral"
    VARIABLE_REF = "VariableRef"


class DataType(Enum):
    """The scalar types of the language."""
    INT = "int"
    FLOAT = "float"
    VOID = "void"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_token_type(cls, token_type: TokenType) -> 'DataType':
        return _TYPE_NAME_TO_DATA_TYPE[token_type]


_TYPE_NAME_TO_DATA_TYPE = {
    TokenType.INT: DataType.INT,
    TokenType.FLOAT: DataType.FLOAT,
    TokenType.VOID: DataType.VOID,
}


class ASTVisitor(ABC):
    """
    Abstract visitor interface for traversing AST nodes.

    One method per concrete node class; a visitor that forgets one cannot
    be instantiated.
    """

    @abstractmethod
    def visit_program(self, node: 'Program') -> Any: ...

    @abstractmethod
    def visit_function_def(self, node: 'FunctionDef') -> Any: ...

    @abstractmethod
    def visit_parameter(self, node: 'Parameter') -> Any: ...

    @abstractmethod
    def visit_declaration(self, node: 'Declaration') -> Any: ...

    @abstractmethod
    def visit_variable_def(self, node: 'VariableDef') -> Any: ...

    @abstractmethod
    def visit_block(self, node: 'Block') -> Any: ...

    @abstractmethod
    def visit_if_statement(self, node: 'IfStatement') -> Any: ...

    @abstractmethod
    def visit_while_statement(self, node: 'WhileStatement') -> Any: ...

    @abstractmethod
    def visit_return_statement(self, node: 'ReturnStatement') -> Any: ...

    @abstractmethod
    def visit_expression_statement(self, node: 'ExpressionStatement') -> Any: ...

    @abstractmethod
    def visit_declaration_statement(self, node: 'DeclarationStatement') -> Any: ...

    @abstractmethod
    def visit_binary_op(self, node: 'BinaryOp') -> Any: ...

    @abstractmethod
    def visit_unary_op(self, node: 'UnaryOp') -> Any: ...

    @abstractmethod
    def visit_function_call(self, node: 'FunctionCall') -> Any: ...

    @abstractmethod
    def visit_index_access(self, node: 'IndexAccess') -> Any: ...

    @abstractmethod
    def visit_number_literal(self, node: 'NumberLiteral') -> Any: ...

    @abstractmethod
    def visit_variable_ref(self, node: 'VariableRef') -> Any: ...


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def __init__(self, node_type: ASTNodeType, location: SourceLocation):
        self.node_type = node_type
        self.location = location
        # Generate unique ID for hashability
        self._id = uuid.uuid4()

    @property
    def line(self) -> int:
        """Source line of the node's first token."""
        return self.location.line

    @abstractmethod
    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        pass

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes in source order."""
        pass

    def walk(self):
        """Yield this node and all of its descendants, depth first."""
        yield self
        for child in self.children():
            yield from child.walk()

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.location}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(line={self.line})"

    def __hash__(self) -> int:
        """Hash based on unique ID for use in dictionaries."""
        return hash(self._id)

    def __eq__(self, other) -> bool:
        """Equality based on unique ID."""
        if not isinstance(other, ASTNode):
            return False
        return self._id == other._id


# ============================================================================
# Top-level nodes
# ============================================================================

class Program(ASTNode):
    """Root AST node: global declarations and function definitions, in source order."""
    declarations: List['Declaration']
    functions: List['FunctionDef']

    def __init__(self, declarations: List['Declaration'], functions: List['FunctionDef'],
                 location: SourceLocation):
        super().__init__(ASTNodeType.PROGRAM, location)
        self.declarations = declarations
        self.functions = functions

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_program(self)

    def children(self) -> List[ASTNode]:
        return [*self.declarations, *self.functions]


class FunctionDef(ASTNode):
    """Function definition."""
    return_type: DataType
    name: str
    params: List['Parameter']
    body: 'Block'

    def __init__(self, return_type: DataType, name: str, params: List['Parameter'],
                 body: 'Block', location: SourceLocation):
        super().__init__(ASTNodeType.FUNCTION_DEF, location)
        self.return_type = return_type
        self.name = name
        self.params = params
        self.body = body

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_def(self)

    def children(self) -> List[ASTNode]:
        return [*self.params, self.body]


class Parameter(ASTNode):
    """Function parameter. array_size is 0 for scalars and unsized arrays."""
    param_type: DataType
    name: str
    is_array: bool
    array_size: int

    def __init__(self, param_type: DataType, name: str, location: SourceLocation,
                 is_array: bool = False, array_size: int = 0):
        super().__init__(ASTNodeType.PARAMETER, location)
        self.param_type = param_type
        self.name = name
        self.is_array = is_array
        self.array_size = array_size

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_parameter(self)

    def children(self) -> List[ASTNode]:
        return []


class Declaration(ASTNode):
    """Variable or constant declaration: ``[const] type a, b[4] = ...``."""
    var_type: DataType
    is_const: bool
    definitions: List['VariableDef']

    def __init__(self, var_type: DataType, definitions: List['VariableDef'],
                 location: SourceLocation, is_const: bool = False):
        super().__init__(ASTNodeType.DECLARATION, location)
        self.var_type = var_type
        self.is_const = is_const
        self.definitions = definitions

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_declaration(self)

    def children(self) -> List[ASTNode]:
        return list(self.definitions)


class VariableDef(ASTNode):
    """One declarator of a declaration."""
    name: str
    initializer: Optional['Expression']
    is_array: bool
    dimensions: List[int]

    def __init__(self, name: str, location: SourceLocation,
                 initializer: Optional['Expression'] = None,
                 is_array: bool = False, dimensions: Optional[List[int]] = None):
        super().__init__(ASTNodeType.VARIABLE_DEF, location)
        self.name = name
        self.initializer = initializer
        self.is_array = is_array
        self.dimensions = dimensions or []

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable_def(self)

    def children(self) -> List[ASTNode]:
        return [self.initializer] if self.initializer else []


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""
    pass


class Block(Statement):
    """Braced statement list; opens a scope."""
    statements: List[Statement]

    def __init__(self, statements: List[Statement], location: SourceLocation):
        super().__init__(ASTNodeType.BLOCK, location)
        self.statements = statements

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_block(self)

    def children(self) -> List[ASTNode]:
        return list(self.statements)


class IfStatement(Statement):
    """If statement; else binds to the nearest if."""
    condition: 'Expression'
    then_branch: Statement
    else_branch: Optional[Statement]

    def __init__(self, condition: 'Expression', then_branch: Statement,
                 location: SourceLocation, else_branch: Optional[Statement] = None):
        super().__init__(ASTNodeType.IF_STATEMENT, location)
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_if_statement(self)

    def children(self) -> List[ASTNode]:
        children = [self.condition, self.then_branch]
        if self.else_branch:
            children.append(self.else_branch)
        return children


class WhileStatement(Statement):
    """While loop."""
    condition: 'Expression'
    body: Statement

    def __init__(self, condition: 'Expression', body: Statement, location: SourceLocation):
        super().__init__(ASTNodeType.WHILE_STATEMENT, location)
        self.condition = condition
        self.body = body

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_while_statement(self)

    def children(self) -> List[ASTNode]:
        return [self.condition, self.body]


class ReturnStatement(Statement):
    """Return statement."""
    value: Optional['Expression']

    def __init__(self, location: SourceLocation, value: Optional['Expression'] = None):
        super().__init__(ASTNodeType.RETURN_STATEMENT, location)
        self.value = value

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_return_statement(self)

    def children(self) -> List[ASTNode]:
        return [self.value] if self.value else []


class ExpressionStatement(Statement):
    """Expression used as a statement (assignments, bare calls)."""
    expression: 'Expression'

    def __init__(self, expression: 'Expression', location: SourceLocation):
        super().__init__(ASTNodeType.EXPRESSION_STMT, location)
        self.expression = expression

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_expression_statement(self)

    def children(self) -> List[ASTNode]:
        return [self.expression]


class DeclarationStatement(Statement):
    """Wraps a Declaration so it can appear inside a block."""
    declaration: Declaration

    def __init__(self, declaration: Declaration, location: SourceLocation):
        super().__init__(ASTNodeType.DECLARATION_STMT, location)
        self.declaration = declaration

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_declaration_statement(self)

    def children(self) -> List[ASTNode]:
        return [self.declaration]


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions."""
    pass


class BinaryOp(Expression):
    """Binary operation: arithmetic, comparison or assignment (TokenType.ASSIGN)."""
    left: Expression
    operator: TokenType
    right: Expression

    def __init__(self, left: Expression, operator: TokenType, right: Expression,
                 location: SourceLocation):
        super().__init__(ASTNodeType.BINARY_OP, location)
        self.left = left
        self.operator = operator
        self.right = right

    @property
    def is_assignment(self) -> bool:
        return self.operator == TokenType.ASSIGN

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary_op(self)

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


class UnaryOp(Expression):
    """Prefix negation (MINUS) or logical not (LOGICAL_NOT)."""
    operator: TokenType
    operand: Expression

    def __init__(self, operator: TokenType, operand: Expression, location: SourceLocation):
        super().__init__(ASTNodeType.UNARY_OP, location)
        self.operator = operator
        self.operand = operand

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_unary_op(self)

    def children(self) -> List[ASTNode]:
        return [self.operand]


class FunctionCall(Expression):
    """Call of a named function."""
    callee: str
    args: List[Expression]

    def __init__(self, callee: str, args: List[Expression], location: SourceLocation):
        super().__init__(ASTNodeType.FUNCTION_CALL, location)
        self.callee = callee
        self.args = args

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_call(self)

    def children(self) -> List[ASTNode]:
        return list(self.args)


class IndexAccess(Expression):
    """Array subscript; ``a[i][j]`` is IndexAccess(IndexAccess(a, i), j)."""
    base: Expression
    index: Expression

    def __init__(self, base: Expression, index: Expression, location: SourceLocation):
        super().__init__(ASTNodeType.INDEX_ACCESS, location)
        self.base = base
        self.index = index

    def root(self) -> Expression:
        """The innermost base of an index chain."""
        base = self.base
        while isinstance(base, IndexAccess):
            base = base.base
        return base

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_index_access(self)

    def children(self) -> List[ASTNode]:
        return [self.base, self.index]


class NumberLiteral(Expression):
    """Integer or float literal."""
    value: Union[int, float]
    literal_type: DataType

    def __init__(self, value: Union[int, float], literal_type: DataType,
                 location: SourceLocation):
        super().__init__(ASTNodeType.NUMBER_LITERAL, location)
        self.value = value
        self.literal_type = literal_type

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_number_literal(self)

    def children(self) -> List[ASTNode]:
        return []


class VariableRef(Expression):
    """Reference to a named variable, constant or parameter."""
    name: str

    def __init__(self, name: str, location: SourceLocation):
        super().__init__(ASTNodeType.VARIABLE_REF, location)
        self.name = name

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable_ref(self)

    def children(self) -> List[ASTNode]:
        return []


# Type aliases for convenience
AST = Program
