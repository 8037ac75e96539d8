"""
Semantic analysis error handling for SysY.

Every semantic diagnostic belongs to one numbered ErrorKind. The numbers
are what gets printed as the diagnostic class and must not change.
"""

from enum import IntEnum
from typing import Optional, List

from ..lexer.tokens import SourceLocation
from ..lexer.errors import Diagnostic
from ..parser.ast_nodes import ASTNode


class ErrorKind(IntEnum):
    """Numbered semantic diagnostic classes."""
    UNDECLARED_VARIABLE = 1
    REDEFINITION = 2
    VOID_DECLARATION = 3
    UNDEFINED_FUNCTION = 4
    NOT_A_FUNCTION = 5
    ARGUMENT_COUNT_MISMATCH = 6
    ARGUMENT_TYPE_MISMATCH = 7
    NON_INTEGER_INDEX = 8
    RETURN_TYPE_MISMATCH = 9
    RETURN_VALUE_IN_VOID_FUNCTION = 10
    MISSING_RETURN = 11
    OPERAND_TYPE_MISMATCH = 12
    INVALID_ASSIGNMENT_TARGET = 13
    ASSIGNMENT_TO_CONSTANT = 14
    FUNCTION_REDEFINITION = 15

    @property
    def code(self) -> str:
        return f"S{self.value:03d}"


class SemanticError(Exception):
    """
    A semantic error found during analysis.

    Collected in AnalysisResult.errors; the analyzer records these and
    keeps going instead of raising them.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        location: SourceLocation,
        node: Optional[ASTNode] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        related_locations: Optional[List[SourceLocation]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            error_class=int(kind),
            code=kind.code,
            help_text=help_text,
            suggestions=suggestions,
            title=SEMANTIC_ERROR_CODES[kind.code],
        )
        self.node = node
        self.related_locations = related_locations or []

    @property
    def line(self) -> int:
        return self.diagnostic.line

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        result = str(self.diagnostic)

        if self.related_locations:
            result += "\nRelated locations:\n"
            for loc in self.related_locations:
                result += f"  --> {loc}\n"

        return result


class SemanticWarning:
    """
    Represents a semantic warning that doesn't stop compilation.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        location: SourceLocation,
        node: Optional[ASTNode] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        self.kind = kind
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            error_class=int(kind),
            code=kind.code,
            help_text=help_text,
            suggestions=suggestions,
            title=SEMANTIC_ERROR_CODES[kind.code],
        )
        self.node = node

    @property
    def line(self) -> int:
        return self.diagnostic.line

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)


# Semantic error codes for categorization
SEMANTIC_ERROR_CODES = {
    ErrorKind.UNDECLARED_VARIABLE.code: "Use of undeclared variable",
    ErrorKind.REDEFINITION.code: "Redefinition in the same scope",
    ErrorKind.VOID_DECLARATION.code: "Variable declared void",
    ErrorKind.UNDEFINED_FUNCTION.code: "Call to undefined function",
    ErrorKind.NOT_A_FUNCTION.code: "Call to something that is not a function",
    ErrorKind.ARGUMENT_COUNT_MISMATCH.code: "Wrong number of arguments",
    ErrorKind.ARGUMENT_TYPE_MISMATCH.code: "Argument type mismatch",
    ErrorKind.NON_INTEGER_INDEX.code: "Array index is not an integer",
    ErrorKind.RETURN_TYPE_MISMATCH.code: "Return type mismatch",
    ErrorKind.RETURN_VALUE_IN_VOID_FUNCTION.code: "Value returned from void function",
    ErrorKind.MISSING_RETURN.code: "Missing return in value-returning function",
    ErrorKind.OPERAND_TYPE_MISMATCH.code: "Operand type mismatch",
    ErrorKind.INVALID_ASSIGNMENT_TARGET.code: "Invalid assignment target",
    ErrorKind.ASSIGNMENT_TO_CONSTANT.code: "Assignment to constant",
    ErrorKind.FUNCTION_REDEFINITION.code: "Function redefinition",
}


# Helper functions for creating specific semantic errors

def create_undeclared_variable_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None,
    similar_names: Optional[List[str]] = None
) -> SemanticError:
    """Create an error for use of a name that is not in scope."""
    suggestions = [f"Did you mean '{similar}'?" for similar in (similar_names or [])]
    suggestions.append(f"Declare '{name}' before using it")

    return SemanticError(
        ErrorKind.UNDECLARED_VARIABLE,
        f"Use of undeclared variable '{name}'",
        location,
        node=node,
        help_text=f"'{name}' is not declared in this scope or any enclosing scope.",
        suggestions=suggestions,
    )


def create_redefinition_error(
    name: str,
    what: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None,
    previous: Optional[SourceLocation] = None
) -> SemanticError:
    """Create an error for a name declared twice in one scope."""
    return SemanticError(
        ErrorKind.REDEFINITION,
        f"Redefinition of {what} '{name}'",
        location,
        node=node,
        help_text=f"'{name}' is already declared in this scope.",
        related_locations=[previous] if previous else None
    )


def create_void_declaration_error(
    names: List[str],
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for a variable declared with type void."""
    listed = ", ".join(f"'{name}'" for name in names)
    return SemanticError(
        ErrorKind.VOID_DECLARATION,
        f"Variable {listed} declared void",
        location,
        node=node,
        suggestions=["Use int or float"]
    )


def create_undefined_function_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for a call to a function that was never defined."""
    return SemanticError(
        ErrorKind.UNDEFINED_FUNCTION,
        f"Call to undefined function '{name}'",
        location,
        node=node,
        suggestions=[f"Define '{name}' before calling it"]
    )


def create_not_a_function_error(
    name: str,
    kind_label: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for calling a variable, constant or parameter."""
    return SemanticError(
        ErrorKind.NOT_A_FUNCTION,
        f"'{name}' is a {kind_label}, not a function",
        location,
        node=node
    )


def create_arity_mismatch_error(
    function_name: str,
    expected_args: int,
    actual_args: int,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create a function arity mismatch error."""
    return SemanticError(
        ErrorKind.ARGUMENT_COUNT_MISMATCH,
        f"Wrong number of arguments to '{function_name}': expected {expected_args}, got {actual_args}",
        location,
        node=node,
        suggestions=[f"Provide exactly {expected_args} arguments"]
    )


def create_argument_type_error(
    function_name: str,
    position: int,
    expected: str,
    actual: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for an argument whose type differs from its parameter."""
    return SemanticError(
        ErrorKind.ARGUMENT_TYPE_MISMATCH,
        f"Argument {position} of '{function_name}' has type {actual}, expected {expected}",
        location,
        node=node
    )


def create_non_integer_index_error(
    actual: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for an array index that is not an int."""
    return SemanticError(
        ErrorKind.NON_INTEGER_INDEX,
        f"Array index has type {actual}, expected int",
        location,
        node=node
    )


def create_return_type_mismatch_error(
    function_name: str,
    expected: str,
    actual: Optional[str],
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for a return whose value does not match the function type."""
    if actual is None:
        message = f"Function '{function_name}' must return a value of type {expected}"
    else:
        message = f"Return type mismatch in '{function_name}': expected {expected}, got {actual}"
    return SemanticError(ErrorKind.RETURN_TYPE_MISMATCH, message, location, node=node)


def create_return_value_in_void_error(
    function_name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for ``return expr;`` inside a void function."""
    return SemanticError(
        ErrorKind.RETURN_VALUE_IN_VOID_FUNCTION,
        f"Cannot return a value from void function '{function_name}'",
        location,
        node=node,
        suggestions=["Use 'return;'"]
    )


def create_missing_return_warning(
    function_name: str,
    return_type: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticWarning:
    """Create a warning for a non-void function without any return statement."""
    return SemanticWarning(
        ErrorKind.MISSING_RETURN,
        f"Function '{function_name}' should return a value of type {return_type}",
        location,
        node=node
    )


def create_operand_type_mismatch_error(
    operator: str,
    left: str,
    right: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create a type mismatch error between the two sides of an operator."""
    return SemanticError(
        ErrorKind.OPERAND_TYPE_MISMATCH,
        f"Type mismatch for operator '{operator}': {left} and {right}",
        location,
        node=node,
        help_text="Both operands of a binary operator must have the same type."
    )


def create_invalid_assignment_target_error(
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for assigning to something that is not a variable or element."""
    return SemanticError(
        ErrorKind.INVALID_ASSIGNMENT_TARGET,
        "Left side of assignment is not assignable",
        location,
        node=node,
        help_text="Only variables and array elements can be assigned to."
    )


def create_assignment_to_constant_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for writing to a const."""
    return SemanticError(
        ErrorKind.ASSIGNMENT_TO_CONSTANT,
        f"Cannot assign to constant '{name}'",
        location,
        node=node
    )


def create_function_redefinition_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None,
    previous: Optional[SourceLocation] = None
) -> SemanticError:
    """Create an error for a second definition of a function."""
    return SemanticError(
        ErrorKind.FUNCTION_REDEFINITION,
        f"Redefinition of function '{name}'",
        location,
        node=node,
        related_locations=[previous] if previous else None
    )
