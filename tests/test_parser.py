"""
Test suite for the SysY parser.

Tests cover:
- Function definition vs declaration disambiguation
- Declarations, parameters and array suffixes
- Statement forms and dangling else
- Expression shape: single precedence tier, right-associative assignment
- Error recovery by skipping tokens
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from sysyc.lexer.lexer import Lexer
from sysyc.lexer.tokens import TokenType
from sysyc.parser.parser import Parser, parse_string
from sysyc.parser.printer import format_tree
from sysyc.parser.ast_nodes import (
    DataType, FunctionDef, Declaration, Block, IfStatement, WhileStatement,
    ReturnStatement, ExpressionStatement, DeclarationStatement, BinaryOp,
    UnaryOp, FunctionCall, IndexAccess, NumberLiteral, VariableRef
)


class TestParser(unittest.TestCase):
    """Test cases for the parser."""

    def _parse(self, code: str):
        """Parse code that is expected to be free of syntax errors."""
        result = parse_string(code)
        self.assertEqual(result.parse_errors, [], [str(e) for e in result.parse_errors])
        return result.program

    def _expression(self, code: str):
        """Parse a single expression statement inside a function body."""
        program = self._parse(f"void f() {{ {code}; }}")
        statement = program.functions[0].body.statements[0]
        self.assertIsInstance(statement, ExpressionStatement)
        return statement.expression

    def test_function_and_declaration_disambiguation(self):
        """`type IDENT (` is a function; anything else after `type IDENT` is a declaration."""
        program = self._parse("int a; int f() { return 0; } float b = 1.0, c; void g(int x) {}")
        self.assertEqual([d.definitions[0].name for d in program.declarations], ["a", "b"])
        self.assertEqual([f.name for f in program.functions], ["f", "g"])
        self.assertEqual(program.declarations[1].var_type, DataType.FLOAT)
        self.assertEqual([d.name for d in program.declarations[1].definitions], ["b", "c"])
        self.assertEqual(program.functions[1].return_type, DataType.VOID)

    def test_parameters(self):
        """Parameters take a type, a name and an optional single array suffix."""
        program = self._parse("int f(int a, float b[], int c[10]) { return a; }")
        params = program.functions[0].params
        self.assertEqual([(p.param_type, p.name) for p in params],
                         [(DataType.INT, "a"), (DataType.FLOAT, "b"), (DataType.INT, "c")])
        self.assertFalse(params[0].is_array)
        self.assertTrue(params[1].is_array)
        self.assertEqual(params[1].array_size, 0)
        self.assertEqual(params[2].array_size, 10)

    def test_const_and_array_declarations(self):
        """Constants and multi-dimensional arrays are recorded on the nodes."""
        program = self._parse("const int N = 10; int grid[4][8];")
        const_decl, array_decl = program.declarations
        self.assertTrue(const_decl.is_const)
        self.assertIsInstance(const_decl.definitions[0].initializer, NumberLiteral)
        grid = array_decl.definitions[0]
        self.assertTrue(grid.is_array)
        self.assertEqual(grid.dimensions, [4, 8])

    def test_const_requires_initializer(self):
        """A constant without a value is a syntax error."""
        result = parse_string("const int N;")
        self.assertEqual(len(result.parse_errors), 1)
        self.assertIn("requires an initializer", result.parse_errors[0].message)

    def test_statements(self):
        """Each leading token selects its statement form."""
        program = self._parse("""
        int main() {
            int x = 1;
            if (x) x = 2; else { x = 3; }
            while (x < 10) x = x + 1;
            { int y; }
            return x;
        }
        """)
        statements = program.functions[0].body.statements
        self.assertIsInstance(statements[0], DeclarationStatement)
        self.assertIsInstance(statements[1], IfStatement)
        self.assertIsInstance(statements[1].then_branch, ExpressionStatement)
        self.assertIsInstance(statements[1].else_branch, Block)
        self.assertIsInstance(statements[2], WhileStatement)
        self.assertIsInstance(statements[3], Block)
        self.assertIsInstance(statements[4], ReturnStatement)
        self.assertIsInstance(statements[4].value, VariableRef)

    def test_dangling_else_binds_to_nearest_if(self):
        """`if (a) if (b) s; else t;` attaches the else to the inner if."""
        program = self._parse("void f(int a, int b) { if (a) if (b) a = 1; else a = 2; }")
        outer = program.functions[0].body.statements[0]
        self.assertIsNone(outer.else_branch)
        self.assertIsInstance(outer.then_branch, IfStatement)
        self.assertIsNotNone(outer.then_branch.else_branch)

    def test_bare_return(self):
        """`return;` has no value."""
        program = self._parse("void f() { return; }")
        self.assertIsNone(program.functions[0].body.statements[0].value)

    def test_binary_operators_share_one_tier(self):
        """`1 + 2 * 3` folds left to right: (1 + 2) * 3."""
        expr = self._expression("1 + 2 * 3")
        self.assertIsInstance(expr, BinaryOp)
        self.assertEqual(expr.operator, TokenType.MULTIPLY)
        self.assertIsInstance(expr.left, BinaryOp)
        self.assertEqual(expr.left.operator, TokenType.PLUS)
        self.assertEqual(expr.right.value, 3)

    def test_assignment_is_right_associative(self):
        """`a = b = 1` parses as a = (b = 1)."""
        expr = self._expression("a = b = 1")
        self.assertTrue(expr.is_assignment)
        self.assertIsInstance(expr.left, VariableRef)
        self.assertTrue(expr.right.is_assignment)
        self.assertEqual(expr.right.left.name, "b")

    def test_assignment_takes_whole_right_side(self):
        """Everything after '=' belongs to the right operand."""
        expr = self._expression("a = b + c")
        self.assertTrue(expr.is_assignment)
        self.assertEqual(expr.right.operator, TokenType.PLUS)

    def test_unary_and_parentheses(self):
        """Prefix minus nests; parentheses group."""
        expr = self._expression("--(a + 1)")
        self.assertIsInstance(expr, UnaryOp)
        self.assertIsInstance(expr.operand, UnaryOp)
        self.assertIsInstance(expr.operand.operand, BinaryOp)

    def test_index_chain_is_left_nested(self):
        """`m[i][j]` is IndexAccess(IndexAccess(m, i), j)."""
        expr = self._expression("m[i][j]")
        self.assertIsInstance(expr, IndexAccess)
        self.assertIsInstance(expr.base, IndexAccess)
        self.assertEqual(expr.base.base.name, "m")
        self.assertEqual(expr.index.name, "j")
        self.assertEqual(expr.root().name, "m")

    def test_call_with_arguments(self):
        """Calls take a comma-separated argument list."""
        expr = self._expression("f(1, x, g())")
        self.assertIsInstance(expr, FunctionCall)
        self.assertEqual(expr.callee, "f")
        self.assertEqual(len(expr.args), 3)
        self.assertIsInstance(expr.args[2], FunctionCall)

    def test_indexed_name_cannot_be_called(self):
        """A call suffix is only accepted when no index suffix preceded it."""
        result = parse_string("void f() { a[1](2); }")
        self.assertEqual(len(result.parse_errors), 1)

    def test_declaration_leaves_structural_tokens(self):
        """A declaration closed by '}' does not consume the brace."""
        program = self._parse("void f() { int a }")
        statements = program.functions[0].body.statements
        self.assertEqual(len(statements), 1)
        self.assertIsInstance(statements[0], DeclarationStatement)

    def test_missing_semicolon_in_declaration(self):
        """Any other follower of a declaration is a syntax error."""
        result = parse_string("int a int b;")
        self.assertGreaterEqual(len(result.parse_errors), 1)
        self.assertEqual(result.parse_errors[0].message,
                         "Missing semicolon at end of variable declaration")
        self.assertEqual(result.parse_errors[0].diagnostic.error_class, "B")

    def test_recovery_keeps_later_function(self):
        """A malformed top-level statement does not hide a following function."""
        result = parse_string("x = 1;\nint main() { return 0; }")
        self.assertEqual(len(result.parse_errors), 1)
        self.assertEqual(result.parse_errors[0].line, 1)
        self.assertEqual([f.name for f in result.program.functions], ["main"])

    def test_recovery_after_broken_function(self):
        """Errors inside one function do not stop the next from parsing."""
        result = parse_string("int f() { return 1 + ; }\nint g() { return 2; }")
        self.assertEqual(len(result.parse_errors), 1)
        self.assertEqual([f.name for f in result.program.functions], ["g"])

    def test_errors_reported_again_after_successful_item(self):
        """Each separate bad region yields its own error."""
        result = parse_string("x; int a; y; int main() { return 0; }")
        self.assertEqual(len(result.parse_errors), 2)
        self.assertEqual(len(result.program.declarations), 1)
        self.assertEqual(len(result.program.functions), 1)

    def test_each_broken_function_reports_its_own_error(self):
        """A new item start ends recovery, so a second broken function is reported too."""
        result = parse_string("int main(){ a b; return 0; }\nint g(){ c d; return 1; }\n")
        self.assertEqual([e.line for e in result.parse_errors], [1, 2])
        self.assertEqual([e.message for e in result.parse_errors],
                         ["Expected ';', found 'b'", "Expected ';', found 'd'"])
        self.assertTrue(all(e.diagnostic.error_class == "B" for e in result.parse_errors))

    def test_recovery_resumes_at_later_function(self):
        """After a broken function a valid one still parses."""
        result = parse_string("int f(){ a b; }\nint g(){ c d; }\nint h() { return 3; }")
        self.assertEqual(len(result.parse_errors), 2)
        self.assertEqual([f.name for f in result.program.functions], ["h"])

    def test_syntax_error_title_from_code_table(self):
        """Syntax diagnostics are named after their code."""
        error = parse_string("int a int b;").parse_errors[0]
        self.assertEqual(error.diagnostic.code, "P003")
        self.assertEqual(error.diagnostic.title, "Missing semicolon")
        self.assertTrue(str(error).startswith("ERROR[B] P003 Missing semicolon: "))

    def test_parser_pulls_from_lexer(self):
        """The parser works directly on a lexer and reports into its own error list."""
        parser = Parser(Lexer("int main() { return 0; }"))
        program = parser.parse()
        self.assertFalse(parser.has_errors())
        self.assertIsInstance(program.functions[0], FunctionDef)
        self.assertEqual(program.functions[0].line, 1)

    def test_nodes_carry_first_token_line(self):
        """Every node records the line of its first token."""
        program = self._parse("int a;\n\nint main() {\n  return\n    a;\n}")
        self.assertEqual(program.declarations[0].line, 1)
        main = program.functions[0]
        self.assertEqual(main.line, 3)
        self.assertEqual(main.body.statements[0].line, 4)
        self.assertEqual(main.body.statements[0].value.line, 5)

    def test_tree_printer(self):
        """The printer emits one indented line per node."""
        program = self._parse("int main() { return 1 + 2; }")
        text = format_tree(program)
        lines = text.splitlines()
        self.assertTrue(lines[0].startswith("Program"))
        self.assertIn("  FunctionDef int main", text)
        self.assertIn("BinaryOp +", text)
        self.assertEqual(len(lines), len(list(program.walk())))


if __name__ == '__main__':
    unittest.main()
