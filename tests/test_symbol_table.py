"""
Test suite for the scoped symbol table.
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from sysyc.analyzer.symbol_table import SymbolTable, Symbol, SymbolKind, ScopeKind
from sysyc.parser.ast_nodes import DataType


def _variable(name: str, data_type: DataType = DataType.INT) -> Symbol:
    return Symbol(name=name, kind=SymbolKind.VARIABLE, symbol_type=data_type)


class TestSymbolTable(unittest.TestCase):
    """Test cases for scope management and lookup."""

    def setUp(self):
        """Set up test fixtures."""
        self.table = SymbolTable()

    def test_starts_with_global_scope(self):
        """A new table holds exactly the global scope."""
        self.assertEqual(self.table.depth, 1)
        self.assertEqual(self.table.current_scope.kind, ScopeKind.GLOBAL)

    def test_global_scope_cannot_be_popped(self):
        """Exiting the global scope is a programming error."""
        with self.assertRaises(RuntimeError):
            self.table.exit_scope()

        self.table.enter_scope()
        self.table.exit_scope()
        with self.assertRaises(RuntimeError):
            self.table.exit_scope()

    def test_insert_rejects_duplicate_in_same_scope(self):
        """The second insert fails and the first entry is kept."""
        self.assertTrue(self.table.insert("a", _variable("a", DataType.INT)))
        self.assertFalse(self.table.insert("a", _variable("a", DataType.FLOAT)))
        self.assertEqual(self.table.lookup("a").symbol_type, DataType.INT)

    def test_shadowing_and_restoration(self):
        """An inner name hides the outer one until its scope is exited."""
        self.table.insert("x", _variable("x", DataType.INT))
        self.table.enter_scope()
        self.assertTrue(self.table.insert("x", _variable("x", DataType.FLOAT)))
        self.assertEqual(self.table.lookup("x").symbol_type, DataType.FLOAT)

        self.table.exit_scope()
        self.assertEqual(self.table.lookup("x").symbol_type, DataType.INT)

    def test_inner_names_invisible_after_exit(self):
        """A name declared in an inner scope disappears with it."""
        self.table.enter_scope(ScopeKind.FUNCTION, "f")
        self.table.enter_scope()
        self.table.insert("tmp", _variable("tmp"))
        self.assertIsNotNone(self.table.lookup("tmp"))
        self.table.exit_scope()
        self.assertIsNone(self.table.lookup("tmp"))
        self.table.exit_scope()
        self.assertEqual(self.table.depth, 1)

    def test_lookup_searches_outward(self):
        """lookup finds outer names; lookup_current_scope does not."""
        self.table.insert("g", _variable("g"))
        self.table.enter_scope()
        self.assertIsNotNone(self.table.lookup("g"))
        self.assertIsNone(self.table.lookup_current_scope("g"))
        self.assertIsNone(self.table.lookup("missing"))

    def test_similar_names(self):
        """Close spellings of visible names are offered as suggestions."""
        self.table.insert("counter", _variable("counter"))
        self.table.insert("total", _variable("total"))
        self.assertEqual(self.table.get_similar_names("countr"), ["counter"])
        self.assertEqual(self.table.get_similar_names("zzzzzz"), [])

    def test_function_signature(self):
        """Function symbols print their parameter types."""
        symbol = Symbol(
            name="f", kind=SymbolKind.FUNCTION, symbol_type=DataType.INT,
            param_count=2, param_types=[DataType.INT, DataType.FLOAT]
        )
        self.assertEqual(symbol.signature(), "int f(int, float)")
        self.assertTrue(symbol.is_function)


if __name__ == '__main__':
    unittest.main()
