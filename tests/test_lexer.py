"""
Test suite for the SysY lexer.

Tests cover:
- Keywords, identifiers, operators and delimiters
- Decimal, octal, hexadecimal and float literals
- Malformed input and recovery
- Comments, line tracking and lookahead
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from sysyc.lexer.lexer import Lexer, tokenize
from sysyc.lexer.tokens import TokenType, TokenCategory


class TestLexer(unittest.TestCase):
    """Test cases for the lexer."""

    def _types(self, source: str):
        return [token.type for token in tokenize(source)]

    def test_keywords_and_type_names(self):
        """Reserved words are reclassified from identifiers."""
        tokens = tokenize("int float void const if else while return main")
        self.assertEqual(
            [t.type for t in tokens],
            [TokenType.INT, TokenType.FLOAT, TokenType.VOID, TokenType.CONST,
             TokenType.IF, TokenType.ELSE, TokenType.WHILE, TokenType.RETURN,
             TokenType.IDENTIFIER, TokenType.EOF]
        )
        self.assertEqual(tokens[0].category, TokenCategory.TYPE_NAME)
        self.assertEqual(tokens[4].category, TokenCategory.KEYWORD)
        self.assertEqual(tokens[8].category, TokenCategory.IDENTIFIER)
        self.assertEqual(tokens[8].value, "main")

    def test_identifiers(self):
        """Identifiers may contain underscores and digits after the first character."""
        tokens = tokenize("_tmp x1 returnValue")
        self.assertEqual([t.value for t in tokens[:-1]], ["_tmp", "x1", "returnValue"])
        self.assertTrue(all(t.type == TokenType.IDENTIFIER for t in tokens[:-1]))

    def test_operators_use_one_character_lookahead(self):
        """Two-character operators win over their one-character prefixes."""
        self.assertEqual(
            self._types("= == < <= > >= != + - * /"),
            [TokenType.ASSIGN, TokenType.EQUAL, TokenType.LESS_THAN, TokenType.LESS_EQUAL,
             TokenType.GREATER_THAN, TokenType.GREATER_EQUAL, TokenType.NOT_EQUAL,
             TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY, TokenType.DIVIDE,
             TokenType.EOF]
        )
        self.assertEqual(
            self._types("a<=b"),
            [TokenType.IDENTIFIER, TokenType.LESS_EQUAL, TokenType.IDENTIFIER, TokenType.EOF]
        )

    def test_delimiters(self):
        """All delimiters produce their own token types."""
        self.assertEqual(
            self._types("( ) [ ] { } ; ,"),
            [TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACKET,
             TokenType.RIGHT_BRACKET, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
             TokenType.SEMICOLON, TokenType.COMMA, TokenType.EOF]
        )

    def test_decimal_octal_and_hex_literals(self):
        """Integer literals in all three bases carry their numeric value."""
        tokens = tokenize("42 0 017 0x1F 0XaB")
        self.assertTrue(all(t.type == TokenType.INTEGER_LITERAL for t in tokens[:-1]))
        self.assertEqual([t.value for t in tokens[:-1]], [42, 0, 15, 31, 171])

    def test_float_literals(self):
        """A dot after a digit run starts a float; fraction digits are optional."""
        tokens = tokenize("3.14 2. 0.5 10.25")
        self.assertTrue(all(t.type == TokenType.FLOAT_LITERAL for t in tokens[:-1]))
        self.assertEqual([t.value for t in tokens[:-1]], [3.14, 2.0, 0.5, 10.25])

    def test_redundant_leading_zero_is_illegal_octal(self):
        """'007' is a single malformed token naming an illegal octal number."""
        tokens = tokenize("007")
        self.assertEqual(len(tokens), 2)
        self.assertEqual(tokens[0].type, TokenType.INVALID)
        self.assertEqual(tokens[0].category, TokenCategory.MALFORMED)
        self.assertEqual(tokens[0].lexeme, "007")
        self.assertIn("illegal octal number", tokens[0].value)
        self.assertEqual(tokens[1].type, TokenType.EOF)

    def test_octal_with_eight_or_nine_is_illegal(self):
        """Digits 8 and 9 inside an octal literal make the whole run malformed."""
        lexer = Lexer("09 ; 0178")
        tokens = lexer.tokenize()
        self.assertEqual(tokens[0].type, TokenType.INVALID)
        self.assertEqual(tokens[0].value, "illegal octal number '09'")
        self.assertEqual(tokens[1].type, TokenType.SEMICOLON)
        self.assertEqual(tokens[2].type, TokenType.INVALID)
        self.assertEqual(tokens[2].lexeme, "0178")
        self.assertEqual(len(lexer.errors), 2)
        self.assertTrue(lexer.has_errors())

    def test_illegal_hexadecimal(self):
        """Missing hex digits or a bad character right after them is malformed."""
        tokens = tokenize("0x; 0x1g 0x")
        self.assertEqual(tokens[0].type, TokenType.INVALID)
        self.assertEqual(tokens[0].value, "illegal hexadecimal number '0x'")
        self.assertEqual(tokens[1].type, TokenType.SEMICOLON)
        self.assertEqual(tokens[2].type, TokenType.INVALID)
        self.assertEqual(tokens[2].value, "illegal hexadecimal number '0x1g'")
        self.assertEqual(tokens[3].type, TokenType.INVALID)
        self.assertEqual(tokens[4].type, TokenType.EOF)

    def test_hex_followed_by_operator_is_valid(self):
        """Operators and delimiters may follow a hex literal directly."""
        self.assertEqual(
            self._types("0x10+1"),
            [TokenType.INTEGER_LITERAL, TokenType.PLUS, TokenType.INTEGER_LITERAL, TokenType.EOF]
        )

    def test_invalid_characters_advance_one_character(self):
        """Unknown characters and a lone '!' become malformed tokens and scanning continues."""
        tokens = tokenize("a % b ! c")
        self.assertEqual(
            [t.type for t in tokens],
            [TokenType.IDENTIFIER, TokenType.INVALID, TokenType.IDENTIFIER,
             TokenType.INVALID, TokenType.IDENTIFIER, TokenType.EOF]
        )
        self.assertEqual(tokens[1].value, "Invalid character '%'")
        self.assertEqual(tokens[3].value, "Invalid character '!'")

    def test_comments_are_skipped(self):
        """Line and block comments never produce tokens."""
        source = "int // trailing comment\n/* block\n comment */ x /* unterminated"
        self.assertEqual(self._types(source), [TokenType.INT, TokenType.IDENTIFIER, TokenType.EOF])

    def test_line_and_column_tracking(self):
        """Newlines increment the line and reset the column."""
        tokens = tokenize("int a;\n  float b;\n/* x\n y */ c")
        self.assertEqual((tokens[0].line, tokens[0].column), (1, 1))
        self.assertEqual((tokens[1].line, tokens[1].column), (1, 5))
        self.assertEqual((tokens[3].line, tokens[3].column), (2, 3))
        self.assertEqual(tokens[6].lexeme, "c")
        self.assertEqual(tokens[6].line, 4)

    def test_eof_is_returned_repeatedly(self):
        """next_token keeps returning EOF at end of input."""
        lexer = Lexer("x")
        self.assertEqual(lexer.next_token().type, TokenType.IDENTIFIER)
        self.assertEqual(lexer.next_token().type, TokenType.EOF)
        self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_peek_does_not_consume(self):
        """peek_token(k) looks ahead without moving the cursor."""
        lexer = Lexer("int main ( )")
        self.assertEqual(lexer.peek_token(0).type, TokenType.INT)
        self.assertEqual(lexer.peek_token(1).type, TokenType.IDENTIFIER)
        self.assertEqual(lexer.peek_token(2).type, TokenType.LEFT_PAREN)
        self.assertEqual(lexer.next_token().type, TokenType.INT)
        self.assertEqual(lexer.peek_token(0).lexeme, "main")
        self.assertEqual(lexer.next_token().lexeme, "main")
        self.assertEqual((lexer.line, lexer.column), (1, 9))

    def test_peek_over_malformed_token_records_no_error(self):
        """Errors seen while peeking are discarded along with the replay."""
        lexer = Lexer("009 x")
        self.assertEqual(lexer.peek_token(0).type, TokenType.INVALID)
        self.assertEqual(lexer.errors, [])
        lexer.next_token()
        self.assertEqual(len(lexer.errors), 1)
        self.assertEqual(lexer.errors[0].diagnostic.error_class, "A")
        self.assertEqual(lexer.errors[0].diagnostic.code, "L002")
        self.assertEqual(lexer.errors[0].diagnostic.title, "Illegal octal number")

    def test_tokenize_is_restartable(self):
        """tokenize() starts over from the beginning on each call."""
        lexer = Lexer("a b")
        first = lexer.tokenize()
        second = lexer.tokenize()
        self.assertEqual([t.lexeme for t in first], [t.lexeme for t in second])


if __name__ == '__main__':
    unittest.main()
