"""
Test suite for the VSL lexer.

Tests cover:
- Keyword and identifier recognition
- Number literals, including malformed ones
- The ':=' operator and single-character tokens
- Source locations and end-of-input handling

Author: xwest
"""

import io
import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from vsl.lexer import Lexer, TokenType, LexerError, tokenize_string, tokenize_file


class TestLexer(unittest.TestCase):
    """Test cases for the lexer."""

    def _types(self, source: str):
        return [token.type for token in tokenize_string(source)]

    def test_empty_input(self):
        """Empty and blank input produce only EOF."""
        self.assertEqual(self._types(""), [TokenType.EOF])
        self.assertEqual(self._types("  \n\t  "), [TokenType.EOF])

    def test_eof_is_sticky(self):
        """Reading past the end keeps returning EOF."""
        lexer = Lexer("x")
        self.assertEqual(lexer.next_token().type, TokenType.IDENTIFIER)
        for _ in range(3):
            self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_keywords(self):
        """All keywords are recognized."""
        source = "FUNC RETURN IF THEN ELSE FI DO WHILE DONE CONTINUE PRINT VAR"
        self.assertEqual(self._types(source), [
            TokenType.FUNC, TokenType.RETURN, TokenType.IF, TokenType.THEN,
            TokenType.ELSE, TokenType.FI, TokenType.DO, TokenType.WHILE,
            TokenType.DONE, TokenType.CONTINUE, TokenType.PRINT, TokenType.VAR,
            TokenType.EOF,
        ])

    def test_keywords_are_case_sensitive(self):
        """Lower-case keyword spellings are plain identifiers."""
        tokens = tokenize_string("if Then func")
        self.assertTrue(all(t.type == TokenType.IDENTIFIER for t in tokens[:-1]))
        self.assertEqual([t.value for t in tokens[:-1]], ["if", "Then", "func"])

    def test_identifiers(self):
        """Identifiers start with a letter and continue with letters or digits."""
        tokens = tokenize_string("abc x1y2 FUNCTION")
        self.assertEqual([(t.type, t.value) for t in tokens[:-1]], [
            (TokenType.IDENTIFIER, "abc"),
            (TokenType.IDENTIFIER, "x1y2"),
            (TokenType.IDENTIFIER, "FUNCTION"),
        ])

    def test_identifier_stops_at_underscore(self):
        """Underscore is not part of an identifier."""
        tokens = tokenize_string("a_b")
        self.assertEqual(tokens[0].value, "a")
        self.assertTrue(tokens[1].is_char("_"))
        self.assertEqual(tokens[2].value, "b")

    def test_numbers(self):
        """Numbers are floating point."""
        tokens = tokenize_string("42 3.14 .5 7.")
        self.assertEqual([t.type for t in tokens[:-1]], [TokenType.NUMBER] * 4)
        self.assertEqual([t.value for t in tokens[:-1]], [42.0, 3.14, 0.5, 7.0])
        self.assertEqual(tokens[1].lexeme, "3.14")

    def test_number_followed_by_identifier(self):
        """A digit run ends at the first letter."""
        tokens = tokenize_string("12ab")
        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        self.assertEqual(tokens[0].value, 12.0)
        self.assertEqual(tokens[1].value, "ab")

    def test_number_with_two_dots_is_an_error(self):
        """Malformed numbers are reported instead of silently truncated."""
        lexer = Lexer("1.2.3 + 4")
        with self.assertRaises(LexerError) as ctx:
            lexer.next_token()
        self.assertEqual(ctx.exception.diagnostic.code, "L003")
        self.assertIn("1.2.3", str(ctx.exception))

        # The malformed run was consumed; lexing resumes after it
        self.assertTrue(lexer.next_token().is_char("+"))
        self.assertEqual(lexer.next_token().value, 4.0)

    def test_lone_dot_is_an_error(self):
        """A dot without digits is not a number."""
        with self.assertRaises(LexerError):
            Lexer(".").next_token()

    def test_tokenize_collects_errors(self):
        """tokenize() records every malformed literal and raises the first."""
        lexer = Lexer("1..2 x 3..4")
        with self.assertRaises(LexerError) as ctx:
            lexer.tokenize()
        self.assertEqual(len(lexer.errors), 2)
        self.assertIs(ctx.exception, lexer.errors[0])

    def test_assign_operator(self):
        """':=' is a single token, a lone ':' is a character."""
        tokens = tokenize_string("x := 1")
        self.assertEqual(tokens[1].type, TokenType.ASSIGN)
        self.assertEqual(tokens[1].lexeme, ":=")

        tokens = tokenize_string("a : b")
        self.assertTrue(tokens[1].is_char(":"))
        self.assertEqual(tokens[2].value, "b")

    def test_colon_then_assign(self):
        """'::=' is a colon followed by an assignment operator."""
        tokens = tokenize_string("::=")
        self.assertTrue(tokens[0].is_char(":"))
        self.assertEqual(tokens[1].type, TokenType.ASSIGN)

    def test_assign_without_spaces(self):
        """':=' needs no surrounding whitespace."""
        types = self._types("x:=y")
        self.assertEqual(types, [
            TokenType.IDENTIFIER, TokenType.ASSIGN, TokenType.IDENTIFIER, TokenType.EOF,
        ])

    def test_single_characters(self):
        """Operators and punctuation are single-character tokens."""
        tokens = tokenize_string("+-*<=(),;")
        self.assertEqual([t.value for t in tokens[:-1]], list("+-*<=(),;"))
        self.assertTrue(all(t.type == TokenType.CHAR for t in tokens[:-1]))

    def test_locations(self):
        """Tokens carry 1-based line and column numbers."""
        tokens = tokenize_string("FUNC f(x)\n  x + 1", filename="demo.vsl")
        func, name = tokens[0], tokens[1]
        self.assertEqual((func.location.line, func.location.column), (1, 1))
        self.assertEqual((name.location.line, name.location.column), (1, 6))
        self.assertEqual(func.location.filename, "demo.vsl")

        x = tokens[5]
        self.assertEqual(x.value, "x")
        self.assertEqual((x.location.line, x.location.column), (2, 3))
        self.assertEqual(x.location.offset, 12)
        self.assertEqual(str(x.location), "demo.vsl:2:3")

    def test_reads_from_stream(self):
        """The lexer accepts a text stream."""
        lexer = Lexer(io.StringIO("PRINT 1"))
        self.assertEqual([t.type for t in lexer], [
            TokenType.PRINT, TokenType.NUMBER, TokenType.EOF,
        ])

    def test_tokenize_file(self):
        """tokenize_file reads a source file."""
        with tempfile.NamedTemporaryFile("w", suffix=".vsl", delete=False, encoding="utf-8") as f:
            f.write("VAR x := 2")
            path = f.name
        try:
            tokens = tokenize_file(path)
        finally:
            os.unlink(path)
        self.assertEqual(tokens[0].type, TokenType.VAR)
        self.assertEqual(tokens[0].location.filename, path)
        self.assertEqual(tokens[-1].type, TokenType.EOF)


if __name__ == '__main__':
    unittest.main()
