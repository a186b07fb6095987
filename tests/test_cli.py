"""
Tests for the vslc command-line front end.

Author: xwest
"""

import contextlib
import io
import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from vsl import cli


class TestCli(unittest.TestCase):
    """Test cases for vslc."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def _source(self, code: str) -> str:
        path = os.path.join(self.tmpdir.name, "input.vsl")
        with open(path, "w", encoding="utf-8") as f:
            f.write(code)
        return path

    def _main(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            status = cli.main(list(argv))
        return status, out.getvalue()

    def test_dump_ast(self):
        path = self._source("FUNC sq(x) x * x\nsq(3)\n")
        status, out = self._main("--quiet", "--dump-ast", path)
        self.assertEqual(status, 0)
        self.assertEqual(out.splitlines(), [
            "Function sq(x)",
            "  BinaryOp '*'",
            "    Variable x",
            "    Variable x",
            "Function __anon_expr()",
            "  Call sq/1",
            "    Number 3",
        ])

    def test_tokens(self):
        path = self._source("VAR x := 1")
        status, out = self._main("--quiet", "--tokens", path)
        self.assertEqual(status, 0)
        lines = out.splitlines()
        self.assertEqual(len(lines), 5)
        self.assertTrue(lines[0].endswith("VAR('VAR')"))
        self.assertIn("ASSIGN(':=')", lines[2])
        self.assertTrue(lines[-1].endswith("EOF('')"))

    def test_tokens_with_malformed_number(self):
        path = self._source("1.2.3")
        status, out = self._main("--quiet", "--tokens", path)
        self.assertEqual(status, 1)
        self.assertEqual(len(out.splitlines()), 1)

    def test_syntax_error_sets_exit_status(self):
        path = self._source("foo(1,)")
        status, _ = self._main("--quiet", path)
        self.assertEqual(status, 1)

    def test_precedence_override(self):
        path = self._source("1 + 2 * 3")
        status, out = self._main("--quiet", "--dump-ast", "--precedence", "+=50", path)
        self.assertEqual(status, 0)
        self.assertEqual(out.splitlines()[1], "  BinaryOp '*'")

    def test_precedence_override_for_equals(self):
        table = cli.parse_precedence(["==5", "/=40"], cli.build_arg_parser())
        self.assertEqual(table["="], 5)
        self.assertEqual(table["/"], 40)
        self.assertEqual(table["+"], 20)

    def test_invalid_precedence_argument(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main(["--precedence", "++=3", self._source("1")])
            with self.assertRaises(SystemExit):
                cli.main(["--precedence", "+=high", self._source("1")])

    def test_missing_file(self):
        status, _ = self._main("--quiet", os.path.join(self.tmpdir.name, "missing.vsl"))
        self.assertEqual(status, 2)

    def test_undecodable_file(self):
        path = os.path.join(self.tmpdir.name, "latin1.vsl")
        with open(path, "wb") as f:
            f.write(b"1 + \xff 2")
        status, _ = self._main("--quiet", path)
        self.assertEqual(status, 2)

    def test_dump_long_operator_chain(self):
        path = self._source("1" + " + 1" * 5000)
        status, out = self._main("--quiet", "--dump-ast", path)
        self.assertEqual(status, 0)
        lines = out.splitlines()
        self.assertEqual(len(lines), 1 + 10001)
        self.assertEqual(lines[-1], "  " * 5001 + "Number 1")

    def test_reads_stdin(self):
        stdin = io.StringIO("PRINT 1")
        original = sys.stdin
        sys.stdin = stdin
        try:
            status, out = self._main("--quiet", "--dump-ast")
        finally:
            sys.stdin = original
        self.assertEqual(status, 0)
        self.assertIn("Print", out)


if __name__ == '__main__':
    unittest.main()
