import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from fnlang.main import main


@mock.patch.dict(os.environ, {"ANSI_COLORS_DISABLED": "1"})
class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def run_file(self, source, *flags):
        """Returns (exit code, stdout) of running source as a file."""
        path = os.path.join(self.tmp.name, "prog.fn")
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)

        output = io.StringIO()
        with redirect_stdout(output):
            try:
                code = main([*flags, path])
            except SystemExit as error:
                code = error.code
        return code, output.getvalue()

    def test_success(self):
        code, output = self.run_file("let x = 5; x + 1\n")
        self.assertEqual(0, code)
        self.assertEqual("ast: LetBinding('x', Number(5.0), BinaryOp(Add, Variable('x'), Number(1.0)))\neval: 6\n",
                         output)

    def test_division_by_zero(self):
        code, output = self.run_file("1/0")
        self.assertEqual(0, code)
        self.assertTrue(output.endswith("eval: inf\n"), output)

    def test_evaluation_error(self):
        code, output = self.run_file("fn add a b = a + b; add(2)")
        self.assertEqual(1, code)
        self.assertEqual("Evaluation error: wrong number of arguments for function `add`: expected 2, found 1\n", output)

    def test_parse_error(self):
        code, output = self.run_file("let x = 5\nx", "--plain")
        self.assertEqual(1, code)
        self.assertEqual("Parse error: found 'x' but expected one of '*', '/', '+', '-', ';'\n", output)

        code, output = self.run_file("let x = 5\nx")
        self.assertEqual(1, code)
        self.assertEqual(os.path.join(self.tmp.name, "prog.fn") + ":2:1: error: found 'x' but expected one of "
                         "'*', '/', '+', '-', ';'\n  x\n  ^\n", output)

    def test_missing_file(self):
        output = io.StringIO()
        with redirect_stdout(output):
            with self.assertRaises(SystemExit) as context:
                main([os.path.join(self.tmp.name, "missing.fn")])
        self.assertEqual(1, context.exception.code)
        self.assertIn("could not be opened", output.getvalue())


if __name__ == '__main__':
    unittest.main()
