import unittest

from fnlang.lang.error import ParseFailure
from fnlang.lang.lexical import FunctionDef, LetBinding, parse
from fnlang.pure.lexical import BinaryOp, Call, Number, Operator, Variable


class ParseTestCase(unittest.TestCase):

    def test_declarations(self):
        cases = {
            "1": Number(1.0),
            "let x = 5; x + 1": LetBinding("x", Number(5.0), BinaryOp(Operator.ADD, Variable("x"), Number(1.0))),
            "fn add a b = a + b; add(2, 3)": FunctionDef(
                "add", ["a", "b"], BinaryOp(Operator.ADD, Variable("a"), Variable("b")),
                Call("add", [Number(2.0), Number(3.0)])
            ),
            "fn one = 1; one()": FunctionDef("one", [], Number(1.0), Call("one", [])),
            "let x = 1; let y = x; fn f a = a; f(y)": LetBinding(
                "x", Number(1.0), LetBinding(
                    "y", Variable("x"), FunctionDef(
                        "f", ["a"], Variable("a"), Call("f", [Variable("y")])
                    )
                )
            ),
            "  let\n x\t=\n1 ;\n x \n": LetBinding("x", Number(1.0), Variable("x")),
            "fn f a a = a; f(1, 2)": FunctionDef("f", ["a", "a"], Variable("a"), Call("f", [Number(1.0), Number(2.0)])),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, parse(case), case)

    def test_keywords(self):
        # keywords are only keywords as whole words
        cases = {
            "letx + 1": BinaryOp(Operator.ADD, Variable("letx"), Number(1.0)),
            "fnord": Variable("fnord"),
            "let fnx = 1; fnx": LetBinding("fnx", Number(1.0), Variable("fnx")),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, parse(case), case)

        should_fail = ["let", "fn", "let let = 1; 2", "fn fn = 1; 2", "let x = 1; let", "fn f let = 1; f(2)", "let + 1"]
        for case in should_fail:
            self.assertRaises(ParseFailure, parse, case)

    def test_invalid(self):
        should_fail = [
            "",
            "   ",
            "(1 + 2",
            "1 + 2)",
            "let x = 5 x",
            "let x = 5;",
            "let x 5; x",
            "fn f a = a f(1)",
            "fn = 1; 2",
            "1; 2",
            "x y",
            "f(1,,2)",
            "été",
            "let x² = 4; x²",
            "fn café a = a; café(1)",
        ]
        for case in should_fail:
            self.assertRaises(ParseFailure, parse, case)

    def test_error_messages(self):
        cases = {
            "1 +": ("found end of input but expected one of '-', number, '(', identifier", (3, 3)),
            "let x = 5 x": ("found 'x' but expected one of '*', '/', '+', '-', ';'", (10, 11)),
            "(1 + 2": ("found end of input but expected one of '*', '/', '+', '-', ')'", (6, 6)),
            "1 2": ("found '2' but expected one of '*', '/', '+', '-', end of input", (2, 3)),
            "let": ("found end of input but expected identifier", (3, 3)),
        }
        for case, (msg, span) in cases.items():
            with self.assertRaises(ParseFailure) as context:
                parse(case)

            errors = context.exception.errors
            self.assertEqual(1, len(errors), case)
            self.assertEqual(msg, errors[0].msg, case)
            self.assertEqual(span, errors[0].span, case)

    def test_trailing_comma(self):
        self.assertEqual(parse("fn f a b = a; f(1,2)"), parse("fn f a b = a; f(1,2,)"))

    def test_repr(self):
        tree = parse("fn add a b = a + b; add(2, 3)")
        expected = ("FunctionDef('add', ['a', 'b'], BinaryOp(Add, Variable('a'), Variable('b')), "
                    "Call('add', [Number(2.0), Number(3.0)]))")
        self.assertEqual(expected, repr(tree))
        self.assertEqual("LetBinding('x', Number(5.0), Variable('x'))", repr(parse("let x = 5; x")))


if __name__ == '__main__':
    unittest.main()
