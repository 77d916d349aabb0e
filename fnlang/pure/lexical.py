"""Arithmetic expression syntax tree and parser.

The `pure` directory contains arithmetic expression parsing only- not sufficient for the fnlang language, which adds
`let`/`fn` declarations on top (see lang/lexical.py).

Formally, expressions can be defined as

```
<expr>    ::= <sum>
<sum>     ::= <product> (("+" | "-") <product>)*      ; associating by left: a - b - c = (a - b) - c
<product> ::= <unary> (("*" | "/") <unary>)*          ; binds tighter than <sum>
<unary>   ::= "-"* <atom>                             ; --x = -(-(x))
<atom>    ::= <number> | "(" <expr> ")" | <call> | <ident>
<call>    ::= <ident> "(" (<expr> ("," <expr>)* ","?)? ")"
<ident>   ::= <letter> (<letter> | <digit> | "_")*    ; except the reserved words "let" and "fn"
<number>  ::= <digit>+
```

Letters and digits are ASCII only. The parser is plain recursive descent, so every level of parenthesis nesting costs
several Python stack frames: somewhere past a hundred nested levels, parsing raises RecursionError.

Whitespace is insignificant around every token. There is no separate tokenizing pass: Scanner recognizes tokens on
demand as the parser asks for them, and supports backtracking so that alternatives can be tried in order. An
identifier followed by a parenthesized argument list is a <call>; if the argument list does not parse, the identifier
is taken as a bare variable.

Error reporting follows the "furthest failure" rule: every failed match records what it expected at its position,
only the furthest position is kept, and a failed parse reports what was found there and everything that was expected.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from fnlang.lang import numerical
from fnlang.lang.error import ParseError


class Operator(Enum):
    """Binary arithmetic operators. The value is the operator's source character."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    def apply(self, left, right):
        if self is Operator.ADD:
            return left + right
        elif self is Operator.SUB:
            return left - right
        elif self is Operator.MUL:
            return left * right
        return numerical.divide(left, right)

    def __repr__(self):
        return self.name.capitalize()


class Expression(ABC):
    """Superclass of every node in a fnlang syntax tree. Nodes are immutable once built and own their children."""

    @property
    @abstractmethod
    def nodes(self):
        """Child nodes, in evaluation order."""

    def _attrs(self):
        """Non-node attributes shown by display."""
        return []

    def display(self, indents=0):
        """Recursively displays syntax tree with readable format.

        Format:
        <Expression>(<attrs>, nodes=[
            <Expression>(<attrs>, nodes=[
                ...
                <Expression>(<attrs>)  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}({', '.join(self._attrs())}"
        if self.nodes:
            result += ", nodes=[" if self._attrs() else "nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __str__(self):
        return self.display()


@dataclass(frozen=True, repr=False)
class Number(Expression):
    value: float

    @property
    def nodes(self):
        return ()

    def _attrs(self):
        return [repr(self.value)]

    def __repr__(self):
        return f"Number({self.value!r})"


@dataclass(frozen=True, repr=False)
class Variable(Expression):
    name: str

    @property
    def nodes(self):
        return ()

    def _attrs(self):
        return [repr(self.name)]

    def __repr__(self):
        return f"Variable({self.name!r})"


@dataclass(frozen=True, repr=False)
class Negate(Expression):
    operand: Expression

    @property
    def nodes(self):
        return (self.operand,)

    def __repr__(self):
        return f"Negate({self.operand!r})"


@dataclass(frozen=True, repr=False)
class BinaryOp(Expression):
    kind: Operator
    left: Expression
    right: Expression

    @property
    def nodes(self):
        return self.left, self.right

    def _attrs(self):
        return [repr(self.kind)]

    def __repr__(self):
        return f"BinaryOp({self.kind!r}, {self.left!r}, {self.right!r})"


@dataclass(frozen=True, repr=False)
class Call(Expression):
    name: str
    args: Tuple[Expression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def nodes(self):
        return self.args

    def _attrs(self):
        return [repr(self.name)]

    def __repr__(self):
        return f"Call({self.name!r}, {list(self.args)!r})"


class Scanner:
    """Lexical layer: recognizes whitespace, punctuation, keywords, identifiers and numbers directly in the source."""
    WHITESPACE = " \t\r\n"
    KEYWORDS = ("let", "fn")

    def __init__(self, source):
        self.source = source
        self.pos = 0

        self.furthest = 0   # furthest position a match has failed at
        self.expected = []  # labels of everything that was expected at self.furthest

    def mark(self):
        return self.pos

    def reset(self, mark):
        self.pos = mark

    def expect(self, label):
        """Records that label was expected (and not found) at the current position."""
        if self.pos > self.furthest:
            self.furthest = self.pos
            self.expected = [label]
        elif self.pos == self.furthest and label not in self.expected:
            self.expected.append(label)

    def skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos] in Scanner.WHITESPACE:
            self.pos += 1

    def at_end(self):
        """Whether or not only whitespace is left."""
        self.skip_whitespace()
        if self.pos == len(self.source):
            return True
        self.expect("end of input")
        return False

    def literal(self, chars):
        self.skip_whitespace()
        if self.source.startswith(chars, self.pos):
            self.pos += len(chars)
            return True
        self.expect(f"'{chars}'")
        return False

    def _word(self):
        """Reads <letter> (<letter> | <digit> | "_")* at the current position. Returns None if there is no word."""
        start = self.pos
        if self.pos < len(self.source) and self.source[self.pos].isascii() and self.source[self.pos].isalpha():
            self.pos += 1
            while self.pos < len(self.source) and self.source[self.pos].isascii() and (
                    self.source[self.pos].isalnum() or self.source[self.pos] == "_"):
                self.pos += 1
        return self.source[start:self.pos] or None

    def keyword(self, word):
        """Matches word only as a whole identifier: "letx" is not the keyword "let"."""
        self.skip_whitespace()
        mark = self.pos
        if self._word() == word:
            return True
        self.pos = mark
        self.expect(f"'{word}'")
        return False

    def identifier(self) -> Optional[str]:
        self.skip_whitespace()
        mark = self.pos
        word = self._word()
        if word is None or word in Scanner.KEYWORDS:
            self.pos = mark
            self.expect("identifier")
            return None
        return word

    def number(self) -> Optional[float]:
        self.skip_whitespace()
        start = self.pos
        while self.pos < len(self.source) and "0" <= self.source[self.pos] <= "9":
            self.pos += 1
        if self.pos == start:
            self.expect("number")
            return None
        return numerical.number(self.source[start:self.pos])

    def error(self):
        """Returns ParseError describing the furthest failure."""
        if self.furthest < len(self.source):
            found = repr(self.source[self.furthest])
            end = self.furthest + 1
        else:
            found = "end of input"
            end = self.furthest

        if not self.expected:
            return ParseError("found unexpected {}", found, self.furthest, end)
        elif len(self.expected) == 1:
            return ParseError("found {} but expected {}", [found, self.expected[0]], self.furthest, end)
        return ParseError("found {} but expected one of {}", [found, ", ".join(self.expected)], self.furthest, end)


class ExpressionParser:
    """Recursive descent parser for <expr>. Every rule returns an Expression, or None if it does not match- in which
    case the scanner is left where the rule started.
    """
    SUM = (Operator.ADD, Operator.SUB)
    PRODUCT = (Operator.MUL, Operator.DIV)

    def __init__(self, source):
        self.scanner = Scanner(source)

    def expression(self):
        return self.sum()

    def sum(self):
        return self._fold(self.product, ExpressionParser.SUM)

    def product(self):
        return self._fold(self.unary, ExpressionParser.PRODUCT)

    def _fold(self, operand, operators):
        """Parses operand (operator operand)* and folds the result to the left."""
        left = operand()
        if left is None:
            return None

        while True:
            mark = self.scanner.mark()
            kind = next((op for op in operators if self.scanner.literal(op.value)), None)
            if kind is None:
                return left

            right = operand()
            if right is None:
                self.scanner.reset(mark)  # the operator belongs to whatever comes next
                return left
            left = BinaryOp(kind, left, right)

    def unary(self):
        mark = self.scanner.mark()
        negations = 0
        while self.scanner.literal("-"):
            negations += 1

        operand = self.atom()
        if operand is None:
            self.scanner.reset(mark)
            return None

        for __ in range(negations):
            operand = Negate(operand)
        return operand

    def atom(self):
        """Tries each alternative in order and commits to the first that matches."""
        for alternative in (self.number, self.parenthesized, self.call, self.variable):
            mark = self.scanner.mark()
            node = alternative()
            if node is not None:
                return node
            self.scanner.reset(mark)
        return None

    def number(self):
        value = self.scanner.number()
        return None if value is None else Number(value)

    def parenthesized(self):
        if not self.scanner.literal("("):
            return None
        node = self.expression()
        if node is None or not self.scanner.literal(")"):
            return None
        return node

    def call(self):
        name = self.scanner.identifier()
        if name is None or not self.scanner.literal("("):
            return None

        args = []
        while True:
            mark = self.scanner.mark()
            arg = self.expression()
            if arg is None:
                self.scanner.reset(mark)
                break
            args.append(arg)
            if not self.scanner.literal(","):
                break

        if not self.scanner.literal(")"):
            return None
        return Call(name, args)

    def variable(self):
        name = self.scanner.identifier()
        return None if name is None else Variable(name)
