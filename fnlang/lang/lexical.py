"""Lexical analysis for fnlang, a thin layer of declarations around pure arithmetic expressions. Note that this module
does not provide input file reading (see session.py), but rather parsing of arbitrary program strings.

All grammar can be loosely defined as follows:

```
<program>  ::= <decl>
<decl>     ::= <let_decl> | <fn_decl> | <expr>              ; see pure/lexical.py for <expr>
<let_decl> ::= "let" <ident> "=" <expr> ";" <decl>           ; binds <ident> over the rest of the program
<fn_decl>  ::= "fn" <ident> <ident>* "=" <expr> ";" <decl>   ; defines function <ident> over the rest of the program
```

A program is therefore a chain of zero or more declarations ending in one expression, whose value is the value of
the program. The whole source must be consumed.
"""

from dataclasses import dataclass
from typing import Tuple

from fnlang.lang.error import ParseFailure
from fnlang.pure.lexical import Expression, ExpressionParser


@dataclass(frozen=True, repr=False)
class LetBinding(Expression):
    """`let name = value; continuation`"""
    name: str
    value: Expression
    continuation: Expression

    @property
    def nodes(self):
        return self.value, self.continuation

    def _attrs(self):
        return [repr(self.name)]

    def __repr__(self):
        return f"LetBinding({self.name!r}, {self.value!r}, {self.continuation!r})"


@dataclass(frozen=True, repr=False)
class FunctionDef(Expression):
    """`fn name params... = body; continuation`. params may contain duplicates."""
    name: str
    params: Tuple[str, ...]
    body: Expression
    continuation: Expression

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(self.params))

    @property
    def nodes(self):
        return self.body, self.continuation

    def _attrs(self):
        return [repr(self.name), repr(list(self.params))]

    def __repr__(self):
        return f"FunctionDef({self.name!r}, {list(self.params)!r}, {self.body!r}, {self.continuation!r})"


class Parser(ExpressionParser):
    """Parses a whole fnlang program."""

    def program(self):
        """Returns syntax tree of the program. Raises ParseFailure if the source is not a valid program."""
        tree = self.declaration()
        if tree is None or not self.scanner.at_end():
            raise ParseFailure([self.scanner.error()])
        return tree

    def declaration(self):
        """Keyword declarations are tried before falling through to a plain expression."""
        for alternative in (self.let_declaration, self.fn_declaration, self.expression):
            mark = self.scanner.mark()
            node = alternative()
            if node is not None:
                return node
            self.scanner.reset(mark)
        return None

    def let_declaration(self):
        if not self.scanner.keyword("let"):
            return None

        name = self.scanner.identifier()
        if name is None or not self.scanner.literal("="):
            return None

        value = self.expression()
        if value is None or not self.scanner.literal(";"):
            return None

        continuation = self.declaration()
        if continuation is None:
            return None
        return LetBinding(name, value, continuation)

    def fn_declaration(self):
        if not self.scanner.keyword("fn"):
            return None

        name = self.scanner.identifier()
        if name is None:
            return None

        params = []
        param = self.scanner.identifier()
        while param is not None:
            params.append(param)
            param = self.scanner.identifier()

        if not self.scanner.literal("="):
            return None

        body = self.expression()
        if body is None or not self.scanner.literal(";"):
            return None

        continuation = self.declaration()
        if continuation is None:
            return None
        return FunctionDef(name, params, body, continuation)


def parse(source):
    """Returns syntax tree of source. Raises ParseFailure listing every syntax error found."""
    return Parser(source).program()
