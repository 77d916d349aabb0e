"""Tree-walking evaluation of fnlang syntax trees.

Names are resolved at evaluation time against two stacks, one for variables and one for functions. Lookups scan from
the most recently pushed entry, so newer bindings shadow older ones. Each declaration pushes exactly one entry before
evaluating its continuation and pops it afterwards, whether or not the continuation raised; a call appends its
parameter bindings on top of the variable stack and truncates them off again the same way.

The variable stack is shared by every call, so a function body can read variables bound around the call site that are
not its own parameters (dynamic scoping). Function definitions are only visible inside their declaration's
continuation, which is also where recursive calls live.
"""

from fnlang.lang.error import ArityMismatch, UndefinedFunction, UndefinedVariable
from fnlang.lang.lexical import FunctionDef, LetBinding
from fnlang.pure.lexical import BinaryOp, Call, Negate, Number, Variable


class Evaluator:
    """Evaluates syntax trees. The stacks start empty and are restored to their previous length after every
    evaluate.
    """

    def __init__(self):
        self.variables = []  # (name, value)
        self.functions = []  # (name, params, body)

    def lookup_variable(self, name):
        for var, value in reversed(self.variables):
            if var == name:
                return value
        raise UndefinedVariable(name)

    def lookup_function(self, name):
        for func, params, body in reversed(self.functions):
            if func == name:
                return params, body
        raise UndefinedFunction(name)

    def evaluate(self, node):
        """Returns float value of node. Raises an EvalError for the first failure in evaluation order."""
        if isinstance(node, Number):
            return node.value

        elif isinstance(node, Negate):
            return -self.evaluate(node.operand)

        elif isinstance(node, BinaryOp):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return node.kind.apply(left, right)

        elif isinstance(node, Variable):
            return self.lookup_variable(node.name)

        elif isinstance(node, LetBinding):
            value = self.evaluate(node.value)
            self.variables.append((node.name, value))
            try:
                return self.evaluate(node.continuation)
            finally:
                self.variables.pop()

        elif isinstance(node, FunctionDef):
            self.functions.append((node.name, node.params, node.body))
            try:
                return self.evaluate(node.continuation)
            finally:
                self.functions.pop()

        elif isinstance(node, Call):
            return self.call(node)

        raise TypeError(f"cannot evaluate {type(node).__name__}")

    def call(self, node):
        params, body = self.lookup_function(node.name)
        if len(params) != len(node.args):
            raise ArityMismatch(node.name, len(params), len(node.args))

        # arguments see the caller's bindings only, none of the parameters
        args = [self.evaluate(arg) for arg in node.args]

        depth = len(self.variables)
        self.variables.extend(zip(params, args))
        try:
            return self.evaluate(body)
        finally:
            del self.variables[depth:]


def evaluate(tree):
    """Returns float value of tree, evaluated with fresh scope stacks."""
    return Evaluator().evaluate(tree)
