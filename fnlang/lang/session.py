"""Session control for fnlang. Reads and parses programs, then evaluates them, either in command-line mode or file
interpretation mode.
"""

from collections import Counter
from dataclasses import dataclass

from fnlang.lang import numerical
from fnlang.lang.error import GenericException
from fnlang.lang.evaluator import evaluate
from fnlang.lang.lexical import FunctionDef, LetBinding, parse


@dataclass
class Result:
    """Syntax tree of a program along with its value."""
    tree: object
    value: float

    def __str__(self):
        return f"ast: {self.tree!r}\neval: {numerical.display(self.value)}"


class Session:
    """Governs a fnlang session: programs are parsed when added and evaluated when run."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.to_run = []   # list of (source, syntax tree) to evaluate
        self.results = []  # list of Results, in the order they were run

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except (OSError, UnicodeDecodeError):
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.add(source)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, add_to_prev=""):
        """Preprocesses a line from the command-line. add_to_prev holds previous lines of an unfinished program.
        Returns updated value of line and whether or not the program continues on the next line: it does after a
        trailing ';' (a declaration needs something to declare over) or while parentheses are unclosed.
        """
        line = f"{add_to_prev}\n{line}" if add_to_prev else line
        stripped = line.rstrip()
        return stripped, stripped.endswith(";") or stripped.count("(") > stripped.count(")")

    def add(self, source):
        """Parses source and queues it to be run. Evaluation is delayed until run is called."""
        self.error_handler.register_source(self.path, source)  # in case error is raised

        tree = parse(source)
        self._check_params(tree)
        self.to_run.append((source, tree))

        self.error_handler.remove_source(self.path)  # error was not raised

    def _check_params(self, tree):
        """Warns about functions that declare the same parameter more than once. Such functions are still accepted:
        the last parameter with a given name shadows the others.
        """
        while isinstance(tree, (LetBinding, FunctionDef)):
            if isinstance(tree, FunctionDef):
                for param, count in Counter(tree.params).items():
                    if count > 1:
                        msg = "function '{}' declares parameter '{}' more than once: the last one wins"
                        self.error_handler.warn(msg, [tree.name, param], diagnosis=False)
            tree = tree.continuation

    def run(self):
        """Evaluates this session's queued programs. Will raise any errors that are encountered."""
        while self.to_run:
            source, tree = self.to_run.pop(0)
            self.error_handler.register_source(self.path, source)

            self.results.append(Result(tree, evaluate(tree)))

            self.error_handler.remove_source(self.path)

    def pop(self):
        """Returns and removes latest result."""
        return self.results.pop()
