"""Error handling for fnlang. Only GenericExceptions should be encountered during running: if another type of error
is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors keep their messages as plain text. Highlighting is applied by ErrorHandler when they are displayed, either as
span-highlighted diagnostics or as plain one-line-per-error output.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a fnlang error/warning."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning. Each "{}" in msg is filled with the matching item of exprs."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = list(exprs)
        self.msg = msg.format(*self.exprs)
        self.expr = self.exprs[0] if self.exprs else ""  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def styled(self):
        """Returns self.msg with expr snippets bolded."""
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))


class ParseError(GenericException):
    """Single syntax error. start and end are offsets into the whole program source."""

    def __init__(self, msg, exprs, start, end):
        super().__init__(msg, exprs, start=start, end=end)

    @property
    def span(self):
        return self.start, self.end

    def locate(self, source):
        """Returns (line, line_num, col, end_col) of this error in source. line_num and col are 1-based; end_col is
        clipped to the end of the line so multi-line spans only highlight their first line.
        """
        line_start = source.rfind("\n", 0, self.start) + 1
        line_end = source.find("\n", self.start)
        if line_end == -1:
            line_end = len(source)

        line = source[line_start:line_end]
        col = self.start - line_start
        end_col = min(max(self.end, self.start + 1), line_end) - line_start

        return line, source.count("\n", 0, self.start) + 1, col + 1, end_col


class ParseFailure(GenericException):
    """Raised by the parser. Carries every ParseError collected during one parse attempt."""

    def __init__(self, errors):
        assert errors, "ParseFailure needs at least one error"
        self.errors = list(errors)
        super().__init__("{}", "; ".join(error.msg for error in self.errors), diagnosis=False)


class EvalError(GenericException):
    """Superclass of errors raised while evaluating a syntax tree. The syntax tree carries no positions, so evaluation
    errors are never diagnosed against the source.
    """

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False)


class UndefinedVariable(EvalError):

    def __init__(self, name):
        self.name = name
        super().__init__("cannot find variable `{}` in scope", name)


class UndefinedFunction(EvalError):

    def __init__(self, name):
        self.name = name
        super().__init__("cannot find function `{}` in scope", name)


class ArityMismatch(EvalError):

    def __init__(self, name, expected, found):
        self.name = name
        self.expected = expected
        self.found = found

        msg = "wrong number of arguments for function `{}`: expected {}, found {}"
        super().__init__(msg, [name, str(expected), str(found)])


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom fnlang errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, plain=False):
        self.fatal = fatal
        self.plain = plain      # one line per error, no source diagnosis
        self.traceback = {}     # path: source of the program being run

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = None

    def register_source(self, path, source):
        """Registers program source in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = source

    def remove_source(self, path):
        """Removes source from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = None

    def _current(self):
        """Returns (path, source) of the most recently registered file."""
        if not self.traceback:
            return None, None
        return next(reversed(self.traceback.items()))

    @staticmethod
    def diagnose(error, source, warning=False):
        """Returns the source line containing error with the offending part highlighted, bolded and underlined."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        line, __, col, end = error.locate(source)
        start = col - 1

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        warning = GenericException(*args, **kwargs)
        path, __ = self._current()

        if self.plain:
            print(f"Warning: {warning.msg}")
            return

        warning_msg = colored(f"{path}: ", attrs=["bold"]) if path else ""
        warning_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + warning.styled()
        print(warning_msg)

    def _throw_parse_error(self, error, path, source):
        if self.plain:
            print(f"Parse error: {error.msg}")
            return

        error_msg = ""
        if path and source is not None:
            __, line_num, col, __ = error.locate(source)
            error_msg += colored(f"{path}:{line_num}:{col}: ", attrs=["bold"])
        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.styled()
        print(error_msg)

        if source is not None and error.diagnosis:
            print(ErrorHandler.diagnose(error, source))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and the most recently
        registered source in self.traceback is the program the error originates from.
        """
        path, source = self._current()

        if isinstance(error, ParseFailure):
            for parse_error in error.errors:
                self._throw_parse_error(parse_error, path, source)

        elif isinstance(error, EvalError):
            if self.plain:
                print(f"Evaluation error: {error.msg}")
            else:
                print(colored("Evaluation error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.styled())

        elif self.plain:
            print(f"{'[internal] ' if error.internal else ''}error: {error.msg}")

        else:
            error_msg = colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"]) if error.internal else ""
            error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.styled()
            print(error_msg)

        if self.fatal:
            sys.exit(1)
        self.traceback = {}  # if error occurred, reset traceback (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded", internal=True))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
