"""Handles interactive/command-line mode for fnlang interpreter. Uses cmd as backend."""

import cmd

from fnlang.lang.session import Session


class Shell(cmd.Cmd):
    """fnlang interpreter shell."""
    intro = "fnlang interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary fnlang program."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not line.strip():
                return

            self.sess.add(line)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop())

    def do_tree(self, arg):
        """Prints the syntax tree of a one-line program, indented, without evaluating it."""
        with self.sess.error_handler:
            self.sess.add(arg)
            __, tree = self.sess.to_run.pop()
            print(tree.display())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the fnlang interpreter!\n\n"
              "A program is a chain of declarations followed by one arithmetic expression, whose \n"
              "value is printed. Try 'let x = 5; x + 1', or define a function with \n"
              "'fn add a b = a + b; add(2, 3)'. A line ending in ';' continues on the next line.\n"
              "'tree <program>' prints the syntax tree of a program without running it.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
