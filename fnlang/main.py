"""Runs fnlang programs from .fn files, or in command-line mode. Also uses error handling context manager. Called from
the fnlang console script.
"""

import argparse

from fnlang.lang.error import ErrorHandler
from fnlang.lang.shell import Shell
from fnlang.lang.session import Session


def main(argv=None):
    """Runs fnlang interpreter. Called from fnlang console script."""
    parser = argparse.ArgumentParser(prog="fnlang")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--plain", action="store_true", help="print one line per error instead of diagnostics")
    args = parser.parse_args(argv)

    with ErrorHandler(plain=args.plain) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)
            sess.run()

            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
