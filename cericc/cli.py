"""Command line entry point: compile a source file to assembly on stdout."""

from __future__ import annotations

import sys

from .compiler import Compiler
from .expressions import CompileError


def main(argv: list[str] | None = None) -> int:
    """Compile the file named on the command line; return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Usage: cericc <fichier_source>", file=sys.stderr)
        return 1
    path = args[0]
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError:
        print(f"Erreur ouverture fichier : {path}", file=sys.stderr)
        return 1

    compiler = Compiler(text)
    try:
        compiler.compile()
    except CompileError as error:
        sys.stdout.write(compiler.assembly())
        print(error, file=sys.stderr)
        return 255
    sys.stdout.write(compiler.assembly())
    return 0


if __name__ == "__main__":
    sys.exit(main())