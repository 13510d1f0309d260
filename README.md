# cericc

`cericc` compiles programs written in a small Pascal-like structured language
into 64-bit x86 assembly in GNU (AT&T) syntax. The generated text is meant to
be assembled and linked with a C toolchain into a program that calls `printf`.
`cericc` itself only writes the assembly text; it does not assemble, link or
run anything.

## Installing

```
pip install .
```

## The language

A program has an optional `VAR` declaration part followed by statements and
ends with a dot:

```
VAR a, b : INTEGER;
    c : CHAR
BEGIN
    (* a comment *)
    a := 3;
    b := a * 2 + 1;
    FOR a := 1 TO b DO DISPLAY a;
    c := 'z';
    DISPLAY c
END.
```

- Declarations: `VAR name, name : TYPE; ...` with the types `INTEGER`,
  `BOOLEAN`, `DOUBLE` and `CHAR`. Each variable gets a label in the data
  section (`.quad 0`, `.double 0.0` or `.byte 0`). Declaring a name twice is
  an error. `TRUE` and `FALSE` are predeclared `BOOLEAN` names.
- Statements: assignment (`:=`), `FOR v := e TO e DO …`, `BEGIN … END` blocks
  and `DISPLAY`, separated by `;`.
- `DISPLAY` prints `INTEGER`, `DOUBLE` and `CHAR` values through `printf`;
  any other type is an error.
- Operators: `+ - ||`, `* / % &&`, and the comparisons `== != < > <= >=`,
  whose result is `BOOLEAN`. `||` and `&&` need `BOOLEAN` operands, `*`, `%`
  need `INTEGER`; `/`, `+`, `-` accept `INTEGER` and, except for `*`, `DOUBLE`.
- Character constants are written `'c'`; integer constants are digits.
- Comments are written between `(*` and `*)`.

Both sides of every operator, comparison and assignment must have the same
type.

## Command line

```
cericc program.p > program.s
```

The assembly is written to standard output. Without an argument a usage line
is printed and the exit status is 1; a file that cannot be opened also gives
status 1. On a compilation error the assembly produced so far is written to
standard output, a message is written to standard error and the exit status
is 255. The message has the form

```
Ligne n°<line>, lu : '<lexeme>'(<token number>), mais <reason>
```

## From Python

```python
from cericc.compiler import compile_source

assembly = compile_source("VAR a : INTEGER BEGIN a := 1 + 2; DISPLAY a END.")
print(assembly)
```

- `cericc.compiler.compile_source(source)` returns the assembly text;
  `cericc.compiler.Compiler(source)` does the same through `compile()` and
  keeps what was produced in `assembly()` even after an error.
- Errors raise `cericc.expressions.CompileError`, which carries `message`,
  `line`, `text` and `token`.
- `cericc.lexer.tokenize(source)` returns the list of `Lexeme(token, text,
  line)` values, without the final end-of-input token; `cericc.lexer.Lexer`
  reads them one at a time with `next()`. Token kinds are the
  `cericc.tokens.Token` enumeration, and `cericc.tokens.longest_match(text,
  pos)` gives the lexical rule that wins at a position.
- Characters that no lexical rule accepts (for example `"`) are copied
  unchanged into the output and otherwise ignored.
- Trace messages are sent to the `logging` loggers `cericc.expressions` and
  `cericc.compiler` at debug level.

## What it does not do

- `IF … THEN … ELSE …` and `WHILE … DO …` are recognised, but the lexer
  reports `THEN` and `DO` as plain keywords, which these two statements do
  not accept; they always stop with `THEN attendu` or `DO attendu`.
- Decimal literals such as `1.5` are read as integer constants (the integer
  part is pushed), so a `DOUBLE` value can only come from a `DOUBLE` variable.
- `*` on `DOUBLE` values is rejected.
- The output is not checked by an assembler, and the `BEGIN … END.` form
  produces the `main:` label twice.