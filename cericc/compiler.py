"""Statements and whole programs: the top of the compiler."""

from __future__ import annotations

import logging

from .expressions import ExpressionParser, Type
from .tokens import Token

logger = logging.getLogger(__name__)

HEADER = "\t\t\t# This code was produced by the CERI Compiler"

_FORMAT_STRINGS = (
    'FormatStringInt:\t.string "%llu\\n"\t# Format pour unsigned int',
    'FormatStringDouble:\t.string "%f\\n"\t# Format pour double',
    'FormatStringChar:\t.string "%c\\n"\t# Format pour char',
)


class Compiler(ExpressionParser):
    """Compiles a whole program to 64-bit x86 assembly (AT&T syntax)."""

    def _expect_keyword(self, word: str, message: str) -> None:
        if not self._at_keyword(word):
            self.error(message)
        self.advance()

    def assignment_statement(self) -> None:
        """Parse ``name := expression`` and store the value."""
        logger.debug(
            "AssignementStatement : token actuel = %d (%s)",
            int(self.current.token), self.current.text,
        )
        if self.current.token is not Token.ID:
            self.error("Identificateur attendu")
        variable = self.current.text
        if not self.is_declared(variable):
            self.error("Variable non déclarée")
        var_type = self.declared[variable]

        self.advance()
        if self.current.token is not Token.ASSIGN:
            self.error("caractères ':=' attendus")
        self.advance()

        expr_type = self.expression()
        logger.debug(
            "Types dans AssignementStatement : varType = %d, exprType = %d",
            int(var_type), int(expr_type),
        )
        if expr_type != var_type:
            self.error("types incompatibles dans l'affectation")

        if var_type is Type.DOUBLE:
            self.emit("\tfldl (%rsp)")
            self.emit("\taddq $8, %rsp")
            self.emit(f"\tfstpl {variable}(%rip)")
        else:
            self.emit("\tpop %rax")
            self.emit(f"\tmovq %rax, {variable}(%rip)")
        self.emit(f"// AssignementStatement: stocke dans {variable}")

    def if_statement(self) -> None:
        """Parse ``IF condition THEN statement [ELSE statement]``."""
        self.advance()
        if self.expression() is not Type.BOOLEAN:
            self.error("Condition IF doit être de type BOOLEAN")
        if self.current.token is not Token.THEN:
            self.error("THEN attendu")
        self.advance()

        tag = self._next_tag()
        self.emit("\tpop %rax")
        self.emit("\tcmpq $0, %rax")
        self.emit(f"\tje Sinon{tag}")
        self.statement()
        self.emit(f"\tjmp FinSi{tag}")
        self.emit(f"Sinon{tag}:")
        if self.current.token is Token.ELSE:
            self.advance()
            self.statement()
        self.emit(f"FinSi{tag}:")

    def while_statement(self) -> None:
        """Parse ``WHILE condition DO statement``."""
        start = self._next_tag()
        end = self._next_tag()
        self.advance()
        self.emit(f"Boucle{start}:")
        if self.expression() is not Type.BOOLEAN:
            self.error("Condition WHILE doit être de type BOOLEAN")
        self.emit("\tpop %rax")
        self.emit("\tcmpq $0, %rax")
        self.emit(f"\tje FinBoucle{end}")
        if self.current.token is not Token.DO:
            self.error("DO attendu")
        self.advance()
        self.statement()
        self.emit(f"\tjmp Boucle{start}")
        self.emit(f"FinBoucle{end}:")

    def for_statement(self) -> None:
        """Parse ``FOR name := start TO limit DO statement``."""
        start = self._next_tag()
        end = self._next_tag()
        self.advance()
        if self.current.token is not Token.ID:
            self.error("Identificateur attendu dans FOR")
        variable = self.current.text
        if not self.is_declared(variable):
            self.error(f"Variable '{variable}' non déclarée")

        self.assignment_statement()
        self._expect_keyword("TO", "TO attendu")
        self.expression()
        self.emit("\tpop %rbx")
        self._expect_keyword("DO", "DO attendu")

        self.emit(f"Boucle{start}:")
        self.emit(f"\tpush {variable}")
        self.emit("\tpop %rax")
        self.emit("\tcmpq %rbx, %rax")
        self.emit(f"\tjg FinBoucle{end}")
        self.statement()
        self.emit(f"\tpush {variable}")
        self.emit("\tpop %rax")
        self.emit("\taddq $1, %rax")
        self.emit("\tpush %rax")
        self.emit(f"\tpop {variable}")
        self.emit(f"\tjmp Boucle{start}")
        self.emit(f"FinBoucle{end}:")

    def block_statement(self) -> None:
        """Parse ``BEGIN statement {; statement} END``."""
        self.advance()
        self.statement()
        while self.current.token is Token.SEMICOLON:
            self.advance()
            if self._at_keyword("END"):
                break
            self.statement()
        self._expect_keyword("END", "END attendu")

    def display_statement(self) -> None:
        """Parse ``DISPLAY expression`` and print the value with printf."""
        self.advance()
        expr_type = self.expression()
        if expr_type is Type.UNSIGNED_INT:
            self.emit("\tpop %rsi")
            self.emit("\tleaq FormatStringInt(%rip), %rdi")
            self.emit("\tmovq $0, %rax")
            self.emit("\tcall printf@PLT")
        elif expr_type is Type.DOUBLE:
            self.emit("\tfldl (%rsp)")
            self.emit("\taddq $8, %rsp")
            self.emit("\tsubq $8, %rsp")
            self.emit("\tfstpl (%rsp)")
            self.emit("\tleaq FormatStringDouble(%rip), %rdi")
            self.emit("\tmovq $1, %rax")
            self.emit("\tcall printf@PLT")
            self.emit("\taddq $8, %rsp")
        elif expr_type is Type.CHAR:
            self.emit("\tpop %rsi")
            self.emit("\tleaq FormatStringChar(%rip), %rdi")
            self.emit("\tmovq $0, %rax")
            self.emit("\tcall printf@PLT")
        else:
            self.error("DISPLAY ne supporte que UNSIGNED_INT, DOUBLE ou CHAR")

    def statement(self) -> None:
        """Parse one statement of any kind."""
        token = self.current.token
        if token is Token.ID:
            self.assignment_statement()
            return
        if token is not Token.KEYWORD:
            self.error("Instruction attendue")
        handlers = {
            "IF": self.if_statement,
            "WHILE": self.while_statement,
            "FOR": self.for_statement,
            "BEGIN": self.block_statement,
            "DISPLAY": self.display_statement,
        }
        word = self.current.text
        handler = handlers.get(word)
        if handler is not None:
            handler()
        elif word == "END":
            self.error("Instruction attendue (pas END)")
        else:
            self.error("Mot clé inconnu")

    def statement_part(self) -> None:
        """Parse the statements of the main program, ended by a dot."""
        self.emit("\t.text")
        self.emit("\t.globl main")
        self.emit("main:")
        self.emit("\tpush %rbp")
        self.emit("\tmovq %rsp, %rbp")

        self.statement()
        while self.current.token is Token.SEMICOLON:
            self.advance()
            if self.current.token is Token.END_TOKEN:
                self.error("Instruction attendue (pas END)")
            if self.current.token is Token.DOT:
                break
            self.statement()

        if self.current.token is not Token.DOT:
            self.error("caractère '.' attendu")
        self.advance()

        self.emit("\tmovq %rbp, %rsp\t# Restore stack pointer")
        self.emit("\tpop %rbp\t# Restore base pointer")
        self.emit("\tret\t# Return from main")

    def program(self) -> None:
        """Parse the data section, the declarations and the statements."""
        self.emit("\t.data")
        self.emit("\t.align 8")
        for line in _FORMAT_STRINGS:
            self.emit(line)

        if self._at_keyword("VAR"):
            self.declaration_part()

        self.emit("\t.text")
        self.emit("\t.globl main")
        self.emit("main:")

        if self.current.token is Token.BEGIN_TOKEN:
            self.block_statement()
            if self.current.token is not Token.DOT:
                self.error("caractère '.' attendu après END")
            self.advance()
        else:
            self.statement_part()

        self.emit("\tmovq %rbp, %rsp\t\t# Restore the position of the stack's top")
        self.emit("\tpop %rbp\t\t\t# Restore old base pointer")
        self.emit("\tret\t\t\t# Return from main function")

    def compile(self) -> str:
        """Compile the whole source and return the assembly text."""
        self.emit(HEADER)
        self.advance()
        self.program()
        self.emit("\tmovq %rbp, %rsp\t\t# Restore the position of the stack's top")
        self.emit("\tret\t\t\t# Return from main function")
        if self.current.token is not Token.FEOF:
            self.error(
                f"Caractères en trop à la fin du programme : [{int(self.current.token)}]"
            )
        return self.assembly()


def compile_source(source: str) -> str:
    """Compile a program text and return its assembly."""
    return Compiler(source).compile()