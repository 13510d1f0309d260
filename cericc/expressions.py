"""Declarations and expressions: type checking and stack-machine code."""

from __future__ import annotations

import io
import logging
import re
import struct
from enum import IntEnum
from typing import NoReturn

from .lexer import Lexeme, Lexer
from .tokens import Token

logger = logging.getLogger(__name__)


class CompileError(Exception):
    """A syntax or type error in the program being compiled."""

    def __init__(self, message: str, line: int, text: str, token: Token) -> None:
        self.message = message
        self.line = line
        self.text = text
        self.token = token
        super().__init__(
            f"Ligne n°{line}, lu : '{text}'({int(token)}), mais {message}"
        )


class Type(IntEnum):
    """Types of values the language knows."""

    UNSIGNED_INT = 0
    BOOLEAN = 1
    DOUBLE = 2
    CHAR = 3


class RelOp(IntEnum):
    """Relational operators."""

    EQU = 0
    DIFF = 1
    INF = 2
    SUP = 3
    INFE = 4
    SUPE = 5
    WTFR = 6


class AddOp(IntEnum):
    """Additive operators."""

    ADD = 0
    SUB = 1
    OR = 2
    WTFA = 3


class MulOp(IntEnum):
    """Multiplicative operators."""

    MUL = 0
    DIV = 1
    MOD = 2
    AND = 3
    WTFM = 4


_RELOPS = {
    "==": RelOp.EQU,
    "!=": RelOp.DIFF,
    "<": RelOp.INF,
    ">": RelOp.SUP,
    "<=": RelOp.INFE,
    ">=": RelOp.SUPE,
}
_ADDOPS = {"+": AddOp.ADD, "-": AddOp.SUB, "||": AddOp.OR}
_MULOPS = {"*": MulOp.MUL, "/": MulOp.DIV, "%": MulOp.MOD, "&&": MulOp.AND}

_JUMPS = {
    RelOp.EQU: ("je", "If equal"),
    RelOp.DIFF: ("jne", "If different"),
    RelOp.SUPE: ("jae", "If above or equal"),
    RelOp.INFE: ("jbe", "If below or equal"),
    RelOp.INF: ("jb", "If below"),
    RelOp.SUP: ("ja", "If above"),
}

_TYPE_NAMES = {
    "BOOLEAN": Type.BOOLEAN,
    "INTEGER": Type.UNSIGNED_INT,
    "DOUBLE": Type.DOUBLE,
    "CHAR": Type.CHAR,
}

_STORAGE = {
    Type.BOOLEAN: ".quad 0",
    Type.UNSIGNED_INT: ".quad 0",
    Type.DOUBLE: ".double 0.0",
    Type.CHAR: ".byte 0",
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_DOUBLE_POP = ("\tfldl (%rsp)", "\taddq $8, %rsp", "\tfldl (%rsp)", "\taddq $8, %rsp")
_DOUBLE_PUSH = ("\tsubq $8, %rsp", "\tfstpl (%rsp)")


def _leading_int(text: str) -> int:
    found = _LEADING_INT.match(text)
    return int(found.group(1)) if found else 0


def _leading_float(text: str) -> float:
    found = _LEADING_FLOAT.match(text)
    return float(found.group(1)) if found else 0.0


class ExpressionParser:
    """Parses declarations and expressions, writing assembly as it goes.

    Every value is left on the machine stack; each parsing method returns
    the type of what it pushed.  Text echoed by the lexer lands in the
    same output as the generated code.
    """

    def __init__(self, source: str) -> None:
        self._output = io.StringIO()
        self.lexer = Lexer(source)
        self.lexer.output = self._output
        self.current: Lexeme = self.lexer.current
        self.declared: dict[str, Type] = {"TRUE": Type.BOOLEAN, "FALSE": Type.BOOLEAN}
        self.tag_number = 0

    def advance(self) -> Lexeme:
        """Read the next lexeme and make it current."""
        self.current = self.lexer.next()
        return self.current

    def emit(self, line: str) -> None:
        """Append one line of assembly."""
        self._output.write(line + "\n")

    def error(self, message: str) -> NoReturn:
        """Raise a CompileError located at the current lexeme."""
        raise CompileError(message, self.lexer.line, self.lexer.text, self.current.token)

    def is_declared(self, name: str) -> bool:
        """Tell whether a variable of that name has been declared."""
        return name in self.declared

    def _next_tag(self) -> int:
        self.tag_number += 1
        return self.tag_number

    def _at_keyword(self, word: str) -> bool:
        return self.current.token is Token.KEYWORD and self.current.text == word

    def declaration_part(self) -> None:
        """Parse ``VAR a, b : TYPE; ...`` and reserve storage for each name."""
        if not self._at_keyword("VAR"):
            self.error("VAR attendu en début de déclaration")
        self.advance()

        while self.current.token is Token.ID:
            names = [self.current.text]
            self.advance()
            while self.current.token is Token.COMMA:
                self.advance()
                if self.current.token is not Token.ID:
                    self.error("Identificateur attendu après ','")
                names.append(self.current.text)
                self.advance()

            if self.current.token is not Token.COLON:
                self.error("':' attendu après liste de variables")
            self.advance()

            if self.current.token is not Token.KEYWORD:
                self.error("Type attendu (BOOLEAN, INTEGER, DOUBLE ou CHAR)")
            var_type = _TYPE_NAMES.get(self.current.text)
            if var_type is None:
                self.error("Type inconnu")
            self.advance()

            for name in names:
                if self.is_declared(name):
                    self.error("Variable déjà déclarée : " + name)
                self.declared[name] = var_type
                self.emit(f"{name}:\t{_STORAGE[var_type]}")

            if self.current.token is Token.SEMICOLON:
                self.advance()
            elif self._at_keyword("BEGIN"):
                break
            else:
                self.error("';' ou 'BEGIN' attendu après déclaration")

    def identifier(self) -> Type:
        """Push a declared variable and return its type."""
        name = self.current.text
        if not self.is_declared(name):
            self.error("Variable non déclarée")
        self.emit(f"\tpush {name}")
        self.advance()
        return self.declared[name]

    def number(self) -> Type:
        """Push an integer constant."""
        self.emit(f"\tpush ${_leading_int(self.current.text)}")
        self.advance()
        return Type.UNSIGNED_INT

    def factor(self) -> Type:
        """Parse a parenthesised expression, a constant or a variable."""
        token = self.current.token
        if token is Token.LPARENT:
            self.advance()
            result = self.expression()
            if self.current.token is not Token.RPARENT:
                self.error("')' était attendu")
            self.advance()
            return result
        if token is Token.NUMBER:
            return self.number()
        if token is Token.DOUBLECONST:
            text = self.current.text
            self.emit(f"DEBUG : doubleconst lu : {text}")
            value = _leading_float(text)
            (bits,) = struct.unpack("<Q", struct.pack("<d", value))
            self.emit(f"\tpush ${bits}\t# empile le flottant {value:g}")
            self.advance()
            return Type.DOUBLE
        if token is Token.CHARCONST:
            char = self.current.text[1]
            self.emit(f"\tpush ${ord(char)}\t# empile le char '{char}'")
            self.advance()
            return Type.CHAR
        if token in (Token.TRUE_CONST, Token.FALSE_CONST):
            self.emit(f"\tpush ${1 if token is Token.TRUE_CONST else 0}")
            self.advance()
            return Type.BOOLEAN
        if token is Token.ID:
            return self.identifier()
        self.error("'(' ou chiffre ou lettre attendue")

    def additive_operator(self) -> AddOp:
        """Consume an additive operator."""
        operator = _ADDOPS.get(self.current.text, AddOp.WTFA)
        self.advance()
        return operator

    def multiplicative_operator(self) -> MulOp:
        """Consume a multiplicative operator."""
        operator = _MULOPS.get(self.current.text, MulOp.WTFM)
        self.advance()
        return operator

    def relational_operator(self) -> RelOp:
        """Consume a relational operator."""
        operator = _RELOPS.get(self.current.text, RelOp.WTFR)
        self.advance()
        return operator

    def term(self) -> Type:
        """Parse factors joined by multiplicative operators."""
        left = self.factor()
        while self.current.token is Token.MULOP:
            operator = self.multiplicative_operator()
            right = self.factor()
            if right != left:
                self.error("types incompatibles dans Term")
            if left is Type.DOUBLE:
                self._double_term(operator)
            else:
                self._integer_term(operator, left)
        return left

    def _double_term(self, operator: MulOp) -> None:
        for line in _DOUBLE_POP:
            self.emit(line)
        if operator is MulOp.MUL:
            self.error("type UNSIGNED_INT attendu pour MUL")
        if operator is MulOp.DIV:
            self.emit("\tfdivp %st(1), %st(0)\t# DIV double")
        else:
            self.error("opérateur multiplicatif non supporté pour double")
        for line in _DOUBLE_PUSH:
            self.emit(line)

    def _integer_term(self, operator: MulOp, operand: Type) -> None:
        self.emit("\tpop %rbx")
        self.emit("\tpop %rax")
        if operator is MulOp.AND:
            if operand is not Type.BOOLEAN:
                self.error("type BOOLEAN attendu pour AND")
            self.emit("\tandq %rbx, %rax\t# AND")
        elif operator is MulOp.MUL:
            if operand is not Type.UNSIGNED_INT:
                self.error("type UNSIGNED_INT attendu pour MUL")
            self.emit("\timulq %rbx, %rax\t# MUL")
        elif operator is MulOp.DIV:
            if operand is not Type.UNSIGNED_INT:
                self.error("type UNSIGNED_INT attendu pour DIV")
            self.emit("\tmovq $0, %rdx")
            self.emit("\tidivq %rbx\t# DIV")
        elif operator is MulOp.MOD:
            if operand is not Type.UNSIGNED_INT:
                self.error("type UNSIGNED_INT attendu pour MOD")
            self.emit("\tmovq $0, %rdx")
            self.emit("\tidivq %rbx\t# MOD")
            self.emit("\tmovq %rdx, %rax")
        else:
            self.error("opérateur multiplicatif inconnu")
        self.emit("\tpush %rax")

    def simple_expression(self) -> Type:
        """Parse terms joined by additive operators."""
        left = self.term()
        while self.current.token is Token.ADDOP:
            operator = self.additive_operator()
            right = self.term()
            if right != left:
                self.error("types incompatibles dans SimpleExpression")
            self.emit("\tpop %rbx")
            self.emit("\tpop %rax")
            double_op = False
            if operator is AddOp.OR:
                if left is not Type.BOOLEAN:
                    self.error("type BOOLEAN attendu pour OR")
                self.emit("\torq %rbx, %rax\t# OR")
            elif operator in (AddOp.ADD, AddOp.SUB):
                name = "ADD" if operator is AddOp.ADD else "SUB"
                if left is Type.UNSIGNED_INT:
                    self.emit(f"\t{name.lower()}q %rbx, %rax\t# {name}")
                elif left is Type.DOUBLE:
                    for line in _DOUBLE_POP:
                        self.emit(line)
                    self.emit(f"\tf{name.lower()}p %st(1), %st(0)\t# {name} double")
                    for line in _DOUBLE_PUSH:
                        self.emit(line)
                    double_op = True
                else:
                    self.error(f"type non supporté pour {name}")
            else:
                self.error("opérateur additif inconnu")
            if not double_op:
                self.emit("\tpush %rax")
        return left

    def expression(self) -> Type:
        """Parse a simple expression, optionally compared with another."""
        logger.debug(
            "Expression : token actuel = %d (%s)", int(self.current.token), self.current.text
        )
        left = self.simple_expression()
        if self.current.token is not Token.RELOP:
            return left
        operator = self.relational_operator()
        right = self.simple_expression()
        if right != left:
            self.error("types incompatibles pour la comparaison")
        self.emit("\tpop %rax")
        self.emit("\tpop %rbx")
        self.emit("\tcmpq %rax, %rbx")
        tag = self._next_tag()
        jump = _JUMPS.get(operator)
        if jump is None:
            self.error("Opérateur de comparaison inconnu")
        instruction, comment = jump
        self.emit(f"\t{instruction} Vrai{tag}\t# {comment}")
        self.emit("\tpush $0\t\t# False")
        self.emit(f"\tjmp Suite{tag}")
        self.emit(f"Vrai{tag}:\tpush $0xFFFFFFFFFFFFFFFF\t\t# True")
        self.emit(f"Suite{tag}:")
        return Type.BOOLEAN

    def assembly(self) -> str:
        """Return all the text produced so far."""
        return self._output.getvalue()