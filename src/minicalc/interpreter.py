"""Recursive-descent interpreter: parses and evaluates a program in one pass.

Each grammar rule is one method; precedence follows the call chain:

    S -> EOF | R ; S
    R -> PRINT(E) | IF(B) PRINT(E) | IF(B) A | A
    A -> IDENT = E
    B -> E relop E
    E -> M { (+|-) M }
    M -> F { % F }
    F -> U { (*|/) U }
    U -> - U | X
    X -> P [ ** U ]
    P -> ( E ) | D
    D -> IDENT | NUMBER | STRING | SQRT(E)

Errors are collected, never raised: each becomes a labeled entry in
``Interpreter.errors`` and parsing carries on.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from minicalc import values
from minicalc.environment import UNDEFINED, Environment
from minicalc.errors import CompileError, EvalError, LexError, ParseError, ScriptError
from minicalc.scanner import CommentFilter, TokenSource
from minicalc.tokens import RELATIONAL, Token, TokenKind
from minicalc.values import ZERO, Number, Text, Value, ValueDomainError, ValueTypeError

# Reserved variable that accumulates PRINT output
PRINT_BUFFER = "PRINT"

_RELOP_TEXT = {
    TokenKind.EQUALS: "==",
    TokenKind.NOT_EQUALS: "!=",
    TokenKind.LESS_THAN: "<",
    TokenKind.LESS_THAN_OR_EQUALS: "<=",
    TokenKind.GREATER_THAN: ">",
    TokenKind.GREATER_THAN_OR_EQUALS: ">=",
}

TokenSourceFactory = Callable[[str], TokenSource]


class EventSink(Protocol):
    """Observer for effects that take place while a program runs."""

    def on_print(self, value: Value) -> None: ...

    def on_assign(self, identifier: str, value: Value) -> None: ...

    def on_condition(self, condition: bool) -> None: ...


class NullSink:
    def on_print(self, value: Value) -> None:
        pass

    def on_assign(self, identifier: str, value: Value) -> None:
        pass

    def on_condition(self, condition: bool) -> None:
        pass


class Interpreter:
    """An interpreter session whose bindings can persist across programs."""

    def __init__(
        self,
        sink: EventSink | None = None,
        token_source: TokenSourceFactory | None = None,
    ) -> None:
        self.errors: list[ScriptError] = []
        self._sink = sink if sink is not None else NullSink()
        self._token_source = token_source if token_source is not None else CommentFilter.over
        self._environment = Environment.empty()
        self._tokens: TokenSource | None = None
        self._token = Token(TokenKind.EOF, "", 0)

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def environment(self) -> Environment:
        return self._environment

    @environment.setter
    def environment(self, environment: Environment) -> None:
        self._environment = environment

    def define(self, identifier: str, value: Value) -> None:
        self._environment = self._environment.define(identifier, value)

    @property
    def output(self) -> str:
        """Everything printed so far in this session."""
        buffer = self._environment.lookup(PRINT_BUFFER)
        if isinstance(buffer, Text):
            return buffer.value
        return ""

    def compile(self, program: str, keep_bindings: bool = True) -> bool:
        """Run *program*; return True if it added no errors.

        With ``keep_bindings=False`` the session starts again from an empty
        environment.
        """
        if not keep_bindings:
            self._environment = Environment.empty()
        error_count = len(self.errors)
        before = self._environment

        try:
            self._tokens = self._token_source(program)
        except Exception as exc:
            self.errors.append(CompileError("S0", f"could not create tokenizer: {exc}"))
            return False

        try:
            self._advance()
            self._statements()
        except RecursionError:
            self._environment = before
            self.errors.append(
                CompileError("S0", "expression nested too deeply", self._token.offset)
            )
        finally:
            self._tokens = None

        return len(self.errors) == error_count

    # ------------------------------------------------------------------
    # Token navigation
    # ------------------------------------------------------------------

    def _advance(self) -> Token:
        """Move to the next token, reporting and skipping ERROR tokens."""
        assert self._tokens is not None
        previous = self._token
        token = self._tokens.next_token()
        while token.kind is TokenKind.ERROR:
            self.errors.append(LexError("T1", f"invalid token {token.lexeme!r}", token.offset))
            token = self._tokens.next_token()
        self._token = token
        return previous

    def _at(self, *kinds: TokenKind) -> bool:
        return self._token.kind in kinds

    def _accept(self, kind: TokenKind) -> bool:
        if self._token.kind is kind:
            self._advance()
            return True
        return False

    def _syntax_error(self, rule: str, description: str) -> None:
        self.errors.append(ParseError(rule, description, self._token.offset))

    def _eval_error(self, rule: str, description: str, offset: int) -> None:
        self.errors.append(EvalError(rule, description, offset))

    def _skip_statement(self) -> None:
        """Skip to the next semicolon (left unconsumed), or to EOF."""
        while not self._at(TokenKind.SEMICOLON, TokenKind.EOF):
            self._advance()

    def _synchronize(self) -> None:
        """Skip to just past the next semicolon, or to EOF."""
        self._skip_statement()
        self._accept(TokenKind.SEMICOLON)

    def _wrapped(self, open_rule: str, close_rule: str, after: str | None = None) -> Value:
        """Parse ``( E )`` and return the value of E."""
        if not self._accept(TokenKind.LPAREN):
            suffix = f" after {after}" if after else ""
            self._syntax_error(open_rule, f"expected left parenthesis{suffix}")
        result = self._expression()
        if not self._accept(TokenKind.RPAREN):
            suffix = f" after {after}(<expression>" if after else ""
            self._syntax_error(close_rule, f"expected right parenthesis{suffix}")
        return result

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _statements(self) -> None:
        while not self._at(TokenKind.EOF):
            self._statement()
            if not self._accept(TokenKind.SEMICOLON):
                self._syntax_error("S1", "expected semicolon after statement")
                self._synchronize()

    def _statement(self) -> None:
        if self._accept(TokenKind.PRINT):
            self._print(self._wrapped("R1", "R2", "PRINT"))
        elif self._accept(TokenKind.IF):
            self._conditional()
        else:
            self._assignment()

    def _conditional(self) -> None:
        if not self._accept(TokenKind.LPAREN):
            self._syntax_error("R3", "expected left parenthesis after IF")
        condition = self._condition()
        if not self._accept(TokenKind.RPAREN):
            self._syntax_error("R4", "expected right parenthesis after IF(<condition>")
        self._sink.on_condition(condition)

        # The body is always parsed; its effects only stick if the guard held
        if self._accept(TokenKind.PRINT):
            message = self._wrapped("R5", "R6", "PRINT")
            if condition:
                self._print(message)
        else:
            snapshot = self._environment
            self._assignment(notify=condition)
            if not condition:
                self._environment = snapshot

    def _print(self, message: Value) -> None:
        self.define(PRINT_BUFFER, Text(self.output + values.to_text(message)))
        self._sink.on_print(message)

    def _assignment(self, notify: bool = True) -> None:
        if not self._at(TokenKind.IDENT):
            self._syntax_error(
                "A1", "expected an identifier as left value of an assignment statement"
            )
            self._skip_statement()
            return
        identifier = self._advance().lexeme
        if not self._accept(TokenKind.ASSIGNMENT):
            self._syntax_error("A2", "expected an equal sign after variable during assignment")
            self._skip_statement()
            return
        value = self._expression()
        self.define(identifier, value)
        if notify:
            self._sink.on_assign(identifier, value)

    def _condition(self) -> bool:
        lhs = self._expression()
        op = self._token
        if op.kind not in RELATIONAL:
            self._syntax_error("B1", "expected a relational operator")
            return False
        self._advance()
        rhs = self._expression()
        try:
            return values.compare(_RELOP_TEXT[op.kind], lhs, rhs).value
        except ValueTypeError as exc:
            self._eval_error("B2", str(exc), op.offset)
            return False

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expression(self) -> Value:
        result = self._modulo()
        while self._at(TokenKind.PLUS, TokenKind.MINUS):
            op = self._advance()
            rhs = self._modulo()
            if op.kind is TokenKind.PLUS:
                try:
                    result = values.add(result, rhs)
                except ValueDomainError as exc:
                    self._eval_error("E5", str(exc), op.offset)
                    result = ZERO
                continue
            try:
                result = values.subtract(result, rhs)
            except ValueTypeError as exc:
                self._eval_error("E4", str(exc), op.offset)
                result = ZERO
        return result

    def _modulo(self) -> Value:
        result = self._term()
        while self._at(TokenKind.MODULO):
            op = self._advance()
            rhs = self._term()
            try:
                result = values.modulo(result, rhs)
            except ValueTypeError as exc:
                self._eval_error("M3", str(exc), op.offset)
                result = ZERO
            except (ZeroDivisionError, ValueDomainError) as exc:
                self._eval_error("M4", str(exc), op.offset)
                result = ZERO
        return result

    def _term(self) -> Value:
        result = self._unary()
        while self._at(TokenKind.MULT, TokenKind.DIVIDE):
            op = self._advance()
            rhs = self._unary()
            operation = values.multiply if op.kind is TokenKind.MULT else values.divide
            try:
                result = operation(result, rhs)
            except ValueTypeError as exc:
                self._eval_error("F3", str(exc), op.offset)
                result = ZERO
            except (ZeroDivisionError, ValueDomainError) as exc:
                self._eval_error("F4", str(exc), op.offset)
                result = ZERO
        return result

    def _unary(self) -> Value:
        if self._at(TokenKind.MINUS):
            op = self._advance()
            operand = self._unary()
            try:
                return values.negate(operand)
            except ValueTypeError as exc:
                self._eval_error("U3", str(exc), op.offset)
                return ZERO
        return self._exponent()

    def _exponent(self) -> Value:
        base = self._primary()
        if not self._at(TokenKind.EXP):
            return base
        op = self._advance()
        exponent = self._unary()
        try:
            return values.power(base, exponent)
        except ValueTypeError as exc:
            self._eval_error("X3", str(exc), op.offset)
        except (ValueError, OverflowError) as exc:
            self._eval_error("X4", f"invalid exponentiation: {exc}", op.offset)
        return ZERO

    def _primary(self) -> Value:
        if self._at(TokenKind.LPAREN):
            return self._wrapped("P1", "P2")
        return self._atom()

    def _atom(self) -> Value:
        token = self._token
        if token.kind is TokenKind.IDENT:
            self._advance()
            value = self._environment.lookup(token.lexeme)
            return ZERO if value is UNDEFINED else value
        if token.kind is TokenKind.NUMBER:
            self._advance()
            return Number(float(token.lexeme))
        if token.kind is TokenKind.STRING:
            self._advance()
            return Text(token.lexeme[1:-1])
        if token.kind is TokenKind.SQRT:
            self._advance()
            operand = self._wrapped("D1", "D2", "SQRT")
            try:
                return values.square_root(operand)
            except ValueTypeError as exc:
                self._eval_error("D3", str(exc), token.offset)
                return ZERO
        self._syntax_error("D4", "expected variable or literal")
        return ZERO


@dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of interpreting one program in a fresh session."""

    environment: Environment
    output: str
    errors: tuple[ScriptError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors

    def lookup(self, identifier: str) -> Value | None:
        value = self.environment.lookup(identifier)
        return None if value is UNDEFINED else value


def interpret(
    source: str,
    *,
    sink: EventSink | None = None,
    token_source: TokenSourceFactory | None = None,
) -> RunResult:
    """Convenience function: interpret *source* in a new session."""
    interpreter = Interpreter(sink=sink, token_source=token_source)
    interpreter.compile(source)
    return RunResult(interpreter.environment, interpreter.output, tuple(interpreter.errors))
