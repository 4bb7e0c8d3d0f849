"""
Expression Evaluator
====================
Turns a sanitised input line into an expression tree and evaluates it.

Pipeline
--------
1. Tokenizer: numbers, parentheses and operator symbols.
2. Parser: recursive descent, one method per precedence level.
3. Tree: small node classes, each knowing how to evaluate itself.

Values are floats, bools (comparisons and logic) or None. None is the value
of an empty group "()" and spreads through every operator except "??".
"""
from __future__ import annotations

import logging
import math
import operator
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Union

from pocketcalc.utils import describe_value

logger = logging.getLogger(__name__)

Value = Union[float, bool, None]

OPERATOR_CHARACTERS = frozenset("+-*/%&|^<>=!~?:")
PREFIX_OPERATORS = frozenset("-!~")

KNOWN_OPERATORS = frozenset({
    "+", "-", "*", "/", "%", "**",
    "&", "|", "^", "<<", ">>",
    "==", "!=", ">", ">=", "<", "<=",
    "&&", "||",
    "?", ":", "??",
    "!", "~",
})

MAX_NESTING = 32


class ExpressionError(Exception):
    """Base class for everything the evaluator can reject."""


class ParseError(ExpressionError):
    """The text could not be turned into an expression tree."""


class EvaluationError(ExpressionError):
    """The tree was built but could not be computed."""


# ---- tokens ----

class TokenKind(Enum):
    NUMBER = auto()
    OPERATOR = auto()
    OPEN = auto()
    CLOSE = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int


def _split_operator_run(run: str, position: int) -> list[Token]:
    """
    Split a run of operator characters into known operators.

    The whole run may be one operator ("<="), or one operator followed by
    prefix operators ("*-", ">=-", "--"). Anything else is an invalid token.
    """
    if run in KNOWN_OPERATORS:
        return [Token(TokenKind.OPERATOR, run, position)]

    for cut in range(len(run) - 1, 0, -1):
        head, tail = run[:cut], run[cut:]
        if head in KNOWN_OPERATORS and all(c in PREFIX_OPERATORS for c in tail):
            tokens = [Token(TokenKind.OPERATOR, head, position)]
            tokens += [
                Token(TokenKind.OPERATOR, c, position + cut + offset)
                for offset, c in enumerate(tail)
            ]
            return tokens

    raise ParseError(f"Invalid token: '{run}'")


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    index = 0
    length = len(text)

    while index < length:
        char = text[index]

        if char.isspace():
            index += 1
            continue

        if char in string.digits or char == ".":
            end = index
            while end < length and (text[end] in string.digits or text[end] == "."):
                end += 1
            tokens.append(Token(TokenKind.NUMBER, text[index:end], index))
            index = end
            continue

        if char == "(":
            tokens.append(Token(TokenKind.OPEN, char, index))
            index += 1
            continue

        if char == ")":
            tokens.append(Token(TokenKind.CLOSE, char, index))
            index += 1
            continue

        if char in OPERATOR_CHARACTERS:
            end = index
            while end < length and text[end] in OPERATOR_CHARACTERS:
                end += 1
            tokens.extend(_split_operator_run(text[index:end], index))
            index = end
            continue

        raise ParseError(f"Invalid token: '{char}'")

    return tokens


# ---- operand checks ----

def _require_number(value: Value, symbol: str) -> float:
    if isinstance(value, bool) or not isinstance(value, float):
        raise EvaluationError(
            f"Value '{describe_value(value)}' cannot be used with the operator '{symbol}', it is not a number"
        )
    return value


def _require_bool(value: Value, symbol: str) -> bool:
    if not isinstance(value, bool):
        raise EvaluationError(
            f"Value '{describe_value(value)}' cannot be used with the operator '{symbol}', it is not a bool"
        )
    return value


def _to_int64(value: float) -> int:
    if not math.isfinite(value):
        raise EvaluationError(f"Value '{describe_value(value)}' cannot be converted to an integer")
    return _wrap_int64(int(value))


def _wrap_int64(value: int) -> int:
    return (value + 2 ** 63) % 2 ** 64 - 2 ** 63


# ---- arithmetic ----

def _divide(left: float, right: float) -> float:
    if right == 0.0:
        raise EvaluationError("Division by zero")
    return left / right


def _modulo(left: float, right: float) -> float:
    if right == 0.0:
        raise EvaluationError("Division by zero")
    return math.fmod(left, right)


def _power(left: float, right: float) -> float:
    try:
        return math.pow(left, right)
    except OverflowError:
        raise EvaluationError("Numeric overflow") from None
    except ValueError:
        raise EvaluationError(
            f"Power '{describe_value(left)} ** {describe_value(right)}' has no real result"
        ) from None


def _shift_left(left: int, right: int) -> int:
    if right < 0:
        raise EvaluationError("Negative shift count")
    return _wrap_int64(left << min(right, 64))


def _shift_right(left: int, right: int) -> int:
    if right < 0:
        raise EvaluationError("Negative shift count")
    return left >> min(right, 64)


ARITHMETIC: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _divide,
    "%": _modulo,
    "**": _power,
}

BITWISE: dict[str, Callable[[int, int], int]] = {
    "&": operator.and_,
    "|": operator.or_,
    "^": operator.xor,
    "<<": _shift_left,
    ">>": _shift_right,
}

ORDERING: dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}

EQUALITY: dict[str, Callable[[Value, Value], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
}


# ---- expression tree ----

class Node:
    """Base class of the expression tree."""

    def evaluate(self) -> Value:
        raise NotImplementedError("`evaluate` must be implemented in subclass.")


@dataclass(frozen=True)
class Number(Node):
    value: float

    def evaluate(self) -> Value:
        return self.value


@dataclass(frozen=True)
class Empty(Node):
    """An empty group "()"."""

    def evaluate(self) -> Value:
        return None


@dataclass(frozen=True)
class Prefix(Node):
    symbol: str
    operand: Node

    def evaluate(self) -> Value:
        value = self.operand.evaluate()
        if value is None:
            return None
        if self.symbol == "-":
            return -_require_number(value, self.symbol)
        if self.symbol == "!":
            return not _require_bool(value, self.symbol)
        if self.symbol == "~":
            return float(~_to_int64(_require_number(value, self.symbol)))
        raise EvaluationError(f"Unknown prefix operator '{self.symbol}'")


@dataclass(frozen=True)
class Binary(Node):
    symbol: str
    left: Node
    right: Node

    def evaluate(self) -> Value:
        # "1+2+3+..." nests to the left; fold the chain in a loop
        chain = [self]
        while isinstance(chain[-1].left, Binary):
            chain.append(chain[-1].left)

        value = chain[-1].left.evaluate()
        for node in reversed(chain):
            value = node._combine(value)
        return value

    def _combine(self, left: Value) -> Value:
        if self.symbol == "??":
            return self.right.evaluate() if left is None else left

        right = self.right.evaluate()
        if left is None or right is None:
            return None

        if self.symbol in ("&&", "||"):
            a = _require_bool(left, self.symbol)
            b = _require_bool(right, self.symbol)
            return (a and b) if self.symbol == "&&" else (a or b)

        if self.symbol in EQUALITY:
            if isinstance(left, bool) != isinstance(right, bool):
                raise EvaluationError(
                    f"Cannot compare '{describe_value(left)}' and '{describe_value(right)}' with '{self.symbol}'"
                )
            return EQUALITY[self.symbol](left, right)

        a = _require_number(left, self.symbol)
        b = _require_number(right, self.symbol)

        if self.symbol in ORDERING:
            return ORDERING[self.symbol](a, b)
        if self.symbol in BITWISE:
            return float(BITWISE[self.symbol](_to_int64(a), _to_int64(b)))
        if self.symbol in ARITHMETIC:
            return ARITHMETIC[self.symbol](a, b)
        raise EvaluationError(f"Unknown operator '{self.symbol}'")


@dataclass(frozen=True)
class Conditional(Node):
    condition: Node
    if_true: Node
    if_false: Node

    def evaluate(self) -> Value:
        value = self.condition.evaluate()
        if value is None:
            return None
        if _require_bool(value, "?"):
            return self.if_true.evaluate()
        return self.if_false.evaluate()


# ---- parser ----

class _Parser:
    """Recursive descent, lowest precedence first."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._index = 0
        self._depth = 0

    def parse(self) -> Node:
        node = self._ternary()
        token = self._peek()
        if token is not None:
            raise ParseError(f"Unexpected token '{token.text}'")
        return node

    # ---- token helpers ----

    def _peek(self) -> Optional[Token]:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise ParseError("Unexpected end of expression")
        self._index += 1
        return token

    def _match(self, *symbols: str) -> Optional[str]:
        token = self._peek()
        if token is not None and token.kind is TokenKind.OPERATOR and token.text in symbols:
            self._index += 1
            return token.text
        return None

    def _binary_level(self, operand: Callable[[], Node], *symbols: str) -> Node:
        node = operand()
        while (symbol := self._match(*symbols)) is not None:
            node = Binary(symbol, node, operand())
        return node

    # ---- precedence levels ----

    def _ternary(self) -> Node:
        node = self._logical_or()
        if self._match("?"):
            if_true = self._ternary()
            if_false: Node = self._ternary() if self._match(":") else Empty()
            return Conditional(node, if_true, if_false)
        if self._match("??"):
            return Binary("??", node, self._ternary())
        return node

    def _logical_or(self) -> Node:
        return self._binary_level(self._logical_and, "||")

    def _logical_and(self) -> Node:
        return self._binary_level(self._comparison, "&&")

    def _comparison(self) -> Node:
        return self._binary_level(self._bitwise, "==", "!=", ">", ">=", "<", "<=")

    def _bitwise(self) -> Node:
        return self._binary_level(self._shift, "&", "|", "^")

    def _shift(self) -> Node:
        return self._binary_level(self._additive, "<<", ">>")

    def _additive(self) -> Node:
        return self._binary_level(self._multiplicative, "+", "-")

    def _multiplicative(self) -> Node:
        node = self._prefix()
        while True:
            symbol = self._match("*", "/", "%")
            if symbol is not None:
                node = Binary(symbol, node, self._prefix())
            elif self._implicit_multiplication():
                node = Binary("*", node, self._prefix())
            else:
                return node

    def _implicit_multiplication(self) -> bool:
        # only right after a group: "()9", "(2)3", "(2)(3)"; "2(3)" stays an error
        token = self._peek()
        if token is None or self._index == 0:
            return False
        previous = self._tokens[self._index - 1]
        return previous.kind is TokenKind.CLOSE and token.kind in (TokenKind.NUMBER, TokenKind.OPEN)

    def _prefix(self) -> Node:
        symbol = self._match("-", "!", "~")
        if symbol is not None:
            return Prefix(symbol, self._nested(self._prefix))
        return self._exponent()

    def _exponent(self) -> Node:
        node = self._primary()
        if self._match("**"):
            return Binary("**", node, self._nested(self._prefix))
        return node

    def _primary(self) -> Node:
        token = self._next()

        if token.kind is TokenKind.NUMBER:
            try:
                return Number(float(token.text))
            except ValueError:
                raise ParseError(f"Unable to parse numeric value '{token.text}'") from None

        if token.kind is TokenKind.OPEN:
            following = self._peek()
            if following is not None and following.kind is TokenKind.CLOSE:
                self._index += 1
                return Empty()
            node = self._nested(self._ternary)
            closing = self._peek()
            if closing is None or closing.kind is not TokenKind.CLOSE:
                raise ParseError("Unbalanced parenthesis")
            self._index += 1
            return node

        raise ParseError(f"Unexpected token '{token.text}'")

    def _nested(self, rule: Callable[[], Node]) -> Node:
        self._depth += 1
        if self._depth > MAX_NESTING:
            raise ParseError("Expression is nested too deeply")
        try:
            return rule()
        finally:
            self._depth -= 1


class Expression:
    """A parsed expression, ready to be evaluated."""

    def __init__(self, source: str, root: Node) -> None:
        self.source = source
        self.root = root

    def evaluate(self) -> Value:
        """
        Compute the expression.

        Returns:
            A float for arithmetic, a bool for comparisons and logic, or None
            when the expression has no value.

        Raises:
            EvaluationError: On type mismatches, division by zero and
                results outside the real numbers.
        """
        try:
            result = self.root.evaluate()
        except RecursionError:
            raise EvaluationError("Expression is nested too deeply") from None
        logger.debug(f"Evaluated '{self.source}' -> {describe_value(result)}")
        return result

    def __repr__(self) -> str:
        return f"Expression({self.source!r})"


def parse(text: str) -> Expression:
    """
    Parse a sanitised expression.

    Raises:
        ParseError: For unknown tokens, unbalanced parentheses and incomplete
            expressions such as "1+" or "".
    """
    tokens = tokenize(text)
    try:
        root = _Parser(tokens).parse()
    except RecursionError:
        raise ParseError("Expression is nested too deeply") from None
    return Expression(text, root)
