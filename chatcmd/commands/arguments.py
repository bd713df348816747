"""Command argument kinds and their validators.

An :class:`Argument` is an immutable value. Every configuration call returns
a new argument, so a partially configured argument can be reused as a
template::

    amount = create_argument("number").set_name("amount").integer().positive()
    percent = amount.max(100)
"""

import enum
import math
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import Any

from ..core.errors import ArgumentConfigurationError, ParseError

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
NUMBER_PATTERN = re.compile(r"-?\d+(\.\d+)?", re.ASCII)


class ArgumentKind(enum.Enum):
    STRING = "string"
    NUMBER = "number"
    REST = "rest"


class Case(enum.Enum):
    UPPER = "upper"
    LOWER = "lower"


@dataclass(frozen=True, slots=True)
class StringConstraints:
    pattern: re.Pattern[str] | None = None
    min_length: int | None = None
    max_length: int | None = None
    whitelist: tuple[str, ...] | None = None
    case: Case | None = None


@dataclass(frozen=True, slots=True)
class NumberConstraints:
    minimum: float | None = None
    maximum: float | None = None
    integer: bool = False
    # 1 forces positive, -1 forces negative
    sign: int = 0


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of validating one argument against the remaining input."""

    value: Any = None
    rest: str = ""
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class Argument:
    """A named, typed input slot of a command."""

    kind: ArgumentKind
    constraints: StringConstraints | NumberConstraints
    name: str = "_"
    display: str = "_"
    is_optional: bool = False
    default: Any = None
    display_default: bool = True

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def validate(self, text: str) -> ParseResult:
        """Validate the head of ``text`` and return the value and the unconsumed tail."""
        return _VALIDATORS[self.kind](self, text)

    def manual(self) -> str:
        """Render the argument for usage lines: ``<name>``, ``[name]`` or ``[name=default]``."""
        if not self.is_optional:
            return f"<{self.display}>"
        if self.display_default and self.has_default:
            return f"[{self.display}={self.default}]"
        return f"[{self.display}]"

    def set_name(self, name: str, display: str | None = None) -> "Argument":
        if not isinstance(name, str):
            raise ArgumentConfigurationError("Argument name must be a string")
        if not NAME_PATTERN.match(name):
            raise ArgumentConfigurationError(
                f"Argument name '{name}' should contain only A-z, 0-9 and _ and be at least 1 char long"
            )
        return replace(self, name=name, display=name if display is None else display)

    def optional(self, default: Any = None, display_default: bool = True) -> "Argument":
        return replace(self, is_optional=True, default=default, display_default=display_default)

    # String and rest constraints

    def match(self, pattern: str | re.Pattern[str]) -> "Argument":
        return self._with_text(pattern=re.compile(pattern))

    def whitelist(self, words: str | Iterable[str]) -> "Argument":
        if isinstance(words, str):
            words = (words,)
        current = self._text_constraints().whitelist or ()
        return self._with_text(whitelist=current + tuple(words))

    def upper(self) -> "Argument":
        return self._with_text(case=Case.UPPER)

    def lower(self) -> "Argument":
        return self._with_text(case=Case.LOWER)

    # Number constraints

    def integer(self) -> "Argument":
        return self._with_number(integer=True)

    def positive(self) -> "Argument":
        return self._with_number(sign=1)

    def negative(self) -> "Argument":
        return self._with_number(sign=-1)

    # Shared: length bounds for text, value bounds for numbers

    def min(self, value: float) -> "Argument":
        if self.kind is ArgumentKind.NUMBER:
            return self._with_number(minimum=value)
        return self._with_text(min_length=int(value))

    def max(self, value: float) -> "Argument":
        if self.kind is ArgumentKind.NUMBER:
            return self._with_number(maximum=value)
        return self._with_text(max_length=int(value))

    def _text_constraints(self) -> StringConstraints:
        if not isinstance(self.constraints, StringConstraints):
            raise ArgumentConfigurationError(
                f"Constraint not supported by {self.kind.value} argument '{self.name}'"
            )
        return self.constraints

    def _with_text(self, **changes: Any) -> "Argument":
        return replace(self, constraints=replace(self._text_constraints(), **changes))

    def _with_number(self, **changes: Any) -> "Argument":
        if not isinstance(self.constraints, NumberConstraints):
            raise ArgumentConfigurationError(
                f"Constraint not supported by {self.kind.value} argument '{self.name}'"
            )
        return replace(self, constraints=replace(self.constraints, **changes))

    def _fail(self, message: str) -> ParseResult:
        return ParseResult(error=ParseError(message, self))


def _split_token(text: str) -> tuple[str, str]:
    parts = text.split(maxsplit=1)
    if not parts:
        return "", ""
    return parts[0], parts[1] if len(parts) > 1 else ""


def _check_text(argument: Argument, value: str, rest: str) -> ParseResult:
    constraints = argument.constraints
    if constraints.case is Case.UPPER:
        value = value.upper()
    elif constraints.case is Case.LOWER:
        value = value.lower()

    if constraints.min_length is not None and len(value) < constraints.min_length:
        return argument._fail(
            f"String too short! Expected at least {constraints.min_length} chars, but got {len(value)}"
        )
    if constraints.max_length is not None and len(value) > constraints.max_length:
        return argument._fail(
            f"String too long! Maximum {constraints.max_length} chars allowed, but got {len(value)}"
        )
    if constraints.whitelist is not None and value not in constraints.whitelist:
        return argument._fail(
            f"Invalid input '{value}'. Allowed words: {', '.join(constraints.whitelist)}"
        )
    if constraints.pattern is not None and not constraints.pattern.search(value):
        return argument._fail(
            f"The input '{value}' did not match the expression {constraints.pattern.pattern}"
        )
    return ParseResult(value=value, rest=rest)


def _validate_string(argument: Argument, text: str) -> ParseResult:
    token, rest = _split_token(text)
    return _check_text(argument, token, rest)


def _validate_rest(argument: Argument, text: str) -> ParseResult:
    return _check_text(argument, text, "")


def _validate_number(argument: Argument, text: str) -> ParseResult:
    token, rest = _split_token(text)
    constraints = argument.constraints

    if not NUMBER_PATTERN.fullmatch(token):
        return argument._fail(f'"{token}" is not a valid number')
    number = float(token)
    if not math.isfinite(number):
        return argument._fail(f'"{token}" is not a valid number')

    if constraints.minimum is not None and number < constraints.minimum:
        return argument._fail(f"Number too small! Expected at least {constraints.minimum}, but got {token}")
    if constraints.maximum is not None and number > constraints.maximum:
        return argument._fail(f"Number too large! Expected at most {constraints.maximum}, but got {token}")
    if constraints.integer and not number.is_integer():
        return argument._fail(f"Given number is not an integer! ({token})")
    if constraints.sign > 0 and number <= 0:
        return argument._fail(f"Given number is not positive! ({token})")
    if constraints.sign < 0 and number >= 0:
        return argument._fail(f"Given number is not negative! ({token})")

    if "." not in token:
        value: int | float = int(token)
    elif constraints.integer:
        value = int(number)
    else:
        value = number
    return ParseResult(value=value, rest=rest)


_VALIDATORS: dict[ArgumentKind, Callable[[Argument, str], ParseResult]] = {
    ArgumentKind.STRING: _validate_string,
    ArgumentKind.NUMBER: _validate_number,
    ArgumentKind.REST: _validate_rest,
}


def create_argument(tag: str | ArgumentKind) -> Argument:
    """Create an unconfigured argument of the given type (``string``, ``number`` or ``rest``)."""
    try:
        kind = ArgumentKind(tag)
    except ValueError:
        available = ", ".join(kind.value for kind in ArgumentKind)
        raise ArgumentConfigurationError(
            f"Argument type '{tag}' not supported, available: {available}"
        ) from None

    if kind is ArgumentKind.NUMBER:
        return Argument(kind=kind, constraints=NumberConstraints())
    return Argument(kind=kind, constraints=StringConstraints())


def argument_types() -> dict[str, Argument]:
    """One fresh argument per type, keyed by type tag."""
    return {kind.value: create_argument(kind) for kind in ArgumentKind}
