"""Core machinery for declaring, validating and reading environment variables."""

from __future__ import annotations

import abc
import enum
import os
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional as _Opt

_MISSING: Any = object()
_SAFE_LITERAL = re.compile(r"[A-Za-z0-9._/:+\-=@,]+")


def _quote(text: str) -> str:
    """Render a literal, quoting it when it holds unusual characters."""
    if _SAFE_LITERAL.fullmatch(text):
        return text
    return "'" + text.replace("'", "\\'") + "'"


def _describe_choices(literals: list[str]) -> str:
    """Describe the accepted literals of a set-like variable."""
    quoted = [_quote(lit) for lit in literals]
    if len(quoted) == 2:
        return f"expected either {quoted[0]} or {quoted[1]}"
    if len(quoted) == 1:
        return f"expected {quoted[0]}"
    return "expected " + ", ".join(quoted[:-1]) + " or " + quoted[-1]


class SpecError(Exception):
    """Raised when a variable's specification is invalid."""

    def __init__(self, name: str, reason: str) -> None:
        if name:
            message = f"specification for {name} is invalid: {reason}"
        else:
            message = f"invalid specification: {reason}"
        super().__init__(message)
        self.name = name
        self.reason = reason


class ValueInvalidError(Exception):
    """Raised when an environment variable holds an invalid value."""

    def __init__(self, name: str, literal: str, reason: str) -> None:
        super().__init__(f"value of {name} ({_quote(literal)}) is invalid: {reason}")
        self.name = name
        self.literal = literal
        self.reason = reason


class UndefinedError(Exception):
    """Raised when a required variable is undefined and has no default."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} is undefined and does not have a default value")
        self.name = name


class Kind(enum.Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    DEPRECATED = "deprecated"


class Availability(enum.Enum):
    OK = "ok"
    UNDEFINED = "undefined"
    INVALID = "invalid"


@dataclass(frozen=True)
class Resolution:
    """The outcome of reading a variable from the environment."""

    availability: Availability
    value: Any = None
    error: _Opt[Exception] = None
    is_default: bool = False


@dataclass(frozen=True)
class Variable:
    """A fully specified environment variable."""

    name: str
    description: str
    kind: Kind
    parse: Callable[[str], Any]
    default: Any = _MISSING
    sensitive: bool = False
    schema: str = ""

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING

    def resolve(self) -> Resolution:
        text = os.environ.get(self.name, "")
        if text == "":
            if self.has_default:
                return Resolution(Availability.OK, self.default, is_default=True)
            return Resolution(Availability.UNDEFINED)
        try:
            value = self.parse(text)
        except ValueError as exc:
            return Resolution(
                Availability.INVALID,
                error=ValueInvalidError(self.name, text, str(exc)),
            )
        return Resolution(Availability.OK, value)


@dataclass
class Registry:
    """A collection of declared variables, keyed by name."""

    _variables: dict[str, Variable] = field(default_factory=dict)

    def register(self, variable: Variable) -> Variable:
        self._variables[variable.name] = variable
        return variable

    def variables(self) -> list[Variable]:
        return sorted(self._variables.values(), key=lambda v: v.name)

    def reset(self) -> None:
        self._variables.clear()


_DEFAULT_REGISTRY = Registry()


def default_registry() -> Registry:
    """Return the process-wide registry."""
    return _DEFAULT_REGISTRY


class Required:
    """A required variable; reading it raises if no value is available."""

    def __init__(self, variable: Variable) -> None:
        self.variable = variable

    def value(self) -> Any:
        res = self.variable.resolve()
        if res.error is not None:
            raise res.error
        if res.availability is Availability.UNDEFINED:
            raise UndefinedError(self.variable.name)
        return res.value


class Optional:
    """An optional variable; reading it yields None when undefined."""

    def __init__(self, variable: Variable) -> None:
        self.variable = variable

    def value(self) -> Any:
        res = self.variable.resolve()
        if res.error is not None:
            raise res.error
        return res.value if res.availability is Availability.OK else None


class Deprecated:
    """A deprecated variable; reading it yields None when undefined."""

    def __init__(self, variable: Variable) -> None:
        self.variable = variable

    def deprecated_value(self) -> Any:
        res = self.variable.resolve()
        if res.error is not None:
            raise res.error
        return res.value if res.availability is Availability.OK else None


class Builder(abc.ABC):
    """Base class for variable builders."""

    def __init__(self, name: str, desc: str) -> None:
        self._name = name
        self._desc = desc
        self._default: Any = _MISSING
        self._constraints: list[Callable[[Any], _Opt[str]]] = []
        self._sensitive = False

    @abc.abstractmethod
    def _unmarshal(self, text: str) -> Any:
        """Parse a literal, raising ValueError with a reason on failure."""

    def _schema(self) -> str:
        return "<string>"

    def _check_schema(self) -> None:
        """Raise ValueError if the schema itself is invalid."""

    def _check_value(self, value: Any) -> None:
        """Raise ValueError if a native value violates the schema."""

    def _add_constraint(self, fn: Callable[[Any], _Opt[str]]) -> None:
        self._constraints.append(fn)

    def _add_user_constraint(self, desc: str, fn: Callable[[Any], bool]) -> None:
        self._constraints.append(lambda v: None if fn(v) else desc)

    def _validate(self, value: Any) -> None:
        self._check_value(value)
        for constraint in self._constraints:
            reason = constraint(value)
            if reason:
                raise ValueError(reason)

    def _parse(self, text: str) -> Any:
        value = self._unmarshal(text)
        self._validate(value)
        return value

    def _build(self, kind: Kind) -> Variable:
        if not self._name:
            raise SpecError("", "variable name must not be empty")
        if not self._desc:
            raise SpecError(self._name, "variable description must not be empty")
        try:
            self._check_schema()
        except ValueError as exc:
            raise SpecError(self._name, str(exc)) from None
        if self._default is not _MISSING:
            try:
                self._validate(self._default)
            except ValueError as exc:
                raise SpecError(self._name, f"default value: {exc}") from None
        return Variable(
            name=self._name,
            description=self._desc,
            kind=kind,
            parse=self._parse,
            default=self._default,
            sensitive=self._sensitive,
            schema=self._schema(),
        )

    def _register(self, kind: Kind, registry: _Opt[Registry]) -> Variable:
        return (registry or default_registry()).register(self._build(kind))

    def required(self, registry: _Opt[Registry] = None) -> Required:
        return Required(self._register(Kind.REQUIRED, registry))

    def optional(self, registry: _Opt[Registry] = None) -> Optional:
        return Optional(self._register(Kind.OPTIONAL, registry))

    def deprecated(self, registry: _Opt[Registry] = None) -> Deprecated:
        return Deprecated(self._register(Kind.DEPRECATED, registry))