"""Enumeration variables."""

from __future__ import annotations

from typing import Any, Callable

from .spec import Builder, _describe_choices


class EnumBuilder(Builder):
    """Builds a specification for an enumeration."""

    def __init__(self, name: str, desc: str) -> None:
        super().__init__(name, desc)
        self._members: list[tuple[Any, str]] = []
        self._render: Callable[[Any], str] = str

    def _schema(self) -> str:
        return " | ".join(self._literals())

    def _literals(self) -> list[str]:
        return [self._render(value) for value, _ in self._members]

    def with_members(self, *args: Any) -> "EnumBuilder":
        for value in args:
            self.with_member(value, "")
        return self

    def with_member(self, value: Any, desc: str = "") -> "EnumBuilder":
        self._members.append((value, desc))
        return self

    def with_renderer(self, fn: Callable[[Any], str]) -> "EnumBuilder":
        self._render = fn
        return self

    def with_default(self, value: Any) -> "EnumBuilder":
        self._default = value
        return self

    def _check_schema(self) -> None:
        seen: set[str] = set()
        for literal in self._literals():
            if not literal:
                raise ValueError("literals can not be an empty string")
            if literal in seen:
                raise ValueError(
                    f'literals must be unique but multiple values are represented as "{literal}"'
                )
            seen.add(literal)
        if len(seen) < 2:
            raise ValueError("must allow at least two distinct values")

    def _check_value(self, value: Any) -> None:
        literals = self._literals()
        if self._render(value) not in literals:
            raise ValueError(_describe_choices(literals))

    def _unmarshal(self, text: str) -> Any:
        for value, _ in self._members:
            if self._render(value) == text:
                return value
        raise ValueError(_describe_choices(self._literals()))


def enum(name: str, desc: str) -> EnumBuilder:
    """Configure an environment variable as an enumeration."""
    return EnumBuilder(name, desc)