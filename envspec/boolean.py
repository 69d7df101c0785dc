"""Boolean variables."""

from __future__ import annotations

from .spec import Builder, _describe_choices


class BoolBuilder(Builder):
    """Builds a specification for a boolean variable."""

    def __init__(self, name: str, desc: str) -> None:
        super().__init__(name, desc)
        self._true = "true"
        self._false = "false"

    def _schema(self) -> str:
        return f"{self._true} | {self._false}"

    def with_literals(self, true_literal: str, false_literal: str) -> "BoolBuilder":
        self._true = true_literal
        self._false = false_literal
        return self

    def with_default(self, value: bool) -> "BoolBuilder":
        self._default = bool(value)
        return self

    def _check_schema(self) -> None:
        if not self._true or not self._false:
            raise ValueError("literals can not be an empty string")
        if self._true == self._false:
            raise ValueError(
                f'literals must be unique but multiple values are represented as "{self._true}"'
            )

    def _unmarshal(self, text: str) -> bool:
        if text == self._true:
            return True
        if text == self._false:
            return False
        raise ValueError(_describe_choices([self._true, self._false]))


def boolean(name: str, desc: str) -> BoolBuilder:
    """Configure an environment variable as a boolean."""
    return BoolBuilder(name, desc)