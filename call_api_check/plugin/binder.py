"""
Plugin Parameter Binder.

Turns the argument list that follows the `--` delimiter into an ordered
mapping of parameter names to typed values.

Flag detection is purely lexical. A token is a parameter name when it
starts with a dash, the next character is not a digit, and the token is
not a number on its own. Negative numbers such as -5 or -.5 are values.
A value that looks like a flag (e.g. "-foo") cannot be passed unquoted.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from call_api_check.core.exceptions import ArgumentError
from call_api_check.plugin.values import (
    Array,
    Number,
    ParameterValue,
    Switch,
    ValueSyntaxError,
    parse_value,
)


@dataclass(frozen=True)
class PluginInvocation:
    """A check plugin call: the plugin identifier and its named parameters."""

    identifier: str
    parameters: dict[str, ParameterValue] = field(default_factory=dict)


def is_parameter_name(token: str) -> bool:
    """Return True when the token starts a new plugin parameter."""
    return (
        len(token) > 1
        and token[0] == "-"
        and not token[1].isdigit()
        and Number.parse(token) is None
    )


def bind_parameters(tokens: Sequence[str]) -> dict[str, ParameterValue]:
    """
    Bind plugin parameters from the tokens after the `--` delimiter.

    A flag followed by no value is Switch(True). A flag followed by one
    value gets that value; several values become an Array. When a name
    repeats, the last value wins and the name keeps its first position.

    Args:
        tokens: Raw plugin arguments, e.g. ["-Warning", "80", "-NoPerfData"]

    Returns:
        Ordered mapping of parameter name to typed value

    Raises:
        ArgumentError: On a value before any flag, an empty flag name,
            or a value that cannot be parsed
    """
    parameters: dict[str, ParameterValue] = {}
    position = 0

    while position < len(tokens):
        flag = tokens[position]
        if not is_parameter_name(flag):
            raise ArgumentError(
                f"unexpected value '{flag}' without a preceding parameter name",
                token=flag,
            )
        name = flag.lstrip("-")
        if not name:
            raise ArgumentError(f"empty parameter name '{flag}'", token=flag)

        position += 1
        raw_values: list[str] = []
        while position < len(tokens) and not is_parameter_name(tokens[position]):
            raw_values.append(tokens[position])
            position += 1

        try:
            values = [parse_value(raw) for raw in raw_values]
        except ValueSyntaxError as e:
            raise ArgumentError(
                f"invalid value for parameter '{flag}': {e}",
                token=flag,
            ) from e

        if not values:
            parameters[name] = Switch(True)
        elif len(values) == 1:
            parameters[name] = values[0]
        else:
            parameters[name] = Array(tuple(values))

    return parameters
