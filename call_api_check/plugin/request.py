"""
Check Request Encoding.

Builds the HTTP request that asks the REST daemon to run one check
plugin. The daemon routes on the `command` query parameter and reads
the plugin parameters from the JSON body.

Body layout:
    {"command": "<identifier>", "arguments": {"<name>": bool|number|string|array, ...}}
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from call_api_check.plugin.binder import PluginInvocation
from call_api_check.plugin.values import from_json

IDENTIFIER_FIELD = "command"
PARAMETERS_FIELD = "arguments"
COMMAND_QUERY_PARAM = "command"
DEFAULT_CHECKER_PATH = "/v1/checker"


@dataclass(frozen=True)
class CheckRequest:
    """Method, path, query and JSON body of a check execution request."""

    identifier: str
    path: str
    body: dict[str, Any]
    method: str = "POST"
    params: dict[str, str] = field(default_factory=dict)

    def content(self) -> bytes:
        """Serialize the body as UTF-8 JSON, keeping key order."""
        return json.dumps(self.body, ensure_ascii=False).encode("utf-8")


def encode_request(
    invocation: PluginInvocation,
    checker_path: str = DEFAULT_CHECKER_PATH,
) -> CheckRequest:
    """Encode a plugin invocation into the daemon's check request."""
    arguments = {
        name: value.to_json() for name, value in invocation.parameters.items()
    }
    return CheckRequest(
        identifier=invocation.identifier,
        path=checker_path,
        params={COMMAND_QUERY_PARAM: invocation.identifier},
        body={
            IDENTIFIER_FIELD: invocation.identifier,
            PARAMETERS_FIELD: arguments,
        },
    )


def decode_request(body: Mapping[str, Any]) -> PluginInvocation:
    """
    Rebuild the plugin invocation from a request body.

    Raises:
        ValueError: If the body does not follow the request layout
    """
    identifier = body.get(IDENTIFIER_FIELD)
    arguments = body.get(PARAMETERS_FIELD, {})
    if not isinstance(identifier, str) or not isinstance(arguments, Mapping):
        raise ValueError("Request body does not contain a check invocation")
    try:
        parameters = {name: from_json(value) for name, value in arguments.items()}
    except TypeError as e:
        raise ValueError(str(e)) from e
    return PluginInvocation(identifier=identifier, parameters=parameters)
