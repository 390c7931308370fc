"""
Argument Classification.

Splits the process argument list at the first `--` into tool options and
plugin parameters:

    call_api_check -c Invoke-IcingaCheckCPU --insecure -- -Warning 80 -Critical 90 -NoPerfData

Tool options are parsed with a click command that is never invoked, so
classification has no side effects. Plugin parameters are bound by
call_api_check.plugin.binder.
"""

from collections.abc import Sequence
from typing import Any

import click
from pydantic import ValidationError

from call_api_check.core.config_schema import ApplicationSchema
from call_api_check.core.exceptions import ArgumentError
from call_api_check.plugin.binder import PluginInvocation, bind_parameters
from call_api_check.schemas.options import ToolOptions

PROG_NAME = "call_api_check"
DELIMITER = "--"
HELP_OPTIONS = ("-h", "--help")


@click.command(
    name=PROG_NAME,
    add_help_option=False,
    options_metavar="-c NAME [OPTIONS] -- [-Parameter [VALUE]...]...",
    epilog=(
        "Everything after -- is forwarded to the check plugin. A parameter "
        "without a value is sent as a switch ($True). Values are typed "
        "as numbers, $True/$False, arrays (a,b or @(a,b)) or strings."
    ),
)
@click.option(
    "-c", "--command", "commands",
    multiple=True,
    metavar="NAME",
    help="Name or alias of the check plugin to execute. Example: Invoke-IcingaCheckCPU.",
)
@click.option(
    "--endpoint", "endpoints",
    multiple=True,
    metavar="URL",
    help="Base URL of the daemon. Cannot be combined with --host/--port.",
)
@click.option(
    "--host", "hosts",
    multiple=True,
    help="Host where the daemon runs. Default: localhost.",
)
@click.option(
    "-p", "--port", "ports",
    multiple=True,
    type=click.IntRange(1, 65535),
    help="TCP port where the daemon listens. Default: 5668.",
)
@click.option(
    "--timeout", "timeouts",
    multiple=True,
    type=click.FloatRange(min=0, min_open=True),
    metavar="SECONDS",
    help="Seconds to wait for the check result. Default: 60.",
)
@click.option(
    "--insecure",
    is_flag=True,
    help="Ignore TLS certificate errors.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging on stderr).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging on stderr).",
)
def tool_options_command(**params: Any) -> None:
    """Forward check plugin invocations to the icinga-powershell-restapi daemon."""


def _context() -> click.Context:
    return click.Context(tool_options_command, info_name=PROG_NAME)


def format_help() -> str:
    """Full help text for the tool options."""
    return tool_options_command.get_help(_context())


def format_usage() -> str:
    """One-line usage plus a pointer to --help."""
    return f"{tool_options_command.get_usage(_context())}\nTry '{PROG_NAME} --help' for help."


def wants_help(argv: Sequence[str]) -> bool:
    """Return True when -h/--help appears before the delimiter."""
    head = argv[:argv.index(DELIMITER)] if DELIMITER in argv else argv
    return any(token in HELP_OPTIONS for token in head)


def split_arguments(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """
    Split at the first `--`.

    Raises:
        ArgumentError: If the delimiter is missing
    """
    if DELIMITER not in argv:
        raise ArgumentError(
            f"missing '{DELIMITER}' delimiter before the plugin parameters",
        )
    boundary = list(argv).index(DELIMITER)
    return list(argv[:boundary]), list(argv[boundary + 1:])


def _single(values: tuple, option: str) -> Any:
    if len(values) > 1:
        raise ArgumentError(f"option '{option}' given more than once", token=option)
    return values[0] if values else None


def parse_tool_options(
    tokens: Sequence[str],
    application: ApplicationSchema,
) -> tuple[str, ToolOptions]:
    """
    Parse the tokens before `--` into the plugin identifier and ToolOptions.

    Args:
        tokens: Arguments before the delimiter
        application: Configured defaults for endpoint and timeout

    Returns:
        Tuple of (identifier, options)

    Raises:
        ArgumentError: On unknown options, positional tokens, duplicates,
            a missing or empty identifier, or invalid option values
    """
    try:
        ctx = tool_options_command.make_context(PROG_NAME, list(tokens))
    except click.UsageError as e:
        token = getattr(e, "option_name", None) or getattr(e, "param_hint", None)
        raise ArgumentError(e.format_message(), token=token) from e
    params = ctx.params

    identifier = _single(params["commands"], "-c")
    if identifier is None:
        raise ArgumentError("missing required option '-c' (plugin name)", token="-c")
    if not identifier.strip():
        raise ArgumentError("option '-c' requires a non-empty plugin name", token="-c")

    endpoint = _single(params["endpoints"], "--endpoint")
    host = _single(params["hosts"], "--host")
    port = _single(params["ports"], "--port")
    timeout = _single(params["timeouts"], "--timeout")

    if endpoint is not None and (host is not None or port is not None):
        raise ArgumentError(
            "option '--endpoint' cannot be combined with '--host' or '--port'",
            token="--endpoint",
        )
    if endpoint is None:
        endpoint = application.endpoint_for(host, port)

    if params["debug"]:
        log_level = "DEBUG"
    elif params["verbose"]:
        log_level = "INFO"
    else:
        log_level = None

    try:
        options = ToolOptions(
            endpoint=endpoint,
            timeout=timeout if timeout is not None else application.timeouts.check,
            insecure=params["insecure"],
            log_level=log_level,
        )
    except ValidationError as e:
        error = e.errors()[0]
        field = error["loc"][0] if error["loc"] else "options"
        raise ArgumentError(f"invalid {field}: {error['msg']}", token=f"--{field}") from e

    return identifier, options


def classify_arguments(
    argv: Sequence[str],
    application: ApplicationSchema,
) -> tuple[ToolOptions, PluginInvocation]:
    """
    Classify the full argument list.

    Args:
        argv: Process arguments without the program name
        application: Configured defaults for endpoint and timeout

    Returns:
        Tuple of (ToolOptions, PluginInvocation)

    Raises:
        ArgumentError: Naming the malformed token
    """
    head, tail = split_arguments(argv)
    identifier, options = parse_tool_options(head, application)
    invocation = PluginInvocation(identifier=identifier, parameters=bind_parameters(tail))
    return options, invocation
