"""
Command-Line Entry Point.

Runs one check plugin on the REST daemon and reports it to the
monitoring agent using the plugin contract:

    stdout       the check output, verbatim
    exit status  0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN

Transport, protocol and configuration failures still produce a plugin
result ([UNKNOWN] message, exit 3). Usage errors exit with 64 (EX_USAGE)
and never reach the network.
"""

import sys
from collections.abc import Sequence
from typing import NoReturn

import click

from call_api_check.cli.arguments import (
    classify_arguments,
    format_help,
    format_usage,
    wants_help,
)
from call_api_check.cli.client import DaemonClient
from call_api_check.core.config import get_app_config
from call_api_check.core.config_schema import ApplicationSchema
from call_api_check.core.exceptions import (
    ApplicationError,
    ArgumentError,
    ConfigurationError,
)
from call_api_check.core.logging import get_logger, log_with_source, setup_logging
from call_api_check.plugin.binder import PluginInvocation
from call_api_check.plugin.request import encode_request
from call_api_check.schemas.options import ToolOptions
from call_api_check.schemas.result import CheckResult, Severity

EXIT_USAGE = 64

logger = get_logger(__name__)


def unknown_result(message: str) -> CheckResult:
    """Plugin result reported when no check result could be obtained."""
    return CheckResult(exit_code=Severity.UNKNOWN, output=f"[UNKNOWN] {message}")


def report_error(message: str) -> None:
    """Write an error line to stderr."""
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)


def emit_result(result: CheckResult) -> NoReturn:
    """Print the check output and exit with its severity."""
    click.echo(result.output, nl=False)
    sys.exit(int(result.exit_code))


def run_check(
    options: ToolOptions,
    invocation: PluginInvocation,
    application: ApplicationSchema,
) -> CheckResult:
    """
    Execute the invocation on the daemon.

    Never raises: failures are reported on stderr and turned into an
    UNKNOWN result.
    """
    request = encode_request(invocation, application.daemon.checker_path)
    log_with_source(
        logger,
        "cli",
        "info",
        "Running check",
        command=invocation.identifier,
        endpoint=options.endpoint,
        parameters=list(invocation.parameters),
    )

    try:
        with DaemonClient(options) as client:
            result = client.execute(request)
    except ApplicationError as e:
        log_with_source(logger, "cli", "error", "Check failed", code=e.code, error=e.message)
        report_error(e.message)
        return unknown_result(e.message)
    except Exception as e:
        logger.exception("Unexpected error while running check", source="cli")
        report_error(f"Unexpected error: {e}")
        return unknown_result(f"Unexpected error: {e}")

    log_with_source(
        logger,
        "cli",
        "info",
        "Check completed",
        command=invocation.identifier,
        exit_code=int(result.exit_code),
    )
    return result


def main(argv: Sequence[str] | None = None) -> NoReturn:
    """
    Entry point for the call_api_check console script.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].
    """
    args = list(sys.argv[1:] if argv is None else argv)

    if wants_help(args):
        click.echo(format_help())
        sys.exit(0)

    try:
        app_config = get_app_config()
    except ConfigurationError as e:
        report_error(e.message)
        emit_result(unknown_result(e.message))

    try:
        options, invocation = classify_arguments(args, app_config.application)
    except ArgumentError as e:
        report_error(e.message)
        click.echo(format_usage(), err=True)
        sys.exit(EXIT_USAGE)

    setup_logging(level=options.log_level)

    emit_result(run_check(options, invocation, app_config.application))


if __name__ == "__main__":
    main()
