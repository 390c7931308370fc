"""
Check Response Interpretation.

Maps the daemon's JSON response onto a CheckResult.

The daemon answers with the result keyed by the plugin name:

    {"Invoke-IcingaCheckCPU": {"exitcode": 0, "checkresult": "[OK] ...", "perfdata": [...]}}

A flat result object without the wrapping key is accepted as well.
"""

from typing import Any

from pydantic import ValidationError

from call_api_check.core.exceptions import ProtocolError
from call_api_check.schemas.result import CheckerPayload, CheckResult, Severity

SEVERITY_FIELD = "exitcode"
OUTPUT_FIELD = "checkresult"
PERFDATA_FIELD = "perfdata"
PERFDATA_SEPARATOR = " | "


def _select_payload(body: Any, identifier: str) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise ProtocolError("Response body is not a JSON object")
    if SEVERITY_FIELD in body or OUTPUT_FIELD in body:
        return body
    if isinstance(body.get(identifier), dict):
        return body[identifier]
    if len(body) == 1:
        (entry,) = body.values()
        if isinstance(entry, dict):
            return entry
    raise ProtocolError(f"No check result for '{identifier}' in response")


def interpret_response(body: Any, identifier: str) -> CheckResult:
    """
    Decode a 2xx response body into the check result.

    The output is the check text verbatim. Performance data, when the
    daemon returns it separately, is appended after a " | " separator.

    Args:
        body: Decoded JSON response body
        identifier: The plugin identifier the request was sent for

    Returns:
        CheckResult with the severity and the output text

    Raises:
        ProtocolError: If a required field is missing or the severity is invalid
    """
    payload = _select_payload(body, identifier)

    for required in (SEVERITY_FIELD, OUTPUT_FIELD):
        if required not in payload:
            raise ProtocolError(f"Response is missing the '{required}' field")

    if payload[SEVERITY_FIELD] == {}:
        raise ProtocolError(f"Check '{identifier}' was not executed by the daemon")

    try:
        checker = CheckerPayload.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ProtocolError(f"Invalid check result fields: {fields}") from e

    try:
        severity = Severity(checker.exitcode)
    except ValueError as e:
        raise ProtocolError(
            f"Severity {checker.exitcode} is outside the range 0..3"
        ) from e

    output = checker.checkresult
    perfdata = checker.perfdata_text()
    if perfdata:
        output = f"{output}{PERFDATA_SEPARATOR}{perfdata}"

    return CheckResult(exit_code=severity, output=output)
