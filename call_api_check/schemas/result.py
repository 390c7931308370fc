"""
Check Result Schemas.

The plugin severity convention and the models for the daemon's check
result payload.
"""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, StrictInt


class Severity(IntEnum):
    """Check plugin exit codes."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


class CheckResult(BaseModel):
    """Outcome of one check: the process exit code and the text to print."""

    model_config = ConfigDict(frozen=True)

    exit_code: Severity
    output: str


class CheckerPayload(BaseModel):
    """
    One check result as returned by the daemon.

    perfdata may be a string, a list of strings, or an empty object
    when the plugin reported no performance data.
    """

    model_config = ConfigDict(extra="ignore")

    exitcode: StrictInt
    checkresult: str
    perfdata: str | list[str] | dict | None = None

    def perfdata_text(self) -> str:
        """Performance data as a single string, empty when absent."""
        if isinstance(self.perfdata, str):
            return self.perfdata
        if isinstance(self.perfdata, list):
            return "".join(self.perfdata)
        return ""
