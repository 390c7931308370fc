"""
Schemas.

Pydantic models for tool options and check results.
"""

from call_api_check.schemas.options import ToolOptions
from call_api_check.schemas.result import CheckerPayload, CheckResult, Severity

__all__ = [
    "CheckResult",
    "CheckerPayload",
    "Severity",
    "ToolOptions",
]
