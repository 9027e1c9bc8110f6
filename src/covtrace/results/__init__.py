"""Test result parsing."""

from covtrace.results.models import CaseFailure, CaseResult, SuiteResult
from covtrace.results.parser import parse_test_results

__all__ = [
    "CaseFailure",
    "CaseResult",
    "SuiteResult",
    "parse_test_results",
]
