"""Test result data model.

Mirrors a ``<testsuites>`` report one-to-one. Suite counters are copied from
the report attributes and are not checked against the cases actually listed.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CaseFailure:
    """A ``<failure>`` element: its attributes and its text body."""

    type: str = ""
    message: str = ""
    data: str = ""


@dataclass(frozen=True, slots=True)
class CaseResult:
    name: str = ""
    failures: tuple[CaseFailure, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.failures


@dataclass(frozen=True, slots=True)
class SuiteResult:
    """A ``<testsuite>`` element.

    ``tests``, ``errors`` and ``failures`` are the reported counters.
    """

    name: str = ""
    tests: int = 0
    errors: int = 0
    failures: int = 0
    cases: tuple[CaseResult, ...] = ()

    @property
    def failed(self) -> bool:
        """True when the report says at least one test failed."""
        return self.failures > 0
