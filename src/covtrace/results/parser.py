"""Test result parser.

Expected structure:

<testsuites>
  <testsuite failures="1" errors="0" tests="2" name="...">
    <testcase name="...">
      <failure type="..." message="...">data</failure>
    </testcase>
  </testsuite>
</testsuites>

A document whose root is not ``<testsuites>`` is rejected before any suite
is read.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

import structlog

from covtrace.core.errors import ReportError
from covtrace.ingest import ReportSource, attr_int, attr_str, describe_source, load_xml, node_text
from covtrace.results.models import CaseFailure, CaseResult, SuiteResult

log = structlog.get_logger()

RESULTS_ROOT = "testsuites"


def _parse_failure(node: ET.Element) -> CaseFailure:
    return CaseFailure(
        type=attr_str(node, "type"),
        message=attr_str(node, "message"),
        data=node_text(node),
    )


def _parse_case(node: ET.Element) -> CaseResult:
    return CaseResult(
        name=attr_str(node, "name"),
        failures=tuple(_parse_failure(child) for child in node.iterfind("failure")),
    )


def _parse_suite(node: ET.Element) -> SuiteResult:
    return SuiteResult(
        name=attr_str(node, "name"),
        tests=attr_int(node, "tests"),
        errors=attr_int(node, "errors"),
        failures=attr_int(node, "failures"),
        cases=tuple(_parse_case(child) for child in node.iterfind("testcase")),
    )


def parse_test_results(source: ReportSource) -> list[SuiteResult]:
    """Parse a ``<testsuites>`` report into its suites, in report order.

    Raises:
        ReportError: MALFORMED_INPUT or UNRECOGNIZED_FORMAT.
    """
    name = describe_source(source)
    root = load_xml(source)
    if root.tag != RESULTS_ROOT:
        raise ReportError.unrecognized_format(name, "test results")

    suites = [_parse_suite(node) for node in root.iterfind("testsuite")]
    log.info(
        "test_results_parsed",
        source=name,
        suites=len(suites),
        cases=sum(len(s.cases) for s in suites),
    )
    return suites
