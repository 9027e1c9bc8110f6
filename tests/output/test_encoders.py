"""Tests for model encoders."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET

import pytest

from covtrace.core.errors import ErrorCode, ReportError
from covtrace.coverage.builder import parse_clover
from covtrace.coverage.metrics import PathMetrics, collect_file_metrics
from covtrace.coverage.models import ProjectCoverage
from covtrace.output import decode, decode_project, decode_suites, encode, to_plain
from covtrace.results import parse_test_results

RESULTS_XML = (
    b'<testsuites><testsuite failures="1" errors="0" tests="1" name="s">'
    b'<testcase name="c"><failure type="E" message="m">boom</failure></testcase>'
    b"</testsuite></testsuites>"
)

PROJECT_XML = (
    b'<coverage clover="1"><project name="demo" timestamp="1700000000">'
    b'<metrics packages="1" files="1"/>'
    b'<package name="app"><file path="/a.php" name="a.php"><class name="A"/>'
    b'<line num="1" type="stmt" count="0"/>'
    b'<line num="2" type="cond" truecount="1" falsecount="2"/>'
    b'<line num="3" type="method" count="4"/>'
    b"</file></package></project></coverage>"
)


@pytest.fixture
def project() -> ProjectCoverage:
    return parse_clover(PROJECT_XML).project


class TestToPlain:
    """Tests for the plain-data view."""

    def test_project_fields(self, project: ProjectCoverage) -> None:
        data = to_plain(project)
        assert data["name"] == "demo"
        assert data["timestamp"] == "1700000000"
        line = data["packages"][0]["files"][0]["lines"][1]
        assert line == {"num": 2, "kind": "cond", "count": 0, "true_count": 1, "false_count": 2}

    def test_list_of_models(self) -> None:
        data = to_plain(parse_test_results(RESULTS_XML))
        assert data[0]["cases"][0]["failures"][0]["data"] == "boom"


class TestRoundTrip:
    """Encoding then decoding reproduces an equal model."""

    @pytest.mark.parametrize("fmt", ["json", "yaml", "binary"])
    def test_project(self, project: ProjectCoverage, fmt: str) -> None:
        assert decode_project(encode(project, fmt), fmt) == project

    @pytest.mark.parametrize("fmt", ["json", "yaml", "binary"])
    def test_suites(self, fmt: str) -> None:
        suites = parse_test_results(RESULTS_XML)
        assert decode_suites(encode(suites, fmt), fmt) == suites

    def test_metrics(self, project: ProjectCoverage) -> None:
        entries = collect_file_metrics(project)
        assert decode(encode(entries, "json"), "json", list[PathMetrics]) == entries


class TestEncode:
    """Format-specific output checks."""

    def test_json_root_key(self, project: ProjectCoverage) -> None:
        document = json.loads(encode(project, "json"))
        assert list(document) == ["test_results"]

    def test_json_compact_without_indent(self, project: ProjectCoverage) -> None:
        assert b"\n" not in encode(project, "json", indent=0)

    def test_xml(self, project: ProjectCoverage) -> None:
        root = ET.fromstring(encode(project, "xml"))
        assert root.tag == "covtrace"
        assert root.findtext("test_results/name") == "demo"
        lines = root.findall("test_results/packages/item/files/item/lines/item")
        assert [line.findtext("kind") for line in lines] == ["stmt", "cond", "method"]
        file_metrics = root.find("test_results/packages/item/files/item/metrics")
        assert file_metrics is not None
        assert file_metrics.get("null") == "true"

    def test_unknown_format(self, project: ProjectCoverage) -> None:
        with pytest.raises(ReportError) as exc_info:
            encode(project, "toml")
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_OUTPUT_FORMAT


class TestDecodeErrors:
    """Decoding rejects content that does not hold a model."""

    def test_xml_not_decodable(self, project: ProjectCoverage) -> None:
        with pytest.raises(ReportError) as exc_info:
            decode_project(encode(project, "xml"), "xml")
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_OUTPUT_FORMAT

    def test_garbage(self) -> None:
        with pytest.raises(ReportError) as exc_info:
            decode_project(b"{not json", "json")
        assert exc_info.value.code == ErrorCode.MALFORMED_INPUT

    def test_missing_root_key(self) -> None:
        with pytest.raises(ReportError) as exc_info:
            decode_project(b'{"project": {}}', "json")
        assert exc_info.value.code == ErrorCode.MALFORMED_INPUT

    def test_wrong_shape(self) -> None:
        with pytest.raises(ReportError) as exc_info:
            decode_project(b'{"test_results": {"packages": 3}}', "json")
        assert exc_info.value.code == ErrorCode.MALFORMED_INPUT
