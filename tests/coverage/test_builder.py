"""Tests for the Clover tree builder."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from unittest.mock import patch

import pytest

from covtrace.core.errors import ErrorCode, ReportError
from covtrace.coverage.builder import CloverParser, parse_clover, parse_line_record
from covtrace.coverage.index import CoverageIndex
from covtrace.coverage.models import (
    ClassMetrics,
    CoverageKind,
    LineRecord,
    ProjectCoverage,
    TestIdentity,
)

# =============================================================================
# parse_line_record
# =============================================================================


class TestParseLineRecord:
    """Tests for the shared line classifier."""

    def test_stmt(self) -> None:
        node = ET.fromstring('<line num="4" type="stmt" count="7"/>')
        assert parse_line_record(node) == LineRecord(num=4, kind=CoverageKind.STMT, count=7)

    def test_method(self) -> None:
        node = ET.fromstring('<line num="2" type="method" name="run" count="1"/>')
        assert parse_line_record(node) == LineRecord(num=2, kind=CoverageKind.METHOD, count=1)

    def test_cond_reads_branch_counts(self) -> None:
        node = ET.fromstring('<line num="9" type="cond" count="5" truecount="3" falsecount="1"/>')
        record = parse_line_record(node)
        assert record.kind is CoverageKind.COND
        assert (record.true_count, record.false_count) == (3, 1)
        assert record.count == 0

    def test_unexpected_type(self) -> None:
        node = ET.fromstring('<line num="9" type="branch"/>')
        with pytest.raises(ReportError) as exc_info:
            parse_line_record(node, "src/a.py")
        assert exc_info.value.code == ErrorCode.UNEXPECTED_COVERAGE_TYPE
        assert exc_info.value.details["path"] == "src/a.py"

    def test_missing_type_is_unexpected(self) -> None:
        node = ET.fromstring('<line num="9" count="1"/>')
        with pytest.raises(ReportError):
            parse_line_record(node)


# =============================================================================
# CloverParser
# =============================================================================


class TestCloverParser:
    """Tests for building the hierarchical tree."""

    def test_project_header(self, clover_file: Path) -> None:
        project = parse_clover(clover_file).project
        assert project.name == "demo"
        assert project.timestamp == "1700000000"
        assert [p.name for p in project.packages] == ["app"]

    def test_files_and_classes(self, clover_file: Path) -> None:
        files = parse_clover(clover_file).project.files
        assert [(f.path, f.name) for f in files] == [
            ("/src/app/Foo.php", "Foo.php"),
            ("/src/app/Bar.php", "Bar.php"),
        ]
        assert [c.name for c in files[0].classes] == ["Foo"]
        assert files[1].classes[0].metrics is None

    def test_keeps_every_line(self, clover_file: Path) -> None:
        foo = parse_clover(clover_file).project.files[0]
        assert [line.num for line in foo.lines] == [3, 4, 5, 6, 7]
        assert foo.lines[1] == LineRecord(num=4, kind=CoverageKind.STMT, count=0)

    def test_tree_keeps_lines_the_index_filters(self, clover_file: Path) -> None:
        tree_lines = sum(len(f.lines) for f in parse_clover(clover_file).project.files)
        index = CoverageIndex()
        index.ingest_report(TestIdentity("t.py", "t"), clover_file)

        assert tree_lines == 7
        assert index.summary().facts == 5

    def test_metrics_passed_through(self, clover_file: Path) -> None:
        project = parse_clover(clover_file).project
        assert project.metrics is not None
        assert project.metrics.packages == 1
        assert project.metrics.metrics.files == 2
        assert project.metrics.metrics.metrics.classes == 2
        assert project.metrics.metrics.metrics.metrics.complexity == 3

        package = project.packages[0]
        assert package.metrics is not None
        assert package.metrics.files == 2
        assert package.metrics.metrics.metrics.covered_statements == 2

        foo = package.files[0]
        assert foo.metrics is not None
        assert foo.metrics.classes == 1
        assert foo.metrics.metrics.ncloc == 15
        assert foo.classes[0].metrics == ClassMetrics(
            complexity=2, methods=1, covered_methods=1, statements=3
        )
        assert package.files[1].metrics is None

    def test_accepts_bytes(self, clover_xml: bytes) -> None:
        report = CloverParser().parse(clover_xml)
        assert len(report.project.files) == 2

    def test_directory_source(self, clover_file: Path) -> None:
        report = CloverParser().parse(clover_file.parent)
        assert report.project.name == "demo"

    def test_directory_without_report(self, tmp_path: Path) -> None:
        with pytest.raises(ReportError) as exc_info:
            CloverParser().parse(tmp_path)
        assert exc_info.value.code == ErrorCode.MALFORMED_INPUT

    def test_missing_project(self) -> None:
        report = parse_clover(b'<coverage clover="1"/>')
        assert report.project == ProjectCoverage()

    def test_only_first_project_is_built(self) -> None:
        report = parse_clover(
            b'<coverage clover="1"><project name="one"/><project name="two"/></coverage>'
        )
        assert report.project.name == "one"

    def test_unexpected_type_reported_not_raised(self) -> None:
        xml = (
            b'<coverage clover="1"><project><package><file path="a.py">'
            b'<line num="1" type="stmt" count="1"/>'
            b'<line num="2" type="weird" count="1"/>'
            b'<line num="3" type="stmt" count="0"/>'
            b"</file></package></project></coverage>"
        )

        report = parse_clover(xml)

        assert [line.num for line in report.project.files[0].lines] == [1, 3]
        assert len(report.diagnostics) == 1
        assert report.diagnostics[0].details == {"type": "weird", "line": 2, "path": "a.py"}

    def test_malformed_input(self) -> None:
        with pytest.raises(ReportError) as exc_info:
            parse_clover(b"<coverage clover='1'><project")
        assert exc_info.value.code == ErrorCode.MALFORMED_INPUT

    def test_missing_marker_rejected_before_any_node(self) -> None:
        xml = b'<coverage generated="1"><project name="x"><package name="p"/></project></coverage>'
        parser = CloverParser()

        with (
            patch.object(CloverParser, "_parse_project") as parse_project,
            pytest.raises(ReportError) as exc_info,
        ):
            parser.parse(xml)

        assert exc_info.value.code == ErrorCode.UNRECOGNIZED_FORMAT
        parse_project.assert_not_called()

    def test_wrong_root_rejected(self) -> None:
        with pytest.raises(ReportError) as exc_info:
            parse_clover(b'<report clover="1"/>')
        assert exc_info.value.code == ErrorCode.UNRECOGNIZED_FORMAT

    def test_tree_is_immutable(self, clover_file: Path) -> None:
        project = parse_clover(clover_file).project
        with pytest.raises(AttributeError):
            project.name = "changed"  # type: ignore[misc]


class TestCanParse:
    """Tests for Clover detection."""

    def test_by_name(self, tmp_path: Path) -> None:
        path = tmp_path / "clover-report.xml"
        path.write_text("<coverage/>")
        assert CloverParser().can_parse(path)

    def test_by_content(self, clover_file: Path) -> None:
        renamed = clover_file.with_name("report.xml")
        clover_file.rename(renamed)
        assert CloverParser().can_parse(renamed)

    def test_other_xml(self, tmp_path: Path) -> None:
        path = tmp_path / "report.xml"
        path.write_text('<coverage line-rate="0.5"/>')
        assert not CloverParser().can_parse(path)

    def test_directory(self, clover_file: Path, tmp_path: Path) -> None:
        assert CloverParser().can_parse(clover_file.parent)
        empty = tmp_path / "empty"
        empty.mkdir()
        assert not CloverParser().can_parse(empty)

    def test_missing_path(self, tmp_path: Path) -> None:
        assert not CloverParser().can_parse(tmp_path / "nope.xml")
