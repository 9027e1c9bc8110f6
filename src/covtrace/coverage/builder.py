"""Clover XML tree builder.

Clover is used by multiple tools:
- PHP: phpunit --coverage-clover
- Kotlin: kover
- Java: OpenClover (historical)

Structure:
<coverage generated="..." clover="...">
  <project name="..." timestamp="...">
    <metrics ...aggregate stats.../>
    <package name="com.example">
      <metrics ...package stats.../>
      <file name="Foo.php" path="/path/to/Foo.php">
        <class name="FooClass"><metrics .../></class>
        <line num="1" type="stmt" count="1"/>
        <line num="5" type="cond" truecount="1" falsecount="0"/>
        <line num="10" type="method" count="3"/>
        <metrics ...file stats.../>
      </file>
    </package>
  </project>
</coverage>

Line types:
- stmt: statement line
- cond: conditional (branch)
- method: method declaration

The builder maps the report one-to-one onto ProjectCoverage and keeps every
line whatever its counts. The index store uses the same line classifier
(parse_line_record) but filters zero-signal lines.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import structlog

from covtrace.core.errors import ReportError
from covtrace.coverage.models import (
    ClassCoverage,
    ClassMetrics,
    CloverReport,
    CoverageKind,
    FileCoverage,
    FileMetrics,
    LineRecord,
    PackageCoverage,
    PackageMetrics,
    ProjectCoverage,
    ProjectMetrics,
)
from covtrace.ingest import ReportSource, attr_int, attr_str, describe_source, load_xml

log = structlog.get_logger()

CLOVER_MARKER = "clover"
_CANDIDATE_NAMES = ("clover.xml", "coverage.xml", "coverage-clover.xml")


def check_clover_root(root: ET.Element, source: str) -> None:
    """Reject anything that is not a ``<coverage clover="...">`` document.

    Raises:
        ReportError: UNRECOGNIZED_FORMAT.
    """
    if root.tag != "coverage" or root.get(CLOVER_MARKER) is None:
        raise ReportError.unrecognized_format(source, "Clover coverage")


def parse_line_record(node: ET.Element, path: str = "") -> LineRecord:
    """Classify one ``<line>`` element.

    stmt and method lines carry ``count``; cond lines carry ``truecount``
    and ``falsecount``. Counts that do not belong to the line type are not read.

    Raises:
        ReportError: UNEXPECTED_COVERAGE_TYPE for any other ``type`` value.
    """
    num = attr_int(node, "num")
    line_type = attr_str(node, "type")

    if line_type == CoverageKind.STMT.value:
        return LineRecord(num=num, kind=CoverageKind.STMT, count=attr_int(node, "count"))
    if line_type == CoverageKind.METHOD.value:
        return LineRecord(num=num, kind=CoverageKind.METHOD, count=attr_int(node, "count"))
    if line_type == CoverageKind.COND.value:
        return LineRecord(
            num=num,
            kind=CoverageKind.COND,
            true_count=attr_int(node, "truecount"),
            false_count=attr_int(node, "falsecount"),
        )
    raise ReportError.unexpected_coverage_type(line_type, num, path)


def parse_class_metrics(node: ET.Element) -> ClassMetrics:
    return ClassMetrics(
        elements=attr_int(node, "elements"),
        covered_elements=attr_int(node, "coveredelements"),
        statements=attr_int(node, "statements"),
        covered_statements=attr_int(node, "coveredstatements"),
        conditionals=attr_int(node, "conditionals"),
        covered_conditionals=attr_int(node, "coveredconditionals"),
        methods=attr_int(node, "methods"),
        covered_methods=attr_int(node, "coveredmethods"),
        complexity=attr_int(node, "complexity"),
        loc=attr_int(node, "loc"),
        ncloc=attr_int(node, "ncloc"),
    )


def parse_file_metrics(node: ET.Element) -> FileMetrics:
    return FileMetrics(classes=attr_int(node, "classes"), metrics=parse_class_metrics(node))


def parse_package_metrics(node: ET.Element) -> PackageMetrics:
    return PackageMetrics(files=attr_int(node, "files"), metrics=parse_file_metrics(node))


def parse_project_metrics(node: ET.Element) -> ProjectMetrics:
    return ProjectMetrics(packages=attr_int(node, "packages"), metrics=parse_package_metrics(node))


class CloverParser:
    """Builds the hierarchical coverage tree of one Clover report."""

    def can_parse(self, path: Path) -> bool:
        """Check if path contains Clover coverage data."""
        if path.is_dir():
            return any((path / name).exists() for name in _CANDIDATE_NAMES)

        if not path.is_file():
            return False

        if "clover" in path.name.lower():
            return True

        # Content sniff for Clover XML
        try:
            with path.open("rb") as f:
                header = f.read(2048).decode("utf-8", errors="ignore")
        except OSError:
            return False
        return "<coverage" in header and 'clover="' in header

    def find_xml_file(self, path: Path) -> Path:
        """Resolve a report directory to the Clover file inside it."""
        if not path.is_dir():
            return path

        for name in _CANDIDATE_NAMES:
            candidate = path / name
            if candidate.exists():
                return candidate

        raise ReportError.malformed_input(str(path), "no Clover XML found in directory")

    def parse(self, source: ReportSource) -> CloverReport:
        """Parse a Clover report into a CloverReport.

        The root marker is checked before any tree node is created, so a
        rejected report never yields a partial tree.

        Raises:
            ReportError: MALFORMED_INPUT or UNRECOGNIZED_FORMAT.
        """
        if isinstance(source, (str, Path)):
            source = self.find_xml_file(Path(source))
        name = describe_source(source)

        root = load_xml(source)
        check_clover_root(root, name)

        diagnostics: list[ReportError] = []
        project_node = root.find("project")
        project = (
            self._parse_project(project_node, diagnostics)
            if project_node is not None
            else ProjectCoverage()
        )

        log.info(
            "clover_report_parsed",
            source=name,
            packages=len(project.packages),
            files=len(project.files),
            skipped_lines=len(diagnostics),
        )
        return CloverReport(project=project, diagnostics=tuple(diagnostics))

    def _parse_project(self, node: ET.Element, diagnostics: list[ReportError]) -> ProjectCoverage:
        metrics_node = node.find("metrics")
        return ProjectCoverage(
            name=attr_str(node, "name"),
            timestamp=attr_str(node, "timestamp"),
            packages=tuple(
                self._parse_package(child, diagnostics) for child in node.iterfind("package")
            ),
            metrics=parse_project_metrics(metrics_node) if metrics_node is not None else None,
        )

    def _parse_package(self, node: ET.Element, diagnostics: list[ReportError]) -> PackageCoverage:
        metrics_node = node.find("metrics")
        return PackageCoverage(
            name=attr_str(node, "name"),
            files=tuple(self._parse_file(child, diagnostics) for child in node.iterfind("file")),
            metrics=parse_package_metrics(metrics_node) if metrics_node is not None else None,
        )

    def _parse_file(self, node: ET.Element, diagnostics: list[ReportError]) -> FileCoverage:
        path = attr_str(node, "path")
        metrics_node = node.find("metrics")

        lines: list[LineRecord] = []
        for line_node in node.iterfind("line"):
            try:
                lines.append(parse_line_record(line_node, path))
            except ReportError as e:
                log.warning("line_skipped", error=e.error_name, **e.details)
                diagnostics.append(e)

        return FileCoverage(
            path=path,
            name=attr_str(node, "name"),
            classes=tuple(self._parse_class(child) for child in node.iterfind("class")),
            lines=tuple(lines),
            metrics=parse_file_metrics(metrics_node) if metrics_node is not None else None,
        )

    def _parse_class(self, node: ET.Element) -> ClassCoverage:
        metrics_node = node.find("metrics")
        return ClassCoverage(
            name=attr_str(node, "name"),
            metrics=parse_class_metrics(metrics_node) if metrics_node is not None else None,
        )


def parse_clover(source: ReportSource) -> CloverReport:
    """Convenience wrapper around CloverParser().parse()."""
    return CloverParser().parse(source)
