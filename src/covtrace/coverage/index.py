"""Normalizing coverage index.

Deduplicates source files, tests, and (file, line) pairs into stable integer
handles and stores coverage facts against those handles.

Handles are assigned in first-seen order starting at 0 and never change or
get reused for the lifetime of a CoverageIndex. The tables are mutated only
through CoverageIndex methods; callers get copies or handles, never the
underlying containers.

Facts are appended as they are ingested. Ingesting the same report twice
for the same test stores its facts twice (accumulate policy); use
distinct_facts() when duplicates must not count.

Usage::

    index = CoverageIndex(handle_width=32)
    result = index.ingest_report(TestIdentity("tests/test_foo.py", "test_bar"), path)
    index.summary()      # IndexSummary(files=..., tests=1, lines=..., facts=...)
    for fact in index.dump():
        print(fact.describe())
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

from covtrace.config.models import IndexConfig
from covtrace.core.errors import ConfigError, IndexStoreError, ReportError
from covtrace.coverage.builder import check_clover_root, parse_line_record
from covtrace.coverage.models import (
    CoverageFact,
    CoverageInfo,
    CoverageKind,
    LineKey,
    ProjectCoverage,
    TestIdentity,
)
from covtrace.ingest import ReportSource, attr_int, attr_str, describe_source, load_xml

log = structlog.get_logger()

HANDLE_WIDTHS = (32, 64)

T = TypeVar("T", bound=Hashable)


class Arena(Generic[T]):
    """Ordered values plus a reverse map from value to position.

    The position of a value is its handle. A handle outside the configured
    bit width is never handed out.
    """

    __slots__ = ("_name", "_width", "_values", "_positions")

    def __init__(self, name: str, width: int = 64) -> None:
        if width <= 0:
            raise ValueError(f"Handle width must be positive, got {width}")
        self._name = name
        self._width = width
        self._values: list[T] = []
        self._positions: dict[T, int] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def capacity(self) -> int:
        return 1 << self._width

    def index(self, value: T) -> int:
        """Return the handle of value, allocating the next one on first sight."""
        pos = self._positions.get(value)
        if pos is not None:
            return pos

        pos = len(self._values)
        if pos >= self.capacity:
            raise IndexStoreError.capacity_exceeded(self._name, self._width)
        self._values.append(value)
        self._positions[value] = pos
        return pos

    def get(self, value: T) -> int | None:
        """Handle of value if already known. Never allocates."""
        return self._positions.get(value)

    def __getitem__(self, handle: int) -> T:
        return self._values[handle]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[T]:
        return iter(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._positions

    def values(self) -> tuple[T, ...]:
        return tuple(self._values)


def has_signal(info: CoverageInfo) -> bool:
    """Zero-signal filter.

    Statement and method lines need a non-zero count. Conditional lines need
    both branches observed.
    """
    if info.kind is CoverageKind.COND:
        return info.true_count > 0 and info.false_count > 0
    return info.count > 0


@dataclass(frozen=True, slots=True)
class IndexSummary:
    files: int
    tests: int
    lines: int
    facts: int


@dataclass(frozen=True, slots=True)
class IngestResult:
    """Outcome of ingesting one report for one test."""

    test_index: int
    facts_added: int
    diagnostics: tuple[ReportError, ...] = ()


@dataclass(frozen=True, slots=True)
class ResolvedFact:
    """A coverage fact with every handle resolved to its value."""

    test: TestIdentity
    path: str
    num: int
    info: CoverageInfo

    def describe(self) -> str:
        test = f"{self.test.file}::{self.test.name}" if self.test.name else self.test.file
        prefix = f"test {test} -> {self.path}:{self.num}, type: {self.info.kind.value}"
        if self.info.kind is CoverageKind.COND:
            return (
                f"{prefix}, truecount: {self.info.true_count}, "
                f"falsecount: {self.info.false_count}"
            )
        return f"{prefix}, count: {self.info.count}"


class CoverageIndex:
    """Deduplicating store of coverage facts for one ingestion session.

    Not thread-safe. Use one instance per worker, or lock externally.
    """

    def __init__(self, handle_width: int = 64) -> None:
        if handle_width not in HANDLE_WIDTHS:
            raise ConfigError.invalid_value(
                "index.handle_width", handle_width, "must be one of 32, 64"
            )
        self._handle_width = handle_width
        self._files: Arena[str] = Arena("files", handle_width)
        self._tests: Arena[TestIdentity] = Arena("tests", handle_width)
        self._lines: Arena[LineKey] = Arena("lines", handle_width)
        self._facts: list[CoverageFact] = []

    @classmethod
    def from_config(cls, config: IndexConfig) -> CoverageIndex:
        return cls(handle_width=config.handle_width)

    @property
    def handle_width(self) -> int:
        return self._handle_width

    # Identity tables --------------------------------------------------------

    def file_index(self, path: str) -> int:
        return self._files.index(path)

    def test_index(self, test: TestIdentity) -> int:
        return self._tests.index(test)

    def line_index(self, file_index: int, num: int) -> int:
        return self._lines.index(LineKey(file_index, num))

    def record_fact(self, test_index: int, line_index: int, info: CoverageInfo) -> None:
        """Append a fact. Existing facts for the same (test, line) are left alone."""
        self._facts.append(CoverageFact(test_index, line_index, info))

    # Ingestion --------------------------------------------------------------

    def ingest(self, test_index: int, file_node: ET.Element) -> list[ReportError]:
        """Record the facts of one Clover ``<file>`` element for a test.

        Every ``<line>`` child gets a line handle. Lines with an unexpected
        coverage type are skipped and returned as diagnostics; lines without
        signal are not recorded.
        """
        path = attr_str(file_node, "path")
        diagnostics: list[ReportError] = []

        for line_node in file_node.iterfind("line"):
            file_idx = self.file_index(path)
            line_idx = self.line_index(file_idx, attr_int(line_node, "num"))
            try:
                record = parse_line_record(line_node, path)
            except ReportError as e:
                log.warning("line_skipped", error=e.error_name, **e.details)
                diagnostics.append(e)
                continue

            info = record.info
            if has_signal(info):
                self.record_fact(test_index, line_idx, info)

        return diagnostics

    def ingest_report(self, test: TestIdentity, source: ReportSource) -> IngestResult:
        """Ingest every file of a Clover report as covered by one test.

        The report is parsed and its root marker checked before any table is
        touched, so a rejected report leaves the index unchanged.

        A capacity error partway through is not rolled back: handles and facts
        from the lines before it stay in the tables.

        Raises:
            ReportError: MALFORMED_INPUT or UNRECOGNIZED_FORMAT.
            IndexStoreError: INDEX_CAPACITY_EXCEEDED when a table is full.
        """
        name = describe_source(source)
        root = load_xml(source)
        check_clover_root(root, name)

        facts_before = len(self._facts)
        test_idx = self.test_index(test)
        diagnostics: list[ReportError] = []
        for file_node in root.iterfind("project/package/file"):
            diagnostics.extend(self.ingest(test_idx, file_node))

        added = len(self._facts) - facts_before
        log.info(
            "clover_report_ingested",
            source=name,
            test=test.file,
            test_index=test_idx,
            facts_added=added,
            skipped_lines=len(diagnostics),
        )
        log.debug("index_tables", **self._summary_fields())
        return IngestResult(test_index=test_idx, facts_added=added, diagnostics=tuple(diagnostics))

    def ingest_project(self, test: TestIdentity, project: ProjectCoverage) -> IngestResult:
        """Ingest an already built coverage tree as covered by one test.

        Same handle allocation and zero-signal filter as ingest_report. Lines
        the tree builder skipped are not seen here.
        """
        facts_before = len(self._facts)
        test_idx = self.test_index(test)
        for file in project.files:
            for record in file.lines:
                file_idx = self.file_index(file.path)
                line_idx = self.line_index(file_idx, record.num)
                info = record.info
                if has_signal(info):
                    self.record_fact(test_idx, line_idx, info)

        return IngestResult(test_index=test_idx, facts_added=len(self._facts) - facts_before)

    # Queries ----------------------------------------------------------------

    @property
    def files(self) -> tuple[str, ...]:
        return self._files.values()

    @property
    def tests(self) -> tuple[TestIdentity, ...]:
        return self._tests.values()

    @property
    def lines(self) -> tuple[LineKey, ...]:
        return self._lines.values()

    @property
    def facts(self) -> tuple[CoverageFact, ...]:
        return tuple(self._facts)

    def _summary_fields(self) -> dict[str, int]:
        return {
            "files": len(self._files),
            "tests": len(self._tests),
            "lines": len(self._lines),
            "facts": len(self._facts),
        }

    def summary(self) -> IndexSummary:
        return IndexSummary(**self._summary_fields())

    def resolve(self, fact: CoverageFact) -> ResolvedFact:
        line = self._lines[fact.line_index]
        return ResolvedFact(
            test=self._tests[fact.test_index],
            path=self._files[line.file_index],
            num=line.num,
            info=fact.info,
        )

    def dump(self) -> list[ResolvedFact]:
        """All facts in insertion order, with handles resolved."""
        return [self.resolve(fact) for fact in self._facts]

    def distinct_facts(self) -> list[CoverageFact]:
        """Facts with repeated (test, line, info) entries dropped, first one kept."""
        seen: set[CoverageFact] = set()
        result: list[CoverageFact] = []
        for fact in self._facts:
            if fact not in seen:
                seen.add(fact)
                result.append(fact)
        return result

    def facts_for_test(self, test_index: int) -> list[CoverageFact]:
        return [fact for fact in self._facts if fact.test_index == test_index]

    def tests_covering(self, path: str, num: int) -> list[TestIdentity]:
        """Tests with at least one fact on the given source line, first-seen order."""
        file_idx = self._files.get(path)
        if file_idx is None:
            return []
        line_idx = self._lines.get(LineKey(file_idx, num))
        if line_idx is None:
            return []

        test_handles = dict.fromkeys(
            fact.test_index for fact in self._facts if fact.line_index == line_idx
        )
        return [self._tests[handle] for handle in test_handles]
