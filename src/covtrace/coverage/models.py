"""Coverage data model.

Two views of the same report data:

- The hierarchical tree (ProjectCoverage → PackageCoverage → FileCoverage →
  ClassCoverage / LineRecord) mirrors one Clover report one-to-one and keeps
  every line. It is immutable and rebuilt per input file.
- The normalized facts (TestIdentity, LineKey, CoverageFact) are what the
  index store keeps; they refer to each other through integer handles only.

Metrics found in a report's ``<metrics>`` elements are kept verbatim on the
tree nodes. Only file metrics are ever recomputed (see metrics.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from covtrace.core.errors import ReportError


class CoverageKind(str, Enum):
    """Line classification, named after the Clover ``type`` attribute."""

    STMT = "stmt"
    METHOD = "method"
    COND = "cond"


@dataclass(frozen=True, slots=True)
class CoverageInfo:
    """Execution counts recorded for one line."""

    kind: CoverageKind = CoverageKind.STMT
    count: int = 0
    true_count: int = 0
    false_count: int = 0


@dataclass(frozen=True, slots=True)
class LineRecord:
    """One ``<line>`` of a Clover file, kept whatever its counts."""

    num: int
    kind: CoverageKind
    count: int = 0
    true_count: int = 0
    false_count: int = 0

    @property
    def info(self) -> CoverageInfo:
        return CoverageInfo(self.kind, self.count, self.true_count, self.false_count)


@dataclass(frozen=True, slots=True)
class ClassMetrics:
    """Coverage counts at class scope (also the payload of every wider scope)."""

    elements: int = 0
    covered_elements: int = 0
    statements: int = 0
    covered_statements: int = 0
    conditionals: int = 0
    covered_conditionals: int = 0
    methods: int = 0
    covered_methods: int = 0
    complexity: int = 0
    loc: int = 0
    ncloc: int = 0


@dataclass(frozen=True, slots=True)
class FileMetrics:
    classes: int = 0
    metrics: ClassMetrics = field(default_factory=ClassMetrics)


@dataclass(frozen=True, slots=True)
class PackageMetrics:
    files: int = 0
    metrics: FileMetrics = field(default_factory=FileMetrics)


@dataclass(frozen=True, slots=True)
class ProjectMetrics:
    packages: int = 0
    metrics: PackageMetrics = field(default_factory=PackageMetrics)


@dataclass(frozen=True, slots=True)
class ClassCoverage:
    name: str
    metrics: ClassMetrics | None = None


@dataclass(frozen=True, slots=True)
class FileCoverage:
    """Coverage for one source file as listed in the report."""

    path: str
    name: str = ""
    classes: tuple[ClassCoverage, ...] = ()
    lines: tuple[LineRecord, ...] = ()
    metrics: FileMetrics | None = None


@dataclass(frozen=True, slots=True)
class PackageCoverage:
    name: str
    files: tuple[FileCoverage, ...] = ()
    metrics: PackageMetrics | None = None


@dataclass(frozen=True, slots=True)
class ProjectCoverage:
    name: str = ""
    timestamp: str = ""
    packages: tuple[PackageCoverage, ...] = ()
    metrics: ProjectMetrics | None = None

    @property
    def files(self) -> tuple[FileCoverage, ...]:
        """All files across packages, in report order."""
        return tuple(f for package in self.packages for f in package.files)


@dataclass(frozen=True, slots=True)
class CloverReport:
    """Result of building the tree for one report.

    ``diagnostics`` holds the recoverable errors (lines with an unexpected
    coverage type) that were skipped while building.
    """

    project: ProjectCoverage
    diagnostics: tuple[ReportError, ...] = ()


# Normalized fact model ---------------------------------------------------


@dataclass(frozen=True, slots=True)
class TestIdentity:
    """A test point: the test file plus the test name within it."""

    __test__ = False  # not a pytest class

    file: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class LineKey:
    file_index: int
    num: int


@dataclass(frozen=True, slots=True)
class CoverageFact:
    test_index: int
    line_index: int
    info: CoverageInfo
