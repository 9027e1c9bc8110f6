"""Clover coverage parsing, indexing, and metrics.

This package provides:
- A hierarchical tree builder for single-report point queries
- A normalizing index store that deduplicates files, tests and lines
- File-level metrics computed from line records

Usage:
    from covtrace.coverage import CoverageIndex, TestIdentity, parse_clover

    report = parse_clover(Path("build/clover.xml"))
    metrics = compute_file_metrics(report.project.files[0])

    index = CoverageIndex()
    index.ingest_report(TestIdentity("tests/test_api.py", "test_get"), Path("build/clover.xml"))
"""

from covtrace.coverage.builder import CloverParser, parse_clover, parse_line_record
from covtrace.coverage.index import (
    Arena,
    CoverageIndex,
    IndexSummary,
    IngestResult,
    ResolvedFact,
    has_signal,
)
from covtrace.coverage.metrics import (
    PathMetrics,
    collect_file_metrics,
    compute_file_metrics,
    file_metrics_for_path,
    find_files,
)
from covtrace.coverage.models import (
    ClassCoverage,
    ClassMetrics,
    CloverReport,
    CoverageFact,
    CoverageInfo,
    CoverageKind,
    FileCoverage,
    FileMetrics,
    LineKey,
    LineRecord,
    PackageCoverage,
    PackageMetrics,
    ProjectCoverage,
    ProjectMetrics,
    TestIdentity,
)

__all__ = [
    # Models
    "ClassCoverage",
    "ClassMetrics",
    "CloverReport",
    "CoverageFact",
    "CoverageInfo",
    "CoverageKind",
    "FileCoverage",
    "FileMetrics",
    "LineKey",
    "LineRecord",
    "PackageCoverage",
    "PackageMetrics",
    "ProjectCoverage",
    "ProjectMetrics",
    "TestIdentity",
    # Builder
    "CloverParser",
    "parse_clover",
    "parse_line_record",
    # Index
    "Arena",
    "CoverageIndex",
    "IndexSummary",
    "IngestResult",
    "ResolvedFact",
    "has_signal",
    # Metrics
    "PathMetrics",
    "collect_file_metrics",
    "compute_file_metrics",
    "file_metrics_for_path",
    "find_files",
]
