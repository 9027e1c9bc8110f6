"""File-level coverage metrics computed from line records.

Counting rules:

- stmt: one statement, covered when count > 0
- method: one method, covered when count > 0
- cond: two conditional slots, one covered slot when truecount > 0
  (falsecount is not consulted)

elements and covered_elements are the sums of the three categories.
Package and project metrics are never rolled up from files; whatever the
report carried in its ``<metrics>`` elements is kept on the tree as-is.
"""

from __future__ import annotations

from dataclasses import dataclass

from covtrace.coverage.models import (
    ClassMetrics,
    CoverageKind,
    FileCoverage,
    FileMetrics,
    ProjectCoverage,
)


def compute_file_metrics(file: FileCoverage) -> FileMetrics:
    """Compute statement, method and conditional counts for one file."""
    statements = covered_statements = 0
    methods = covered_methods = 0
    conditionals = covered_conditionals = 0

    for line in file.lines:
        if line.kind is CoverageKind.STMT:
            statements += 1
            covered_statements += line.count > 0
        elif line.kind is CoverageKind.METHOD:
            methods += 1
            covered_methods += line.count > 0
        else:
            conditionals += 2
            covered_conditionals += line.true_count > 0

    return FileMetrics(
        classes=len(file.classes),
        metrics=ClassMetrics(
            elements=statements + methods + conditionals,
            covered_elements=covered_statements + covered_methods + covered_conditionals,
            statements=statements,
            covered_statements=covered_statements,
            conditionals=conditionals,
            covered_conditionals=covered_conditionals,
            methods=methods,
            covered_methods=covered_methods,
        ),
    )


def find_files(project: ProjectCoverage, path: str) -> list[FileCoverage]:
    """Files whose path equals the given path, in report order."""
    return [f for f in project.files if f.path == path]


def file_metrics_for_path(project: ProjectCoverage, path: str) -> list[FileMetrics]:
    """Computed metrics of every file in the project listed under path."""
    return [compute_file_metrics(f) for f in find_files(project, path)]


@dataclass(frozen=True, slots=True)
class PathMetrics:
    """Computed metrics of one file, labelled with its path."""

    path: str
    metrics: FileMetrics


def collect_file_metrics(project: ProjectCoverage, path: str | None = None) -> list[PathMetrics]:
    """Computed metrics for every file, or only the files listed under path."""
    files = project.files if path is None else find_files(project, path)
    return [PathMetrics(path=f.path, metrics=compute_file_metrics(f)) for f in files]
