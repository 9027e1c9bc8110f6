"""XML ingest adapter.

Turns a report file (or raw bytes) into an ``xml.etree`` element tree and
provides the lenient attribute readers every parser shares:

- missing or unparseable numeric attributes read as 0
- negative numbers read as 0 (counts and line numbers are unsigned)
- missing string attributes read as ""
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from covtrace.core.errors import ReportError

ReportSource = Path | str | bytes


def describe_source(source: ReportSource) -> str:
    """Human-readable name of a report source for diagnostics."""
    if isinstance(source, bytes):
        return "<bytes>"
    return str(source)


def load_xml(source: ReportSource) -> ET.Element:
    """Parse a report into its root element.

    Args:
        source: Path to an XML file, or the raw XML bytes.

    Raises:
        ReportError: MALFORMED_INPUT if the file cannot be read or the
            content is not well-formed XML.
    """
    name = describe_source(source)
    try:
        if isinstance(source, bytes):
            return ET.fromstring(source)
        return ET.parse(source).getroot()
    except ET.ParseError as e:
        raise ReportError.malformed_input(name, str(e)) from e
    except OSError as e:
        raise ReportError.malformed_input(name, e.strerror or str(e)) from e


def attr_str(node: ET.Element, name: str) -> str:
    return node.get(name, "")


def attr_int(node: ET.Element, name: str) -> int:
    raw = node.get(name)
    if raw is None:
        return 0
    try:
        value = int(raw.strip())
    except ValueError:
        return 0
    return max(value, 0)


def node_text(node: ET.Element) -> str:
    """Text content directly inside the node, or ""."""
    return node.text or ""
